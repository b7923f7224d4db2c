"""Route collector — the loader's single sink for diagnostics.

Each ``record_*`` method writes a structured event to the ``EventLog`` and
emits the matching ``prowl.routes`` log line, so the terminal and the
event log always agree.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prowl.observability.events import (
    BindingSkipped,
    RestartRequired,
    RouteLoaded,
    RouteLoadFailed,
    RouteReloaded,
    RouteRemoved,
    now_ns,
)
from prowl.observability.log import EventLog

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger("prowl.routes")


class RouteCollector:
    """Records route lifecycle events.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Load events -----

    def record_loaded(
        self,
        path: Path,
        url_path: str,
        methods: tuple[str, ...],
        *,
        load_ms: float = 0.0,
    ) -> None:
        logger.info("Loaded: %s -> %s %s", path, ",".join(methods), url_path)
        self._log.append(
            RouteLoaded(
                path=str(path),
                url_path=url_path,
                methods=methods,
                load_ms=load_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_missing_handler(self, path: Path, *, reload: bool = False) -> None:
        logger.warning("Route file missing handler: %s", path)
        self._log.append(
            RouteLoadFailed(
                path=str(path),
                reason="missing_handler",
                detail=f"Route file missing handler: {path}",
                reload=reload,
                timestamp_ns=now_ns(),
            )
        )

    def record_load_error(
        self, path: Path, detail: str, *, reload: bool = False,
    ) -> None:
        """Record a module that raised while loading (logged at error level)."""
        if reload:
            logger.error("Failed to reload route %s: %s", path, detail)
        else:
            logger.error("Failed to load %s: %s", path, detail)
        self._log.append(
            RouteLoadFailed(
                path=str(path),
                reason="load_error",
                detail=detail,
                reload=reload,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Hot reload events -----

    def record_reloaded(
        self,
        path: Path,
        url_path: str,
        methods: tuple[str, ...],
        *,
        load_ms: float = 0.0,
    ) -> None:
        logger.info("Route reloaded: %s %s", ",".join(methods), url_path)
        self._log.append(
            RouteReloaded(
                path=str(path),
                url_path=url_path,
                methods=methods,
                load_ms=load_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_removed(self, path: Path, url_path: str) -> None:
        logger.info("Route removed: %s (now answers 404)", url_path)
        self._log.append(
            RouteRemoved(path=str(path), url_path=url_path, timestamp_ns=now_ns())
        )

    def record_restart_required(
        self,
        path: Path,
        url_path: str,
        *,
        reason: str = "new_file",
    ) -> None:
        """Record a route the running server cannot bind (restart to apply)."""
        if reason == "new_file":
            logger.warning("New route file detected: %s (restart to apply)", path)
        else:
            logger.warning(
                "Route %s declares a method that is not bound: %s (restart to apply)",
                url_path,
                path,
            )
        self._log.append(
            RestartRequired(
                path=str(path),
                url_path=url_path,
                reason=reason,  # type: ignore[arg-type]
                timestamp_ns=now_ns(),
            )
        )

    # ----- Registration events -----

    def record_binding_skipped(
        self,
        path: Path,
        method: str,
        url_path: str,
        *,
        bound_by: Path,
    ) -> None:
        logger.debug(
            "Skipping %s %s from %s: already bound by %s",
            method,
            url_path,
            path,
            bound_by,
        )
        self._log.append(
            BindingSkipped(
                path=str(path),
                method=method,
                url_path=url_path,
                bound_by=str(bound_by),
                timestamp_ns=now_ns(),
            )
        )

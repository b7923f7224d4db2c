"""File watcher — reports route file changes for hot reload.

Wraps ``watchfiles.awatch`` so the subscription lives on the same event
loop that serves requests.  watchfiles only reports changes made after the
subscription starts; files that already exist produce no events.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import Change, awatch

from prowl._types import ChangeKind

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger("prowl.watcher")


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.

    """

    path: Path
    kind: ChangeKind


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, ChangeKind] = {
    Change.added: "added",
    Change.modified: "changed",
    Change.deleted: "removed",
}

# A delete and re-create of one path in the same batch (atomic saves)
# must be applied in that order.
_CHANGE_ORDER: dict[Change, int] = {
    Change.deleted: 0,
    Change.added: 1,
    Change.modified: 2,
}


class RouteWatcher:
    """Watches a routes directory and yields ChangeEvents.

    Events inside one watchfiles batch are yielded in path order.  There
    is no coalescing beyond watchfiles' own debounce window, so two quick
    saves may arrive as two ``changed`` events.

    Args:
        routes_dir: Directory to watch recursively.
        debounce_ms: watchfiles debounce window.
        step_ms: watchfiles polling step while collecting a batch.

    """

    def __init__(
        self,
        routes_dir: Path,
        *,
        debounce_ms: int = 300,
        step_ms: int = 50,
    ) -> None:
        self._routes_dir = routes_dir
        self._debounce_ms = debounce_ms
        self._step_ms = step_ms
        self._stop_event = asyncio.Event()

    @property
    def routes_dir(self) -> Path:
        return self._routes_dir

    @property
    def is_stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Signal the subscription to close; ``changes()`` then ends."""
        self._stop_event.set()

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Async iterator over change events until ``stop()`` is called."""
        if not self._routes_dir.is_dir():
            logger.warning("Not watching %s: directory does not exist", self._routes_dir)
            return

        logger.info("Watching routes: %s", self._routes_dir)
        async for raw_changes in awatch(
            self._routes_dir,
            stop_event=self._stop_event,
            debounce=self._debounce_ms,
            step=self._step_ms,
        ):
            for change_type, path_str in sorted(
                raw_changes, key=lambda c: (c[1], _CHANGE_ORDER.get(c[0], 2)),
            ):
                kind = _CHANGE_KIND_MAP.get(change_type, "changed")
                yield ChangeEvent(path=Path(path_str), kind=kind)

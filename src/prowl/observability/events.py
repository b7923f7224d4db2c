"""Route lifecycle events.

Every diagnostic the loader produces is also recorded as an event so that
tools (and tests) can inspect what happened without scraping log output.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- ``path``: The route source file the event concerns

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Load events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RouteLoaded:
    """A route file was loaded at startup.

    Attributes:
        path: Route source file.
        url_path: Derived URL path.
        methods: HTTP methods the module declared.
        load_ms: Time spent compiling and executing the module.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    url_path: str
    methods: tuple[str, ...]
    load_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RouteLoadFailed:
    """A route file contributed no route.

    Attributes:
        path: Route source file.
        reason: ``missing_handler`` or ``load_error``.
        detail: Human-readable failure message.
        reload: True if the failure happened during a hot reload.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    reason: Literal["missing_handler", "load_error"]
    detail: str
    reload: bool
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Hot reload events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RouteReloaded:
    """A changed route file replaced its descriptor in place."""

    path: str
    url_path: str
    methods: tuple[str, ...]
    load_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RouteRemoved:
    """A deleted route file's descriptor left the registry.

    The host binding remains and now answers "not found".
    """

    path: str
    url_path: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RestartRequired:
    """A route exists on disk that the running host cannot serve.

    Attributes:
        path: Route source file.
        url_path: URL the route would be served at.
        reason: ``new_file`` for an added file, ``unbound_method`` when a
            reload declared a method that was never bound.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    url_path: str
    reason: Literal["new_file", "unbound_method"]
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Registration events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BindingSkipped:
    """A (method, url) pair was already bound by another file.

    Attributes:
        path: The losing route file.
        method: HTTP method of the skipped binding.
        url_path: URL of the skipped binding.
        bound_by: The file that was bound first.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    method: str
    url_path: str
    bound_by: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type RouteEvent = (
    RouteLoaded
    | RouteLoadFailed
    | RouteReloaded
    | RouteRemoved
    | RestartRequired
    | BindingSkipped
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()

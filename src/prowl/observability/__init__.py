"""Route observability — structured diagnostics for the loader.

Every scan, load, reload, removal, and skipped binding is recorded as a
frozen event in a bounded ``EventLog`` and echoed to the ``prowl.routes``
logger.

Quick Start:
    >>> from prowl.observability import EventLog, RouteCollector
    >>> log = EventLog()
    >>> collector = RouteCollector(log)
    >>> # Pass collector to RouteLoader(collector=...)

"""

from prowl.observability.collector import RouteCollector
from prowl.observability.events import (
    BindingSkipped,
    RestartRequired,
    RouteEvent,
    RouteLoaded,
    RouteLoadFailed,
    RouteReloaded,
    RouteRemoved,
    now_ns,
)
from prowl.observability.log import EventLog

__all__ = [
    "BindingSkipped",
    "EventLog",
    "RestartRequired",
    "RouteCollector",
    "RouteEvent",
    "RouteLoadFailed",
    "RouteLoaded",
    "RouteReloaded",
    "RouteRemoved",
    "now_ns",
]

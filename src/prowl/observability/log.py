"""Event log — bounded, thread-safe store of route events.

Loads run in worker threads and reloads on the event loop, so every
access goes through one ``threading.Lock``.
"""

import threading
from collections import Counter, deque
from itertools import islice
from typing import Any

from prowl.observability.events import RouteEvent


class EventLog:
    """Keeps the most recent *max_events* route events.

    Args:
        max_events: Capacity; older events are dropped first.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[RouteEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: RouteEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        path: str | None = None,
        limit: int = 100,
    ) -> list[RouteEvent]:
        """Matching events, newest first.

        *path* matches any event whose source path contains it.
        """
        with self._lock:
            snapshot = list(self._events)
        matches = (
            e for e in reversed(snapshot)
            if (event_type is None or isinstance(e, event_type))
            and (path is None or path in e.path)
        )
        return list(islice(matches, limit))

    def stats(self) -> dict[str, Any]:
        """Event counts: ``{"total": n, "by_type": {"RouteLoaded": k, ...}}``."""
        with self._lock:
            counts = Counter(type(e).__name__ for e in self._events)
        return {"total": sum(counts.values()), "by_type": dict(counts)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

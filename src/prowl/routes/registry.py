"""Route registry — the single source of truth consulted at request time.

Maps each route source file to its current RouteDescriptor.  Reloads
replace the value under the same key; deletions remove it.  Dispatch stubs
read from here on every request, so a swap is visible to the next request.

Thread Safety:
    All methods are protected by a ``threading.Lock``.  Pounce may run
    chirp workers as parallel threads, so reads during dispatch and writes
    from the watcher must not interleave.

"""

import threading
from collections.abc import Iterator
from pathlib import Path

from prowl.routes.loader import RouteDescriptor


class RouteRegistry:
    """In-memory mapping from file path to route descriptor."""

    __slots__ = ("_lock", "_routes")

    def __init__(self) -> None:
        self._routes: dict[Path, RouteDescriptor] = {}
        self._lock = threading.Lock()

    def put(self, file_path: Path, descriptor: RouteDescriptor) -> RouteDescriptor | None:
        """Insert or replace the descriptor for *file_path*.

        Returns the descriptor it replaced, if any.
        """
        with self._lock:
            previous = self._routes.get(file_path)
            self._routes[file_path] = descriptor
            return previous

    def get(self, file_path: Path) -> RouteDescriptor | None:
        with self._lock:
            return self._routes.get(file_path)

    def remove(self, file_path: Path) -> RouteDescriptor | None:
        """Drop the descriptor for *file_path* and return it (None if absent)."""
        with self._lock:
            return self._routes.pop(file_path, None)

    def __contains__(self, file_path: object) -> bool:
        with self._lock:
            return file_path in self._routes

    def __len__(self) -> int:
        with self._lock:
            return len(self._routes)

    def __iter__(self) -> Iterator[RouteDescriptor]:
        """Iterate over a snapshot of the descriptors, once per key."""
        with self._lock:
            snapshot = list(self._routes.values())
        return iter(snapshot)

"""Demo API — users, a key-value cache, and an uptime probe.

Run with::

    python examples/demo/app.py

then edit any file under ``routes/`` and re-request it.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

import prowl


@dataclass(slots=True)
class MemoryCache:
    """In-process key-value store with optional per-key TTL."""

    _values: dict[str, tuple[str, float | None]] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        entry = self._values.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            del self._values[key]
            return None
        return value

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = time.monotonic() + ttl if ttl else None
        self._values[key] = (value, expires_at)

    def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in list(self._values) if k.startswith(prefix) and self.get(k) is not None)


@dataclass(slots=True)
class DemoState:
    """Everything the demo handlers read; owned by the app, not by route modules."""

    users: dict[int, dict[str, object]]
    cache: MemoryCache = field(default_factory=MemoryCache)
    started_at: float = field(default_factory=time.monotonic)

    @classmethod
    def default(cls) -> DemoState:
        return cls(users={
            1: {"id": 1, "name": "Alice"},
            2: {"id": 2, "name": "Bob"},
        })


if __name__ == "__main__":
    prowl.dev(Path(__file__).parent, state=DemoState.default())

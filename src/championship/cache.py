"""Time-bounded in-memory cache with an injectable clock.

Used for team search results, which the dashboard re-issues on every
keystroke. The clock is injected so expiry is testable without sleeping.
"""

import time
from typing import Any, Callable, Hashable


class TimedCache:
    """Map keys to values that expire ``ttl`` seconds after being set.

    Usage::

        cache = TimedCache(ttl=300)
        cache.set("navi", results)
        cache.get("navi")  # results, until 300s have passed
    """

    def __init__(
        self,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the cached value, or ``default`` if absent or expired.

        Expired entries are evicted on read.
        """
        entry = self._entries.get(key)
        if entry is None:
            return default
        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl:
            del self._entries[key]
            return default
        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

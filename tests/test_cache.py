"""Unit tests for the time-bounded cache with an injected clock."""

import pytest

from championship.cache import TimedCache


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestTimedCache:
    """Tests for TimedCache."""

    def test_get_before_expiry(self):
        """A value is returned while younger than ttl."""
        clock = FakeClock()
        cache = TimedCache(ttl=300, clock=clock)
        cache.set("navi", ["result"])
        clock.now += 299
        assert cache.get("navi") == ["result"]

    def test_expires_at_ttl(self):
        """At exactly ttl seconds the entry is gone and evicted."""
        clock = FakeClock()
        cache = TimedCache(ttl=300, clock=clock)
        cache.set("navi", ["result"])
        clock.now += 300
        assert cache.get("navi") is None
        assert len(cache) == 0

    def test_missing_key_returns_default(self):
        """Unknown keys return the given default."""
        cache = TimedCache(ttl=10, clock=FakeClock())
        assert cache.get("nope", default=[]) == []

    def test_set_refreshes_timestamp(self):
        """Re-setting a key restarts its lifetime."""
        clock = FakeClock()
        cache = TimedCache(ttl=10, clock=clock)
        cache.set("k", 1)
        clock.now += 8
        cache.set("k", 2)
        clock.now += 8
        assert cache.get("k") == 2

    def test_invalidate_and_clear(self):
        """invalidate() drops one key, clear() drops all."""
        cache = TimedCache(ttl=10, clock=FakeClock())
        cache.set("a", 1)
        cache.set("b", 2)
        cache.invalidate("a")
        cache.invalidate("missing")
        assert cache.get("a") is None
        assert len(cache) == 1
        cache.clear()
        assert len(cache) == 0

    def test_non_positive_ttl_rejected(self):
        """ttl must be positive."""
        with pytest.raises(ValueError, match="ttl"):
            TimedCache(ttl=0)

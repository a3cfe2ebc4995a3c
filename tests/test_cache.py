"""
tests/test_cache.py
===================

Unit tests for visatrack.cache with a fake clock.
"""

from visatrack.cache import NullCache, TTLCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_get_before_and_after_expiry():
    clock = FakeClock()
    cache = TTLCache(default_ttl=60, clock=clock)
    cache.set("k", {"total": 3})
    clock.now += 59
    assert cache.get("k") == {"total": 3}
    clock.now += 2
    assert cache.get("k") is None
    assert len(cache) == 0


def test_per_entry_ttl_and_gc():
    clock = FakeClock()
    cache = TTLCache(default_ttl=300, clock=clock)
    cache.set("short", 1, ttl=5)
    cache.set("long", 2)
    clock.now += 10
    assert cache.gc() == 1
    assert cache.get("long") == 2


def test_delete_and_clear():
    cache = TTLCache()
    cache.set("a", 1)
    cache.set("b", 2)
    cache.delete("a")
    cache.delete("missing")
    assert cache.get("a") is None
    cache.clear()
    assert len(cache) == 0


def test_null_cache_stores_nothing():
    cache = NullCache()
    cache.set("a", 1)
    assert cache.get("a") is None
    assert len(cache) == 0


def test_expired_entry_removed_concurrently():
    """Another caller may evict the stale key between the lookup and the removal."""
    cache = TTLCache(default_ttl=60, clock=FakeClock())
    cache.set("k", 1)

    def clock_that_races():
        cache._entries.pop("k", None)
        return 2000.0

    cache._clock = clock_that_races
    assert cache.get("k") is None
    assert len(cache) == 0

"""Tests for the query result cache."""

from advocate_directory.services.cache import QueryCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_get_returns_stored_value() -> None:
    cache = QueryCache(ttl_seconds=10)
    cache.set(("anxiety", 1), "page")
    assert cache.get(("anxiety", 1)) == "page"
    assert cache.get(("anxiety", 2)) is None


def test_entries_expire_after_ttl() -> None:
    clock = FakeClock()
    cache = QueryCache(ttl_seconds=10, clock=clock)
    cache.set("key", "value")
    clock.now = 9.9
    assert cache.get("key") == "value"
    clock.now = 10.0
    assert cache.get("key") is None
    assert len(cache) == 0


def test_per_entry_ttl_overrides_default() -> None:
    clock = FakeClock()
    cache = QueryCache(ttl_seconds=10, clock=clock)
    cache.set("short", 1, ttl_seconds=1)
    cache.set("long", 2)
    clock.now = 5
    assert cache.get("short") is None
    assert cache.get("long") == 2


def test_least_recently_used_entry_is_evicted() -> None:
    cache = QueryCache(max_entries=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)
    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3


def test_stats_and_clear() -> None:
    clock = FakeClock()
    cache = QueryCache(ttl_seconds=10, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2, ttl_seconds=1)
    cache.get("a")
    cache.get("missing")
    clock.now = 2
    stats = cache.stats()
    assert stats == {
        "entries": 2,
        "expiredEntries": 1,
        "hits": 1,
        "misses": 1,
        "hitRate": 50.0,
    }

    cache.clear()
    assert len(cache) == 0
    assert cache.stats()["hits"] == 0
    assert cache.stats()["hitRate"] == 0.0

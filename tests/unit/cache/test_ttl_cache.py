"""Unit tests for the in-memory TTL cache."""

from infrastructure.cache.ttl_cache import TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    def test_hit_before_expiry(self) -> None:
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        cache.set("cf:tourist", "profile", ttl_seconds=300)
        clock.now += 299

        assert cache.get("cf:tourist") == "profile"

    def test_miss_after_expiry(self) -> None:
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        cache.set("cf:tourist", "profile", ttl_seconds=300)
        clock.now += 300

        assert cache.get("cf:tourist") is None
        assert len(cache) == 0

    def test_non_positive_ttl_removes_entry(self) -> None:
        cache = TTLCache(clock=FakeClock())
        cache.set("key", 1, ttl_seconds=60)
        cache.set("key", 2, ttl_seconds=0)

        assert cache.get("key") is None

    def test_evicts_oldest_when_full(self) -> None:
        cache = TTLCache(clock=FakeClock(), max_entries=2)
        cache.set("a", 1, 60)
        cache.set("b", 2, 60)
        cache.set("c", 3, 60)

        assert cache.get("a") is None
        assert cache.get("b") == 2
        assert cache.get("c") == 3

    def test_purge_expired(self) -> None:
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        cache.set("short", 1, 10)
        cache.set("long", 2, 100)
        clock.now += 50

        assert cache.purge_expired() == 1
        assert len(cache) == 1

    def test_clear(self) -> None:
        cache = TTLCache(clock=FakeClock())
        cache.set("a", 1, 60)
        cache.clear()

        assert len(cache) == 0

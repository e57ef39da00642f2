"""Unit tests for the :mod:`pitchside.utils.cache` module."""
import pytest

from pitchside.utils import cache as cache_module
from pitchside.utils.cache import CacheStore, CacheTag


@pytest.fixture
def clock(monkeypatch):
    """Controllable replacement for ``time.time`` inside the cache module."""

    class Clock:
        now = 100.0

    def fake_time():
        return Clock.now

    monkeypatch.setattr(cache_module.time, "time", fake_time)
    return Clock


def test_entries_expire_after_ttl(clock):
    """Expired entries read as absent."""
    cache = CacheStore(ttl=420)

    cache.set(CacheTag.ROOM_LINK, {"room_link": "https://example.com"})
    assert cache.get(CacheTag.ROOM_LINK) == {"room_link": "https://example.com"}

    clock.now = 100.0 + 419.9
    assert cache.has(CacheTag.ROOM_LINK)

    clock.now = 100.0 + 420
    assert cache.get(CacheTag.ROOM_LINK) is None
    assert not cache.has(CacheTag.ROOM_LINK)


def test_get_returns_default_on_miss(clock):
    cache = CacheStore(ttl=60)

    assert cache.get(CacheTag.PROFILES, {}) == {}
    assert cache.get_item(CacheTag.PROFILES, "someone", "fallback") == "fallback"


def test_has_is_true_for_falsy_values(clock):
    """An empty snapshot is still a cached value."""
    cache = CacheStore(ttl=60)
    cache.set(CacheTag.PROFILES, {})

    assert cache.has(CacheTag.PROFILES)
    assert cache.get(CacheTag.PROFILES) == {}


def test_in_place_patch_keeps_original_expiry(clock):
    """Mutating a cached map does not extend its lifetime."""
    cache = CacheStore(ttl=420)
    cache.set(CacheTag.VIP_STATUS, {"u1": "old"})

    clock.now = 400.0
    cache.put_item(CacheTag.VIP_STATUS, "u1", "new")
    assert cache.get_item(CacheTag.VIP_STATUS, "u1") == "new"

    clock.now = 100.0 + 420
    assert cache.get(CacheTag.VIP_STATUS) is None


def test_put_item_creates_map_when_absent(clock):
    cache = CacheStore(ttl=420)

    cache.put_item(CacheTag.PROFILES, "u1", {"wins": 1})

    assert cache.get(CacheTag.PROFILES) == {"u1": {"wins": 1}}


def test_set_restarts_lifetime(clock):
    cache = CacheStore(ttl=10)
    cache.set(CacheTag.RANKINGS, {1: "page"})

    clock.now = 105.0
    cache.set(CacheTag.RANKINGS, {1: "newer page"})

    clock.now = 112.0
    assert cache.get_item(CacheTag.RANKINGS, 1) == "newer page"


def test_sweep_drops_expired_entries(clock):
    cache = CacheStore(ttl=5)
    cache.set(CacheTag.ROOM_LINK, {"room_link": "x"})
    cache.set("custom", "value")

    clock.now = 1000.0
    cache.get(CacheTag.PROFILES)

    assert cache.stats() == {}
    assert cache._cache == {}


def test_stats_and_clear(clock):
    cache = CacheStore(ttl=420)
    cache.set(CacheTag.ROOM_LINK, {"room_link": "x"})

    clock.now = 120.0
    assert cache.stats() == {"room_link": 400.0}

    cache.clear()
    assert cache.stats() == {}

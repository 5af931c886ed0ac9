"""Tests for cache module."""
import pytest

from fxbias.cache import TTLCache
from fxbias.utils.errors import CacheError


def test_cache_set_get(cache):
    """Test basic set and get."""
    cache.set("key1", "value1")
    assert cache.get("key1") == "value1"
    assert "key1" in cache
    assert len(cache) == 1


def test_cache_miss_returns_none(cache):
    assert cache.get("missing") is None


def test_cache_expiration_evicts_on_read(cache, clock):
    """Entries older than the TTL are dropped when read."""
    cache.set("key1", "value1")
    clock.advance(30 * 60 - 1)
    assert cache.get("key1") == "value1"

    clock.advance(1)
    assert cache.get("key1") is None
    assert "key1" not in cache


def test_cache_set_refreshes_timestamp(cache, clock):
    cache.set("key1", "old")
    clock.advance(20 * 60)
    cache.set("key1", "new")
    clock.advance(20 * 60)
    assert cache.get("key1") == "new"


def test_cache_delete(cache):
    """Test delete."""
    cache.set("key1", "value1")
    cache.delete("key1")
    cache.delete("never-set")
    assert cache.get("key1") is None


def test_cache_clear(cache):
    """Test clear all."""
    cache.set("key1", "value1")
    cache.set("key2", "value2")
    cache.clear()
    assert cache.get("key1") is None
    assert cache.get("key2") is None


def test_cache_cleanup_expired(clock):
    """Test cleanup of expired entries."""
    cache = TTLCache(ttl_seconds=10, clock=clock)
    cache.set("key1", "value1")
    clock.advance(5)
    cache.set("key2", "value2")
    clock.advance(6)

    count = cache.cleanup_expired()
    assert count == 1
    assert cache.get("key1") is None
    assert cache.get("key2") == "value2"


def test_cache_stats(clock):
    cache = TTLCache(ttl_seconds=10, clock=clock)
    cache.set("a", 1)
    clock.advance(11)
    cache.set("b", 2)
    assert cache.stats() == {"total_entries": 2, "active_entries": 1, "expired_entries": 1}


def test_create_key_is_deterministic_and_order_independent():
    k1 = TTLCache.create_key("indicator", {"currency": "USD", "indicator": "CPI"})
    k2 = TTLCache.create_key("indicator", {"indicator": "CPI", "currency": "USD"})
    assert k1 == k2
    prefix, _, digest = k1.partition(":")
    assert prefix == "indicator"
    assert digest.isdigit()


def test_create_key_distinguishes_payloads():
    usd = TTLCache.create_key("indicator", {"currency": "USD", "indicator": "CPI"})
    eur = TTLCache.create_key("indicator", {"currency": "EUR", "indicator": "CPI"})
    other_prefix = TTLCache.create_key("market", {"currency": "USD", "indicator": "CPI"})
    assert usd != eur
    assert usd.split(":")[1] == other_prefix.split(":")[1]
    assert usd != other_prefix


def test_create_key_rejects_unserializable_payload():
    with pytest.raises(CacheError):
        TTLCache.create_key("bad", {"value": object()})
    with pytest.raises(CacheError):
        TTLCache.create_key("bad", {"value": float("nan")})

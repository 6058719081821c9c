"""Unit tests for the SRV cache module."""
import time
import pytest
from unittest.mock import patch
from srv_http_agent.cache import SrvCache
from srv_http_agent.records import ServiceRecord

RECORDS = [
    ServiceRecord(target="web1.example.com", port=8080, priority=10, weight=5),
    ServiceRecord(target="web2.example.com", port=8080, priority=20, weight=5),
]


class TestSrvCache:
    """Tests for the SrvCache class."""

    def test_cache_initialization(self):
        """Test that cache initializes correctly."""
        cache = SrvCache(ttl=30)
        assert cache._cache == {}
        assert cache.ttl == 30
        assert len(cache) == 0

    def test_negative_ttl_rejected(self):
        """Test that a negative TTL is refused."""
        with pytest.raises(ValueError):
            SrvCache(ttl=-1)

    @patch('srv_http_agent.cache.CACHE_ENABLED', True)
    def test_set_and_get_fresh_entry(self):
        """Test setting and getting a fresh entry."""
        cache = SrvCache(ttl=600)
        cache.set("_http._tcp.example.com", RECORDS)

        assert cache.get("_http._tcp.example.com") == RECORDS

    @patch('srv_http_agent.cache.CACHE_ENABLED', True)
    def test_empty_result_is_cached(self):
        """Test that a successful empty answer is a cache hit."""
        cache = SrvCache(ttl=600)
        cache.set("_http._tcp.empty.example.com", [])

        assert cache.get("_http._tcp.empty.example.com") == []

    @patch('srv_http_agent.cache.CACHE_ENABLED', True)
    def test_get_stale_entry(self):
        """Test that entries older than the TTL are not returned."""
        cache = SrvCache(ttl=600)
        key = "_http._tcp.example.com"
        cache._cache[key] = (tuple(RECORDS), time.time() - 601)

        assert cache.get(key) is None
        # Stale entries are replaced on refresh, not evicted on read
        assert key in cache._cache

    @patch('srv_http_agent.cache.CACHE_ENABLED', True)
    def test_get_nonexistent_entry(self):
        """Test getting a non-existent entry returns None."""
        cache = SrvCache()
        assert cache.get("_http._tcp.nonexistent.com") is None

    @patch('srv_http_agent.cache.CACHE_ENABLED', True)
    def test_set_replaces_entry(self):
        """Test that a refresh fully replaces the previous answer."""
        cache = SrvCache(ttl=600)
        key = "_http._tcp.example.com"
        cache.set(key, RECORDS)
        cache.set(key, RECORDS[:1])

        assert cache.get(key) == RECORDS[:1]
        assert len(cache) == 1

    @patch('srv_http_agent.cache.CACHE_ENABLED', True)
    def test_get_returns_copy(self):
        """Test that callers cannot modify cached answers."""
        cache = SrvCache(ttl=600)
        key = "_http._tcp.example.com"
        cache.set(key, RECORDS)

        cache.get(key).clear()
        assert cache.get(key) == RECORDS

    @patch('srv_http_agent.cache.CACHE_ENABLED', True)
    def test_zero_ttl_never_fresh(self):
        """Test that a TTL of zero disables hits."""
        cache = SrvCache(ttl=0)
        cache.set("_http._tcp.example.com", RECORDS)

        assert cache.get("_http._tcp.example.com") is None

    @patch('srv_http_agent.cache.CACHE_ENABLED', False)
    def test_cache_disabled_get(self):
        """Test that get returns None when caching is disabled."""
        cache = SrvCache()
        cache._cache["_http._tcp.example.com"] = (tuple(RECORDS), time.time())

        assert cache.get("_http._tcp.example.com") is None

    @patch('srv_http_agent.cache.CACHE_ENABLED', False)
    def test_cache_disabled_set(self):
        """Test that set doesn't cache when caching is disabled."""
        cache = SrvCache()
        cache.set("_http._tcp.example.com", RECORDS)

        assert cache._cache == {}

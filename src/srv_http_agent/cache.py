"""SRV resolution cache with a fixed freshness interval."""
import time
from typing import List, Optional
from .config import logger, CACHE_ENABLED, CACHE_TTL
from .records import ServiceRecord


class SrvCache:
    """In-Memory cache of SRV answers keyed by query name."""

    def __init__(self, ttl: float = CACHE_TTL):
        if ttl < 0:
            raise ValueError("Cache TTL must not be negative")
        self.ttl = ttl
        self._cache = {}

    def get(self, key: str) -> Optional[List[ServiceRecord]]:
        """Return cached records for a name while they are still fresh."""
        if not CACHE_ENABLED:
            return None
        entry = self._cache.get(key)
        if entry:
            records, resolved_at = entry
            if time.time() - resolved_at < self.ttl:
                return list(records)
            logger.debug(f"Cache entry for {key} is stale")
        return None

    def set(self, key: str, records: List[ServiceRecord]):
        """Store a successful resolution, replacing any previous entry."""
        if not CACHE_ENABLED:
            return
        # Single assignment so concurrent readers see old or new, never a mix
        self._cache[key] = (tuple(records), time.time())

    def __len__(self):
        return len(self._cache)

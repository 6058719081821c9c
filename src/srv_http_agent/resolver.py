"""SRV resolver with optional result caching."""
import time
from typing import Awaitable, Callable, Iterable, List, Optional
from .cache import SrvCache
from .config import logger
from .errors import SrvLookupError
from .lookup import default_lookup
from .metrics import AgentMetrics
from .records import ServiceRecord

SrvLookup = Callable[[str], Awaitable[Iterable]]


def normalize_records(raw: Iterable) -> List[ServiceRecord]:
    """
    Turn lookup output into ServiceRecords.

    Accepts ServiceRecord instances or ``(priority, weight, port, target)``
    tuples. Entries with a root target (".") are dropped.
    """
    records = []
    for item in raw:
        if isinstance(item, ServiceRecord):
            records.append(item)
            continue
        priority, weight, port, target = item
        target = str(target).rstrip('.')
        if not target:
            continue
        records.append(ServiceRecord(target=target, port=port, priority=priority, weight=weight))
    return records


class SrvResolver:
    """
    Resolves SRV query names, remembering successful answers.

    Empty answers are cached like any other successful answer. Failures are
    never cached and never answered from a stale entry.
    """

    def __init__(
        self,
        lookup: Optional[SrvLookup] = None,
        cache: Optional[SrvCache] = None,
        metrics: Optional[AgentMetrics] = None,
    ):
        self.lookup = lookup or default_lookup()
        self.cache = cache
        self.metrics = metrics

    async def resolve(self, name: str) -> List[ServiceRecord]:
        """
        Resolve a query name to its SRV records.

        Args:
            name: Full query name, e.g. ``_http._tcp.example.com``

        Returns:
            The records, possibly empty

        Raises:
            SrvLookupError: If the lookup failed
        """
        if self.cache is not None:
            cached = self.cache.get(name)
            if cached is not None:
                logger.debug(f"[CACHE] {name} -> {len(cached)} record(s)")
                if self.metrics:
                    self.metrics.record_cache_hit()
                return cached

        start_time = time.time()
        try:
            records = normalize_records(await self.lookup(name))
        except SrvLookupError:
            if self.metrics:
                self.metrics.record_lookup_error()
            raise
        except (OSError, ValueError, TypeError) as e:
            if self.metrics:
                self.metrics.record_lookup_error()
            raise SrvLookupError(name, str(e)) from e

        if self.metrics:
            self.metrics.record_lookup(time.time() - start_time)
        logger.debug(f"[DNS] {name} -> {len(records)} record(s)")

        if self.cache is not None:
            self.cache.set(name, records)
        return records

    async def aclose(self):
        """Close the lookup if it holds resources."""
        close = getattr(self.lookup, 'aclose', None)
        if close is not None:
            await close()

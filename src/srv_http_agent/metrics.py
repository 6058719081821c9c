"""Counters describing how the agent routed its requests."""
import time
from dataclasses import dataclass, field
from typing import List
from .config import logger


@dataclass
class AgentMetrics:
    """Tracks SRV resolution and routing outcomes."""

    total_requests: int = 0
    redirected: int = 0
    fallbacks: int = 0
    lookup_errors: int = 0
    empty_results: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    lookup_times: List[float] = field(default_factory=list)
    last_log_time: float = field(default_factory=time.time)

    def record_cache_hit(self):
        """Record an answer served from the cache."""
        self.cache_hits += 1

    def record_lookup(self, lookup_time: float):
        """Record a query that went to DNS."""
        self.cache_misses += 1
        self.lookup_times.append(lookup_time)
        # Keep list bounded to last 1000 entries
        if len(self.lookup_times) > 1000:
            self.lookup_times = self.lookup_times[-1000:]

    def record_lookup_error(self):
        """Record a failed lookup."""
        self.lookup_errors += 1

    def record_redirect(self):
        """Record a request sent to an SRV target."""
        self.total_requests += 1
        self.redirected += 1

    def record_fallback(self, empty: bool = False):
        """Record a request sent to the caller's own target."""
        self.total_requests += 1
        self.fallbacks += 1
        if empty:
            self.empty_results += 1

    def get_mean_lookup_time(self) -> float:
        if not self.lookup_times:
            return 0.0
        return sum(self.lookup_times) / len(self.lookup_times)

    def log_stats(self):
        """Log routing statistics and reset the counters."""
        logger.info("=== SRV Agent Metrics ===")
        logger.info(
            f"Requests: {self.total_requests} ({self.redirected} redirected, {self.fallbacks} fallbacks), "
            f"Lookups: {self.cache_misses} ({self.lookup_errors} errors, {self.empty_results} empty), "
            f"Cache hits: {self.cache_hits}, Mean lookup time: {self.get_mean_lookup_time():.3f}s"
        )

        self.total_requests = 0
        self.redirected = 0
        self.fallbacks = 0
        self.lookup_errors = 0
        self.empty_results = 0
        self.cache_hits = 0
        self.cache_misses = 0
        self.lookup_times = []
        self.last_log_time = time.time()

"""Unit tests for the metrics module."""
from unittest.mock import patch
from srv_http_agent.metrics import AgentMetrics


def test_metrics_initialization():
    """Test AgentMetrics initialization."""
    metrics = AgentMetrics()

    assert metrics.total_requests == 0
    assert metrics.redirected == 0
    assert metrics.fallbacks == 0
    assert metrics.cache_hits == 0
    assert metrics.cache_misses == 0
    assert metrics.lookup_times == []
    assert metrics.last_log_time > 0


def test_record_redirect_and_fallbacks():
    """Test request outcome counters."""
    metrics = AgentMetrics()

    metrics.record_redirect()
    metrics.record_fallback()
    metrics.record_fallback(empty=True)

    assert metrics.total_requests == 3
    assert metrics.redirected == 1
    assert metrics.fallbacks == 2
    assert metrics.empty_results == 1


def test_record_lookup():
    """Test recording a lookup that reached DNS."""
    metrics = AgentMetrics()

    metrics.record_lookup(0.1)
    metrics.record_lookup(0.3)
    metrics.record_cache_hit()
    metrics.record_lookup_error()

    assert metrics.cache_misses == 2
    assert metrics.cache_hits == 1
    assert metrics.lookup_errors == 1
    assert abs(metrics.get_mean_lookup_time() - 0.2) < 1e-9


def test_lookup_times_bounded():
    """Test that lookup times list is bounded to 1000 entries."""
    metrics = AgentMetrics()

    for i in range(1100):
        metrics.record_lookup(i * 0.001)

    assert len(metrics.lookup_times) == 1000
    assert metrics.lookup_times[0] == 100 * 0.001


def test_mean_lookup_time_empty():
    """Test mean lookup time with no data."""
    assert AgentMetrics().get_mean_lookup_time() == 0.0


def test_log_stats_resets_counters():
    """Test that log_stats logs and resets counters."""
    metrics = AgentMetrics()
    metrics.record_redirect()
    metrics.record_lookup(0.05)
    metrics.record_cache_hit()

    with patch('srv_http_agent.metrics.logger') as mock_logger:
        metrics.log_stats()

        assert mock_logger.info.call_count == 2
        summary = mock_logger.info.call_args_list[1][0][0]
        assert "Requests: 1 (1 redirected, 0 fallbacks)" in summary
        assert "Cache hits: 1" in summary

    assert metrics.total_requests == 0
    assert metrics.redirected == 0
    assert metrics.cache_hits == 0
    assert metrics.cache_misses == 0
    assert metrics.lookup_times == []

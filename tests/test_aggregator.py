"""
Unit tests for result aggregation and ordering.
"""
import threading

from sonar.aggregator import ResultAggregator, ScanResult
from sonar.probe import ProbeOutcome


OUTCOMES = [
    ProbeOutcome("1.1.1.254", True, 5),
    ProbeOutcome("1.1.1.2", False),
    ProbeOutcome("1.1.1.1", True, 10),
]


def aggregate(include_unreachable, outcomes=OUTCOMES):
    aggregator = ResultAggregator(include_unreachable)
    for outcome in outcomes:
        aggregator.add(outcome)
    return aggregator.finalize(total_targets=len(outcomes))


class TestResultAggregator:
    """Test filtering and numeric ordering"""

    def test_unreachable_dropped(self):
        """Test down hosts are filtered by default"""
        result = aggregate(False)
        assert [(o.ip, o.latency_ms) for o in result] == [("1.1.1.1", 10), ("1.1.1.254", 5)]

    def test_unreachable_included(self):
        """Test down host sits between the others in address order"""
        result = aggregate(True)
        assert [o.ip for o in result] == ["1.1.1.1", "1.1.1.2", "1.1.1.254"]
        assert result[1].latency_ms is None
        assert result[1].status == "Down"

    def test_counts_ignore_filter(self):
        """Test up/down counters see every outcome"""
        result = aggregate(False)
        assert result.reachable_count == 2
        assert result.unreachable_count == 1
        assert result.probed_count == 3
        assert len(result) == 2

    def test_numeric_not_lexical_order(self):
        """Test ordering across octet boundaries"""
        outcomes = [
            ProbeOutcome("10.0.0.100", True, 1),
            ProbeOutcome("9.255.255.255", True, 1),
            ProbeOutcome("10.0.0.20", True, 1),
            ProbeOutcome("10.0.1.3", True, 1),
        ]
        result = aggregate(False, outcomes)
        assert [o.ip for o in result] == ["9.255.255.255", "10.0.0.20", "10.0.0.100", "10.0.1.3"]

    def test_concurrent_writers(self):
        """Test add() from many threads loses nothing"""
        aggregator = ResultAggregator(include_unreachable=True)

        def writer(third_octet):
            for host in range(1, 101):
                aggregator.add(ProbeOutcome(f"10.0.{third_octet}.{host}", host % 2 == 0,
                                            1 if host % 2 == 0 else None))

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        result = aggregator.finalize()
        assert len(result) == 800
        assert result.reachable_count == 400
        assert result[0].ip == "10.0.0.1"
        assert result[-1].ip == "10.0.7.100"

    def test_empty(self):
        """Test no outcomes gives an empty result"""
        result = ResultAggregator().finalize(total_targets=0)
        assert isinstance(result, ScanResult)
        assert len(result) == 0
        assert list(result) == []

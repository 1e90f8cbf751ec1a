"""
Unit tests for the ICMP probe.
ping3 is replaced by a stub so no packets are sent.
"""
import pickle

import pytest
from ping3.errors import PingError

import sonar.probe
from sonar.probe import ProbeExecutor, ProbeOutcome


def stub_ping(monkeypatch, result=None, exc=None):
    calls = []

    def fake_ping(ip, timeout, unit):
        calls.append((ip, timeout, unit))
        if exc is not None:
            raise exc
        return result

    monkeypatch.setattr(sonar.probe, "ping", fake_ping)
    return calls


class TestProbeOutcome:
    """Test outcome invariants"""

    def test_up_outcome(self):
        """Test a reachable outcome with latency"""
        outcome = ProbeOutcome("10.0.0.1", True, 12)
        assert outcome.status == "Up"
        assert outcome.to_dict() == {"ip": "10.0.0.1", "status": "Up", "latency_ms": 12}

    def test_down_outcome(self):
        """Test an unreachable outcome has no latency"""
        outcome = ProbeOutcome("10.0.0.1", False)
        assert outcome.status == "Down"
        assert outcome.latency_ms is None

    def test_down_with_latency_rejected(self):
        """Test latency is only allowed for reachable hosts"""
        with pytest.raises(ValueError):
            ProbeOutcome("10.0.0.1", False, 5)

    def test_immutable(self):
        """Test outcomes cannot be mutated"""
        outcome = ProbeOutcome("10.0.0.1", True, 1)
        with pytest.raises(Exception):
            outcome.reachable = False


class TestProbeExecutor:
    """Test one-shot probe behaviour"""

    def test_reply(self, monkeypatch):
        """Test a reply within the timeout"""
        calls = stub_ping(monkeypatch, result=12.6)
        outcome = ProbeExecutor(timeout_ms=250)("10.0.0.1")
        assert outcome == ProbeOutcome("10.0.0.1", True, 13)
        assert calls == [("10.0.0.1", 0.25, "ms")]

    def test_sub_millisecond_reply(self, monkeypatch):
        """Test a 0.0ms delay still counts as a reply"""
        stub_ping(monkeypatch, result=0.0)
        outcome = ProbeExecutor()("127.0.0.1")
        assert outcome.reachable
        assert outcome.latency_ms == 0

    def test_negative_latency_clamped(self, monkeypatch):
        """Test clock skew never produces a negative latency"""
        stub_ping(monkeypatch, result=-0.8)
        assert ProbeExecutor()("10.0.0.1").latency_ms == 0

    def test_timeout(self, monkeypatch):
        """Test ping3 returning None on timeout"""
        stub_ping(monkeypatch, result=None)
        assert ProbeExecutor()("10.0.0.1") == ProbeOutcome("10.0.0.1", False)

    def test_error_result(self, monkeypatch):
        """Test ping3 returning False on failure"""
        stub_ping(monkeypatch, result=False)
        assert ProbeExecutor()("10.0.0.1").reachable is False

    @pytest.mark.parametrize("exc", [PermissionError("raw socket"), OSError("unreachable"), PingError("boom")])
    def test_exceptions_absorbed(self, monkeypatch, exc):
        """Test transport errors never escape the probe"""
        stub_ping(monkeypatch, exc=exc)
        outcome = ProbeExecutor()("10.0.0.1")
        assert outcome == ProbeOutcome("10.0.0.1", False)

    def test_exactly_one_attempt(self, monkeypatch):
        """Test no retry after a failure"""
        calls = stub_ping(monkeypatch, result=None)
        ProbeExecutor()("10.0.0.1")
        assert len(calls) == 1

    def test_invalid_timeout(self):
        """Test timeout must be positive"""
        with pytest.raises(ValueError):
            ProbeExecutor(timeout_ms=0)

    def test_picklable(self):
        """Test the executor can be shipped to process workers"""
        clone = pickle.loads(pickle.dumps(ProbeExecutor(timeout_ms=300)))
        assert clone.timeout_ms == 300

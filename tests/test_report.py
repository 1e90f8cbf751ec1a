"""
Unit tests for CSV/JSON reporters.
"""
import csv
import json

import pytest

from sonar.aggregator import ScanResult
from sonar.probe import ProbeOutcome
from sonar.report import CSV_FIELDS, read_csv, write_csv, write_json


@pytest.fixture
def result():
    return ScanResult(
        outcomes=[
            ProbeOutcome("192.168.1.1", True, 3),
            ProbeOutcome("192.168.1.2", False),
            ProbeOutcome("192.168.1.3", True, 0),
        ],
        total_targets=3,
        reachable_count=2,
        unreachable_count=1,
        duration_seconds=1.23456,
    )


class TestCsvReport:
    """Test CSV output"""

    def test_columns_and_rows(self, result, tmp_path):
        """Test header and row formatting"""
        path = write_csv(result, tmp_path / "sweep.csv")
        with open(path, newline="") as fh:
            rows = list(csv.reader(fh))
        assert rows[0] == CSV_FIELDS == ["IP", "Status", "LatencyMs"]
        assert rows[1:] == [
            ["192.168.1.1", "Up", "3"],
            ["192.168.1.2", "Down", ""],
            ["192.168.1.3", "Up", "0"],
        ]

    def test_round_trip(self, result, tmp_path):
        """Test re-parsing yields the same (IP, Status, LatencyMs) tuples"""
        path = write_csv(result, tmp_path / "sweep.csv")
        parsed = read_csv(path)
        assert [(o.ip, o.status, o.latency_ms) for o in parsed] == \
               [(o.ip, o.status, o.latency_ms) for o in result]

    def test_unwritable_path_raises(self, result, tmp_path):
        """Test I/O errors propagate to the caller"""
        with pytest.raises(OSError):
            write_csv(result, tmp_path / "missing" / "sweep.csv")


class TestJsonReport:
    """Test JSON output"""

    def test_document(self, result, tmp_path):
        """Test document shape"""
        path = write_json(result, "192.168.1.1-3", tmp_path / "sweep.json")
        data = json.loads(path.read_text())
        assert data["target"] == "192.168.1.1-3"
        assert data["stats"]["up"] == 2
        assert data["stats"]["down"] == 1
        assert data["stats"]["duration_seconds"] == 1.235
        assert data["cancelled"] is False
        assert data["hosts"][1] == {"ip": "192.168.1.2", "status": "Down", "latency_ms": None}

"""
File reporters for a finished sweep.

I/O errors are not caught here; an unwritable path is the caller's
problem and has nothing to do with the sweep itself.
"""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Union

from .aggregator import ScanResult
from .probe import ProbeOutcome

logger = logging.getLogger(__name__)

CSV_FIELDS = ["IP", "Status", "LatencyMs"]

PathLike = Union[str, Path]


def write_csv(result: ScanResult, path: PathLike) -> Path:
    """Writes one row per outcome: IP, Up/Down, latency (empty when absent)."""
    path = Path(path)
    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for outcome in result:
            writer.writerow({
                "IP": outcome.ip,
                "Status": outcome.status,
                "LatencyMs": "" if outcome.latency_ms is None else outcome.latency_ms,
            })
    logger.info("Wrote %d rows to %s", len(result), path)
    return path


def read_csv(path: PathLike) -> List[ProbeOutcome]:
    outcomes = []
    with open(path, newline="", encoding="utf-8") as fh:
        for row in csv.DictReader(fh):
            latency = row["LatencyMs"].strip()
            outcomes.append(ProbeOutcome(
                ip=row["IP"],
                reachable=row["Status"] == "Up",
                latency_ms=int(latency) if latency else None,
            ))
    return outcomes


def write_json(result: ScanResult, target: str, path: PathLike) -> Path:
    path = Path(path)
    data = {
        "target": target,
        "timestamp": datetime.now().isoformat(),
        "cancelled": result.cancelled,
        "stats": {
            "total_targets": result.total_targets,
            "probed": result.probed_count,
            "up": result.reachable_count,
            "down": result.unreachable_count,
            "duration_seconds": round(result.duration_seconds, 3),
        },
        "hosts": [outcome.to_dict() for outcome in result],
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=4)
    logger.info("Wrote JSON report to %s", path)
    return path

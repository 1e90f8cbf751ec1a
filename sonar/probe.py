"""
Single-target ICMP echo probe.

One request per target, bounded by the configured timeout. Any failure
(timeout, unreachable, permission or socket error) comes back as a
Down outcome instead of an exception so one bad address never aborts
the sweep.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ping3 import ping
from ping3.errors import PingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of one probe. latency_ms is only set for reachable hosts."""
    ip: str
    reachable: bool
    latency_ms: Optional[int] = None

    def __post_init__(self):
        if not self.reachable and self.latency_ms is not None:
            raise ValueError(f"Unreachable outcome for {self.ip} cannot carry a latency")
        if self.latency_ms is not None and self.latency_ms < 0:
            raise ValueError(f"Negative latency for {self.ip}")

    @property
    def status(self) -> str:
        return "Up" if self.reachable else "Down"

    def to_dict(self) -> dict:
        return {"ip": self.ip, "status": self.status, "latency_ms": self.latency_ms}


class ProbeExecutor:
    """
    Callable probe: executor(ip) -> ProbeOutcome.

    Kept as a plain class holding only the timeout so it pickles cleanly
    into process workers.
    """

    def __init__(self, timeout_ms: int = 500):
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self.timeout_ms = timeout_ms

    def __call__(self, ip: str) -> ProbeOutcome:
        try:
            # ping3 returns the delay, None on timeout, False on other failures
            delay = ping(ip, timeout=self.timeout_ms / 1000.0, unit="ms")
        except (OSError, PingError) as e:
            logger.debug("Probe %s failed: %s", ip, e)
            return ProbeOutcome(ip, False)

        if delay is None or delay is False:
            logger.debug("No echo reply from %s within %dms", ip, self.timeout_ms)
            return ProbeOutcome(ip, False)

        return ProbeOutcome(ip, True, max(0, int(round(delay))))

    def __repr__(self):
        return f"ProbeExecutor(timeout_ms={self.timeout_ms})"

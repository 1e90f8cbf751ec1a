import threading
from dataclasses import dataclass, field
from typing import Iterator, List

from .probe import ProbeOutcome
from .ranges import ip_to_int


@dataclass
class ScanResult:
    """Final, address-ordered sweep output handed to the reporters."""
    outcomes: List[ProbeOutcome] = field(default_factory=list)
    total_targets: int = 0
    reachable_count: int = 0
    unreachable_count: int = 0
    duration_seconds: float = 0.0
    cancelled: bool = False

    def __iter__(self) -> Iterator[ProbeOutcome]:
        return iter(self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    def __getitem__(self, index):
        return self.outcomes[index]

    @property
    def probed_count(self) -> int:
        return self.reachable_count + self.unreachable_count


class ResultAggregator:
    """
    Collects outcomes from any number of concurrent writers and produces
    the filtered ScanResult sorted by 32-bit address value.
    """

    def __init__(self, include_unreachable: bool = False):
        self.include_unreachable = include_unreachable
        self._lock = threading.Lock()
        self._outcomes: List[ProbeOutcome] = []
        self.reachable_count = 0
        self.unreachable_count = 0

    def add(self, outcome: ProbeOutcome):
        with self._lock:
            if outcome.reachable:
                self.reachable_count += 1
            else:
                self.unreachable_count += 1
                if not self.include_unreachable:
                    return
            self._outcomes.append(outcome)

    __call__ = add

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)

    def finalize(self, total_targets: int = 0, duration_seconds: float = 0.0,
                 cancelled: bool = False) -> ScanResult:
        with self._lock:
            ordered = sorted(self._outcomes, key=lambda o: ip_to_int(o.ip))
            return ScanResult(
                outcomes=ordered,
                total_targets=total_targets,
                reachable_count=self.reachable_count,
                unreachable_count=self.unreachable_count,
                duration_seconds=duration_seconds,
                cancelled=cancelled,
            )

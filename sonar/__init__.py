"""
Sonar - bounded-concurrency IPv4 ping sweep.
"""

__version__ = "1.0.0"

from .errors import ConfigurationError, SchedulerInvariantViolation, SonarError
from .config import RangeSpec, ScanConfig
from .ranges import AddressRangeExpander, expand_range
from .probe import ProbeExecutor, ProbeOutcome
from .scheduler import CancelToken, ConcurrencyScheduler, SchedulerMode
from .aggregator import ResultAggregator, ScanResult

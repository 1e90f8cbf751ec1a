"""
Exception types raised by the sweep.

Per-target probe failures never show up here; they are folded into
ProbeOutcome(reachable=False) by the probe itself.
"""


class SonarError(Exception):
    """Base class for all sweep errors."""


class ConfigurationError(SonarError, ValueError):
    """
    Invalid or contradictory range/scan input.
    Always raised before any network activity starts.
    """


class SchedulerInvariantViolation(SonarError, RuntimeError):
    """The scheduler broke its own bookkeeping (e.g. the in-flight cap). A bug, not a runtime condition."""

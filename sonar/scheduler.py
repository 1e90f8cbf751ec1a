"""
Bounded probe scheduler.

A single control coroutine is both producer (submitting targets to the
execution strategy) and consumer (harvesting finished probe units). The
number of submitted-but-not-harvested units never exceeds the cap.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Set, Union

from .errors import SchedulerInvariantViolation
from .probe import ProbeOutcome
from .strategies import ExecutionStrategy, create_strategy

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]
OutcomeSink = Callable[[ProbeOutcome], None]


@dataclass(frozen=True)
class Sequential:
    """One probe at a time, in expander order."""
    limit: int = 1


@dataclass(frozen=True)
class Concurrent:
    """Up to `limit` probes in flight."""
    limit: int


class SchedulerMode:
    Sequential = Sequential
    Concurrent = Concurrent

    @staticmethod
    def from_concurrency(concurrency: int) -> Union[Sequential, Concurrent]:
        if concurrency <= 1:
            return Sequential()
        return Concurrent(concurrency)


class CancelToken:
    """Stops submission of new targets. Safe to raise from a signal handler or another thread."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class ConcurrencyScheduler:
    def __init__(self, targets: Iterable[str], probe: Callable[[str], ProbeOutcome],
                 mode: Union[Sequential, Concurrent],
                 strategy: Optional[ExecutionStrategy] = None,
                 strategy_name: str = "auto",
                 on_progress: Optional[ProgressCallback] = None,
                 on_complete: Optional[Callable[[], None]] = None,
                 cancel_token: Optional[CancelToken] = None):
        self.targets = targets
        self.probe = probe
        self.mode = mode
        self.strategy = strategy
        self.strategy_name = strategy_name
        self.on_progress = on_progress
        self.on_complete = on_complete
        self.cancel_token = cancel_token or CancelToken()

        self.submitted = 0
        self.harvested = 0
        self.peak_outstanding = 0

    @property
    def cancelled(self) -> bool:
        return self.cancel_token.cancelled

    async def run(self, sink: OutcomeSink):
        """
        Drives every target through the probe, handing each outcome to sink.
        Arrival order at the sink is not guaranteed in concurrent mode.
        """
        owns_strategy = self.strategy is None
        strategy = self.strategy or create_strategy(self.strategy_name, self.mode.limit)
        logger.debug("Scheduler starting: mode=%s strategy=%s", self.mode, strategy)

        try:
            if isinstance(self.mode, Sequential):
                await self._run_sequential(strategy, sink)
            else:
                await self._run_concurrent(strategy, sink, self.mode.limit)
        except BaseException:
            # Never block the loop on workers after a failure
            if owns_strategy:
                strategy.shutdown(wait=False, cancel_futures=True)
            raise
        if owns_strategy:
            # Every unit has been harvested, so the workers are idle
            strategy.shutdown()

        if self.cancelled:
            logger.info("Sweep cancelled after %d of its targets were submitted", self.submitted)

    async def _run_sequential(self, strategy: ExecutionStrategy, sink: OutcomeSink):
        targets = self.targets
        try:
            total = len(targets)
        except TypeError:
            targets = list(targets)
            total = len(targets)

        for index, target in enumerate(targets, start=1):
            if self.cancelled:
                break
            if self.on_progress:
                self.on_progress(index, total, target)

            self.submitted += 1
            self.peak_outstanding = max(self.peak_outstanding, 1)
            outcome = await strategy.submit(self.probe, target)
            self.harvested += 1
            sink(outcome)

        if self.on_complete:
            self.on_complete()

    async def _run_concurrent(self, strategy: ExecutionStrategy, sink: OutcomeSink, limit: int):
        outstanding: Set[asyncio.Future] = set()

        try:
            for target in self.targets:
                if len(outstanding) >= limit:
                    await self._harvest(outstanding, sink, asyncio.FIRST_COMPLETED)
                if self.cancelled:
                    break

                outstanding.add(strategy.submit(self.probe, target))
                self.submitted += 1
                self._check_cap(len(outstanding), limit)

            # Drain whatever is still in flight
            while outstanding:
                await self._harvest(outstanding, sink, asyncio.ALL_COMPLETED)
        except BaseException:
            await self._abandon(outstanding)
            raise

    async def _abandon(self, outstanding: Set[asyncio.Future]):
        """Cancels units that will never be harvested and collects them so no result goes unretrieved."""
        for future in outstanding:
            future.cancel()
        await asyncio.gather(*outstanding, return_exceptions=True)
        outstanding.clear()

    async def _harvest(self, outstanding: Set[asyncio.Future], sink: OutcomeSink, return_when):
        done, _ = await asyncio.wait(outstanding, return_when=return_when)
        for future in done:
            outstanding.discard(future)
            self.harvested += 1
            sink(future.result())

    def _check_cap(self, in_flight: int, limit: int):
        if in_flight > limit:
            raise SchedulerInvariantViolation(
                f"{in_flight} probes in flight, cap is {limit}"
            )
        self.peak_outstanding = max(self.peak_outstanding, in_flight)

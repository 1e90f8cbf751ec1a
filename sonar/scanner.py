import logging
import time
from typing import Callable, Optional

from .aggregator import ResultAggregator, ScanResult
from .config import RangeSpec, ScanConfig
from .probe import ProbeExecutor, ProbeOutcome
from .ranges import expand_range
from .report import write_csv, write_json
from .scheduler import CancelToken, ConcurrencyScheduler, Sequential
from .strategies import ExecutionStrategy
from .ui import ScannerUI, SweepProgress

logger = logging.getLogger(__name__)


class PingSweeper:
    """
    Wires expander, scheduler and aggregator together for one sweep and
    hands the ordered result to the reporters.
    """

    def __init__(self, spec: RangeSpec, config: ScanConfig,
                 probe: Optional[Callable[[str], ProbeOutcome]] = None,
                 strategy: Optional[ExecutionStrategy] = None,
                 cancel_token: Optional[CancelToken] = None,
                 ui: Optional[ScannerUI] = None):
        self.spec = spec
        self.config = config
        self.targets = expand_range(spec)
        self.probe = probe or ProbeExecutor(config.timeout_ms)
        self.strategy = strategy
        self.cancel_token = cancel_token or CancelToken()
        self.ui = ui

    def _scheduler(self, on_progress=None, on_complete=None) -> ConcurrencyScheduler:
        return ConcurrencyScheduler(
            self.targets,
            self.probe,
            self.config.mode,
            strategy=self.strategy,
            strategy_name=self.config.strategy,
            on_progress=on_progress,
            on_complete=on_complete,
            cancel_token=self.cancel_token,
        )

    async def run(self) -> ScanResult:
        mode = self.config.mode
        aggregator = ResultAggregator(self.config.include_unreachable)
        logger.debug("Sweeping %s: %d targets, timeout %dms, %s",
                     self.spec.label, len(self.targets), self.config.timeout_ms, mode)

        if self.ui:
            self.ui.display_start(self.spec.label, len(self.targets), mode)

        start_time = time.time()
        # Progress is only reported for the sequential mode
        if self.ui and self.config.show_progress and isinstance(mode, Sequential):
            with self.ui.create_progress() as progress:
                tracker = SweepProgress(progress)
                scheduler = self._scheduler(tracker.update, tracker.complete)
                await scheduler.run(aggregator.add)
        else:
            scheduler = self._scheduler()
            await scheduler.run(aggregator.add)

        duration = time.time() - start_time
        return aggregator.finalize(
            total_targets=len(self.targets),
            duration_seconds=duration,
            cancelled=scheduler.cancelled,
        )

    def save_results(self, result: ScanResult):
        if self.config.csv_path:
            write_csv(result, self.config.csv_path)
            if self.ui:
                self.ui.show_saved(self.config.csv_path)
        if self.config.json_path:
            write_json(result, self.spec.label, self.config.json_path)
            if self.ui:
                self.ui.show_saved(self.config.json_path)

"""
Execution strategies for probe units.

The scheduler only ever calls submit(fn, target) and awaits the returned
future, so a thread pool and a process pool are interchangeable behind
the same interface.
"""

import asyncio
import logging
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Callable, Optional

logger = logging.getLogger(__name__)


MAX_PROCESS_WORKERS = 61


def _ready() -> bool:
    return True


class ExecutionStrategy:
    """Base strategy: wraps a concurrent.futures executor for use from asyncio."""

    name = "base"

    def __init__(self, max_workers: int = 1):
        self.max_workers = max(1, max_workers)
        self._executor: Optional[Executor] = None

    def _create_executor(self) -> Executor:
        raise NotImplementedError

    def start(self) -> "ExecutionStrategy":
        if self._executor is None:
            executor = self._create_executor()
            try:
                # Workers are spawned lazily; force one up so failures surface here
                executor.submit(_ready).result()
            except Exception:
                executor.shutdown(wait=False)
                raise
            self._executor = executor
        return self

    def submit(self, fn: Callable, target: str) -> asyncio.Future:
        """Schedules fn(target) on a worker; returns an awaitable future bound to the running loop."""
        if self._executor is None:
            raise RuntimeError(f"{self.name} strategy used before start()")
        loop = asyncio.get_running_loop()
        return loop.run_in_executor(self._executor, fn, target)

    def shutdown(self, wait: bool = True, cancel_futures: bool = False):
        if self._executor is not None:
            self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)
            self._executor = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()

    def __repr__(self):
        return f"{type(self).__name__}(max_workers={self.max_workers})"


class ThreadStrategy(ExecutionStrategy):
    """Lightweight in-process workers. Preferred."""

    name = "thread"

    def _create_executor(self) -> Executor:
        return ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="sonar-probe")


class ProcessStrategy(ExecutionStrategy):
    """Isolated worker processes. The probe callable must be picklable."""

    name = "process"

    def __init__(self, max_workers: int = 1):
        # Windows refuses more than 61 pool processes; the scheduler cap still
        # bounds in-flight probes, extra units queue inside the pool
        super().__init__(min(max_workers, MAX_PROCESS_WORKERS))

    def _create_executor(self) -> Executor:
        return ProcessPoolExecutor(max_workers=self.max_workers)


STRATEGIES = {
    ThreadStrategy.name: ThreadStrategy,
    ProcessStrategy.name: ProcessStrategy,
}


def create_strategy(name: str = "auto", max_workers: int = 1) -> ExecutionStrategy:
    """
    Builds and starts a strategy.
    'auto' prefers threads and falls back to processes if a thread pool
    cannot be brought up in this environment.
    """
    if name != "auto":
        try:
            cls = STRATEGIES[name]
        except KeyError:
            raise ValueError(f"Unknown execution strategy '{name}'") from None
        return cls(max_workers).start()

    try:
        return ThreadStrategy(max_workers).start()
    except (RuntimeError, OSError) as e:
        logger.warning("Thread workers unavailable (%s), falling back to process workers", e)
        return ProcessStrategy(max_workers).start()

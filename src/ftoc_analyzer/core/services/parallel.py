"""Runs a per-feature function over many features, in a thread pool when worthwhile."""

import logging
import time
from concurrent.futures import (
    BrokenExecutor,
    Executor,
    Future,
    ThreadPoolExecutor,
    TimeoutError as FutureTimeoutError,
    as_completed,
)
from typing import Callable, Generic, Iterable, Optional, TypeVar

from ftoc_analyzer.core.rules.tag_constants import PARALLEL_THRESHOLD
from ftoc_analyzer.shared.exceptions import (
    AnalysisError,
    AnalysisTimeoutError,
    FtocAnalyzerError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

ExecutorFactory = Callable[..., Executor]


class ParallelRunner(Generic[T, R]):
    """Maps a pure function over items, keeping input order.

    Items are evaluated in a worker pool only when there are more than
    ``parallel_threshold`` of them. If the pool cannot start or breaks
    mid-batch, the items without a result are evaluated sequentially.
    A caller timeout is never retried: it raises ``AnalysisTimeoutError``
    and partial results are discarded.
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        parallel_threshold: int = PARALLEL_THRESHOLD,
        timeout: Optional[float] = None,
        executor_factory: ExecutorFactory = ThreadPoolExecutor,
    ):
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive")
        self.max_workers = max_workers
        self.parallel_threshold = parallel_threshold
        self.timeout = timeout
        self.executor_factory = executor_factory

    def should_parallelize(self, item_count: int) -> bool:
        return item_count > self.parallel_threshold and self.max_workers != 1

    def start_clock(self) -> Optional[float]:
        """Monotonic deadline for a run starting now; None without a timeout.

        Pass it to several ``map``/``call`` invocations so that one timeout
        covers all of them.
        """
        return None if self.timeout is None else time.monotonic() + self.timeout

    def map(
        self,
        fn: Callable[[T], R],
        items: Iterable[T],
        deadline: Optional[float] = None,
    ) -> list[R]:
        """Apply ``fn`` to every item and return results in input order.

        The timeout counts from this call unless a ``deadline`` from
        ``start_clock`` is given.

        Raises:
            AnalysisTimeoutError: If the batch outlives the timeout
            AnalysisError: If ``fn`` raises (engine errors pass through as is)
        """
        items = list(items)
        if deadline is None:
            deadline = self.start_clock()

        results: dict[int, R] = {}
        if self.should_parallelize(len(items)):
            results = self._run_pool(fn, items, deadline)
            pending = len(items) - len(results)
            if pending:
                logger.warning(
                    "Worker pool unavailable, evaluating %d remaining item(s) sequentially",
                    pending,
                )

        for index, item in enumerate(items):
            if index not in results:
                self._check_deadline(deadline)
                results[index] = _call(fn, item)

        return [results[index] for index in range(len(items))]

    def call(self, fn: Callable[[], R], deadline: Optional[float] = None) -> R:
        """Run a single function within the timeout.

        With a timeout the function runs on a worker thread; on expiry the
        thread is abandoned (threads cannot be interrupted) and
        ``AnalysisTimeoutError`` is raised.

        Raises:
            AnalysisTimeoutError: If the deadline passes first
            AnalysisError: If ``fn`` raises (engine errors pass through as is)
        """
        if deadline is None:
            deadline = self.start_clock()
        if deadline is None:
            return _call(fn)
        self._check_deadline(deadline)

        try:
            executor = self.executor_factory(max_workers=1)
        except (OSError, RuntimeError) as e:
            logger.warning("Could not start worker thread, running inline: %s", e)
            result = _call(fn)
            self._check_deadline(deadline)
            return result

        try:
            try:
                future = executor.submit(_call, fn)
            except RuntimeError as e:
                logger.warning("Worker thread rejected work, running inline: %s", e)
                result = _call(fn)
                self._check_deadline(deadline)
                return result
            try:
                return future.result(timeout=_remaining(deadline))
            except FutureTimeoutError:
                future.cancel()
                raise AnalysisTimeoutError(
                    f"Analysis did not finish within {self.timeout} seconds"
                ) from None
            except BrokenExecutor as e:
                logger.warning("Worker thread broke, running inline: %s", e)
                return _call(fn)
        finally:
            executor.shutdown(wait=False)

    def _run_pool(
        self, fn: Callable[[T], R], items: list[T], deadline: Optional[float]
    ) -> dict[int, R]:
        results: dict[int, R] = {}
        try:
            executor = self.executor_factory(max_workers=self.max_workers)
        except (OSError, RuntimeError) as e:
            logger.warning("Could not start worker pool: %s", e)
            return results

        futures: dict[Future, int] = {}
        try:
            try:
                for index, item in enumerate(items):
                    futures[executor.submit(fn, item)] = index
            except RuntimeError as e:
                # Shut down or broken pools refuse new work
                logger.warning("Worker pool rejected work: %s", e)

            try:
                for future in as_completed(futures, timeout=_remaining(deadline)):
                    try:
                        results[futures[future]] = future.result()
                    except BrokenExecutor as e:
                        logger.warning("Worker pool broke mid-batch: %s", e)
                        break
                    except FtocAnalyzerError:
                        raise
                    except Exception as e:
                        raise AnalysisError(f"Analysis of item #{futures[future]} failed: {e}") from e
            except FutureTimeoutError:
                raise AnalysisTimeoutError(
                    f"Analysis did not finish within {self.timeout} seconds"
                ) from None

            # Keep results that finished before the pool broke
            for future, index in futures.items():
                if index not in results and _succeeded(future):
                    results[index] = future.result()
        finally:
            for future in futures:
                future.cancel()
            executor.shutdown(wait=False)

        return results

    def _check_deadline(self, deadline: Optional[float]) -> None:
        if deadline is not None and time.monotonic() > deadline:
            raise AnalysisTimeoutError(f"Analysis did not finish within {self.timeout} seconds")


def _call(fn: Callable[..., R], *args) -> R:
    try:
        return fn(*args)
    except FtocAnalyzerError:
        raise
    except Exception as e:
        raise AnalysisError(f"Analysis failed: {e}") from e


def _remaining(deadline: Optional[float]) -> Optional[float]:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


def _succeeded(future: Future) -> bool:
    return future.done() and not future.cancelled() and future.exception() is None

"""Module: fetch_scheduler.py

Date: 2026-10-19

Fan-out of per-file cache population work over a thread pool.

Features:
- One independent task per submitted file; no ordering between files
- submit() never blocks the caller
- on_complete(file_ref) exactly once per successful task
- Failures are logged, recorded and reported to on_failure; siblings continue
- Bounded graceful shutdown: drain for a grace period, then cancel what is
  still queued and signal running tasks through a cancellation event

Lifecycle:
    IDLE --start()--> ACCEPTING --shutdown()--> DRAINING --> STOPPED

Usage:
    with ConcurrentFetchScheduler(populate_thumbnail, on_complete=refresh) as scheduler:
        for path in paths:
            scheduler.submit(path)
    # leaving the block calls shutdown() with the configured grace period
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

import psutil

from tagcache.config import FETCH_MAX_WORKERS_CAP, FETCH_WORKERS_PER_CPU, SHUTDOWN_GRACE_SECONDS
from tagcache.core.errors import SchedulerNotAccepting
from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

T = TypeVar("T")


class SchedulerState(Enum):
    """Lifecycle states of a ConcurrentFetchScheduler."""

    IDLE = "idle"
    ACCEPTING = "accepting"
    DRAINING = "draining"
    STOPPED = "stopped"


@dataclass(frozen=True)
class FetchFailure(Generic[T]):
    """A task that raised, with the file it was working on."""

    file_ref: T
    error: BaseException


def default_worker_count() -> int:
    """Worker count for I/O-bound work: 8 per CPU, capped at 64."""
    cpu_count = psutil.cpu_count() or 1
    return max(1, min(FETCH_MAX_WORKERS_CAP, cpu_count * FETCH_WORKERS_PER_CPU))


class ConcurrentFetchScheduler(Generic[T]):
    """Run work(file_ref) for many files concurrently and report completions."""

    def __init__(
        self,
        work: Callable[[T], Any],
        on_complete: Callable[[T], Any],
        on_failure: Callable[[T, BaseException], Any] | None = None,
        max_workers: int | None = None,
        name: str = "fetch",
    ):
        """Initialize the scheduler (IDLE, no threads yet).

        Args:
            work: Per-file generation work; runs on a worker thread
            on_complete: Called with the file ref after work succeeded
            on_failure: Called with the file ref and the error when work raised
            max_workers: Pool size (default_worker_count() when None)
            name: Thread name prefix, also used in log messages

        """
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {max_workers}")

        self._work = work
        self._on_complete = on_complete
        self._on_failure = on_failure
        self.max_workers = max_workers or default_worker_count()
        self.name = name

        self._state = SchedulerState.IDLE
        self._lock = threading.RLock()
        self._executor: ThreadPoolExecutor | None = None
        self._tasks: dict[object, Future] = {}
        self._local = threading.local()
        self._cancel_event = threading.Event()
        self._stopped_event = threading.Event()
        self._shutdown_result: bool | None = None

        self._completed_count = 0
        self._failed_count = 0
        self.failures: list[FetchFailure[T]] = []

    # ----- state -----

    @property
    def state(self) -> SchedulerState:
        with self._lock:
            return self._state

    @property
    def completed_count(self) -> int:
        """Tasks whose work finished without raising."""
        with self._lock:
            return self._completed_count

    @property
    def failed_count(self) -> int:
        with self._lock:
            return self._failed_count

    @property
    def cancel_event(self) -> threading.Event:
        """Set when shutdown gave up waiting; long-running work may poll it."""
        return self._cancel_event

    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def pending_count(self) -> int:
        """Submitted tasks that have not finished yet (queued or running)."""
        with self._lock:
            return sum(1 for future in self._tasks.values() if not future.done())

    # ----- lifecycle -----

    def start(self) -> ConcurrentFetchScheduler[T]:
        """Start accepting work (IDLE -> ACCEPTING).

        Raises:
            SchedulerNotAccepting: If the scheduler was already shut down

        """
        with self._lock:
            if self._state is SchedulerState.ACCEPTING:
                return self
            if self._state is not SchedulerState.IDLE:
                raise SchedulerNotAccepting(
                    f"Scheduler '{self.name}' cannot be restarted ({self._state.value})"
                )
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix=f"tagcache-{self.name}"
            )
            self._state = SchedulerState.ACCEPTING

        logger.info(
            "[ConcurrentFetchScheduler] %s: started with %d workers", self.name, self.max_workers
        )
        return self

    def submit(self, file_ref: T) -> Future:
        """Queue work for one file without blocking.

        Returns:
            Future of the task (resolves to None; failures do not propagate)

        Raises:
            SchedulerNotAccepting: If the scheduler is not ACCEPTING

        """
        with self._lock:
            if self._state is not SchedulerState.ACCEPTING or self._executor is None:
                raise SchedulerNotAccepting(
                    f"Scheduler '{self.name}' is not accepting work ({self._state.value})"
                )
            token = object()
            future = self._executor.submit(self._run, file_ref, token)
            self._tasks[token] = future
            future.add_done_callback(lambda _f, t=token: self._forget(t))
        return future

    def _forget(self, token: object) -> None:
        with self._lock:
            self._tasks.pop(token, None)

    def shutdown(self, grace_period: float | None = None) -> bool:
        """Stop accepting work and wait (bounded) for submitted tasks.

        Tasks still unfinished after grace_period are cancelled if queued;
        running ones see cancel_event set and their callbacks are suppressed.
        Safe to call more than once, from any thread, including from inside
        a task or callback (that task is not waited on).

        Args:
            grace_period: Seconds to wait (SHUTDOWN_GRACE_SECONDS when None)

        Returns:
            True if every task finished within the grace period

        """
        grace = SHUTDOWN_GRACE_SECONDS if grace_period is None else max(0.0, grace_period)
        own_token = getattr(self._local, "token", None)

        with self._lock:
            if self._state is SchedulerState.IDLE:
                self._state = SchedulerState.STOPPED
                self._shutdown_result = True
                self._stopped_event.set()
                return True
            if self._state is not SchedulerState.ACCEPTING:
                drain_owner = False
            else:
                self._state = SchedulerState.DRAINING
                drain_owner = True
            pending = [f for t, f in self._tasks.items() if t is not own_token]

        if not drain_owner:
            # Another caller is draining; a task must not wait on it
            if own_token is None:
                self._stopped_event.wait()
            return bool(self._shutdown_result)

        logger.info(
            "[ConcurrentFetchScheduler] %s: draining %d tasks (grace %.1fs)",
            self.name,
            len(pending),
            grace,
        )

        _done, not_done = wait(pending, timeout=grace)
        finished = not not_done

        if not finished:
            self._cancel_event.set()
            cancelled = sum(1 for future in not_done if future.cancel())
            logger.warning(
                "[ConcurrentFetchScheduler] %s: grace period expired, "
                "%d queued tasks cancelled, %d still running",
                self.name,
                cancelled,
                len(not_done) - cancelled,
            )

        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)

        with self._lock:
            self._state = SchedulerState.STOPPED
            self._shutdown_result = finished
        self._stopped_event.set()

        logger.info(
            "[ConcurrentFetchScheduler] %s: stopped (%d completed, %d failed)",
            self.name,
            self.completed_count,
            self.failed_count,
        )
        return finished

    # ----- task body -----

    def _run(self, file_ref: T, token: object) -> None:
        self._local.token = token
        try:
            if self._cancel_event.is_set():
                return

            try:
                self._work(file_ref)
            except Exception as e:
                self._record_failure(file_ref, e)
                return

            with self._lock:
                self._completed_count += 1

            if self._cancel_event.is_set():
                logger.debug(
                    "[ConcurrentFetchScheduler] %s: completion of %s after shutdown suppressed",
                    self.name,
                    file_ref,
                    extra={"dev_only": True},
                )
                return

            self._invoke(self._on_complete, file_ref)
        finally:
            self._local.token = None

    def _record_failure(self, file_ref: T, error: Exception) -> None:
        logger.error(
            "[ConcurrentFetchScheduler] %s: task failed for %s: %s", self.name, file_ref, error
        )
        with self._lock:
            self._failed_count += 1
            self.failures.append(FetchFailure(file_ref, error))

        if self._on_failure is not None and not self._cancel_event.is_set():
            self._invoke(self._on_failure, file_ref, error)

    def _invoke(self, callback: Callable[..., Any], *args: Any) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception(
                "[ConcurrentFetchScheduler] %s: callback %s failed",
                self.name,
                getattr(callback, "__name__", repr(callback)),
            )

    # ----- context manager -----

    def __enter__(self) -> ConcurrentFetchScheduler[T]:
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

"""
Thread-pool insert runner: the benchmark's measurement loop.

Each trial clears the target collection, queues one insertion task per document
on a fixed-size ThreadPoolExecutor, and times how long the pool needs to drain.
Completion is detected with an AtomicCounter: the task whose increment reaches
the insert count shuts the pool down and releases the waiting main thread.
A ProgressTicker logs the running count while the main thread blocks.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from insert_bench.domain.models import SyntheticRecord
from insert_bench.runner.abstract import (
    BenchmarkConfig,
    DocumentCollection,
    InsertRunner,
    TrialResult,
    compute_speed,
)
from insert_bench.utils.counter import AtomicCounter
from insert_bench.utils.logging import get_logger

log = get_logger(__name__)

RecordFactory = Callable[[], SyntheticRecord]


class ProgressTicker:
    """
    Background thread that logs the completed-task count at a fixed interval.
    """

    def __init__(self, counter: AtomicCounter, interval_seconds: float, label: str = "") -> None:
        self._counter = counter
        self._interval = interval_seconds
        self._label = label
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self._thread = threading.Thread(
            target=self._run, name=f"progress-ticker{self._label}", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self._interval + 1.0)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(timeout=self._interval):
            completed = self._counter.value
            log.info(f"completed {completed} tasks", extra={"completed": completed})


class ThreadPoolInsertRunner(InsertRunner):
    """
    Insert `config.inserts` documents through `config.threads` worker threads.

    Tasks are all submitted up front and rely on the executor's queue; there is
    no backpressure and no ordering between completions.
    """

    name: str = "thread_pool"
    description: str = "ThreadPoolExecutor, one insert_one per task."

    def __init__(
        self,
        config: BenchmarkConfig,
        record_factory: RecordFactory = SyntheticRecord,
    ) -> None:
        super().__init__(config)
        self._record_factory = record_factory

    def _await_completion(self, done: threading.Event) -> None:
        """Block until the last insertion (or the first failure) sets `done`."""
        done.wait()

    def run_trial(self, collection: DocumentCollection, trial: int = 1) -> TrialResult:
        """
        Run one timed trial.

        Raises
        ------
        Exception
            The first error raised by `insert_one`, re-raised unchanged once the
            pool has been told to stop. No retries are attempted.
        """
        inserts = self.config.inserts
        threads = self.config.threads
        context = {"trial": trial, "inserts": inserts, "threads": threads}

        collection.delete_many({})
        count_before = collection.count_documents({})
        log.info(f"Before test collection contains {count_before} documents", extra=context)
        log.info(f"Starting to insert {inserts} documents using {threads} threads", extra=context)

        counter = AtomicCounter()
        done = threading.Event()
        failures: List[Exception] = []
        executor = ThreadPoolExecutor(max_workers=threads, thread_name_prefix="insert-worker")

        def insert_task() -> None:
            try:
                collection.insert_one(self._record_factory().to_document())
            except Exception as exc:
                failures.append(exc)
                done.set()
                raise
            if counter.increment() == inserts:
                log.info("shutting down", extra=context)
                executor.shutdown(wait=False)
                done.set()

        start = time.perf_counter()
        if inserts == 0:
            done.set()
        for _ in range(inserts):
            executor.submit(insert_task)

        ticker = ProgressTicker(counter, self.config.poll_interval_seconds, label=f"-{trial}")
        ticker.start()
        log.info("waiting for threads to complete", extra=context)
        interrupted = False
        try:
            self._await_completion(done)
        except KeyboardInterrupt:
            log.exception("Interrupted while waiting for insert workers", extra=context)
            interrupted = True
        finally:
            ticker.stop()

        if failures:
            executor.shutdown(wait=False, cancel_futures=True)
            log.error(
                f"Insert failed after {counter.value} documents",
                extra={**context, "completed": counter.value},
            )
            raise failures[0]

        if interrupted:
            # Queued tasks are dropped; inserts already running finish on their own.
            executor.shutdown(wait=False, cancel_futures=True)
        else:
            executor.shutdown(wait=True)
            log.info(f"completed ALL {counter.value} tasks", extra=context)

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        completed = counter.value
        speed = compute_speed(elapsed_ms, inserts, self.config.speed_unit)
        log.info(
            f"Insert of {inserts} documents took {elapsed_ms:.0f} millis",
            extra={**context, "elapsed_ms": elapsed_ms},
        )
        log.info(
            f"speed - {speed:.2f} millis/{self.config.speed_unit} inserts",
            extra={**context, "speed_ms_per_unit": speed},
        )

        count_after = collection.count_documents({})
        log.info(f"After test collection contains {count_after} documents", extra=context)

        return TrialResult(
            trial=trial,
            inserts=inserts,
            threads=threads,
            completed=completed,
            elapsed_ms=elapsed_ms,
            speed_ms_per_unit=speed,
            speed_unit=self.config.speed_unit,
            count_before=count_before,
            count_after=count_after,
            interrupted=interrupted,
        )


__all__ = ["ProgressTicker", "RecordFactory", "ThreadPoolInsertRunner"]

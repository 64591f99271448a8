"""Fixed-size pool of worker threads running page jobs.

Work items go through a request queue; each worker takes one item at a
time, runs the job and publishes the JobResult on a result queue. The
result queue is closed only after every worker has exited, so the
consumer can tell when no more results will ever arrive.
"""

from __future__ import annotations

import os
import queue
import threading
from typing import Callable, Iterable, Iterator, List, Optional

from ocrpdf.core.logging import get_logger
from ocrpdf.core.models import JobResult, WorkItem
from ocrpdf.core.streaming import NullStreamHandler, StreamHandler

LOGGER = get_logger(__name__)

Job = Callable[[WorkItem], JobResult]

# End-of-stream marker for both queues
_CLOSED = object()


def default_worker_count() -> int:
    """One worker per CPU available on the host."""
    return os.cpu_count() or 1


class WorkerPool:
    """Runs ``job`` concurrently over work items.

    Args:
        job: Callable turning a WorkItem into a JobResult.
        workers: Number of worker threads; 0 means one per CPU.
        stream_handler: Receives per-page progress events.
        first_page: Page number of sequence number 0, for progress events.
    """

    def __init__(
        self,
        job: Job,
        workers: int = 0,
        stream_handler: Optional[StreamHandler] = None,
        first_page: int = 1,
    ) -> None:
        if workers < 0:
            raise ValueError(f"Invalid worker count: {workers}")
        self._job = job
        self._workers = workers or default_worker_count()
        self._stream = stream_handler or NullStreamHandler()
        self._first_page = first_page
        self._requests: queue.Queue = queue.Queue()
        self._results: queue.Queue = queue.Queue()
        self._cancelled = threading.Event()
        self._threads: List[threading.Thread] = []

    @property
    def workers(self) -> int:
        return self._workers

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self, items: Iterable[WorkItem]) -> None:
        """Start the workers and enqueue all ``items``.

        Workers start draining while items are still being enqueued; the
        request queue is closed after the last one.
        """
        if self._threads:
            raise RuntimeError("Worker pool already started")

        for i in range(self._workers):
            thread = threading.Thread(
                target=self._work, name=f"ocr-worker-{i}", daemon=True
            )
            thread.start()
            self._threads.append(thread)

        threading.Thread(target=self._close_results, name="ocr-closer", daemon=True).start()

        count = 0
        for item in items:
            self._requests.put(item)
            count += 1

        for _ in self._threads:
            self._requests.put(_CLOSED)

        LOGGER.debug(f"Queued {count} job(s) for {self._workers} worker(s)")

    def results(self) -> Iterator[JobResult]:
        """Yield results in completion order until every worker has exited."""
        while True:
            result = self._results.get()
            if result is _CLOSED:
                return
            yield result

    def cancel(self) -> None:
        """Stop starting new jobs.

        Jobs already running are not interrupted; their results are
        simply never consumed.
        """
        self._cancelled.set()

    def _work(self) -> None:
        while True:
            item = self._requests.get()
            if item is _CLOSED or self._cancelled.is_set():
                return
            self._results.put(self._run_job(item))

    def _run_job(self, item: WorkItem) -> JobResult:
        page = item.sequence_number + self._first_page
        self._stream.start_page(page)

        try:
            result = self._job(item)
        except Exception as e:
            # Exactly one result per item, even if the job itself blows up
            LOGGER.debug(f"Job for page {page} raised", exc_info=True)
            result = JobResult(item.sequence_number, error=f"(page {page}) {e}")

        self._stream.end_page(page, result.ok, result.error)
        return result

    def _close_results(self) -> None:
        for thread in self._threads:
            thread.join()
        self._results.put(_CLOSED)

"""Restores page order from out-of-order job completions.

Results arrive in whatever order the workers finish. Each one is kept in a
min-heap keyed by sequence number and released as soon as every earlier
result has been released, so the sink sees payloads strictly in order,
with no gaps and no duplicates. The heap only ever holds results that are
"ahead" of the next expected one.
"""

from __future__ import annotations

import heapq
from typing import Callable, Iterable, List, Optional, Set

from ocrpdf.core.errors import JobError, PendingSetCorrupted
from ocrpdf.core.logging import get_logger
from ocrpdf.core.models import JobResult

LOGGER = get_logger(__name__)

Sink = Callable[[bytes], None]


class PendingSet:
    """Min-heap of results waiting for their turn.

    Owned by a single merger; not thread-safe.
    """

    def __init__(self) -> None:
        self._heap: List[JobResult] = []
        self._keys: Set[int] = set()

    def __len__(self) -> int:
        return len(self._heap)

    def push(self, result: JobResult) -> None:
        if result.sequence_number in self._keys:
            raise PendingSetCorrupted(
                f"Duplicate result for sequence number {result.sequence_number}"
            )
        self._keys.add(result.sequence_number)
        heapq.heappush(self._heap, result)

    def pop_if_front(self, sequence_number: int) -> Optional[JobResult]:
        """Pop the smallest result if it has ``sequence_number``, else None."""
        if not self._heap or self._heap[0].sequence_number != sequence_number:
            return None
        result = heapq.heappop(self._heap)
        self._keys.discard(result.sequence_number)
        return result

    def pending_numbers(self) -> List[int]:
        return sorted(self._keys)


class OrderRestoringMerger:
    """Feeds job payloads to ``sink`` in sequence order.

    The first failed result aborts the merge with a JobError, whatever its
    position; output released before it is not retracted.
    """

    def __init__(self, sink: Sink) -> None:
        self._sink = sink
        self._pending = PendingSet()
        self._next_expected = 0

    @property
    def next_expected(self) -> int:
        return self._next_expected

    @property
    def pending(self) -> int:
        return len(self._pending)

    def push(self, result: JobResult) -> int:
        """Accept one result and release everything now in order.

        Returns:
            Number of payloads released to the sink by this call.

        Raises:
            JobError: If ``result`` carries an error.
            PendingSetCorrupted: If the sequence number was already seen.
        """
        if result.error:
            raise JobError(result.error, result.sequence_number)

        if result.sequence_number < self._next_expected:
            raise PendingSetCorrupted(
                f"Result {result.sequence_number} arrived after it was released"
            )

        self._pending.push(result)

        released = 0
        while True:
            front = self._pending.pop_if_front(self._next_expected)
            if front is None:
                break
            self._sink(front.payload)
            self._next_expected += 1
            released += 1

        return released

    def finish(self) -> None:
        """Check that nothing is left once the result source is exhausted."""
        if len(self._pending):
            raise PendingSetCorrupted(
                f"Pending set still has {len(self._pending)} result(s) "
                f"{self._pending.pending_numbers()}, next expected {self._next_expected}"
            )

    def merge(self, results: Iterable[JobResult]) -> int:
        """Consume ``results`` until exhausted.

        Returns:
            Number of payloads released.
        """
        for result in results:
            self.push(result)
        self.finish()
        LOGGER.debug(f"Merged {self._next_expected} result(s)")
        return self._next_expected

"""Tests for the order-restoring merger."""

from __future__ import annotations

import random
from typing import List

import pytest

from ocrpdf.core.errors import JobError, OcrPdfError, PendingSetCorrupted
from ocrpdf.core.models import JobResult
from ocrpdf.pipeline.merger import OrderRestoringMerger, PendingSet


def _ok(n: int, payload: bytes = b"") -> JobResult:
    return JobResult(n, payload=payload or f"{n}\n".encode())


class TestPendingSet:
    """Tests for PendingSet."""

    def test_pop_if_front_returns_none_when_empty(self) -> None:
        pending = PendingSet()
        assert pending.pop_if_front(0) is None

    def test_pop_if_front_only_pops_matching_front(self) -> None:
        pending = PendingSet()
        pending.push(_ok(2))
        pending.push(_ok(1))

        assert pending.pop_if_front(0) is None
        assert len(pending) == 2

        result = pending.pop_if_front(1)
        assert result is not None
        assert result.sequence_number == 1
        assert len(pending) == 1

    def test_orders_by_sequence_number(self) -> None:
        pending = PendingSet()
        for n in [5, 3, 4, 0, 2, 1]:
            pending.push(_ok(n))

        popped = []
        for n in range(6):
            result = pending.pop_if_front(n)
            assert result is not None
            popped.append(result.sequence_number)

        assert popped == [0, 1, 2, 3, 4, 5]

    def test_duplicate_push_raises(self) -> None:
        pending = PendingSet()
        pending.push(_ok(3))
        with pytest.raises(PendingSetCorrupted):
            pending.push(_ok(3))

    def test_pending_numbers(self) -> None:
        pending = PendingSet()
        pending.push(_ok(7))
        pending.push(_ok(4))
        assert pending.pending_numbers() == [4, 7]


class TestOrderRestoringMerger:
    """Tests for OrderRestoringMerger."""

    def test_restores_order_of_shuffled_arrivals(self) -> None:
        released: List[bytes] = []
        merger = OrderRestoringMerger(released.append)

        merger.merge([_ok(2, b"C\n"), _ok(0, b"A\n"), _ok(1, b"B\n")])

        assert b"".join(released) == b"A\nB\nC\n"

    @pytest.mark.parametrize("count", [1, 2, 10, 100])
    def test_any_permutation_is_released_in_order(self, count: int) -> None:
        order = list(range(count))
        random.Random(count).shuffle(order)
        released: List[bytes] = []
        merger = OrderRestoringMerger(released.append)

        total = merger.merge([_ok(n) for n in order])

        assert total == count
        assert released == [f"{n}\n".encode() for n in range(count)]

    def test_last_result_first_is_held_back(self) -> None:
        released: List[bytes] = []
        merger = OrderRestoringMerger(released.append)

        assert merger.push(_ok(3)) == 0
        assert merger.push(_ok(1)) == 0
        assert merger.push(_ok(2)) == 0
        assert released == []
        assert merger.pending == 3

        assert merger.push(_ok(0)) == 4
        assert merger.pending == 0
        assert merger.next_expected == 4

    def test_releases_as_early_as_possible(self) -> None:
        released: List[bytes] = []
        merger = OrderRestoringMerger(released.append)

        merger.push(_ok(0))
        assert len(released) == 1
        merger.push(_ok(2))
        assert len(released) == 1
        merger.push(_ok(1))
        assert len(released) == 3

    def test_error_result_aborts_immediately(self) -> None:
        released: List[bytes] = []
        merger = OrderRestoringMerger(released.append)
        merger.push(_ok(0))

        with pytest.raises(JobError) as exc_info:
            merger.merge([_ok(1), JobResult(3, error="(page 4) boom"), _ok(2)])

        assert str(exc_info.value) == "(page 4) boom"
        assert exc_info.value.sequence_number == 3
        # Output flushed before the error is kept
        assert released == [b"0\n", b"1\n"]

    def test_error_wins_even_before_earlier_pages_arrive(self) -> None:
        merger = OrderRestoringMerger(lambda payload: None)
        with pytest.raises(JobError):
            merger.push(JobResult(5, error="(page 6) bad image"))

    def test_merge_empty_source(self) -> None:
        released: List[bytes] = []
        merger = OrderRestoringMerger(released.append)
        assert merger.merge([]) == 0
        assert released == []

    def test_gap_detected_at_exhaustion(self) -> None:
        merger = OrderRestoringMerger(lambda payload: None)

        with pytest.raises(PendingSetCorrupted) as exc_info:
            merger.merge([_ok(0), _ok(2)])

        assert "next expected 1" in str(exc_info.value)

    def test_invariant_violation_is_not_a_user_error(self) -> None:
        assert not issubclass(PendingSetCorrupted, OcrPdfError)

    def test_duplicate_of_released_result_detected(self) -> None:
        merger = OrderRestoringMerger(lambda payload: None)
        merger.push(_ok(0))
        with pytest.raises(PendingSetCorrupted):
            merger.push(_ok(0))

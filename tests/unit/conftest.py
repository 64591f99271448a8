"""Shared fixtures for unit tests."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

import pytest

from ocrpdf.core.logging import ROOT_LOGGER_NAME
from ocrpdf.core.models import JobResult, WorkItem


class FakeJob:
    """Job double returning canned payloads after per-item delays.

    Records the sequence numbers it was called with, in call order.
    """

    def __init__(
        self,
        payloads: Dict[int, bytes],
        delays: Optional[Dict[int, float]] = None,
        errors: Optional[Dict[int, str]] = None,
        gates: Optional[Dict[int, threading.Event]] = None,
    ) -> None:
        self.payloads = payloads
        self.delays = delays or {}
        self.errors = errors or {}
        self.gates = gates or {}
        self.calls: List[int] = []
        self._lock = threading.Lock()

    def __call__(self, item: WorkItem) -> JobResult:
        n = item.sequence_number
        with self._lock:
            self.calls.append(n)
        gate = self.gates.get(n)
        if gate is not None:
            gate.wait(timeout=10)
        time.sleep(self.delays.get(n, 0))
        if n in self.errors:
            return JobResult(n, error=self.errors[n])
        return JobResult(n, payload=self.payloads[n])


@pytest.fixture
def make_items(tmp_path: Path) -> Callable[[int], List[WorkItem]]:
    def make(count: int) -> List[WorkItem]:
        return [WorkItem(i, tmp_path / f"page-{i:03d}.tif") for i in range(count)]

    return make


@pytest.fixture
def page_dir(tmp_path: Path) -> Callable[[int], Path]:
    """Create a directory holding ``count`` empty page images."""

    def make(count: int) -> Path:
        directory = tmp_path / "pages"
        directory.mkdir(exist_ok=True)
        for i in range(count):
            (directory / f"page-{i:03d}.tif").write_bytes(b"")
        return directory

    return make


@pytest.fixture
def open_gates() -> Iterator[List[threading.Event]]:
    """Events that are always set on teardown so no worker stays blocked."""
    gates: List[threading.Event] = []
    yield gates
    for gate in gates:
        gate.set()


@pytest.fixture(autouse=True)
def reset_ocrpdf_logger() -> Iterator[None]:
    """Drop handlers installed by configure_logging during a test."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level, propagate = logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate

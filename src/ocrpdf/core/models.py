"""Data models passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class WorkItem:
    """One page image to recognize.

    ``sequence_number`` is the zero-based rank of the image in sorted
    order; numbers are dense (0..N-1) and never reassigned.
    """

    sequence_number: int
    source: Path


@dataclass(order=True)
class JobResult:
    """Outcome of recognizing one WorkItem.

    Results order by ``sequence_number`` only, so they can be kept in a
    heap directly. A result with ``error`` set carries no usable payload.
    """

    sequence_number: int
    payload: bytes = field(default=b"", compare=False)
    error: Optional[str] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return not self.error

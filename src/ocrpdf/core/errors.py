"""Exception types raised by ocrpdf."""

from __future__ import annotations

from typing import Optional


class OcrPdfError(Exception):
    """Base class for user-facing pipeline errors."""


class ExtractionError(OcrPdfError):
    """The page-image extraction tool failed."""


class NoArtifactsError(ExtractionError):
    """Extraction produced no page images."""


class JobError(OcrPdfError):
    """Recognition failed for one page.

    The message is already tagged with the page number.
    """

    def __init__(self, message: str, sequence_number: Optional[int] = None) -> None:
        super().__init__(message)
        self.sequence_number = sequence_number


class FilterSpecError(OcrPdfError):
    """A filter rule file could not be parsed."""


class PendingSetCorrupted(RuntimeError):
    """Internal ordering invariant violated.

    Raised on a duplicate sequence number or results left over once the
    result source is exhausted. This is a defect, not a runtime condition,
    so it does not derive from OcrPdfError.
    """

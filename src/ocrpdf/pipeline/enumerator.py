"""Turns a directory of page images into numbered work items."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from ocrpdf.core.errors import NoArtifactsError
from ocrpdf.core.logging import get_logger
from ocrpdf.core.models import WorkItem

LOGGER = get_logger(__name__)

DEFAULT_PATTERN = "*.tif"


def enumerate_work_items(
    directory: Path,
    pattern: str = DEFAULT_PATTERN,
    source_name: Optional[str] = None,
) -> List[WorkItem]:
    """List page images in ``directory`` as sequentially numbered work items.

    Images are ordered by file name, which the extractors choose so that
    lexicographic order matches page order.

    Args:
        directory: Directory populated by an extractor.
        pattern: Glob pattern selecting page images.
        source_name: Document name used in the error message.

    Returns:
        Work items numbered 0..N-1.

    Raises:
        NoArtifactsError: If no file matches.
    """
    files = sorted(str(p) for p in Path(directory).glob(pattern) if p.is_file())

    if not files:
        raise NoArtifactsError(f"No images found in {source_name or directory}")

    LOGGER.info(f"Found {len(files)} page image(s)")
    return [WorkItem(sequence_number=i, source=Path(f)) for i, f in enumerate(files)]

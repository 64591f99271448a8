"""Page-image extraction from PDF files with poppler's ``pdfimages``."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from ocrpdf.core.logging import get_logger
from ocrpdf.plugins.extractors.base import PAGE_PREFIX, ExtractorPlugin

LOGGER = get_logger(__name__)

# pdfimages numbers its output with "%03d", which stops sorting by name
# at image 1000
_OUTPUT_NAME = re.compile(rf"{PAGE_PREFIX}-(\d+)\.tif")
_PADDED_NAME = f"{PAGE_PREFIX}-{{:06d}}.tif"


class PdfImagesExtractor(ExtractorPlugin):
    """Dumps the embedded images of a scanned PDF as TIFF files.

    A scanned PDF holds one image per page. The images are renamed to
    ``page-000000.tif``, ``page-000001.tif``, ... so that name order is
    page order for any document size.
    """

    @property
    def name(self) -> str:
        return "pdfimages"

    @property
    def suffixes(self) -> List[str]:
        return [".pdf"]

    @property
    def binary(self) -> str:
        return self._config.tools.pdfimages

    def build_command(self, input_path: Path, work_dir: Path) -> List[str]:
        first, last = self._page_range()
        cmd = [self.binary, "-tiff", "-f", str(first)]
        if last is not None:
            cmd += ["-l", str(last)]
        cmd += [str(input_path), str(work_dir / PAGE_PREFIX)]
        return cmd

    def extract(self, input_path: Path, work_dir: Path) -> None:
        super().extract(input_path, work_dir)
        renumber_images(work_dir)


def renumber_images(work_dir: Path) -> int:
    """Rename ``page-N.tif`` files to a fixed six-digit width.

    Returns:
        Number of files renamed.
    """
    renamed = 0
    for path in sorted(Path(work_dir).iterdir()):
        m = _OUTPUT_NAME.fullmatch(path.name)
        if not m:
            continue
        target = path.with_name(_PADDED_NAME.format(int(m.group(1))))
        if target != path:
            path.rename(target)
            renamed += 1
    LOGGER.debug(f"Renumbered {renamed} image(s) in {work_dir}")
    return renamed

"""Page-image extraction from DjVu files with DjVuLibre's ``ddjvu``."""

from __future__ import annotations

from pathlib import Path
from typing import List

from ocrpdf.plugins.extractors.base import PAGE_PREFIX, ExtractorPlugin


class DjvuExtractor(ExtractorPlugin):
    """Renders each requested DjVu page to its own TIFF file.

    Page files are numbered with six zero-padded digits so that name
    order is page order for any document size.
    """

    @property
    def name(self) -> str:
        return "ddjvu"

    @property
    def suffixes(self) -> List[str]:
        return [".djvu", ".djv"]

    @property
    def binary(self) -> str:
        return self._config.tools.ddjvu

    def build_command(self, input_path: Path, work_dir: Path) -> List[str]:
        first, last = self._page_range()
        pages = f"{first}-{last}" if last is not None else f"{first}-$"
        return [
            self.binary,
            "-format=tiff",
            "-eachpage",
            f"-page={pages}",
            str(input_path),
            str(work_dir / f"{PAGE_PREFIX}-%06d.tif"),
        ]

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from ocrpdf.config.models import OcrPdfConfig
from ocrpdf.core.errors import ExtractionError
from ocrpdf.core.logging import get_logger
from ocrpdf.core.tools import describe_failure, find_tool, run_tool

LOGGER = get_logger(__name__)

# Name prefix of the page images written into the working directory
PAGE_PREFIX = "page"


class ExtractorPlugin(ABC):
    """Base class for page-image extractors.

    An extractor populates a working directory with one TIFF image per
    page, named so that lexicographic order matches page order. It does
    not look at the images it writes.
    """

    def __init__(self, config: OcrPdfConfig) -> None:
        self._config = config

    @property
    @abstractmethod
    def name(self) -> str:
        """Plugin identifier (e.g., 'pdfimages')."""

    @property
    @abstractmethod
    def suffixes(self) -> List[str]:
        """Lower-case input file suffixes handled by this plugin."""

    @property
    @abstractmethod
    def binary(self) -> str:
        """Configured executable name or path."""

    @abstractmethod
    def build_command(self, input_path: Path, work_dir: Path) -> List[str]:
        """Command line extracting the configured page range."""

    def ensure_binary(self) -> Path:
        """Locate the tool executable.

        Raises:
            ExtractionError: If it is not installed.
        """
        path = find_tool(self.binary)
        if path is None:
            raise ExtractionError(f"{self.binary} not found in PATH")
        return path

    def extract(self, input_path: Path, work_dir: Path) -> None:
        """Write page images for ``input_path`` into ``work_dir``.

        Raises:
            ExtractionError: If the tool cannot be run or fails.
        """
        cmd = self.build_command(input_path, work_dir)
        LOGGER.info(f"Extracting page images with {self.name}...")

        try:
            result = run_tool(cmd)
        except OSError as e:
            raise ExtractionError(f"{self.binary}: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or b"").decode("utf-8", errors="replace").strip()
            raise ExtractionError(stderr or f"{self.name}: {describe_failure(result)}")

    def _page_range(self) -> Tuple[int, Optional[int]]:
        return self._config.first_page, self._config.effective_last_page()

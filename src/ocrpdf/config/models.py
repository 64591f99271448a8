"""Configuration data models for ocrpdf.

One OcrPdfConfig value is built per run and passed explicitly to every
component that needs it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

# Highest page number accepted for --first / --last
MAX_PAGES = 3000

DEFAULT_LANGUAGE = "eng"


@dataclass
class ToolsConfig:
    """Executables used for extraction and recognition."""

    pdfimages: str = "pdfimages"
    ddjvu: str = "ddjvu"
    tesseract: str = "tesseract"


@dataclass
class OcrPdfConfig:
    """Complete ocrpdf configuration.

    Example .ocrpdf.yml:
        language: rus+eng
        workers: 4
        filters:
          - rules/common.txt
        tools:
          tesseract: /opt/tesseract/bin/tesseract
        tesseract_args: ["--psm", "6"]
    """

    first_page: int = 1
    last_page: Optional[int] = None  # None = last page of the document
    language: str = DEFAULT_LANGUAGE
    filters: List[str] = field(default_factory=list)
    output: Optional[str] = None  # None = stdout
    workers: int = 0  # 0 = one per CPU
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    tesseract_args: List[str] = field(default_factory=list)

    # Metadata (not from YAML, set by loader)
    _config_sources: List[str] = field(default_factory=list, repr=False)

    def effective_last_page(self) -> Optional[int]:
        """Last page bound passed to the extractor.

        A last page before the first page is ignored.
        """
        if self.last_page is not None and self.last_page >= self.first_page:
            return self.last_page
        return None

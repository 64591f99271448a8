"""Page-image extractor plugins, selected by input file suffix."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Type

from ocrpdf.config.models import OcrPdfConfig
from ocrpdf.plugins.extractors.base import ExtractorPlugin
from ocrpdf.plugins.extractors.djvu import DjvuExtractor
from ocrpdf.plugins.extractors.pdfimages import PdfImagesExtractor

EXTRACTOR_PLUGINS: Dict[str, Type[ExtractorPlugin]] = {
    "pdfimages": PdfImagesExtractor,
    "ddjvu": DjvuExtractor,
}

SUFFIX_EXTRACTOR: Dict[str, str] = {
    ".pdf": "pdfimages",
    ".djvu": "ddjvu",
    ".djv": "ddjvu",
}


def supported_suffixes() -> List[str]:
    return sorted(SUFFIX_EXTRACTOR)


def get_extractor_plugin(name: str, config: OcrPdfConfig) -> Optional[ExtractorPlugin]:
    """Instantiate an extractor by name, or None if unknown."""
    cls = EXTRACTOR_PLUGINS.get(name)
    return cls(config) if cls else None


def get_extractor_for(input_path: Path, config: OcrPdfConfig) -> Optional[ExtractorPlugin]:
    """Pick the extractor for ``input_path`` from its suffix."""
    name = SUFFIX_EXTRACTOR.get(input_path.suffix.lower())
    return get_extractor_plugin(name, config) if name else None


__all__ = [
    "ExtractorPlugin",
    "PdfImagesExtractor",
    "DjvuExtractor",
    "get_extractor_plugin",
    "get_extractor_for",
    "supported_suffixes",
]

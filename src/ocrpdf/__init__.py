"""ocrpdf - parallel OCR of scanned PDF and DjVu documents."""

from __future__ import annotations

__version__ = "0.5.0"

__all__ = ["__version__"]

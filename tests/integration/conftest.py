"""Pytest configuration for integration tests.

Integration tests drive the real external tools and are skipped when a
tool is not installed.
"""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest


def _tool_available(name: str) -> bool:
    return shutil.which(name) is not None


tesseract_available = pytest.mark.skipif(
    not _tool_available("tesseract"),
    reason="tesseract not installed",
)

pdfimages_available = pytest.mark.skipif(
    not _tool_available("pdfimages"),
    reason="pdfimages (poppler-utils) not installed",
)

ddjvu_available = pytest.mark.skipif(
    not _tool_available("ddjvu"),
    reason="ddjvu (djvulibre) not installed",
)


def write_blank_pbm(path: Path, width: int = 64, height: int = 32) -> Path:
    """Write an all-white bitmap that tesseract can read."""
    row = " ".join("0" * width)
    path.write_text(f"P1\n{width} {height}\n" + "\n".join(row for _ in range(height)) + "\n")
    return path


def write_imageless_pdf(path: Path) -> Path:
    """Write a one-page PDF with no embedded images."""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref}\n%%EOF\n".encode()

    path.write_bytes(bytes(out))
    return path

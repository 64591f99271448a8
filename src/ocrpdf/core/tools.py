"""Helpers for invoking the external command-line tools.

ocrpdf never links against image or OCR libraries; it drives
``pdfimages``, ``ddjvu`` and ``tesseract`` as subprocesses.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from ocrpdf.core.logging import get_logger

LOGGER = get_logger(__name__)


def find_tool(name: str) -> Optional[Path]:
    """Find an executable in PATH.

    Args:
        name: Executable name or path.

    Returns:
        Path to the executable, or None if not found.
    """
    found = shutil.which(name)
    return Path(found) if found else None


def run_tool(cmd: Sequence[str]) -> subprocess.CompletedProcess:
    """Run a tool to completion, capturing raw stdout and stderr bytes.

    Never raises on a non-zero exit status; callers inspect ``returncode``.

    Raises:
        OSError: If the executable cannot be launched.
    """
    args: List[str] = [str(a) for a in cmd]
    LOGGER.debug(f"Running: {' '.join(args)}")
    return subprocess.run(args, capture_output=True, check=False)


def first_line(diagnostic: bytes) -> str:
    """Return the first line of a diagnostic stream, stripped.

    Multi-line diagnostics are cut at the first newline so that
    user-facing errors stay short.
    """
    n = diagnostic.find(b"\n")
    if n > 0:
        diagnostic = diagnostic[:n]
    return diagnostic.strip().decode("utf-8", errors="replace")


def describe_failure(result: subprocess.CompletedProcess) -> str:
    """Short description of a failed tool run."""
    message = first_line(result.stderr or b"")
    if message:
        return message
    return f"exit status {result.returncode}"

"""Delivery of the final text to stdout or a file."""

from __future__ import annotations

import sys
from typing import BinaryIO, Optional


def write_output(data: bytes, output: Optional[str] = None, stdout: Optional[BinaryIO] = None) -> None:
    """Write ``data`` to the named file (truncating it) or to stdout.

    Raises:
        OSError: On any I/O failure; reported as-is by the caller.
    """
    if output:
        with open(output, "wb") as f:
            f.write(data)
        return

    stream = stdout or sys.stdout.buffer
    stream.write(data)
    stream.flush()

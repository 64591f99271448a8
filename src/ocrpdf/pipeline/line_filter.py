"""Applies the line filter to released payloads and accumulates the text."""

from __future__ import annotations

from typing import Callable, Iterator

ByteFilter = Callable[[bytes], bytes]


def identity(data: bytes) -> bytes:
    return data


def _rstrip(line: bytes) -> bytes:
    # Unicode whitespace (NBSP, U+3000, ...) counts; invalid bytes pass through
    return line.decode("utf-8", "surrogateescape").rstrip().encode("utf-8", "surrogateescape")


def split_lines(payload: bytes) -> Iterator[bytes]:
    """Split on newlines, trimming trailing whitespace from each line.

    A final line without a newline still counts; an empty payload has no
    lines.
    """
    lines = payload.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    for line in lines:
        yield _rstrip(line)


class LineFilterStage:
    """Accumulates filtered lines in release order.

    A line that the filter reduces to nothing is still emitted as an
    empty line. ``text()`` applies the text filter once to everything
    accumulated so far.
    """

    def __init__(self, line_filter: ByteFilter = identity, text_filter: ByteFilter = identity) -> None:
        self._line_filter = line_filter
        self._text_filter = text_filter
        self._buffer = bytearray()
        self._lines = 0

    @property
    def line_count(self) -> int:
        return self._lines

    def feed(self, payload: bytes) -> None:
        for line in split_lines(payload):
            self._buffer += self._line_filter(line)
            self._buffer += b"\n"
            self._lines += 1

    __call__ = feed

    def raw(self) -> bytes:
        """Accumulated text before the text filter."""
        return bytes(self._buffer)

    def text(self) -> bytes:
        return self._text_filter(bytes(self._buffer))

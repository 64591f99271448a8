"""Tokenizer for filter rule files.

Tokens are identifiers, double-quoted strings with backslash escapes,
back-quoted raw strings and newlines. Spaces, tabs and carriage returns
separate tokens; ``//`` and ``/* */`` comments are skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class TokenType(str, Enum):
    IDENT = "ident"
    STRING = "string"
    NEWLINE = "newline"
    OTHER = "other"
    EOF = "eof"


@dataclass
class Token:
    type: TokenType
    text: str
    line: int
    value: str = ""


class TokenizeError(Exception):
    """Raised with the line number of a malformed token."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(message)
        self.line = line


_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_QUOTED = re.compile(r'"(?:[^"\\\n]|\\.)*"')
_RAW = re.compile(r"`[^`]*`")
_ESCAPE = re.compile(
    r"\\(?:x([0-9A-Fa-f]{2})|u([0-9A-Fa-f]{4})|U([0-9A-Fa-f]{8})|([0-7]{3})|(.))",
    re.DOTALL,
)
_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}


def _byte_char(value: int) -> str:
    # Bytes >= 0x80 are kept as surrogate escapes until the whole literal
    # is re-decoded, so "\xc2\xa0" yields U+00A0 rather than two code points
    return chr(value) if value < 0x80 else chr(0xDC00 + value)


def unquote(literal: str) -> str:
    """Decode a double-quoted or back-quoted string literal.

    ``\\x`` and octal escapes denote single bytes of the UTF-8 text;
    bytes that do not form valid UTF-8 survive as surrogate escapes.

    Raises:
        ValueError: On an unknown or out-of-range escape sequence.
    """
    if literal.startswith("`"):
        return literal[1:-1].replace("\r", "")

    def replace(m: re.Match) -> str:
        hex2, hex4, hex8, octal, simple = m.groups()
        if hex2:
            return _byte_char(int(hex2, 16))
        if octal:
            value = int(octal, 8)
            if value > 0xFF:
                raise ValueError(f"octal escape value \\{octal} > 255")
            return _byte_char(value)
        if hex4 or hex8:
            code = int(hex4 or hex8, 16)
            if 0xD800 <= code <= 0xDFFF or code > 0x10FFFF:
                raise ValueError(f"escape sequence {m.group()} is not a valid code point")
            return chr(code)
        if simple in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[simple]
        raise ValueError(f"invalid escape sequence \\{simple}")

    text = _ESCAPE.sub(replace, literal[1:-1])
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "surrogateescape")


def tokenize(source: str) -> Iterator[Token]:
    """Yield tokens from ``source``, ending with a single EOF token.

    Raises:
        TokenizeError: On an unterminated string or comment.
    """
    pos = 0
    line = 1
    size = len(source)

    while pos < size:
        ch = source[pos]

        if ch in " \t\r":
            pos += 1
        elif ch == "\n":
            yield Token(TokenType.NEWLINE, "\n", line)
            line += 1
            pos += 1
        elif source.startswith("//", pos):
            end = source.find("\n", pos)
            pos = size if end < 0 else end
        elif source.startswith("/*", pos):
            end = source.find("*/", pos + 2)
            if end < 0:
                raise TokenizeError("comment not terminated", line)
            line += source.count("\n", pos, end)
            pos = end + 2
        elif ch == '"':
            m = _QUOTED.match(source, pos)
            if not m:
                raise TokenizeError("literal not terminated", line)
            try:
                value = unquote(m.group())
            except ValueError as e:
                raise TokenizeError(str(e), line) from e
            yield Token(TokenType.STRING, m.group(), line, value)
            pos = m.end()
        elif ch == "`":
            m = _RAW.match(source, pos)
            if not m:
                raise TokenizeError("literal not terminated", line)
            yield Token(TokenType.STRING, m.group(), line, unquote(m.group()))
            line += m.group().count("\n")
            pos = m.end()
        else:
            m = _IDENT.match(source, pos)
            if m:
                yield Token(TokenType.IDENT, m.group(), line, m.group())
                pos = m.end()
            else:
                yield Token(TokenType.OTHER, ch, line, ch)
                pos += 1

    yield Token(TokenType.EOF, "", line)

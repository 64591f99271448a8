"""Substitution rules and their compilation into filter functions.

Rule format, one per line::

    scope type `match` "replacement"

where scope is ``line`` or ``text`` and type is ``word`` (literal
replacement) or ``regex``. In regex replacements ``$1``, ``${1}``,
``$name`` and ``${name}`` refer to groups and ``$$`` is a literal dollar.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Tuple

from ocrpdf.core.errors import FilterSpecError
from ocrpdf.core.logging import get_logger
from ocrpdf.filters.tokenizer import Token, TokenizeError, TokenType, tokenize
from ocrpdf.pipeline.line_filter import ByteFilter, identity

LOGGER = get_logger(__name__)

RULE_SCOPES = ("line", "text")
RULE_TYPES = ("word", "regex")

_TEMPLATE_REF = re.compile(r"\$(?:(\$)|\{(\w+)\}|(\w+))")

# Round-trips arbitrary bytes through str for regex matching
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def make_word_rule(match: bytes, subst: bytes) -> ByteFilter:
    def rule(s: bytes) -> bytes:
        return s.replace(match, subst)

    return rule


def expand_template(template: str, m: re.Match) -> str:
    """Expand ``$``-style group references in ``template`` for match ``m``.

    References to missing or unmatched groups expand to nothing.
    """

    def replace(ref: re.Match) -> str:
        dollar, braced, bare = ref.groups()
        if dollar:
            return "$"
        name = braced or bare
        try:
            group = m.group(int(name) if name.isdigit() else name)
        except IndexError:
            return ""
        return group or ""

    return _TEMPLATE_REF.sub(replace, template)


def make_regex_rule(pattern: "re.Pattern[str]", subst: str) -> ByteFilter:
    # Plain strings passed to re.sub would have their backslashes
    # interpreted, so the replacement is always a function
    if "$" in subst:
        def replacement(m: re.Match) -> str:
            return expand_template(subst, m)
    else:
        def replacement(m: re.Match) -> str:
            return subst

    def rule(s: bytes) -> bytes:
        text = s.decode(_ENCODING, _ERRORS)
        return pattern.sub(replacement, text).encode(_ENCODING, _ERRORS)

    return rule


def compose(rules: List[ByteFilter]) -> ByteFilter:
    """Chain rules in order; no rules gives the identity function."""
    if not rules:
        return identity
    if len(rules) == 1:
        return rules[0]

    def apply(s: bytes) -> bytes:
        for rule in rules:
            s = rule(s)
        return s

    return apply


class RuleList:
    """Collects line-scope and text-scope rules from rule files."""

    def __init__(self) -> None:
        self.line_rules: List[ByteFilter] = []
        self.text_rules: List[ByteFilter] = []

    def __len__(self) -> int:
        return len(self.line_rules) + len(self.text_rules)

    def add(self, source: str, name: str) -> None:
        """Parse rule definitions from ``source``.

        Args:
            source: Rule file contents.
            name: File name used in error messages.

        Raises:
            FilterSpecError: On the first syntax or regex error.
        """
        try:
            self._parse(_TokenStream(tokenize(source)), name)
        except TokenizeError as e:
            raise _spec_error(name, e.line, str(e)) from e

    def add_file(self, path: Path) -> None:
        try:
            source = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FilterSpecError(f"Cannot read filter file \"{path}\": {e}") from e
        self.add(source, str(path))

    def line_filter(self) -> ByteFilter:
        return compose(self.line_rules)

    def text_filter(self) -> ByteFilter:
        return compose(self.text_rules)

    def _parse(self, tokens: "_TokenStream", name: str) -> None:
        tok = tokens.skip_newlines()

        while tok.type != TokenType.EOF:
            if tok.type != TokenType.IDENT:
                raise _invalid_token(name, "rule scope", tok)
            rule_scope = tok.value

            tok = tokens.next()
            if tok.type != TokenType.IDENT:
                raise _invalid_token(name, "rule type", tok)
            rule_type = tok.value

            tok = tokens.next()
            if tok.type != TokenType.STRING:
                raise _invalid_token(name, "regular expression or word string", tok)
            match = tok.value
            if not match:
                raise _spec_error(name, tok.line, "Regular expression or word cannot be empty")

            tok = tokens.next()
            if tok.type != TokenType.STRING:
                raise _invalid_token(name, "substitution string", tok)
            subst = tok.value

            if rule_type == "word":
                rule = make_word_rule(
                    match.encode(_ENCODING, _ERRORS), subst.encode(_ENCODING, _ERRORS)
                )
            elif rule_type == "regex":
                try:
                    pattern = re.compile(match)
                except re.error as e:
                    raise _spec_error(name, tok.line, str(e)) from e
                rule = make_regex_rule(pattern, subst)
            else:
                raise _spec_error(name, tok.line, f"Unknown rule type: {rule_type}")

            if rule_scope == "line":
                self.line_rules.append(rule)
            elif rule_scope == "text":
                self.text_rules.append(rule)
            else:
                raise _spec_error(name, tok.line, f"Unknown rule scope: {rule_scope}")

            tok = tokens.next()
            if tok.type == TokenType.NEWLINE:
                tok = tokens.skip_newlines()
            elif tok.type != TokenType.EOF:
                raise _invalid_token(name, "newline", tok)


class _TokenStream:
    def __init__(self, tokens: Iterator[Token]) -> None:
        self._tokens = tokens
        self._last: Token = Token(TokenType.EOF, "", 1)

    def next(self) -> Token:
        # tokenize() ends with EOF; keep returning it once exhausted
        self._last = next(self._tokens, self._last)
        return self._last

    def skip_newlines(self) -> Token:
        tok = self.next()
        while tok.type == TokenType.NEWLINE:
            tok = self.next()
        return tok


def _spec_error(name: str, line: int, message: str) -> FilterSpecError:
    return FilterSpecError(f"Rule definition in \"{name}\", line {line}: {message}.")


def _invalid_token(name: str, expected: str, tok: Token) -> FilterSpecError:
    found = '"' + tok.text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n") + '"'
    return _spec_error(name, tok.line, f"Expected {expected}, but found {found}")


def build_filters(paths: Iterable[Path]) -> Tuple[ByteFilter, ByteFilter]:
    """Compile rule files into ``(line_filter, text_filter)``.

    Files are applied in the given order. With no files both filters are
    the identity function.

    Raises:
        FilterSpecError: If a file cannot be read or parsed.
    """
    rules = RuleList()
    for path in paths:
        rules.add_file(Path(path))
        LOGGER.debug(f"Loaded filter rules from {path}")

    LOGGER.info(
        f"Filters: {len(rules.line_rules)} line rule(s), {len(rules.text_rules)} text rule(s)"
    )
    return rules.line_filter(), rules.text_filter()

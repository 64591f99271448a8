"""Tests for filter rules."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from ocrpdf.core.errors import FilterSpecError
from ocrpdf.filters.rules import (
    RuleList,
    build_filters,
    compose,
    expand_template,
    make_regex_rule,
    make_word_rule,
)
from ocrpdf.pipeline.line_filter import identity


class TestRuleFunctions:
    """Tests for individual rule builders."""

    def test_word_rule_replaces_all(self) -> None:
        rule = make_word_rule(b"teh", b"the")
        assert rule(b"teh cat and teh dog") == b"the cat and the dog"

    def test_regex_rule_with_groups(self) -> None:
        rule = make_regex_rule(re.compile(r"(\w+)@(\w+)"), "$2 at ${1}")
        assert rule(b"user@host") == b"host at user"

    def test_regex_rule_named_groups_and_dollar(self) -> None:
        rule = make_regex_rule(re.compile(r"(?P<amount>\d+) USD"), "$$${amount}")
        assert rule(b"costs 25 USD") == b"costs $25"

    def test_regex_replacement_backslashes_are_literal(self) -> None:
        rule = make_regex_rule(re.compile(r"/"), "\\")
        assert rule(b"a/b") == b"a\\b"

    def test_regex_rule_keeps_invalid_utf8(self) -> None:
        rule = make_regex_rule(re.compile(r"x"), "y")
        assert rule(b"\xffx\xfe") == b"\xffy\xfe"

    def test_missing_group_expands_to_nothing(self) -> None:
        m = re.match(r"(a)(b)?", "a")
        assert expand_template("[$1|$2|$9|$nope]", m) == "[a|||]"

    def test_compose_order(self) -> None:
        rule = compose([make_word_rule(b"a", b"b"), make_word_rule(b"b", b"c")])
        assert rule(b"a") == b"c"

    def test_compose_empty_is_identity(self) -> None:
        assert compose([]) is identity


class TestRuleList:
    """Tests for parsing rule definitions."""

    def test_parses_scopes_and_types(self) -> None:
        rules = RuleList()
        rules.add(
            "// OCR fixes\n"
            "\n"
            'line word "0CR" "OCR"\n'
            "line regex `\\s+$` \"\"\n"
            'text regex `-\\n(\\w)` "$1"\n',
            "fixes.rules",
        )

        assert len(rules.line_rules) == 2
        assert len(rules.text_rules) == 1
        assert rules.line_filter()(b"0CR  ") == b"OCR"
        assert rules.text_filter()(b"recog-\nnition\n") == b"recognition\n"

    def test_byte_escapes_match_utf8_text(self) -> None:
        rules = RuleList()
        rules.add(
            'line word "\\xc2\\xa0" " "\n'
            'line regex "\\303\\251+" "e"\n',
            "nbsp.rules",
        )

        line_filter = rules.line_filter()

        assert line_filter("a\u00a0b".encode()) == b"a b"
        assert line_filter("caf\u00e9\u00e9".encode()) == b"cafe"

    def test_word_rule_with_invalid_utf8_byte(self) -> None:
        rules = RuleList()
        rules.add('line word "\\xff" "?"\n', "bytes.rules")
        assert rules.line_filter()(b"a\xffb") == b"a?b"

    def test_last_rule_without_newline(self) -> None:
        rules = RuleList()
        rules.add('line word "a" "b"', "x")
        assert len(rules) == 1

    def test_empty_source_has_no_rules(self) -> None:
        rules = RuleList()
        rules.add("// nothing here\n\n", "empty")
        assert rules.line_filter() is identity
        assert rules.text_filter() is identity

    @pytest.mark.parametrize(
        "source,message",
        [
            ('"line" word "a" "b"', 'line 1: Expected rule scope, but found "\\"line\\""'),
            ('line "word" "a" "b"', "line 1: Expected rule type"),
            ("line word a \"b\"", 'line 1: Expected regular expression or word string, but found "a"'),
            ('line word "a" b', "line 1: Expected substitution string"),
            ('line word "a" "b" "c"', "line 1: Expected newline"),
            ('\nline word "" "b"', "line 2: Regular expression or word cannot be empty"),
            ('line phrase "a" "b"', "line 1: Unknown rule type: phrase"),
            ('page word "a" "b"', "line 1: Unknown rule scope: page"),
            ('line word "a"\n"b"', 'line 1: Expected substitution string, but found "\\n"'),
        ],
    )
    def test_syntax_errors(self, source: str, message: str) -> None:
        with pytest.raises(FilterSpecError) as exc_info:
            RuleList().add(source, "my.rules")

        text = str(exc_info.value)
        assert text.startswith('Rule definition in "my.rules", ')
        assert message in text
        assert text.endswith(".")

    def test_invalid_regex(self) -> None:
        with pytest.raises(FilterSpecError, match='Rule definition in "r", line 1: '):
            RuleList().add('line regex "(unclosed" "x"', "r")

    def test_tokenizer_error_is_spec_error(self) -> None:
        with pytest.raises(FilterSpecError, match="line 2: literal not terminated"):
            RuleList().add('line word "a" "b"\nline word "oops', "r")

    def test_type_checked_before_scope(self) -> None:
        with pytest.raises(FilterSpecError, match="Unknown rule type"):
            RuleList().add('page phrase "a" "b"', "r")


class TestBuildFilters:
    """Tests for build_filters."""

    def test_no_files(self) -> None:
        line_filter, text_filter = build_filters([])
        assert line_filter is identity
        assert text_filter is identity

    def test_files_applied_in_order(self, tmp_path: Path) -> None:
        first = tmp_path / "first.rules"
        first.write_text('line word "a" "b"\n')
        second = tmp_path / "second.rules"
        second.write_text('line word "b" "c"\ntext word "c\\n" "C\\n"\n')

        line_filter, text_filter = build_filters([first, second])

        assert line_filter(b"a") == b"c"
        assert text_filter(b"c\n") == b"C\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FilterSpecError, match="Cannot read filter file"):
            build_filters([tmp_path / "missing.rules"])

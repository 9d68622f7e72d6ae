"""Tests for the pasted sheet tokenizer."""

import pytest

from songsheet.importer.tokenizer import tokenize_line


class TestTokenizeLineBasic:
    """Basic tokenization tests."""

    def test_token_spans(self) -> None:
        """Test that token spans are correct."""
        tokens = tokenize_line("Gm     C")
        assert [(t.text, t.start, t.end) for t in tokens] == [("Gm", 0, 2), ("C", 7, 8)]

    def test_hello_world(self) -> None:
        tokens = tokenize_line("Hello  world")
        assert [(t.text, t.start, t.end) for t in tokens] == [("Hello", 0, 5), ("world", 7, 12)]

    def test_kind_is_other(self) -> None:
        """Tokens are unclassified until the chord detector runs."""
        assert {t.kind for t in tokenize_line("Gm C Hello")} == {"other"}


class TestTokenizeLineWhitespace:
    """Whitespace handling tests."""

    def test_leading_spaces(self) -> None:
        tokens = tokenize_line("   Hello")
        assert (tokens[0].start, tokens[0].end) == (3, 8)

    def test_tabs_separate_tokens(self) -> None:
        assert [t.text for t in tokenize_line("G\tD")] == ["G", "D"]

    @pytest.mark.parametrize("line", ["", "     ", "\t"])
    def test_no_tokens(self, line: str) -> None:
        assert tokenize_line(line) == []

    def test_punctuation_attached(self) -> None:
        """Punctuation stays attached to its word."""
        assert [t.text for t in tokenize_line("Hello, world!")] == ["Hello,", "world!"]

"""Tests for inline chord parsing in lyrics."""

import pytest

from songsheet.lyrics import (
    LinePair,
    extract_chords,
    insert_chord,
    parse_line_for_render,
    transpose_lyrics,
)


class TestParseLineForRender:
    """Test splitting a lyrics line into chord and lyric lines."""

    @pytest.mark.parametrize("line", ["", "   ", "\t"])
    def test_blank_lines(self, line: str) -> None:
        assert parse_line_for_render(line) == LinePair(" ", " ")

    def test_leading_chord(self) -> None:
        pair = parse_line_for_render("[G]Hello")
        assert pair.chord_line.startswith("G")
        assert pair.lyric_line == " Hello"

    def test_chord_columns_line_up(self) -> None:
        pair = parse_line_for_render("[C]Test [G]line")
        assert pair == LinePair("C     G", " Test  line")
        g_column = pair.chord_line.index("G")
        assert g_column == 1 + len("Test ")
        assert pair.lyric_line[g_column + 1 :].startswith("line")

    def test_plain_lyrics(self) -> None:
        assert parse_line_for_render("No chords here") == LinePair(" ", "No chords here")

    def test_chord_only_line(self) -> None:
        assert parse_line_for_render("[Am] [F]") == LinePair("Am F", " ")

    def test_trailing_chord(self) -> None:
        pair = parse_line_for_render("End[D]")
        assert pair.chord_line == "   D"
        assert pair.lyric_line == "End"

    def test_unclosed_bracket_is_text(self) -> None:
        assert parse_line_for_render("Hello [G") == LinePair(" ", "Hello [G")


class TestTransposeLyrics:
    def test_every_chord_transposed(self) -> None:
        assert transpose_lyrics("[G]Hello [Em]there\n[C]Bye", 2) == "[A]Hello [F#m]there\n[D]Bye"

    def test_zero_is_unchanged(self) -> None:
        assert transpose_lyrics("[Bb]Hi", 0) == "[Bb]Hi"

    def test_unknown_symbols_kept(self) -> None:
        assert transpose_lyrics("[N.C.]Hush [G]now", 1) == "[N.C.]Hush [G#]now"

    def test_slash_bass_optional(self) -> None:
        assert transpose_lyrics("[G/B]x", 2) == "[A/B]x"
        assert transpose_lyrics("[G/B]x", 2, bass=True) == "[A/C#]x"


class TestExtractChords:
    def test_in_order(self) -> None:
        assert extract_chords("[G]a [D]b\n[Em]c") == ["G", "D", "Em"]

    def test_none(self) -> None:
        assert extract_chords("plain words") == []


class TestInsertChord:
    def test_insert_at_caret(self) -> None:
        assert insert_chord("Hello world", 6, "C") == ("Hello [C]world", 9)

    @pytest.mark.parametrize("index,expected", [(-5, "[G]Hi"), (50, "Hi[G]")])
    def test_caret_clamped(self, index: int, expected: str) -> None:
        assert insert_chord("Hi", index, "G")[0] == expected

"""Tests for importing pasted chord sheets."""

import pytest

from songsheet.importer import parse_pasted_song
from songsheet.importer.parser import (
    build_block,
    convert_lyric_lines,
    extract_section_name,
    merge_chord_lyric_lines,
    preprocess,
    split_section_parts,
    split_sections,
    tuning_from_line,
)
from songsheet.models import LyricsBlock, MusicalContext, TabBlock, TabNote


class TestPastedSheet:
    """Test importing a full sheet copied from a chord site."""

    def test_metadata(self, pasted_sheet: str) -> None:
        result = parse_pasted_song(pasted_sheet)
        assert (result.metadata.capo, result.metadata.tuning) == (2, "DROP_D")

    def test_blocks(self, pasted_sheet: str) -> None:
        blocks = parse_pasted_song(pasted_sheet).blocks
        assert [(b.id, b.label, type(b)) for b in blocks] == [
            ("block_1", "Intro", LyricsBlock),
            ("block_2", "Verse 1", LyricsBlock),
            ("block_3", "Chorus", LyricsBlock),
            ("block_4", "Solo", TabBlock),
        ]

    def test_standalone_chord_line_bracketed(self, pasted_sheet: str) -> None:
        intro = parse_pasted_song(pasted_sheet).blocks[0]
        assert intro.content == "[G]    [D]    [Em]   [C]"

    def test_chords_merged_into_lyrics(self, pasted_sheet: str) -> None:
        verse = parse_pasted_song(pasted_sheet).blocks[1]
        assert verse.content == "[G]Walking down the [D]road tonight\n[Em]Every light is [C]burning bright"

    def test_comment_kept(self, pasted_sheet: str) -> None:
        chorus = parse_pasted_song(pasted_sheet).blocks[2]
        assert chorus.content == "[C]Hold on, [G]hold on\n(repeat x2)"

    def test_tab_section(self, pasted_sheet: str) -> None:
        solo = parse_pasted_song(pasted_sheet).blocks[3]
        assert solo.strings == 6
        assert sorted(solo.notes, key=lambda n: (n.string, n.position)) == [
            TabNote(string=0, fret=5, position=75),
            TabNote(string=1, fret=5, position=55),
            TabNote(string=1, fret=7, position=95),
            TabNote(string=2, fret=2, position=35),
        ]

    def test_junk_dropped(self, pasted_sheet: str) -> None:
        blocks = parse_pasted_song(pasted_sheet).blocks
        text = "\n".join(b.content for b in blocks if isinstance(b, LyricsBlock))
        assert "Page" not in text
        assert "ultimate-guitar" not in text


class TestPreprocess:
    def test_settings_removed(self) -> None:
        lines, meta = preprocess("capo 4\r\nTuning: D Standard\r\nHello")
        assert lines == ["Hello"]
        assert (meta.capo, meta.tuning) == (4, "D_STANDARD")

    def test_defaults(self) -> None:
        _, meta = preprocess("Hello")
        assert (meta.capo, meta.tuning) == (0, "E_STANDARD")

    @pytest.mark.parametrize(
        "line,key",
        [
            ("Tuning: Eb", "EB_STANDARD"),
            ("Tuning: E flat", "EB_STANDARD"),
            ("Tuning: drop c", "DROP_C"),
            ("Tuning: Open G", None),
        ],
    )
    def test_tuning_from_line(self, line: str, key: str | None) -> None:
        assert tuning_from_line(line) == key


class TestSections:
    """Test header detection and section grouping."""

    @pytest.mark.parametrize(
        "line,label",
        [
            ("[Chorus]", "Chorus"),
            ("[VERSE 2]", "Verse 2"),
            ("Verse 2:", "Verse 2"),
            ("INTRO", "Intro"),
            ("[Pre-chorus]", "Pre-Chorus"),
            ("Bridge", "Bridge"),
        ],
    )
    def test_headers(self, line: str, label: str) -> None:
        assert extract_section_name(line) == label

    @pytest.mark.parametrize("line", ["Hello world", "G  D", "Chorus line goes here"])
    def test_not_headers(self, line: str) -> None:
        assert extract_section_name(line) is None

    def test_lines_before_first_header(self) -> None:
        sections = split_sections(["la la", "[Chorus]", "oh"])
        assert sections == [("Verse 1", ["la la"]), ("Chorus", ["oh"])]

    def test_no_headers_gives_one_section(self) -> None:
        result = parse_pasted_song("Just words\nand more")
        assert [(b.label, b.content) for b in result.blocks] == [("Verse 1", "Just words\nand more")]


class TestChordMerging:
    def test_chord_past_end_of_lyric(self) -> None:
        assert merge_chord_lyric_lines("D          A", "Short") == "[D]Short[A]"

    def test_chord_line_before_chord_line(self) -> None:
        assert convert_lyric_lines(["G  D", "Em", "Hello"]) == ["[G]  [D]", "[Em]Hello"]

    def test_chord_line_before_comment_not_merged(self) -> None:
        assert convert_lyric_lines(["G", "(x2)"]) == ["[G]", "(x2)"]

    def test_lyric_lines_untouched(self) -> None:
        assert convert_lyric_lines(["Hello world"]) == ["Hello world"]


class TestBuildBlock:
    def test_blank_section_dropped(self) -> None:
        assert build_block("Intro", ["", "  "], "block_1", MusicalContext()) is None

    def test_tab_section_without_notes_dropped(self) -> None:
        lines = ["e|-----|", "B|-----|"]
        assert build_block("Solo", lines, "block_1", MusicalContext()) is None

    def test_surrounding_blank_lines_trimmed(self) -> None:
        block = build_block("Verse", ["", "Hello   ", ""], "block_1", MusicalContext())
        assert block.content == "Hello"

    def test_empty_sections_do_not_use_ids(self) -> None:
        result = parse_pasted_song("[Intro]\n\n[Verse]\nHello")
        assert [(b.id, b.label) for b in result.blocks] == [("block_1", "Verse")]


class TestMixedSections:
    """Sections holding both tablature and chords or lyrics."""

    def test_split_keeps_reading_order(self) -> None:
        parts = split_section_parts(["e|-3-|", "", "B|-5-|", "(let ring)"])
        assert parts == [["e|-3-|", "", "B|-5-|", ""], ["", "(let ring)"]]

    def test_tab_only_section_not_split(self) -> None:
        lines = ["e|-3-|", "", "B|-5-|"]
        assert split_section_parts(lines) == [lines]

    def test_section_becomes_lyrics_and_tab_blocks(self) -> None:
        result = parse_pasted_song("[Solo]\nG        D\ne|--3--|\nB|-----|\n(let ring)")
        assert [(b.id, b.label, type(b)) for b in result.blocks] == [
            ("block_1", "Solo", LyricsBlock),
            ("block_2", "Solo", TabBlock),
        ]
        assert result.blocks[0].content == "[G]        [D]\n(let ring)"
        assert result.blocks[1].notes == [TabNote(string=0, fret=3, position=45)]

"""Tests for document rendering, print and setlists."""

import pytest

from songsheet import render
from songsheet.drums import DRUM_TAB_TEMPLATE
from songsheet.exceptions import SongsheetError
from songsheet.fretboard import NO_TAB_DATA
from songsheet.models import (
    DrumTabBlock,
    LyricsBlock,
    MusicalContext,
    ReferenceBlock,
    Song,
    TabBlock,
    TabNote,
    index_blocks,
    resolve_block,
)
from songsheet.render import (
    UNKNOWN_SECTION,
    PrintView,
    paginate,
    render_document,
    render_print,
    render_setlist,
    sounding_key,
)


@pytest.fixture
def song() -> Song:
    return Song(
        title="Demo",
        artist="The Band",
        blocks=[
            LyricsBlock(id="v1", label="Verse 1", content="[C]Test [G]line"),
            TabBlock(id="t1", label="Riff", notes=[TabNote(string=0, fret=3, position=35)]),
            DrumTabBlock(id="d1", label="Groove", content=DRUM_TAB_TEMPLATE),
            ReferenceBlock(id="r1", label="Verse 2", original_id="v1"),
        ],
    )


class TestRenderDocument:
    """Test the shared preview/print renderer."""

    def test_sections_in_order_with_own_labels(self, song: Song) -> None:
        output = render_document(song.blocks, song.context)
        assert [(s.label, s.block_type) for s in output.sections] == [
            ("Verse 1", "lyrics"),
            ("Riff", "tab"),
            ("Groove", "drum_tab"),
            ("Verse 2", "lyrics"),
        ]

    def test_lyrics_lines(self, song: Song) -> None:
        section = render_document(song.blocks, song.context).sections[0]
        assert [(line.kind, line.text) for line in section.lines] == [
            ("chords", "C     G"),
            ("lyrics", " Test  line"),
        ]

    def test_reference_shows_target_content(self, song: Song) -> None:
        sections = render_document(song.blocks, song.context).sections
        assert sections[3].lines == sections[0].lines

    def test_drums_verbatim(self, song: Song) -> None:
        section = render_document(song.blocks, song.context).sections[2]
        assert "\n".join(line.text for line in section.lines) == DRUM_TAB_TEMPLATE

    def test_dangling_reference(self) -> None:
        blocks = [
            ReferenceBlock(id="r", label="Gone", original_id="missing"),
            LyricsBlock(id="v", label="After", content="[G]Still here"),
        ]
        output = render_document(blocks, MusicalContext())
        assert [line.text for line in output.sections[0].lines] == [UNKNOWN_SECTION]
        assert output.sections[0].label == "Gone"
        assert output.sections[1].label == "After"

    def test_reference_to_reference_is_unknown(self) -> None:
        blocks = [
            LyricsBlock(id="v", label="Verse", content="[G]Hi"),
            ReferenceBlock(id="r1", label="Again", original_id="v"),
            ReferenceBlock(id="r2", label="Again again", original_id="r1"),
        ]
        sections = render_document(blocks, MusicalContext()).sections
        assert [line.text for line in sections[2].lines] == [UNKNOWN_SECTION]

    def test_block_index_built_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """References resolve through one id index per render, not a scan per block."""
        calls = []

        def counting_index(blocks):
            calls.append(1)
            return index_blocks(blocks)

        monkeypatch.setattr(render, "index_blocks", counting_index)
        blocks = [LyricsBlock(id=f"v{i}", label=f"Verse {i}", content="[G]la") for i in range(50)]
        blocks += [ReferenceBlock(id=f"r{i}", label=f"Again {i}", original_id=f"v{i}") for i in range(50)]

        sections = render_document(blocks, MusicalContext(), skip_empty=True).sections
        assert len(calls) == 1
        assert sections[99].lines == sections[49].lines

    def test_transpose_is_applied_to_a_copy(self, song: Song) -> None:
        song.transpose = 2
        section = render_document(song.blocks, song.context).sections[0]
        assert section.lines[0].text == "D     A"
        assert song.blocks[0].content == "[C]Test [G]line"

    def test_empty_tab_notice(self) -> None:
        output = render_document([TabBlock(id="t", label="Empty")], MusicalContext())
        assert [(line.kind, line.text) for line in output.sections[0].lines] == [("notice", NO_TAB_DATA)]

    def test_include_types_filters_resolved_type(self, song: Song) -> None:
        output = render_document(song.blocks, song.context, include_types={"lyrics"})
        assert [s.label for s in output.sections] == ["Verse 1", "Verse 2"]

    def test_hide_chords(self, song: Song) -> None:
        section = render_document(song.blocks, song.context, show_chords=False).sections[0]
        assert [line.kind for line in section.lines] == ["lyrics"]

    def test_to_text(self) -> None:
        blocks = [LyricsBlock(id="v", label="Verse", content="[G]Hello")]
        assert render_document(blocks, MusicalContext()).to_text() == "Verse\nG\n Hello"

    def test_to_html_escapes(self) -> None:
        blocks = [
            LyricsBlock(id="v", label="<Intro>", content="[G]Rock & roll"),
            TabBlock(id="t", label="Riff", notes=[TabNote(string=0, fret=3, position=35)]),
        ]
        html = render_document(blocks, MusicalContext()).to_html()
        assert '<h4 class="block-label">&lt;Intro&gt;</h4>' in html
        assert '<div class="live-preview-chords">G</div>' in html
        assert "<div> Rock &amp; roll</div>" in html
        assert '<pre class="tab-preview">e |-3\nB |--' in html


class TestPaginate:
    def test_chunks_kept_together(self) -> None:
        pages = paginate([["a"] * 3, ["b"] * 3], lines_per_page=4)
        assert [page.lines for page in pages] == [("a",) * 3, ("b",) * 3]

    def test_chunks_share_a_page_when_they_fit(self) -> None:
        pages = paginate([["a"] * 2, ["b"] * 2], lines_per_page=4)
        assert len(pages) == 1

    def test_oversized_chunk_split(self) -> None:
        pages = paginate([["a"], ["b"] * 9], lines_per_page=4)
        assert [len(page.lines) for page in pages] == [1, 4, 4, 1]

    @pytest.mark.parametrize("lines_per_page", [0, -3])
    def test_invalid_page_height(self, lines_per_page: int) -> None:
        with pytest.raises(SongsheetError, match="lines_per_page"):
            paginate([["a"]], lines_per_page=lines_per_page)

    def test_render_print_rejects_invalid_page_height(self, song: Song) -> None:
        with pytest.raises(SongsheetError):
            render_print(song, lines_per_page=0)


class TestRenderPrint:
    """Test printed views."""

    def test_header(self, song: Song) -> None:
        page = render_print(song).pages[0]
        assert page.lines[:3] == ("Demo", "The Band", "")

    def test_missing_artist(self) -> None:
        page = render_print(Song(title="Solo")).pages[0]
        assert page.lines[1] == "Unknown Artist"

    def test_full_view_has_everything(self, song: Song) -> None:
        text = render_print(song, view=PrintView.FULL).to_text()
        assert "Groove" in text
        assert "e |-3" in text

    def test_guitar_view_drops_drums(self, song: Song) -> None:
        text = render_print(song, view=PrintView.GUITAR).to_text()
        assert "Groove" not in text
        assert "e |-3" in text
        assert "C     G" in text

    def test_drummer_view(self, song: Song) -> None:
        text = render_print(song, view=PrintView.DRUMMER).to_text()
        assert "Groove" in text
        assert "Riff" not in text
        assert " Test  line" in text
        assert "C     G" not in text

    def test_empty_blocks_skipped(self) -> None:
        song = Song(
            title="Sparse",
            blocks=[
                LyricsBlock(id="a", label="Blank"),
                TabBlock(id="b", label="No notes"),
                DrumTabBlock(id="c", label="Silent"),
                LyricsBlock(id="d", label="Words", content="la"),
            ],
        )
        text = render_print(song).to_text()
        for label in ("Blank", "No notes", "Silent"):
            assert label not in text
        assert "Words" in text

    def test_custom_include_types(self, song: Song) -> None:
        text = render_print(song, include_types={"tab"}).to_text()
        assert "Riff" in text
        assert "Verse 1" not in text

    def test_sections_not_split(self) -> None:
        lyrics = "\n".join(f"[G]line {i}" for i in range(10))
        song = Song(
            title="Long",
            blocks=[
                LyricsBlock(id="a", label="A", content=lyrics),
                LyricsBlock(id="b", label="B", content=lyrics),
            ],
        )
        pages = render_print(song, lines_per_page=30).pages
        assert len(pages) == 2
        assert pages[1].lines[0] == "B"


class TestSetlist:
    def test_cover_page_and_song_pages(self, song: Song) -> None:
        other = Song(title="Second", blocks=[LyricsBlock(id="x", label="V", content="[Am]Hey")])
        document = render_setlist("Friday Gig", [song, other], venue="The Pub")
        cover = document.pages[0].lines
        assert cover == (
            "Friday Gig",
            "The Pub",
            "",
            "Song List:",
            "1. Demo (The Band) - Key: C",
            "2. Second (Unknown) - Key: Am",
        )
        assert document.pages[1].lines[0] == "Demo"
        assert document.pages[-1].lines[0] == "Second"


class TestSoundingKey:
    def test_capo_and_transpose(self) -> None:
        song = Song(capo=2, transpose=1, blocks=[LyricsBlock(id="a", label="V", content="[G]Hi")])
        assert sounding_key(song) == "A#"

    def test_no_chords(self) -> None:
        assert sounding_key(Song(blocks=[LyricsBlock(id="a", label="V", content="words")])) is None


class TestResolveBlock:
    def test_content_block_resolves_to_itself(self) -> None:
        block = TabBlock(id="t", label="Riff")
        assert resolve_block(block, {}) is block

    def test_reference_resolves_through_index(self, song: Song) -> None:
        index = index_blocks(song.blocks)
        assert resolve_block(song.blocks[3], index) is song.blocks[0]

    def test_first_block_wins_on_duplicate_id(self) -> None:
        first = LyricsBlock(id="x", label="First")
        second = LyricsBlock(id="x", label="Second")
        assert index_blocks([first, second])["x"] is first

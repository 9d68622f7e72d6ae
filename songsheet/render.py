"""Document rendering for previews and print.

Blocks are walked in stored order. References resolve to their target but keep
their own label. Each resolved block is rendered by type: lyrics become aligned
chord/lyric line pairs, tab becomes ASCII tablature, and drum tab passes
through verbatim. Preview and print read the same ``RenderedOutput``; print
adds view filtering and pagination that keeps sections on one page when they
fit.

Usage::

    from songsheet.render import render_document, render_print
    output = render_document(song.blocks, song.context)
    html = output.to_html()
    pages = render_print(song, view=PrintView.DRUMMER).pages
"""

from __future__ import annotations

import html
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Literal, assert_never

from songsheet.exceptions import SongsheetError
from songsheet.fretboard.geometry import DEFAULT_GEOMETRY, FretboardGeometry
from songsheet.fretboard.renderer import NO_TAB_DATA, OUT_OF_RANGE, render_tab_text
from songsheet.lyrics import extract_chords, parse_line_for_render, transpose_lyrics
from songsheet.models import (
    Block,
    BlockType,
    DrumTabBlock,
    LyricsBlock,
    MusicalContext,
    Song,
    TabBlock,
    index_blocks,
    resolve_block,
)
from songsheet.pitch_class import transpose_chord

logger = logging.getLogger(__name__)

UNKNOWN_SECTION = "Unknown Section"

DEFAULT_LINES_PER_PAGE = 60

LineKind = Literal["chords", "lyrics", "tab", "drums", "notice"]


@dataclass(frozen=True)
class RenderedLine:
    """One output line and what kind of content it carries."""

    kind: LineKind
    text: str


@dataclass(frozen=True)
class RenderedSection:
    """A block's heading and rendered content.

    Parameters
    ----------
    label : str
        The rendered block's own label (a reference keeps its label).
    block_type : BlockType | None
        Type of the resolved content block, None for an unknown section.
    lines : tuple[RenderedLine, ...]
        Content lines, empty when the block has nothing to show.
    """

    label: str
    block_type: BlockType | None
    lines: tuple[RenderedLine, ...]

    def text_lines(self) -> list[str]:
        """Heading followed by content lines."""
        return [self.label, *(line.text for line in self.lines)]


@dataclass(frozen=True)
class RenderedOutput:
    """A rendered document."""

    sections: tuple[RenderedSection, ...]

    def to_text(self) -> str:
        """Plain text with a blank line between sections."""
        return "\n\n".join("\n".join(section.text_lines()) for section in self.sections)

    def to_html(self) -> str:
        """Preview markup. Chord and tab lines keep their spacing."""
        parts: list[str] = []
        for section in self.sections:
            parts.append(f'<h4 class="block-label">{html.escape(section.label)}</h4>')
            preformatted: list[str] = []
            for line in section.lines:
                if line.kind in ("tab", "drums"):
                    preformatted.append(html.escape(line.text))
                    continue
                if preformatted:
                    parts.append(_pre_html(preformatted))
                    preformatted = []
                parts.append(_line_html(line))
            if preformatted:
                parts.append(_pre_html(preformatted))
        return "\n".join(parts)


def _pre_html(escaped_lines: list[str]) -> str:
    body = "\n".join(escaped_lines)
    return f'<pre class="tab-preview">{body}</pre>'


def _line_html(line: RenderedLine) -> str:
    text = html.escape(line.text)
    if line.kind == "chords":
        return f'<div class="live-preview-chords">{text}</div>'
    if line.kind == "notice":
        return f'<p class="render-notice">{text}</p>'
    return f"<div>{text}</div>"


def render_lyrics(block: LyricsBlock, context: MusicalContext, *, show_chords: bool = True) -> list[RenderedLine]:
    """Render lyrics content as chord/lyric line pairs under ``context``.

    Transpose is applied to a copy; the stored content is not changed.
    """
    if not block.content:
        return []
    content = transpose_lyrics(block.content, context.transpose)
    lines: list[RenderedLine] = []
    for raw in content.split("\n"):
        pair = parse_line_for_render(raw)
        if show_chords:
            lines.append(RenderedLine("chords", pair.chord_line))
        lines.append(RenderedLine("lyrics", pair.lyric_line))
    return lines


def render_tab(
    block: TabBlock,
    context: MusicalContext,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> list[RenderedLine]:
    text = render_tab_text(block, context, geometry)
    if text in (NO_TAB_DATA, OUT_OF_RANGE):
        return [RenderedLine("notice", text)]
    return [RenderedLine("tab", line) for line in text.split("\n")]


def render_drums(block: DrumTabBlock) -> list[RenderedLine]:
    if not block.content:
        return []
    return [RenderedLine("drums", line) for line in block.content.split("\n")]


def render_section(
    block: Block,
    index: Mapping[str, Block],
    context: MusicalContext,
    *,
    include_types: Iterable[BlockType] | None = None,
    show_chords: bool = True,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> RenderedSection | None:
    """Render a single block of a document.

    ``index`` maps the document's block ids to blocks (see ``index_blocks``).

    Returns
    -------
    RenderedSection | None
        The section, or None if the resolved type is filtered out by
        ``include_types``. Unresolvable references always render as the
        unknown-section placeholder.
    """
    target = resolve_block(block, index)
    if target is None:
        logger.warning("Block %s references missing block %r", block.id, getattr(block, "original_id", None))
        return RenderedSection(
            label=block.label,
            block_type=None,
            lines=(RenderedLine("notice", UNKNOWN_SECTION),),
        )

    if include_types is not None and target.block_type not in include_types:
        return None

    if isinstance(target, LyricsBlock):
        lines = render_lyrics(target, context, show_chords=show_chords)
    elif isinstance(target, TabBlock):
        lines = render_tab(target, context, geometry)
    elif isinstance(target, DrumTabBlock):
        lines = render_drums(target)
    else:
        assert_never(target)

    return RenderedSection(label=block.label, block_type=target.block_type, lines=tuple(lines))


def render_document(
    blocks: Sequence[Block],
    context: MusicalContext,
    *,
    include_types: Iterable[BlockType] | None = None,
    show_chords: bool = True,
    skip_empty: bool = False,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> RenderedOutput:
    """Render an ordered block list.

    Parameters
    ----------
    blocks : Sequence[Block]
        The song's blocks in stored order.
    context : MusicalContext
        Tuning, capo and transpose to render under.
    include_types : Iterable[BlockType] | None
        Keep only blocks whose resolved type is listed.
    show_chords : bool
        Emit chord lines above lyrics.
    skip_empty : bool
        Leave out blocks with no content (lyrics or drums with empty text,
        tab with no notes).
    geometry : FretboardGeometry
        Column scale used for tab text.

    Returns
    -------
    RenderedOutput
        One section per rendered block, in order.

    Examples
    --------
    >>> from songsheet.models import LyricsBlock, ReferenceBlock
    >>> blocks = [LyricsBlock(id="a", label="Verse", content="[C]Test [G]line"),
    ...           ReferenceBlock(id="b", label="Again", original_id="gone")]
    >>> print(render_document(blocks, MusicalContext()).to_text())
    Verse
    C     G
     Test  line
    <BLANKLINE>
    Again
    Unknown Section
    """
    include = frozenset(include_types) if include_types is not None else None
    index = index_blocks(blocks)
    sections: list[RenderedSection] = []
    for block in blocks:
        section = render_section(
            block,
            index,
            context,
            include_types=include,
            show_chords=show_chords,
            geometry=geometry,
        )
        if section is None:
            continue
        if skip_empty and _is_empty(block, index):
            continue
        sections.append(section)
    return RenderedOutput(sections=tuple(sections))


def _is_empty(block: Block, index: Mapping[str, Block]) -> bool:
    target = resolve_block(block, index)
    if target is None:
        return False
    if isinstance(target, TabBlock):
        return not target.notes
    return not target.content


class PrintView(Enum):
    """Which parts of a song a printout is for."""

    FULL = "full"
    GUITAR = "guitar"
    DRUMMER = "drummer"


# Block types kept per view, and whether chord lines are printed
PRINT_VIEWS: dict[PrintView, tuple[frozenset[str] | None, bool]] = {
    PrintView.FULL: (None, True),
    PrintView.GUITAR: (frozenset({"lyrics", "tab"}), True),
    PrintView.DRUMMER: (frozenset({"lyrics", "drum_tab"}), False),
}


@dataclass(frozen=True)
class Page:
    """One printed page of text lines."""

    lines: tuple[str, ...]


@dataclass(frozen=True)
class PrintDocument:
    """A paginated printout."""

    pages: tuple[Page, ...]

    def to_text(self, page_break: str = "\f") -> str:
        return page_break.join("\n".join(page.lines) for page in self.pages)


def paginate(chunks: Sequence[Sequence[str]], lines_per_page: int = DEFAULT_LINES_PER_PAGE) -> list[Page]:
    """Lay chunks of lines onto pages without splitting a chunk if avoidable.

    A chunk that does not fit in what is left of the page moves to a new page.
    A chunk taller than a whole page is split across as many pages as needed.

    Raises
    ------
    SongsheetError
        If ``lines_per_page`` is less than 1.

    Examples
    --------
    >>> [len(p.lines) for p in paginate([["a"] * 3, ["b"] * 3], lines_per_page=4)]
    [3, 3]
    >>> [len(p.lines) for p in paginate([["a"] * 9], lines_per_page=4)]
    [4, 4, 1]
    """
    if lines_per_page < 1:
        msg = f"lines_per_page must be positive, got {lines_per_page}"
        raise SongsheetError(msg)

    pages: list[list[str]] = []
    current: list[str] = []
    for chunk in chunks:
        if current and len(current) + len(chunk) > lines_per_page:
            pages.append(current)
            current = []
        for line in chunk:
            if len(current) == lines_per_page:
                pages.append(current)
                current = []
            current.append(line)
    if current:
        pages.append(current)
    return [Page(lines=tuple(lines)) for lines in pages]


def _song_chunks(
    song: Song,
    view: PrintView,
    include_types: Iterable[BlockType] | None,
    geometry: FretboardGeometry,
) -> list[list[str]]:
    view_types, show_chords = PRINT_VIEWS[view]
    if include_types is None:
        include_types = view_types
    output = render_document(
        song.blocks,
        song.context,
        include_types=include_types,
        show_chords=show_chords,
        skip_empty=True,
        geometry=geometry,
    )
    header = [song.title, song.artist or "Unknown Artist", ""]
    chunks = [header]
    chunks.extend([*section.text_lines(), ""] for section in output.sections)
    return chunks


def render_print(
    song: Song,
    *,
    view: PrintView = PrintView.FULL,
    include_types: Iterable[BlockType] | None = None,
    lines_per_page: int = DEFAULT_LINES_PER_PAGE,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> PrintDocument:
    """Render a song for print.

    Parameters
    ----------
    song : Song
        The song to print.
    view : PrintView
        ``FULL`` prints everything, ``GUITAR`` leaves out drum tabs, and
        ``DRUMMER`` keeps only lyrics (without chord lines) and drum tabs.
    include_types : Iterable[BlockType] | None
        Overrides the view's block type filter.
    lines_per_page : int
        Page height in lines.
    geometry : FretboardGeometry
        Column scale used for tab text.

    Returns
    -------
    PrintDocument
        Title header followed by each non-empty block, paginated.
    """
    chunks = _song_chunks(song, view, include_types, geometry)
    return PrintDocument(pages=tuple(paginate(chunks, lines_per_page)))


def sounding_key(song: Song) -> str | None:
    """Return the key the song sounds in, from its first lyrics chord.

    The first chord is shifted by transpose and capo. None if the lyrics
    have no chords.

    Examples
    --------
    >>> sounding_key(Song(capo=2, blocks=[LyricsBlock(id="a", label="V", content="[G]Hi")]))
    'A'
    """
    for block in song.blocks:
        if isinstance(block, LyricsBlock) and block.content:
            chords = extract_chords(block.content)
            if chords:
                return transpose_chord(chords[0], song.transpose + song.capo)
    return None


def _setlist_entry(number: int, song: Song) -> str:
    entry = f"{number}. {song.title} ({song.artist or 'Unknown'})"
    key = sounding_key(song)
    if key is not None:
        entry += f" - Key: {key}"
    return entry


def render_setlist(
    name: str,
    songs: Sequence[Song],
    *,
    view: PrintView = PrintView.FULL,
    venue: str | None = None,
    lines_per_page: int = DEFAULT_LINES_PER_PAGE,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> PrintDocument:
    """Render a setlist: a numbered song list, then each song on new pages."""
    cover = [name]
    if venue:
        cover.append(venue)
    cover.extend(["", "Song List:"])
    cover.extend(_setlist_entry(number, song) for number, song in enumerate(songs, start=1))

    pages = paginate([cover], lines_per_page)
    for song in songs:
        pages.extend(paginate(_song_chunks(song, view, None, geometry), lines_per_page))
    return PrintDocument(pages=tuple(pages))

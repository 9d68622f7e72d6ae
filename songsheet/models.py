"""Song document data models for songsheet.

A song is an ordered list of blocks. Each block is one of four variants
(lyrics, tab, drum tab, reference) and every consumer dispatches over the
closed ``Block`` union. Blocks are mutable because editing happens in place
on a single document; notes and the musical context are immutable values.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import ClassVar, Literal

from songsheet.tunings import DEFAULT_TUNING, tuning_offset

BlockType = Literal["lyrics", "tab", "drum_tab", "reference"]

# Instruments the fretboard editor supports
VALID_STRING_COUNTS: tuple[int, ...] = (6, 7, 8)
DEFAULT_STRING_COUNT = 6

DEFAULT_BLOCK_HEIGHT = 120

# Note markers: hammer-on, pull-off, bend, release, slides, vibrato, dead note
NOTATION_MARKERS: tuple[str, ...] = ("h", "p", "b", "r", "/", "\\", "~", "x")


@dataclass(frozen=True)
class TabNote:
    """A single note placed on a tab block's fretboard.

    Parameters
    ----------
    string : int
        String index, 0 = highest pitched string.
    fret : int
        Stored fret on the canonical standard-tuning, no-capo fretboard.
        Tuning and capo are already added in; see ``MusicalContext``.
    position : float
        Horizontal pixel coordinate. Used only for left-to-right order and
        diagram placement.
    notation : str | None
        Optional marker from ``NOTATION_MARKERS``.
    bend_target : int | None
        Stored fret a bend ("b") reaches.
    """

    string: int
    fret: int
    position: float
    notation: str | None = None
    bend_target: int | None = None


@dataclass
class LyricsBlock:
    """Lyrics with inline ``[Chord]`` annotations."""

    block_type: ClassVar[BlockType] = "lyrics"

    id: str
    label: str
    content: str = ""
    height: int = DEFAULT_BLOCK_HEIGHT


@dataclass
class TabBlock:
    """Guitar tab stored as positioned fretboard notes."""

    block_type: ClassVar[BlockType] = "tab"

    id: str
    label: str
    strings: int = DEFAULT_STRING_COUNT
    edit_mode: bool = False
    notes: list[TabNote] = field(default_factory=list)


@dataclass
class DrumTabBlock:
    """Drum tab as a text grid, one ``CODE|pattern|`` line per instrument."""

    block_type: ClassVar[BlockType] = "drum_tab"

    id: str
    label: str
    content: str = ""
    height: int = DEFAULT_BLOCK_HEIGHT


@dataclass
class ReferenceBlock:
    """A repeat of another block, shown under its own label."""

    block_type: ClassVar[BlockType] = "reference"

    id: str
    label: str
    original_id: str = ""


Block = LyricsBlock | TabBlock | DrumTabBlock | ReferenceBlock
ContentBlock = LyricsBlock | TabBlock | DrumTabBlock


@dataclass(frozen=True)
class MusicalContext:
    """Tuning, capo and transpose in effect for placing or rendering notes.

    Parameters
    ----------
    tuning : str
        Tuning registry key.
    capo : int
        Capo fret.
    transpose : int
        Presentation-only semitone shift.

    Examples
    --------
    >>> ctx = MusicalContext(tuning="EB_STANDARD", capo=2, transpose=1)
    >>> ctx.total_offset(rendering=False)
    1
    >>> ctx.total_offset(rendering=True)
    2
    """

    tuning: str = DEFAULT_TUNING
    capo: int = 0
    transpose: int = 0

    def total_offset(self, *, rendering: bool) -> int:
        """Return the fret delta between stored and shown frets.

        Placement uses tuning offset plus capo. Rendering also adds transpose,
        which is never baked into stored frets.
        """
        offset = tuning_offset(self.tuning) + self.capo
        if rendering:
            offset += self.transpose
        return offset


def to_stored_fret(selected_fret: int, context: MusicalContext) -> int:
    """Convert a fret as physically played into its stored canonical fret."""
    return selected_fret + context.total_offset(rendering=False)


def to_displayed_fret(stored_fret: int, context: MusicalContext, *, rendering: bool = True) -> int:
    """Convert a stored fret into the fret shown under ``context``.

    A negative result means the note is out of range for the context.
    """
    return stored_fret - context.total_offset(rendering=rendering)


@dataclass
class Song:
    """Root song document.

    Parameters
    ----------
    id : str | int | None
        Storage identifier, None until first saved.
    title, artist, duration : str
        Display metadata. Duration is free text.
    audio_url : str | None
        Reference to an uploaded recording.
    tuning : str
        Tuning registry key.
    capo : int
        Capo fret (>= 0).
    transpose : int
        Semitone shift applied at render time.
    blocks : list[Block]
        Ordered content blocks. Ids are unique within the song.
    """

    id: str | int | None = None
    title: str = ""
    artist: str = ""
    duration: str = ""
    audio_url: str | None = None
    tuning: str = DEFAULT_TUNING
    capo: int = 0
    transpose: int = 0
    blocks: list[Block] = field(default_factory=list)

    @property
    def context(self) -> MusicalContext:
        return MusicalContext(tuning=self.tuning, capo=self.capo, transpose=self.transpose)

    def block_ids(self) -> set[str]:
        return {block.id for block in self.blocks}

    def find_block(self, block_id: str) -> Block | None:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None


def index_blocks(blocks: Iterable[Block]) -> dict[str, Block]:
    """Map block ids to blocks. The first block wins if an id repeats."""
    index: dict[str, Block] = {}
    for block in blocks:
        index.setdefault(block.id, block)
    return index


def resolve_block(block: Block, index: Mapping[str, Block]) -> ContentBlock | None:
    """Return the block whose content ``block`` displays.

    Content blocks resolve to themselves. A reference resolves to its target,
    or None if the target is missing or is itself a reference.

    Parameters
    ----------
    block : Block
        The block being displayed.
    index : Mapping[str, Block]
        The song's blocks by id, from ``index_blocks``.

    Examples
    --------
    >>> chorus = LyricsBlock(id="a", label="Chorus", content="[G]La")
    >>> ref = ReferenceBlock(id="b", label="Chorus 2", original_id="a")
    >>> resolve_block(ref, index_blocks([chorus, ref])) is chorus
    True
    >>> resolve_block(ReferenceBlock(id="c", label="X", original_id="zz"), {"a": chorus}) is None
    True
    """
    if not isinstance(block, ReferenceBlock):
        return block
    target = index.get(block.original_id)
    if target is None or isinstance(target, ReferenceBlock):
        return None
    return target

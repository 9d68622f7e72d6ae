"""Rendering of tab block notes.

Two views are produced from a block's note set: positioned glyphs for the
interactive fretboard diagram, and column-packed ASCII tablature for previews
and print. Both subtract the context's total offset from stored frets and
suppress notes that land below fret 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from songsheet.fretboard.geometry import DEFAULT_GEOMETRY, FretboardGeometry
from songsheet.models import MusicalContext, TabBlock, TabNote, to_displayed_fret
from songsheet.tunings import string_names

logger = logging.getLogger(__name__)

NO_TAB_DATA = "No tab data."
OUT_OF_RANGE = "Notes out of range for current settings."


@dataclass(frozen=True)
class OverlayNote:
    """A note glyph for the fretboard diagram.

    Parameters
    ----------
    index : int
        Index of the note in the block's note list.
    x, y : float
        Glyph center.
    displayed_fret : int
        Fret label shown in the glyph.
    selected : bool
        Whether this is the selected note.
    """

    index: int
    x: float
    y: float
    displayed_fret: int
    selected: bool


def render_notes_overlay(
    block: TabBlock,
    context: MusicalContext,
    selected: int | None = None,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
    *,
    include_transpose: bool = False,
) -> list[OverlayNote]:
    """Compute note glyphs for the interactive diagram.

    The diagram shows frets as they are played, so by default only tuning and
    capo are subtracted; ``include_transpose`` also subtracts transpose.
    Notes on strings the instrument lacks, or below fret 0, are left out.

    Examples
    --------
    >>> from songsheet.models import TabNote
    >>> block = TabBlock(id="t", label="Riff", notes=[TabNote(string=1, fret=7, position=200)])
    >>> [n.displayed_fret for n in render_notes_overlay(block, MusicalContext(capo=2))]
    [5]
    """
    overlay: list[OverlayNote] = []
    for index, note in enumerate(block.notes):
        if note.string >= block.strings:
            continue
        fret = to_displayed_fret(note.fret, context, rendering=include_transpose)
        if fret < 0:
            continue
        overlay.append(
            OverlayNote(
                index=index,
                x=note.position,
                y=geometry.string_y(note.string),
                displayed_fret=fret,
                selected=index == selected,
            )
        )
    return overlay


def note_token(note: TabNote, context: MusicalContext) -> str:
    """Format a note's tab cell: displayed fret plus any notation marker.

    Examples
    --------
    >>> from songsheet.models import TabNote
    >>> note_token(TabNote(string=0, fret=7, position=0, notation="b", bend_target=9), MusicalContext())
    '7b9'
    >>> note_token(TabNote(string=0, fret=5, position=0, notation="h"), MusicalContext())
    '5h'
    """
    text = str(to_displayed_fret(note.fret, context))
    if note.notation:
        text += note.notation
        if note.notation == "b" and note.bend_target is not None:
            target = to_displayed_fret(note.bend_target, context)
            if target >= 0:
                text += str(target)
    return text


def pack_columns(
    block: TabBlock,
    context: MusicalContext,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> dict[int, list[str | None]]:
    """Bucket visible notes into character columns.

    Returns
    -------
    dict[int, list[str | None]]
        Column -> per-string cell text (None where the string is silent).
        Later notes on the same string and column replace earlier ones.
    """
    columns: dict[int, list[str | None]] = {}
    for note in sorted(block.notes, key=lambda n: n.position):
        if note.string >= block.strings:
            continue
        if to_displayed_fret(note.fret, context) < 0:
            logger.debug("Suppressing out-of-range note %s in block %s", note, block.id)
            continue
        column = geometry.column_of(note.position)
        if column < 0:
            continue
        cells = columns.setdefault(column, [None] * block.strings)
        cells[note.string] = note_token(note, context)
    return columns


def render_tab_text(
    block: TabBlock,
    context: MusicalContext,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> str:
    """Render a tab block as ASCII tablature.

    Each string gets a line prefixed with its name and ``|``. Occupied columns
    are emitted left to right; gaps are filled with ``-`` and every string is
    padded to the widest cell at that column.

    Parameters
    ----------
    block : TabBlock
        The block to render.
    context : MusicalContext
        Tuning, capo and transpose to render under.
    geometry : FretboardGeometry
        Supplies the pixels-per-column scale.

    Returns
    -------
    str
        The tablature, ``NO_TAB_DATA`` for a block without notes, or
        ``OUT_OF_RANGE`` when no note is playable under ``context``.

    Examples
    --------
    >>> from songsheet.models import TabNote
    >>> block = TabBlock(id="t", label="Riff", notes=[
    ...     TabNote(string=0, fret=3, position=35),
    ...     TabNote(string=1, fret=12, position=75),
    ... ])
    >>> print(render_tab_text(block, MusicalContext()))
    e |-3-----
    B |-----12
    G |-------
    D |-------
    A |-------
    E |-------
    """
    if not block.notes:
        return NO_TAB_DATA

    columns = pack_columns(block, context, geometry)
    if not columns:
        return OUT_OF_RANGE

    lines = [f"{name.ljust(2)}|" for name in string_names(context.tuning, block.strings)]
    last_column = 0
    for column in sorted(columns):
        cells = columns[column]
        gap = column - last_column
        if gap > 1:
            lines = [line + "-" * (gap - 1) for line in lines]

        width = max(len(cell) for cell in cells if cell is not None)
        lines = [
            line + (cell.ljust(width, "-") if cell is not None else "-" * width)
            for line, cell in zip(lines, cells)
        ]
        last_column = column + width - 1

    return "\n".join(lines)

"""Note store operations for tab blocks.

Notes are stored with a canonical fret (see ``MusicalContext``). Every
operation here fails soft: bad coordinates or indexes return None and leave
the block untouched, since they arrive continuously from clicks and drags.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

from songsheet.fretboard.geometry import DEFAULT_GEOMETRY, FretboardGeometry
from songsheet.models import NOTATION_MARKERS, MusicalContext, TabBlock, TabNote, to_stored_fret

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FretPosition:
    """A fretboard coordinate resolved to a string and fret.

    Parameters
    ----------
    string : int
        String index, 0 = top string on the diagram.
    fret : int
        Fret as physically played (before any offset).
    position : float
        The horizontal coordinate that was clicked.
    """

    string: int
    fret: int
    position: float


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def get_fret_from_coordinate(
    x: float,
    y: float,
    string_count: int,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> FretPosition | None:
    """Map a diagram coordinate to a string and fret.

    Parameters
    ----------
    x, y : float
        Coordinate relative to the diagram's top-left corner.
    string_count : int
        Number of strings on the instrument.
    geometry : FretboardGeometry
        Diagram dimensions.

    Returns
    -------
    FretPosition | None
        The resolved position, or None when the coordinate is not a number or
        falls outside the strings or past the last fret. Clicks on the nut map
        to fret 0.

    Examples
    --------
    >>> get_fret_from_coordinate(15 + 3 * 80, 10, 6)
    FretPosition(string=0, fret=3, position=255)
    >>> get_fret_from_coordinate(100, 500, 6) is None
    True
    """
    if not (math.isfinite(x) and math.isfinite(y)) or x < 0 or y < 0:
        return None

    string = int(y // geometry.string_spacing)
    fret = max(0, _round_half_up((x - geometry.nut_width) / geometry.fret_spacing))

    if string >= string_count or fret > geometry.frets:
        return None
    return FretPosition(string=string, fret=fret, position=x)


def add_note(
    block: TabBlock,
    string: int,
    fret: int,
    position: float,
    context: MusicalContext,
    notation: str | None = None,
) -> TabNote | None:
    """Place a note played at ``fret`` under ``context``.

    The stored fret has the placement offset (tuning + capo) added, so the note
    keeps its sounding pitch when the context later changes.

    Returns
    -------
    TabNote | None
        The stored note, or None if the string or fret is invalid.
    """
    if not 0 <= string < block.strings or fret < 0 or not math.isfinite(position):
        logger.debug("Ignoring note at string=%s fret=%s on block %s", string, fret, block.id)
        return None
    if notation is not None and notation not in NOTATION_MARKERS:
        notation = None

    note = TabNote(
        string=string,
        fret=to_stored_fret(fret, context),
        position=position,
        notation=notation,
    )
    block.notes.append(note)
    return note


def add_note_at(
    block: TabBlock,
    x: float,
    y: float,
    context: MusicalContext,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> TabNote | None:
    """Place a note at the fret under a diagram coordinate."""
    hit = get_fret_from_coordinate(x, y, block.strings, geometry)
    if hit is None:
        return None
    return add_note(block, hit.string, hit.fret, hit.position, context)


def _valid_index(block: TabBlock, index: int) -> bool:
    return 0 <= index < len(block.notes)


def delete_note(block: TabBlock, index: int) -> TabNote | None:
    """Remove and return the note at ``index``."""
    if not _valid_index(block, index):
        return None
    return block.notes.pop(index)


def move_note(block: TabBlock, index: int, string: int, position: float) -> TabNote | None:
    """Move a note to another string and position, keeping its stored fret."""
    if not _valid_index(block, index) or not 0 <= string < block.strings:
        return None
    if not math.isfinite(position):
        return None
    note = replace(block.notes[index], string=string, position=position)
    block.notes[index] = note
    return note


def drop_note(
    block: TabBlock,
    index: int,
    x: float,
    y: float,
    context: MusicalContext,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> TabNote | None:
    """Drop a dragged note at a diagram coordinate.

    String, position and fret are all taken from the drop point, the fret
    stored the same way ``add_note`` stores it.
    """
    if not _valid_index(block, index):
        return None
    hit = get_fret_from_coordinate(x, y, block.strings, geometry)
    if hit is None:
        return None
    note = replace(
        block.notes[index],
        string=hit.string,
        fret=to_stored_fret(hit.fret, context),
        position=hit.position,
    )
    block.notes[index] = note
    return note


def set_notation(
    block: TabBlock,
    index: int,
    notation: str | None,
    context: MusicalContext,
    bend_target: int | None = None,
) -> TabNote | None:
    """Set or clear a note's notation marker.

    ``bend_target`` is the fret the bend reaches as played under ``context``;
    it is only kept for bends.
    """
    if not _valid_index(block, index):
        return None
    if notation is not None and notation not in NOTATION_MARKERS:
        return None

    stored_target = None
    if notation == "b" and bend_target is not None and bend_target >= 0:
        stored_target = to_stored_fret(bend_target, context)

    note = replace(block.notes[index], notation=notation, bend_target=stored_target)
    block.notes[index] = note
    return note

"""Fretboard note store and tab rendering.

Notes are placed from diagram coordinates, stored on a canonical standard
tuning fretboard, and rendered back under the current tuning, capo and
transpose either as diagram glyphs or as ASCII tablature.
"""

from songsheet.fretboard.geometry import DEFAULT_GEOMETRY, FretboardGeometry
from songsheet.fretboard.notes import (
    FretPosition,
    add_note,
    add_note_at,
    delete_note,
    drop_note,
    get_fret_from_coordinate,
    move_note,
    set_notation,
)
from songsheet.fretboard.renderer import (
    NO_TAB_DATA,
    OUT_OF_RANGE,
    OverlayNote,
    render_notes_overlay,
    render_tab_text,
)
from songsheet.fretboard.tab_text import is_tab_line, parse_tab_text

__all__ = [
    "DEFAULT_GEOMETRY",
    "NO_TAB_DATA",
    "OUT_OF_RANGE",
    "FretPosition",
    "FretboardGeometry",
    "OverlayNote",
    "add_note",
    "add_note_at",
    "delete_note",
    "drop_note",
    "get_fret_from_coordinate",
    "is_tab_line",
    "move_note",
    "parse_tab_text",
    "render_notes_overlay",
    "render_tab_text",
    "set_notation",
]

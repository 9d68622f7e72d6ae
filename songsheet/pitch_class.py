"""Chromatic note arithmetic for chord transposition.

Chord symbols are transposed on a fixed sharp-named chromatic scale starting
at A. Flat roots are normalized to their sharp spelling first, so output is
always sharp-spelled.
"""

from __future__ import annotations

import re

# Sharp-named chromatic scale (index 0 = A)
SHARP_SCALE: tuple[str, ...] = (
    "A",
    "A#",
    "B",
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
)

# Flat spellings that are not enharmonically a natural note
FLAT_TO_SHARP: dict[str, str] = {
    "Bb": "A#",
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
}

# Root note with optional accidental, then the quality/extension remainder
CHORD_SYMBOL_RE = re.compile(r"^([A-G][b#]?)(.*)$", re.DOTALL)


def note_index(note: str) -> int | None:
    """Convert a note name to its index on the sharp scale.

    Parameters
    ----------
    note : str
        Note name (e.g., "A", "C#", "Bb").

    Returns
    -------
    int | None
        Index 0-11 (A=0), or None if the spelling is not recognized.

    Examples
    --------
    >>> note_index("A")
    0
    >>> note_index("Bb")
    1
    >>> note_index("Cb") is None
    True
    """
    if note in FLAT_TO_SHARP:
        note = FLAT_TO_SHARP[note]
    try:
        return SHARP_SCALE.index(note)
    except ValueError:
        return None


def transpose_note(note: str, semitones: int) -> str | None:
    """Transpose a bare note name, returning its sharp spelling.

    Parameters
    ----------
    note : str
        Note name (e.g., "G", "Eb").
    semitones : int
        Semitones to move (positive = up).

    Returns
    -------
    str | None
        The transposed note, or None if the note is not recognized.

    Examples
    --------
    >>> transpose_note("G", 2)
    'A'
    >>> transpose_note("Eb", -1)
    'D'
    """
    index = note_index(note)
    if index is None:
        return None
    return SHARP_SCALE[(index + semitones) % 12]


def transpose_chord(symbol: str, semitones: int, *, bass: bool = False) -> str:
    """Transpose a chord symbol by a number of semitones.

    Symbols that do not start with a note letter are returned unchanged, as are
    roots with no entry on the scale (e.g., "Cb"). The quality/extension
    remainder is re-attached verbatim.

    Parameters
    ----------
    symbol : str
        Chord symbol (e.g., "Gm7", "Bb", "F#sus4").
    semitones : int
        Semitones to move (positive = up, may be any size).
    bass : bool
        Also transpose a trailing slash bass note ("G/B" -> "A/C#").
        Off by default, so the remainder is left exactly as written.

    Returns
    -------
    str
        The transposed symbol, always sharp-spelled.

    Examples
    --------
    >>> transpose_chord("C", 12)
    'C'
    >>> transpose_chord("Bb", 1)
    'B'
    >>> transpose_chord("Am7", -2)
    'Gm7'
    >>> transpose_chord("N.C.", 3)
    'N.C.'
    >>> transpose_chord("G/B", 2, bass=True)
    'A/C#'
    """
    match = CHORD_SYMBOL_RE.match(symbol)
    if not match:
        return symbol

    root = transpose_note(match.group(1), semitones)
    if root is None:
        return symbol

    remainder = match.group(2)
    if bass and "/" in remainder:
        head, _, bass_note = remainder.rpartition("/")
        new_bass = transpose_note(bass_note, semitones)
        if new_bass is not None:
            remainder = f"{head}/{new_bass}"

    return root + remainder

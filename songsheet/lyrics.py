"""Inline chord parsing for lyrics blocks.

Lyrics are stored with chords in brackets directly before the syllable they
sit over: ``"[G]Hello [C]world"``. For display each line is split into a
chord line and a lyric line of matching columns, so under a monospace font
every chord sits above the character that followed it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from songsheet.pitch_class import transpose_chord

# A bracketed chord token, e.g. "[Gm7]"
CHORD_TOKEN_RE = re.compile(r"\[([^\]]+)\]")

# Same, with a capture group so re.split keeps the tokens
SPLIT_RE = re.compile(r"(\[[^\]]+\])")

# Stand-in for an empty rendered line so it keeps its height
BLANK = " "


@dataclass(frozen=True)
class LinePair:
    """A lyrics line split for display.

    Parameters
    ----------
    chord_line : str
        Chord names at the columns they annotate, spaces elsewhere.
    lyric_line : str
        Lyric text with spaces where chord names sit.
    """

    chord_line: str
    lyric_line: str


def parse_line_for_render(line: str) -> LinePair:
    """Split a stored lyrics line into aligned chord and lyric lines.

    Both outputs are right-trimmed; an empty result becomes a single space.

    Parameters
    ----------
    line : str
        One line of lyrics block content.

    Returns
    -------
    LinePair
        The aligned chord line and lyric line.

    Examples
    --------
    >>> parse_line_for_render("[G]Hello")
    LinePair(chord_line='G', lyric_line=' Hello')
    >>> parse_line_for_render("[C]Test [G]line")
    LinePair(chord_line='C     G', lyric_line=' Test  line')
    >>> parse_line_for_render("")
    LinePair(chord_line=' ', lyric_line=' ')
    """
    if not line or not line.strip():
        return LinePair(chord_line=BLANK, lyric_line=BLANK)

    chord_parts: list[str] = []
    lyric_parts: list[str] = []
    for part in SPLIT_RE.split(line):
        if not part:
            continue
        if CHORD_TOKEN_RE.fullmatch(part):
            name = part[1:-1]
            chord_parts.append(name)
            lyric_parts.append(" " * len(name))
        else:
            chord_parts.append(" " * len(part))
            lyric_parts.append(part)

    chord_line = "".join(chord_parts).rstrip()
    lyric_line = "".join(lyric_parts).rstrip()
    return LinePair(chord_line=chord_line or BLANK, lyric_line=lyric_line or BLANK)


def transpose_lyrics(content: str, amount: int, *, bass: bool = False) -> str:
    """Replace every ``[X]`` in ``content`` with ``[X]`` transposed.

    Examples
    --------
    >>> transpose_lyrics("[C]Test [G]line", 2)
    '[D]Test [A]line'
    >>> transpose_lyrics("No chords here", 5)
    'No chords here'
    """
    if amount == 0:
        return content
    return CHORD_TOKEN_RE.sub(lambda m: f"[{transpose_chord(m.group(1), amount, bass=bass)}]", content)


def extract_chords(content: str) -> list[str]:
    """Return the chord names in ``content`` in order of appearance.

    Examples
    --------
    >>> extract_chords("[G]Just type [D]here\\n[Em]and [C]here")
    ['G', 'D', 'Em', 'C']
    """
    return CHORD_TOKEN_RE.findall(content)


def insert_chord(content: str, index: int, chord: str) -> tuple[str, int]:
    """Insert ``[chord]`` into ``content`` at a caret position.

    The index is clamped to the content. Returns the new content and the caret
    position just after the inserted token.

    Examples
    --------
    >>> insert_chord("Hello world", 6, "C")
    ('Hello [C]world', 9)
    """
    index = max(0, min(index, len(content)))
    token = f"[{chord}]"
    return content[:index] + token + content[index:], index + len(token)

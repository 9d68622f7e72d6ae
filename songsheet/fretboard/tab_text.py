"""Reading ASCII tablature back into positioned notes.

This is the inverse of ``render_tab_text``: a character column in the text
becomes a horizontal position on the diagram, so importing a pasted tab and
rendering it again lines the notes up the same way.
"""

from __future__ import annotations

import logging
import re

from songsheet.fretboard.geometry import DEFAULT_GEOMETRY, FretboardGeometry
from songsheet.models import (
    DEFAULT_STRING_COUNT,
    NOTATION_MARKERS,
    VALID_STRING_COUNTS,
    MusicalContext,
    TabNote,
    to_stored_fret,
)

logger = logging.getLogger(__name__)

# A line that looks like tablature: a bar with dashes on either side of it
TAB_LINE_RE = re.compile(r"\|.*-|-.*\|")

FRET_RE = re.compile(r"\d+")

# Text before the bar that is itself part of the string line, as in "--3--5--|"
BARE_PREFIX_RE = re.compile(r"^\s*[-\d]+$")


def is_tab_line(line: str) -> bool:
    """Check whether a line looks like a tablature string line.

    Examples
    --------
    >>> is_tab_line("e|---3---|")
    True
    >>> is_tab_line("Hello - world")
    False
    """
    return bool(TAB_LINE_RE.search(line))


def string_count_for(line_count: int) -> int:
    """Pick the instrument string count for a stave of ``line_count`` lines."""
    if line_count in VALID_STRING_COUNTS:
        return line_count
    if line_count > max(VALID_STRING_COUNTS):
        return max(VALID_STRING_COUNTS)
    return DEFAULT_STRING_COUNT


def split_staves(lines: list[str]) -> list[list[str]]:
    """Group consecutive tab lines into staves, dropping everything else."""
    staves: list[list[str]] = []
    current: list[str] = []
    for line in lines:
        if is_tab_line(line):
            current.append(line)
            continue
        if current:
            staves.append(current)
            current = []
    if current:
        staves.append(current)
    return staves


def body_start(line: str) -> int | None:
    """Return where the notes of a tab string line begin, or None without a bar.

    Examples
    --------
    >>> body_start("e|--3--|")
    2
    >>> body_start("--3--5--|")
    0
    """
    bar = line.find("|")
    if bar < 0:
        return None
    if BARE_PREFIX_RE.match(line[:bar]):
        return 0
    return bar + 1


def parse_string_line(
    line: str,
    string: int,
    context: MusicalContext,
    column_offset: int = 0,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> list[TabNote]:
    """Read the notes on one tab string line.

    Text after the first ``|`` is scanned for fret numbers, or the whole line
    when it has no string label. A marker directly after a fret
    becomes the note's notation; ``7b9`` is a bend from 7 to 9.
    Frets are read as played under ``context`` and stored canonically.

    Examples
    --------
    >>> notes = parse_string_line("e|--5h7--|", 0, MusicalContext())
    >>> [(n.fret, n.notation) for n in notes]
    [(5, 'h'), (7, None)]
    """
    start = body_start(line)
    if start is None:
        return []
    body = line[start:]

    notes: list[TabNote] = []
    consumed = 0
    for match in FRET_RE.finditer(body):
        if match.start() < consumed:
            continue
        end = match.end()
        notation = None
        bend_target = None
        if end < len(body) and body[end] in NOTATION_MARKERS:
            notation = body[end]
            end += 1
            if notation == "b":
                target = FRET_RE.match(body, end)
                if target is not None:
                    bend_target = to_stored_fret(int(target.group()), context)
                    end = target.end()
        consumed = end

        column = column_offset + match.start() + 1
        notes.append(
            TabNote(
                string=string,
                fret=to_stored_fret(int(match.group()), context),
                position=geometry.position_of(column),
                notation=notation,
                bend_target=bend_target,
            )
        )
    return notes


def parse_tab_text(
    lines: list[str],
    context: MusicalContext,
    geometry: FretboardGeometry = DEFAULT_GEOMETRY,
) -> tuple[int, list[TabNote]]:
    """Convert pasted tablature into notes.

    Staves (runs of consecutive tab lines) are laid end to end, each starting
    after the widest line of the previous one.

    Parameters
    ----------
    lines : list[str]
        Raw text lines; non-tab lines are ignored.
    context : MusicalContext
        Tuning and capo the tab was written for.
    geometry : FretboardGeometry
        Supplies the pixels-per-column scale.

    Returns
    -------
    tuple[int, list[TabNote]]
        Instrument string count and the notes in reading order.
    """
    staves = split_staves(lines)
    if not staves:
        return DEFAULT_STRING_COUNT, []

    string_count = string_count_for(max(len(stave) for stave in staves))
    notes: list[TabNote] = []
    column_offset = 0
    for stave in staves:
        if len(stave) > string_count:
            logger.debug("Dropping %d extra tab lines", len(stave) - string_count)
        width = 0
        for string, line in enumerate(stave[:string_count]):
            notes.extend(parse_string_line(line, string, context, column_offset, geometry))
            width = max(width, len(line) - (body_start(line) or 0))
        column_offset += width
    return string_count, notes

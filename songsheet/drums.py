"""Drum tab grid model.

A drum tab is stored as text, one line per instrument::

    HH|x-x-x-x-x-x-x-x-|
    SD|----o-------o---|
    BD|o-------o-------|

Each character of the pattern is one subdivision. The grid model parses that
text into rows, edits cells by cycling through the notation alphabet, and
serializes back with the bars aligned.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace

from songsheet.exceptions import DrumGridError

logger = logging.getLogger(__name__)

EMPTY_CELL = "-"

# Order a cell cycles through when clicked
CLICK_CYCLE: tuple[str, ...] = ("-", "x", "o", "b", "X", "O", "#")

DRUM_NOTATION: dict[str, str] = {
    "-": "Empty beat",
    "x": "Hi-Hat / Cymbal (stroke)",
    "X": "Hi-Hat / Cymbal (accent)",
    "o": "Snare (stroke)",
    "O": "Snare (accent)",
    "#": "Cymbal (choke)",
    "g": "Ghost note",
    "d": "Drag",
    "b": "Bass Drum",
}

DEFAULT_INSTRUMENTS: dict[str, str] = {
    "HH": "Hi-Hat",
    "SD": "Snare Drum",
    "BD": "Bass Drum",
    "CR": "Crash Cymbal",
    "RD": "Ride Cymbal",
    "T1": "High Tom",
    "T2": "Mid Tom",
    "FT": "Floor Tom",
    "HT": "High Tom",
    "MT": "Mid Tom",
    "LT": "Low Tom",
}

# Narrowest grid the editor shows
MIN_COLUMNS = 16

# Shortest width short codes are padded to
MIN_CODE_WIDTH = 2

DRUM_TAB_TEMPLATE = "HH|x-x-x-x-x-x-x-x-|\nSD|----o-------o---|\nBD|o-------o-------|"

# "<code><padding>|<pattern>|"
ROW_RE = re.compile(r"^(.+?)\|(.+)\|$")


@dataclass(frozen=True)
class DrumRow:
    """One instrument line of a drum tab.

    Parameters
    ----------
    instrument : str
        Display name (e.g., "Hi-Hat").
    short_code : str
        Code written at the start of the line (e.g., "HH").
    pattern : str
        One notation character per subdivision.
    """

    instrument: str
    short_code: str
    pattern: str


def instrument_name(short_code: str, instruments: dict[str, str] | None = None) -> str:
    """Look up an instrument's display name, falling back to the code itself.

    Examples
    --------
    >>> instrument_name("SD")
    'Snare Drum'
    >>> instrument_name("COW")
    'COW'
    """
    if instruments and short_code in instruments:
        return instruments[short_code]
    return DEFAULT_INSTRUMENTS.get(short_code, short_code)


def parse(tab_string: str, instruments: dict[str, str] | None = None) -> list[DrumRow]:
    """Parse drum tab text into rows.

    Lines that are not ``<code>|<pattern>|`` are discarded.

    Parameters
    ----------
    tab_string : str
        The stored drum tab content.
    instruments : dict[str, str] | None
        Extra short code -> name entries checked before the defaults.

    Returns
    -------
    list[DrumRow]
        Parsed rows in line order.

    Examples
    --------
    >>> rows = parse("HH|x-x-|\\nnot a row\\nBD|o---|")
    >>> [(r.instrument, r.pattern) for r in rows]
    [('Hi-Hat', 'x-x-'), ('Bass Drum', 'o---')]
    """
    if not tab_string or not isinstance(tab_string, str):
        return []

    rows: list[DrumRow] = []
    for line in tab_string.splitlines():
        if "|" not in line:
            continue
        match = ROW_RE.match(line)
        if not match:
            logger.debug("Skipping unparseable drum line: %r", line)
            continue
        code = match.group(1).strip()
        if not code:
            continue
        rows.append(
            DrumRow(
                instrument=instrument_name(code, instruments),
                short_code=code,
                pattern=match.group(2),
            )
        )
    return rows


def serialize(rows: list[DrumRow]) -> str:
    """Write rows back to drum tab text with aligned bars.

    Examples
    --------
    >>> print(serialize([DrumRow("Hi-Hat", "HH", "x-x-"), DrumRow("Cowbell", "COW", "o---")]))
    HH |x-x-|
    COW|o---|
    """
    width = max([MIN_CODE_WIDTH, *(len(row.short_code) for row in rows)])
    return "\n".join(f"{row.short_code.ljust(width)}|{row.pattern}|" for row in rows)


def next_cell_value(char: str) -> str:
    """Return the character a cell cycles to when clicked.

    Characters outside ``CLICK_CYCLE`` go back to the start of the cycle.

    Examples
    --------
    >>> next_cell_value("-")
    'x'
    >>> next_cell_value("#")
    '-'
    >>> next_cell_value("g")
    '-'
    """
    try:
        index = CLICK_CYCLE.index(char)
    except ValueError:
        return CLICK_CYCLE[0]
    return CLICK_CYCLE[(index + 1) % len(CLICK_CYCLE)]


def describe_cell(char: str) -> str:
    """Return the tooltip text for a notation character."""
    return DRUM_NOTATION.get(char, "Unknown")


@dataclass
class DrumGrid:
    """Editable drum grid backing a drum tab block.

    Parameters
    ----------
    rows : list[DrumRow]
        Instrument rows in display order.
    instruments : dict[str, str]
        Custom short code -> name entries added while editing.
    """

    rows: list[DrumRow] = field(default_factory=list)
    instruments: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_string(cls, tab_string: str, instruments: dict[str, str] | None = None) -> DrumGrid:
        custom = dict(instruments or {})
        return cls(rows=parse(tab_string, custom), instruments=custom)

    @property
    def column_count(self) -> int:
        return max([MIN_COLUMNS, *(len(row.pattern) for row in self.rows)])

    def cells(self, row: int) -> str:
        """Return a row's pattern padded to the grid width."""
        return self.rows[row].pattern.ljust(self.column_count, EMPTY_CELL)

    def cycle_cell(self, row: int, column: int) -> str | None:
        """Advance one cell through ``CLICK_CYCLE``.

        Returns
        -------
        str | None
            The cell's new character, or None if the cell is outside the grid.
        """
        if not 0 <= row < len(self.rows) or not 0 <= column < self.column_count:
            return None
        cells = list(self.cells(row))
        cells[column] = next_cell_value(cells[column])
        self.rows[row] = replace(self.rows[row], pattern="".join(cells))
        return cells[column]

    def add_instrument(self, name: str, short_code: str) -> DrumRow:
        """Append an empty row for a new instrument.

        Raises
        ------
        DrumGridError
            If the name or short code is empty.
        """
        name = name.strip()
        short_code = short_code.strip()
        if not name or not short_code:
            msg = "Instrument name and short code are both required"
            raise DrumGridError(msg)
        if "|" in short_code:
            msg = f"Short code may not contain '|': {short_code!r}"
            raise DrumGridError(msg)

        row = DrumRow(
            instrument=name,
            short_code=short_code,
            pattern=EMPTY_CELL * self.column_count,
        )
        self.instruments[short_code] = name
        self.rows.append(row)
        return row

    def to_string(self) -> str:
        """Serialize with every row padded to the grid width."""
        padded = [replace(row, pattern=self.cells(i)) for i, row in enumerate(self.rows)]
        return serialize(padded)

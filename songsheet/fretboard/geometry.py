"""Pixel geometry of the interactive fretboard diagram.

This is the presentation-layer coordinate system. The musical model only deals
in (string, fret) pairs; these values map clicks and note positions to and
from that space.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FretboardGeometry:
    """Fretboard diagram dimensions.

    Parameters
    ----------
    frets : int
        Highest fret on the diagram.
    nut_width : float
        Width of the nut at the left edge.
    fret_spacing : float
        Horizontal distance between frets.
    string_spacing : float
        Vertical distance between strings.
    column_width : float
        Horizontal pixels per character column in text tablature.
    """

    frets: int = 24
    nut_width: float = 15
    fret_spacing: float = 80
    string_spacing: float = 28
    column_width: float = 10

    def string_y(self, string: int) -> float:
        """Return the y coordinate of a string's center line."""
        return self.string_spacing / 2 + string * self.string_spacing

    def column_of(self, position: float) -> int:
        """Return the text-tab character column for a horizontal position."""
        return int((position - self.nut_width) // self.column_width)

    def position_of(self, column: int) -> float:
        """Return the horizontal position that falls at the start of ``column``."""
        return self.nut_width + column * self.column_width


DEFAULT_GEOMETRY = FretboardGeometry()

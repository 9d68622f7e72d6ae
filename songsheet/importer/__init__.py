"""Import of chord sheets pasted from the web.

Sections become lyrics blocks with inline ``[Chord]`` annotations, or tab
blocks when they contain tablature. Capo and tuning lines are returned as
metadata.
"""

from songsheet.importer.chord_detector import classify_line, is_chord
from songsheet.importer.models import ImportMetadata, ImportResult, Token
from songsheet.importer.parser import parse_pasted_song
from songsheet.importer.tokenizer import tokenize_line

__all__ = [
    "ImportMetadata",
    "ImportResult",
    "Token",
    "classify_line",
    "is_chord",
    "parse_pasted_song",
    "tokenize_line",
]

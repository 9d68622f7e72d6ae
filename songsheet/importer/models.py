"""Data models for importing pasted chord sheets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from songsheet.models import Block
from songsheet.tunings import DEFAULT_TUNING

TokenKind = Literal["chord", "word", "punct", "other"]

LineType = Literal["chord", "lyric", "empty", "comment", "section_header"]


@dataclass(frozen=True)
class Token:
    """A whitespace-delimited token with its column span.

    Parameters
    ----------
    text : str
        The token text.
    start : int
        Inclusive start column (0-indexed).
    end : int
        Exclusive end column.
    kind : TokenKind
        Classification, "other" until ``classify_token`` runs.

    Examples
    --------
    >>> token = Token(text="Gm7", start=0, end=3, kind="chord")
    >>> token.start, token.end
    (0, 3)
    """

    text: str
    start: int
    end: int
    kind: TokenKind = "other"


@dataclass(frozen=True)
class ImportMetadata:
    """Song settings found in the pasted text.

    Parameters
    ----------
    capo : int
        Capo fret from a ``Capo: N`` line, 0 if none.
    tuning : str
        Tuning registry key from a ``Tuning: ...`` line.
    """

    capo: int = 0
    tuning: str = DEFAULT_TUNING


@dataclass
class ImportResult:
    """Blocks and metadata produced from a pasted sheet."""

    blocks: list[Block] = field(default_factory=list)
    metadata: ImportMetadata = field(default_factory=ImportMetadata)

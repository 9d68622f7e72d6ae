"""Column-aware tokenizer for pasted chord sheets.

Chord lines are aligned to lyric lines by character column, so tokens keep
the span they occupied in the original line.
"""

from __future__ import annotations

import re

from songsheet.importer.models import Token

TOKEN_RE = re.compile(r"\S+")


def tokenize_line(line: str) -> list[Token]:
    """Split a line on whitespace, keeping each token's column span.

    Parameters
    ----------
    line : str
        The line to tokenize, without its newline.

    Returns
    -------
    list[Token]
        Tokens with start (inclusive) and end (exclusive) columns, all of
        kind "other".

    Examples
    --------
    >>> [(t.text, t.start, t.end) for t in tokenize_line("Gm     C")]
    [('Gm', 0, 2), ('C', 7, 8)]
    >>> [(t.text, t.start) for t in tokenize_line("  Hello  world")]
    [('Hello', 2), ('world', 9)]
    """
    return [Token(text=m.group(), start=m.start(), end=m.end()) for m in TOKEN_RE.finditer(line)]

"""Chord detection and line classification for pasted chord sheets.

A regex pre-filter rejects obvious non-chords cheaply and pychord validates
whatever gets through. Chord sites decorate chord lines with bar lines,
repeat counts and "N.C."; those tokens are neither chords nor lyric words.
"""

from __future__ import annotations

import re

from pychord import Chord

from songsheet.importer.models import LineType, Token, TokenKind
from songsheet.importer.tokenizer import tokenize_line

MAX_CHORD_LENGTH = 15

# Share of a line's tokens that must be chords for it to be a chord line
CHORD_LINE_THRESHOLD = 0.6

# Root, optional accidental, any run of qualities, optional slash bass
CHORD_RE = re.compile(
    r"^[A-G][b#]?"
    r"(?:"
    r"m(?:aj)?(?:7|9|11|13)?|"
    r"M(?:aj)?(?:7|9|11|13)?|"
    r"dim(?:7)?|"
    r"aug(?:7)?|"
    r"sus[24]?(?:7)?|"
    r"add[29]|"
    r"[679]|"
    r"7|9|11|13|"
    r"m7-5|m7b5|"
    r"mM7|mmaj7|"
    r"5"
    r")*"
    r"(?:/[A-G][b#]?)?$",
    re.IGNORECASE,
)

# Repeat counts, no-chord and repeat-bar marks found among chords
MARKER_RE = re.compile(r"^(?:x\d+|\d+x|N\.?C\.?|%)$", re.IGNORECASE)

# Lowercase lyric words the pattern would otherwise accept
LYRIC_WORDS: frozenset[str] = frozenset({"a", "am", "be"})

SECTION_HEADER_RE = re.compile(r"^\s*\[.+?\]\s*$")
COMMENT_RE = re.compile(r"^\s*\(.+?\)\s*$")


def is_chord(text: str) -> bool:
    """Check whether a token is a chord symbol pychord understands.

    Examples
    --------
    >>> is_chord("F#m7")
    True
    >>> is_chord("G/B")
    True
    >>> is_chord("Road")
    False
    >>> is_chord("be")
    False
    """
    if not text or len(text) > MAX_CHORD_LENGTH:
        return False

    # Lowercase "a" and "am" in lyrics are words, "A" and "Am" are chords
    if text in LYRIC_WORDS:
        return False

    if CHORD_RE.match(text) is None:
        return False

    try:
        Chord(text)
    except ValueError:
        return False
    return True


def token_kind(text: str) -> TokenKind:
    """Return the kind of a token's text.

    Examples
    --------
    >>> [token_kind(t) for t in ["Em", "x2", "|", "tonight"]]
    ['chord', 'punct', 'punct', 'word']
    """
    if is_chord(text):
        return "chord"
    if MARKER_RE.match(text) or not any(c.isalnum() for c in text):
        return "punct"
    if any(c.isalpha() for c in text):
        return "word"
    return "other"


def classify_token(token: Token) -> Token:
    return Token(text=token.text, start=token.start, end=token.end, kind=token_kind(token.text))


def classify_tokens(tokens: list[Token]) -> list[Token]:
    return [classify_token(t) for t in tokens]


def tokenize_and_classify(line: str) -> list[Token]:
    return classify_tokens(tokenize_line(line))


def classify_line(line: str, tokens: list[Token] | None = None) -> LineType:
    """Decide what a line of a pasted sheet holds.

    Parameters
    ----------
    line : str
        One line of the sheet.
    tokens : list[Token] | None
        The line's classified tokens, if already computed.

    Returns
    -------
    LineType
        "empty", "section_header" (``[Name]``), "comment" (``(...)``),
        "chord" or "lyric". A chord line has no lyric words and at least
        ``CHORD_LINE_THRESHOLD`` of its tokens, punctuation and markers aside,
        are chords.

    Examples
    --------
    >>> classify_line("   ")
    'empty'
    >>> classify_line("[Chorus]")
    'section_header'
    >>> classify_line("(let ring)")
    'comment'
    >>> classify_line("G    D    Em   C")
    'chord'
    >>> classify_line("G  |  D  x2")
    'chord'
    >>> classify_line("Walking down the road")
    'lyric'
    """
    if not line.strip():
        return "empty"
    if SECTION_HEADER_RE.match(line):
        return "section_header"
    if COMMENT_RE.match(line):
        return "comment"

    if tokens is None:
        tokens = tokenize_and_classify(line)
    kinds = [t.kind for t in tokens if t.kind != "punct"]
    chords = kinds.count("chord")
    if chords and "word" not in kinds and chords / len(kinds) >= CHORD_LINE_THRESHOLD:
        return "chord"
    return "lyric"

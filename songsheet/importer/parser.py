"""Pasted chord sheet import.

Turns text copied from a chord/tab website into song blocks:

1. Capo and tuning lines are pulled out into ``ImportMetadata``; page
   footers and site banners are dropped.
2. Lines are grouped into sections at header lines (``[Chorus]``,
   ``Verse 2:``, ``Intro``).
3. Tablature in a section becomes a tab block. The rest of the section
   becomes a lyrics block, with chord lines merged into the lyric line below
   them as inline ``[Chord]`` tokens. A section holding both gives one of
   each under the same label.
"""

from __future__ import annotations

import logging
import re

from songsheet.fretboard.tab_text import is_tab_line, parse_tab_text
from songsheet.importer.chord_detector import classify_line, tokenize_and_classify
from songsheet.importer.models import ImportMetadata, ImportResult, Token
from songsheet.lyrics import insert_chord
from songsheet.models import Block, LyricsBlock, MusicalContext, TabBlock

logger = logging.getLogger(__name__)

HEADER_RE = re.compile(
    r"^\s*(?:\[([^\]]+)\]|(intro|verse|chorus|bridge|pre-chorus|prechorus|solo|outro|tag|instrumental)[\s\d:]*)\s*$",
    re.IGNORECASE,
)

CAPO_RE = re.compile(r"capo\s*:?\s*(\d+)", re.IGNORECASE)
TUNING_RE = re.compile(r"tuning", re.IGNORECASE)

# Page footers and site banners left over from copying a web page
JUNK_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"^Page \d+/\d+$", re.IGNORECASE),
    re.compile(r"ultimate-guitar\.com", re.IGNORECASE),
)

# Phrase found on a tuning line -> tuning key, checked in order
TUNING_PHRASES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("eb", "e flat"), "EB_STANDARD"),
    (("drop d",), "DROP_D"),
    (("d standard",), "D_STANDARD"),
    (("drop c",), "DROP_C"),
)

PRE_CHORUS_RE = re.compile(r"pre-?chorus", re.IGNORECASE)

DEFAULT_LABEL = "Verse 1"


def preprocess(text: str) -> tuple[list[str], ImportMetadata]:
    """Split text into lines and pull out capo and tuning settings.

    Parameters
    ----------
    text : str
        The raw pasted text.

    Returns
    -------
    tuple[list[str], ImportMetadata]
        The remaining content lines and the settings found.

    Examples
    --------
    >>> lines, meta = preprocess("Capo: 3\\nTuning: Eb Eb Ab Db Gb Eb\\n[Intro]\\nPage 1/2")
    >>> lines, meta.capo, meta.tuning
    (['[Intro]'], 3, 'EB_STANDARD')
    """
    capo = 0
    tuning = ImportMetadata().tuning
    lines: list[str] = []
    for line in text.replace("\r", "").split("\n"):
        capo_match = CAPO_RE.search(line)
        if capo_match:
            capo = int(capo_match.group(1))
            continue
        if TUNING_RE.search(line):
            tuning = tuning_from_line(line) or tuning
            continue
        if any(junk.search(line) for junk in JUNK_RES):
            logger.debug("Dropping junk line: %r", line)
            continue
        lines.append(line)
    return lines, ImportMetadata(capo=capo, tuning=tuning)


def tuning_from_line(line: str) -> str | None:
    """Map a free-text tuning line to a tuning key.

    Examples
    --------
    >>> tuning_from_line("Tuning: Drop D")
    'DROP_D'
    >>> tuning_from_line("Tuning: Open G") is None
    True
    """
    lowered = line.lower()
    for phrases, key in TUNING_PHRASES:
        if any(phrase in lowered for phrase in phrases):
            return key
    return None


def extract_section_name(line: str) -> str | None:
    """Return the label of a header line, or None if it is not a header.

    Examples
    --------
    >>> extract_section_name("[VERSE 1]")
    'Verse 1'
    >>> extract_section_name("prechorus:")
    'Pre-Chorus'
    >>> extract_section_name("Hello world") is None
    True
    """
    match = HEADER_RE.match(line)
    if not match:
        return None
    label = match.group(1) if match.group(1) is not None else line.strip().rstrip(":")
    return format_label(label.strip())


def format_label(label: str) -> str:
    if not label:
        return "Section"
    label = label[0].upper() + label[1:].lower()
    return PRE_CHORUS_RE.sub("Pre-Chorus", label)


def merge_chord_lyric_lines(chord_line: str, lyric_line: str, chords: list[Token] | None = None) -> str:
    """Insert the chords of ``chord_line`` into ``lyric_line`` at their columns.

    Chords are inserted right to left so earlier columns stay valid. A chord
    past the end of the lyric is attached at the end.

    Examples
    --------
    >>> merge_chord_lyric_lines("G        C", "Hello my friend")
    '[G]Hello my [C]friend'
    >>> merge_chord_lyric_lines("D          A", "Short")
    '[D]Short[A]'
    """
    if chords is None:
        chords = tokenize_and_classify(chord_line)
    merged = lyric_line
    for token in reversed([t for t in chords if t.kind == "chord"]):
        merged, _ = insert_chord(merged, token.start, token.text)
    return merged


def bracket_chord_line(line: str, chords: list[Token] | None = None) -> str:
    """Wrap each chord of a standalone chord line in brackets.

    Examples
    --------
    >>> bracket_chord_line("G   D   Em")
    '[G]   [D]   [Em]'
    """
    if chords is None:
        chords = tokenize_and_classify(line)
    for token in reversed([t for t in chords if t.kind == "chord"]):
        line = f"{line[: token.start]}[{token.text}]{line[token.end :]}"
    return line


def convert_lyric_lines(lines: list[str]) -> list[str]:
    """Rewrite a section's lines into inline-chord lyrics content."""
    converted: list[str] = []
    i = 0
    n = len(lines)
    while i < n:
        line = lines[i]
        tokens = tokenize_and_classify(line)
        if classify_line(line, tokens) != "chord":
            converted.append(line)
            i += 1
            continue

        if i + 1 < n and classify_line(lines[i + 1]) == "lyric":
            converted.append(merge_chord_lyric_lines(line, lines[i + 1], tokens))
            i += 2
            continue

        converted.append(bracket_chord_line(line, tokens))
        i += 1
    return converted


def _trim_blank_lines(lines: list[str]) -> list[str]:
    start = 0
    end = len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return [line.rstrip() for line in lines[start:end]]


def split_section_parts(lines: list[str]) -> list[list[str]]:
    """Separate a section's tablature from its other lines.

    A section with both yields two parts in the order they first appear. In
    the tab part every other line becomes blank, so staves stay apart.

    Examples
    --------
    >>> split_section_parts(["e|-3-|", "(let ring)"])
    [['e|-3-|', ''], ['(let ring)']]
    >>> split_section_parts(["G", "Hello"])
    [['G', 'Hello']]
    """
    tab_flags = [is_tab_line(line) for line in lines]
    if not any(tab_flags):
        return [lines]
    text_part = [line for line, is_tab in zip(lines, tab_flags) if not is_tab]
    if not any(line.strip() for line in text_part):
        return [lines]

    tab_part = [line if is_tab else "" for line, is_tab in zip(lines, tab_flags)]
    first_text = next(i for i, line in enumerate(lines) if line.strip() and not tab_flags[i])
    if tab_flags.index(True) < first_text:
        return [tab_part, text_part]
    return [text_part, tab_part]


def build_block(label: str, lines: list[str], block_id: str, context: MusicalContext) -> Block | None:
    """Build the block for one section, or None if it has no content.

    Lines holding any tablature make a tab block; only their tab lines are
    read. Use ``split_section_parts`` first to keep the rest.
    """
    if any(is_tab_line(line) for line in lines):
        dropped = [line for line in lines if line.strip() and not is_tab_line(line)]
        if dropped:
            logger.debug("Ignoring %d non-tab lines in tab section %r", len(dropped), label)
        strings, notes = parse_tab_text(lines, context)
        if not notes:
            logger.debug("Dropping tab section %r with no notes", label)
            return None
        return TabBlock(id=block_id, label=label, strings=strings, notes=notes)

    content = "\n".join(_trim_blank_lines(convert_lyric_lines(lines)))
    if not content:
        return None
    return LyricsBlock(id=block_id, label=label, content=content)


def split_sections(lines: list[str]) -> list[tuple[str, list[str]]]:
    """Group lines under their section headers.

    Lines before the first header go to a "Verse 1" section.
    """
    sections: list[tuple[str, list[str]]] = []
    current_label: str | None = None
    current_lines: list[str] = []
    for line in lines:
        label = extract_section_name(line)
        if label is None:
            current_lines.append(line)
            continue
        if current_label is not None or current_lines:
            sections.append((current_label or DEFAULT_LABEL, current_lines))
        current_label = label
        current_lines = []
    if current_label is not None or current_lines:
        sections.append((current_label or DEFAULT_LABEL, current_lines))
    return sections


def parse_pasted_song(text: str) -> ImportResult:
    """Parse a pasted chord sheet into song blocks.

    Parameters
    ----------
    text : str
        The raw pasted text.

    Returns
    -------
    ImportResult
        Non-empty blocks with ids ``block_1``, ``block_2``... and the capo
        and tuning found in the text.

    Examples
    --------
    >>> result = parse_pasted_song('''Capo 2
    ... [Chorus]
    ... G        C
    ... Hello my friend
    ... ''')
    >>> result.metadata.capo
    2
    >>> [(b.label, b.content) for b in result.blocks]
    [('Chorus', '[G]Hello my [C]friend')]
    """
    lines, metadata = preprocess(text)
    context = MusicalContext(tuning=metadata.tuning, capo=metadata.capo)

    blocks: list[Block] = []
    for label, section_lines in split_sections(lines):
        for part in split_section_parts(section_lines):
            block = build_block(label, part, f"block_{len(blocks) + 1}", context)
            if block is not None:
                blocks.append(block)

    logger.debug("Imported %d blocks", len(blocks))
    return ImportResult(blocks=blocks, metadata=metadata)

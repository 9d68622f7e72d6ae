"""Static registry of named instrument tunings.

Each tuning records its semitone offset from E standard and the names of its
open strings, highest string first. Eight names are kept per tuning so 7- and
8-string instruments take the first N.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_TUNING = "E_STANDARD"

# Shown for strings a tuning has no name for
UNKNOWN_STRING_NAME = "?"


@dataclass(frozen=True)
class Tuning:
    """A named tuning.

    Parameters
    ----------
    key : str
        Registry key (e.g., "DROP_D").
    name : str
        Display name (e.g., "Drop D").
    offset : int
        Semitones relative to E standard (e.g., -1 for Eb standard).
    strings : tuple[str, ...]
        Open string names, index 0 = highest pitched string.
    """

    key: str
    name: str
    offset: int
    strings: tuple[str, ...]


TUNINGS: dict[str, Tuning] = {
    "E_STANDARD": Tuning(
        key="E_STANDARD",
        name="E Standard",
        offset=0,
        strings=("e", "B", "G", "D", "A", "E", "B", "F#"),
    ),
    "EB_STANDARD": Tuning(
        key="EB_STANDARD",
        name="Eb Standard",
        offset=-1,
        strings=("d#", "A#", "F#", "C#", "G#", "D#", "A#", "F"),
    ),
    "D_STANDARD": Tuning(
        key="D_STANDARD",
        name="D Standard",
        offset=-2,
        strings=("d", "A", "F", "C", "G", "D", "A", "E"),
    ),
    "DROP_D": Tuning(
        key="DROP_D",
        name="Drop D",
        offset=0,
        strings=("e", "B", "G", "D", "A", "D", "A", "E"),
    ),
    "DROP_C": Tuning(
        key="DROP_C",
        name="Drop C",
        offset=-2,
        strings=("d", "A", "F", "C", "G", "C", "G", "D"),
    ),
}


def get_tuning(key: str | None) -> Tuning | None:
    """Look up a tuning by registry key.

    Examples
    --------
    >>> get_tuning("DROP_D").name
    'Drop D'
    >>> get_tuning("NOT_A_TUNING") is None
    True
    """
    if key is None:
        return None
    return TUNINGS.get(key)


def tuning_offset(key: str | None) -> int:
    """Return the semitone offset for a tuning key, 0 if unknown."""
    tuning = get_tuning(key)
    return tuning.offset if tuning is not None else 0


def string_names(key: str | None, count: int) -> list[str]:
    """Return the first ``count`` string names for a tuning.

    Unknown tunings, or tunings with fewer names than ``count``, are padded
    with ``"?"``.

    Examples
    --------
    >>> string_names("E_STANDARD", 6)
    ['e', 'B', 'G', 'D', 'A', 'E']
    >>> string_names("UNKNOWN", 2)
    ['?', '?']
    """
    tuning = get_tuning(key)
    names = list(tuning.strings[:count]) if tuning is not None else []
    names.extend([UNKNOWN_STRING_NAME] * (count - len(names)))
    return names

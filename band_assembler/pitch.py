"""Conversion between scientific pitch notation and semitone indices.

Notes are written as a letter, an optional accidental and a signed octave
(``C4``, ``F#5``, ``bb3``, ``C-1``). They are stored as integer semitone
indices where ``C4`` is 60, matching the MIDI numbering used by most music
software.

Example
-------
>>> from band_assembler.pitch import parse_pitch, format_pitch
>>> parse_pitch("C4")
60
>>> format_pitch(61, prefer_sharp=False)
'Db4'
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Dict, Tuple

__all__ = [
    "PitchParseError",
    "MIN_PITCH",
    "MAX_PITCH",
    "NOTE_TO_SEMITONE",
    "parse_pitch",
    "format_pitch",
    "pitch_class",
    "octave_of",
]

MIN_PITCH = 0
MAX_PITCH = 127

# Only the spellings a singer would normally write are recognised. ``Cb``,
# ``Fb``, ``E#`` and ``B#`` cross an octave boundary and are rejected.
NOTE_TO_SEMITONE: Dict[str, int] = {
    "C": 0,
    "C#": 1,
    "Db": 1,
    "D": 2,
    "D#": 3,
    "Eb": 3,
    "E": 4,
    "F": 5,
    "F#": 6,
    "Gb": 6,
    "G": 7,
    "G#": 8,
    "Ab": 8,
    "A": 9,
    "A#": 10,
    "Bb": 10,
    "B": 11,
}

# (sharp spelling, flat spelling) per pitch class.
_SPELLINGS: Tuple[Tuple[str, str], ...] = (
    ("C", "C"),
    ("C#", "Db"),
    ("D", "D"),
    ("D#", "Eb"),
    ("E", "E"),
    ("F", "F"),
    ("F#", "Gb"),
    ("G", "G"),
    ("G#", "Ab"),
    ("A", "A"),
    ("A#", "Bb"),
    ("B", "B"),
)

_NOTE_PATTERN = re.compile(r"([A-Ga-g])([#b]?)(-?[0-9]+)")


class PitchParseError(ValueError):
    """Raised when a note string cannot be converted to a semitone index."""


@lru_cache(maxsize=None)
def parse_pitch(note: str) -> int:
    """Convert a note string such as ``C#4`` into a semitone index.

    Parameters
    ----------
    note:
        Letter ``A``-``G`` (any case), optional ``#`` or ``b`` and a signed
        integer octave. No other characters are allowed.

    Returns
    -------
    int
        Semitone index in the range ``0-127``.

    Raises
    ------
    PitchParseError
        If ``note`` is malformed, names an unknown pitch class or maps
        outside ``0-127``.
    """

    if not isinstance(note, str):
        raise PitchParseError(f"Note must be a string, got {type(note).__name__}")

    match = _NOTE_PATTERN.fullmatch(note)
    if not match:
        logging.debug("Invalid note format: %s", note)
        raise PitchParseError(f"Invalid note format: {note!r}")

    letter, accidental, octave_str = match.groups()
    name = letter.upper() + accidental

    try:
        semitone = NOTE_TO_SEMITONE[name]
    except KeyError:
        logging.debug("Unknown note name: %s", name)
        raise PitchParseError(f"Unknown note name: {name}") from None

    # Octave numbering starts one below the index octave: C-1 == 0.
    value = (int(octave_str) + 1) * 12 + semitone

    # Typical cases:
    #   * ``C-1`` -> 0 (lower boundary)
    #   * ``G9``  -> 127 (upper boundary)
    # Rejected:
    #   * ``B-2`` -> -1
    #   * ``G#9`` -> 128
    if not MIN_PITCH <= value <= MAX_PITCH:
        logging.debug("Pitch out of range: %s -> %d", note, value)
        raise PitchParseError(
            f"Computed pitch {value} out of range {MIN_PITCH}-{MAX_PITCH} for note {note}"
        )

    return value


def _check_pitch(value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Pitch must be an int, got {type(value).__name__}")
    if not MIN_PITCH <= value <= MAX_PITCH:
        raise ValueError(f"Pitch {value} out of range {MIN_PITCH}-{MAX_PITCH}")


def format_pitch(value: int, prefer_sharp: bool = True) -> str:
    """Convert a semitone index back into a note name.

    Parameters
    ----------
    value:
        Semitone index between ``0`` (``C-1``) and ``127`` (``G9``).
    prefer_sharp:
        Spell black keys with ``#`` when ``True`` and with ``b`` otherwise.
        Natural notes have a single spelling.

    Raises
    ------
    ValueError
        If ``value`` lies outside ``0-127``.

    Examples
    --------
    >>> format_pitch(60)
    'C4'
    >>> format_pitch(70, prefer_sharp=False)
    'Bb4'
    """

    _check_pitch(value)
    sharp, flat = _SPELLINGS[value % 12]
    name = sharp if prefer_sharp else flat
    return f"{name}{octave_of(value)}"


def pitch_class(value: int) -> int:
    """Return the pitch class ``0-11`` of ``value`` (``0`` is C)."""

    _check_pitch(value)
    return value % 12


def octave_of(value: int) -> int:
    """Return the written octave of ``value`` (``60`` -> ``4``)."""

    _check_pitch(value)
    return value // 12 - 1

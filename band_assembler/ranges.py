"""Semitone intervals describing what a singer or a song covers.

A :class:`VocalRange` is an immutable ``(low, high)`` pair of semitone
indices with ``low < high``. The helpers in this module compare two ranges:
``width`` measures an interval, ``contains`` checks that one interval lies
inside another and ``comfort_margins`` reports the spare semitones left on
each side.

Example
-------
>>> singer = VocalRange.from_notes("A3", "G5")
>>> song = VocalRange.from_notes("C4", "C5")
>>> contains(singer, song)
True
>>> comfort_margins(singer, song)
(3, 7)
"""

from __future__ import annotations

from typing import NamedTuple, Tuple

from .pitch import MAX_PITCH, MIN_PITCH, format_pitch, parse_pitch

__all__ = [
    "InvalidRangeError",
    "VocalRange",
    "width",
    "contains",
    "comfort_margins",
]


class InvalidRangeError(ValueError):
    """Raised when a range would not satisfy ``low < high``."""


class _Bounds(NamedTuple):
    low: int
    high: int


class VocalRange(_Bounds):
    """Immutable semitone interval with ``low < high``.

    Instances behave like ``(low, high)`` tuples so they unpack naturally and
    compare by value.
    """

    __slots__ = ()

    def __new__(cls, low: int, high: int) -> "VocalRange":
        for value in (low, high):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidRangeError(
                    f"Range bounds must be integers, got {low!r} and {high!r}"
                )
            if not MIN_PITCH <= value <= MAX_PITCH:
                raise InvalidRangeError(
                    f"Range bound {value} out of range {MIN_PITCH}-{MAX_PITCH}"
                )
        if low >= high:
            raise InvalidRangeError(
                f"Lowest note must be below highest note (got {low} >= {high})"
            )
        return super().__new__(cls, low, high)

    @classmethod
    def from_notes(cls, low_note: str, high_note: str) -> "VocalRange":
        """Parse both note strings and build a range.

        Raises :class:`~band_assembler.pitch.PitchParseError` for malformed
        notes and :class:`InvalidRangeError` when ``low_note`` is not below
        ``high_note``.
        """

        return cls(parse_pitch(low_note), parse_pitch(high_note))

    @property
    def width(self) -> int:
        return self.high - self.low

    @property
    def midpoint(self) -> float:
        return (self.low + self.high) / 2.0

    def shifted(self, semitones: int) -> "VocalRange":
        """Return the range moved by ``semitones``.

        Raises :class:`InvalidRangeError` if either bound leaves ``0-127``.
        """

        return VocalRange(self.low + semitones, self.high + semitones)

    def to_notes(self, prefer_sharp: bool = True) -> Tuple[str, str]:
        return format_pitch(self.low, prefer_sharp), format_pitch(self.high, prefer_sharp)

    def __str__(self) -> str:
        low, high = self.to_notes()
        return f"{low}-{high}"


def width(vocal_range: VocalRange) -> int:
    """Return ``high - low`` in semitones."""

    return vocal_range.high - vocal_range.low


def contains(outer: VocalRange, inner: VocalRange) -> bool:
    """Return ``True`` when ``inner`` lies entirely within ``outer``."""

    return outer.low <= inner.low and outer.high >= inner.high


def comfort_margins(outer: VocalRange, inner: VocalRange) -> Tuple[int, int]:
    """Return the spare semitones ``(below, above)`` ``inner`` leaves in ``outer``.

    Both values are non-negative when :func:`contains` holds. Otherwise at
    least one is negative and the pair is only useful for diagnostics.
    """

    return inner.low - outer.low, outer.high - inner.high

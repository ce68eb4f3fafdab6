"""Search for the key change that best fits a song into a singer's range.

The solver compares a vocalist range ``V`` with a song range ``S`` and looks
for an integer shift ``k`` such that ``S + k`` lies inside ``V`` with spare
room on both sides. Spare room is measured by the comfort margins from
:mod:`band_assembler.ranges`; ``COMFORT`` semitones on each side is
considered comfortable. Shifts are limited to ``MAX_SHIFT`` semitones (a
perfect fifth) in either direction.

Algorithm
---------
1. Reject malformed ranges (``INVALID_RANGE``).
2. Reject songs wider than the singer (``RANGE_TOO_WIDE``); no shift helps.
3. If the song already fits, keep the original key (shift ``0``).
4. Otherwise score every shift in ``-MAX_SHIFT..MAX_SHIFT``. Feasible shifts
   are ranked by their smaller margin. When even the best of them is below
   ``COMFORT`` the choice falls back to the shift with the smallest total
   margin deficit below zero, which is the first shift that fits at all.
   Ties always go to the most negative shift.
5. No feasible shift -> ``NO_FEASIBLE_TRANSPOSITION``.

The solver never raises for numeric input; every outcome is reported through
:class:`TranspositionResult`.

Example
-------
>>> result = solve_transposition((57, 79), (60, 72))
>>> result.ok, result.shift
(True, 0)
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from .pitch import MAX_PITCH, MIN_PITCH, format_pitch
from .ranges import VocalRange, comfort_margins, contains

__all__ = [
    "COMFORT",
    "MAX_SHIFT",
    "EXTREME_NOTE_WARNING",
    "FailureKind",
    "TranspositionResult",
    "solve_transposition",
]

COMFORT = 3
MAX_SHIFT = 7

EXTREME_NOTE_WARNING = "may still challenge extreme notes"

RangeLike = Union[VocalRange, Tuple[int, int]]


class FailureKind(str, enum.Enum):
    INVALID_RANGE = "invalid_range"
    RANGE_TOO_WIDE = "range_too_wide"
    NO_FEASIBLE_TRANSPOSITION = "no_feasible_transposition"


@dataclass(frozen=True)
class TranspositionResult:
    """Outcome of :func:`solve_transposition` for one singer/song pair.

    ``vocalist_bounds`` and ``song_bounds`` always hold the raw input so a
    caller can display them even when the input was rejected. On success
    ``failure`` is ``None`` and ``shift``, ``transposed`` and ``margins``
    are populated; on failure those fields are ``None``.
    """

    vocalist_bounds: Tuple[Any, Any]
    song_bounds: Tuple[Any, Any]
    message: str
    shift: Optional[int] = None
    transposed: Optional[VocalRange] = None
    margins: Optional[Tuple[int, int]] = None
    vocalist_midpoint: Optional[float] = None
    song_midpoint: Optional[float] = None
    transposed_midpoint: Optional[float] = None
    failure: Optional[FailureKind] = None
    comfort: int = COMFORT

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def comfortable(self) -> bool:
        """``True`` for a success with at least ``comfort`` spare on both sides."""

        return self.ok and min(self.margins) >= self.comfort

    @property
    def flags_extreme_notes(self) -> bool:
        return EXTREME_NOTE_WARNING in self.message

    def to_dict(self, prefer_sharp: bool = True) -> Dict[str, Any]:
        """Return a JSON-serialisable summary for display layers."""

        data: Dict[str, Any] = {
            "ok": self.ok,
            "message": self.message,
            "vocalistBounds": list(self.vocalist_bounds),
            "songBounds": list(self.song_bounds),
            "failure": self.failure.value if self.failure else None,
            "shift": self.shift,
        }
        if self.ok:
            data.update(
                transposed=list(self.transposed.to_notes(prefer_sharp)),
                margins=list(self.margins),
                vocalistMidpoint=self.vocalist_midpoint,
                songMidpoint=self.song_midpoint,
                transposedMidpoint=self.transposed_midpoint,
            )
        return data


def _coerce(bounds: Any) -> Optional[VocalRange]:
    """Return ``bounds`` as a :class:`VocalRange` or ``None`` when malformed."""

    if isinstance(bounds, VocalRange):
        return bounds
    try:
        low, high = bounds
    except (TypeError, ValueError):
        return None
    for value in (low, high):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            return None
        if not MIN_PITCH <= value <= MAX_PITCH:
            return None
    if low >= high:
        return None
    return VocalRange(int(low), int(high))


def _raw(bounds: Any) -> Tuple[Any, Any]:
    try:
        low, high = bounds
    except (TypeError, ValueError):
        return (bounds, None)
    return (low, high)


def _describe_shift(shift: int) -> str:
    if shift == 0:
        return "original key"
    direction = "up" if shift > 0 else "down"
    unit = "semitone" if abs(shift) == 1 else "semitones"
    return f"transpose {direction} {abs(shift)} {unit}"


def _failure(kind: FailureKind, vocalist: Any, song: Any, message: str, comfort: int) -> TranspositionResult:
    logging.debug("Transposition failed (%s): %s", kind.value, message)
    return TranspositionResult(
        vocalist_bounds=_raw(vocalist),
        song_bounds=_raw(song),
        message=message,
        failure=kind,
        comfort=comfort,
    )


def _success(vocalist: VocalRange, song: VocalRange, shift: int, comfort: int) -> TranspositionResult:
    transposed = song.shifted(shift)
    margins = comfort_margins(vocalist, transposed)
    low, high = transposed.to_notes()
    if shift == 0:
        if min(margins) >= comfort:
            message = f"Comfortable in the original key ({low}-{high})"
        else:
            message = f"Fits but tight in the original key ({low}-{high}); {EXTREME_NOTE_WARNING}"
    else:
        message = f"Best fit: {_describe_shift(shift)} ({low}-{high})"
        if min(margins) < comfort:
            message += f"; {EXTREME_NOTE_WARNING}"
    return TranspositionResult(
        vocalist_bounds=(vocalist.low, vocalist.high),
        song_bounds=(song.low, song.high),
        message=message,
        shift=shift,
        transposed=transposed,
        margins=margins,
        vocalist_midpoint=vocalist.midpoint,
        song_midpoint=song.midpoint,
        transposed_midpoint=transposed.midpoint,
        comfort=comfort,
    )


def _best_shift(vocalist: VocalRange, song: VocalRange, comfort: int, max_shift: int) -> Optional[int]:
    """Return the preferred feasible shift or ``None`` when nothing fits."""

    # Ascending order so argmax/argmin (first extreme) prefer negative shifts.
    shifts = np.arange(-max_shift, max_shift + 1)
    low_margins = (song.low + shifts) - vocalist.low
    high_margins = vocalist.high - (song.high + shifts)
    feasible = (low_margins >= 0) & (high_margins >= 0)
    if not feasible.any():
        return None

    scores = np.where(feasible, np.minimum(low_margins, high_margins), np.iinfo(np.int64).min)
    best = int(np.argmax(scores))
    if scores[best] >= comfort:
        return int(shifts[best])

    # Nothing comfortable: a feasible shift has no margin below zero, so the
    # deficit sum is 0 for all of them and the first feasible shift wins.
    deficits = np.maximum(0, -low_margins) + np.maximum(0, -high_margins)
    deficits = np.where(feasible, deficits, np.iinfo(np.int64).max)
    return int(shifts[int(np.argmin(deficits))])


def solve_transposition(
    vocalist: RangeLike,
    song: RangeLike,
    *,
    comfort: int = COMFORT,
    max_shift: int = MAX_SHIFT,
) -> TranspositionResult:
    """Find the shift that best places ``song`` inside ``vocalist``.

    Parameters
    ----------
    vocalist:
        Singer range as a :class:`~band_assembler.ranges.VocalRange` or a raw
        ``(low, high)`` pair of semitone indices.
    song:
        Melodic range of the song, same forms as ``vocalist``.
    comfort:
        Spare semitones wanted on each side. Defaults to :data:`COMFORT`.
    max_shift:
        Largest shift considered in either direction. Defaults to
        :data:`MAX_SHIFT`.

    Returns
    -------
    TranspositionResult
        Success with a shift in ``[-max_shift, max_shift]`` or one of the
        :class:`FailureKind` outcomes.
    """

    if comfort < 0:
        raise ValueError("comfort must be non-negative")
    if max_shift < 0:
        raise ValueError("max_shift must be non-negative")

    v_range = _coerce(vocalist)
    s_range = _coerce(song)
    if v_range is None or s_range is None:
        which = "vocalist" if v_range is None else "song"
        return _failure(
            FailureKind.INVALID_RANGE,
            vocalist,
            song,
            f"Invalid {which} range {_raw(vocalist if v_range is None else song)}: "
            f"bounds must be pitches {MIN_PITCH}-{MAX_PITCH} with low below high",
            comfort,
        )

    if s_range.width > v_range.width:
        return _failure(
            FailureKind.RANGE_TOO_WIDE,
            vocalist,
            song,
            f"Song spans {s_range.width} semitones but the vocalist only covers "
            f"{v_range.width}; no transposition can fit it",
            comfort,
        )

    if contains(v_range, s_range):
        return _success(v_range, s_range, 0, comfort)

    shift = _best_shift(v_range, s_range, comfort, max_shift)
    if shift is None:
        return _failure(
            FailureKind.NO_FEASIBLE_TRANSPOSITION,
            vocalist,
            song,
            f"No shift within +/-{max_shift} semitones places "
            f"{format_pitch(s_range.low)}-{format_pitch(s_range.high)} inside "
            f"{format_pitch(v_range.low)}-{format_pitch(v_range.high)}",
            comfort,
        )
    return _success(v_range, s_range, shift, comfort)

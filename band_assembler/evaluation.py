"""Song recommendations and a short summary for a seated band.

Only performers sitting in a slot that accepts the ``vocalist`` role are
evaluated as singers; a guitarist who also sings is not considered unless
seated in a vocal slot.

The summary is derived from slot occupancy alone:

* nothing seated -> :data:`STYLE_INCOMPLETE`;
* ``electric_guitar`` filled -> :data:`STYLE_ROCK` plus the riffs note;
* any vocal slot filled -> the lead vocal note;
* more than :data:`FULL_LINE_UP` slots filled -> the fairly complete note.

Example
-------
>>> from band_assembler import BandModel, evaluate_band
>>> evaluate_band(BandModel(), []).overall_style
'band not yet complete'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple

from .performers import VOCALIST, Performer
from .ranges import VocalRange
from .repertoire import RankedSong, SongEntry, rank_repertoire
from .slots import BandModel, Slot
from .transposition import COMFORT, MAX_SHIFT

__all__ = [
    "STYLE_INCOMPLETE",
    "STYLE_MIXED",
    "STYLE_ROCK",
    "TONE_ELECTRIC_RIFFS",
    "TONE_LEAD_VOCAL",
    "TONE_FULL_LINE_UP",
    "FULL_LINE_UP",
    "VocalistReport",
    "BandReport",
    "vocal_slots",
    "band_style",
    "evaluate_band",
]

STYLE_INCOMPLETE = "band not yet complete"
STYLE_MIXED = "mixed style"
STYLE_ROCK = "rock foundation"

TONE_ELECTRIC_RIFFS = "features electric guitar riffs"
TONE_LEAD_VOCAL = "has a lead vocal"
TONE_FULL_LINE_UP = "line-up fairly complete"

# Seats needed before the line-up counts as fairly complete (strictly more).
FULL_LINE_UP = 3

ELECTRIC_GUITAR_SLOT = "electric_guitar"


@dataclass(frozen=True)
class VocalistReport:
    slot_id: str
    performer: Performer
    vocal_range: VocalRange
    recommendations: List[RankedSong]


@dataclass(frozen=True)
class BandReport:
    """Outcome of :func:`evaluate_band`."""

    overall_style: str
    special_tones: List[str] = field(default_factory=list)
    vocalists: List[VocalistReport] = field(default_factory=list)


def vocal_slots(model: BandModel) -> Iterator[Slot]:
    """Yield occupied slots that accept vocalists, in slot order."""

    for slot in model.slots:
        if VOCALIST in slot.definition.accepts and slot.performer is not None:
            yield slot


def band_style(model: BandModel) -> Tuple[str, List[str]]:
    """Return ``(overall_style, special_tones)`` for the current seating."""

    filled = [slot for slot in model.slots if slot.performer is not None]
    style = STYLE_MIXED
    tones: List[str] = []
    if not filled:
        style = STYLE_INCOMPLETE
    elif any(slot.id == ELECTRIC_GUITAR_SLOT for slot in filled):
        style = STYLE_ROCK
        tones.append(TONE_ELECTRIC_RIFFS)
    if next(vocal_slots(model), None) is not None:
        tones.append(TONE_LEAD_VOCAL)
    if len(filled) > FULL_LINE_UP:
        tones.append(TONE_FULL_LINE_UP)
    return style, tones


def evaluate_band(
    model: BandModel,
    catalog: Iterable[SongEntry],
    *,
    comfort: int = COMFORT,
    max_shift: int = MAX_SHIFT,
) -> BandReport:
    """Summarise the line-up and rank ``catalog`` for each seated vocalist.

    Vocalists without a usable precise range are logged and left out of
    :attr:`BandReport.vocalists`; they still count towards the summary.
    """

    songs = list(catalog)
    style, tones = band_style(model)
    reports: List[VocalistReport] = []
    for slot in vocal_slots(model):
        performer = slot.performer
        vocal_range = performer.vocal_range()
        if vocal_range is None:
            logging.info("%s in %s has no precise vocal range; skipping", performer.name, slot.id)
            continue
        reports.append(
            VocalistReport(
                slot_id=slot.id,
                performer=performer,
                vocal_range=vocal_range,
                recommendations=rank_repertoire(
                    vocal_range, songs, comfort=comfort, max_shift=max_shift
                ),
            )
        )
    return BandReport(overall_style=style, special_tones=tones, vocalists=reports)

"""Rank a song catalog by how well each song suits a vocalist.

:func:`rank_repertoire` runs :func:`~band_assembler.transposition.solve_transposition`
for every catalog entry and keeps two kinds of result:

``perfect``
    The song fits in its original key with comfortable margins.
``comfortable_with_shift``
    A shift of at most three semitones gives comfortable margins.

Everything else is dropped, including songs whose notes fail to parse and
songs the solver cannot place. Callers needing the reason a song was dropped
should call the solver directly.

Example
-------
>>> catalog = [SongEntry("Hallelujah", "C4", "A4", genre="ballad")]
>>> [r.entry.title for r in rank_repertoire(VocalRange(55, 79), catalog)]
['Hallelujah']
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional

from .pitch import PitchParseError
from .ranges import InvalidRangeError, VocalRange
from .transposition import COMFORT, MAX_SHIFT, TranspositionResult, solve_transposition

__all__ = [
    "MAX_COMFORTABLE_SHIFT",
    "FitTier",
    "SongEntry",
    "RankedSong",
    "rank_repertoire",
    "load_catalog_entries",
]

MAX_COMFORTABLE_SHIFT = 3


class FitTier(enum.IntEnum):
    # Lower values sort first.
    PERFECT = 0
    COMFORTABLE_WITH_SHIFT = 1

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class SongEntry:
    """A song in the catalog; ``title`` is unique within a catalog.

    ``genre``, ``artist``, ``key`` and ``tempo`` are display metadata and do
    not influence ranking.
    """

    title: str
    lowest_note: str
    highest_note: str
    genre: Optional[str] = None
    artist: Optional[str] = None
    key: Optional[str] = None
    tempo: Optional[str] = None

    def vocal_range(self) -> VocalRange:
        """Parse the note bounds into a :class:`VocalRange`.

        Raises :class:`~band_assembler.pitch.PitchParseError` or
        :class:`~band_assembler.ranges.InvalidRangeError`.
        """

        return VocalRange.from_notes(self.lowest_note, self.highest_note)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "songLowestNote": self.lowest_note,
            "songHighestNote": self.highest_note,
        }
        for name, value in (
            ("primaryGenre", self.genre),
            ("artist", self.artist),
            ("key", self.key),
            ("tempo", self.tempo),
        ):
            if value is not None:
                data[name] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SongEntry":
        return cls(
            title=data["title"],
            lowest_note=data["songLowestNote"],
            highest_note=data["songHighestNote"],
            genre=data.get("primaryGenre"),
            artist=data.get("artist"),
            key=data.get("key"),
            tempo=data.get("tempo"),
        )


class RankedSong(NamedTuple):
    entry: SongEntry
    result: TranspositionResult
    tier: FitTier


def _classify(result: TranspositionResult) -> Optional[FitTier]:
    if not result.ok or result.flags_extreme_notes:
        return None
    if result.shift == 0:
        return FitTier.PERFECT
    if abs(result.shift) <= MAX_COMFORTABLE_SHIFT:
        return FitTier.COMFORTABLE_WITH_SHIFT
    return None


def rank_repertoire(
    vocalist: VocalRange,
    catalog: Iterable[SongEntry],
    *,
    comfort: int = COMFORT,
    max_shift: int = MAX_SHIFT,
) -> List[RankedSong]:
    """Return the songs from ``catalog`` that suit ``vocalist``, best first.

    Parameters
    ----------
    vocalist:
        The singer's precise range.
    catalog:
        Songs to consider. Each call recomputes everything from scratch.
    comfort, max_shift:
        Passed through to :func:`solve_transposition`.

    Returns
    -------
    List[RankedSong]
        Perfect fits before shifted ones, then by ``abs(shift)``, then by
        title (case sensitive).
    """

    ranked: List[RankedSong] = []
    for entry in catalog:
        try:
            song_range = entry.vocal_range()
        except (PitchParseError, InvalidRangeError) as exc:
            logging.debug("Skipping %r: %s", entry.title, exc)
            continue
        result = solve_transposition(vocalist, song_range, comfort=comfort, max_shift=max_shift)
        tier = _classify(result)
        if tier is None:
            logging.debug("Excluding %r: %s", entry.title, result.message)
            continue
        ranked.append(RankedSong(entry, result, tier))

    ranked.sort(key=lambda item: (item.tier, abs(item.result.shift), item.entry.title))
    return ranked


def load_catalog_entries(records: Iterable[Mapping[str, Any]]) -> List[SongEntry]:
    """Build :class:`SongEntry` objects from mappings, enforcing unique titles."""

    entries: List[SongEntry] = []
    seen = set()
    for record in records:
        entry = SongEntry.from_dict(record)
        if entry.title in seen:
            raise ValueError(f"Duplicate song title in catalog: {entry.title}")
        seen.add(entry.title)
        entries.append(entry)
    return entries

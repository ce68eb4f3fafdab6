"""Tests for catalog ranking in :mod:`band_assembler.repertoire`.

All scenarios use a singer covering C4-E5 (60-76). Comments next to each
song give its semitone bounds and the solver outcome for that singer.
"""

import importlib
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

rep = importlib.import_module("band_assembler.repertoire")
ranges = importlib.import_module("band_assembler.ranges")
SongEntry = rep.SongEntry
FitTier = rep.FitTier
VocalRange = ranges.VocalRange

SINGER = VocalRange(60, 76)


def _song(title, low, high, genre="pop"):
    return SongEntry(title, low, high, genre=genre)


@pytest.fixture
def catalog():
    return [
        _song("Zeta", "D#4", "C#5"),  # 63-73: fits as written, margins (3, 3)
        _song("Alpha", "E4", "C5"),  # 64-72: fits as written, margins (4, 4)
        _song("Bravo", "A3", "G4"),  # 57-67: best shift +6
        _song("Charlie", "C4", "E5"),  # 60-76: fits as written, margins (0, 0)
        _song("Delta", "G#3", "F#4"),  # 56-66: best shift +7
        _song("Echo", "C3", "C5"),  # 48-72: wider than the singer
        _song("Foxtrot", "Q4", "C5"),  # unparsable
        _song("Golf", "C5", "C4"),  # inverted
        _song("Hotel", "D4", "E5"),  # 62-78: fits as written, margins (2, 0)
        _song("India", "C#4", "D#5"),  # 61-75: fits as written, margins (1, 1)
        _song("Juliet", "F4", "G5"),  # 65-79: best shift -5, margins (0, 2)
    ]


def test_only_comfortable_fits_survive(catalog):
    ranked = rep.rank_repertoire(SINGER, catalog)
    assert [item.entry.title for item in ranked] == ["Alpha", "Zeta"]
    assert all(item.tier is FitTier.PERFECT for item in ranked)
    assert all(item.result.shift == 0 for item in ranked)


def test_tight_and_far_fits_are_excluded(catalog):
    titles = {item.entry.title for item in rep.rank_repertoire(SINGER, catalog)}
    # Tight in the original key, shifted too far, or still tight after shifting.
    assert not titles & {"Charlie", "Hotel", "India", "Bravo", "Delta", "Juliet"}


def test_failures_and_bad_entries_are_dropped_quietly(catalog, caplog):
    with caplog.at_level("DEBUG"):
        titles = {item.entry.title for item in rep.rank_repertoire(SINGER, catalog)}
    assert not titles & {"Echo", "Foxtrot", "Golf"}
    assert "Skipping 'Foxtrot'" in caplog.text
    assert all(record.levelno <= logging.DEBUG for record in caplog.records)


def test_unparsable_entry_logs_nothing_above_debug(caplog):
    with caplog.at_level(logging.DEBUG):
        assert rep.rank_repertoire(SINGER, [_song("Bad", "Q4", "C5")]) == []
    assert [record.levelname for record in caplog.records] == ["DEBUG", "DEBUG"]


def test_shifted_tier_with_relaxed_comfort():
    """With one semitone of comfort small shifts become comfortable."""
    songs = [
        _song("Lima", "B3", "A#4"),  # 59-70: shift +3, margins (2, 3)
        _song("Kilo", "E4", "F5"),  # 64-77: shift -3, margins (1, 2)
        _song("Zeta", "D#4", "C#5"),  # perfect
        _song("Papa", "D#4", "F5"),  # 63-77: shift -2, margins (1, 1)
        _song("India", "C#4", "D#5"),  # perfect with comfort 1
        _song("Mike", "C#4", "F5"),  # 61-77: shift -1, margins (0, 0)
        _song("November", "A#3", "G#4"),  # 58-68: shift +5
        _song("Alpha", "E4", "C5"),  # perfect
    ]
    ranked = rep.rank_repertoire(SINGER, songs, comfort=1)
    assert [item.entry.title for item in ranked] == [
        "Alpha",
        "India",
        "Zeta",
        "Papa",
        "Kilo",
        "Lima",
    ]
    assert [item.result.shift for item in ranked] == [0, 0, 0, -2, -3, 3]
    assert [item.tier for item in ranked[3:]] == [FitTier.COMFORTABLE_WITH_SHIFT] * 3


def test_ordering_invariants_hold():
    songs = [
        _song(f"Song {low}-{high}", f"{name_low}", f"{name_high}")
        for low, high, name_low, name_high in [
            (57, 70, "A3", "A#4"),
            (59, 72, "B3", "C5"),
            (62, 75, "D4", "D#5"),
            (64, 77, "E4", "F5"),
            (66, 78, "F#4", "F#5"),
            (61, 71, "C#4", "B4"),
        ]
    ]
    ranked = rep.rank_repertoire(SINGER, songs, comfort=1)
    tiers = [item.tier for item in ranked]
    assert tiers == sorted(tiers)
    for tier in FitTier:
        shifts = [abs(item.result.shift) for item in ranked if item.tier is tier]
        assert shifts == sorted(shifts)


def test_shift_ties_break_on_title():
    songs = [_song("beta", "E4", "C5"), _song("Beta", "E4", "C5"), _song("alpha", "E4", "C5")]
    ranked = rep.rank_repertoire(SINGER, songs)
    # Ordinal comparison places upper case before lower case.
    assert [item.entry.title for item in ranked] == ["Beta", "alpha", "beta"]


def test_result_is_recomputed_each_call(catalog):
    first = rep.rank_repertoire(SINGER, catalog)
    second = rep.rank_repertoire(SINGER, iter(catalog))
    assert [i.entry for i in first] == [i.entry for i in second]


def test_empty_catalog():
    assert rep.rank_repertoire(SINGER, []) == []


def test_song_entry_dict_round_trip():
    entry = SongEntry("Jolene", "B3", "E5", genre="country", artist="Dolly Parton", tempo="fast")
    data = entry.to_dict()
    assert data["songLowestNote"] == "B3"
    assert "key" not in data
    assert SongEntry.from_dict(data) == entry


def test_load_catalog_entries_rejects_duplicate_titles():
    records = [
        {"title": "Same", "songLowestNote": "C4", "songHighestNote": "C5"},
        {"title": "Same", "songLowestNote": "D4", "songHighestNote": "D5"},
    ]
    with pytest.raises(ValueError, match="Duplicate song title"):
        rep.load_catalog_entries(records)

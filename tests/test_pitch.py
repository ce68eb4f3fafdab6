"""Unit tests for note ↔ semitone conversion helpers.

These tests exercise both :func:`parse_pitch` and :func:`format_pitch`. The
goal is to ensure round-trip conversions behave as expected, while invalid
inputs result in descriptive errors instead of silent failures."""

import importlib
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

band_assembler = importlib.import_module("band_assembler")
pitch_mod = importlib.import_module("band_assembler.pitch")
parse_pitch = band_assembler.parse_pitch
format_pitch = band_assembler.format_pitch
PitchParseError = band_assembler.PitchParseError


def test_reference_pitches():
    """Middle C and concert A land on their conventional indices."""
    assert parse_pitch("C4") == 60
    assert parse_pitch("A4") == 69


def test_sharp_and_flat_spellings_agree():
    """Enharmonic spellings produce the same value."""
    assert parse_pitch("C#4") == 61
    assert parse_pitch("Db4") == 61
    assert parse_pitch("A#3") == parse_pitch("Bb3") == 58


def test_letter_is_case_insensitive():
    assert parse_pitch("c4") == 60
    assert parse_pitch("bb3") == 58
    assert parse_pitch("f#5") == 78


def test_boundaries_and_negative_octaves():
    """``C-1`` and ``G9`` are the lowest and highest valid pitches."""
    assert parse_pitch("C-1") == 0
    assert parse_pitch("G9") == 127
    assert parse_pitch("C0") == 12


@pytest.mark.parametrize("note", ["B-2", "C-2", "G#9", "C10"])
def test_out_of_range_raises(note):
    """Values outside 0-127 are rejected rather than clamped."""
    with pytest.raises(PitchParseError, match="out of range"):
        parse_pitch(note)


@pytest.mark.parametrize(
    "note",
    [
        "X9", "", "C", "4", "C##4", "H4", "C4 ", " C4", "C+4", "Cx4", "C4.0", "CB4",
        # Full-width and Arabic-Indic digits are not octave numbers.
        "C\uff14", "C\u0664",
    ],
)
def test_malformed_notes_raise(note):
    """Anything other than letter, accidental and octave is a format error."""
    with pytest.raises(PitchParseError, match="Invalid note format"):
        parse_pitch(note)


@pytest.mark.parametrize("note", ["Cb4", "Fb4", "E#4", "B#3"])
def test_unrecognised_pitch_classes_raise(note):
    """Spellings that cross an octave boundary are not recognised."""
    with pytest.raises(PitchParseError, match="Unknown note name"):
        parse_pitch(note)


def test_parse_error_is_a_value_error():
    """Callers catching ``ValueError`` also see parse failures."""
    with pytest.raises(ValueError):
        parse_pitch("X9")


def test_non_string_input_raises():
    with pytest.raises(PitchParseError):
        parse_pitch(60)


def test_parse_errors_are_logged_at_debug(caplog):
    """The exception carries the problem; callers decide how loudly to report it."""
    with caplog.at_level("DEBUG"):
        with pytest.raises(PitchParseError):
            parse_pitch("Q7")
    assert "Invalid note format" in caplog.text
    assert all(record.levelname == "DEBUG" for record in caplog.records)


def test_format_prefers_requested_spelling():
    assert format_pitch(61) == "C#4"
    assert format_pitch(61, prefer_sharp=False) == "Db4"
    assert format_pitch(60, prefer_sharp=False) == "C4"
    assert format_pitch(0) == "C-1"
    assert format_pitch(127) == "G9"


@pytest.mark.parametrize("value", [-1, 128])
def test_format_rejects_out_of_range(value):
    with pytest.raises(ValueError, match="out of range"):
        format_pitch(value)


@pytest.mark.parametrize("prefer_sharp", [True, False])
def test_round_trip_every_pitch(prefer_sharp):
    """Formatting then parsing returns the original value for all 128 pitches."""
    for value in range(128):
        assert parse_pitch(format_pitch(value, prefer_sharp)) == value


def test_pitch_class_and_octave():
    assert pitch_mod.pitch_class(61) == 1
    assert pitch_mod.octave_of(61) == 4
    assert pitch_mod.octave_of(11) == -1

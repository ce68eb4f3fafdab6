"""Tests for performer profiles and vocal range categories."""

import importlib
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

perf = importlib.import_module("band_assembler.performers")
Skill = perf.Skill
Performer = perf.Performer


def test_category_prefills_precise_notes():
    skill = Skill(role="vocalist")
    skill.apply_range_category("tenor")
    assert skill.range_category == "tenor"
    assert (skill.lowest_note, skill.highest_note) == ("C3", "C5")
    assert skill.vocal_range() == (48, 72)


def test_precise_notes_stay_authoritative_after_edit():
    """Editing the notes after picking a category does not snap back."""
    skill = Skill(role="vocalist")
    skill.apply_range_category("alto")
    skill.highest_note = "D5"
    assert skill.range_category == "alto"
    assert skill.vocal_range() == (53, 74)


def test_category_without_precise_notes_gives_no_range():
    skill = Skill(role="vocalist", range_category="soprano")
    assert skill.vocal_range() is None


def test_unknown_values_rejected():
    with pytest.raises(ValueError):
        Skill(role="tuba")
    with pytest.raises(ValueError):
        Skill(role="vocalist", skill_level=6)
    with pytest.raises(ValueError):
        Skill(role="vocalist", vocal_type="robot")
    with pytest.raises(ValueError):
        Skill(role="vocalist").apply_range_category("countertenor")


def test_invalid_precise_range_is_ignored(caplog):
    skill = Skill(role="vocalist", lowest_note="G5", highest_note="A3")
    with caplog.at_level("WARNING"):
        assert skill.vocal_range() is None
    assert "Ignoring vocal range" in caplog.text


def test_performer_vocal_range_uses_first_usable_vocal_skill():
    performer = Performer(
        id="p1",
        name="Sam",
        skills=[
            Skill(role="guitarist", can_play_lead=True),
            Skill(role="vocalist", lowest_note="bad", highest_note="C5"),
            Skill(role="vocalist", lowest_note="A3", highest_note="G5"),
        ],
    )
    assert performer.vocal_range() == (57, 79)
    assert performer.roles == {"guitarist", "vocalist"}


def test_non_vocalist_has_no_range():
    drummer = Performer(id="d1", name="Ringo", skills=[Skill(role="drummer")])
    assert drummer.vocal_range() is None
    assert not drummer.has_any_role({"vocalist"})


def test_create_assigns_fresh_ids():
    first = Performer.create("A")
    second = Performer.create("A")
    assert first.id != second.id
    assert first.skills == []


def test_dict_round_trip():
    performer = Performer(
        id="k1",
        name="Kim",
        description="Plays everything",
        skills=[
            Skill(role="keyboardist", skill_level=4, keyboard_sounds=["Piano", "Synth Pad"]),
            Skill(
                role="vocalist",
                vocal_type="female",
                range_category="mezzo-soprano",
                lowest_note="A3",
                highest_note="A5",
            ),
        ],
    )
    data = performer.to_dict()
    assert data["instruments"][1]["preciseLowestNote"] == "A3"
    assert data["instruments"][1]["vocalRange"] == "mezzo-soprano"
    assert Performer.from_dict(data) == performer

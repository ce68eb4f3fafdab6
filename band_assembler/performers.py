"""Performer profiles and the skills they bring to a band.

A :class:`Performer` has a stable identity, a display name and any number of
:class:`Skill` records. Each skill names a role (``vocalist``, ``drummer``
...) and carries the attributes relevant to it. Vocalist skills hold an
optional precise range (``lowest_note``/``highest_note``) plus a descriptive
``range_category``. Picking a category fills in the precise notes once;
after that the precise notes can be edited freely and they alone feed the
transposition solver.

Example
-------
>>> singer = Performer.create("Mia", [Skill(role="vocalist")])
>>> singer.skills[0].apply_range_category("alto")
>>> singer.vocal_range()
VocalRange(low=53, high=77)
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from .pitch import PitchParseError
from .ranges import InvalidRangeError, VocalRange

__all__ = [
    "ROLES",
    "VOCALIST",
    "RANGE_CATEGORY_NOTES",
    "Skill",
    "Performer",
]

VOCALIST = "vocalist"

ROLES: Tuple[str, ...] = (
    VOCALIST,
    "guitarist",
    "electric_guitarist",
    "bassist",
    "drummer",
    "keyboardist",
)

VOCAL_TYPES = ("male", "female")

# Approximate category ranges used only to pre-fill the precise notes.
RANGE_CATEGORY_NOTES: Dict[str, Tuple[str, str]] = {
    "soprano": ("C4", "C6"),
    "mezzo-soprano": ("A3", "A5"),
    "alto": ("F3", "F5"),
    "tenor": ("C3", "C5"),
    "baritone": ("F2", "F4"),
    "bass": ("E2", "E4"),
    "versatile": ("G2", "G5"),
}

MIN_SKILL_LEVEL = 1
MAX_SKILL_LEVEL = 5


@dataclass
class Skill:
    """One role a performer can fill, with role-specific attributes."""

    role: str
    skill_level: Optional[int] = None
    primary_style: Optional[str] = None
    # vocalist
    vocal_type: Optional[str] = None
    range_category: Optional[str] = None
    lowest_note: Optional[str] = None
    highest_note: Optional[str] = None
    # guitarist / electric_guitarist
    can_play_lead: bool = False
    can_play_rhythm: bool = False
    # drummer
    preferred_drum_kit: Optional[str] = None
    # keyboardist
    keyboard_sounds: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown role: {self.role}")
        if self.skill_level is not None and not MIN_SKILL_LEVEL <= self.skill_level <= MAX_SKILL_LEVEL:
            raise ValueError(
                f"Skill level must be between {MIN_SKILL_LEVEL} and {MAX_SKILL_LEVEL}"
            )
        if self.vocal_type is not None and self.vocal_type not in VOCAL_TYPES:
            raise ValueError(f"Unknown vocal type: {self.vocal_type}")
        if self.range_category is not None and self.range_category not in RANGE_CATEGORY_NOTES:
            raise ValueError(f"Unknown range category: {self.range_category}")

    def apply_range_category(self, category: str) -> None:
        """Select ``category`` and overwrite the precise notes with its defaults.

        This is a one-way fill: changing the precise notes later does not
        touch ``range_category``.
        """

        try:
            lowest, highest = RANGE_CATEGORY_NOTES[category]
        except KeyError:
            raise ValueError(f"Unknown range category: {category}") from None
        self.range_category = category
        self.lowest_note = lowest
        self.highest_note = highest

    def vocal_range(self) -> Optional[VocalRange]:
        """Return the precise range, or ``None`` when it is unset or invalid."""

        if self.role != VOCALIST or not self.lowest_note or not self.highest_note:
            return None
        try:
            return VocalRange.from_notes(self.lowest_note, self.highest_note)
        except (PitchParseError, InvalidRangeError) as exc:
            logging.warning(
                "Ignoring vocal range %s-%s: %s", self.lowest_note, self.highest_note, exc
            )
            return None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"role": self.role}
        optional = {
            "skillLevel": self.skill_level,
            "primaryStyle": self.primary_style,
            "vocalType": self.vocal_type,
            "vocalRange": self.range_category,
            "preciseLowestNote": self.lowest_note,
            "preciseHighestNote": self.highest_note,
            "preferredDrumKit": self.preferred_drum_kit,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        if self.can_play_lead:
            data["canPlayLead"] = True
        if self.can_play_rhythm:
            data["canPlayRhythm"] = True
        if self.keyboard_sounds:
            data["keyboardSounds"] = list(self.keyboard_sounds)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Skill":
        return cls(
            role=data["role"],
            skill_level=data.get("skillLevel"),
            primary_style=data.get("primaryStyle"),
            vocal_type=data.get("vocalType"),
            range_category=data.get("vocalRange"),
            lowest_note=data.get("preciseLowestNote"),
            highest_note=data.get("preciseHighestNote"),
            can_play_lead=bool(data.get("canPlayLead", False)),
            can_play_rhythm=bool(data.get("canPlayRhythm", False)),
            preferred_drum_kit=data.get("preferredDrumKit"),
            keyboard_sounds=list(data.get("keyboardSounds", [])),
        )


@dataclass
class Performer:
    """A musician in the roster.

    ``id`` is assigned by whoever owns the roster and never changes. The
    assignment model compares performers by ``id`` only.
    """

    id: str
    name: str
    skills: List[Skill] = field(default_factory=list)
    description: Optional[str] = None

    @classmethod
    def create(
        cls,
        name: str,
        skills: Iterable[Skill] = (),
        description: Optional[str] = None,
    ) -> "Performer":
        """Build a performer with a fresh UUID4 identity."""

        return cls(id=str(uuid.uuid4()), name=name, skills=list(skills), description=description)

    @property
    def roles(self) -> FrozenSet[str]:
        return frozenset(skill.role for skill in self.skills)

    def has_any_role(self, roles: Iterable[str]) -> bool:
        return not self.roles.isdisjoint(roles)

    def vocal_range(self) -> Optional[VocalRange]:
        """Return the first usable precise range among vocalist skills."""

        for skill in self.skills:
            found = skill.vocal_range()
            if found is not None:
                return found
        return None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "instruments": [skill.to_dict() for skill in self.skills],
        }
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Performer":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            skills=[Skill.from_dict(item) for item in data.get("instruments", [])],
            description=data.get("description"),
        )

"""Fixed band positions and the rules for seating performers in them.

A :class:`BandModel` owns one :class:`Slot` per :class:`SlotDefinition`.
Each slot is either empty or holds a single performer, and a performer can
sit in at most one slot at a time. The only ways to change occupancy are
:meth:`BandModel.assign` and :meth:`BandModel.remove`:

* assigning a performer who is already seated elsewhere moves them;
* assigning into an occupied slot evicts the previous occupant, who is not
  re-seated anywhere;
* assigning a performer without a role the slot accepts raises
  :class:`IncompatibleRoleError` and leaves the model untouched.

Both operations hold the model's lock because a move touches two slots and
must see a consistent snapshot.

Example
-------
>>> band = BandModel()
>>> assign_performer(band, drummer, "drums")  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from .performers import VOCALIST, Performer

__all__ = [
    "IncompatibleRoleError",
    "SlotDefinition",
    "Slot",
    "DEFAULT_SLOT_DEFINITIONS",
    "BandModel",
    "assign_performer",
    "remove_from_slot",
    "available_performers",
]


class IncompatibleRoleError(ValueError):
    """Raised when a performer has no role accepted by the target slot."""

    def __init__(self, performer: Performer, slot: "SlotDefinition") -> None:
        super().__init__(
            f"{performer.name} cannot fill {slot.label}: needs one of "
            f"{', '.join(sorted(slot.accepts))}"
        )
        self.performer = performer
        self.slot = slot


@dataclass(frozen=True)
class SlotDefinition:
    id: str
    label: str
    accepts: FrozenSet[str]

    def accepts_performer(self, performer: Performer) -> bool:
        return performer.has_any_role(self.accepts)


@dataclass
class Slot:
    definition: SlotDefinition
    performer: Optional[Performer] = None

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def is_empty(self) -> bool:
        return self.performer is None


DEFAULT_SLOT_DEFINITIONS: Tuple[SlotDefinition, ...] = (
    SlotDefinition("male_vocal", "Male Vocal", frozenset({VOCALIST})),
    SlotDefinition("female_vocal", "Female Vocal", frozenset({VOCALIST})),
    SlotDefinition("electric_guitar", "Electric Guitar", frozenset({"electric_guitarist"})),
    SlotDefinition("guitar", "Guitar", frozenset({"guitarist"})),
    SlotDefinition("bass", "Bass", frozenset({"bassist"})),
    SlotDefinition("drums", "Drums", frozenset({"drummer"})),
    SlotDefinition("keyboard", "Keyboard", frozenset({"keyboardist"})),
)


class BandModel:
    """Occupancy table for a fixed set of slots."""

    def __init__(self, definitions: Sequence[SlotDefinition] = DEFAULT_SLOT_DEFINITIONS) -> None:
        """Create an empty band.

        Parameters
        ----------
        definitions:
            Slot definitions in display order. Ids must be unique. The set is
            fixed for the lifetime of the model.
        """

        if not definitions:
            raise ValueError("definitions must not be empty")
        self._slots: Dict[str, Slot] = {}
        for definition in definitions:
            if definition.id in self._slots:
                raise ValueError(f"Duplicate slot id: {definition.id}")
            self._slots[definition.id] = Slot(definition)
        self._lock = threading.Lock()

    @property
    def slots(self) -> List[Slot]:
        return list(self._slots.values())

    @property
    def definitions(self) -> List[SlotDefinition]:
        return [slot.definition for slot in self._slots.values()]

    def slot(self, slot_id: str) -> Slot:
        try:
            return self._slots[slot_id]
        except KeyError:
            raise KeyError(f"Unknown slot: {slot_id}") from None

    def slot_of(self, performer_id: str) -> Optional[str]:
        """Return the id of the slot ``performer_id`` occupies, if any."""

        for slot in self._slots.values():
            if slot.performer is not None and slot.performer.id == performer_id:
                return slot.id
        return None

    def occupants(self) -> Dict[str, Performer]:
        return {slot.id: slot.performer for slot in self._slots.values() if slot.performer is not None}

    def assign(self, performer: Performer, slot_id: str) -> Optional[Performer]:
        """Seat ``performer`` in ``slot_id``.

        Returns the performer evicted from ``slot_id``, or ``None``.

        Raises
        ------
        KeyError
            If ``slot_id`` is not part of this model.
        IncompatibleRoleError
            If none of the performer's roles is accepted by the slot.
        """

        with self._lock:
            target = self.slot(slot_id)
            if not target.definition.accepts_performer(performer):
                logging.info("%s rejected for slot %s", performer.name, slot_id)
                raise IncompatibleRoleError(performer, target.definition)

            current = self.slot_of(performer.id)
            if current == slot_id:
                return None
            if current is not None:
                self._slots[current].performer = None
                logging.debug("Moved %s from %s to %s", performer.name, current, slot_id)

            evicted = target.performer
            target.performer = performer
            if evicted is not None:
                logging.debug("Evicted %s from %s", evicted.name, slot_id)
            return evicted

    def remove(self, slot_id: str) -> Optional[Performer]:
        """Empty ``slot_id`` and return whoever sat there."""

        with self._lock:
            target = self.slot(slot_id)
            removed, target.performer = target.performer, None
            return removed

    def to_payload(self) -> Dict[str, Any]:
        """Return the line-up as ``{"slots": [{"slotId", "musicianId"}]}``."""

        return {
            "slots": [
                {
                    "slotId": slot.id,
                    "musicianId": slot.performer.id if slot.performer is not None else None,
                }
                for slot in self._slots.values()
            ]
        }

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        roster: Iterable[Performer],
        definitions: Sequence[SlotDefinition] = DEFAULT_SLOT_DEFINITIONS,
    ) -> "BandModel":
        """Rebuild a model from :meth:`to_payload` output.

        Entries naming unknown slots or performers, or performers who no
        longer fit their slot, are skipped with a warning so a stale line-up
        never prevents loading.
        """

        by_id = {performer.id: performer for performer in roster}
        model = cls(definitions)
        for entry in payload.get("slots", []):
            slot_id = entry.get("slotId")
            performer_id = entry.get("musicianId")
            if performer_id is None:
                continue
            if slot_id not in model._slots:
                logging.warning("Skipping unknown slot %s in stored line-up", slot_id)
                continue
            performer = by_id.get(performer_id)
            if performer is None:
                logging.warning("Skipping unknown performer %s in stored line-up", performer_id)
                continue
            try:
                model.assign(performer, slot_id)
            except IncompatibleRoleError as exc:
                logging.warning("Skipping stored seat: %s", exc)
        return model


def assign_performer(model: BandModel, performer: Performer, slot_id: str) -> BandModel:
    """Seat ``performer`` in ``slot_id`` and return the updated ``model``."""

    model.assign(performer, slot_id)
    return model


def remove_from_slot(model: BandModel, slot_id: str) -> BandModel:
    """Empty ``slot_id`` and return the updated ``model``."""

    model.remove(slot_id)
    return model


def available_performers(roster: Iterable[Performer], model: BandModel) -> List[Performer]:
    """Return roster members not seated in ``model``, in roster order."""

    seated = {performer.id for performer in model.occupants().values()}
    return [performer for performer in roster if performer.id not in seated]

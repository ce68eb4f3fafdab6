"""JSON persistence for rosters, song catalogs and band line-ups.

The formats mirror the records exchanged with the front end:

* roster: a list of performer objects (``id``, ``name``, ``instruments``);
* catalog: a list of songs (``title``, ``songLowestNote``,
  ``songHighestNote`` and optional display fields);
* band: ``{"slots": [{"slotId": ..., "musicianId": ...}]}``.

Loading failures raise :class:`StorageError` with the offending path so the
caller can report them. A small default catalog ships with the package.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Union

from .performers import Performer
from .repertoire import SongEntry, load_catalog_entries
from .slots import DEFAULT_SLOT_DEFINITIONS, BandModel, SlotDefinition

__all__ = [
    "StorageError",
    "load_roster",
    "save_roster",
    "load_catalog",
    "default_catalog",
    "load_band",
    "save_band",
]

PathLike = Union[str, Path]


class StorageError(RuntimeError):
    """Raised when a data file cannot be read or does not match its format."""


def _read_json(path: PathLike) -> Any:
    path = Path(path).expanduser()
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except OSError as exc:
        raise StorageError(f"Could not read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise StorageError(f"Invalid JSON in {path}: {exc}") from exc


def _write_json(data: Any, path: PathLike) -> None:
    path = Path(path).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, ensure_ascii=False)
    except OSError as exc:
        raise StorageError(f"Could not write {path}: {exc}") from exc


def _expect_list(data: Any, path: PathLike, what: str) -> List[Any]:
    if not isinstance(data, list):
        raise StorageError(f"{path}: expected a list of {what}")
    return data


def load_roster(path: PathLike) -> List[Performer]:
    records = _expect_list(_read_json(path), path, "performers")
    try:
        roster = [Performer.from_dict(record) for record in records]
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"{path}: invalid performer record: {exc}") from exc
    ids = [performer.id for performer in roster]
    if len(ids) != len(set(ids)):
        raise StorageError(f"{path}: duplicate performer ids")
    logging.debug("Loaded %d performers from %s", len(roster), path)
    return roster


def save_roster(roster: Iterable[Performer], path: PathLike) -> None:
    _write_json([performer.to_dict() for performer in roster], path)


def _catalog_from_records(records: Any, source: str) -> List[SongEntry]:
    records = _expect_list(records, source, "songs")
    try:
        return load_catalog_entries(records)
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"{source}: invalid song record: {exc}") from exc


def load_catalog(path: Optional[PathLike] = None) -> List[SongEntry]:
    """Load songs from ``path`` or from the bundled catalog when ``None``."""

    if path is None:
        return default_catalog()
    catalog = _catalog_from_records(_read_json(path), str(path))
    logging.debug("Loaded %d songs from %s", len(catalog), path)
    return catalog


def default_catalog() -> List[SongEntry]:
    """Return the catalog bundled in ``band_assembler/data/catalog.json``."""

    text = resources.files("band_assembler").joinpath("data/catalog.json").read_text(encoding="utf-8")
    return _catalog_from_records(json.loads(text), "bundled catalog")


def load_band(
    path: PathLike,
    roster: Iterable[Performer],
    definitions: Sequence[SlotDefinition] = DEFAULT_SLOT_DEFINITIONS,
) -> BandModel:
    data = _read_json(path)
    if not isinstance(data, dict):
        raise StorageError(f"{path}: expected an object with a 'slots' list")
    try:
        return BandModel.from_payload(data, roster, definitions)
    except (AttributeError, TypeError) as exc:
        raise StorageError(f"{path}: invalid line-up record: {exc}") from exc


def save_band(model: BandModel, path: PathLike) -> None:
    _write_json(model.to_payload(), path)

#!/usr/bin/env python3
"""Band Assembler library.

This package matches singers to songs and keeps track of who plays where in
a band. A typical workflow parses a singer's lowest and highest notes with
:func:`parse_pitch`, builds a :class:`VocalRange` and hands it to
:func:`rank_repertoire` together with a song catalog. The result lists the
songs that suit the singer, with the key change each one needs.

Underlying Algorithm
--------------------
Every note is stored as a semitone index (``C4`` == 60). A song fits a singer
when the song's range lies inside the singer's range; the spare semitones on
each side are the *comfort margins*. When a song does not fit as written, the
solver tries every transposition up to a perfect fifth in either direction
and keeps the one with the largest smaller margin::

    if width(song) > width(singer):
        fail("range too wide")
    if contains(singer, song):
        return shift 0
    for k in -7..7:
        if contains(singer, song + k):
            score k by min(comfort_margins(singer, song + k))
    return best k or fail("no feasible transposition")

Band line-ups are handled by :class:`BandModel`: a fixed set of slots, each
accepting certain roles and holding at most one performer, with a performer
seated in at most one slot.

Features include:
- Scientific pitch parsing and formatting with sharp or flat spellings.
- Comfort-aware transposition search with deterministic tie-breaking.
- Catalog ranking into perfect fits and comfortable shifted fits.
- Role-checked slot assignment with move and eviction semantics.
- JSON persistence for rosters, catalogs and line-ups.
- A command line interface for quick checks.
"""

__version__ = "0.1.0"

# ---------------------------------------------------------------
# Modification Summary
# ---------------------------------------------------------------
# * ``load_settings`` and ``save_settings`` persist solver preferences
#   (``comfort``, ``max_shift``, ``prefer_sharp``) and default data file
#   locations so the CLI does not need them on every call.
# * ``BAND_ASSEMBLER_SETTINGS_FILE`` overrides the settings location, which
#   keeps tests and multiple installations from sharing one file.
# * When no shift is comfortable the solver returns the first shift that
#   fits at all, flagged with the extreme-note warning.
# * ``evaluate_band`` returns a ``BandReport`` with an overall style and
#   line-up notes alongside the per-vocalist song lists.
# ---------------------------------------------------------------

import json
import logging
import os
from pathlib import Path

from .pitch import (  # noqa: F401
    MAX_PITCH,
    MIN_PITCH,
    NOTE_TO_SEMITONE,
    PitchParseError,
    format_pitch,
    octave_of,
    parse_pitch,
    pitch_class,
)
from .ranges import (  # noqa: F401
    InvalidRangeError,
    VocalRange,
    comfort_margins,
    contains,
    width,
)
from .transposition import (  # noqa: F401
    COMFORT,
    MAX_SHIFT,
    FailureKind,
    TranspositionResult,
    solve_transposition,
)
from .repertoire import FitTier, RankedSong, SongEntry, rank_repertoire  # noqa: F401
from .performers import RANGE_CATEGORY_NOTES, ROLES, Performer, Skill  # noqa: F401
from .slots import (  # noqa: F401
    DEFAULT_SLOT_DEFINITIONS,
    BandModel,
    IncompatibleRoleError,
    Slot,
    SlotDefinition,
    assign_performer,
    available_performers,
    remove_from_slot,
)
from .evaluation import BandReport, VocalistReport, evaluate_band  # noqa: F401

# Default path for storing user preferences. The file lives in the user's
# home directory so settings persist between runs.
env_path = os.environ.get("BAND_ASSEMBLER_SETTINGS_FILE")
if env_path:
    DEFAULT_SETTINGS_FILE = Path(env_path).expanduser()
else:
    DEFAULT_SETTINGS_FILE = Path.home() / ".band_assembler_settings.json"

# Keys understood by the CLI. Anything else in the file is ignored.
SETTINGS_KEYS = ("comfort", "max_shift", "prefer_sharp", "roster_file", "catalog_file")


def load_settings(path: Path = DEFAULT_SETTINGS_FILE) -> dict:
    """Load saved user settings from ``path`` if it exists.

    @param path (Path): Location of the settings file.
    @returns dict: Loaded settings or an empty dictionary when unavailable.
    """
    # Missing or unreadable files fall back to an empty dictionary so the
    # built-in defaults apply.
    if path.is_file():
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logging.error("Could not load settings: %s", exc)
            return {}
        if not isinstance(data, dict):
            logging.error("Settings file %s does not contain a JSON object", path)
            return {}
        return {key: value for key, value in data.items() if key in SETTINGS_KEYS}
    return {}


def save_settings(settings: dict, path: Path = DEFAULT_SETTINGS_FILE) -> None:
    """Save user ``settings`` to ``path`` as JSON.

    @param settings (dict): Options to be persisted.
    @param path (Path): Destination file path.
    @returns None: Function does not return a value.
    """
    # Failing to save preferences is logged but never interrupts the caller.
    try:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2)
    except OSError as exc:
        logging.error("Could not save settings: %s", exc)


def run_cli():
    from .cli import run_cli as _run_cli
    _run_cli()


def main():
    from .cli import main as _main
    _main()


if __name__ == "__main__":
    main()

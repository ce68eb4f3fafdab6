"""Command line helpers for Band Assembler.

This module implements the console entry point for the project. Each
subcommand wraps one part of the library so ranges and catalogs can be
checked without writing code:

``parse``
    Convert note names to semitone indices.
``solve``
    Run the transposition solver for one singer/song pair.
``rank``
    List the catalog songs that suit a singer.
``evaluate``
    Summarise a stored line-up and rank songs for each seated vocalist.
``slots`` / ``categories``
    Print the default band slots or the vocal range categories.

Solver options are resolved in order: command line flag, settings file
(``--settings-file`` or :data:`band_assembler.DEFAULT_SETTINGS_FILE`), then
the library defaults.

Example
-------
Running ``python -m band_assembler rank --low A3 --high G5`` prints the
bundled catalog songs that a mezzo-soprano can sing, best fits first.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .evaluation import evaluate_band
from .performers import RANGE_CATEGORY_NOTES
from .pitch import PitchParseError, format_pitch, parse_pitch
from .ranges import InvalidRangeError, VocalRange
from .repertoire import RankedSong, rank_repertoire
from .slots import DEFAULT_SLOT_DEFINITIONS
from .storage import StorageError, load_band, load_catalog, load_roster
from .transposition import COMFORT, MAX_SHIFT, solve_transposition

__all__ = ["build_parser", "run_cli", "main"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="band-assembler",
        description="Match singers to songs and inspect band slot line-ups.",
    )
    parser.add_argument("--settings-file", type=str, help="Path to the JSON settings file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--flats", action="store_true", help="Spell black keys with flats")
    parser.add_argument("--comfort", type=int, help=f"Spare semitones wanted on each side (default: {COMFORT})")
    parser.add_argument("--max-shift", type=int, help=f"Largest transposition in semitones (default: {MAX_SHIFT})")
    sub = parser.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="Convert note names to semitone indices")
    p_parse.add_argument("notes", nargs="+", metavar="NOTE")

    p_solve = sub.add_parser("solve", help="Find the best transposition for one song")
    p_solve.add_argument("vocal_low", metavar="VOCAL_LOW")
    p_solve.add_argument("vocal_high", metavar="VOCAL_HIGH")
    p_solve.add_argument("song_low", metavar="SONG_LOW")
    p_solve.add_argument("song_high", metavar="SONG_HIGH")
    p_solve.add_argument("--json", action="store_true", help="Print the result as JSON")

    p_rank = sub.add_parser("rank", help="Rank catalog songs for a singer")
    p_rank.add_argument("--low", required=True, help="Singer's lowest note (e.g. A3)")
    p_rank.add_argument("--high", required=True, help="Singer's highest note (e.g. G5)")
    p_rank.add_argument("--catalog", type=str, help="Song catalog JSON file (default: bundled catalog)")

    p_eval = sub.add_parser("evaluate", help="Summarise a stored line-up and rank songs for its vocalists")
    p_eval.add_argument("--roster", type=str, help="Roster JSON file")
    p_eval.add_argument("--band", type=str, required=True, help="Line-up JSON file")
    p_eval.add_argument("--catalog", type=str, help="Song catalog JSON file (default: bundled catalog)")

    sub.add_parser("slots", help="List the default band slots")
    sub.add_parser("categories", help="List vocal range categories")
    return parser


def _fail(message: str) -> None:
    logging.error(message)
    sys.exit(1)


def _load_options(args: argparse.Namespace) -> dict:
    """Merge settings-file values with command line overrides."""

    from . import load_settings

    settings = load_settings(Path(args.settings_file).expanduser()) if args.settings_file else load_settings()
    options = {
        "comfort": settings.get("comfort", COMFORT),
        "max_shift": settings.get("max_shift", MAX_SHIFT),
        "prefer_sharp": bool(settings.get("prefer_sharp", True)),
        "roster_file": settings.get("roster_file"),
        "catalog_file": settings.get("catalog_file"),
    }
    if args.comfort is not None:
        options["comfort"] = args.comfort
    if args.max_shift is not None:
        options["max_shift"] = args.max_shift
    if args.flats:
        options["prefer_sharp"] = False

    for name in ("comfort", "max_shift"):
        value = options[name]
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            _fail(f"{name} must be a non-negative integer.")
    return options


def _format_ranked(item: RankedSong, prefer_sharp: bool) -> str:
    low, high = item.result.transposed.to_notes(prefer_sharp)
    shift = item.result.shift
    shift_text = "original key" if shift == 0 else f"shift {shift:+d}"
    return f"{item.tier.label:<24} {item.entry.title}  ({low}-{high}, {shift_text})"


def _cmd_parse(args: argparse.Namespace, options: dict) -> None:
    for note in args.notes:
        try:
            value = parse_pitch(note)
        except PitchParseError as exc:
            _fail(str(exc))
        print(f"{note}\t{value}\t{format_pitch(value, options['prefer_sharp'])}")


def _cmd_solve(args: argparse.Namespace, options: dict) -> None:
    try:
        vocal = (parse_pitch(args.vocal_low), parse_pitch(args.vocal_high))
        song = (parse_pitch(args.song_low), parse_pitch(args.song_high))
    except PitchParseError as exc:
        _fail(str(exc))
    result = solve_transposition(
        vocal, song, comfort=options["comfort"], max_shift=options["max_shift"]
    )
    if args.json:
        print(json.dumps(result.to_dict(options["prefer_sharp"]), indent=2))
    else:
        print(result.message)
        if result.ok:
            print(f"shift: {result.shift:+d}")
            print(f"margins: below {result.margins[0]}, above {result.margins[1]}")
    if not result.ok:
        sys.exit(1)


def _cmd_rank(args: argparse.Namespace, options: dict) -> None:
    try:
        vocal = VocalRange.from_notes(args.low, args.high)
    except (PitchParseError, InvalidRangeError) as exc:
        _fail(str(exc))
    catalog_path = args.catalog or options["catalog_file"]
    try:
        catalog = load_catalog(catalog_path)
    except StorageError as exc:
        _fail(str(exc))
    ranked = rank_repertoire(
        vocal, catalog, comfort=options["comfort"], max_shift=options["max_shift"]
    )
    if not ranked:
        logging.info("No suitable songs found for %s.", vocal)
        return
    for item in ranked:
        print(_format_ranked(item, options["prefer_sharp"]))


def _cmd_evaluate(args: argparse.Namespace, options: dict) -> None:
    roster_path = args.roster or options["roster_file"]
    if not roster_path:
        _fail("A roster file is required (--roster or 'roster_file' setting).")
    try:
        roster = load_roster(roster_path)
        model = load_band(args.band, roster)
        catalog = load_catalog(args.catalog or options["catalog_file"])
    except StorageError as exc:
        _fail(str(exc))
    band = evaluate_band(
        model, catalog, comfort=options["comfort"], max_shift=options["max_shift"]
    )
    print(f"Style: {band.overall_style}")
    for tone in band.special_tones:
        print(f"  * {tone}")
    if not band.vocalists:
        logging.info("No seated vocalist has a precise vocal range.")
        return
    for report in band.vocalists:
        low, high = report.vocal_range.to_notes(options["prefer_sharp"])
        print(f"[{report.slot_id}] {report.performer.name} ({low}-{high})")
        if not report.recommendations:
            print("  no suitable songs")
        for item in report.recommendations:
            print(f"  {_format_ranked(item, options['prefer_sharp'])}")


def _cmd_slots(args: argparse.Namespace, options: dict) -> None:
    for definition in DEFAULT_SLOT_DEFINITIONS:
        print(f"{definition.id:<16} {definition.label:<16} {', '.join(sorted(definition.accepts))}")


def _cmd_categories(args: argparse.Namespace, options: dict) -> None:
    for name, (lowest, highest) in RANGE_CATEGORY_NOTES.items():
        print(f"{name:<14} {lowest}-{highest}")


_COMMANDS = {
    "parse": _cmd_parse,
    "solve": _cmd_solve,
    "rank": _cmd_rank,
    "evaluate": _cmd_evaluate,
    "slots": _cmd_slots,
    "categories": _cmd_categories,
}


def run_cli(argv: Optional[Sequence[str]] = None) -> None:
    """Parse ``argv`` (defaults to ``sys.argv[1:]``) and run one subcommand.

    User errors are logged and end the process with exit code ``1``.
    """

    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    options = _load_options(args)
    _COMMANDS[args.command](args, options)


def main(argv: Optional[List[str]] = None) -> None:
    """Console script entry point."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    run_cli(argv)

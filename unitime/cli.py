"""
CLI (Command Line Interface).

This module is the orchestrator: it owns the ScheduleStore and is the only
place where the record collection is replaced. Commands:

    unitime import <file.html> [<file.html> ...]
    unitime courses
    unitime remove <course name>
    unitime clear
    unitime weeks
    unitime week [N]
    unitime list
    unitime stats
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from unitime import __version__
from unitime.aggregate import compute_stats, course_legend, distinct_courses, group_by_week
from unitime.collection import clear, import_files, remove_course
from unitime.storage import ScheduleStore
from unitime.views import render_course_list, render_legend, render_stats, render_week, render_weeks


def _cmd_import(args: argparse.Namespace, store: ScheduleStore) -> int:
    """
    Parse the given timetable exports and merge them into the store.
    """
    paths = [Path(p) for p in args.files]
    missing = [p for p in paths if not p.exists()]
    for p in missing:
        print(f"Not found: {p}")
    if missing and len(missing) == len(paths):
        return 1

    result = import_files(store.records, paths, strict_months=not args.lenient_months)

    for parsed in result.parsed:
        skipped = f", {len(parsed.rejections)} rows skipped" if parsed.rejections else ""
        print(f"{parsed.course_name}: {len(parsed.records)} sessions{skipped}")
        for w in parsed.warnings:
            print(f"  warning: {w}")

    if result.added == 0:
        print("No sessions found in the given files.")
        return 0

    store.replace(result.records)
    for name in result.replaced:
        print(f"Replaced earlier sessions of {name}")
    print(f"Imported {result.added} sessions (total: {len(store)})")
    return 0


def _cmd_courses(args: argparse.Namespace, store: ScheduleStore) -> int:
    render_legend(course_legend(store.records))
    return 0


def _cmd_remove(args: argparse.Namespace, store: ScheduleStore) -> int:
    name = args.name or ""
    if not name.strip():
        print("Please provide a course name.")
        return 1

    if name not in distinct_courses(store.records):
        print(f"Not loaded: {name}")
        return 0

    remaining = remove_course(store.records, name)
    removed = len(store) - len(remaining)
    store.replace(remaining)
    print(f"Removed: {name} ({removed} sessions)")
    return 0


def _cmd_clear(args: argparse.Namespace, store: ScheduleStore) -> int:
    store.replace(clear())
    print("Cleared all schedule data.")
    return 0


def _cmd_weeks(args: argparse.Namespace, store: ScheduleStore) -> int:
    render_weeks(group_by_week(store.records))
    return 0


def _cmd_week(args: argparse.Namespace, store: ScheduleStore) -> int:
    """
    Show the timetable of week N (1-based, as listed by `weeks`).
    """
    weeks = group_by_week(store.records)
    if not weeks:
        print("No sessions loaded.")
        return 0

    n = args.number
    if not (1 <= n <= len(weeks)):
        print(f"Out of range: choose a week between 1 and {len(weeks)}.")
        return 1

    render_week(weeks[n - 1])
    return 0


def _cmd_list(args: argparse.Namespace, store: ScheduleStore) -> int:
    render_course_list(store.records, course_legend(store.records))
    return 0


def _cmd_stats(args: argparse.Namespace, store: ScheduleStore) -> int:
    if not store.records:
        print("No sessions loaded.")
        return 0
    render_stats(compute_stats(store.records))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="unitime", description="Unified university timetable")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data", type=Path, default=None, help="Schedule store (JSON file)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show parser diagnostics")
    sub = parser.add_subparsers(dest="command", required=True)

    p_import = sub.add_parser("import", help="Import exported timetable HTML files")
    p_import.add_argument("files", nargs="+", help="HTML files (one course each)")
    p_import.add_argument(
        "--lenient-months",
        action="store_true",
        help="Map unknown month names to January instead of skipping the row",
    )

    sub.add_parser("courses", help="List loaded courses and their colors")

    p_remove = sub.add_parser("remove", help="Remove all sessions of a course")
    p_remove.add_argument("name", type=str, help="Exact course name (see `courses`)")

    sub.add_parser("clear", help="Remove all loaded sessions")
    sub.add_parser("weeks", help="List the weeks that have sessions")

    p_week = sub.add_parser("week", help="Show the timetable of one week")
    p_week.add_argument("number", type=int, nargs="?", default=1, help="Week number (default: 1)")

    sub.add_parser("list", help="List all sessions per course")
    sub.add_parser("stats", help="Show hours and session statistics")

    return parser


_COMMANDS = {
    "import": _cmd_import,
    "courses": _cmd_courses,
    "remove": _cmd_remove,
    "clear": _cmd_clear,
    "weeks": _cmd_weeks,
    "week": _cmd_week,
    "list": _cmd_list,
    "stats": _cmd_stats,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = ScheduleStore(args.data)
    raise SystemExit(_COMMANDS[args.command](args, store))

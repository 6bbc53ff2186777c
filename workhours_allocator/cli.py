"""
Command-line entry point for the work-hour allocator.

Usage examples:

    # Allocate a pasted table saved as text (or an .xlsx export)
    workhours allocate tasks.tsv --calendar preset_2025 --out out/

    # Add ad-hoc overrides and write a workbook
    workhours allocate tasks.tsv --holiday 2025-11-12 --makeup 2025-11-15 --xlsx plan.xlsx

    # Inspect how rows are parsed
    workhours parse tasks.tsv

    # Classify one date
    workhours workday 2025-10-11
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from workhours_core.io import load_input, render_xlsx, write_output
from workhours_core.models import AllocationResult, RawTask
from workhours_core.parser import classify_row, parse_input_text
from workhours_core.presets import DEFAULT_FIELD_LABELS, SAMPLE_INPUT
from workhours_core.workdays import is_workday, weekday_label

from .config import get_calendar, load_env, runtime_config
from .service import merge_overrides, run_allocation
from .storage import save_plan


def _calendar(args: argparse.Namespace):
    cfg = runtime_config()
    name = args.calendar or cfg.default_calendar
    calendar = get_calendar(name, cfg.calendar_file)
    return name, merge_overrides(calendar, args.holiday, args.makeup), cfg


# --- Commands ----------------------------------------------------------------


def cmd_allocate(args: argparse.Namespace) -> None:
    """
    Parse an input file, allocate hours, print a summary and write outputs.
    """
    name, calendar, cfg = _calendar(args)
    text = SAMPLE_INPUT if args.input_path == "-" else load_input(Path(args.input_path))

    plan = run_allocation(
        text,
        calendar,
        calendar_name=name,
        daily_capacity=cfg.daily_capacity,
        max_days=cfg.max_days,
    )
    stats = plan["result"]["stats"]
    print(f"[allocate] Calendar: {name}")
    print(
        f"[allocate] Tasks: {stats['total_tasks']}  "
        f"required: {stats['total_hours_required']}h  "
        f"allocated: {stats['total_hours_allocated']}h  "
        f"idle: {stats['total_idle_capacity']}h"
    )
    for message in plan["result"]["errors"]:
        print(f"[allocate] {message}")

    if args.out or args.xlsx:
        tasks = [RawTask(**t) for t in plan["tasks"]]
        result = AllocationResult.from_dict(plan["result"])
        if args.out:
            paths = write_output(result, Path(args.out), tasks=tasks, calendar=calendar)
            for fname, path in paths.items():
                print(f"[allocate] Wrote {fname} -> {path}")
        if args.xlsx:
            path = render_xlsx(result, Path(args.xlsx), tasks=tasks, field_labels=DEFAULT_FIELD_LABELS)
            print(f"[allocate] Wrote workbook -> {path}")

    if args.save:
        target = save_plan(cfg.artifact_root, plan)
        print(f"[allocate] Saved plan {plan['plan_id']} -> {target}")


def cmd_parse(args: argparse.Namespace) -> None:
    """
    Show how each row of an input file is read.
    """
    text = SAMPLE_INPUT if args.input_path == "-" else load_input(Path(args.input_path))
    tasks = parse_input_text(text)
    print(f"[parse] Kept {len(tasks)} row(s).")
    for t in tasks:
        shape = classify_row(t.raw_parts)
        row = {**t.to_dict(), "row_shape": shape.name if shape else None}
        print(json.dumps(row, ensure_ascii=False))


def cmd_workday(args: argparse.Namespace) -> None:
    """
    Classify one date under the selected calendar.
    """
    name, calendar, _ = _calendar(args)
    kind = "workday" if is_workday(args.date, calendar) else "rest day"
    print(f"[workday] {args.date} ({weekday_label(args.date)}) is a {kind} under '{name}'.")


def cmd_example(args: argparse.Namespace) -> None:
    """
    Print the sample input table.
    """
    print(SAMPLE_INPUT)


# --- Main --------------------------------------------------------------------


def _add_calendar_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--calendar", default=None, help="Calendar name (default: WORKHOURS_DEFAULT_CALENDAR).")
    p.add_argument("--holiday", action="append", default=[], help="Extra holiday date (repeatable).")
    p.add_argument("--makeup", action="append", default=[], help="Extra make-up workday (repeatable).")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Work-hour allocator – parse task tables and spread hours over workdays."
    )
    parser.add_argument("--env-file", default=None, help="Path to .env file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # allocate
    alloc_p = subparsers.add_parser("allocate", help="Allocate task hours across workdays.")
    alloc_p.add_argument("input_path", help="Input .txt/.tsv/.csv/.xlsx file ('-' for the sample table).")
    _add_calendar_args(alloc_p)
    alloc_p.add_argument("--out", default=None, help="Directory for allocation.json and CSV tables.")
    alloc_p.add_argument("--xlsx", default=None, help="Path of a result workbook to write.")
    alloc_p.add_argument("--save", action="store_true", help="Store the plan under the artifact directory.")
    alloc_p.set_defaults(func=cmd_allocate)

    # parse
    parse_p = subparsers.add_parser("parse", help="Show parsed rows without allocating.")
    parse_p.add_argument("input_path", help="Input file ('-' for the sample table).")
    parse_p.set_defaults(func=cmd_parse)

    # workday
    day_p = subparsers.add_parser("workday", help="Classify a date as workday or rest day.")
    day_p.add_argument("date", help="ISO date, e.g. 2025-10-11.")
    _add_calendar_args(day_p)
    day_p.set_defaults(func=cmd_workday)

    # example
    ex_p = subparsers.add_parser("example", help="Print the sample input table.")
    ex_p.set_defaults(func=cmd_example)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    load_env(args.env_file)
    try:
        args.func(args)
    except (ValueError, FileNotFoundError) as exc:
        raise SystemExit(f"[{args.command}] {exc}") from exc


if __name__ == "__main__":
    sys.exit(main())

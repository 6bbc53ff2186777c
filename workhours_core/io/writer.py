"""Write an allocation result to allocation.json plus flat CSV tables.

allocation.json carries the full result (days, unallocated tasks, stats,
error strings) and a utilisation overview; the CSVs are for spreadsheet
users who only need the daily plan.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

from workhours_core.aggregator import utilization_overview
from workhours_core.models import AllocationResult, RawTask
from workhours_core.workdays import CalendarConfig

from .schemas import DAILY_COLS, TASK_COLS, UNALLOCATED_COLS, pipe_join


def write_output(
    result: AllocationResult,
    directory: Path,
    *,
    tasks: list[RawTask] | None = None,
    calendar: CalendarConfig | None = None,
) -> dict[str, Path]:
    """Write result files into `directory` and return {file name: path}."""
    out = Path(directory)
    out.mkdir(parents=True, exist_ok=True)
    paths: dict[str, Path] = {}

    payload = {
        **result.to_dict(),
        "overview": utilization_overview(result),
    }
    if calendar is not None:
        payload["calendar"] = calendar.to_dict()
    if tasks is not None:
        payload["tasks"] = [t.to_dict() for t in tasks]

    json_path = out / "allocation.json"
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    paths["allocation.json"] = json_path

    daily_rows = [
        {
            "date": day.date,
            "day_of_week": day.day_of_week,
            "task_ids": pipe_join(day.task_ids),
            "total_allocated": day.total_allocated,
            "remaining_capacity": day.remaining_capacity,
        }
        for day in result.allocations
    ]
    paths["daily.csv"] = _write_csv(out / "daily.csv", DAILY_COLS, daily_rows)

    if result.unallocated_tasks:
        rows = [
            {"task_id": u.task_id, "remaining": u.remaining, "range": u.range}
            for u in result.unallocated_tasks
        ]
        paths["unallocated.csv"] = _write_csv(out / "unallocated.csv", UNALLOCATED_COLS, rows)

    if tasks is not None:
        rows = [{c: getattr(t, c) for c in TASK_COLS} for t in tasks]
        paths["tasks.csv"] = _write_csv(out / "tasks.csv", TASK_COLS, rows)

    return paths


def _write_csv(path: Path, columns: list[str], rows: list[dict]) -> Path:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=columns)
        writer.writeheader()
        for row in rows:
            writer.writerow({c: row.get(c, "") for c in columns})
    return path

"""Render an allocation result to a multi-sheet XLSX workbook."""

from __future__ import annotations

from pathlib import Path

from workhours_core.aggregator import utilization_overview
from workhours_core.models import AllocationResult, RawTask

from .schemas import DAILY_COLS, STATS_FIELDS, UNALLOCATED_COLS, pipe_join

_STATS_LABELS = {
    "total_tasks": "任务总数",
    "total_hours_required": "需求工时",
    "total_hours_allocated": "已分配工时",
    "total_idle_capacity": "空闲容量",
}


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _get_openpyxl():
    try:
        from openpyxl import Workbook
        from openpyxl.styles import Font, PatternFill
        return Workbook, Font, PatternFill
    except ImportError as exc:
        raise ImportError("openpyxl is required for XLSX export: pip install openpyxl") from exc


def _get_openpyxl_loader():
    try:
        from openpyxl import load_workbook
        return load_workbook
    except ImportError as exc:
        raise ImportError("openpyxl is required to read XLSX input: pip install openpyxl") from exc


def _style_headers(worksheets):
    """Apply bold + blue fill to header row of each worksheet."""
    _, Font, PatternFill = _get_openpyxl()
    header_font = Font(bold=True)
    header_fill = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
    for ws in worksheets:
        for cell in ws[1]:
            cell.font = header_font
            cell.fill = header_fill


def _task_headers(tasks: list[RawTask], field_labels: list[str] | None) -> list[str]:
    """Column headers for the raw task sheet, padded to the widest row."""
    labels = list(field_labels or [])
    width = max((len(t.raw_parts) for t in tasks), default=0)
    for i in range(len(labels), width):
        labels.append(f"列 {i + 1}")
    return labels


# ---------------------------------------------------------------------------
# Workbook
# ---------------------------------------------------------------------------

def render_xlsx(
    result: AllocationResult,
    path: Path,
    *,
    tasks: list[RawTask] | None = None,
    field_labels: list[str] | None = None,
) -> Path:
    """Write the result workbook.

    Sheets: 汇总 (stats + utilisation), 每日分配 (one row per workday),
    任务明细 (raw task columns, only when tasks are given), 未分配.
    """
    Workbook, _, _ = _get_openpyxl()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()

    # --- Summary sheet ---
    ws_summary = wb.active
    ws_summary.title = "汇总"
    ws_summary.append(["Field", "Value"])
    stats = result.stats
    for field in STATS_FIELDS:
        ws_summary.append([_STATS_LABELS[field], getattr(stats, field)])
    for key, value in utilization_overview(result).items():
        ws_summary.append([key, value if value is not None else ""])

    # --- Daily sheet ---
    ws_daily = wb.create_sheet("每日分配")
    ws_daily.append(DAILY_COLS)
    for day in result.allocations:
        ws_daily.append(
            [
                day.date,
                day.day_of_week,
                pipe_join(day.task_ids),
                day.total_allocated,
                day.remaining_capacity,
            ]
        )
    sheets = [ws_summary, ws_daily]

    # --- Task sheet ---
    if tasks is not None:
        ws_tasks = wb.create_sheet("任务明细")
        headers = _task_headers(tasks, field_labels)
        ws_tasks.append(headers)
        for t in tasks:
            ws_tasks.append(t.raw_parts + [""] * (len(headers) - len(t.raw_parts)))
        sheets.append(ws_tasks)

    # --- Unallocated sheet ---
    ws_unalloc = wb.create_sheet("未分配")
    ws_unalloc.append(UNALLOCATED_COLS)
    for u in result.unallocated_tasks:
        ws_unalloc.append([u.task_id, u.remaining, u.range])
    sheets.append(ws_unalloc)

    _style_headers(sheets)
    wb.save(path)
    return path

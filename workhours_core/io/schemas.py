"""Column constants, pipe helpers, and type coercion for CSV/XLSX I/O."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Output column names
# ---------------------------------------------------------------------------

DAILY_COLS = [
    "date",
    "day_of_week",
    "task_ids",
    "total_allocated",
    "remaining_capacity",
]

UNALLOCATED_COLS = [
    "task_id",
    "remaining",
    "range",
]

TASK_COLS = [
    "task_id",
    "name",
    "start",
    "end",
    "hours",
]

STATS_FIELDS = [
    "total_tasks",
    "total_hours_required",
    "total_hours_allocated",
    "total_idle_capacity",
]

# ---------------------------------------------------------------------------
# Pipe-separated field helper
# ---------------------------------------------------------------------------

PIPE = "|"


def pipe_join(values: list | None) -> str:
    """Join a list into a pipe-separated string. Empty/None -> empty string."""
    if not values:
        return ""
    return PIPE.join(str(v) for v in values if v is not None and str(v).strip())


# ---------------------------------------------------------------------------
# Type coercion helpers
# ---------------------------------------------------------------------------


def to_float_or_none(value: str | None) -> float | None:
    """Coerce a string to float, returning None for empty or invalid values."""
    if value is None or str(value).strip() == "":
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def to_int_or_none(value: str | None) -> int | None:
    """Coerce a string to int ("5.7" -> 5), returning None for empty or invalid values."""
    if value is None or str(value).strip() == "":
        return None
    try:
        return int(float(value))
    except (ValueError, TypeError):
        return None


def cell_text(value) -> str:
    """Render a spreadsheet cell as the text a user would have copied."""
    if value is None:
        return ""
    if hasattr(value, "date") and callable(value.date):
        return value.date().isoformat()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()

"""Heuristic parser for pasted task tables.

Rows come from spreadsheets, chat messages or plain text, so the delimiter
and the position of the hours column both have to be guessed per row:

    ID | Start | End | Hours
    ID | Start | End | Name  | Hours
    ID | Start | End | Hours | Name | ...

Malformed rows, and rows whose hours round to zero at hundredth-hour
precision, are dropped silently; callers treat an empty result as
"no usable data".
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import date

from .allocator import to_hundredths
from .models import RawTask

logger = logging.getLogger(__name__)

TAB = "\t"
PIPE = "|"
SPACE = " "

HEADER_MARKERS = ("序号", "ID")
MIN_YEAR = 2000

_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[ T].*)?$")
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:Infinity|(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


# ---------------------------------------------------------------------------
# Token helpers
# ---------------------------------------------------------------------------


def detect_delimiter(line: str) -> str:
    """Tab beats pipe beats whitespace."""
    if TAB in line:
        return TAB
    if PIPE in line:
        return PIPE
    return SPACE


def split_row(line: str) -> tuple[list[str], str]:
    """Split one line into tokens.

    Tab/pipe rows keep empty tokens so column indexes stay aligned;
    whitespace rows collapse runs and drop empties.
    """
    delimiter = detect_delimiter(line)
    if delimiter == SPACE:
        return line.split(), delimiter
    return [token.strip() for token in line.split(delimiter)], delimiter


def parse_date_string(value: str | None) -> date | None:
    """Parse YYYY-MM-DD, YYYY/MM/DD or YYYY.MM.DD. Years before 2000 are rejected."""
    if not value:
        return None
    cleaned = re.sub(r"[/.]", "-", value.strip())
    match = _DATE_RE.match(cleaned)
    if not match:
        return None
    try:
        parsed = date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None
    if parsed.year < MIN_YEAR:
        return None
    return parsed


def parse_hours(value: str | None) -> float | None:
    """Read the leading number of a token ("4.0h" -> 4.0, "Infinity" -> inf), or None."""
    if value is None:
        return None
    match = _LEADING_NUMBER_RE.match(value.lstrip())
    if not match:
        return None
    return float(match.group(0))


# ---------------------------------------------------------------------------
# Column-role decision table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RowShape:
    name: str
    min_tokens: int
    max_tokens: int | None
    hours_col: int | None
    name_col: int | None

    def fits(self, tokens: list[str]) -> bool:
        n = len(tokens)
        if n < self.min_tokens:
            return False
        if self.max_tokens is not None and n > self.max_tokens:
            return False
        if self.hours_col is not None and parse_hours(tokens[self.hours_col]) is None:
            return False
        return True


# Evaluated top to bottom; the first shape that fits wins.
ROW_SHAPES: tuple[RowShape, ...] = (
    RowShape("hours_after_name", min_tokens=5, max_tokens=None, hours_col=4, name_col=3),
    RowShape("hours_before_name", min_tokens=5, max_tokens=None, hours_col=3, name_col=4),
    RowShape("hours_only", min_tokens=4, max_tokens=4, hours_col=3, name_col=None),
    RowShape("name_only", min_tokens=4, max_tokens=4, hours_col=None, name_col=3),
    RowShape("under_specified", min_tokens=3, max_tokens=None, hours_col=None, name_col=None),
)


def classify_row(tokens: list[str]) -> RowShape | None:
    for shape in ROW_SHAPES:
        if shape.fits(tokens):
            return shape
    return None


def _is_header(tokens: list[str]) -> bool:
    return any(marker in tokens[0] for marker in HEADER_MARKERS)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_input_text(text: str) -> list[RawTask]:
    """Parse a text blob into task rows, preserving input order."""
    if not text or not text.strip():
        return []

    lines = text.strip().split("\n")
    kept: list[tuple[RawTask, date | None]] = []

    for line in lines:
        tokens, delimiter = split_row(line)
        if len(tokens) < 3 or _is_header(tokens):
            continue

        task_id = tokens[0]
        start = parse_date_string(tokens[1])
        end = parse_date_string(tokens[2])

        shape = classify_row(tokens)
        hours = 0.0
        name = ""
        if shape is not None:
            if shape.hours_col is not None:
                hours = parse_hours(tokens[shape.hours_col]) or 0.0
            if shape.name_col is not None:
                name = tokens[shape.name_col]

        if not task_id or start is None or not math.isfinite(hours) or to_hundredths(hours) <= 0:
            continue

        task = RawTask(
            task_id=task_id,
            name=name,
            start=start.isoformat(),
            end=end.isoformat() if end else "",
            hours=hours,
            raw_parts=tokens,
            delimiter=delimiter,
        )
        kept.append((task, end))

    tasks = [task for task, _ in kept]
    ends = [end for _, end in kept if end is not None]
    max_end = max(ends).isoformat() if ends else ""
    for task in tasks:
        if not task.end:
            task.end = max_end or task.start

    logger.debug("Parsed %d task rows from %d lines", len(tasks), len(lines))
    return tasks


def render_rows(tasks: list[RawTask], separator: str | None = None) -> str:
    """Re-serialise rows from their raw tokens.

    With no explicit separator each row is joined with the delimiter it was
    originally split on.
    """
    return "\n".join((separator if separator is not None else t.delimiter).join(t.raw_parts) for t in tasks)


def replace_cell(
    tasks: list[RawTask],
    row_index: int,
    col_index: int,
    value: str,
    *,
    separator: str | None = None,
) -> str:
    """Return a new text blob with one cell replaced.

    Short rows are padded with empty tokens up to `col_index`. The input
    tasks are not modified.
    """
    if row_index < 0 or row_index >= len(tasks):
        raise IndexError(f"row index out of range: {row_index}")
    if col_index < 0:
        raise IndexError(f"column index out of range: {col_index}")

    target = tasks[row_index]
    parts = list(target.raw_parts)
    if col_index >= len(parts):
        parts.extend([""] * (col_index + 1 - len(parts)))
    parts[col_index] = value

    edited = RawTask(
        task_id=target.task_id,
        name=target.name,
        start=target.start,
        end=target.end,
        hours=target.hours,
        raw_parts=parts,
        delimiter=target.delimiter,
    )
    rows = [edited if i == row_index else t for i, t in enumerate(tasks)]
    return render_rows(rows, separator)

"""Input/output layer for the allocation pipeline.

Public API:
    load_input(path)              -- text / tsv / xlsx file -> text blob
    load_calendar(path)           -- calendar JSON -> CalendarConfig
    write_output(result, dir)     -- allocation.json + daily/unallocated CSVs
    render_xlsx(result, path)     -- multi-sheet result workbook
"""

from .reader import load_calendar, load_input
from .writer import write_output

__all__ = [
    "load_calendar",
    "load_input",
    "write_output",
]


# Lazy import for the optional openpyxl dependency.
def render_xlsx(*args, **kwargs):
    from .xlsx import render_xlsx as _fn
    return _fn(*args, **kwargs)

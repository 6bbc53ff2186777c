"""Read task tables and calendar files from disk."""

from __future__ import annotations

import csv
import json
from pathlib import Path

from workhours_core.workdays import CalendarConfig

from .schemas import cell_text

TEXT_SUFFIXES = {".txt", ".tsv", ""}
CSV_SUFFIXES = {".csv"}
XLSX_SUFFIXES = {".xlsx", ".xlsm"}


def load_input(path: Path) -> str:
    """Read an input file into the text blob the parser expects.

    Text files are returned as-is. CSV files and the first sheet of a
    workbook are flattened to tab-separated rows.
    Raises FileNotFoundError / ValueError.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Required file not found: {p}")

    suffix = p.suffix.lower()
    if suffix in XLSX_SUFFIXES:
        return _read_xlsx_rows(p)
    if suffix in CSV_SUFFIXES:
        return _read_csv_rows(p)
    if suffix in TEXT_SUFFIXES:
        return p.read_text(encoding="utf-8-sig")
    raise ValueError(f"Unsupported input file type: {p.suffix}")


def load_calendar(path: Path) -> CalendarConfig:
    """Read a calendar JSON file ({"holidays": [...], "makeup_days": [...]})."""
    return CalendarConfig.from_dict(_read_json(Path(path)))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_json(path: Path) -> dict:
    """Read and parse a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Required file not found: {path}")
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _read_xlsx_rows(path: Path) -> str:
    """Flatten the first worksheet to tab-separated lines, skipping empty rows."""
    from .xlsx import _get_openpyxl_loader

    load_workbook = _get_openpyxl_loader()
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        lines: list[str] = []
        for row in ws.iter_rows(values_only=True):
            line = _tab_row([cell_text(v) for v in row])
            if line:
                lines.append(line)
    finally:
        wb.close()
    return "\n".join(lines)


def _tab_row(cells: list[str]) -> str:
    while cells and cells[-1] == "":
        cells.pop()
    return "\t".join(cells)


def _read_csv_rows(path: Path) -> str:
    """Re-join comma-separated rows with tabs, skipping empty rows."""
    lines: list[str] = []
    with open(path, newline="", encoding="utf-8-sig") as f:
        for row in csv.reader(f):
            line = _tab_row([cell.strip() for cell in row])
            if line:
                lines.append(line)
    return "\n".join(lines)

"""Task intake and work-hour allocation engine."""

from .aggregator import NO_DATA_MESSAGE, utilization_overview
from .allocator import allocate
from .models import AllocationResult, DayAllocation, RawTask, UnallocatedTask
from .parser import parse_input_text, replace_cell
from .presets import PRESET_2025, PRESETS, SAMPLE_INPUT
from .workdays import CalendarConfig, enumerate_workdays, is_workday

# io layer; openpyxl is only imported when a workbook is read or written
from .io import load_input, write_output

__all__ = [
    "AllocationResult",
    "CalendarConfig",
    "DayAllocation",
    "NO_DATA_MESSAGE",
    "PRESETS",
    "PRESET_2025",
    "RawTask",
    "SAMPLE_INPUT",
    "UnallocatedTask",
    "allocate",
    "enumerate_workdays",
    "is_workday",
    "load_input",
    "parse_input_text",
    "replace_cell",
    "utilization_overview",
    "write_output",
]

"""Task and allocation records shared by the parser, allocator and writers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class RawTask:
    """One parsed input row.

    `raw_parts` keeps the row's tokens verbatim (column-aligned for tab and
    pipe input) and `delimiter` records how the row was split, so the row can
    be re-serialised after a cell edit.
    """

    task_id: str
    start: str
    end: str
    hours: float
    name: str = ""
    raw_parts: list[str] = field(default_factory=list)
    delimiter: str = "\t"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TaskSlice:
    index: int
    task_id: str
    hours: float


@dataclass
class DayAllocation:
    date: str
    day_of_week: str
    task_ids: list[str]
    slices: list[TaskSlice]
    total_allocated: float
    remaining_capacity: float


@dataclass
class UnallocatedTask:
    task_id: str
    remaining: float
    range: str


@dataclass
class AllocationStats:
    total_tasks: int = 0
    total_hours_required: float = 0.0
    total_hours_allocated: float = 0.0
    total_idle_capacity: float = 0.0


@dataclass
class AllocationResult:
    allocations: list[DayAllocation] = field(default_factory=list)
    unallocated_tasks: list[UnallocatedTask] = field(default_factory=list)
    stats: AllocationStats = field(default_factory=AllocationStats)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "AllocationResult":
        """Rebuild a result from its to_dict() form (e.g. a stored plan)."""
        return cls(
            allocations=[
                DayAllocation(
                    **{
                        **day,
                        "slices": [TaskSlice(**s) for s in day.get("slices", [])],
                    }
                )
                for day in payload.get("allocations", [])
            ],
            unallocated_tasks=[UnallocatedTask(**u) for u in payload.get("unallocated_tasks", [])],
            stats=AllocationStats(**payload.get("stats", {})),
            errors=list(payload.get("errors", [])),
        )

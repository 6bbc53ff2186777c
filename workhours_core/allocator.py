"""Greedy earliest-deadline-first allocation of task hours onto workdays.

Each workday offers a fixed capacity: 8h, unless a caller passes another
`daily_capacity` (the service reads one from WORKHOURS_DAILY_CAPACITY).
Days are processed in ascending order; on each day the tasks whose interval
covers it and that still have hours left are served by ascending end date,
ties broken by input position. Hours already placed on earlier days are
never moved, so a task can end with hours left over even when another
ordering would have fitted.

All accounting is done in integer hundredths of an hour.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from .aggregator import from_hundredths, summarize
from .models import AllocationResult, DayAllocation, RawTask, TaskSlice
from .workdays import MAX_RANGE_DAYS, CalendarConfig, enumerate_workdays, weekday_label

logger = logging.getLogger(__name__)

DAILY_CAPACITY_HOURS = 8.0


def to_hundredths(hours: float) -> int:
    """Hours -> integer hundredths, rounding half up."""
    return int((Decimal(repr(float(hours))) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def allocate_step(remaining: int, capacity: int) -> tuple[int, int, int]:
    """One (day, task) reduction: returns (allocated, remaining, capacity)."""
    allocated = min(remaining, capacity)
    return allocated, remaining - allocated, capacity - allocated


def _candidate_order(active: list[RawTask], positions: list[int], day: str, remaining: list[int]) -> list[int]:
    """Arena slots eligible on `day`, earliest deadline first."""
    eligible = [
        slot
        for slot, task in enumerate(active)
        if remaining[slot] > 0 and task.start <= day <= task.end
    ]
    eligible.sort(key=lambda slot: (active[slot].end, positions[slot]))
    return eligible


def allocate(
    tasks: list[RawTask],
    config: CalendarConfig,
    *,
    daily_capacity: float = DAILY_CAPACITY_HOURS,
    max_days: int = MAX_RANGE_DAYS,
) -> AllocationResult:
    """Distribute task hours across the workdays of their intervals.

    Tasks with start > end are left out of the allocation and of the hour
    totals but still count towards `stats.total_tasks`. The result depends
    only on the arguments.
    """
    capacity_per_day = to_hundredths(daily_capacity)
    if capacity_per_day <= 0:
        raise ValueError(f"daily capacity must be positive, got {daily_capacity!r}")

    positions = [i for i, t in enumerate(tasks) if t.start <= t.end]
    active = [tasks[i] for i in positions]
    required = [to_hundredths(t.hours) for t in active]
    remaining = list(required)

    if not active:
        stats, _, _ = summarize(len(tasks), [], [], [], [], daily_capacity=capacity_per_day)
        return AllocationResult(stats=stats)

    min_start = min(t.start for t in active)
    max_end = max(t.end for t in active)
    workdays = enumerate_workdays(min_start, max_end, config, max_days=max_days)

    allocations: list[DayAllocation] = []
    for day in workdays:
        capacity = capacity_per_day
        slices: list[TaskSlice] = []
        for slot in _candidate_order(active, positions, day, remaining):
            if capacity <= 0:
                break
            allocated, remaining[slot], capacity = allocate_step(remaining[slot], capacity)
            if allocated > 0:
                slices.append(TaskSlice(index=positions[slot], task_id=active[slot].task_id, hours=from_hundredths(allocated)))

        used = capacity_per_day - capacity
        allocations.append(
            DayAllocation(
                date=day,
                day_of_week=weekday_label(day),
                task_ids=[s.task_id for s in slices],
                slices=slices,
                total_allocated=from_hundredths(used),
                remaining_capacity=from_hundredths(max(0, capacity)),
            )
        )
        logger.debug("%s: %d task(s), %.2fh allocated", day, len(slices), used / 100)

    stats, unallocated, errors = summarize(
        len(tasks), active, required, remaining, allocations, daily_capacity=capacity_per_day
    )
    logger.info(
        "Allocated %d task(s) over %d workday(s) between %s and %s",
        len(active), len(workdays), min_start, max_end,
    )
    if unallocated:
        logger.warning(
            "%d task(s) left with unallocated hours (%.2fh total)",
            len(unallocated), sum(u.remaining for u in unallocated),
        )

    return AllocationResult(
        allocations=allocations,
        unallocated_tasks=unallocated,
        stats=stats,
        errors=errors,
    )

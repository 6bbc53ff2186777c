"""Summary statistics and shortfall reporting for an allocation run."""

from __future__ import annotations

from typing import Any

from .models import AllocationResult, AllocationStats, DayAllocation, RawTask, UnallocatedTask

NO_DATA_MESSAGE = "未能识别有效数据，请检查输入格式。"


def from_hundredths(value: int) -> float:
    return round(value / 100, 2)


def format_hours(value: float) -> str:
    """Render hours without trailing zeros: 8.0 -> "8", 2.50 -> "2.5"."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def shortfall_message(item: UnallocatedTask) -> str:
    return f"任务序号 {item.task_id}：剩余 {format_hours(item.remaining)} 小时无法分配"


def check_has_tasks(tasks: list[RawTask]) -> None:
    if not tasks:
        raise ValueError(NO_DATA_MESSAGE)


def summarize(
    total_tasks: int,
    active: list[RawTask],
    required: list[int],
    remaining: list[int],
    allocations: list[DayAllocation],
    *,
    daily_capacity: int,
) -> tuple[AllocationStats, list[UnallocatedTask], list[str]]:
    """Build stats, the unallocated report and error strings.

    `required` and `remaining` are hundredths of an hour, indexed like
    `active`. `total_tasks` counts every parsed row, including the ones that
    never took part in the allocation.
    """
    allocated_total = 0
    idle_total = 0
    for day in allocations:
        day_alloc = round(day.total_allocated * 100)
        allocated_total += day_alloc
        idle_total += max(0, daily_capacity - day_alloc)

    unallocated = [
        UnallocatedTask(
            task_id=task.task_id,
            remaining=from_hundredths(left),
            range=f"{task.start} ~ {task.end}",
        )
        for task, left in zip(active, remaining)
        if left > 0
    ]
    errors = [shortfall_message(item) for item in unallocated]

    stats = AllocationStats(
        total_tasks=total_tasks,
        total_hours_required=from_hundredths(sum(required)),
        total_hours_allocated=from_hundredths(allocated_total),
        total_idle_capacity=from_hundredths(idle_total),
    )
    return stats, unallocated, errors


def utilization_overview(result: AllocationResult) -> dict[str, Any]:
    """Capacity usage across the allocated days, for reports."""
    days = result.allocations
    allocated = result.stats.total_hours_allocated
    capacity = allocated + result.stats.total_idle_capacity
    busiest = max(days, key=lambda d: d.total_allocated) if days else None
    return {
        "workdays": len(days),
        "capacity_hours": round(capacity, 2),
        "utilization_pct": round(allocated / capacity * 100, 1) if capacity else 0.0,
        "fully_booked_days": sum(1 for d in days if d.remaining_capacity <= 0),
        "idle_days": sum(1 for d in days if d.total_allocated <= 0),
        "busiest_day": busiest.date if busiest and busiest.total_allocated > 0 else None,
        "unallocated_hours": round(sum(u.remaining for u in result.unallocated_tasks), 2),
    }

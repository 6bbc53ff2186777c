"""Plan-level wrapper around the pure allocation engine.

The engine result is deterministic; this layer adds the run metadata
(plan id, timestamp, calendar) that artifacts and tools need.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from workhours_core.aggregator import check_has_tasks, utilization_overview
from workhours_core.allocator import DAILY_CAPACITY_HOURS, allocate
from workhours_core.parser import parse_input_text
from workhours_core.workdays import MAX_RANGE_DAYS, CalendarConfig

logger = logging.getLogger(__name__)

UTC = timezone.utc


def now_utc_iso() -> str:
    return datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def merge_overrides(
    calendar: CalendarConfig,
    holidays: list[str] | None = None,
    makeup_days: list[str] | None = None,
) -> CalendarConfig:
    """Layer ad-hoc holiday / make-up dates on top of a named calendar."""
    for day in holidays or []:
        calendar = calendar.with_holiday(day)
    for day in makeup_days or []:
        calendar = calendar.with_makeup_day(day)
    return calendar


def run_allocation(
    text: str,
    calendar: CalendarConfig,
    *,
    calendar_name: str | None = None,
    daily_capacity: float = DAILY_CAPACITY_HOURS,
    max_days: int = MAX_RANGE_DAYS,
) -> dict[str, Any]:
    """Parse, allocate and wrap the result as a plan dict.

    Raises ValueError when no usable rows are found.
    """
    tasks = parse_input_text(text)
    check_has_tasks(tasks)

    result = allocate(tasks, calendar, daily_capacity=daily_capacity, max_days=max_days)
    plan = {
        "plan_id": f"plan-{uuid4().hex[:12]}",
        "generated_at": now_utc_iso(),
        "calendar_name": calendar_name,
        "calendar": calendar.to_dict(),
        "daily_capacity": daily_capacity,
        "tasks": [t.to_dict() for t in tasks],
        "result": result.to_dict(),
        "overview": utilization_overview(result),
    }
    logger.info(
        "Plan %s: %d task(s), %d unallocated",
        plan["plan_id"], len(tasks), len(result.unallocated_tasks),
    )
    return plan

"""Workday calendar: holiday / make-up overrides on top of a Mon-Fri week."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import Any

# Upper bound on the inclusive calendar range enumerated in one run.
MAX_RANGE_DAYS = 3660

WEEKDAY_LABELS = ["周一", "周二", "周三", "周四", "周五", "周六", "周日"]

_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def to_date(value: date | str) -> date:
    """Coerce a date or date string (2025-11-10, 2025/11/10, 2025.1.5). Raises ValueError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = re.sub(r"[/.]", "-", str(value).strip())
    match = _DATE_RE.match(text)
    if not match:
        raise ValueError(f"Invalid date: {value!r}")
    return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))


def to_iso(value: date | str) -> str:
    return to_date(value).isoformat()


def _normalize_dates(values: Any, label: str) -> frozenset[str]:
    if isinstance(values, (str, date)):
        values = [values]
    out: set[str] = set()
    for v in values or []:
        try:
            out.add(to_iso(v))
        except ValueError as exc:
            raise ValueError(f"Invalid {label} date: {v!r}") from exc
    return frozenset(out)


@dataclass(frozen=True)
class CalendarConfig:
    """Holiday and make-up overrides. Immutable; edits return a new value."""

    holidays: frozenset[str] = field(default_factory=frozenset)
    makeup_days: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "holidays", _normalize_dates(self.holidays, "holiday"))
        object.__setattr__(self, "makeup_days", _normalize_dates(self.makeup_days, "make-up"))

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> "CalendarConfig":
        payload = payload or {}
        makeup = payload.get("makeup_days", payload.get("makeupDays"))
        return cls(holidays=payload.get("holidays"), makeup_days=makeup)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "holidays": sorted(self.holidays),
            "makeup_days": sorted(self.makeup_days),
        }

    def with_holiday(self, day: date | str) -> "CalendarConfig":
        return CalendarConfig(self.holidays | {to_iso(day)}, self.makeup_days)

    def without_holiday(self, day: date | str) -> "CalendarConfig":
        return CalendarConfig(self.holidays - {to_iso(day)}, self.makeup_days)

    def with_makeup_day(self, day: date | str) -> "CalendarConfig":
        return CalendarConfig(self.holidays, self.makeup_days | {to_iso(day)})

    def without_makeup_day(self, day: date | str) -> "CalendarConfig":
        return CalendarConfig(self.holidays, self.makeup_days - {to_iso(day)})

    def toggle_day(self, day: date | str) -> "CalendarConfig":
        """Cycle a date through its override states.

        holiday -> normal, make-up -> normal, normal weekend -> make-up,
        normal weekday -> holiday.
        """
        key = to_iso(day)
        if key in self.holidays:
            return self.without_holiday(key)
        if key in self.makeup_days:
            return self.without_makeup_day(key)
        if to_date(key).weekday() >= 5:
            return self.with_makeup_day(key)
        return self.with_holiday(key)


def weekday_label(day: date | str) -> str:
    return WEEKDAY_LABELS[to_date(day).weekday()]


def is_workday(day: date | str, config: CalendarConfig) -> bool:
    """Holiday beats make-up beats the default Saturday/Sunday rest rule."""
    key = to_iso(day)
    if key in config.holidays:
        return False
    if key in config.makeup_days:
        return True
    return to_date(key).weekday() < 5


@lru_cache(maxsize=128)
def _workdays_cached(start: date, end: date, config: CalendarConfig, max_days: int) -> tuple[str, ...]:
    span = (end - start).days + 1
    if span > max_days:
        raise ValueError(
            f"Date range {start.isoformat()} ~ {end.isoformat()} spans {span} days, "
            f"limit is {max_days}"
        )
    days: list[str] = []
    current = start
    while current <= end:
        if is_workday(current, config):
            days.append(current.isoformat())
        current += timedelta(days=1)
    return tuple(days)


def enumerate_workdays(
    start: date | str,
    end: date | str,
    config: CalendarConfig,
    *,
    max_days: int = MAX_RANGE_DAYS,
) -> list[str]:
    """Inclusive, ascending ISO workdays in [start, end]."""
    start_d = to_date(start)
    end_d = to_date(end)
    if start_d > end_d:
        return []
    return list(_workdays_cached(start_d, end_d, config, int(max_days)))

"""Runtime settings read from the environment (optionally via a .env file).

    WORKHOURS_ARTIFACT_DIR      plan artifact root (default ./artifacts)
    WORKHOURS_DEFAULT_CALENDAR  calendar used when none is named (preset_2025)
    WORKHOURS_CALENDAR_FILE     JSON file of extra named calendars
    WORKHOURS_MAX_DAYS          longest date range enumerated in one run
    WORKHOURS_DAILY_CAPACITY    hours per workday; 8.0 when unset

The daily capacity is an extension for teams on shorter or longer days.
Left unset, every day offers exactly 8.0 hours and no day is booked past it.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from workhours_core.allocator import DAILY_CAPACITY_HOURS
from workhours_core.io.schemas import to_float_or_none, to_int_or_none
from workhours_core.presets import PRESETS
from workhours_core.workdays import MAX_RANGE_DAYS, CalendarConfig


@dataclass(frozen=True)
class RuntimeConfig:
    artifact_root: Path
    default_calendar: str
    max_days: int
    daily_capacity: float
    calendar_file: Path | None


def load_env(dotenv_path: str | Path | None = None) -> None:
    path = Path(dotenv_path) if dotenv_path else None
    if path and path.exists():
        load_dotenv(path)
        return
    load_dotenv()


def _env_number(name: str, default, parse):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = parse(raw)
    if value is None or value <= 0:
        raise ValueError(f"{name} must be a positive number, got {raw!r}")
    return value


def runtime_config() -> RuntimeConfig:
    artifact_root = Path(os.getenv("WORKHOURS_ARTIFACT_DIR", "./artifacts")).expanduser().resolve()
    artifact_root.mkdir(parents=True, exist_ok=True)
    calendar_file = os.getenv("WORKHOURS_CALENDAR_FILE", "").strip()
    return RuntimeConfig(
        artifact_root=artifact_root,
        default_calendar=os.getenv("WORKHOURS_DEFAULT_CALENDAR", "preset_2025").strip() or "preset_2025",
        max_days=_env_number("WORKHOURS_MAX_DAYS", MAX_RANGE_DAYS, to_int_or_none),
        daily_capacity=_env_number("WORKHOURS_DAILY_CAPACITY", DAILY_CAPACITY_HOURS, to_float_or_none),
        calendar_file=Path(calendar_file).expanduser() if calendar_file else None,
    )


def load_calendar_profiles(profile_file: Path | None = None) -> dict[str, CalendarConfig]:
    """Built-in presets, overlaid with named calendars from a JSON file.

    File shape: {"name": {"holidays": [...], "makeup_days": [...]}, ...}
    """
    profiles: dict[str, CalendarConfig] = dict(PRESETS)
    if profile_file is None or not Path(profile_file).exists():
        return profiles
    with Path(profile_file).open("r", encoding="utf-8") as fh:
        raw: dict[str, Any] = json.load(fh)
    for name, payload in raw.items():
        profiles[name] = CalendarConfig.from_dict(payload)
    return profiles


def get_calendar(name: str, profile_file: Path | None = None) -> CalendarConfig:
    profiles = load_calendar_profiles(profile_file)
    if name not in profiles:
        raise ValueError(f"Calendar '{name}' not found. Available: {sorted(profiles)}")
    return profiles[name]

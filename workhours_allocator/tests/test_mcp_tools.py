"""Tests for the MCP tool functions, called directly."""

import pytest

from workhours_allocator import mcp_server
from workhours_core.presets import SAMPLE_INPUT


@pytest.fixture(autouse=True)
def artifact_dir(monkeypatch, tmp_path):
    root = tmp_path / "artifacts"
    monkeypatch.setenv("WORKHOURS_ARTIFACT_DIR", str(root))
    monkeypatch.setenv("WORKHOURS_DEFAULT_CALENDAR", "preset_2025")
    monkeypatch.delenv("WORKHOURS_CALENDAR_FILE", raising=False)
    monkeypatch.delenv("WORKHOURS_DAILY_CAPACITY", raising=False)
    monkeypatch.delenv("WORKHOURS_MAX_DAYS", raising=False)
    return root


def test_parse_tasks():
    out = mcp_server.parse_tasks(SAMPLE_INPUT)
    assert out["count"] == 4
    assert out["tasks"][0]["row_shape"] == "hours_after_name"
    assert out["tasks"][1]["hours"] == 12.0


def test_list_calendars():
    out = mcp_server.list_calendars()
    assert out["preset_2025"]["default"] is True
    assert out["empty"] == {"holidays": 0, "makeup_days": 0, "default": False}


def test_load_calendar():
    cal = mcp_server.load_calendar("preset_2025")
    assert "2025-10-01" in cal["holidays"]
    assert "2025-10-11" in cal["makeup_days"]


def test_check_workday():
    out = mcp_server.check_workday("2025-09-28")
    assert out == {
        "date": "2025-09-28",
        "day_of_week": "周日",
        "calendar": "preset_2025",
        "is_workday": True,
    }
    assert mcp_server.check_workday("2025-09-28", "empty")["is_workday"] is False


def test_toggle_calendar_day():
    cal = mcp_server.toggle_calendar_day("2025-11-12")
    assert cal == {"holidays": ["2025-11-12"], "makeup_days": []}
    cal = mcp_server.toggle_calendar_day("2025-11-12", holidays=cal["holidays"])
    assert cal == {"holidays": [], "makeup_days": []}


def test_allocate_and_reload(artifact_dir):
    plan = mcp_server.allocate_hours(SAMPLE_INPUT, extra_holidays=["2025-11-11"])
    assert plan["calendar_name"] == "preset_2025"
    assert "2025-11-11" in plan["calendar"]["holidays"]
    assert plan["path"].startswith(str(artifact_dir))

    [manifest] = mcp_server.list_plans()
    assert manifest["plan_id"] == plan["plan_id"]
    loaded = mcp_server.load_plan()
    assert loaded["result"] == plan["result"]


def test_allocate_without_save():
    plan = mcp_server.allocate_hours(SAMPLE_INPUT, save=False)
    assert "path" not in plan
    assert mcp_server.list_plans() == []


def test_export_plan_xlsx(artifact_dir):
    plan = mcp_server.allocate_hours(SAMPLE_INPUT)
    out = mcp_server.export_plan_xlsx(plan["plan_id"])
    assert out["path"].endswith("plan.xlsx")
    assert (artifact_dir / "plans" / plan["plan_id"] / "plan.xlsx").exists()

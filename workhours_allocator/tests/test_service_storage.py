"""Tests for the plan wrapper and plan artifact storage."""

import pytest

from workhours_allocator.service import merge_overrides, run_allocation
from workhours_allocator.storage import list_plans, load_plan, save_plan
from workhours_core.aggregator import NO_DATA_MESSAGE
from workhours_core.presets import PRESET_2025, SAMPLE_INPUT
from workhours_core.workdays import CalendarConfig


@pytest.fixture
def plan():
    return run_allocation(SAMPLE_INPUT, PRESET_2025, calendar_name="preset_2025")


class TestRunAllocation:
    def test_plan_shape(self, plan):
        assert plan["plan_id"].startswith("plan-")
        assert plan["generated_at"].endswith("Z")
        assert plan["calendar_name"] == "preset_2025"
        assert plan["daily_capacity"] == 8.0
        assert len(plan["tasks"]) == 4
        assert plan["result"]["stats"]["total_hours_allocated"] == 26.0
        assert plan["overview"]["workdays"] == 6

    def test_plan_ids_are_unique(self, plan):
        other = run_allocation(SAMPLE_INPUT, PRESET_2025)
        assert other["plan_id"] != plan["plan_id"]

    def test_no_rows(self):
        with pytest.raises(ValueError, match=NO_DATA_MESSAGE):
            run_allocation("nothing to see here", PRESET_2025)

    def test_custom_capacity(self):
        plan = run_allocation(SAMPLE_INPUT, PRESET_2025, daily_capacity=4)
        days = plan["result"]["allocations"]
        assert max(d["total_allocated"] for d in days) == 4.0


class TestMergeOverrides:
    def test_adds_dates(self):
        cal = merge_overrides(CalendarConfig(), ["2025-11-12"], ["2025-11-15"])
        assert cal.holidays == frozenset({"2025-11-12"})
        assert cal.makeup_days == frozenset({"2025-11-15"})

    def test_none_keeps_calendar(self):
        assert merge_overrides(PRESET_2025) == PRESET_2025

    def test_bad_date(self):
        with pytest.raises(ValueError):
            merge_overrides(CalendarConfig(), ["someday"])


class TestStorage:
    def test_save_and_load(self, plan, tmp_path):
        target = save_plan(tmp_path, plan)
        assert (target / "plan.json").exists()
        assert (target / "manifest.json").exists()
        assert load_plan(tmp_path, plan["plan_id"]) == plan

    def test_latest_pointer(self, plan, tmp_path):
        save_plan(tmp_path, plan)
        newer = run_allocation(SAMPLE_INPUT, CalendarConfig())
        save_plan(tmp_path, newer)
        assert load_plan(tmp_path)["plan_id"] == newer["plan_id"]

    def test_manifest_fields(self, plan, tmp_path):
        save_plan(tmp_path, plan)
        [manifest] = list_plans(tmp_path)
        assert manifest["plan_id"] == plan["plan_id"]
        assert manifest["range"] == {"from": "2025-11-10", "to": "2025-11-17"}
        assert manifest["unallocated"] == 0
        assert manifest["stats"]["total_tasks"] == 4

    def test_list_skips_broken_manifest(self, plan, tmp_path):
        save_plan(tmp_path, plan)
        broken = tmp_path / "plans" / "broken"
        broken.mkdir()
        (broken / "manifest.json").write_text("{not json", encoding="utf-8")
        assert [m["plan_id"] for m in list_plans(tmp_path)] == [plan["plan_id"]]

    def test_list_limit(self, tmp_path):
        for _ in range(3):
            save_plan(tmp_path, run_allocation(SAMPLE_INPUT, PRESET_2025))
        assert len(list_plans(tmp_path, limit=2)) == 2

    def test_missing_plan(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_plan(tmp_path)
        with pytest.raises(FileNotFoundError):
            load_plan(tmp_path, "plan-unknown")

"""Tests for the pasted-table parser."""

import math
from datetime import date

import pytest

from workhours_core.allocator import allocate
from workhours_core.parser import (
    ROW_SHAPES,
    classify_row,
    detect_delimiter,
    parse_date_string,
    parse_hours,
    parse_input_text,
    render_rows,
    replace_cell,
    split_row,
)
from workhours_core.presets import SAMPLE_INPUT
from workhours_core.workdays import CalendarConfig


class TestDelimiters:
    def test_tab_beats_pipe(self):
        assert detect_delimiter("a|b\tc") == "\t"

    def test_pipe_beats_space(self):
        assert detect_delimiter("a b|c") == "|"

    def test_space_fallback(self):
        assert detect_delimiter("a b c") == " "

    def test_tab_split_keeps_empty_tokens(self):
        tokens, delimiter = split_row("A\t2025-11-10\t\t设计\t4")
        assert tokens == ["A", "2025-11-10", "", "设计", "4"]
        assert delimiter == "\t"

    def test_pipe_split_strips_tokens(self):
        tokens, _ = split_row("A | 2025-11-10 | 2025-11-12 | 8")
        assert tokens == ["A", "2025-11-10", "2025-11-12", "8"]

    def test_whitespace_split_collapses_runs(self):
        tokens, delimiter = split_row("  A   2025-11-10  2025-11-12 8 ")
        assert tokens == ["A", "2025-11-10", "2025-11-12", "8"]
        assert delimiter == " "


class TestDateParsing:
    def test_iso(self):
        assert parse_date_string("2025-11-10") == date(2025, 11, 10)

    def test_slashes_and_dots(self):
        assert parse_date_string("2025/11/10") == date(2025, 11, 10)
        assert parse_date_string("2025.11.10") == date(2025, 11, 10)

    def test_single_digit_month_and_day(self):
        assert parse_date_string("2025/1/5") == date(2025, 1, 5)

    def test_trailing_time_ignored(self):
        assert parse_date_string("2025-11-10 09:30") == date(2025, 11, 10)

    def test_rejects_old_years(self):
        assert parse_date_string("1999-12-31") is None

    def test_rejects_invalid_calendar_date(self):
        assert parse_date_string("2025-02-30") is None

    def test_rejects_garbage(self):
        assert parse_date_string("next week") is None
        assert parse_date_string("") is None
        assert parse_date_string(None) is None


class TestHoursParsing:
    def test_plain_number(self):
        assert parse_hours("4.0") == 4.0

    def test_leading_number_prefix(self):
        assert parse_hours("4.5h") == 4.5

    def test_not_numeric(self):
        assert parse_hours("需求分析") is None
        assert parse_hours("") is None
        assert parse_hours(None) is None

    def test_negative_is_numeric(self):
        assert parse_hours("-2") == -2.0

    def test_infinity_is_numeric(self):
        assert parse_hours("Infinity") == math.inf
        assert parse_hours("-Infinity") == -math.inf
        assert parse_hours("inf") is None


class TestRowShapes:
    def test_table_order(self):
        assert [s.name for s in ROW_SHAPES] == [
            "hours_after_name",
            "hours_before_name",
            "hours_only",
            "name_only",
            "under_specified",
        ]

    def test_hours_after_name(self):
        shape = classify_row(["1", "2025-11-10", "2025-11-12", "设计", "4"])
        assert shape.name == "hours_after_name"

    def test_hours_before_name(self):
        shape = classify_row(["1", "2025-11-10", "2025-11-12", "4", "设计"])
        assert shape.name == "hours_before_name"

    def test_both_numeric_prefers_column_four(self):
        shape = classify_row(["1", "2025-11-10", "2025-11-12", "3", "5"])
        assert shape.name == "hours_after_name"

    def test_hours_only(self):
        assert classify_row(["1", "2025-11-10", "2025-11-12", "8"]).name == "hours_only"

    def test_name_only(self):
        assert classify_row(["1", "2025-11-10", "2025-11-12", "设计"]).name == "name_only"

    def test_three_columns(self):
        assert classify_row(["1", "2025-11-10", "2025-11-12"]).name == "under_specified"

    def test_five_columns_without_numbers(self):
        assert classify_row(["1", "a", "b", "c", "d"]).name == "under_specified"

    def test_too_short(self):
        assert classify_row(["1", "2025-11-10"]) is None


class TestParseInputText:
    def test_tab_row_with_name_and_hours(self):
        tasks = parse_input_text("20250001\t2025/11/10\t2025/11/17\t需求分析\t4.0")
        assert len(tasks) == 1
        t = tasks[0]
        assert t.task_id == "20250001"
        assert t.start == "2025-11-10"
        assert t.end == "2025-11-17"
        assert t.name == "需求分析"
        assert t.hours == 4.0

    def test_hours_before_name(self):
        [t] = parse_input_text("T1\t2025-11-10\t2025-11-12\t6\t编码")
        assert t.hours == 6.0
        assert t.name == "编码"

    def test_pipe_row_hours_only(self):
        [t] = parse_input_text("T1|2025-11-10|2025-11-12|8")
        assert t.hours == 8.0
        assert t.name == ""
        assert t.delimiter == "|"

    def test_whitespace_row(self):
        [t] = parse_input_text("T1  2025.11.10   2025.11.12  设计  3.5")
        assert t.start == "2025-11-10"
        assert t.name == "设计"
        assert t.hours == 3.5
        assert t.delimiter == " "

    def test_rows_without_hours_are_dropped(self):
        text = "\n".join(
            [
                "T1 2025-11-10 2025-11-12 设计",
                "T2 2025-11-10 2025-11-12",
                "T3 2025-11-10 2025-11-12 0",
                "T4 2025-11-10 2025-11-12 -3",
                "T5\t2025-11-10\t2025-11-12\t设计\t1e999",
            ]
        )
        assert parse_input_text(text) == []

    def test_infinite_hours_column_drops_row(self):
        assert parse_input_text("T1\t2025-11-10\t2025-11-12\t5\tInfinity") == []

    def test_hours_below_one_hundredth_are_dropped(self):
        assert parse_input_text("A\t2025-11-10\t2025-11-10\t0.004") == []

    def test_hours_rounding_up_to_one_hundredth_are_kept(self):
        [t] = parse_input_text("A\t2025-11-10\t2025-11-10\t0.005")
        assert t.hours == 0.005
        result = allocate([t], CalendarConfig())
        assert result.allocations[0].total_allocated == 0.01
        assert result.unallocated_tasks == []
        assert result.stats.total_hours_required == 0.01

    def test_headers_are_dropped(self):
        text = "\n".join(
            [
                "序号\t开始时间\t结束时间\t任务类型\t预估工时",
                "Task ID\tStart\tEnd\tHours",
                "T1\t2025-11-10\t2025-11-12\t8",
            ]
        )
        assert [t.task_id for t in parse_input_text(text)] == ["T1"]

    def test_unparseable_start_is_dropped(self):
        text = "T1\t1999-11-10\t2025-11-12\t8\nT2\tsoon\t2025-11-12\t8"
        assert parse_input_text(text) == []

    def test_empty_id_is_dropped(self):
        text = "T1\t2025-11-10\t2025-11-12\t8\n\t2025-11-10\t2025-11-12\t8"
        assert [t.task_id for t in parse_input_text(text)] == ["T1"]

    def test_blank_and_noise_lines(self):
        text = "\n\nhello world\nT1\t2025-11-10\t2025-11-12\t8\n\n"
        assert len(parse_input_text(text)) == 1

    def test_empty_text(self):
        assert parse_input_text("") == []
        assert parse_input_text("   \n  ") == []

    def test_crlf_lines(self):
        text = "T1\t2025-11-10\t2025-11-12\t8\r\nT2\t2025-11-10\t2025-11-12\t4\r\n"
        tasks = parse_input_text(text)
        assert [t.hours for t in tasks] == [8.0, 4.0]
        assert tasks[0].raw_parts[-1] == "8"

    def test_preserves_input_order(self):
        tasks = parse_input_text(SAMPLE_INPUT)
        assert [t.task_id for t in tasks] == ["20250001", "20250002", "20250003", "20250004"]

    def test_keeps_extra_columns_verbatim(self):
        [t] = parse_input_text("T1\t2025-11-10\t2025-11-12\t设计\t4\t张三\t\t备注")
        assert t.raw_parts == ["T1", "2025-11-10", "2025-11-12", "设计", "4", "张三", "", "备注"]

    def test_start_after_end_is_kept(self):
        [t] = parse_input_text("T1\t2025-11-20\t2025-11-10\t8")
        assert t.start == "2025-11-20"
        assert t.end == "2025-11-10"


class TestEndDateBackfill:
    def test_missing_end_takes_batch_maximum(self):
        text = "\n".join(
            [
                "A\t2025-11-10\t\t设计\t4",
                "B\t2025-11-10\t2025-11-20\t编码\t4",
                "C\t2025-11-10\t2025-11-14\t测试\t4",
            ]
        )
        tasks = parse_input_text(text)
        assert tasks[0].end == "2025-11-20"

    def test_missing_end_without_any_end_uses_start(self):
        [t] = parse_input_text("A\t2025-11-12\tTBD\t设计\t4")
        assert t.end == "2025-11-12"


class TestRewriting:
    def test_render_rows_roundtrip(self):
        text = "\n".join(
            [
                "A\t2025/11/10\t2025/11/17\t需求分析\t4.0",
                "B|2025-11-10|2025-11-12|8",
                "C 2025.11.11 2025.11.14 6 编码",
            ]
        )
        tasks = parse_input_text(text)
        again = parse_input_text(render_rows(tasks))
        assert [(t.task_id, t.start, t.end, t.hours) for t in again] == [
            (t.task_id, t.start, t.end, t.hours) for t in tasks
        ]

    def test_render_rows_with_separator(self):
        tasks = parse_input_text("A\t2025-11-10\t2025-11-12\t8")
        assert render_rows(tasks, " ") == "A 2025-11-10 2025-11-12 8"

    def test_replace_cell_changes_hours(self):
        tasks = parse_input_text(SAMPLE_INPUT)
        text = replace_cell(tasks, 1, 4, "6.5")
        edited = parse_input_text(text)
        assert edited[1].hours == 6.5
        assert edited[0].hours == 4.0

    def test_replace_cell_does_not_mutate_tasks(self):
        tasks = parse_input_text(SAMPLE_INPUT)
        replace_cell(tasks, 0, 3, "改名")
        assert tasks[0].raw_parts[3] == "需求分析"

    def test_replace_cell_pads_short_rows(self):
        tasks = parse_input_text("A\t2025-11-10\t2025-11-12\t8")
        text = replace_cell(tasks, 0, 5, "备注")
        assert text == "A\t2025-11-10\t2025-11-12\t8\t\t备注"

    def test_replace_cell_out_of_range(self):
        tasks = parse_input_text(SAMPLE_INPUT)
        with pytest.raises(IndexError):
            replace_cell(tasks, 10, 0, "x")

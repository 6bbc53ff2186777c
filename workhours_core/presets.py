"""Built-in calendars and sample input."""

from __future__ import annotations

from .workdays import CalendarConfig

PRESET_2025 = CalendarConfig.from_dict(
    {
        "holidays": [
            "2025-01-01",  # New Year
            # Spring Festival
            "2025-01-28", "2025-01-29", "2025-01-30", "2025-01-31",
            "2025-02-01", "2025-02-02", "2025-02-03", "2025-02-04",
            "2025-04-04",  # Qingming
            "2025-05-01", "2025-05-02", "2025-05-03",  # Labour Day
            "2025-06-02",  # Dragon Boat
            # National Day
            "2025-10-01", "2025-10-02", "2025-10-03", "2025-10-04",
            "2025-10-05", "2025-10-06", "2025-10-07",
        ],
        "makeup_days": [
            "2025-01-26", "2025-02-08",
            "2025-04-27",
            "2025-09-28", "2025-10-11",
        ],
    }
)

PRESETS: dict[str, CalendarConfig] = {
    "preset_2025": PRESET_2025,
    "empty": CalendarConfig(),
}

# Column labels for report headers; the engine does not read them.
DEFAULT_FIELD_LABELS = ["序号", "开始时间", "结束时间", "任务类型", "预估工时"]

SAMPLE_INPUT = "\n".join(
    [
        "20250001\t2025/11/10\t2025/11/17\t需求分析\t4.0",
        "20250002\t2025/11/10\t2025/11/17\t前端开发\t12.0",
        "20250003\t2025/11/12\t2025/11/15\t后端开发\t8.0",
        "20250004\t2025/11/10\t2025/11/17\t测试用例\t2.0",
    ]
)

"""workhours-allocator MCP server.

Exposes tools for parsing pasted task tables, inspecting the workday
calendar, running the hour allocation, and managing stored plan artifacts.
"""
from __future__ import annotations

import argparse
import os
from typing import Any

from mcp.server.fastmcp import FastMCP

from workhours_core.parser import classify_row, parse_input_text
from workhours_core.workdays import CalendarConfig, is_workday, weekday_label

from .config import (
    get_calendar,
    load_calendar_profiles,
    load_env,
    runtime_config,
)
from .service import merge_overrides, run_allocation
from .storage import (
    list_plans as _list_plans,
    load_plan as _load_plan,
    plan_dir,
    save_plan as _save_plan,
)

mcp = FastMCP(
    "workhours-allocator",
    host=os.getenv("HOST", "127.0.0.1"),
    port=int(os.getenv("PORT", "8000")),
    instructions=(
        "Work-hour allocation engine. Parses pasted task tables "
        "(ID, start, end, name, hours), classifies workdays with holiday and "
        "make-up overrides, and distributes each task's hours over 8-hour "
        "workdays, earliest deadline first."
    ),
)

_ENV_FILE: str | None = None


def _runtime():
    load_env(_ENV_FILE or os.getenv("WORKHOURS_ENV_FILE"))
    return runtime_config()


# -- Parsing --

@mcp.tool()
def parse_tasks(text: str) -> dict[str, Any]:
    """Parse a pasted table into task rows without allocating.

    Returns the kept rows and the detected row shape of each.
    """
    tasks = parse_input_text(text)
    return {
        "count": len(tasks),
        "tasks": [
            {**t.to_dict(), "row_shape": getattr(classify_row(t.raw_parts), "name", None)}
            for t in tasks
        ],
    }


# -- Calendar --

@mcp.tool()
def list_calendars() -> dict[str, Any]:
    """List available calendars with their override counts."""
    cfg = _runtime()
    profiles = load_calendar_profiles(cfg.calendar_file)
    return {
        name: {
            "holidays": len(cal.holidays),
            "makeup_days": len(cal.makeup_days),
            "default": name == cfg.default_calendar,
        }
        for name, cal in profiles.items()
    }


@mcp.tool()
def load_calendar(calendar_name: str) -> dict[str, Any]:
    """Load a calendar by name. Returns its holiday and make-up dates."""
    cfg = _runtime()
    return get_calendar(calendar_name, cfg.calendar_file).to_dict()


@mcp.tool()
def check_workday(day: str, calendar_name: str | None = None) -> dict[str, Any]:
    """Classify one ISO date as workday or rest day under a calendar."""
    cfg = _runtime()
    name = calendar_name or cfg.default_calendar
    calendar = get_calendar(name, cfg.calendar_file)
    return {
        "date": day,
        "day_of_week": weekday_label(day),
        "calendar": name,
        "is_workday": is_workday(day, calendar),
    }


@mcp.tool()
def toggle_calendar_day(
    day: str,
    holidays: list[str] | None = None,
    makeup_days: list[str] | None = None,
) -> dict[str, Any]:
    """Cycle one date through holiday / make-up / normal and return the new calendar.

    The calendar is passed in and returned; nothing is stored.
    """
    calendar = CalendarConfig.from_dict({"holidays": holidays, "makeup_days": makeup_days})
    return calendar.toggle_day(day).to_dict()


# -- Allocation --

@mcp.tool()
def allocate_hours(
    text: str,
    calendar_name: str | None = None,
    extra_holidays: list[str] | None = None,
    extra_makeup_days: list[str] | None = None,
    save: bool = True,
) -> dict[str, Any]:
    """Parse a task table and allocate its hours across workdays.

    Returns the plan (daily allocations, unallocated tasks, stats, errors).
    Persisted as a plan artifact unless save is false.
    """
    cfg = _runtime()
    name = calendar_name or cfg.default_calendar
    calendar = merge_overrides(
        get_calendar(name, cfg.calendar_file),
        holidays=extra_holidays,
        makeup_days=extra_makeup_days,
    )
    plan = run_allocation(
        text,
        calendar,
        calendar_name=name,
        daily_capacity=cfg.daily_capacity,
        max_days=cfg.max_days,
    )
    if save:
        target = _save_plan(cfg.artifact_root, plan)
        plan["path"] = str(target)
    return plan


# -- Plan CRUD --

@mcp.tool()
def list_plans(limit: int = 20) -> list[dict[str, Any]]:
    """List stored plan manifests, newest first."""
    return _list_plans(_runtime().artifact_root, limit=limit)


@mcp.tool()
def load_plan(plan_id: str | None = None) -> dict[str, Any]:
    """Load a full plan JSON by ID (or latest if omitted)."""
    return _load_plan(_runtime().artifact_root, plan_id=plan_id)


@mcp.tool()
def export_plan_xlsx(plan_id: str | None = None) -> dict[str, Any]:
    """Render a stored plan to plan.xlsx next to its plan.json."""
    from workhours_core.io import render_xlsx
    from workhours_core.models import AllocationResult, RawTask
    from workhours_core.presets import DEFAULT_FIELD_LABELS

    root = _runtime().artifact_root
    plan = _load_plan(root, plan_id=plan_id)
    target = plan_dir(root, plan["plan_id"]) / "plan.xlsx"
    render_xlsx(
        AllocationResult.from_dict(plan["result"]),
        target,
        tasks=[RawTask(**t) for t in plan.get("tasks", [])],
        field_labels=DEFAULT_FIELD_LABELS,
    )
    return {"plan_id": plan["plan_id"], "path": str(target)}


# -- Server entrypoints --

async def _run_http() -> None:
    import uvicorn
    from starlette.middleware.base import BaseHTTPMiddleware
    from starlette.responses import JSONResponse, PlainTextResponse
    from starlette.routing import Route

    api_key = os.getenv("MCP_API_KEY")

    class BearerAuth(BaseHTTPMiddleware):
        async def dispatch(self, request, call_next):
            if request.url.path == "/health":
                return await call_next(request)
            auth = request.headers.get("authorization", "")
            if not auth.startswith("Bearer ") or auth[7:] != api_key:
                return JSONResponse({"error": "unauthorized"}, status_code=401)
            return await call_next(request)

    starlette_app = mcp.streamable_http_app()

    if api_key:
        starlette_app.add_middleware(BearerAuth)

    starlette_app.routes.append(
        Route("/health", lambda r: PlainTextResponse("ok"))
    )

    config = uvicorn.Config(
        starlette_app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        log_level="info",
    )
    await uvicorn.Server(config).serve()


def main() -> None:
    global _ENV_FILE

    parser = argparse.ArgumentParser(description="Run workhours-allocator MCP server")
    parser.add_argument("--env-file", default=None, help="Path to .env file")
    parser.add_argument(
        "--transport",
        default=None,
        choices=["stdio", "sse", "streamable-http"],
        help="MCP transport (default: streamable-http when PORT is set, else stdio)",
    )
    args = parser.parse_args()
    _ENV_FILE = args.env_file

    transport = args.transport
    if transport is None:
        transport = "streamable-http" if os.getenv("PORT") else "stdio"

    if transport == "streamable-http":
        import anyio
        anyio.run(_run_http)
    else:
        mcp.run(transport=transport)


if __name__ == "__main__":
    main()

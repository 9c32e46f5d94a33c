from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from dotenv import load_dotenv
from loguru import logger
from typing_extensions import NotRequired, TypedDict

from agents import Agent, ModelSettings, RunContextWrapper, function_tool, run_demo_loop

from .backend.config import TimesheetConfig, configure_logging, load_from_env
from .backend.errors import RowInputError
from .backend.exporters.csv import render_timesheets_csv
from .backend.models import Employee, Timesheet, TimesheetRow, WorkDay
from .backend.service import TimesheetService
from .backend.utils import describe_total, format_hours
from .backend.weeks import parse_week_ending, week_dates

load_dotenv()


@dataclass
class TimesheetContext:
    """Per-run context: the signed-in employee and the timesheet being edited."""

    service: TimesheetService = field(default_factory=TimesheetService)
    employee: Employee | None = None
    timesheet: Timesheet | None = None

    @property
    def config(self) -> TimesheetConfig:
        return self.service.config


class DayHours(TypedDict):
    """Hours for one day of the open timesheet.

    Fields:
        day: Day name, e.g. "Mon", "Tuesday".
        hours: Decimal hours; omit or null to clear the day.
    """

    day: str
    hours: NotRequired[float | None]


def _summarize(timesheet: Timesheet, target: Decimal | None = None) -> dict[str, Any]:
    """Render a timesheet as a plain dict for the model to read back to the user."""
    target = target if target is not None else TimesheetConfig().target_hours
    total = timesheet.total_hours()
    daily = timesheet.daily_totals()
    return {
        "employee": timesheet.employee.name,
        "week_ending": timesheet.week_ending.isoformat(),
        "days": [
            f"{d.label} {day.isoformat()}" for d, day in zip(WorkDay, week_dates(timesheet.week_ending))
        ],
        "rows": [_row_summary(i, r) for i, r in enumerate(timesheet.rows)],
        "daily_totals": {d.label: format_hours(daily[d]) for d in WorkDay},
        "total": format_hours(total),
        "status": describe_total(total, target) or "complete",
    }


def _row_summary(index: int, row: TimesheetRow) -> dict[str, Any]:
    return {
        "row": index + 1,
        "project_id": row.project_id,
        "work_package": row.work_package,
        "hours": {d.label: format_hours(row.hours[d]) for d in WorkDay if d in row.hours},
        "total": format_hours(row.total_hours()),
        "notes": row.notes,
    }


def _apply_hours(row: TimesheetRow, entries: list[DayHours]) -> list[str]:
    """Set each day's hours on `row`, collecting problems instead of stopping at the first."""
    problems: list[str] = []
    for e in entries or []:
        try:
            row.set_hour(e.get("day", ""), e.get("hours"))
        except RowInputError as exc:
            problems.append(str(exc))
    return problems


def _open(ctx: RunContextWrapper[TimesheetContext]) -> Timesheet | dict[str, Any]:
    if ctx.context.employee is None:
        return {"status": "error", "problems": ["Nobody is signed in. Call sign_in first."]}
    if ctx.context.timesheet is None:
        return {"status": "error", "problems": ["No timesheet is open. Open the current week or a past week."]}
    return ctx.context.timesheet


def _row_at(timesheet: Timesheet, row: int) -> TimesheetRow | None:
    if 1 <= row <= len(timesheet.rows):
        return timesheet.rows[row - 1]
    return None


@function_tool
def list_employees(ctx: RunContextWrapper[TimesheetContext]) -> dict[str, Any]:
    """Return the configured employee roster."""
    cfg = ctx.context.config
    return {
        "status": "ok" if cfg.employees else "empty",
        "company": cfg.name,
        "employees": [
            {"number": e.number, "name": e.name, "username": e.username} for e in cfg.employees
        ],
    }


@function_tool
def sign_in(ctx: RunContextWrapper[TimesheetContext], username: str) -> dict[str, Any]:
    """Select the employee whose timesheets are being edited.

    Args:
        username: Username or full name as on the roster.
    """
    emp = ctx.context.config.find_employee(username)
    if emp is None:
        return {"status": "error", "problems": [f"Unknown employee: {username} (not in roster)"]}
    ctx.context.employee = emp
    ctx.context.timesheet = None
    return {"status": "ok", "employee": {"number": emp.number, "name": emp.name}}


@function_tool
def open_current_timesheet(ctx: RunContextWrapper[TimesheetContext]) -> dict[str, Any]:
    """Open this week's timesheet for the signed-in employee (new and unsaved if none exists)."""
    if ctx.context.employee is None:
        return {"status": "error", "problems": ["Nobody is signed in. Call sign_in first."]}
    ts = ctx.context.service.get_current_timesheet(ctx.context.employee)
    ctx.context.timesheet = ts
    return {"status": "ok", "timesheet": _summarize(ts, ctx.context.config.target_hours)}


@function_tool
def open_timesheet(ctx: RunContextWrapper[TimesheetContext], week: str) -> dict[str, Any]:
    """Open the timesheet for a given week.

    Args:
        week: "this week", "last week", "next week", YYYY-MM-DD, or DD/MM/YYYY. Any date
            inside the week is accepted; it is normalized to that week's Friday.
    """
    if ctx.context.employee is None:
        return {"status": "error", "problems": ["Nobody is signed in. Call sign_in first."]}
    week_ending = parse_week_ending(
        week,
        base_date=_base_date(),
        timezone=ctx.context.config.timezone,
    )
    if week_ending is None:
        return {"status": "error", "problems": [f"Could not understand week: {week}"]}
    ts = ctx.context.service.get_timesheet(ctx.context.employee, week_ending)
    ctx.context.timesheet = ts
    return {"status": "ok", "timesheet": _summarize(ts, ctx.context.config.target_hours)}


@function_tool
def list_timesheets(ctx: RunContextWrapper[TimesheetContext]) -> dict[str, Any]:
    """List the saved timesheets of the signed-in employee."""
    if ctx.context.employee is None:
        return {"status": "error", "problems": ["Nobody is signed in. Call sign_in first."]}
    sheets = ctx.context.service.get_timesheets(ctx.context.employee)
    return {
        "status": "ok",
        "timesheets": [
            {"week_ending": t.week_ending.isoformat(), "total": format_hours(t.total_hours())}
            for t in sheets
        ],
    }


@function_tool
def show_timesheet(ctx: RunContextWrapper[TimesheetContext]) -> dict[str, Any]:
    """Show the open timesheet with per-row and per-day totals."""
    ts = _open(ctx)
    if isinstance(ts, dict):
        return ts
    return {"status": "ok", "timesheet": _summarize(ts, ctx.context.config.target_hours)}


@function_tool
def add_row(
    ctx: RunContextWrapper[TimesheetContext],
    project_id: int | None = None,
    work_package: str | None = None,
    notes: str | None = None,
    hours: list[DayHours] | None = None,
) -> dict[str, Any]:
    """Append a row to the open timesheet, optionally filling it in.

    Args:
        project_id: Numeric project id.
        work_package: Alphanumeric work package code.
        notes: Optional free-text notes.
        hours: Optional list of {day, hours} entries.
    """
    ts = _open(ctx)
    if isinstance(ts, dict):
        return ts
    row = ctx.context.service.add_row(ts)
    if project_id is not None:
        row.project_id = project_id
    if work_package is not None:
        row.work_package = work_package
    if notes is not None:
        row.notes = notes
    problems = _apply_hours(row, hours or [])
    return {
        "status": "error" if problems else "ok",
        "problems": problems,
        "row": _row_summary(len(ts.rows) - 1, row),
    }


@function_tool
def update_row(
    ctx: RunContextWrapper[TimesheetContext],
    row: int,
    project_id: int | None = None,
    work_package: str | None = None,
    notes: str | None = None,
) -> dict[str, Any]:
    """Change the project, work package or notes of a row.

    Args:
        row: 1-based row number as shown by show_timesheet.
    """
    ts = _open(ctx)
    if isinstance(ts, dict):
        return ts
    target = _row_at(ts, row)
    if target is None:
        return {"status": "error", "problems": [f"No row {row}."]}
    if project_id is not None:
        target.project_id = project_id
    if work_package is not None:
        target.work_package = work_package
    if notes is not None:
        target.notes = notes
    return {"status": "ok", "row": _row_summary(row - 1, target)}


@function_tool
def set_hours(
    ctx: RunContextWrapper[TimesheetContext], row: int, hours: list[DayHours]
) -> dict[str, Any]:
    """Set hours on one or more days of a row.

    Args:
        row: 1-based row number.
        hours: List of {day, hours}; hours must be non-negative, null clears the day.
    """
    ts = _open(ctx)
    if isinstance(ts, dict):
        return ts
    target = _row_at(ts, row)
    if target is None:
        return {"status": "error", "problems": [f"No row {row}."]}
    problems = _apply_hours(target, hours)
    return {
        "status": "error" if problems else "ok",
        "problems": problems,
        "row": _row_summary(row - 1, target),
        "total": format_hours(ts.total_hours()),
    }


@function_tool
def remove_row(ctx: RunContextWrapper[TimesheetContext], row: int) -> dict[str, Any]:
    """Remove a row from the open timesheet.

    Args:
        row: 1-based row number.
    """
    ts = _open(ctx)
    if isinstance(ts, dict):
        return ts
    if _row_at(ts, row) is None:
        return {"status": "error", "problems": [f"No row {row}."]}
    ts.remove_row(row - 1)
    return {"status": "ok", "count": len(ts.rows)}


@function_tool
def save_timesheet(ctx: RunContextWrapper[TimesheetContext]) -> dict[str, Any]:
    """Validate the open timesheet and save it if both rules pass."""
    ts = _open(ctx)
    if isinstance(ts, dict):
        return ts
    result = ctx.context.service.validate_and_save(ts)
    if not result.ok:
        return {"status": "error", "problems": result.messages}
    return {"status": "ok", "timesheet": _summarize(ts, ctx.context.config.target_hours)}


@function_tool
def export_csv(ctx: RunContextWrapper[TimesheetContext]) -> str:
    """Export the signed-in employee's saved timesheets as CSV."""
    if ctx.context.employee is None:
        return ""
    csv_text = render_timesheets_csv(ctx.context.service.get_timesheets(ctx.context.employee))
    save_path = os.environ.get("TIMESHEET_SAVE_PATH")
    if save_path:
        folder = os.path.dirname(save_path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(save_path, "w", encoding="utf-8") as f:
            f.write(csv_text)
        logger.info("Wrote timesheet CSV to {}", save_path)
    return csv_text


def _base_date() -> date | None:
    # Anchor for relative week phrases (tests/reproducibility).
    raw = os.environ.get("TIMESHEET_BASE_DATE")
    return date.fromisoformat(raw) if raw else None


def build_agent(model_name: str) -> Agent[TimesheetContext]:
    instructions = (
        "You are a careful weekly timesheet assistant. "
        "Start by asking who is filling in the timesheet and call sign_in with their username. "
        "Use open_current_timesheet for this week, or open_timesheet when the user names another week. "
        "Each row charges hours to a numeric project id and an alphanumeric work package across Mon..Sun. "
        "Use add_row, update_row, set_hours and remove_row to edit; row numbers are 1-based. "
        "Never invent project ids, work packages or hours; ask when something is missing. "
        "A timesheet is accepted only if its hours add up to the weekly target and every row with hours "
        "has a unique project id + work package. Call save_timesheet when the user is done and read back "
        "any problems verbatim so they can be corrected. "
        "Use list_timesheets to show past weeks and export_csv when asked for a CSV. "
        "Be concise and ask one question at a time."
    )

    return Agent[TimesheetContext](
        name="Timesheet Agent",
        instructions=instructions,
        tools=[
            list_employees,
            sign_in,
            open_current_timesheet,
            open_timesheet,
            list_timesheets,
            show_timesheet,
            add_row,
            update_row,
            set_hours,
            remove_row,
            save_timesheet,
            export_csv,
        ],
        model=model_name,
        model_settings=ModelSettings(),
    )


async def main() -> None:
    configure_logging()
    model = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")

    if not os.environ.get("OPENAI_API_KEY"):
        logger.warning("OPENAI_API_KEY is not set. Set it in your shell or a .env file.")

    config = load_from_env(
        default_path=os.path.join(os.path.dirname(__file__), "company.example.json")
    )
    context = TimesheetContext(service=TimesheetService(config=config))
    agent = build_agent(model)
    print("Timesheet Agent ready. Tell me who you are to start. Ctrl+C to exit.")
    await run_demo_loop(agent, stream=True, context=context)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()

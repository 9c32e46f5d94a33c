"""CSV export for timesheets."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence

from ..models import Timesheet, WorkDay
from ..utils import format_hours

TIMESHEET_FIELDS = [
    "employee",
    "week_ending",
    "project_id",
    "work_package",
    *[d.name.lower() for d in WorkDay],
    "total",
    "notes",
]


def render_csv(rows: Iterable[dict[str, object]], fieldnames: Sequence[str]) -> str:
    """Render dict rows to a CSV string with the given headers; unknown keys are ignored."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=list(fieldnames), extrasaction="ignore")
    writer.writeheader()
    writer.writerows(rows)
    return buf.getvalue()


def timesheet_to_rows(timesheet: Timesheet) -> list[dict[str, object]]:
    """Flatten a timesheet into one dict per row. Absent days are left blank."""
    out: list[dict[str, object]] = []
    for row in timesheet.rows:
        rec: dict[str, object] = {
            "employee": timesheet.employee.name or timesheet.employee.number,
            "week_ending": timesheet.week_ending.isoformat(),
            "project_id": row.project_id,
            "work_package": row.work_package,
            "total": format_hours(row.total_hours()),
            "notes": row.notes,
        }
        for d in WorkDay:
            rec[d.name.lower()] = format_hours(row.hours.get(d))
        out.append(rec)
    return out


def render_timesheets_csv(timesheets: Iterable[Timesheet]) -> str:
    rows: list[dict[str, object]] = []
    for t in timesheets:
        rows.extend(timesheet_to_rows(t))
    return render_csv(rows, TIMESHEET_FIELDS)

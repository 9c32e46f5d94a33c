from datetime import date

from timekeeping.weekly_timesheet.backend.models import Employee, Timesheet, TimesheetRow, WorkDay
from timekeeping.weekly_timesheet.cli import _apply_hours, _summarize


def test_apply_hours_collects_problems_and_keeps_going():
    row = TimesheetRow(project_id=1, work_package="A")
    problems = _apply_hours(
        row,
        [
            {"day": "Mon", "hours": 8},
            {"day": "Funday", "hours": 1},
            {"day": "Tue", "hours": -2},
            {"day": "Wed", "hours": 4.5},
        ],
    )
    assert len(problems) == 2
    assert "Funday" in problems[0]
    assert "negative" in problems[1]
    assert row.total_hours() == 12.5


def test_summarize_reports_status():
    ts = Timesheet(employee=Employee(1, "John"), week_ending=date(2014, 10, 9))
    row = ts.add_row()
    row.set_hour(WorkDay.SAT, 8)
    out = _summarize(ts)
    assert out["week_ending"] == "2014-10-10"
    assert out["days"][5] == "Sat 2014-10-11"
    assert out["rows"][0]["hours"] == {"Sat": "8"}
    assert out["status"] == "32h short of 40h"

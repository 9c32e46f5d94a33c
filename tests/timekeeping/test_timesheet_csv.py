from datetime import date

from timekeeping.weekly_timesheet.backend.exporters.csv import (
    TIMESHEET_FIELDS,
    render_csv,
    render_timesheets_csv,
    timesheet_to_rows,
)
from timekeeping.weekly_timesheet.backend.models import Employee, Timesheet, row_from_dict


def _sheet():
    return Timesheet(
        employee=Employee(1, "Doe, John"),
        week_ending=date(2014, 10, 10),
        rows=[
            row_from_dict({"project_id": 132, "work_package": "AB112", "hours": {"Wed": 8, "Fri": 4.5}}),
            row_from_dict({"project_id": 7, "work_package": "Q1", "notes": 'said "hi"'}),
        ],
    )


def test_timesheet_to_rows_flattens_hours():
    rows = timesheet_to_rows(_sheet())
    assert len(rows) == 2
    assert rows[0]["wed"] == "8"
    assert rows[0]["fri"] == "4.5"
    assert rows[0]["mon"] == ""
    assert rows[0]["total"] == "12.5"
    assert rows[0]["week_ending"] == "2014-10-10"


def test_render_timesheets_csv_headers_and_quoting():
    out = render_timesheets_csv([_sheet()])
    assert out.splitlines()[0] == ",".join(TIMESHEET_FIELDS)
    assert '"Doe, John",2014-10-10,132,AB112,,,8,,4.5,,,12.5,' in out
    assert '"said ""hi"""' in out


def test_render_csv_unknown_keys_ignored():
    out = render_csv([{"employee": "Alice", "extra": 123}], ["employee"])
    assert ",123" not in out
    assert "Alice" in out

from datetime import date
from decimal import Decimal

from timekeeping.weekly_timesheet.backend.errors import (
    DuplicateOrIncompleteRowError,
    HourTotalMismatchError,
)
from timekeeping.weekly_timesheet.backend.models import Employee, Timesheet, row_from_dict
from timekeeping.weekly_timesheet.backend.validation import validate_timesheet

EMP = Employee(number=1, name="John Doe")
WEEK = date(2014, 10, 10)


def _sheet(*rows):
    return Timesheet(employee=EMP, week_ending=WEEK, rows=[row_from_dict(r) for r in rows])


def test_forty_hours_with_distinct_rows_passes():
    ts = _sheet(
        {"project_id": 132, "work_package": "AA123", "hours": {"Mon": 8, "Tue": 8, "Wed": 8}},
        {"project_id": 132, "work_package": "AB112", "hours": {"Thu": 8, "Fri": 8}},
    )
    report = validate_timesheet(ts)
    assert report.ok
    assert report.messages == []
    assert report.approves(ts)


def test_total_mismatch_reports_actual_sum():
    ts = _sheet(
        {"project_id": 132, "work_package": "AA123", "hours": {"Thu": 4}},
        {"project_id": 132, "work_package": "AB112", "hours": {"Wed": 8, "Fri": 4}},
    )
    report = validate_timesheet(ts)
    assert not report.ok
    (err,) = report.errors
    assert isinstance(err, HourTotalMismatchError)
    assert err.actual == Decimal("16")
    assert err.target == Decimal("40")
    assert "got 16" in str(err)
    assert "24h short of 40h" in str(err)


def test_over_target_fails_too():
    ts = _sheet({"project_id": 1, "work_package": "X1", "hours": {d: 9 for d in range(5)}})
    (err,) = validate_timesheet(ts).errors
    assert isinstance(err, HourTotalMismatchError)
    assert err.actual == Decimal("45")
    assert "+5h over 40h" in str(err)


def test_target_is_configurable():
    ts = _sheet({"project_id": 1, "work_package": "X1", "hours": {"Mon": 7.5, "Tue": 30}})
    assert validate_timesheet(ts, Decimal("37.5")).ok
    assert not validate_timesheet(ts).ok


def test_duplicate_rows_are_reported_with_indices():
    ts = _sheet(
        {"project_id": 132, "work_package": "AA123", "hours": {"Mon": 20}},
        {"project_id": 7, "work_package": "ZZ1", "hours": {}},
        {"project_id": 132, "work_package": "AA123", "hours": {"Tue": 20}},
    )
    report = validate_timesheet(ts)
    (err,) = report.errors
    assert isinstance(err, DuplicateOrIncompleteRowError)
    assert err.duplicate_pairs == ((0, 2),)
    assert err.row_indices == (0, 2)
    assert "1 & 3" in str(err)


def test_blank_work_package_is_never_a_duplicate():
    ts = _sheet(
        {"project_id": 132, "work_package": "AA123", "hours": {"Mon": 40}},
        {"project_id": 132, "work_package": "", "hours": {}},
        {"project_id": 132, "work_package": "", "hours": {}},
    )
    assert validate_timesheet(ts).ok


def test_row_with_hours_needs_work_package():
    ts = _sheet(
        {"project_id": 132, "work_package": "AA123", "hours": {"Mon": 32}},
        {"project_id": 132, "work_package": "  ", "hours": {"Tue": 8}},
    )
    (err,) = validate_timesheet(ts).errors
    assert isinstance(err, DuplicateOrIncompleteRowError)
    assert err.incomplete_rows == (1,)
    assert err.row_indices == (1,)


def test_both_rules_reported_together():
    ts = _sheet(
        {"project_id": 5, "work_package": "W", "hours": {"Mon": 1}},
        {"project_id": 5, "work_package": "W", "hours": {"Tue": 1}},
    )
    kinds = {type(e) for e in validate_timesheet(ts).errors}
    assert kinds == {HourTotalMismatchError, DuplicateOrIncompleteRowError}


def test_report_goes_stale_after_edit():
    ts = _sheet({"project_id": 1, "work_package": "X1", "hours": {"Mon": 40}})
    report = validate_timesheet(ts)
    assert report.approves(ts)
    ts.rows[0].notes = "changed"
    assert not report.approves(ts)
    # Re-running validation gives a fresh report for the new content.
    assert validate_timesheet(ts).approves(ts)


def test_negative_row_cannot_balance_an_overfull_one():
    import pytest

    from timekeeping.weekly_timesheet.backend.errors import InvalidHourError
    from timekeeping.weekly_timesheet.backend.models import TimesheetRow, WorkDay

    # -5h + 45h would total 40, but the negative row is refused on construction.
    with pytest.raises(InvalidHourError):
        Timesheet(
            employee=EMP,
            week_ending=WEEK,
            rows=[
                TimesheetRow(1, "A", {WorkDay.MON: Decimal(-5)}),
                TimesheetRow(1, "B", {WorkDay.TUE: Decimal(45)}),
            ],
        )

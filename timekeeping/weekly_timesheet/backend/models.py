"""Timesheet data model.

A `Timesheet` belongs to one employee and one week (keyed by its Friday) and
owns an ordered list of `TimesheetRow`s. Each row charges hours to a
project / work package across the seven days of the week.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as _date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from .errors import InvalidDayError, InvalidHourError, InvalidProjectError
from .weeks import week_ending_for


class WorkDay(Enum):
    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def coerce(cls, value: Any) -> WorkDay:
        """Accept a WorkDay, an index 0..6, or a short/long day name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value <= 6:
                return cls(value)
            raise InvalidDayError(value)
        if isinstance(value, str):
            s = value.strip().lower()
            key = _DAY_NAMES.get(s, s.upper())
            if key in cls.__members__:
                return cls[key]
        raise InvalidDayError(value)


_DAY_NAMES = {
    "monday": "MON",
    "tuesday": "TUE",
    "wednesday": "WED",
    "thursday": "THU",
    "friday": "FRI",
    "saturday": "SAT",
    "sunday": "SUN",
}


def to_hours(value: Any) -> Decimal | None:
    """Convert user input to a non-negative Decimal; None stays None."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidHourError(value)
    if isinstance(value, str) and not value.strip():
        return None
    try:
        hours = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidHourError(value) from None
    if not hours.is_finite():
        raise InvalidHourError(value, "hours must be a finite number")
    if hours < 0:
        raise InvalidHourError(value, "hours cannot be negative")
    return hours


@dataclass(frozen=True)
class Employee:
    """Opaque employee identity; equal by employee number only."""

    number: int
    name: str = field(default="", compare=False)
    username: str | None = field(default=None, compare=False)


@dataclass
class TimesheetRow:
    project_id: int = 0
    work_package: str = ""
    hours: dict[WorkDay, Decimal] = field(default_factory=dict)
    notes: str = ""

    def __post_init__(self) -> None:
        # Route constructor input through set_hour so keys and values are checked.
        incoming = dict(self.hours or {})
        self.hours = {}
        for day, value in incoming.items():
            self.set_hour(day, value)

    def get_hour(self, day: WorkDay | int | str) -> Decimal | None:
        return self.hours.get(WorkDay.coerce(day))

    def set_hour(self, day: WorkDay | int | str, value: Any) -> None:
        """Set the hours for one day; None (or blank text) clears it.

        Raises InvalidDayError / InvalidHourError; the row is left unchanged
        on error.
        """
        wd = WorkDay.coerce(day)
        hours = to_hours(value)
        if hours is None:
            self.hours.pop(wd, None)
        else:
            self.hours[wd] = hours

    def total_hours(self) -> Decimal:
        return sum((self.hours.get(d) or Decimal(0) for d in WorkDay), Decimal(0))

    def has_work_package(self) -> bool:
        return bool((self.work_package or "").strip())

    def identity(self) -> str:
        return f"{self.project_id}{self.work_package}"

    def is_duplicate_of(self, other: TimesheetRow) -> bool:
        """True iff both rows name a work package and share project id + work package.

        A row with a blank work package is never a duplicate of anything.
        """
        if not (self.has_work_package() and other.has_work_package()):
            return False
        return self.identity() == other.identity()

    def trimmed(self) -> TimesheetRow:
        self.notes = (self.notes or "").strip()
        self.work_package = (self.work_package or "").strip()
        return self

    def snapshot(self) -> tuple:
        hours = tuple((d.value, self.hours[d]) for d in WorkDay if d in self.hours)
        return (self.project_id, self.work_package, self.notes, hours)

    def __str__(self) -> str:
        days = ", ".join(f"{d.name}: {self.hours.get(d)}" for d in WorkDay)
        return f"{self.identity()}: {days}"


@dataclass
class Timesheet:
    employee: Employee
    week_ending: _date
    rows: list[TimesheetRow] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.week_ending = week_ending_for(self.week_ending)

    @property
    def key(self) -> tuple[Employee, _date]:
        return (self.employee, self.week_ending)

    def add_row(self) -> TimesheetRow:
        row = TimesheetRow()
        self.rows.append(row)
        return row

    def remove_row(self, index: int) -> TimesheetRow:
        return self.rows.pop(index)

    def total_hours(self) -> Decimal:
        return sum((r.total_hours() for r in self.rows), Decimal(0))

    def daily_totals(self) -> dict[WorkDay, Decimal]:
        totals = {d: Decimal(0) for d in WorkDay}
        for row in self.rows:
            for d, h in row.hours.items():
                totals[d] += h
        return totals

    def trimmed_details(self) -> None:
        for row in self.rows:
            row.trimmed()

    def is_same_week_end(self, other: _date | None) -> bool:
        return other is not None and week_ending_for(other) == self.week_ending

    def fingerprint(self) -> tuple:
        """Hashable snapshot of the full content; changes whenever anything is edited."""
        return (
            self.employee.number,
            self.week_ending.isoformat(),
            tuple(r.snapshot() for r in self.rows),
        )


def row_from_dict(data: dict[str, Any]) -> TimesheetRow:
    """Build a row from a plain dict (keys: project_id, work_package, hours, notes).

    `hours` maps day names/indices to quantities; invalid days or hours raise.
    """
    raw_project = data.get("project_id", 0) or 0
    try:
        project_id = int(raw_project)
    except (TypeError, ValueError):
        raise InvalidProjectError(raw_project) from None
    return TimesheetRow(
        project_id=project_id,
        work_package=str(data.get("work_package") or ""),
        hours=dict(data.get("hours") or {}),
        notes=str(data.get("notes") or ""),
    )


"""In-memory timesheet store.

The store is the sole long-lived owner of persisted timesheets and is shared
by every session in the process. Queries hand out references, not copies: an
edit made through a returned timesheet is visible to later queries. Saves are
upserts keyed by (employee, week ending); concurrent saves for the same key
are last-write-wins.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import date as _date

from loguru import logger

from .errors import ValidationFailedError
from .models import Employee, Timesheet
from .validation import ValidationReport
from .weeks import current_week_ending, week_ending_for


class TimesheetStore:
    def __init__(self, timesheets: Iterable[Timesheet] | None = None) -> None:
        self._lock = threading.RLock()
        self._timesheets: list[Timesheet] = list(timesheets or [])

    def all_timesheets(self) -> list[Timesheet]:
        """Every persisted timesheet in insertion order."""
        with self._lock:
            return list(self._timesheets)

    def timesheets_for(self, employee: Employee) -> list[Timesheet]:
        with self._lock:
            return [t for t in self._timesheets if t.employee == employee]

    def timesheet_for(self, employee: Employee, week_ending: _date) -> Timesheet:
        """Return the persisted timesheet for the key, or a new unsaved empty one.

        If the collection somehow holds more than one match, the last inserted
        wins.
        """
        week = week_ending_for(week_ending)
        found: Timesheet | None = None
        with self._lock:
            for t in self._timesheets:
                if t.employee == employee and t.week_ending == week:
                    found = t
        if found is None:
            logger.debug("No timesheet for employee {} week {}; creating", employee.number, week)
            return Timesheet(employee=employee, week_ending=week)
        return found

    def current_timesheet_for(
        self,
        employee: Employee,
        *,
        today: _date | None = None,
        timezone: str | None = None,
    ) -> Timesheet:
        return self.timesheet_for(employee, current_week_ending(today, timezone=timezone))

    def save(self, timesheet: Timesheet, report: ValidationReport | None) -> None:
        """Upsert `timesheet`; `report` must be a passing report for its current content.

        The store does not run the validation rules itself.
        """
        if report is None or not report.approves(timesheet):
            logger.error(
                "Refusing to save unvalidated timesheet for employee {} week {}",
                timesheet.employee.number,
                timesheet.week_ending,
            )
            raise ValidationFailedError(
                "Timesheet must pass validation (on its current content) before it is saved."
            )
        with self._lock:
            idx = next(
                (
                    i
                    for i in range(len(self._timesheets) - 1, -1, -1)
                    if self._timesheets[i].key == timesheet.key
                ),
                -1,
            )
            if idx >= 0:
                self._timesheets[idx] = timesheet
            else:
                self._timesheets.append(timesheet)
        logger.debug(
            "Stored timesheet for employee {} week {} ({})",
            timesheet.employee.number,
            timesheet.week_ending,
            "updated" if idx >= 0 else "new",
        )

"""Timesheet operations exposed to the presentation layer.

The flow for one editing session is:
    resolve week → get timesheet → edit rows → validate → save.

The employee is always passed in explicitly; the service keeps no notion of
a "current" user.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as _date

from loguru import logger

from .config import TimesheetConfig
from .errors import ValidationError
from .models import Employee, Timesheet, TimesheetRow
from .store import TimesheetStore
from .validation import validate_timesheet


@dataclass
class SaveResult:
    """Outcome of `validate_and_save`; `errors` is empty on success."""

    ok: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [str(e) for e in self.errors]


class TimesheetService:
    def __init__(self, store: TimesheetStore | None = None, config: TimesheetConfig | None = None) -> None:
        self.store = store if store is not None else TimesheetStore()
        self.config = config or TimesheetConfig()

    def get_current_timesheet(self, employee: Employee, today: _date | None = None) -> Timesheet:
        return self.store.current_timesheet_for(employee, today=today, timezone=self.config.timezone)

    def get_timesheet(self, employee: Employee, week_ending: _date) -> Timesheet:
        return self.store.timesheet_for(employee, week_ending)

    def get_timesheets(self, employee: Employee) -> list[Timesheet]:
        return self.store.timesheets_for(employee)

    def add_row(self, timesheet: Timesheet) -> TimesheetRow:
        return timesheet.add_row()

    def validate_and_save(self, timesheet: Timesheet) -> SaveResult:
        """Trim row details, validate, and save only if every rule passes.

        Validation failures are returned, not raised, so the caller can show
        them and resubmit.
        """
        timesheet.trimmed_details()
        report = validate_timesheet(timesheet, self.config.target_hours)
        if not report.ok:
            for msg in report.messages:
                logger.warning(
                    "Timesheet for employee {} week {} rejected: {}",
                    timesheet.employee.number,
                    timesheet.week_ending,
                    msg,
                )
            return SaveResult(ok=False, errors=list(report.errors))
        self.store.save(timesheet, report)
        logger.info(
            "Saved timesheet for employee {} week {}",
            timesheet.employee.number,
            timesheet.week_ending,
        )
        return SaveResult(ok=True)

"""Acceptance rules for saving a timesheet.

Two independent rules, both evaluated on every call:

1. Hour total: the sum of all row totals must equal the weekly target exactly.
2. Row uniqueness: no two rows may share project id + work package, and a row
   that charges hours must name a work package.

Validation has no side effects. The returned report records the fingerprint
of the content it judged, so the store can refuse a save when the timesheet
was edited after validation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from .errors import DuplicateOrIncompleteRowError, HourTotalMismatchError, ValidationError
from .models import Timesheet
from .utils import DEFAULT_TARGET_HOURS


@dataclass(frozen=True)
class ValidationReport:
    fingerprint: tuple
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> list[str]:
        return [str(e) for e in self.errors]

    def approves(self, timesheet: Timesheet) -> bool:
        return self.ok and self.fingerprint == timesheet.fingerprint()


def check_hour_total(
    timesheet: Timesheet, target_hours: Decimal = DEFAULT_TARGET_HOURS
) -> HourTotalMismatchError | None:
    total = timesheet.total_hours()
    if total != target_hours:
        return HourTotalMismatchError(actual=total, target=target_hours)
    return None


def check_rows(timesheet: Timesheet) -> DuplicateOrIncompleteRowError | None:
    rows = timesheet.rows
    duplicates = [
        (i, j)
        for i in range(len(rows))
        for j in range(i + 1, len(rows))
        if rows[i].is_duplicate_of(rows[j])
    ]
    incomplete = [
        i for i, r in enumerate(rows) if not r.has_work_package() and r.total_hours() != 0
    ]
    if duplicates or incomplete:
        return DuplicateOrIncompleteRowError(duplicate_pairs=duplicates, incomplete_rows=incomplete)
    return None


def validate_timesheet(
    timesheet: Timesheet, target_hours: Decimal | None = None
) -> ValidationReport:
    """Run both rules and return a report listing every violation found."""
    target = DEFAULT_TARGET_HOURS if target_hours is None else Decimal(target_hours)
    errors: list[ValidationError] = []
    total_problem = check_hour_total(timesheet, target)
    if total_problem:
        errors.append(total_problem)
    row_problem = check_rows(timesheet)
    if row_problem:
        errors.append(row_problem)
    return ValidationReport(fingerprint=timesheet.fingerprint(), errors=tuple(errors))

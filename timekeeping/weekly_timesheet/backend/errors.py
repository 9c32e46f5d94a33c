"""Error taxonomy for the weekly timesheet core.

Row input errors are raised from the row setters. Validation errors are
returned as values by the validator so the caller can show every problem at
once and resubmit. `ValidationFailedError` is a programmer error raised by the
store when a save was attempted without a passing validation report.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from .utils import describe_total, format_hours


class TimesheetError(Exception):
    """Base class for every error raised by the timesheet core."""


class RowInputError(TimesheetError, ValueError):
    """Malformed input for a single timesheet row."""


class InvalidDayError(RowInputError):
    def __init__(self, day: Any) -> None:
        self.day = day
        super().__init__(f"Invalid day: {day!r} (expected one of Mon..Sun)")


class InvalidHourError(RowInputError):
    def __init__(self, value: Any, reason: str = "hours must be a non-negative number") -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid hours {value!r}: {reason}")


class InvalidProjectError(RowInputError):
    def __init__(self, project_id: Any) -> None:
        self.project_id = project_id
        super().__init__(f"Invalid project id: {project_id!r} (expected a number)")


class ValidationError(TimesheetError):
    """A recoverable validation failure; the caller corrects and resubmits."""

    rule: str = ""


class HourTotalMismatchError(ValidationError):
    rule = "hour-total"

    def __init__(self, actual: Decimal, target: Decimal) -> None:
        self.actual = actual
        self.target = target
        detail = describe_total(actual, target)
        msg = f"Work hours must add up to {format_hours(target)} (got {format_hours(actual)}"
        msg += f", {detail})" if detail else ")"
        super().__init__(msg)


class DuplicateOrIncompleteRowError(ValidationError):
    rule = "row-uniqueness"

    def __init__(
        self,
        duplicate_pairs: Iterable[tuple[int, int]] = (),
        incomplete_rows: Iterable[int] = (),
    ) -> None:
        self.duplicate_pairs = tuple(duplicate_pairs)
        self.incomplete_rows = tuple(incomplete_rows)
        indices: set[int] = set(self.incomplete_rows)
        for a, b in self.duplicate_pairs:
            indices.update((a, b))
        self.row_indices = tuple(sorted(indices))

        parts: list[str] = []
        if self.duplicate_pairs:
            pairs = ", ".join(f"{a + 1} & {b + 1}" for a, b in self.duplicate_pairs)
            parts.append(f"duplicate rows {pairs}")
        if self.incomplete_rows:
            rows = ", ".join(str(i + 1) for i in self.incomplete_rows)
            parts.append(f"rows missing a work package: {rows}")
        super().__init__(
            "A combination of project id & work package must be filled and unique for each row ("
            + "; ".join(parts)
            + ")"
        )


class ValidationFailedError(TimesheetError):
    """Raised by the store when asked to save a timesheet that was not approved."""

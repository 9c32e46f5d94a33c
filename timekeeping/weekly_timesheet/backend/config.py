from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from loguru import logger

from .models import Employee
from .utils import get_target_hours


@dataclass
class TimesheetConfig:
    name: str = ""
    employees: list[Employee] = field(default_factory=list)
    target_hours: Decimal = field(default_factory=get_target_hours)
    timezone: str | None = None

    def find_employee(self, value: str) -> Employee | None:
        """Look up an employee by username or display name (case-insensitive)."""
        v = (value or "").strip().lower()
        if not v:
            return None
        for e in self.employees:
            if (e.username or "").strip().lower() == v or e.name.strip().lower() == v:
                return e
        return None

    def employee_by_number(self, number: int) -> Employee | None:
        return next((e for e in self.employees if e.number == number), None)


def load_company_config(path: str) -> TimesheetConfig:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    company = data.get("company") or {}
    employees = [
        Employee(
            number=int(x["number"]),
            name=str(x.get("name", "")),
            username=(str(x["username"]) if x.get("username") is not None else None),
        )
        for x in (data.get("employees") or [])
        if isinstance(x, dict)
    ]
    target = get_target_hours()
    if company.get("target_hours") is not None:
        raw = company["target_hours"]
        try:
            target = Decimal(str(raw))
        except InvalidOperation:
            raise ValueError(f"Invalid target_hours in {path}: {raw!r}") from None
        if not target.is_finite() or target <= 0:
            raise ValueError(f"target_hours in {path} must be a positive number, got {raw!r}")
    return TimesheetConfig(
        name=str(company.get("name") or ""),
        employees=employees,
        target_hours=target,
        timezone=(str(company["timezone"]) if company.get("timezone") else None),
    )


def load_from_env(default_path: str | None = None) -> TimesheetConfig | None:
    """Load config from TIMESHEET_CONFIG_PATH or a default path.

    Returns None when no file is found. Env vars TIMESHEET_TARGET_HOURS and
    TIMESHEET_TZ override the values from the file.
    """
    path = os.environ.get("TIMESHEET_CONFIG_PATH") or default_path
    if not path or not os.path.isfile(path):
        logger.debug("No timesheet config file found (path={!r})", path)
        return None
    cfg = load_company_config(path)
    if os.environ.get("TIMESHEET_TARGET_HOURS"):
        cfg.target_hours = get_target_hours()
    if os.environ.get("TIMESHEET_TZ"):
        cfg.timezone = os.environ["TIMESHEET_TZ"]
    logger.debug("Loaded config {!r} with {} employees", path, len(cfg.employees))
    return cfg


def configure_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Reset loguru sinks: stderr always, plus a file if configured."""
    level = level or os.environ.get("TIMESHEET_LOG_LEVEL") or "INFO"
    log_file = log_file or os.environ.get("TIMESHEET_LOG_FILE")
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(log_file, level=level)

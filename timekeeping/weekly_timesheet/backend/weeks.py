"""Week-ending resolution.

A reporting week runs Monday to Sunday and is keyed by its Friday. Every date
in the week, weekend included, resolves to that same Friday: Saturday and
Sunday move back to the Friday just passed rather than on to the next one.
"""

from __future__ import annotations

import os
import re
from datetime import date as _date, datetime, timedelta, tzinfo as _tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

FRIDAY = 4


def week_ending_for(reference: _date | datetime) -> _date:
    """Return the Friday of the Mon-Sun week containing `reference`.

    Time-of-day is dropped. The offset is `FRIDAY - weekday`, which is
    negative for Saturday (-1) and Sunday (-2).
    """
    if isinstance(reference, datetime):
        reference = reference.date()
    return reference + timedelta(days=FRIDAY - reference.weekday())


def current_week_ending(today: _date | None = None, *, timezone: str | None = None) -> _date:
    """Return the week-ending Friday for today (or for `today` when given)."""
    if today is None:
        today = datetime.now(_resolve_tz(timezone)).date()
    return week_ending_for(today)


def week_dates(week_ending: _date) -> list[_date]:
    """Return the seven dates (Mon..Sun) of the week keyed by `week_ending`."""
    monday = week_ending_for(week_ending) - timedelta(days=FRIDAY)
    return [monday + timedelta(days=i) for i in range(7)]


def parse_week_ending(
    phrase: str,
    *,
    base_date: _date | None = None,
    timezone: str | None = None,
) -> _date | None:
    """Resolve a week phrase to its week-ending Friday.

    Supported:
    - Relative: "this week", "current week", "last week", "previous week", "next week".
    - ISO: YYYY-MM-DD.
    - Numeric: DD/MM/YYYY (day first).

    Any date inside a week resolves to that week's Friday. Returns None if the
    phrase is not understood.
    """
    s = (phrase or "").strip().lower()
    if not s:
        return None

    today = base_date or datetime.now(_resolve_tz(timezone)).date()

    if s in {"this week", "current week", "current", "now", "today"}:
        return week_ending_for(today)
    if s in {"last week", "previous week"}:
        return week_ending_for(today - timedelta(days=7))
    if s == "next week":
        return week_ending_for(today + timedelta(days=7))

    iso = re.fullmatch(r"(\d{4})-(\d{2})-(\d{2})", s)
    if iso:
        return _safe_week_ending(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))

    dmy = re.fullmatch(r"(\d{1,2})/(\d{1,2})/(\d{4})", s)
    if dmy:
        return _safe_week_ending(int(dmy.group(3)), int(dmy.group(2)), int(dmy.group(1)))

    return None


def _safe_week_ending(year: int, month: int, day: int) -> _date | None:
    try:
        return week_ending_for(_date(year, month, day))
    except ValueError:
        return None


def _resolve_tz(timezone: str | None) -> _tzinfo:
    # Prefer an explicit IANA name, then TIMESHEET_TZ, then the local zone.
    name = timezone or os.environ.get("TIMESHEET_TZ")
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone {!r}; using local time", name)
    local = datetime.now().astimezone().tzinfo
    return local if local is not None else ZoneInfo("UTC")

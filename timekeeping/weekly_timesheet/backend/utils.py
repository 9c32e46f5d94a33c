from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation

DEFAULT_TARGET_HOURS = Decimal("40")


def get_target_hours() -> Decimal:
    """Return the configured weekly target hours (default 40)."""
    raw = os.environ.get("TIMESHEET_TARGET_HOURS", "") or "40"
    try:
        val = Decimal(raw.strip())
    except InvalidOperation:
        return DEFAULT_TARGET_HOURS
    return val if val.is_finite() and val > 0 else DEFAULT_TARGET_HOURS


def describe_total(total: Decimal, target: Decimal) -> str | None:
    """Return a short note for a weekly total that misses the target.

    - If total == target: returns None.
    - If total < target: "Xh short of {target}h".
    - If total > target: "+Xh over {target}h".
    """
    delta = total - target
    if delta == 0:
        return None
    if delta < 0:
        return f"{format_hours(-delta)}h short of {format_hours(target)}h"
    return f"+{format_hours(delta)}h over {format_hours(target)}h"


def format_hours(x: Decimal | None) -> str:
    """Format an hour quantity without trailing zeros ("7.50" -> "7.5", "8.00" -> "8")."""
    if x is None:
        return ""
    s = f"{Decimal(x):.2f}"
    if s.endswith(".00"):
        return s[:-3]
    if s.endswith("0"):
        return s[:-1]
    return s

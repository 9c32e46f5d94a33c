import pytest


@pytest.fixture(autouse=True)
def _clean_timesheet_env(monkeypatch):
    """Keep a developer's TIMESHEET_* settings from leaking into tests."""
    for name in ("TIMESHEET_TARGET_HOURS", "TIMESHEET_TZ", "TIMESHEET_CONFIG_PATH", "TIMESHEET_BASE_DATE"):
        monkeypatch.delenv(name, raising=False)

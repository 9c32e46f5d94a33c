from datetime import date, datetime

import pytest

from timekeeping.weekly_timesheet.backend.weeks import (
    current_week_ending,
    parse_week_ending,
    week_dates,
    week_ending_for,
)

# Mon 2014-10-06 .. Sun 2014-10-12; Friday is 2014-10-10.
WEEK = [date(2014, 10, d) for d in range(6, 13)]
FRIDAY = date(2014, 10, 10)


@pytest.mark.parametrize("day", WEEK, ids=lambda d: d.strftime("%a"))
def test_every_day_of_week_resolves_to_same_friday(day):
    assert week_ending_for(day) == FRIDAY


def test_weekend_moves_back_to_friday_just_passed():
    assert week_ending_for(date(2014, 10, 11)) == FRIDAY  # Saturday
    assert week_ending_for(date(2014, 10, 12)) == FRIDAY  # Sunday
    assert week_ending_for(date(2014, 10, 13)) == date(2014, 10, 17)  # next Monday


def test_datetime_input_drops_time():
    assert week_ending_for(datetime(2014, 10, 8, 23, 59)) == FRIDAY


def test_current_week_ending_with_explicit_today():
    assert current_week_ending(date(2014, 10, 7)) == FRIDAY
    assert current_week_ending().weekday() == 4


def test_week_dates():
    assert week_dates(FRIDAY) == WEEK
    assert week_dates(date(2014, 10, 12)) == WEEK


def test_parse_week_ending_phrases():
    base = date(2014, 10, 8)
    assert parse_week_ending("this week", base_date=base) == FRIDAY
    assert parse_week_ending("last week", base_date=base) == date(2014, 10, 3)
    assert parse_week_ending("next week", base_date=base) == date(2014, 10, 17)
    assert parse_week_ending("2014-10-11") == FRIDAY
    assert parse_week_ending("10/10/2014") == FRIDAY
    assert parse_week_ending("31/02/2014") is None
    assert parse_week_ending("someday") is None
    assert parse_week_ending("") is None

from datetime import date, datetime

import pytest

from utils.date_helpers import (
    add_months, add_years, friendly_month, month_key, parse_date, week_start,
)


@pytest.mark.parametrize(
    "start, n, expected",
    [
        (date(2024, 1, 31), 1, date(2024, 2, 29)),
        (date(2023, 1, 31), 1, date(2023, 2, 28)),
        (date(2024, 3, 31), 1, date(2024, 4, 30)),
        (date(2024, 12, 15), 1, date(2025, 1, 15)),
        (date(2024, 1, 31), 13, date(2025, 2, 28)),
    ],
)
def test_add_months_clamps(start, n, expected):
    assert add_months(start, n) == expected


def test_add_years_leap_day():
    assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)
    assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)


def test_month_key_of_date_and_datetime():
    assert month_key(date(2024, 3, 1)) == "2024-03"
    assert month_key(datetime(2024, 12, 31, 23, 59)) == "2024-12"


def test_week_start_is_sunday():
    assert week_start(date(2024, 3, 10)) == date(2024, 3, 10)
    assert week_start(date(2024, 3, 11)) == date(2024, 3, 10)
    assert week_start(date(2024, 3, 16)) == date(2024, 3, 10)


def test_parse_date():
    assert parse_date("2024-03-10") == date(2024, 3, 10)
    assert parse_date("2024/03/10") == date(2024, 3, 10)
    assert parse_date("") is None
    assert parse_date("2024-02-30") is None


def test_friendly_month():
    assert friendly_month("2024-02") == "February 2024"
    assert friendly_month("nope") == "nope"

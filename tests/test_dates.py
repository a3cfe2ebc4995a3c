"""
tests/test_dates.py
===================

Unit tests for visatrack.dates
"""

from datetime import date, datetime

import pytest

from visatrack.dates import as_of, days_until, parse_date


@pytest.mark.parametrize(
    "value, expected",
    [
        (date(2025, 3, 1), date(2025, 3, 1)),
        (datetime(2025, 3, 1, 17, 45), date(2025, 3, 1)),
        ("2025-03-01", date(2025, 3, 1)),
        ("2025-03-01T23:59:59Z", date(2025, 3, 1)),
        ("  2025-03-01  ", date(2025, 3, 1)),
        ("2025-03-01 08:15:00", date(2025, 3, 1)),
    ],
)
def test_parse_date_accepts_native_and_iso(value, expected):
    assert parse_date(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, "", "   ", "not-a-date", "2025-02-30", "01/03/2025", 20250301, "2025-06-01garbage", "2025-06-01 ??"],
)
def test_parse_date_degrades_to_none(value):
    """Malformed input never raises."""
    assert parse_date(value) is None


def test_as_of_truncates_datetime():
    assert as_of(datetime(2025, 6, 1, 8, 30)) == date(2025, 6, 1)
    assert as_of(date(2025, 6, 1)) == date(2025, 6, 1)


def test_days_until_uses_calendar_days():
    """Time of day does not shift the result."""
    late = datetime(2025, 6, 1, 23, 59)
    early = datetime(2025, 6, 1, 0, 1)
    assert days_until("2025-06-01", late) == 0
    assert days_until("2025-06-01", early) == 0
    assert days_until(date(2025, 6, 2), late) == 1
    assert days_until(date(2025, 5, 31), early) == -1


def test_days_until_missing_expiry():
    assert days_until(None, date(2025, 6, 1)) is None
    assert days_until("garbage", date(2025, 6, 1)) is None

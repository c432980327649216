from datetime import date

import pytest

from oncall.dates import (
    days_apart,
    format_month,
    is_friday,
    is_thursday,
    is_weekend,
    iso_week_key,
    month_bounds,
    month_days,
    parse_month,
)


def test_parse_month():
    assert parse_month("2024-03") == (2024, 3)
    assert parse_month(" 2026-12 ") == (2026, 12)
    assert format_month(2024, 3) == "2024-03"


@pytest.mark.parametrize("bad", ["2024", "2024-13", "march", "2024-00", ""])
def test_parse_month_rejects_malformed(bad):
    with pytest.raises(ValueError):
        parse_month(bad)


def test_month_days_lengths():
    """28, 29 and 31 day months enumerate every day in order."""
    assert len(month_days(2026, 2)) == 28
    assert len(month_days(2024, 2)) == 29
    days = month_days(2024, 3)
    assert len(days) == 31
    assert days[0] == date(2024, 3, 1)
    assert days[-1] == date(2024, 3, 31)
    assert month_bounds(2024, 3) == (date(2024, 3, 1), date(2024, 3, 31))


def test_weekday_classification():
    # 2024-03-07 is a Thursday
    assert is_thursday(date(2024, 3, 7))
    assert is_friday(date(2024, 3, 8))
    assert is_weekend(date(2024, 3, 9))
    assert is_weekend(date(2024, 3, 10))
    assert not is_weekend(date(2024, 3, 11))


def test_iso_week_key_month_edges():
    """A month starting on Sunday: day 1 closes the previous ISO week."""
    # February 2026 starts on a Sunday
    assert iso_week_key(date(2026, 2, 1)) == (2026, 5)
    assert iso_week_key(date(2026, 2, 7)) == (2026, 6)
    assert iso_week_key(date(2026, 2, 8)) == (2026, 6)
    # Saturday and Sunday of one weekend share a key
    assert iso_week_key(date(2024, 3, 30)) == iso_week_key(date(2024, 3, 31))


def test_iso_week_key_year_boundary():
    # 2027-01-02/03 belong to ISO week 53 of 2026
    assert iso_week_key(date(2027, 1, 2)) == (2026, 53)
    assert iso_week_key(date(2027, 1, 3)) == (2026, 53)
    assert iso_week_key(date(2027, 1, 9)) == (2027, 1)


def test_days_apart():
    assert days_apart(date(2024, 3, 1), date(2024, 3, 4)) == 3
    assert days_apart(date(2024, 3, 4), date(2024, 3, 1)) == 3
    assert days_apart(date(2024, 2, 28), date(2024, 3, 1)) == 2

from datetime import date, datetime

from utils.dates import (
    add_months,
    clamp_day,
    date_key,
    format_date,
    month_bounds,
    normalize_date,
    parse_iso_date,
    sunday_on_or_before,
)

import pytest


def test_format_date_zero_pads():
    assert format_date(date(2024, 3, 5)) == "2024-03-05"
    assert format_date(date(987, 1, 1)) == "0987-01-01"


def test_normalize_date_accepts_loose_inputs():
    assert normalize_date("2024-03-05") == date(2024, 3, 5)
    assert normalize_date("2024-03-05T18:30:00") == date(2024, 3, 5)
    assert normalize_date("2024/3/5") == date(2024, 3, 5)
    assert normalize_date("03/05/2024") == date(2024, 3, 5)
    assert normalize_date(datetime(2024, 3, 5, 23, 59)) == date(2024, 3, 5)


@pytest.mark.parametrize("raw", ["", "not-a-date", "2024-02-30", None, 20240305])
def test_normalize_date_rejects_malformed(raw):
    assert normalize_date(raw) is None


def test_equivalent_representations_share_a_key():
    assert date_key("2024/3/5") == date_key(date(2024, 3, 5)) == "2024-03-05"


def test_parse_iso_date_is_strict_about_layout():
    assert parse_iso_date("2024-03-05") == date(2024, 3, 5)
    assert parse_iso_date("03/05/2024") is None


def test_clamp_day_short_months():
    assert clamp_day(2024, 1, 31) == 29
    assert clamp_day(2023, 1, 31) == 28
    assert clamp_day(2024, 3, 31) == 30
    assert clamp_day(2024, 0, 15) == 15


def test_add_months_crosses_year_and_clamps():
    assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)


def test_month_bounds_rejects_bad_index():
    assert month_bounds(2024, 1) == (date(2024, 2, 1), date(2024, 2, 29))
    with pytest.raises(ValueError):
        month_bounds(2024, 12)


def test_sunday_on_or_before():
    assert sunday_on_or_before(date(2024, 9, 1)) == date(2024, 9, 1)  # a Sunday
    assert sunday_on_or_before(date(2024, 2, 1)) == date(2024, 1, 28)

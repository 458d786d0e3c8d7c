from datetime import date, timedelta

import pytest

from conftest import FIXED_TODAY, make_day
from services.calendar_grid import GRID_WEEKS, build_month
from utils.dates import MAX_YEAR, MIN_YEAR


@pytest.mark.parametrize("year,month_index", [
    (2024, m) for m in range(12)
] + [(2023, 1), (2026, 1), (2021, 7)])
def test_grid_always_has_42_consecutive_days(year, month_index):
    matrix = build_month(year, month_index, {}, today=FIXED_TODAY)

    assert len(matrix) == GRID_WEEKS == 6
    assert all(len(row) == 7 for row in matrix)

    first = date(year, month_index + 1, 1)
    anchor = date.fromisoformat(matrix[0][0].date)
    assert anchor <= first
    assert anchor.weekday() == 6  # Sunday
    assert (first - anchor).days < 7
    for offset, cell in enumerate(c for row in matrix for c in row):
        assert cell.date == (anchor + timedelta(days=offset)).isoformat()


def test_month_starting_on_sunday_anchors_on_the_first():
    matrix = build_month(2024, 8, {}, today=FIXED_TODAY)  # September 2024
    assert matrix[0][0].date == "2024-09-01"


def test_current_month_and_today_flags():
    matrix = build_month(2024, 2, {}, today=FIXED_TODAY)
    cells = [c for row in matrix for c in row]

    assert [c.date for c in cells if c.is_today] == ["2024-03-10"]
    in_month = [c.date for c in cells if c.is_current_month]
    assert in_month[0] == "2024-03-01"
    assert in_month[-1] == "2024-03-31"
    assert len(in_month) == 31


def test_events_attached_and_missing_dates_empty():
    merged = {"2024-03-05": make_day(bills=[("Power", "50")])}
    matrix = build_month(2024, 2, merged, today=FIXED_TODAY)
    cells = {c.date: c for row in matrix for c in row}

    assert [i.name for i in cells["2024-03-05"].bills] == ["Power"]
    empty = cells["2024-03-06"]
    assert empty.bills == [] and empty.paydays == [] and empty.purchases == [] and empty.savings == []


def test_weeks_is_configurable_within_bounds():
    assert len(build_month(2024, 2, {}, today=FIXED_TODAY, weeks=5)) == 5
    with pytest.raises(ValueError):
        build_month(2024, 2, {}, today=FIXED_TODAY, weeks=7)


def test_month_index_out_of_range():
    with pytest.raises(ValueError):
        build_month(2024, 12, {}, today=FIXED_TODAY)


@pytest.mark.parametrize("year,month_index", [(1, 0), (9999, 11), (0, 5), (10000, 0)])
def test_years_whose_grid_leaves_the_date_range_are_rejected(year, month_index):
    with pytest.raises(ValueError):
        build_month(year, month_index, {}, today=FIXED_TODAY)


def test_first_and_last_supported_months():
    first = build_month(MIN_YEAR, 0, {}, today=FIXED_TODAY)
    last = build_month(MAX_YEAR, 11, {}, today=FIXED_TODAY)
    assert first[0][0].date <= "0002-01-01"
    assert last[-1][-1].date >= "9998-12-31"

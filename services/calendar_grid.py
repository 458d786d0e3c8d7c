"""
Calendar Grid Builder

Lays merged events onto a fixed-height, Sunday-first month grid.
"""
from datetime import date, timedelta

from models.calendar_models import CalendarDayEntry, DayEvents
from utils.dates import MAX_YEAR, MIN_YEAR, format_date, month_bounds, sunday_on_or_before

GRID_WEEKS = 6
MIN_GRID_WEEKS = 4
MAX_GRID_WEEKS = 6
DAYS_PER_WEEK = 7


def build_month(year: int, month_index: int, merged_events: dict,
                today: date | None = None, weeks: int = GRID_WEEKS) -> list:
    """
    Return ``weeks`` rows of 7 CalendarDayEntry cells for a zero-based month.

    The first row starts on the Sunday on or before the 1st. ``today`` marks the
    ``is_today`` cell and defaults to the current local date. Years outside
    MIN_YEAR..MAX_YEAR raise ValueError since their grid leaves the date range.
    """
    if not MIN_GRID_WEEKS <= weeks <= MAX_GRID_WEEKS:
        raise ValueError(f"Grid must have {MIN_GRID_WEEKS}-{MAX_GRID_WEEKS} weeks, got {weeks}")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValueError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}")
    first, _ = month_bounds(year, month_index)
    if today is None:
        today = date.today()

    cursor = sunday_on_or_before(first)
    matrix = []
    for _ in range(weeks):
        row = []
        for _ in range(DAYS_PER_WEEK):
            key = format_date(cursor)
            day = merged_events.get(key) or DayEvents()
            row.append(CalendarDayEntry(
                date=key,
                bills=list(day.bills),
                paydays=list(day.paydays),
                purchases=list(day.purchases),
                savings=list(day.savings),
                is_current_month=cursor.month == first.month,
                is_today=cursor == today,
            ))
            cursor += timedelta(days=1)
        matrix.append(row)
    return matrix

import calendar
from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"

# Accepted layouts for stored or submitted date strings, tried in order.
_LOOSE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y")

CADENCE_INTERVAL_DAYS = {
    "weekly": 7,
    "biweekly": 14,
}
MONTHLY = "monthly"
CADENCES = ("weekly", "biweekly", MONTHLY)

# Years whose full month grid (and payday lookahead) stays inside date.min..date.max.
MIN_YEAR = 2
MAX_YEAR = 9998


def normalize_date(raw_date) -> date | None:
    """Loosely parse a calendar date, returning None when it can't be read.

    Accepts ``date``/``datetime`` objects, ``YYYY-MM-DD`` (optionally followed by
    a time component), ``YYYY/MM/DD`` and ``MM/DD/YYYY``.
    """
    if isinstance(raw_date, datetime):
        return raw_date.date()
    if isinstance(raw_date, date):
        return raw_date
    if not isinstance(raw_date, str):
        return None

    value = raw_date.strip()
    if "T" in value:
        value = value.split("T", 1)[0]
    for fmt in _LOOSE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    """Zero-padded ``YYYY-MM-DD`` from the date's own year/month/day."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def date_key(raw_date) -> str | None:
    d = normalize_date(raw_date)
    return format_date(d) if d is not None else None


def parse_iso_date(value: str) -> date | None:
    """Strict ``YYYY-MM-DD`` parse used for request input."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def days_in_month(year: int, month_index: int) -> int:
    return calendar.monthrange(year, month_index + 1)[1]


def clamp_day(year: int, month_index: int, day: int) -> int:
    """Clamp ``day`` to the last valid day of the (zero-based) month."""
    return min(day, days_in_month(year, month_index))


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def last_of_month(d: date) -> date:
    return d.replace(day=days_in_month(d.year, d.month - 1))


def add_months(d: date, n: int) -> date:
    """Step ``n`` calendar months from ``d``, clamping the day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month_index = month % 12
    return date(year, month_index + 1, clamp_day(year, month_index, d.day))


def month_bounds(year: int, month_index: int) -> tuple[date, date]:
    """Return (first_day, last_day) for a zero-based month."""
    if not 0 <= month_index <= 11:
        raise ValueError(f"Invalid month index: {month_index}")
    return (
        date(year, month_index + 1, 1),
        date(year, month_index + 1, days_in_month(year, month_index)),
    )


def sunday_on_or_before(d: date) -> date:
    # weekday(): Monday=0 .. Sunday=6
    return d - timedelta(days=(d.weekday() + 1) % 7)


def in_supported_range(d: date) -> bool:
    return MIN_YEAR <= d.year <= MAX_YEAR

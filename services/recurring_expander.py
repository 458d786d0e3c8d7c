"""
Recurring Rule Expander

Turns recurring rules into dated occurrences for a bounding window.
Pure functions: no database access, never raises on malformed rules.
"""
import logging
from datetime import date, timedelta

from helpers.normalize import normalize_exceptions
from models.calendar_models import AmountItem, DayEvents, RULE_TYPE_CATEGORIES
from utils.dates import (
    CADENCE_INTERVAL_DAYS,
    MONTHLY,
    add_months,
    clamp_day,
    first_of_month,
    format_date,
    last_of_month,
    month_bounds,
    normalize_date,
)


def has_valid_lifetime(rule) -> bool:
    if rule.forever:
        return True
    count = rule.months_count
    return isinstance(count, int) and not isinstance(count, bool) and count > 0


def effective_end(rule, start: date) -> date | None:
    """
    Last date the rule may produce an occurrence on; None means unbounded.

    A finite rule runs through the end of the month ``months_count - 1`` months
    after its start month, so a count of 1 covers only the start month. A lifetime
    reaching past date.max is treated as unbounded.
    """
    if rule.forever:
        return None
    last_month = start.year * 12 + start.month - 1 + rule.months_count - 1
    if last_month // 12 > date.max.year:
        return None
    return last_of_month(add_months(first_of_month(start), rule.months_count - 1))


def get_occurrences(rule, window_start: date | None, window_end: date) -> list:
    """
    Every occurrence date of ``rule`` inside ``[window_start, window_end]`` and
    inside the rule's own lifetime, with exceptions removed.

    ``window_start=None`` means "from the rule's start date".
    """
    start = normalize_date(rule.start_date)
    if start is None:
        logging.warning(f"Recurring rule {rule.id} skipped: malformed start date {rule.start_date!r}")
        return []
    if not has_valid_lifetime(rule):
        logging.warning(f"Recurring rule {rule.id} skipped: neither forever nor a positive months count")
        return []

    range_start = start if window_start is None else max(start, window_start)
    lifetime_end = effective_end(rule, start)
    range_end = window_end if lifetime_end is None else min(lifetime_end, window_end)
    if range_end < range_start:
        return []

    if rule.cadence == MONTHLY:
        occurrences = _monthly_occurrences(start.day, range_start, range_end)
    elif rule.cadence in CADENCE_INTERVAL_DAYS:
        interval = CADENCE_INTERVAL_DAYS[rule.cadence]
        occurrences = _interval_occurrences(start, interval, range_start, range_end)
    else:
        logging.warning(f"Recurring rule {rule.id} skipped: unknown cadence {rule.cadence!r}")
        return []

    exceptions = set(normalize_exceptions(rule.exceptions))
    return [d for d in occurrences if format_date(d) not in exceptions]


def _interval_occurrences(start: date, interval: int, range_start: date, range_end: date) -> list:
    # jump straight to the first start + k*interval on or after range_start
    offset = (range_start - start).days
    cycles = -(-offset // interval) if offset > 0 else 0
    first_offset = cycles * interval
    if first_offset > (range_end - start).days:
        return []

    current = start + timedelta(days=first_offset)
    occurrences = [current]
    # step only while the next date still fits, so range_end may be date.max
    while (range_end - current).days >= interval:
        current += timedelta(days=interval)
        occurrences.append(current)
    return occurrences


def _monthly_occurrences(anchor_day: int, range_start: date, range_end: date) -> list:
    occurrences = []
    year, month_index = range_start.year, range_start.month - 1
    while (year, month_index) <= (range_end.year, range_end.month - 1):
        candidate = date(year, month_index + 1, clamp_day(year, month_index, anchor_day))
        if range_start <= candidate <= range_end:
            occurrences.append(candidate)
        month_index += 1
        if month_index > 11:
            month_index = 0
            year += 1
    return occurrences


def expand_rules(rules, window_start: date | None, window_end: date) -> dict:
    """
    Expand every rule into ``{date_key: DayEvents}`` holding one AmountItem per
    surviving occurrence, tagged with the rule's id.

    Rules with an unrecognized type are dropped with a warning.
    """
    result = {}
    for rule in rules:
        category = RULE_TYPE_CATEGORIES.get(rule.type)
        if category is None:
            logging.warning(
                f"Recurring rule {rule.id} dropped: unrecognized type {rule.type!r}"
            )
            continue

        item = AmountItem(name=rule.name, amount=rule.amount, recurring_id=rule.id)
        for occurrence in get_occurrences(rule, window_start, window_end):
            key = format_date(occurrence)
            entry = result.setdefault(key, DayEvents())
            entry.category(category).append(item)
    return result


def expand_rules_for_month(rules, year: int, month_index: int) -> dict:
    month_start, month_end = month_bounds(year, month_index)
    return expand_rules(rules, month_start, month_end)

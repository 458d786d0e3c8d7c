# helpers/normalize.py
import json
import logging
from decimal import Decimal

from models.calendar_models import AmountItem, CATEGORIES, DayEvents, RecurringRule
from utils.dates import date_key
from utils.money import coerce_amount


def normalize_amount_items(raw_items) -> list:
    """
    Convert a decoded JSON list into AmountItems.

    Bare strings become zero-amount items; mappings need both ``name`` and
    ``amount``. Anything else is dropped.
    """
    if not isinstance(raw_items, list):
        return []

    items = []
    for raw in raw_items:
        if isinstance(raw, str):
            items.append(AmountItem(name=raw, amount=Decimal("0")))
            continue
        if not isinstance(raw, dict) or "name" not in raw or "amount" not in raw:
            continue

        recurring_value = raw.get("recurring_id", raw.get("recurringId"))
        if isinstance(recurring_value, str):
            recurring_id = recurring_value.strip() or None
        elif isinstance(recurring_value, int) and not isinstance(recurring_value, bool):
            recurring_id = str(recurring_value)
        else:
            recurring_id = None

        items.append(AmountItem(
            name=str(raw["name"]),
            amount=coerce_amount(raw["amount"]),
            recurring_id=recurring_id,
        ))
    return items


def decode_items(json_text, column=""):
    """Decode one stored category column; undecodable text yields no items."""
    if not json_text:
        return []
    try:
        raw_items = json.loads(json_text)
    except (TypeError, ValueError):
        logging.warning(f"Undecodable {column or 'category'} column skipped: {json_text!r}")
        return []
    return normalize_amount_items(raw_items)


def encode_items(items) -> str:
    payload = []
    for item in items:
        entry = {"name": item.name, "amount": str(item.amount)}
        if item.recurring_id:
            entry["recurring_id"] = item.recurring_id
        payload.append(entry)
    return json.dumps(payload)


def normalize_day_row(row):
    """(date, bills, paydays, purchases, savings) row -> (date_key, DayEvents)."""
    raw_date = row[0]
    key = date_key(raw_date) or str(raw_date)
    day = DayEvents(**{
        name: decode_items(text, name)
        for name, text in zip(CATEGORIES, row[1:5])
    })
    return key, day


def normalize_exceptions(raw) -> list:
    """Exception dates as unique ``YYYY-MM-DD`` keys, first-seen order kept."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw) if raw else []
        except ValueError:
            logging.warning(f"Undecodable exceptions column skipped: {raw!r}")
            return []
    if not isinstance(raw, list):
        return []

    seen = []
    for value in raw:
        key = date_key(value) or (value.strip() if isinstance(value, str) else None)
        if key and key not in seen:
            seen.append(key)
    return seen


def normalize_rule_row(row) -> RecurringRule:
    """
    Build a RecurringRule from a
    (id, scope_key, type, name, amount, start_date, cadence, months_count, forever, exceptions)
    row.
    """
    months_count = row[7]
    if isinstance(months_count, bool) or not isinstance(months_count, int):
        months_count = None

    return RecurringRule(
        id=str(row[0] or ""),
        scope_key=row[1] or "default",
        type=(row[2] or "").strip(),
        name=row[3] or "",
        amount=coerce_amount(row[4]),
        start_date=(row[5] or "").strip(),
        cadence=(row[6] or "").strip(),
        months_count=months_count,
        forever=bool(row[8]),
        exceptions=normalize_exceptions(row[9]),
    )

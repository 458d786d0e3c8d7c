import logging
import threading
import uuid
from datetime import date, timedelta
from decimal import Decimal

from db import get_db
from models.calendar_models import AmountItem, DayEvents, RecurringRule, RULE_TYPE_CATEGORIES
from repositories import day_events_repository, recurring_rules_repository
from services.calendar_grid import build_month, GRID_WEEKS
from services.event_merger import merge_events
from services.projection_service import month_summary, project_balance, project_between_paydays
from services.recurring_expander import expand_rules, expand_rules_for_month
from utils.dates import CADENCES, format_date, normalize_date, parse_iso_date
from utils.money import ZERO, coerce_amount, parse_money

DEFAULT_SCOPE_KEY = "default"
PAYDAY_LOOKAHEAD_DAYS = 62
DELETE_SCOPES = ("one", "all")
# Largest values the DECIMAL(12,2) amount and INTEGER months_count columns hold.
MAX_RULE_AMOUNT = Decimal("9999999999.99")
MAX_MONTHS_COUNT = 2**31 - 1

# Serializes every read-modify-write against the backing store.
_write_lock = threading.Lock()


def _load_scope(conn, scope_key):
    return (
        day_events_repository.load_for(conn, scope_key),
        recurring_rules_repository.load_for(conn, scope_key),
    )


def get_month(year, month_index, scope_key=DEFAULT_SCOPE_KEY, today=None, weeks=GRID_WEEKS):
    """Month grid for a zero-based month with ad-hoc and recurring events merged."""
    conn = get_db()
    try:
        ad_hoc, rules = _load_scope(conn, scope_key)
    finally:
        conn.close()

    recurring = expand_rules_for_month(rules, year, month_index)
    merged = merge_events(ad_hoc, recurring)
    return build_month(year, month_index, merged, today=today, weeks=weeks)


def _ad_hoc_items(items):
    """Coerce incoming items to AmountItems, dropping recurring-tagged ones."""
    kept = []
    for item in items or []:
        if isinstance(item, AmountItem):
            name, amount, recurring_id = item.name, item.amount, item.recurring_id
        else:
            name = item.get("name")
            amount = item.get("amount")
            recurring_id = item.get("recurring_id")
        if recurring_id:
            logging.debug(f"Dropped recurring item {name!r} ({recurring_id}) from ad-hoc write")
            continue
        kept.append(AmountItem(name=str(name), amount=coerce_amount(amount)))
    return kept


def upsert_day(day, scope_key, bills, paydays, purchases, savings=None):
    """
    Replace the ad-hoc events for ``day`` wholesale.

    Returns the normalized ``YYYY-MM-DD`` key that was written.
    """
    parsed = normalize_date(day)
    if parsed is None:
        raise ValueError("Invalid date format")
    key = format_date(parsed)

    entry = DayEvents(
        bills=_ad_hoc_items(bills),
        paydays=_ad_hoc_items(paydays),
        purchases=_ad_hoc_items(purchases),
        savings=_ad_hoc_items(savings),
    )

    with _write_lock:
        conn = get_db()
        try:
            events = day_events_repository.load_for(conn, scope_key)
            events[key] = entry
            day_events_repository.save_for(conn, scope_key, events)
        finally:
            conn.close()

    logging.info(f"Day {key} updated for scope {scope_key}")
    return key


def _validate_rule(type_, name, amount, start_date, cadence, months_count, forever):
    if type_ not in RULE_TYPE_CATEGORIES:
        raise ValueError("Invalid type")
    if not name or not str(name).strip():
        raise ValueError("Name is required")
    try:
        parsed_amount = parse_money(amount)
    except ValueError as exc:
        raise ValueError("Amount is required") from exc
    if abs(parsed_amount) > MAX_RULE_AMOUNT:
        raise ValueError("Amount is out of range")
    if parse_iso_date(start_date) is None:
        raise ValueError("Invalid date format")
    if cadence not in CADENCES:
        raise ValueError("Invalid cadence")
    if not forever:
        if isinstance(months_count, bool) or not isinstance(months_count, int) or months_count <= 0:
            raise ValueError("Months count must be a positive integer")
        if months_count > MAX_MONTHS_COUNT:
            raise ValueError("Months count is out of range")


def create_recurring_rule(scope_key, *, type_, name, amount, start_date, cadence,
                          months_count=None, forever=False):
    """Persist a new rule with a fresh id and no exceptions."""
    _validate_rule(type_, name, amount, start_date, cadence, months_count, forever)

    rule = RecurringRule(
        id=f"rec_{uuid.uuid4().hex[:12]}",
        scope_key=scope_key,
        type=type_,
        name=str(name).strip(),
        amount=parse_money(amount),
        start_date=format_date(parse_iso_date(start_date)),
        cadence=cadence,
        months_count=None if forever else months_count,
        forever=bool(forever),
        exceptions=[],
    )

    with _write_lock:
        conn = get_db()
        try:
            recurring_rules_repository.insert_rule(conn, rule)
        finally:
            conn.close()

    logging.info(f"Recurring rule {rule.id} created for scope {scope_key} ({rule.cadence} {rule.type})")
    return rule


def delete_recurring(scope_key, recurring_id, day, scope):
    """
    Suppress one occurrence (``scope="one"``) or remove the rule (``scope="all"``).

    Returns False when the rule does not exist in this scope.
    """
    if scope not in DELETE_SCOPES:
        raise ValueError("Invalid scope")
    parsed = normalize_date(day)
    if parsed is None:
        raise ValueError("Invalid date format")
    key = format_date(parsed)

    with _write_lock:
        conn = get_db()
        try:
            rules = recurring_rules_repository.load_for(conn, scope_key)
            target = next((r for r in rules if r.id == recurring_id), None)
            if target is None:
                logging.warning(f"Recurring rule {recurring_id} not found in scope {scope_key}")
                return False

            if scope == "all":
                rules = [r for r in rules if r.id != recurring_id]
                logging.info(f"Recurring rule {recurring_id} deleted")
            elif key not in target.exceptions:
                target.exceptions.append(key)
                logging.info(f"Recurring rule {recurring_id}: occurrence {key} suppressed")
            else:
                return True

            recurring_rules_repository.save_for(conn, scope_key, rules)
        finally:
            conn.close()
    return True


def get_balance_for_date(scope_key, day, base_funds=ZERO, base_savings=ZERO):
    """Funds/savings as of ``day``, inclusive. Unreadable dates return the baselines."""
    as_of = normalize_date(day)
    if as_of is None:
        return coerce_amount(base_funds), coerce_amount(base_savings)

    conn = get_db()
    try:
        ad_hoc, rules = _load_scope(conn, scope_key)
    finally:
        conn.close()

    merged = merge_events(ad_hoc, expand_rules(rules, None, as_of))
    projection = project_balance(merged, as_of, base_funds, base_savings)
    return projection.funds, projection.savings


def get_between_paydays(scope_key, reference=None, base_funds=ZERO,
                        lookahead_days=PAYDAY_LOOKAHEAD_DAYS):
    """Projection at the next payday after ``reference``, or None if none is known."""
    if reference is None:
        reference = date.today()
    reference = normalize_date(reference)
    if reference is None:
        return None

    conn = get_db()
    try:
        ad_hoc, rules = _load_scope(conn, scope_key)
    finally:
        conn.close()

    horizon = reference + timedelta(days=min(lookahead_days, (date.max - reference).days))
    merged = merge_events(ad_hoc, expand_rules(rules, None, horizon))
    return project_between_paydays(merged, reference, base_funds)


def get_month_summary(year, month_index, scope_key=DEFAULT_SCOPE_KEY, initial_funds=ZERO):
    matrix = get_month(year, month_index, scope_key)
    return month_summary(matrix, initial_funds)

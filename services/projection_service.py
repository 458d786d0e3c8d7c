from datetime import date
from decimal import Decimal

from models.projection_dto import BalanceProjection, MonthSummary, PaydayProjection
from utils.dates import normalize_date
from utils.money import ZERO, coerce_amount, sum_amounts


def _dated_days(merged_events: dict) -> list:
    """(date, DayEvents) pairs in ascending date order; unreadable keys skipped."""
    dated = []
    for key, day in merged_events.items():
        d = normalize_date(key)
        if d is not None:
            dated.append((d, day))
    return sorted(dated, key=lambda pair: pair[0])


def project_balance(merged_events: dict, as_of: date,
                    base_funds=ZERO, base_savings=ZERO) -> BalanceProjection:
    """Balance as of ``as_of``, inclusive.

    Every dated entry on or before ``as_of`` applies; there is no lower bound.
    Savings moves leave funds and land in savings.
    """
    funds = coerce_amount(base_funds)
    savings = coerce_amount(base_savings)

    for d, day in _dated_days(merged_events):
        if d > as_of:
            continue
        moved = sum_amounts(day.savings)
        funds += (
            sum_amounts(day.paydays)
            - sum_amounts(day.bills)
            - sum_amounts(day.purchases)
            - moved
        )
        savings += moved

    return BalanceProjection(as_of=as_of, funds=funds, savings=savings)


def project_between_paydays(merged_events: dict, reference: date,
                            base_funds=ZERO) -> PaydayProjection | None:
    """Forecast funds on the next payday strictly after ``reference``.

    Returns None when no later payday is known, which is distinct from a
    projected balance of zero.
    """
    dated = _dated_days(merged_events)
    paydays = [(d, sum_amounts(day.paydays)) for d, day in dated if day.paydays]

    next_payday = next(((d, amount) for d, amount in paydays if d > reference), None)
    if next_payday is None:
        return None
    next_date, next_amount = next_payday

    first_payday = paydays[0][0]
    if reference < first_payday:
        current_funds = ZERO
    else:
        current_funds = project_balance(merged_events, reference, base_funds).funds

    bills = purchases = moved = ZERO
    for d, day in dated:
        if reference < d < next_date:
            bills += sum_amounts(day.bills)
            purchases += sum_amounts(day.purchases)
            moved += sum_amounts(day.savings)

    return PaydayProjection(
        reference_date=reference,
        next_payday_date=next_date,
        next_payday_amount=next_amount,
        current_funds=current_funds,
        bills_until_next=bills,
        purchases_until_next=purchases,
        savings_until_next=moved,
        projected_balance=current_funds - bills - purchases - moved + next_amount,
    )


def month_summary(matrix: list, initial_funds=ZERO) -> MonthSummary:
    """Totals over the cells that belong to the grid's own month."""
    cells = [cell for row in matrix for cell in row if cell.is_current_month]

    def total(attr: str) -> Decimal:
        return sum((sum_amounts(getattr(cell, attr)) for cell in cells), ZERO)

    bills = total("bills")
    paydays = total("paydays")
    purchases = total("purchases")
    moved = total("savings")
    leftover = coerce_amount(initial_funds) + paydays - bills

    return MonthSummary(
        total_bills=bills,
        total_paydays=paydays,
        total_purchases=purchases,
        total_savings=moved,
        leftover_before_purchases=leftover,
        end_of_month_funds=leftover - purchases - moved,
    )

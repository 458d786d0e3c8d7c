from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass
class BalanceProjection:
    as_of: date
    funds: Decimal
    savings: Decimal


@dataclass
class PaydayProjection:
    reference_date: date
    next_payday_date: date
    next_payday_amount: Decimal
    current_funds: Decimal
    bills_until_next: Decimal
    purchases_until_next: Decimal
    savings_until_next: Decimal
    projected_balance: Decimal


@dataclass
class MonthSummary:
    total_bills: Decimal
    total_paydays: Decimal
    total_purchases: Decimal
    total_savings: Decimal
    leftover_before_purchases: Decimal
    end_of_month_funds: Decimal

from dataclasses import asdict, dataclass
from typing import List, Optional


def _item_dict(item) -> dict:
    entry = {"name": item.name, "amount": float(item.amount)}
    if item.recurring_id:
        entry["recurring_id"] = item.recurring_id
    return entry


@dataclass
class CalendarDayDTO:
    """Single grid cell."""
    date: str  # ISO format YYYY-MM-DD
    bills: List[dict]
    paydays: List[dict]
    purchases: List[dict]
    savings: List[dict]
    is_current_month: bool
    is_today: bool

    @classmethod
    def from_entry(cls, entry):
        return cls(
            date=entry.date,
            bills=[_item_dict(i) for i in entry.bills],
            paydays=[_item_dict(i) for i in entry.paydays],
            purchases=[_item_dict(i) for i in entry.purchases],
            savings=[_item_dict(i) for i in entry.savings],
            is_current_month=entry.is_current_month,
            is_today=entry.is_today,
        )


def matrix_to_json(matrix) -> list:
    return [[asdict(CalendarDayDTO.from_entry(cell)) for cell in row] for row in matrix]


@dataclass
class RecurringRuleDTO:
    id: str
    type: str
    name: str
    amount: float
    start_date: str
    cadence: str
    months_count: Optional[int]
    forever: bool
    exceptions: List[str]

    @classmethod
    def from_rule(cls, rule):
        return cls(
            id=rule.id,
            type=rule.type,
            name=rule.name,
            amount=float(rule.amount),
            start_date=rule.start_date,
            cadence=rule.cadence,
            months_count=rule.months_count,
            forever=rule.forever,
            exceptions=list(rule.exceptions),
        )


@dataclass
class BalanceResponseDTO:
    date: str
    funds: float
    savings: float


@dataclass
class BetweenPaydaysDTO:
    """Forecast at the next payday; ``available`` is False when none is known."""
    available: bool
    reference_date: str
    next_payday_date: Optional[str] = None
    next_payday_amount: Optional[float] = None
    current_funds: Optional[float] = None
    bills_until_next: Optional[float] = None
    purchases_until_next: Optional[float] = None
    savings_until_next: Optional[float] = None
    projected_balance: Optional[float] = None

    @classmethod
    def from_projection(cls, reference_date, projection):
        if projection is None:
            return cls(available=False, reference_date=reference_date.isoformat())
        return cls(
            available=True,
            reference_date=projection.reference_date.isoformat(),
            next_payday_date=projection.next_payday_date.isoformat(),
            next_payday_amount=float(projection.next_payday_amount),
            current_funds=float(projection.current_funds),
            bills_until_next=float(projection.bills_until_next),
            purchases_until_next=float(projection.purchases_until_next),
            savings_until_next=float(projection.savings_until_next),
            projected_balance=float(projection.projected_balance),
        )


@dataclass
class MonthSummaryDTO:
    year: int
    month: int
    total_bills: float
    total_paydays: float
    total_purchases: float
    total_savings: float
    leftover_before_purchases: float
    end_of_month_funds: float

    @classmethod
    def from_summary(cls, year, month, summary):
        return cls(
            year=year,
            month=month,
            total_bills=float(summary.total_bills),
            total_paydays=float(summary.total_paydays),
            total_purchases=float(summary.total_purchases),
            total_savings=float(summary.total_savings),
            leftover_before_purchases=float(summary.leftover_before_purchases),
            end_of_month_funds=float(summary.end_of_month_funds),
        )

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

CATEGORIES = ("bills", "paydays", "purchases", "savings")

# rule.type -> DayEvents category
RULE_TYPE_CATEGORIES = {
    "bill": "bills",
    "payday": "paydays",
    "purchase": "purchases",
    "savings": "savings",
}


@dataclass(frozen=True)
class AmountItem:
    name: str
    amount: Decimal
    recurring_id: Optional[str] = None


@dataclass
class DayEvents:
    """Everything filed against one calendar date, split by category."""
    bills: List[AmountItem] = field(default_factory=list)
    paydays: List[AmountItem] = field(default_factory=list)
    purchases: List[AmountItem] = field(default_factory=list)
    savings: List[AmountItem] = field(default_factory=list)

    def category(self, name: str) -> List[AmountItem]:
        return getattr(self, name)


@dataclass
class RecurringRule:
    id: str
    type: str               # 'bill' | 'payday' | 'purchase' | 'savings'
    name: str
    amount: Decimal
    start_date: str         # 'YYYY-MM-DD' as stored; may be malformed
    cadence: str            # 'weekly' | 'biweekly' | 'monthly'
    months_count: Optional[int] = None
    forever: bool = False
    exceptions: List[str] = field(default_factory=list)
    scope_key: str = "default"


@dataclass
class CalendarDayEntry:
    date: str
    bills: List[AmountItem]
    paydays: List[AmountItem]
    purchases: List[AmountItem]
    savings: List[AmountItem]
    is_current_month: bool
    is_today: bool

"""Domain models - pure Python dataclasses representing budget entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class Frequency(str, Enum):
    """How often a paycheck arrives"""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"


@dataclass
class Bill:
    """Tracked expense, optionally an installment bill with payment history"""

    id: Optional[int]
    name: str
    amount: Decimal
    due_date: Optional[date]
    description: str = ""
    is_recurring: bool = False
    total_owed: Optional[Decimal] = None  # None means not an installment bill
    remaining_balance: Optional[Decimal] = None
    payment_dates: List[str] = field(default_factory=list)  # UTC timestamp strings
    payment_amounts: List[Decimal] = field(default_factory=list)

    @property
    def is_installment(self) -> bool:
        return self.total_owed is not None


@dataclass
class Paycheck:
    """Income record"""

    id: Optional[int]
    amount: Decimal
    frequency: Frequency = Frequency.MONTHLY


@dataclass
class ScheduledPayment:
    """Future-dated payment intent, never reconciled against the bill"""

    id: Optional[int]
    bill_id: int
    amount: Decimal
    due_date: date


@dataclass
class BillProgress:
    """Per-bill card on the overview"""

    bill_id: Optional[int]
    name: str
    amount: Decimal
    total_owed: Optional[Decimal]
    paid_percentage: Optional[Decimal]


@dataclass
class ExpenseSlice:
    """One entry of the expense breakdown chart"""

    name: str
    value: Decimal


@dataclass
class BudgetOverview:
    """Monthly totals derived from the current bills and paychecks"""

    total_income: Decimal
    total_expenses: Decimal
    remaining: Decimal
    bills: List[BillProgress]
    expense_breakdown: List[ExpenseSlice]

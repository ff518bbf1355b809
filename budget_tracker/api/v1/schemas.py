"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from budget_tracker.domain.models import Bill, BudgetOverview, Frequency, Paycheck, ScheduledPayment


def _to_float(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


class BillCreate(BaseModel):
    """Request body for POST /v1/bills (raw form input)"""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = Field(..., min_length=1, description="Bill name")
    amount: str = Field(..., description="Recurring amount as entered")
    due_date: date = Field(..., description="Due date, YYYY-MM-DD")
    total_owed: Optional[str] = Field("", description="Total owed for installment bills, empty or null otherwise")
    description: str = Field("", description="Rich text (HTML) description")
    is_recurring: bool = False


class BillUpdate(BillCreate):
    """Request body for PUT /v1/bills/{bill_id}: the full edited record"""

    total_owed: Optional[str] = Field(
        None, description="null keeps a plain bill plain; an empty string (cleared field) becomes 0"
    )
    remaining_balance: Optional[Decimal] = None
    payment_dates: List[str] = Field(default_factory=list)
    payment_amounts: List[Decimal] = Field(default_factory=list)


class BillResponse(BaseModel):
    """Bill as stored"""

    id: int
    name: str
    amount: float
    due_date: Optional[date]
    description: str
    is_recurring: bool
    total_owed: Optional[float] = None
    remaining_balance: Optional[float] = None
    payment_dates: List[str] = Field(default_factory=list)
    payment_amounts: List[float] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, bill: Bill) -> "BillResponse":
        return cls(
            id=bill.id,
            name=bill.name,
            amount=float(bill.amount),
            due_date=bill.due_date,
            description=bill.description,
            is_recurring=bill.is_recurring,
            total_owed=_to_float(bill.total_owed),
            remaining_balance=_to_float(bill.remaining_balance),
            payment_dates=bill.payment_dates,
            payment_amounts=[float(a) for a in bill.payment_amounts],
        )


class PaymentRequest(BaseModel):
    """Request body for POST /v1/bills/{bill_id}/payments"""

    amount: Decimal = Field(..., description="Payment amount")
    payment_date: date = Field(default_factory=date.today)
    remaining_balance: Optional[Decimal] = Field(
        None, description="Balance shown to the user; defaults to the stored balance"
    )


class ScheduledPaymentRequest(BaseModel):
    """Request body for POST /v1/bills/{bill_id}/scheduled-payments"""

    amount: Decimal
    due_date: date


class ScheduledPaymentResponse(BaseModel):
    """Scheduled payment as stored"""

    id: int
    bill_id: int
    amount: float
    due_date: date

    @classmethod
    def from_domain(cls, payment: ScheduledPayment) -> "ScheduledPaymentResponse":
        return cls(
            id=payment.id,
            bill_id=payment.bill_id,
            amount=float(payment.amount),
            due_date=payment.due_date,
        )


class PaycheckCreate(BaseModel):
    """Request body for POST /v1/paychecks"""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    amount: str = Field(..., description="Paycheck amount as entered")
    frequency: Frequency = Frequency.MONTHLY


class PaycheckResponse(BaseModel):
    """Paycheck as stored"""

    id: int
    amount: float
    frequency: Frequency

    @classmethod
    def from_domain(cls, paycheck: Paycheck) -> "PaycheckResponse":
        return cls(id=paycheck.id, amount=float(paycheck.amount), frequency=paycheck.frequency)


class BillProgressSchema(BaseModel):
    """Single bill card on the overview"""

    bill_id: Optional[int]
    name: str
    amount: float
    total_owed: Optional[float] = None
    paid_percentage: Optional[float] = None


class ExpenseSliceSchema(BaseModel):
    """Single slice of the expense breakdown"""

    name: str
    value: float


class OverviewResponse(BaseModel):
    """Response for GET /v1/overview"""

    total_income: float
    total_expenses: float
    remaining: float
    bills: List[BillProgressSchema]
    expense_breakdown: List[ExpenseSliceSchema]

    @classmethod
    def from_domain(cls, overview: BudgetOverview) -> "OverviewResponse":
        return cls(
            total_income=float(overview.total_income),
            total_expenses=float(overview.total_expenses),
            remaining=float(overview.remaining),
            bills=[
                BillProgressSchema(
                    bill_id=b.bill_id,
                    name=b.name,
                    amount=float(b.amount),
                    total_owed=_to_float(b.total_owed),
                    paid_percentage=_to_float(b.paid_percentage),
                )
                for b in overview.bills
            ],
            expense_breakdown=[ExpenseSliceSchema(name=s.name, value=float(s.value)) for s in overview.expense_breakdown],
        )

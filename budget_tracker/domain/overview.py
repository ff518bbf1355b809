"""Monthly overview aggregation over fetched bills and paychecks"""

from decimal import Decimal
from typing import List, Optional

from budget_tracker.domain.models import (
    Bill,
    BillProgress,
    BudgetOverview,
    ExpenseSlice,
    Frequency,
    Paycheck,
)


def total_income(paychecks: List[Paycheck]) -> Decimal:
    """
    Monthly income from all paychecks.

    Bi-weekly paychecks count twice. Weekly and monthly paychecks are taken
    at face value; weekly is deliberately not scaled up to a monthly figure.
    """
    total = Decimal("0")
    for paycheck in paychecks:
        if paycheck.frequency == Frequency.BI_WEEKLY:
            total += paycheck.amount * 2
        else:
            total += paycheck.amount
    return total


def total_expenses(bills: List[Bill]) -> Decimal:
    """Sum of each bill's recurring amount (installment balances excluded)"""
    return sum((bill.amount for bill in bills), Decimal("0"))


def paid_percentage(bill: Bill) -> Optional[Decimal]:
    """
    Progress shown on an installment bill card.

    Uses the bill's flat amount as the numerator, not the recorded payments:
    {amount: 50, total_owed: 200} -> 25. None when total_owed is unset or zero.
    """
    if not bill.total_owed:
        return None
    return bill.amount / bill.total_owed * 100


def expense_breakdown(bills: List[Bill]) -> List[ExpenseSlice]:
    return [ExpenseSlice(name=bill.name, value=bill.amount) for bill in bills]


def summarize(bills: List[Bill], paychecks: List[Paycheck]) -> BudgetOverview:
    """
    Main entry point: derive the overview from the latest fetch.

    Recomputed on every call; nothing is cached.
    """
    income = total_income(paychecks)
    expenses = total_expenses(bills)

    return BudgetOverview(
        total_income=income,
        total_expenses=expenses,
        remaining=income - expenses,
        bills=[
            BillProgress(
                bill_id=bill.id,
                name=bill.name,
                amount=bill.amount,
                total_owed=bill.total_owed,
                paid_percentage=paid_percentage(bill),
            )
            for bill in bills
        ],
        expense_breakdown=expense_breakdown(bills),
    )

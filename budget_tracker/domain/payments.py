"""Payment application for installment bills"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from budget_tracker.domain.bills import BILLS_TABLE, bill_from_record, parse_decimal
from budget_tracker.domain.exceptions import BillNotFoundError, NotAnInstallmentBillError
from budget_tracker.domain.gateway import RecordStore
from budget_tracker.domain.models import Bill, ScheduledPayment
from budget_tracker.utils.date_utils import to_date_string, to_timestamp_string

SCHEDULED_PAYMENTS_TABLE = "scheduled_payments"


async def apply_payment(
    store: RecordStore,
    bill_id: int,
    amount: Decimal,
    payment_date: date | datetime,
    remaining_balance: Optional[Decimal] = None,
    atomic: bool = False,
) -> Bill:
    """
    Record an immediate payment against an installment bill.

    Flow (default mode):
    1. Fresh read of the bill's payment history by id
    2. new balance = caller's remaining_balance - amount
    3. Append amount and the payment timestamp to the history lists
    4. Write balance and both lists back in one update keyed by id

    Steps 1 and 4 are separate store calls, so a concurrent payment landing
    between them is lost (last writer wins). With atomic=True the whole
    append runs as one store call and the balance is derived from the stored
    remaining_balance instead of the caller's value.

    Overpayment is not rejected: the balance may go negative.

    Raises:
        BillNotFoundError: No bill with this id
        NotAnInstallmentBillError: Bill has no total_owed
        RecordStoreError: Any read or write failed; later steps are skipped
    """
    amount = parse_decimal(amount)
    paid_at = to_timestamp_string(payment_date)

    rows = await store.select(
        BILLS_TABLE,
        filters={"id": bill_id},
        columns=["id", "total_owed", "remaining_balance", "payment_dates", "payment_amounts"],
    )
    if not rows:
        raise BillNotFoundError(f"Bill {bill_id} not found")

    current = rows[0]
    if current.get("total_owed") is None:
        raise NotAnInstallmentBillError(f"Bill {bill_id} has no total owed")

    if atomic:
        record = await store.append_payment(bill_id, amount, paid_at)
        if not record:
            raise BillNotFoundError(f"Bill {bill_id} not found")
        return bill_from_record(record)

    if remaining_balance is None:
        stored = current.get("remaining_balance")
        remaining_balance = parse_decimal(current["total_owed"] if stored is None else stored)
    new_remaining_balance = parse_decimal(remaining_balance) - amount

    payment_dates = list(current.get("payment_dates") or []) + [paid_at]
    payment_amounts = [str(a) for a in current.get("payment_amounts") or []] + [str(amount)]

    updated = await store.update(
        BILLS_TABLE,
        {
            "remaining_balance": str(new_remaining_balance),
            "payment_dates": payment_dates,
            "payment_amounts": payment_amounts,
        },
        filters={"id": bill_id},
    )
    if not updated:
        raise BillNotFoundError(f"Bill {bill_id} not found")
    return bill_from_record(updated[0])


async def schedule_payment(
    store: RecordStore,
    bill_id: int,
    amount: Decimal,
    due_date: date | datetime,
) -> ScheduledPayment:
    """
    Record a future payment intent.

    Inserts a scheduled_payments row with the due date truncated to a
    calendar date. The bill is only checked for existence, never modified,
    and nothing fires when the date arrives.

    Raises:
        BillNotFoundError: No bill with this id
        RecordStoreError: The lookup or the insert failed
    """
    if not await store.select(BILLS_TABLE, filters={"id": bill_id}, columns=["id"]):
        raise BillNotFoundError(f"Bill {bill_id} not found")

    rows = await store.insert(
        SCHEDULED_PAYMENTS_TABLE,
        [
            {
                "bill_id": bill_id,
                "amount": str(parse_decimal(amount)),
                "due_date": to_date_string(due_date),
            }
        ],
    )
    row = rows[0]
    return ScheduledPayment(
        id=row.get("id"),
        bill_id=row["bill_id"],
        amount=parse_decimal(row["amount"]),
        due_date=date.fromisoformat(to_date_string(row["due_date"])),
    )

"""POST /v1/bills/{bill_id}/payments and /scheduled-payments - payment endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from budget_tracker.api.v1.schemas import (
    BillResponse,
    PaymentRequest,
    ScheduledPaymentRequest,
    ScheduledPaymentResponse,
)
from budget_tracker.api.dependencies import get_record_store, get_request_id, record_store_unavailable
from budget_tracker.config import settings
from budget_tracker.domain.exceptions import BillNotFoundError, NotAnInstallmentBillError, RecordStoreError
from budget_tracker.domain.gateway import RecordStore
from budget_tracker.domain.payments import apply_payment, schedule_payment
from budget_tracker.infrastructure.observability.logging import log_payment
from budget_tracker.infrastructure.observability.metrics import record_payment

router = APIRouter()


@router.post("/bills/{bill_id}/payments", response_model=BillResponse)
async def add_payment(
    bill_id: int,
    request_body: PaymentRequest,
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    """
    Record an immediate payment on an installment bill.

    Flow:
    1. Read the bill's current payment history
    2. Subtract the amount from the caller's remaining_balance
    3. Append the payment to the history
    4. Write balance and history back in one update

    Steps 1 and 4 are separate store calls unless atomic_payments is enabled.
    """
    request_id = get_request_id(request)
    mode = "atomic" if settings.atomic_payments else "immediate"

    try:
        bill = await apply_payment(
            store,
            bill_id,
            amount=request_body.amount,
            payment_date=request_body.payment_date,
            remaining_balance=request_body.remaining_balance,
            atomic=settings.atomic_payments,
        )

    except RecordStoreError as e:
        raise record_store_unavailable(e, request_id)

    except BillNotFoundError as e:
        logging.warning(f"Payment on missing bill: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Bill not found")

    except NotAnInstallmentBillError as e:
        logging.warning(f"Payment on non-installment bill: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    record_payment(mode, bill.remaining_balance)
    log_payment(
        request_id,
        bill_id,
        mode,
        str(request_body.amount),
        None if bill.remaining_balance is None else str(bill.remaining_balance),
    )

    return BillResponse.from_domain(bill)


@router.post("/bills/{bill_id}/scheduled-payments", response_model=ScheduledPaymentResponse, status_code=201)
async def add_scheduled_payment(
    bill_id: int,
    request_body: ScheduledPaymentRequest,
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    """
    Schedule a future payment.

    Stored as its own record after checking the bill exists. The bill's
    balance and history are untouched and nothing happens automatically on
    the due date.
    """
    request_id = get_request_id(request)

    try:
        scheduled = await schedule_payment(
            store,
            bill_id,
            amount=request_body.amount,
            due_date=request_body.due_date,
        )

    except RecordStoreError as e:
        raise record_store_unavailable(e, request_id)

    except BillNotFoundError as e:
        logging.warning(f"Scheduled payment on missing bill: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Bill not found")

    record_payment("scheduled")
    log_payment(request_id, bill_id, "scheduled", str(request_body.amount))

    return ScheduledPaymentResponse.from_domain(scheduled)

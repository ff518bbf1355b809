"""/v1/paychecks - income endpoints"""

import logging
from typing import List
from fastapi import APIRouter, Depends, Request

from budget_tracker.api.v1.schemas import PaycheckCreate, PaycheckResponse
from budget_tracker.api.dependencies import get_record_store, get_request_id, record_store_unavailable
from budget_tracker.domain.exceptions import RecordStoreError
from budget_tracker.domain.gateway import RecordStore
from budget_tracker.domain.paychecks import PAYCHECKS_TABLE, build_paycheck_record, paycheck_from_record

router = APIRouter()


@router.get("/paychecks", response_model=List[PaycheckResponse])
async def list_paychecks(request: Request, store: RecordStore = Depends(get_record_store)):
    try:
        records = await store.select(PAYCHECKS_TABLE)
    except RecordStoreError as e:
        raise record_store_unavailable(e, get_request_id(request))

    return [PaycheckResponse.from_domain(paycheck_from_record(r)) for r in records]


@router.post("/paychecks", response_model=PaycheckResponse, status_code=201)
async def create_paycheck(
    request_body: PaycheckCreate,
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    """Add a paycheck. Paychecks cannot be edited or deleted."""
    record = build_paycheck_record(request_body.amount, request_body.frequency)

    try:
        created = await store.insert(PAYCHECKS_TABLE, [record])
    except RecordStoreError as e:
        raise record_store_unavailable(e, get_request_id(request))

    logging.info("Paycheck created", extra={"request_id": get_request_id(request), "paycheck_id": created[0].get("id")})
    return PaycheckResponse.from_domain(paycheck_from_record(created[0]))

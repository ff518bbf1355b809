"""/v1/bills - bill CRUD endpoints"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from budget_tracker.api.v1.schemas import BillCreate, BillResponse, BillUpdate
from budget_tracker.api.dependencies import get_record_store, get_request_id, record_store_unavailable
from budget_tracker.domain.bills import (
    BILLS_TABLE,
    BillEdit,
    BillForm,
    bill_from_record,
    build_bill_record,
    build_bill_update,
)
from budget_tracker.domain.exceptions import RecordStoreError
from budget_tracker.domain.gateway import RecordStore

router = APIRouter()


@router.get("/bills", response_model=List[BillResponse])
async def list_bills(request: Request, store: RecordStore = Depends(get_record_store)):
    """List all bills, earliest due date first"""
    try:
        records = await store.select(BILLS_TABLE, order_by="due_date", ascending=True)
    except RecordStoreError as e:
        raise record_store_unavailable(e, get_request_id(request))

    return [BillResponse.from_domain(bill_from_record(r)) for r in records]


@router.post("/bills", response_model=BillResponse, status_code=201)
async def create_bill(
    request_body: BillCreate,
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    """
    Create a bill from the add-bill form.

    Installment bills (total_owed set) start with remaining_balance equal to
    total_owed and an empty payment history.
    """
    record = build_bill_record(BillForm(**request_body.model_dump()))

    try:
        created = await store.insert(BILLS_TABLE, [record])
    except RecordStoreError as e:
        raise record_store_unavailable(e, get_request_id(request))

    logging.info("Bill created", extra={"request_id": get_request_id(request), "bill_id": created[0].get("id")})
    return BillResponse.from_domain(bill_from_record(created[0]))


@router.get("/bills/{bill_id}", response_model=BillResponse)
async def get_bill(bill_id: int, request: Request, store: RecordStore = Depends(get_record_store)):
    try:
        records = await store.select(BILLS_TABLE, filters={"id": bill_id})
    except RecordStoreError as e:
        raise record_store_unavailable(e, get_request_id(request))

    if not records:
        raise HTTPException(status_code=404, detail="Bill not found")

    return BillResponse.from_domain(bill_from_record(records[0]))


@router.put("/bills/{bill_id}", response_model=BillResponse)
async def update_bill(
    bill_id: int,
    request_body: BillUpdate,
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    """
    Replace a bill with the editor's values.

    total_owed and remaining_balance are written as given; the two are not
    checked against each other or against the payment history.
    """
    values = build_bill_update(BillEdit(**request_body.model_dump()))

    try:
        updated = await store.update(BILLS_TABLE, values, filters={"id": bill_id})
    except RecordStoreError as e:
        raise record_store_unavailable(e, get_request_id(request))

    if not updated:
        raise HTTPException(status_code=404, detail="Bill not found")

    return BillResponse.from_domain(bill_from_record(updated[0]))


@router.delete("/bills/{bill_id}", status_code=204)
async def delete_bill(bill_id: int, request: Request, store: RecordStore = Depends(get_record_store)):
    try:
        await store.delete(BILLS_TABLE, filters={"id": bill_id})
    except RecordStoreError as e:
        raise record_store_unavailable(e, get_request_id(request))

    logging.info("Bill deleted", extra={"request_id": get_request_id(request), "bill_id": bill_id})
    return Response(status_code=204)

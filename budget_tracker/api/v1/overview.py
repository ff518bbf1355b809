"""GET /v1/overview - monthly income/expense summary"""

from fastapi import APIRouter, Depends, Request

from budget_tracker.api.v1.schemas import OverviewResponse
from budget_tracker.api.dependencies import get_record_store, get_request_id, record_store_unavailable
from budget_tracker.domain.bills import BILLS_TABLE, bill_from_record
from budget_tracker.domain.exceptions import RecordStoreError
from budget_tracker.domain.gateway import RecordStore
from budget_tracker.domain.overview import summarize
from budget_tracker.domain.paychecks import PAYCHECKS_TABLE, paycheck_from_record

router = APIRouter()


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(request: Request, store: RecordStore = Depends(get_record_store)):
    """
    Summarize monthly income, expenses and per-bill progress.

    Bills and paychecks are fetched fresh on every call.
    """
    try:
        bills = [bill_from_record(r) for r in await store.select(BILLS_TABLE)]
        paychecks = [paycheck_from_record(r) for r in await store.select(PAYCHECKS_TABLE)]
    except RecordStoreError as e:
        raise record_store_unavailable(e, get_request_id(request))

    return OverviewResponse.from_domain(summarize(bills, paychecks))

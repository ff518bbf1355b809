"""Dependency injection for FastAPI endpoints"""

import logging
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from budget_tracker.config import settings
from budget_tracker.domain.exceptions import RecordStoreError
from budget_tracker.domain.gateway import RecordStore
from budget_tracker.infrastructure.clients.record_store import RestRecordStore
from budget_tracker.infrastructure.database.repositories import SqlRecordStore
from budget_tracker.infrastructure.database.session import get_db
from budget_tracker.infrastructure.observability.metrics import record_store_failure


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    """Provide the configured record store backend"""
    if settings.record_store_backend == "rest":
        return RestRecordStore()
    return SqlRecordStore(db)


def record_store_unavailable(error: RecordStoreError, request_id: str) -> HTTPException:
    """Log a failed store call and build the 503 returned to the caller"""
    record_store_failure(error.table, error.operation)
    logging.error(f"Record store error: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=503, detail="Record store unavailable")

"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from budget_tracker.api.main import create_app
from budget_tracker.domain.bills import BillForm, build_bill_record
from budget_tracker.infrastructure.database.models import Base
from budget_tracker.infrastructure.database.repositories import SqlRecordStore
from budget_tracker.infrastructure.database.session import engine_options, get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, **engine_options(TEST_DATABASE_URL))
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db: Session) -> SqlRecordStore:
    """Record store backed by the test database"""
    return SqlRecordStore(db)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def installment_form() -> BillForm:
    """Car loan: $50/month against $200 owed"""
    return BillForm(
        name="Car Loan",
        amount="50",
        due_date="2024-03-15",
        total_owed="200",
        description="<p>Dealer financing</p>",
        is_recurring=True,
    )


@pytest.fixture
async def installment_bill_id(store: SqlRecordStore, installment_form: BillForm) -> int:
    """Insert the installment bill and return its id"""
    rows = await store.insert("bills", [build_bill_record(installment_form)])
    return rows[0]["id"]

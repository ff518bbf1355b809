"""SQLAlchemy-backed record store"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import Date, Numeric
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from budget_tracker.domain.bills import parse_decimal
from budget_tracker.domain.exceptions import RecordStoreError
from budget_tracker.domain.gateway import Record
from budget_tracker.infrastructure.database.models import TABLES, Base, BillRecord
from budget_tracker.utils.date_utils import to_date_string


def _to_record(row: Base, columns: Optional[List[str]] = None) -> Record:
    """Serialize an ORM row into the JSON-compatible boundary format"""
    names = columns or [c.name for c in row.__table__.columns]
    record: Record = {}
    for name in names:
        value = getattr(row, name)
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, (date, datetime)):
            value = value.isoformat()
        record[name] = value
    return record


def _coerce(model: type, values: Record) -> Record:
    """Convert boundary values (decimal strings, YYYY-MM-DD) into column types"""
    coerced = {}
    for name, value in values.items():
        column = model.__table__.columns[name]
        if value is not None and isinstance(column.type, Numeric):
            value = parse_decimal(value)
        elif isinstance(value, str) and isinstance(column.type, Date):
            value = date.fromisoformat(to_date_string(value))
        coerced[name] = value
    return coerced


class SqlRecordStore:
    """
    Record store over a SQLAlchemy session.

    Each call commits on its own, so no transaction spans two calls.
    """

    def __init__(self, db: Session):
        self.db = db

    def _model(self, table: str) -> type:
        try:
            return TABLES[table]
        except KeyError:
            raise RecordStoreError(f"Unknown table: {table}", table=table)

    def _query(self, model: type, filters: Optional[Dict[str, Any]]) -> Query:
        query = self.db.query(model)
        for name, value in (filters or {}).items():
            query = query.filter(getattr(model, name) == value)
        return query

    def _fail(self, table: str, operation: str, error: Exception) -> RecordStoreError:
        self.db.rollback()
        return RecordStoreError(f"{operation} on {table} failed: {error}", table=table, operation=operation)

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        columns: Optional[List[str]] = None,
    ) -> List[Record]:
        """Fetch rows matching all filters"""
        model = self._model(table)
        try:
            query = self._query(model, filters)
            if order_by:
                column = getattr(model, order_by)
                query = query.order_by(column.asc() if ascending else column.desc())
            rows = query.order_by(model.id.asc()).all()
        except SQLAlchemyError as e:
            raise self._fail(table, "select", e) from e
        return [_to_record(row, columns) for row in rows]

    async def insert(self, table: str, records: List[Record]) -> List[Record]:
        """Insert rows and return them with generated ids"""
        model = self._model(table)
        rows = [model(**_coerce(model, record)) for record in records]
        try:
            self.db.add_all(rows)
            self.db.commit()
            for row in rows:
                self.db.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail(table, "insert", e) from e
        return [_to_record(row) for row in rows]

    async def update(self, table: str, values: Record, filters: Dict[str, Any]) -> List[Record]:
        """Overwrite the given columns on every matching row"""
        model = self._model(table)
        coerced = _coerce(model, values)
        try:
            rows = self._query(model, filters).all()
            for row in rows:
                for name, value in coerced.items():
                    setattr(row, name, value)
            self.db.commit()
            for row in rows:
                self.db.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail(table, "update", e) from e
        return [_to_record(row) for row in rows]

    async def delete(self, table: str, filters: Dict[str, Any]) -> None:
        """Delete every matching row"""
        model = self._model(table)
        try:
            for row in self._query(model, filters).all():
                self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail(table, "delete", e) from e

    async def append_payment(self, bill_id: int, amount: Decimal, paid_at: str) -> Optional[Record]:
        """
        Append a payment under a row lock in one transaction.

        The new balance is derived from the stored remaining_balance, so
        concurrent payments on the same bill serialize instead of overwriting
        each other. Returns None if the bill does not exist.
        """
        table = BillRecord.__tablename__
        try:
            bill = (
                self.db.query(BillRecord)
                .filter(BillRecord.id == bill_id)
                .with_for_update()
                .first()
            )
            if bill is None:
                self.db.rollback()
                return None

            balance = bill.remaining_balance if bill.remaining_balance is not None else bill.total_owed
            bill.remaining_balance = parse_decimal(balance) - parse_decimal(amount)
            bill.payment_dates = list(bill.payment_dates or []) + [paid_at]
            bill.payment_amounts = list(bill.payment_amounts or []) + [str(amount)]
            self.db.commit()
            self.db.refresh(bill)
        except SQLAlchemyError as e:
            raise self._fail(table, "append_payment", e) from e
        return _to_record(bill)

"""Bill entity rules: form parsing, defaulting and record conversion"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from budget_tracker.domain.models import Bill
from budget_tracker.utils.date_utils import to_date_string

BILLS_TABLE = "bills"


@dataclass
class BillForm:
    """Raw input from the add-bill form"""

    name: str
    amount: str
    due_date: date | str
    total_owed: Optional[str] = ""
    description: str = ""
    is_recurring: bool = False


@dataclass
class BillEdit:
    """Edited values from the bill editor, replacing the stored record"""

    name: str
    amount: str
    due_date: date | str
    total_owed: Optional[str] = None  # None keeps a plain bill plain
    description: str = ""
    is_recurring: bool = False
    remaining_balance: Optional[Decimal] = None
    payment_dates: Optional[List[str]] = None
    payment_amounts: Optional[List[Decimal]] = None


def parse_decimal(raw: Any) -> Decimal:
    """
    Coerce form input to Decimal.

    Input that does not parse becomes Decimal("NaN") and keeps flowing
    through arithmetic instead of being rejected.
    """
    if isinstance(raw, Decimal):
        return raw
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return Decimal(str(raw))
    try:
        return Decimal(str(raw).strip())
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("NaN")


def _parse_optional_decimal(raw: Any) -> Optional[Decimal]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    return parse_decimal(raw)


def _decimal_to_record(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


def build_bill_record(form: BillForm) -> Dict[str, Any]:
    """
    Build the insert payload for a new bill.

    Rules:
    - amount is parsed to a decimal, unparseable input becomes NaN
    - empty total_owed maps to None (not an installment bill)
    - when total_owed is set, remaining_balance starts equal to it and
      the payment history starts empty
    """
    record: Dict[str, Any] = {
        "name": form.name,
        "amount": str(parse_decimal(form.amount)),
        "due_date": to_date_string(form.due_date),
        "description": form.description or "",
        "is_recurring": bool(form.is_recurring),
        "total_owed": None,
    }

    total_owed = _parse_optional_decimal(form.total_owed)
    if total_owed is not None:
        record["total_owed"] = str(total_owed)
        record["remaining_balance"] = str(total_owed)
        record["payment_dates"] = []
        record["payment_amounts"] = []

    return record


def build_bill_update(edit: BillEdit) -> Dict[str, Any]:
    """
    Full field-for-field replacement of a bill record.

    A total_owed the editor cleared (empty string) becomes 0, unlike creation
    which maps it to None. A None total_owed is written back as None, so a
    plain bill stays plain. remaining_balance is written back as given and is not
    reconciled against total_owed.
    """
    if edit.total_owed is None:
        total_owed = None
    else:
        total_owed = _parse_optional_decimal(edit.total_owed)
        if total_owed is None:
            total_owed = Decimal("0")

    return {
        "name": edit.name,
        "amount": str(parse_decimal(edit.amount)),
        "due_date": to_date_string(edit.due_date),
        "description": edit.description or "",
        "is_recurring": bool(edit.is_recurring),
        "total_owed": _decimal_to_record(total_owed),
        "remaining_balance": _decimal_to_record(
            None if edit.remaining_balance is None else parse_decimal(edit.remaining_balance)
        ),
        "payment_dates": list(edit.payment_dates or []),
        "payment_amounts": [str(parse_decimal(a)) for a in edit.payment_amounts or []],
    }


def bill_from_record(record: Dict[str, Any]) -> Bill:
    """Normalize a record store row into a Bill"""
    due_date = record.get("due_date")
    if isinstance(due_date, str):
        due_date = date.fromisoformat(to_date_string(due_date))

    return Bill(
        id=record.get("id"),
        name=record.get("name") or "",
        amount=parse_decimal(record.get("amount")),
        due_date=due_date,
        description=record.get("description") or "",
        is_recurring=bool(record.get("is_recurring")),
        total_owed=_parse_optional_decimal(record.get("total_owed")),
        remaining_balance=_parse_optional_decimal(record.get("remaining_balance")),
        payment_dates=list(record.get("payment_dates") or []),
        payment_amounts=[parse_decimal(a) for a in record.get("payment_amounts") or []],
    )

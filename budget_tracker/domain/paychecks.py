"""Paycheck form parsing and record conversion"""

from typing import Any, Dict

from budget_tracker.domain.bills import parse_decimal
from budget_tracker.domain.models import Frequency, Paycheck

PAYCHECKS_TABLE = "paychecks"


def build_paycheck_record(amount: str, frequency: Frequency | str = Frequency.MONTHLY) -> Dict[str, Any]:
    """Insert payload for the add-paycheck form"""
    return {
        "amount": str(parse_decimal(amount)),
        "frequency": Frequency(frequency).value,
    }


def paycheck_from_record(record: Dict[str, Any]) -> Paycheck:
    return Paycheck(
        id=record.get("id"),
        amount=parse_decimal(record.get("amount")),
        frequency=Frequency(record.get("frequency") or Frequency.MONTHLY),
    )

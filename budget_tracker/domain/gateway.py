"""Record store interface shared by the SQL and REST backends"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Protocol

Record = Dict[str, Any]


class RecordStore(Protocol):
    """
    Table-oriented CRUD against the record store.

    Every call is a single round trip with no transaction spanning calls.
    Filters are column equality matches. Failures raise RecordStoreError.
    """

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        columns: Optional[List[str]] = None,
    ) -> List[Record]:
        ...

    async def insert(self, table: str, records: List[Record]) -> List[Record]:
        ...

    async def update(self, table: str, values: Record, filters: Dict[str, Any]) -> List[Record]:
        ...

    async def delete(self, table: str, filters: Dict[str, Any]) -> None:
        ...

    async def append_payment(self, bill_id: int, amount: Decimal, paid_at: str) -> Optional[Record]:
        """Append one payment and decrement remaining_balance in a single atomic call; None if no such bill"""
        ...

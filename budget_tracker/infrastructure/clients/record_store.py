"""PostgREST HTTP client implementing the record store interface"""

import httpx
from decimal import Decimal
from typing import Any, Dict, List, Optional
from budget_tracker.domain.exceptions import RecordStoreError
from budget_tracker.domain.gateway import Record
from budget_tracker.config import settings


class RestRecordStore:
    """Client for a hosted Postgres exposed through PostgREST"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.record_store_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.record_store_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Prefer": "return=representation"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @staticmethod
    def _filter_params(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
        """Translate equality filters into PostgREST operators (id=eq.3)"""
        params = {}
        for name, value in (filters or {}).items():
            if value is None:
                params[name] = "is.null"
            elif isinstance(value, bool):
                params[name] = f"eq.{str(value).lower()}"
            else:
                params[name] = f"eq.{value}"
        return params

    async def _request(
        self,
        method: str,
        table: str,
        operation: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
    ) -> Any:
        """
        Send one request to the record store.

        Raises:
            RecordStoreError: On timeout, network failure, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    params=params,
                    json=json,
                    headers=self._headers(),
                )
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()

            except httpx.TimeoutException as e:
                raise RecordStoreError(
                    f"Record store timeout after {self.timeout}s", table=table, operation=operation
                ) from e
            except httpx.HTTPStatusError as e:
                raise RecordStoreError(
                    f"Record store error: {e.response.status_code}", table=table, operation=operation
                ) from e
            except httpx.RequestError as e:
                raise RecordStoreError(f"Record store unreachable: {e}", table=table, operation=operation) from e
            except ValueError as e:
                raise RecordStoreError(
                    f"Invalid response from record store: {e}", table=table, operation=operation
                ) from e

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        columns: Optional[List[str]] = None,
    ) -> List[Record]:
        params = self._filter_params(filters)
        params["select"] = ",".join(columns) if columns else "*"
        if order_by:
            params["order"] = f"{order_by}.{'asc' if ascending else 'desc'}"
        return await self._request("GET", table, "select", f"/rest/v1/{table}", params=params) or []

    async def insert(self, table: str, records: List[Record]) -> List[Record]:
        return await self._request("POST", table, "insert", f"/rest/v1/{table}", json=records) or []

    async def update(self, table: str, values: Record, filters: Dict[str, Any]) -> List[Record]:
        return (
            await self._request(
                "PATCH", table, "update", f"/rest/v1/{table}", params=self._filter_params(filters), json=values
            )
            or []
        )

    async def delete(self, table: str, filters: Dict[str, Any]) -> None:
        await self._request("DELETE", table, "delete", f"/rest/v1/{table}", params=self._filter_params(filters))

    async def append_payment(self, bill_id: int, amount: Decimal, paid_at: str) -> Optional[Record]:
        """Call the append_bill_payment stored procedure (see db/schema.sql)"""
        result = await self._request(
            "POST",
            "bills",
            "append_payment",
            "/rest/v1/rpc/append_bill_payment",
            json={"p_bill_id": bill_id, "p_amount": str(amount), "p_paid_at": paid_at},
        )
        if isinstance(result, list):
            return result[0] if result else None
        return result

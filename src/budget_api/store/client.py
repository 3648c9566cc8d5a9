"""Async Airtable REST client.

Wraps a single ``httpx.AsyncClient`` for the lifetime of one API request.
Only the two calls the service needs are exposed: list (one page) and
batch create.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from budget_api.config import Settings
from budget_api.core.exceptions import MissingCredentialsError, RemoteStoreError

logger = logging.getLogger(__name__)

# Airtable accepts at most 10 records per create request.
MAX_RECORDS_PER_CREATE = 10


@dataclass
class RecordPage:
    """One page of a list request."""

    records: list[dict[str, Any]] = field(default_factory=list)
    offset: str | None = None


def _error_message(payload: Any) -> str:
    """Extract Airtable's error message, else serialize the whole body."""
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return json.dumps(payload)


class AirtableClient:
    """Minimal Airtable client used as an async context manager.

    Example:
        async with AirtableClient.from_settings(settings) as store:
            page = await store.list_records("appXXX", "tblYYY", page_size=100)
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.airtable.com/v0",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "AirtableClient":
        """Build a client from settings.

        Raises:
            MissingCredentialsError: If no Airtable token is configured
        """
        if not settings.airtable_token:
            raise MissingCredentialsError()
        return cls(
            token=settings.airtable_token,
            api_url=settings.airtable_api_url,
            timeout=settings.airtable_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "AirtableClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON body.

        Raises:
            RemoteStoreError: On transport failure or any non-2xx response
        """
        try:
            response = await self._client.request(method, path, params=params, json=json_body)
        except httpx.HTTPError as exc:
            logger.error(
                "Airtable request failed",
                extra={"method": method, "path": path, "error_type": type(exc).__name__},
            )
            raise RemoteStoreError(str(exc) or type(exc).__name__) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if not response.is_success:
            message = _error_message(payload)
            logger.warning(
                "Airtable returned an error",
                extra={"method": method, "path": path, "status_code": response.status_code},
            )
            raise RemoteStoreError(message, status_code=response.status_code)

        return payload

    async def list_records(
        self,
        base_id: str,
        table_id: str,
        *,
        page_size: int = 100,
        filter_formula: str | None = None,
        cell_format: str | None = None,
        user_locale: str | None = None,
        time_zone: str | None = None,
        offset: str | None = None,
    ) -> RecordPage:
        """Fetch one page of records.

        Args:
            base_id: Airtable base ID
            table_id: Table ID or name within the base
            page_size: Records per page (Airtable maximum is 100)
            filter_formula: Optional filterByFormula expression
            cell_format: Optional cellFormat ("json" or "string")
            user_locale: Optional userLocale
            time_zone: Optional timeZone used to evaluate date formulas
            offset: Continuation token from the previous page

        Returns:
            RecordPage with the records and the next continuation token (if any)
        """
        params: dict[str, Any] = {"pageSize": page_size}
        optional = {
            "cellFormat": cell_format,
            "userLocale": user_locale,
            "timeZone": time_zone,
            "filterByFormula": filter_formula,
            "offset": offset,
        }
        params.update({key: value for key, value in optional.items() if value is not None})

        payload = await self._request("GET", f"/{base_id}/{table_id}", params=params)
        return RecordPage(records=payload.get("records") or [], offset=payload.get("offset") or None)

    async def create_records(
        self,
        base_id: str,
        table_id: str,
        records: list[dict[str, Any]],
        typecast: bool = True,
    ) -> list[dict[str, Any]]:
        """Create up to 10 records in one request.

        Args:
            base_id: Airtable base ID
            table_id: Table ID or name within the base
            records: Items shaped like {"fields": {...}}
            typecast: Let Airtable coerce loose values (e.g. link by name)

        Returns:
            Created records as returned by Airtable ({"id", "fields", ...})
        """
        if len(records) > MAX_RECORDS_PER_CREATE:
            raise ValueError(
                f"Airtable accepts at most {MAX_RECORDS_PER_CREATE} records per create, got {len(records)}"
            )
        payload = await self._request(
            "POST",
            f"/{base_id}/{table_id}",
            json_body={"records": records, "typecast": typecast},
        )
        return payload.get("records") or []

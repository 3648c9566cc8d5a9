"""Continuation-token pagination over an Airtable list query."""

from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterator
from typing import Any

from budget_api.core.exceptions import InvalidMonthError
from budget_api.store.client import AirtableClient

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def validate_month(month: str | None) -> str:
    """Return ``month`` if it looks like YYYY-MM.

    Raises:
        InvalidMonthError: If month is missing or malformed
    """
    if not month or not _MONTH_RE.fullmatch(month):
        raise InvalidMonthError()
    return month


def month_filter(month: str) -> str:
    """Formula matching records whose {Date} falls in ``month``."""
    return f"DATETIME_FORMAT({{Date}}, 'YYYY-MM')='{month}'"


class Paginator:
    """Async iterable over every record matched by a list query.

    Pages are requested one at a time; each request sends the previous
    page's offset back unchanged and iteration ends on the first page
    without one. Store errors propagate and end the iteration.
    """

    def __init__(
        self,
        store: AirtableClient,
        base_id: str,
        table_id: str,
        *,
        page_size: int = 100,
        filter_formula: str | None = None,
        cell_format: str | None = "json",
        user_locale: str | None = None,
        time_zone: str | None = None,
    ):
        self.store = store
        self.base_id = base_id
        self.table_id = table_id
        self.page_size = page_size
        self.filter_formula = filter_formula
        self.cell_format = cell_format
        self.user_locale = user_locale
        self.time_zone = time_zone
        self.pages = 0

    async def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        offset: str | None = None
        while True:
            page = await self.store.list_records(
                self.base_id,
                self.table_id,
                page_size=self.page_size,
                filter_formula=self.filter_formula,
                cell_format=self.cell_format,
                user_locale=self.user_locale,
                time_zone=self.time_zone,
                offset=offset,
            )
            self.pages += 1
            for record in page.records:
                yield record
            offset = page.offset
            if not offset:
                break

    async def collect(self) -> list[dict[str, Any]]:
        """Fetch all pages and return the concatenated records."""
        records = [record async for record in self]
        logger.debug(
            "Fetched records",
            extra={"table_id": self.table_id, "pages": self.pages, "records": len(records)},
        )
        return records

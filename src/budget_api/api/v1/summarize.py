"""Monthly transaction summary endpoint."""

from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, Query

from budget_api.api.deps import get_store_transport
from budget_api.config import Settings, get_settings
from budget_api.reconcile.paginator import validate_month
from budget_api.schemas.summary import MonthSummary
from budget_api.services.summary import SummaryService
from budget_api.store.client import AirtableClient

router = APIRouter(tags=["summaries"])


@router.get(
    "/summarize",
    response_model=MonthSummary,
    summary="Summarize a month of transactions",
    description="""
    Fetch every transaction whose **Date** falls in the given month and total
    the amounts overall and per category.

    - Amounts are summed in integer cents, then rounded to two decimals.
    - A transaction linked to several categories counts fully in each of them.
    - Transactions without a category are grouped under `(Uncategorized)`.
    - Categories appear in the order they were first seen.
    """,
)
async def summarize_month(
    month: Annotated[str | None, Query(description="Month to summarize (YYYY-MM)")] = None,
    time_zone: Annotated[
        str | None, Query(alias="timeZone", description="Time zone used to evaluate {Date}")
    ] = None,
    base_id: Annotated[str | None, Query(alias="baseId")] = None,
    table_id: Annotated[str | None, Query(alias="tableId")] = None,
    categories_table_id: Annotated[str | None, Query(alias="categoriesTableId")] = None,
    settings: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_store_transport),
) -> MonthSummary:
    """
    Summarize transactions for one month.

    Args:
        month: Month as YYYY-MM
        time_zone: Optional time zone (defaults to settings.default_time_zone)
        base_id: Optional Airtable base override
        table_id: Optional transactions table override
        categories_table_id: Optional categories table override
        settings: Application settings
        transport: Outgoing HTTP transport

    Returns:
        Month totals with per-category breakdown
    """
    month = validate_month(month)

    async with AirtableClient.from_settings(settings, transport=transport) as store:
        service = SummaryService(store, settings)
        return await service.summarize_month(
            month,
            time_zone=time_zone,
            base_id=base_id,
            table_id=table_id,
            categories_table_id=categories_table_id,
        )

"""Budget row creation endpoint."""

from typing import Annotated

import httpx
from fastapi import APIRouter, Body, Depends, Query

from budget_api.api.deps import get_store_transport
from budget_api.config import Settings, get_settings
from budget_api.core.exceptions import EmptyPayloadError
from budget_api.schemas.budget import BudgetCreateRequest, BudgetCreateResult
from budget_api.services.budget import BudgetService
from budget_api.store.client import AirtableClient

router = APIRouter(tags=["budgets"])


@router.post(
    "/budgets",
    response_model=BudgetCreateResult,
    summary="Create budget rows",
    description="""
    Create budget rows in Airtable. Each row names its category either by
    record ID (**CategoryId**) or by name (**CategoryName**, case-insensitive).

    Rows whose category cannot be found are reported in `failures` and are not
    sent. Valid rows are created 10 at a time; if Airtable fails mid-way the
    request errors and rows from earlier batches remain created.
    """,
)
async def create_budgets(
    payload: Annotated[BudgetCreateRequest | None, Body()] = None,
    base_id: Annotated[str | None, Query(alias="baseId")] = None,
    budgets_table_id: Annotated[str | None, Query(alias="budgetsTableId")] = None,
    categories_table_id: Annotated[str | None, Query(alias="categoriesTableId")] = None,
    settings: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_store_transport),
) -> BudgetCreateResult:
    """
    Create budget rows.

    Args:
        payload: Request body with rows[]
        base_id: Optional Airtable base override
        budgets_table_id: Optional budgets table override
        categories_table_id: Optional categories table override
        settings: Application settings
        transport: Outgoing HTTP transport

    Returns:
        Created records and per-row failures
    """
    rows = payload.rows if payload else []
    if not rows:
        raise EmptyPayloadError()

    async with AirtableClient.from_settings(settings, transport=transport) as store:
        service = BudgetService(store, settings)
        return await service.create_budgets(
            rows,
            base_id=base_id,
            budgets_table_id=budgets_table_id,
            categories_table_id=categories_table_id,
        )

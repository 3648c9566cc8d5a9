"""Budget row creation service."""

import logging
from typing import Sequence

from budget_api.config import Settings
from budget_api.core.exceptions import EmptyPayloadError
from budget_api.reconcile.batch_writer import (
    BudgetFieldMap,
    prepare_budget_records,
    write_in_chunks,
)
from budget_api.reconcile.resolver import load_category_index
from budget_api.schemas.budget import BudgetCreateResult, BudgetRowIn, CreatedRecord, RowFailure
from budget_api.store.client import AirtableClient

logger = logging.getLogger(__name__)


def field_map_from_settings(settings: Settings) -> BudgetFieldMap:
    return BudgetFieldMap(
        month=settings.budget_field_month,
        category=settings.budget_field_category,
        planned=settings.budget_field_planned,
        notes=settings.budget_field_notes,
    )


class BudgetService:
    """Service layer for creating budget rows."""

    def __init__(self, store: AirtableClient, settings: Settings):
        """Initialize budget service.

        Args:
            store: Open Airtable client for this request
            settings: Application settings (defaults for IDs and field names)
        """
        self.store = store
        self.settings = settings

    async def create_budgets(
        self,
        rows: Sequence[BudgetRowIn],
        base_id: str | None = None,
        budgets_table_id: str | None = None,
        categories_table_id: str | None = None,
    ) -> BudgetCreateResult:
        """Resolve categories, validate rows and create them in chunks of 10.

        Rows whose category cannot be resolved (or whose Planned value is not
        numeric) are reported in ``failures`` and never sent to Airtable.

        Raises:
            EmptyPayloadError: If rows is empty
            RemoteStoreError: If the category scan fails
            BatchWriteError: If a create chunk fails (earlier chunks stay created)
        """
        if not rows:
            raise EmptyPayloadError()
        base_id = base_id or self.settings.airtable_base_id
        budgets_table_id = budgets_table_id or self.settings.airtable_budgets_table_id
        categories_table_id = categories_table_id or self.settings.airtable_categories_table_id

        index = await load_category_index(
            self.store,
            base_id,
            categories_table_id,
            page_size=self.settings.airtable_page_size,
            user_locale=self.settings.user_locale,
        )
        prepared = prepare_budget_records(rows, index, field_map_from_settings(self.settings))
        created = await write_in_chunks(self.store, base_id, budgets_table_id, prepared.records)

        logger.info(
            "Budget rows written",
            extra={
                "table_id": budgets_table_id,
                "requested": len(rows),
                "created_count": len(created),
                "failed_count": len(prepared.failures),
            },
        )
        return BudgetCreateResult(
            created_count=len(created),
            failed_count=len(prepared.failures),
            failures=[
                RowFailure(index=failure.index, reason=failure.reason)
                for failure in prepared.failures
            ],
            records=[
                CreatedRecord(id=record["id"], fields=record.get("fields") or {})
                for record in created
            ],
        )

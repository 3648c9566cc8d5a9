"""Monthly transaction summary service."""

import logging

from budget_api.config import Settings
from budget_api.core.money import cents_to_amount
from budget_api.reconcile.aggregator import Aggregation, aggregate
from budget_api.reconcile.paginator import Paginator, month_filter, validate_month
from budget_api.reconcile.resolver import referenced_category_ids, resolve_category_names
from budget_api.schemas.summary import CategoryTotal, MonthSummary, SummaryDebug
from budget_api.store.client import AirtableClient

logger = logging.getLogger(__name__)


def build_month_summary(month: str, aggregation: Aggregation, pages: int) -> MonthSummary:
    """Convert an aggregation (cents) into the response model (two decimals)."""
    return MonthSummary(
        month=month,
        count=aggregation.count,
        total=cents_to_amount(aggregation.total_cents),
        by_category=[
            CategoryTotal(
                name=bucket.name,
                count=bucket.count,
                total=cents_to_amount(bucket.total_cents),
            )
            for bucket in aggregation.buckets
        ],
        debug=SummaryDebug(pages=pages),
    )


class SummaryService:
    """Service layer for month summaries."""

    def __init__(self, store: AirtableClient, settings: Settings):
        """Initialize summary service.

        Args:
            store: Open Airtable client for this request
            settings: Application settings (defaults for IDs and query params)
        """
        self.store = store
        self.settings = settings

    async def summarize_month(
        self,
        month: str,
        time_zone: str | None = None,
        base_id: str | None = None,
        table_id: str | None = None,
        categories_table_id: str | None = None,
    ) -> MonthSummary:
        """Fetch, resolve and total every transaction dated in ``month``.

        Args:
            month: Month as YYYY-MM
            time_zone: Time zone used to evaluate {Date}; defaults from settings
            base_id: Airtable base; defaults from settings
            table_id: Transactions table; defaults from settings
            categories_table_id: Categories table; defaults from settings

        Returns:
            MonthSummary response model

        Raises:
            InvalidMonthError: If month is not YYYY-MM
            RemoteStoreError: If any Airtable call fails
        """
        month = validate_month(month)
        base_id = base_id or self.settings.airtable_base_id
        table_id = table_id or self.settings.airtable_transactions_table_id
        categories_table_id = categories_table_id or self.settings.airtable_categories_table_id

        paginator = Paginator(
            self.store,
            base_id,
            table_id,
            page_size=self.settings.airtable_page_size,
            filter_formula=month_filter(month),
            cell_format="json",
            user_locale=self.settings.user_locale,
            time_zone=time_zone or self.settings.default_time_zone,
        )
        records = await paginator.collect()

        category_ids = referenced_category_ids(records)
        id_to_name: dict[str, str] = {}
        if category_ids:
            id_to_name = await resolve_category_names(
                self.store, base_id, categories_table_id, category_ids
            )

        aggregation = aggregate(records, id_to_name)

        logger.info(
            "Month summarized",
            extra={
                "month": month,
                "pages": paginator.pages,
                "transactions": aggregation.count,
                "categories": len(aggregation.buckets),
            },
        )
        return build_month_summary(month, aggregation, paginator.pages)

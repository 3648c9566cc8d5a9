"""Response schemas for monthly transaction summaries."""

from pydantic import BaseModel, Field


class CategoryTotal(BaseModel):
    """Spend attributed to one category bucket."""

    name: str = Field(description="Category name, raw record ID if unresolved, or (Uncategorized)")
    count: int = Field(description="Number of transactions in the bucket")
    total: float = Field(description="Sum of amounts (two decimals)")


class SummaryDebug(BaseModel):
    pages: int = Field(description="Number of transaction pages fetched")


class MonthSummary(BaseModel):
    """Totals for every transaction dated in one month.

    A transaction linked to several categories appears in each of their
    buckets, so by_category totals may add up to more than ``total``.
    """

    month: str = Field(description="Month summarized (YYYY-MM)")
    count: int = Field(description="Number of transactions in the month")
    total: float = Field(description="Grand total (two decimals)")
    by_category: list[CategoryTotal] = Field(
        description="Per-category totals in first-seen order"
    )
    debug: SummaryDebug

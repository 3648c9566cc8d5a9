"""Request/response schemas for budget row creation."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# Request schemas


class BudgetRowIn(BaseModel):
    """One budget row as sent by clients (Airtable-style field names).

    Values are taken as sent. A row with an unusable category or Planned
    value is reported as a row failure, not a request error.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    month: Any = Field(None, alias="Month", description="Budget month, e.g. 2025-10")
    category_id: Any = Field(None, alias="CategoryId", description="Category record ID")
    category_name: Any = Field(
        None, alias="CategoryName", description="Category name (case-insensitive)"
    )
    planned: Any = Field(None, alias="Planned", description="Planned amount; empty means 0")
    notes: Any = Field(None, alias="Notes")


class BudgetCreateRequest(BaseModel):
    rows: list[BudgetRowIn] = Field(default_factory=list)


# Response schemas


class RowFailure(BaseModel):
    """A row rejected before reaching Airtable."""

    index: int = Field(description="Position of the row in the request")
    reason: str


class CreatedRecord(BaseModel):
    id: str
    fields: dict[str, Any] = Field(default_factory=dict)


class BudgetCreateResult(BaseModel):
    """Outcome of a budget creation request."""

    created_count: int
    failed_count: int
    failures: list[RowFailure]
    records: list[CreatedRecord]

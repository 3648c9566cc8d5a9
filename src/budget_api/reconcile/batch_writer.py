"""Budget row validation and chunked record creation.

Rows are validated up front; only rows with a resolvable category and a
numeric Planned value are sent. Creation then runs chunk by chunk in order.
If a chunk fails, later chunks are skipped and records created by earlier
chunks stay in Airtable.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence, TypeVar

from budget_api.core.exceptions import BatchWriteError, RemoteStoreError
from budget_api.reconcile.resolver import CategoryIndex
from budget_api.store.client import MAX_RECORDS_PER_CREATE, AirtableClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

REASON_CATEGORY = "Missing CategoryId/CategoryName or not found"
REASON_PLANNED = "Planned must be a number"


@dataclass(frozen=True)
class BudgetFieldMap:
    """Airtable field names of the budgets table."""

    month: str = "Month"
    category: str = "Category"
    planned: str = "Planned $"
    notes: str = "Notes"


@dataclass
class RowFailure:
    index: int
    reason: str


@dataclass
class PreparedBatch:
    records: list[dict[str, Any]] = field(default_factory=list)
    failures: list[RowFailure] = field(default_factory=list)


def coerce_planned(value: Any) -> int | float:
    """Coerce a Planned value to a number; null and empty count as 0.

    Raises:
        ValueError: If the value is not numeric
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    else:
        text = str(value).strip()
        try:
            return int(text)
        except ValueError:
            number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return number


def prepare_budget_records(
    rows: Sequence[Any],
    index: CategoryIndex,
    fields: BudgetFieldMap = BudgetFieldMap(),
) -> PreparedBatch:
    """Validate budget rows and build Airtable create payloads.

    Args:
        rows: Objects with month, category_id, category_name, planned, notes
        index: Category lookup built from a full scan
        fields: Target field names

    Returns:
        PreparedBatch with create payloads and per-row failures (by input index)
    """
    batch = PreparedBatch()
    for i, row in enumerate(rows):
        category_id = index.resolve(row.category_id, row.category_name)
        if not category_id:
            batch.failures.append(RowFailure(index=i, reason=REASON_CATEGORY))
            continue

        try:
            planned = coerce_planned(row.planned)
        except ValueError:
            batch.failures.append(RowFailure(index=i, reason=REASON_PLANNED))
            continue

        record_fields: dict[str, Any] = {
            fields.month: row.month,
            fields.category: [category_id],
            fields.planned: planned,
        }
        if row.notes:
            record_fields[fields.notes] = row.notes
        batch.records.append({"fields": record_fields})

    return batch


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most ``size`` items."""
    if size < 1:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(items), size):
        yield items[start : start + size]


async def write_in_chunks(
    store: AirtableClient,
    base_id: str,
    table_id: str,
    records: Sequence[dict[str, Any]],
    *,
    chunk_size: int = MAX_RECORDS_PER_CREATE,
) -> list[dict[str, Any]]:
    """Create records sequentially in chunks, returning created records in order.

    Raises:
        BatchWriteError: If a chunk fails; carries the records created so far
    """
    created: list[dict[str, Any]] = []
    for chunk_index, chunk in enumerate(chunked(records, chunk_size)):
        try:
            created.extend(await store.create_records(base_id, table_id, list(chunk), typecast=True))
        except RemoteStoreError as exc:
            logger.error(
                "Budget write aborted",
                extra={
                    "table_id": table_id,
                    "chunk_index": chunk_index,
                    "created_count": len(created),
                },
            )
            raise BatchWriteError(
                exc.message or str(exc),
                created=created,
                chunk_index=chunk_index,
                status_code=exc.status_code,
            ) from exc
    return created

"""Category identifier resolution.

Two lookups against the categories table:

- ``load_category_index`` scans the whole table once and maps lowercased
  names to record IDs (budget creation, where users type names).
- ``resolve_category_names`` fetches only the IDs seen in transactions and
  maps them to display names (month summaries).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from budget_api.reconcile.paginator import Paginator
from budget_api.store.client import AirtableClient

logger = logging.getLogger(__name__)

# Keeps OR(RECORD_ID()=...) formulas under Airtable's URL length limit.
MAX_IDS_PER_LOOKUP = 50


@dataclass
class CategoryIndex:
    """Lowercased category name -> record ID, plus every ID seen.

    When two categories share a lowercased name, the one listed first wins;
    which one that is depends on the store's page order.
    """

    by_name: dict[str, str] = field(default_factory=dict)
    ids: set[str] = field(default_factory=set)

    def add(self, record: dict[str, Any]) -> None:
        record_id = record["id"]
        self.ids.add(record_id)
        self.by_name.setdefault(str(lookup_name(record)).lower(), record_id)

    def resolve(self, category_id: Any = None, category_name: Any = None) -> str | None:
        """Resolve an explicit ID or a case-insensitive name to a known record ID.

        Only a string naming a scanned record counts as an ID; anything else
        falls through to the name lookup.
        """
        if isinstance(category_id, str) and category_id in self.ids:
            return category_id
        if isinstance(category_name, (str, int, float)) and category_name:
            return self.by_name.get(str(category_name).lower())
        return None


def lookup_name(record: dict[str, Any]) -> Any:
    """Name used for lookups: Name, else Category, else the record ID."""
    fields = record.get("fields") or {}
    if fields.get("Name") is not None:
        return fields["Name"]
    if fields.get("Category") is not None:
        return fields["Category"]
    return record["id"]


def display_name(record: dict[str, Any]) -> str:
    """Name shown in summaries: Name, else the record ID."""
    fields = record.get("fields") or {}
    return str(fields.get("Name") or record["id"])


def category_refs(value: Any) -> list[str]:
    """Normalize a transaction's Category cell to a list of IDs."""
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str) and item]
    if isinstance(value, str) and value:
        return [value]
    return []


def referenced_category_ids(records: Iterable[dict[str, Any]]) -> list[str]:
    """Unique category IDs referenced by transactions, in first-seen order."""
    seen: dict[str, None] = {}
    for record in records:
        for category_id in category_refs((record.get("fields") or {}).get("Category")):
            seen.setdefault(category_id, None)
    return list(seen)


def record_id_formula(ids: Iterable[str]) -> str:
    """OR-of-equality formula matching the given record IDs."""
    return "OR(" + ",".join(f"RECORD_ID()='{record_id}'" for record_id in ids) + ")"


async def load_category_index(
    store: AirtableClient,
    base_id: str,
    table_id: str,
    *,
    page_size: int = 100,
    user_locale: str = "en-us",
) -> CategoryIndex:
    """Scan the whole categories table into a CategoryIndex."""
    index = CategoryIndex()
    paginator = Paginator(
        store,
        base_id,
        table_id,
        page_size=page_size,
        cell_format="json",
        user_locale=user_locale,
    )
    async for record in paginator:
        index.add(record)

    logger.info(
        "Loaded category index",
        extra={"table_id": table_id, "pages": paginator.pages, "categories": len(index.ids)},
    )
    return index


async def resolve_category_names(
    store: AirtableClient,
    base_id: str,
    table_id: str,
    ids: list[str],
    *,
    batch_size: int = MAX_IDS_PER_LOOKUP,
    page_size: int = 100,
) -> dict[str, str]:
    """Map category IDs to display names, fetching only the given IDs.

    IDs the table does not contain are left out of the mapping; callers
    fall back to showing the raw ID.
    """
    id_to_name: dict[str, str] = {}
    for start in range(0, len(ids), batch_size):
        batch = ids[start : start + batch_size]
        paginator = Paginator(
            store,
            base_id,
            table_id,
            page_size=page_size,
            filter_formula=record_id_formula(batch),
            cell_format=None,
        )
        async for record in paginator:
            id_to_name[record["id"]] = display_name(record)

    unresolved = len(ids) - sum(1 for category_id in ids if category_id in id_to_name)
    if unresolved:
        logger.warning(
            "Category IDs not found in categories table",
            extra={"table_id": table_id, "unresolved": unresolved},
        )
    return id_to_name

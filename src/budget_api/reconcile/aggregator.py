"""Per-category and grand totals in integer cents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from budget_api.core.money import to_cents
from budget_api.reconcile.resolver import category_refs

UNCATEGORIZED = "(Uncategorized)"


@dataclass
class CategoryBucket:
    name: str
    count: int = 0
    total_cents: int = 0


@dataclass
class Aggregation:
    """Result of one aggregation pass.

    ``buckets`` keeps first-observation order. A transaction linked to
    several categories is counted in full in each of their buckets but only
    once in ``total_cents``, so bucket totals can add up to more than the
    grand total.
    """

    count: int = 0
    total_cents: int = 0
    buckets: list[CategoryBucket] = field(default_factory=list)


def bucket_keys(category_value: Any, id_to_name: dict[str, str]) -> list[str]:
    """Bucket keys for one transaction: resolved name, else raw ID."""
    refs = category_refs(category_value)
    if not refs:
        return [UNCATEGORIZED]
    return [id_to_name.get(category_id, category_id) for category_id in refs]


def aggregate(records: Iterable[dict[str, Any]], id_to_name: dict[str, str]) -> Aggregation:
    """Sum transaction amounts overall and per category."""
    result = Aggregation()
    buckets: dict[str, CategoryBucket] = {}

    for record in records:
        fields = record.get("fields") or {}
        cents = to_cents(fields.get("Amount"))
        result.count += 1
        result.total_cents += cents

        for key in bucket_keys(fields.get("Category"), id_to_name):
            bucket = buckets.get(key)
            if bucket is None:
                bucket = buckets[key] = CategoryBucket(name=key)
            bucket.count += 1
            bucket.total_cents += cents

    result.buckets = list(buckets.values())
    return result

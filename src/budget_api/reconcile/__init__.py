"""Reconciliation pipeline stages.

Paginator -> Resolver -> Aggregator (month summaries) or Batch Writer
(budget creation). Each stage takes the previous stage's output as a plain
value; nothing is cached between requests.
"""

from .aggregator import aggregate
from .batch_writer import prepare_budget_records, write_in_chunks
from .paginator import Paginator, month_filter, validate_month
from .resolver import load_category_index, resolve_category_names

__all__ = [
    "Paginator",
    "aggregate",
    "load_category_index",
    "month_filter",
    "prepare_budget_records",
    "resolve_category_names",
    "validate_month",
    "write_in_chunks",
]

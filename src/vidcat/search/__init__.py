"""vidcat search: faceted filters and the advanced query language."""

from vidcat.search.filters import (
    FilterState,
    active_filter_count,
    active_filter_labels,
    filter_assets,
    search_assets,
)
from vidcat.search.query import Operator, evaluate, filter_by_query, parse_query

__all__ = [
    "FilterState",
    "Operator",
    "active_filter_count",
    "active_filter_labels",
    "evaluate",
    "filter_assets",
    "filter_by_query",
    "parse_query",
    "search_assets",
]

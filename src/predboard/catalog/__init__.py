"""Categorization, event grouping and query helpers over normalized markets."""

from predboard.catalog.categorizer import categorize, categorize_text
from predboard.catalog.events import group_by_event
from predboard.catalog.query import MarketQuery, QueryResult, filter_markets, sort_markets

__all__ = [
    "categorize",
    "categorize_text",
    "group_by_event",
    "MarketQuery",
    "QueryResult",
    "filter_markets",
    "sort_markets",
]

"""Search, category filter, sort and "load more" over an already-fetched market set.

Everything here is a pure function of its inputs: callers keep a MarketQuery
snapshot and derive a new one on each user action.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Literal, Sequence, TypeVar

from predboard.models.market import Market

SortKey = Literal["volume", "liquidity"]
SORT_KEYS: tuple[str, ...] = ("volume", "liquidity")
DEFAULT_PAGE_SIZE = 24

M = TypeVar("M", bound=Market)


def parse_sort_key(value: str | None) -> SortKey:
    """Unknown or missing sort keys fall back to volume."""
    return "liquidity" if value == "liquidity" else "volume"


def matches_search(market: Market, search: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    return any(needle in (text or "").lower() for text in market.search_fields())


def matches_categories(market: Market, categories: Iterable[str]) -> bool:
    wanted = {c.lower() for c in categories}
    if not wanted:
        return True
    return market.category.lower() in wanted


def filter_markets(markets: Iterable[M], search: str = "", categories: Iterable[str] = ()) -> list[M]:
    categories = tuple(categories)
    return [m for m in markets if matches_search(m, search) and matches_categories(m, categories)]


def sort_markets(markets: Iterable[M], sort: SortKey = "volume") -> list[M]:
    """Descending by volume or liquidity; stable for equal values."""
    return sorted(markets, key=lambda m: getattr(m, sort), reverse=True)


def paginate(markets: Sequence[M], offset: int = 0, limit: int | None = None) -> list[M]:
    offset = max(offset, 0)
    if limit is None:
        return list(markets[offset:])
    return list(markets[offset : offset + max(limit, 0)])


def unique_categories(markets: Iterable[Market]) -> list[str]:
    """Categories in first-seen order."""
    return list(dict.fromkeys(m.category for m in markets))


@dataclass(frozen=True)
class QueryResult:
    items: list[Market]
    total: int
    has_more: bool


@dataclass(frozen=True)
class MarketQuery:
    """Immutable view state: search text, selected categories, sort key, visible count."""

    search: str = ""
    categories: frozenset[str] = field(default_factory=frozenset)
    sort: SortKey = "volume"
    page_size: int = DEFAULT_PAGE_SIZE
    visible: int = DEFAULT_PAGE_SIZE

    def with_search(self, search: str) -> MarketQuery:
        return replace(self, search=search)

    def with_sort(self, sort: SortKey) -> MarketQuery:
        return replace(self, sort=sort)

    def toggle_category(self, category: str) -> MarketQuery:
        if category in self.categories:
            return replace(self, categories=self.categories - {category})
        return replace(self, categories=self.categories | {category})

    def clear_categories(self) -> MarketQuery:
        return replace(self, categories=frozenset())

    def load_more(self) -> MarketQuery:
        return replace(self, visible=self.visible + self.page_size)

    def matching(self, markets: Iterable[M]) -> list[M]:
        """Filtered and sorted, without the visible-count slice."""
        return sort_markets(filter_markets(markets, self.search, self.categories), self.sort)

    def apply(self, markets: Iterable[Market]) -> QueryResult:
        ordered = self.matching(markets)
        return QueryResult(
            items=ordered[: self.visible],
            total=len(ordered),
            has_more=len(ordered) > self.visible,
        )

"""Group Kalshi markets into events."""

from __future__ import annotations

from typing import Iterable

from predboard.catalog.query import SortKey
from predboard.models.market import UNCATEGORIZED, EventGroup, KalshiMarket

_SORT_ATTR = {"volume": "total_volume", "liquidity": "total_liquidity"}


def group_by_event(markets: Iterable[KalshiMarket], sort: SortKey = "volume") -> list[EventGroup]:
    """Partition markets by event ticker and sort groups by total volume or liquidity, descending.

    Markets without an event ticker are skipped. Groups with equal totals keep
    the larger group first.
    """
    groups: dict[str, EventGroup] = {}
    for market in markets:
        if not market.event_ticker:
            continue
        group = groups.get(market.event_ticker)
        if group is None:
            group = EventGroup(
                event_ticker=market.event_ticker,
                event_title=market.event_title or "Unknown Event",
                category=market.category or UNCATEGORIZED,
            )
            groups[market.event_ticker] = group
        group.markets.append(market)
        group.total_volume += market.volume
        group.total_liquidity += market.liquidity

    ordered = sorted(groups.values(), key=lambda g: len(g.markets), reverse=True)
    attr = _SORT_ATTR.get(sort, "total_volume")
    return sorted(ordered, key=lambda g: getattr(g, attr), reverse=True)

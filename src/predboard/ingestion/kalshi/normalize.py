"""Kalshi event/market objects -> canonical KalshiMarket.

Kalshi quotes in cents (0-100); newer payloads also carry `*_dollars` string
fields. Both are converted to probabilities in [0, 1] here.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog

from predboard.catalog.categorizer import categorize
from predboard.ingestion.fields import first_amount, first_str, is_recent, optional_float, to_amount
from predboard.models import NO_END_DATE, KalshiMarket

log = structlog.get_logger(__name__)

ACTIVE_STATUSES = frozenset({"active", "initialized", "open"})
CLOSED_STATUSES = frozenset({"settled", "canceled", "closed", "finalized"})


def kalshi_price(raw: dict[str, Any], field: str) -> float | None:
    """Quote field as a probability: `<field>_dollars` (fractional) wins over `<field>` (cents)."""
    dollars = optional_float(raw.get(f"{field}_dollars"))
    if dollars is not None:
        return min(max(dollars, 0.0), 1.0)
    cents = to_amount(raw.get(field))
    if cents is None:
        return None
    return min(cents / 100.0, 1.0)


def option_name(market: dict[str, Any], event: dict[str, Any]) -> str:
    """Short label for one option of a multi-market event."""
    yes_sub = first_str(market, "yes_sub_title")
    if yes_sub and yes_sub != event.get("sub_title"):
        return yes_sub
    subtitle = first_str(market, "subtitle")
    if subtitle:
        return subtitle.replace("::", "").strip()
    strike = market.get("custom_strike")
    if isinstance(strike, dict) and strike:
        return str(next(iter(strike.values())))
    return ""


def normalize_market(
    raw: dict[str, Any],
    event: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> KalshiMarket:
    """Convert one nested Kalshi market (with its parent event) to KalshiMarket."""
    event = event or {}
    ticker = str(raw.get("ticker") or "")
    status = str(raw.get("status") or "").lower()
    event_title = first_str(event, "title") or ""
    title = first_str(raw, "title") or event_title or ticker
    yes_bid = kalshi_price(raw, "yes_bid")
    no_bid = kalshi_price(raw, "no_bid")
    if yes_bid is None and no_bid is None:
        outcomes, prices = [], []
    else:
        outcomes, prices = ["Yes", "No"], [yes_bid or 0.0, no_bid or 0.0]
    return KalshiMarket(
        id=str(raw.get("id") or ticker),
        ticker=ticker,
        event_ticker=str(raw.get("event_ticker") or event.get("event_ticker") or event.get("ticker") or ""),
        event_title=event_title,
        title=title,
        question=first_str(raw, "title") or "",
        subtitle=first_str(raw, "subtitle"),
        yes_sub_title=first_str(raw, "yes_sub_title"),
        no_sub_title=first_str(raw, "no_sub_title"),
        option_name=option_name(raw, event),
        status=status,
        volume=first_amount(raw, "volume"),
        volume_24h=first_amount(raw, "volume_24h"),
        liquidity=first_amount(raw, "liquidity"),
        open_interest=first_amount(raw, "open_interest"),
        end_date=first_str(raw, "close_time", "expiration_time") or NO_END_DATE,
        open_time=first_str(raw, "open_time"),
        close_time=first_str(raw, "close_time"),
        active=status in ACTIVE_STATUSES,
        closed=status in CLOSED_STATUSES,
        category=categorize(event.get("category") or raw.get("category"), f"{event_title} {title}"),
        outcomes=outcomes,
        outcome_prices=prices,
        is_new=is_recent(raw.get("open_time"), now),
        yes_bid=yes_bid,
        yes_ask=kalshi_price(raw, "yes_ask"),
        no_bid=no_bid,
        no_ask=kalshi_price(raw, "no_ask"),
        last_price=kalshi_price(raw, "last_price"),
        image=first_str(raw, "image"),
        description=first_str(raw, "rules_primary"),
    )


def normalize_events(events: list[Any], now: datetime | None = None) -> list[KalshiMarket]:
    """Flatten events with nested markets into KalshiMarkets."""
    out = []
    for event in events:
        if not isinstance(event, dict):
            continue
        nested = event.get("markets")
        if not isinstance(nested, list):
            continue
        for raw in nested:
            if not isinstance(raw, dict):
                continue
            try:
                out.append(normalize_market(raw, event, now=now))
            except ValueError as e:
                log.warning("skip_market", ticker=raw.get("ticker"), error=str(e))
    return out

"""Polymarket Gamma record -> canonical Market.

Gamma ships outcome labels and prices in several shapes (JSON-encoded
strings, plain lists, or label -> price objects on nested markets). Each
field is classified once into a SeriesShape and handled by an explicit
branch; anything unusable degrades to an empty list.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

import structlog

from predboard.catalog.categorizer import categorize
from predboard.ingestion.fields import (
    decode_json,
    first_amount,
    first_str,
    is_recent,
    optional_float,
)
from predboard.models import NO_END_DATE, Market

log = structlog.get_logger(__name__)

END_DATE_KEYS = ("endDate", "end_date", "endDateIso", "end_date_iso")


class SeriesShape(enum.Enum):
    ABSENT = "absent"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    INVALID = "invalid"


def classify_series(value: Any) -> tuple[SeriesShape, Any]:
    """Tag an outcomes/outcomePrices field, decoding JSON-encoded strings first."""
    if value is None or value == "":
        return SeriesShape.ABSENT, None
    decoded = decode_json(value)
    if isinstance(decoded, list):
        return SeriesShape.SEQUENCE, decoded
    if isinstance(decoded, dict):
        return SeriesShape.MAPPING, decoded
    return SeriesShape.INVALID, value


def _prices(values: list[Any]) -> list[float] | None:
    out = []
    for v in values:
        p = optional_float(v)
        if p is None or not 0 <= p <= 1:
            return None
        out.append(p)
    return out


def parse_outcome_series(raw_outcomes: Any, raw_prices: Any) -> tuple[list[str], list[float]]:
    """Aligned (outcomes, prices). Prices that cannot be index-aligned with outcomes are dropped."""
    shape, payload = classify_series(raw_outcomes)
    if shape is SeriesShape.SEQUENCE:
        outcomes = [str(o) for o in payload if o is not None]
    else:
        if shape is SeriesShape.INVALID:
            log.warning("bad_outcomes", value=str(raw_outcomes)[:80])
        outcomes = []

    shape, payload = classify_series(raw_prices)
    if shape is SeriesShape.ABSENT:
        return outcomes, []
    if shape is SeriesShape.INVALID:
        log.warning("bad_outcome_prices", value=str(raw_prices)[:80])
        return outcomes, []
    if shape is SeriesShape.MAPPING:
        if not outcomes:
            outcomes = [str(k) for k in payload]
        if not all(o in payload for o in outcomes):
            return outcomes, []
        prices = _prices([payload[o] for o in outcomes])
    else:
        prices = _prices(payload)
    if prices is None or len(prices) != len(outcomes):
        log.debug("unaligned_outcome_prices", outcomes=len(outcomes))
        return outcomes, []
    return outcomes, prices


def display_title(raw: dict[str, Any]) -> str:
    """Title used for display and title-level dedup ("" if the record has none)."""
    return first_str(raw, "title", "question") or ""


def is_new_market(raw: dict[str, Any], now: datetime | None = None) -> bool:
    if raw.get("new") is True:
        return True
    return is_recent(first_str(raw, "createdAt", "startDate"), now)


def _category_text(raw: dict[str, Any]) -> str:
    text = first_str(raw, "question", "title")
    if text:
        return text
    nested = raw.get("markets")
    if isinstance(nested, list) and nested and isinstance(nested[0], dict):
        return first_str(nested[0], "question") or ""
    return ""


def _nested_markets(raw: dict[str, Any], parent_id: str, category: str, now: datetime | None) -> list[Market]:
    nested = raw.get("markets")
    if not isinstance(nested, list):
        return []
    out = []
    for i, sub in enumerate(nested):
        if not isinstance(sub, dict):
            continue
        sub = dict(sub)
        sub.setdefault("id", sub.get("conditionId") or f"{parent_id}-{i}")
        if not first_str(sub, "title"):
            label = first_str(sub, "groupItemTitle") or (first_str(sub, "question") or "Option").replace("?", "")
            sub["title"] = label
        out.append(normalize_market(sub, now=now, category=category, nested=True))
    return out


def normalize_market(
    raw: dict[str, Any],
    now: datetime | None = None,
    *,
    category: str | None = None,
    nested: bool = False,
) -> Market:
    """Convert a Gamma event/market object to canonical Market. Never raises on bad field values."""
    market_id = str(raw.get("id") or "")
    outcomes, prices = parse_outcome_series(raw.get("outcomes"), raw.get("outcomePrices"))
    category = category or categorize(raw.get("category"), _category_text(raw))
    return Market(
        id=market_id,
        venue="polymarket",
        title=display_title(raw) or "Untitled Market",
        question=first_str(raw, "question") or "",
        volume=first_amount(raw, "volume", "volumeNum"),
        liquidity=first_amount(raw, "liquidity", "liquidityNum"),
        end_date=first_str(raw, *END_DATE_KEYS) or NO_END_DATE,
        active=raw.get("active") is True,
        closed=raw.get("closed") is True,
        category=category,
        outcomes=outcomes,
        outcome_prices=prices,
        is_new=is_new_market(raw, now),
        image=first_str(raw, "image"),
        icon=first_str(raw, "icon"),
        slug=first_str(raw, "slug"),
        condition_id=first_str(raw, "conditionId"),
        description=first_str(raw, "description"),
        start_date=first_str(raw, "startDate"),
        created_at=first_str(raw, "createdAt"),
        updated_at=first_str(raw, "updatedAt"),
        featured=raw.get("featured") if isinstance(raw.get("featured"), bool) else None,
        restricted=raw.get("restricted") if isinstance(raw.get("restricted"), bool) else None,
        question_id=first_str(raw, "questionID"),
        volume_24hr=optional_float(raw.get("volume24hr")),
        spread=optional_float(raw.get("spread")),
        best_bid=optional_float(raw.get("bestBid")),
        best_ask=optional_float(raw.get("bestAsk")),
        last_trade_price=optional_float(raw.get("lastTradePrice")),
        sub_markets=[] if nested else _nested_markets(raw, market_id, category, now),
    )

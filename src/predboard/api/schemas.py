"""Pydantic schemas for API responses and OpenAPI docs."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from predboard.models import KalshiMarket, Market
from predboard.models.market import CamelModel, EventGroup


# --- Health ---
class HealthResponse(CamelModel):
    status: str = "ok"
    trading_enabled: bool = False


# --- Markets ---
class MarketsResponse(CamelModel):
    success: bool
    markets: list[Market] = Field(default_factory=list)
    message: str = ""
    total_markets: int = 0
    error: str | None = None


class KalshiMarketsResponse(CamelModel):
    success: bool
    markets: list[KalshiMarket] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    total_markets: int = 0
    message: str = ""


# --- Events (grouped Kalshi view) ---
class EventGroupItem(CamelModel):
    event_ticker: str
    event_title: str
    category: str
    total_volume: float
    total_liquidity: float
    market_count: int
    most_likely: KalshiMarket | None = None
    markets: list[KalshiMarket] = Field(default_factory=list)

    @classmethod
    def from_group(cls, group: EventGroup) -> EventGroupItem:
        return cls(
            event_ticker=group.event_ticker,
            event_title=group.event_title,
            category=group.category,
            total_volume=group.total_volume,
            total_liquidity=group.total_liquidity,
            market_count=len(group.markets),
            most_likely=group.most_likely(),
            markets=group.markets,
        )


class KalshiEventsResponse(CamelModel):
    success: bool
    events: list[EventGroupItem] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    total_events: int = 0
    message: str = ""


# --- Orders ---
class OrderResponse(CamelModel):
    success: bool = True
    order: Any = None


class OrderErrorResponse(CamelModel):
    success: bool = False
    error: str = Field(..., description="Human-readable message")
    error_type: str | None = Field(None, description="Trading error kind, e.g. INSUFFICIENT_FUNDS")
    details: dict[str, list[str]] | None = Field(None, description="Per-field validation messages")

"""Canonical schema (Pydantic) - Market, KalshiMarket, EventGroup, OrderRequest."""

from predboard.models.market import (
    NO_END_DATE,
    UNCATEGORIZED,
    EventGroup,
    KalshiMarket,
    Market,
)
from predboard.models.order import OrderRequest, validation_details

__all__ = [
    "Market",
    "KalshiMarket",
    "EventGroup",
    "OrderRequest",
    "validation_details",
    "NO_END_DATE",
    "UNCATEGORIZED",
]

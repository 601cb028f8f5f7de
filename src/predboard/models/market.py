"""Market, KalshiMarket, EventGroup - canonical entities."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

NO_END_DATE = "N/A"
UNCATEGORIZED = "Uncategorized"


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Market(CamelModel):
    """Canonical market - venue-agnostic. Prices are probabilities in [0, 1]."""

    id: str
    venue: str = "polymarket"
    title: str
    question: str = ""
    volume: float = Field(0.0, ge=0)
    liquidity: float = Field(0.0, ge=0)
    end_date: str = NO_END_DATE
    active: bool = True
    closed: bool = False
    category: str = UNCATEGORIZED
    outcomes: list[str] = Field(default_factory=list)
    outcome_prices: list[float] = Field(default_factory=list)
    is_new: bool = False
    image: str | None = None
    icon: str | None = None
    slug: str | None = None
    condition_id: str | None = None
    description: str | None = None
    start_date: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    featured: bool | None = None
    restricted: bool | None = None
    question_id: str | None = None
    volume_24hr: float | None = None
    spread: float | None = None
    best_bid: float | None = None
    best_ask: float | None = None
    last_trade_price: float | None = None
    sub_markets: list[Market] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_outcomes_aligned(self) -> Market:
        if self.outcome_prices and len(self.outcome_prices) != len(self.outcomes):
            raise ValueError("outcome_prices must align with outcomes")
        if not self.category:
            raise ValueError("category must be non-empty")
        return self

    def search_fields(self) -> tuple[str, ...]:
        """Text fields matched by free-text search."""
        return (self.title, self.question, self.category)


class KalshiMarket(Market):
    """Kalshi market with its parent event info. Bid/ask fields are probabilities."""

    venue: str = "kalshi"
    ticker: str
    event_ticker: str = ""
    event_title: str = ""
    subtitle: str | None = None
    yes_sub_title: str | None = None
    no_sub_title: str | None = None
    option_name: str = ""
    status: str = ""
    yes_bid: float | None = None
    yes_ask: float | None = None
    no_bid: float | None = None
    no_ask: float | None = None
    last_price: float | None = None
    open_interest: float = 0.0
    volume_24h: float = 0.0
    open_time: str | None = None
    close_time: str | None = None

    def search_fields(self) -> tuple[str, ...]:
        return (*super().search_fields(), self.event_title)


class EventGroup(CamelModel):
    """Kalshi markets sharing an event ticker, with summed volume/liquidity."""

    event_ticker: str
    event_title: str
    category: str = UNCATEGORIZED
    markets: list[KalshiMarket] = Field(default_factory=list)
    total_volume: float = 0.0
    total_liquidity: float = 0.0

    def most_likely(self) -> KalshiMarket | None:
        """Market with the highest yes bid; markets without a bid never win over one with a bid."""
        if not self.markets:
            return None
        best = self.markets[0]
        for market in self.markets:
            if not market.yes_bid:
                continue
            if not best.yes_bid or market.yes_bid > best.yes_bid:
                best = market
        return best

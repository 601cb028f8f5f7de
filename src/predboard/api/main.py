"""FastAPI backend: market aggregation endpoints and the order-placement proxy."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Iterator

import structlog
from fastapi import Depends, FastAPI, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from predboard.api.schemas import (
    EventGroupItem,
    HealthResponse,
    KalshiEventsResponse,
    KalshiMarketsResponse,
    MarketsResponse,
    OrderErrorResponse,
    OrderResponse,
)
from predboard.catalog.events import group_by_event
from predboard.catalog.query import MarketQuery, paginate, parse_sort_key, unique_categories
from predboard.config import Settings, configure_logging, get_settings
from predboard.ingestion import UpstreamError
from predboard.ingestion.kalshi import KalshiConnector
from predboard.ingestion.polymarket import PolymarketConnector
from predboard.models import OrderRequest, validation_details
from predboard.trading import TradingClient, TradingError

log = structlog.get_logger(__name__)

# Set by run_api() so the app picks up the CLI's profile.
_config_profile: str | None = None


def get_app_settings() -> Settings:
    return get_settings(_config_profile)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_app_settings()
    configure_logging(settings)
    log.info("api_start", trading_enabled=settings.trading_credentials.is_configured)
    yield


app = FastAPI(title="predboard API", version="0.1.0", lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.exception_handler(RequestValidationError)
async def invalid_params(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Bad query parameters get the same {success: false} envelope as other failures."""
    details: dict[str, list[str]] = {}
    for err in exc.errors():
        details.setdefault(str(err["loc"][-1]), []).append(err.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": "Invalid request parameters", "details": details},
    )


def get_polymarket_connector(settings: Settings = Depends(get_app_settings)) -> Iterator[PolymarketConnector]:
    connector = PolymarketConnector(
        settings.gamma_api_base,
        page_size=settings.polymarket_page_size,
        max_pages=settings.polymarket_max_pages,
        timeout=settings.http_timeout,
    )
    try:
        yield connector
    finally:
        connector.close()


def get_kalshi_connector(settings: Settings = Depends(get_app_settings)) -> Iterator[KalshiConnector]:
    connector = KalshiConnector(
        settings.kalshi_api_base,
        events_limit=settings.kalshi_events_limit,
        timeout=settings.http_timeout,
    )
    try:
        yield connector
    finally:
        connector.close()


def get_trading_client(request: Request, settings: Settings = Depends(get_app_settings)) -> TradingClient:
    """One TradingClient per app, created on first order request."""
    client = getattr(request.app.state, "trading_client", None)
    if client is None:
        client = TradingClient(
            settings.trading_credentials,
            host=settings.clob_host,
            chain_id=settings.chain_id,
        )
        request.app.state.trading_client = client
    return client


def _json(model, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=model.model_dump(mode="json", by_alias=True, exclude_none=True))


@app.get("/health", response_model=HealthResponse)
def health(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    return HealthResponse(status="ok", trading_enabled=settings.trading_credentials.is_configured)


@app.get("/api/markets", response_model=MarketsResponse, response_model_exclude_none=True)
def polymarket_markets(connector: PolymarketConnector = Depends(get_polymarket_connector)) -> MarketsResponse:
    """Active Polymarket markets across up to max_pages upstream pages, deduplicated, by volume desc."""
    try:
        result = connector.discover_markets()
    except UpstreamError as e:
        log.error("markets_fetch_failed", venue=e.venue, error=str(e))
        return MarketsResponse(success=False, message="Error retrieving market data", error=str(e))
    log.info(
        "markets_fetched",
        unique=len(result.markets),
        duplicates_skipped=result.duplicates_skipped,
        pages=result.pages_fetched,
    )
    if not result.markets:
        return MarketsResponse(success=False, message="No markets available from Polymarket API")
    return MarketsResponse(
        success=True,
        markets=result.markets,
        message=f"All markets sorted by volume ({len(result.markets)} total)",
        total_markets=len(result.markets),
    )


@app.get(
    "/api/kalshi/markets",
    response_model=KalshiMarketsResponse,
    response_model_exclude_none=True,
    responses={500: {"description": "Kalshi API failure", "model": KalshiMarketsResponse}},
)
def kalshi_markets(
    limit: int = Query(100, ge=0),
    offset: int = Query(0, ge=0),
    sort: str = Query("volume", description="volume or liquidity"),
    categories: list[str] | None = Query(None, description="Repeat for multi-select"),
    connector: KalshiConnector = Depends(get_kalshi_connector),
):
    """Kalshi markets filtered by category, sorted descending, then sliced by offset/limit."""
    try:
        markets = connector.discover_markets().markets
    except UpstreamError as e:
        log.error("kalshi_fetch_failed", error=str(e))
        return _json(KalshiMarketsResponse(success=False, message=str(e) or "Failed to fetch markets"), 500)
    query = MarketQuery(categories=frozenset(categories or ()), sort=parse_sort_key(sort))
    matching = query.matching(markets)
    return KalshiMarketsResponse(
        success=True,
        markets=paginate(matching, offset, limit),
        categories=unique_categories(markets),
        total_markets=len(matching),
        message="Markets retrieved successfully",
    )


@app.get(
    "/api/kalshi/events",
    response_model=KalshiEventsResponse,
    response_model_exclude_none=True,
    responses={500: {"description": "Kalshi API failure", "model": KalshiEventsResponse}},
)
def kalshi_events(
    search: str = Query("", description="Case-insensitive substring over title, question, category, event title"),
    sort: str = Query("volume", description="volume or liquidity"),
    categories: list[str] | None = Query(None, description="Repeat for multi-select"),
    connector: KalshiConnector = Depends(get_kalshi_connector),
):
    """Kalshi markets grouped by event, groups sorted by total volume or liquidity."""
    try:
        markets = connector.discover_markets().markets
    except UpstreamError as e:
        log.error("kalshi_fetch_failed", error=str(e))
        return _json(KalshiEventsResponse(success=False, message=str(e) or "Failed to fetch events"), 500)
    sort_key = parse_sort_key(sort)
    query = MarketQuery(search=search, categories=frozenset(categories or ()), sort=sort_key)
    groups = group_by_event(query.matching(markets), sort=sort_key)
    return KalshiEventsResponse(
        success=True,
        events=[EventGroupItem.from_group(g) for g in groups],
        categories=unique_categories(markets),
        total_events=len(groups),
        message="Events retrieved successfully",
    )


@app.post(
    "/api/place-order",
    response_model=OrderResponse,
    responses={
        400: {"description": "Validation error, invalid token, or insufficient funds", "model": OrderErrorResponse},
        401: {"description": "Trading credentials missing", "model": OrderErrorResponse},
        500: {"description": "Unexpected error", "model": OrderErrorResponse},
    },
)
async def place_order(
    request: Request,
    trading: TradingClient = Depends(get_trading_client),
    settings: Settings = Depends(get_app_settings),
):
    """Validate an order and forward it to the CLOB SDK."""
    try:
        body = await request.json()
    except ValueError:
        return _json(OrderErrorResponse(error="Request body must be JSON"), 400)
    if not isinstance(body, dict):
        return _json(OrderErrorResponse(error="Request body must be a JSON object"), 400)
    body.setdefault("feeRateBps", settings.default_fee_rate_bps)
    try:
        order = OrderRequest.model_validate(body)
    except ValidationError as e:
        return _json(OrderErrorResponse(error="Validation error", details=validation_details(e)), 400)
    if order.missing_expiration:
        return _json(OrderErrorResponse(error="Expiration timestamp is required for GTD orders"), 400)
    try:
        response = await run_in_threadpool(trading.place_order, order)
    except TradingError as e:
        return _json(OrderErrorResponse(error=e.message, error_type=e.error_type.value), e.error_type.http_status)
    except Exception:
        log.exception("order_unexpected_error", token_id=order.token_id)
        return _json(OrderErrorResponse(error="An unexpected error occurred"), 500)
    return OrderResponse(success=True, order=response)


def run_api(host: str = "127.0.0.1", port: int = 8000, profile: str | None = None) -> None:
    global _config_profile
    _config_profile = profile
    import uvicorn

    uvicorn.run("predboard.api.main:app", host=host, port=port, reload=False)

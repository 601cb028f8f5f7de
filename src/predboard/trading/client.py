"""Order placement through the Polymarket CLOB SDK (py-clob-client)."""

from __future__ import annotations

import time
from typing import Any, Callable

import structlog
from py_clob_client.client import ClobClient
from py_clob_client.clob_types import ApiCreds, OrderArgs, OrderType
from py_clob_client.order_builder.constants import BUY, SELL

from predboard.config.settings import TradingCredentials
from predboard.models import OrderRequest
from predboard.trading.errors import TradingError, TradingErrorType, classify_error

log = structlog.get_logger(__name__)

CLOB_HOST = "https://clob.polymarket.com"
CHAIN_ID = 137  # Polygon mainnet

_ORDER_TYPES = {"GTC": OrderType.GTC, "GTD": OrderType.GTD, "FOK": OrderType.FOK}

ClobFactory = Callable[[TradingCredentials], Any]


def _default_clob_factory(host: str, chain_id: int) -> ClobFactory:
    def build(creds: TradingCredentials) -> ClobClient:
        return ClobClient(
            host,
            key=creds.private_key,
            chain_id=chain_id,
            creds=ApiCreds(
                api_key=creds.api_key,
                api_secret=creds.api_secret,
                api_passphrase=creds.passphrase,
            ),
        )

    return build


class TradingClient:
    """Places GTC/GTD/FOK limit orders.

    The SDK client is built on first use. Missing or placeholder credentials,
    or a failed build, raise MISSING_CREDENTIALS and leave nothing half-initialized.
    """

    def __init__(
        self,
        credentials: TradingCredentials,
        *,
        host: str = CLOB_HOST,
        chain_id: int = CHAIN_ID,
        clob_factory: ClobFactory | None = None,
    ) -> None:
        self.credentials = credentials
        self._factory = clob_factory or _default_clob_factory(host, chain_id)
        self._clob: Any = None

    @property
    def enabled(self) -> bool:
        return self.credentials.is_configured

    def _ensure_clob(self) -> Any:
        if self._clob is not None:
            return self._clob
        if not self.credentials.is_configured:
            raise TradingError(
                "Trading client not properly initialized. Please check your API credentials and private key.",
                TradingErrorType.MISSING_CREDENTIALS,
            )
        try:
            clob = self._factory(self.credentials)
        except Exception as e:
            log.error("clob_init_failed", error=str(e))
            raise TradingError(
                f"Trading client could not be initialized: {e}",
                TradingErrorType.MISSING_CREDENTIALS,
            ) from e
        self._clob = clob
        return clob

    def place_order(self, order: OrderRequest) -> Any:
        """Sign and post the order. Raises TradingError with a classified error type."""
        if order.missing_expiration:
            raise ValueError("Expiration timestamp is required for GTD orders")
        clob = self._ensure_clob()
        args = OrderArgs(
            token_id=order.token_id,
            price=order.price,
            size=order.size,
            side=BUY if order.side == "BUY" else SELL,
            fee_rate_bps=order.fee_rate_bps,
            nonce=int(time.time() * 1000),
            expiration=order.expiration or 0,
        )
        try:
            signed = clob.create_order(args)
            response = clob.post_order(signed, _ORDER_TYPES[order.order_type])
        except Exception as e:
            err = classify_error(e)
            log.warning("order_failed", token_id=order.token_id, error_type=err.error_type.value, error=str(e))
            raise err from e
        log.info(
            "order_placed",
            token_id=order.token_id,
            side=order.side,
            price=order.price,
            size=order.size,
            order_type=order.order_type,
        )
        return response

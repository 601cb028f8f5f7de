"""Order placement proxy to the Polymarket CLOB SDK."""

from predboard.trading.client import TradingClient
from predboard.trading.errors import TradingError, TradingErrorType, classify_error

__all__ = ["TradingClient", "TradingError", "TradingErrorType", "classify_error"]

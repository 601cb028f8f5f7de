"""Trading error kinds and classification of SDK failures."""

from __future__ import annotations

import enum


class TradingErrorType(str, enum.Enum):
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INVALID_TOKEN_ID = "INVALID_TOKEN_ID"
    NETWORK_ERROR = "NETWORK_ERROR"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    @property
    def http_status(self) -> int:
        if self in (TradingErrorType.INVALID_TOKEN_ID, TradingErrorType.INSUFFICIENT_FUNDS):
            return 400
        if self is TradingErrorType.MISSING_CREDENTIALS:
            return 401
        return 500


class TradingError(Exception):
    def __init__(self, message: str, error_type: TradingErrorType = TradingErrorType.UNKNOWN_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type


def classify_error(exc: BaseException) -> TradingError:
    """Map an SDK exception to a TradingError by inspecting its message."""
    if isinstance(exc, TradingError):
        return exc
    message = str(exc) or exc.__class__.__name__
    lowered = message.lower()
    if "insufficient funds" in lowered or "balance" in lowered:
        return TradingError("Insufficient funds to place order", TradingErrorType.INSUFFICIENT_FUNDS)
    if "invalid token" in lowered or "tokenid" in lowered or "token_id" in lowered:
        return TradingError("Invalid token ID provided", TradingErrorType.INVALID_TOKEN_ID)
    if "network" in lowered or "connection" in lowered:
        return TradingError(f"Network error: {message}", TradingErrorType.NETWORK_ERROR)
    if "not properly initialized" in lowered or "credentials" in lowered:
        return TradingError(message, TradingErrorType.MISSING_CREDENTIALS)
    return TradingError(f"Failed to place order: {message}", TradingErrorType.UNKNOWN_ERROR)

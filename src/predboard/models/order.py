"""Order placement request."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

OrderSide = Literal["BUY", "SELL"]
OrderKind = Literal["GTC", "GTD", "FOK"]


class OrderRequest(BaseModel):
    """Limit order for one outcome token, as posted to /api/place-order."""

    model_config = ConfigDict(populate_by_name=True)

    token_id: str = Field(..., alias="tokenID")
    price: float = Field(..., strict=True, allow_inf_nan=False)
    size: float = Field(..., strict=True, allow_inf_nan=False)
    side: OrderSide
    order_type: OrderKind = Field("GTC", alias="orderType")
    expiration: int | None = None  # unix seconds, GTD only
    fee_rate_bps: int = Field(100, alias="feeRateBps")

    @field_validator("token_id")
    @classmethod
    def _token_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Token ID is required")
        return v

    @field_validator("price")
    @classmethod
    def _price_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Price must be positive")
        return v

    @field_validator("size")
    @classmethod
    def _size_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Size must be positive")
        return v

    @property
    def missing_expiration(self) -> bool:
        return self.order_type == "GTD" and not self.expiration


def validation_details(exc: ValidationError) -> dict[str, list[str]]:
    """Flatten a pydantic ValidationError into {field: [messages]} keyed by wire names."""
    details: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc") or ("_root",)
        field = str(loc[0])
        msg = err.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        details.setdefault(field, []).append(msg)
    return details

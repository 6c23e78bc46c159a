from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from models.trade import Side


class Candidate(BaseModel):
    """A scored, not-yet-committed trade suggestion."""

    symbol: str = Field(..., min_length=1)
    asset_id: str = Field("", validate_default=True)
    price: float = Field(..., gt=0)
    confidence: float = Field(..., ge=0, le=1)
    side: Side
    size: float = Field(..., gt=0)
    leverage: float = Field(1.0, ge=1)
    sentiment: Optional[float] = Field(None, ge=0, le=1)
    technical: Optional[float] = Field(None, ge=0, le=1)

    @field_validator("asset_id", mode="before")
    @classmethod
    def default_asset_id(cls, v, info):
        # "BTC/USDT" -> "BTC" when the caller has no contract address
        if not v:
            symbol = info.data.get("symbol") or ""
            return symbol.split("/")[0]
        return v


class OrderRequest(BaseModel):
    """Externally submitted order (market, limit or futures)."""

    symbol: str = Field(..., min_length=1)
    side: Side
    size: float = Field(..., gt=0)
    price: Optional[float] = Field(None, gt=0)
    leverage: Optional[float] = Field(None, ge=1)

    @field_validator("side", mode="before")
    @classmethod
    def normalize_side(cls, v):
        return v.lower() if isinstance(v, str) else v

    @property
    def effective_size(self) -> float:
        return self.size * (self.leverage or 1.0)

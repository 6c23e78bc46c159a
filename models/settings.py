"""
models/settings.py
------------------
Typed, overridable settings for every engine component. Defaults mirror the
production bot; ``core.initialization.load_configuration`` overrides them from
the environment and ``ConfigManager`` builds these models from the config dict.
"""
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field, model_validator

DEFAULT_SYMBOLS: List[str] = ["BTC/USDT", "ETH/USDT", "SOL/USDT"]

DEFAULT_BASE_PRICES: Dict[str, float] = {
    "BTC/USDT": 45000.0,
    "ETH/USDT": 2800.0,
    "SOL/USDT": 110.0,
}


class AccountSettings(BaseModel):
    initial_balance: float = Field(10000.0, gt=0)


class SchedulerSettings(BaseModel):
    analysis_interval: float = Field(5.0, gt=0)  # seconds
    graduation_interval: float = Field(300.0, gt=0)
    min_confidence: float = Field(0.7, ge=0, le=1)
    trade_probability: float = Field(0.1, ge=0, le=1)
    resolution_delay_min: float = Field(30.0, ge=0)
    resolution_delay_max: float = Field(300.0, ge=0)
    exit_price_variation: float = Field(0.02, ge=0, lt=1)
    max_slippage: float = Field(0.001, ge=0, lt=1)

    @model_validator(mode="after")
    def check_delay_window(self):
        if self.resolution_delay_max < self.resolution_delay_min:
            raise ValueError("resolution_delay_max must be >= resolution_delay_min")
        return self


class LearningSettings(BaseModel):
    initial_confidence: float = Field(0.5, ge=0, le=1)
    confidence_step: float = Field(0.01, ge=0)
    confidence_ceiling: float = Field(0.95, ge=0, lt=1)
    target_trades: int = Field(100, gt=0)
    target_win_rate: float = Field(0.75, gt=0, le=1)
    strategies: List[str] = Field(
        default_factory=lambda: ["trend_following", "mean_reversion", "momentum"]
    )


class GraduationThresholds(BaseModel):
    min_closed_trades: int = Field(50, ge=0)
    min_win_rate: float = Field(0.75, ge=0, le=1)
    min_total_pnl: float = 500.0


class ScamFilterSettings(BaseModel):
    known_scams: List[str] = Field(default_factory=list)
    red_flag_tokens: List[str] = Field(
        default_factory=lambda: ["fake", "scam", "rug", "honey", "test"]
    )
    random_flag_probability: float = Field(0.05, ge=0, le=1)

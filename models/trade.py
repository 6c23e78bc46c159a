# --------------------------------------------------------------------
# models/trade.py
# One record per simulated trade plus the aggregate performance counters.
# Trades are frozen: closing a trade produces a new instance, so a closed
# trade can never be touched again. Shared by Ledger, Scheduler, Engine, hub.
# --------------------------------------------------------------------
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Optional


class Side(str, Enum):
    BUY = "buy"
    SELL = "sell"


class TradeState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class Mode(str, Enum):
    PAPER = "paper"
    LIVE = "live"


@dataclass(frozen=True)
class Trade:
    id: str
    symbol: str
    side: Side
    size: float
    entry_price: float
    confidence: float
    opened_at: int  # epoch-ms
    leverage: float = 1.0
    mode: Mode = Mode.PAPER
    state: TradeState = TradeState.OPEN
    exit_price: Optional[float] = None
    pnl: Optional[float] = None
    closed_at: Optional[int] = None  # epoch-ms

    @property
    def is_open(self) -> bool:
        return self.state is TradeState.OPEN

    def realised_pnl(self, exit_price: float) -> float:
        """PnL normalised to the notional size: (exit - entry) * size / entry."""
        pnl = (exit_price - self.entry_price) * (self.size / self.entry_price)
        return pnl if self.side is Side.BUY else -pnl

    def closed(self, exit_price: float, closed_at: int) -> "Trade":
        if not self.is_open:
            raise ValueError(f"trade {self.id} is already closed")
        return replace(
            self,
            state=TradeState.CLOSED,
            exit_price=exit_price,
            pnl=self.realised_pnl(exit_price),
            closed_at=closed_at,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["side"] = self.side.value
        data["mode"] = self.mode.value
        data["state"] = self.state.value
        return data


@dataclass(frozen=True)
class Performance:
    total_opened: int = 0
    total_closed: int = 0
    wins: int = 0
    total_pnl: float = 0.0
    confidence_level: float = 0.5
    learning_progress: float = 0.0

    @property
    def win_rate(self) -> float:
        return self.wins / self.total_closed if self.total_closed else 0.0

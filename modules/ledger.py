"""
ledger.py
---------
Owns every simulated trade and the performance counters, kept per trading
mode so live results never feed the paper track record.

All mutations go through a single lock so concurrent trade resolutions never
interleave partial counter updates; readers get point-in-time copies.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from core.errors import NotFoundError
from models.signal import Candidate
from models.trade import Mode, Performance, Trade


logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class TradeLedger:
    """
    In-memory ledger for paper trading.
    When a persistence backend is wired, every opened and closed trade is
    journalled after the lock is released.
    """

    def __init__(self, persistence=None, clock: Optional[Callable[[], int]] = None):
        self._open: Dict[str, Trade] = {}
        self._closed: List[Trade] = []
        self._perf: Dict[Mode, Performance] = {mode: Performance() for mode in Mode}
        self._lock = threading.Lock()
        self.persistence = persistence
        self.clock = clock or _now_ms

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #
    def open(self, candidate: Candidate, mode: Mode = Mode.PAPER) -> Trade:
        trade = Trade(
            id=uuid.uuid4().hex,
            symbol=candidate.symbol,
            side=candidate.side,
            size=candidate.size,
            entry_price=candidate.price,
            confidence=candidate.confidence,
            opened_at=self.clock(),
            leverage=candidate.leverage,
            mode=mode,
        )
        with self._lock:
            self._open[trade.id] = trade
            self._bump(trade.mode, opened=1)

        if self.persistence:
            self.persistence.upsert_trade(trade)

        logger.info(
            "📄 %s TRADE: %s %s - $%.2f @ $%.2f",
            trade.mode.value.upper(),
            trade.side.value.upper(),
            trade.symbol,
            trade.size,
            trade.entry_price,
        )
        return trade

    def close(self, trade_id: str, exit_price: float) -> Trade:
        """Settle an open trade at ``exit_price``.

        Raises ``NotFoundError`` if the id is unknown or already closed.
        """
        with self._lock:
            trade = self._open.pop(trade_id, None)
            if trade is None:
                raise NotFoundError(trade_id)
            closed = trade.closed(exit_price, self.clock())
            self._closed.append(closed)
            self._bump(closed.mode, closed=1, wins=1 if closed.pnl > 0 else 0, pnl=closed.pnl)

        if self.persistence:
            self.persistence.upsert_trade(closed)

        logger.info("📄 TRADE CLOSED: %s - P&L: $%.2f", closed.symbol, closed.pnl)
        return closed

    def restore(self, trades: List[Trade]) -> None:
        """Rebuild state from journalled trades (e.g. after a restart)."""
        with self._lock:
            for trade in trades:
                if trade.is_open:
                    self._open[trade.id] = trade
                    opened = 1
                    closed = wins = 0
                    pnl = 0.0
                else:
                    self._closed.append(trade)
                    opened = closed = 1
                    wins = 1 if trade.pnl > 0 else 0
                    pnl = trade.pnl
                self._bump(trade.mode, opened=opened, closed=closed, wins=wins, pnl=pnl)
        logger.debug("[Ledger] restored %d trades", len(trades))

    # ------------------------------------------------------------------ #
    # Snapshots
    # ------------------------------------------------------------------ #
    def get(self, trade_id: str) -> Trade:
        with self._lock:
            trade = self._open.get(trade_id)
            if trade is None:
                trade = next((t for t in self._closed if t.id == trade_id), None)
        if trade is None:
            raise NotFoundError(trade_id)
        return trade

    def open_positions(self, mode: Optional[Mode] = None) -> List[Trade]:
        with self._lock:
            return [t for t in self._open.values() if mode is None or t.mode is mode]

    def closed_history(self, mode: Optional[Mode] = None) -> List[Trade]:
        with self._lock:
            return [t for t in self._closed if mode is None or t.mode is mode]

    def performance(self, mode: Optional[Mode] = None) -> Performance:
        """Counters for one mode, or summed over both when ``mode`` is None."""
        with self._lock:
            if mode is not None:
                return self._perf[Mode(mode)]
            paper, live = self._perf[Mode.PAPER], self._perf[Mode.LIVE]
        return Performance(
            total_opened=paper.total_opened + live.total_opened,
            total_closed=paper.total_closed + live.total_closed,
            wins=paper.wins + live.wins,
            total_pnl=paper.total_pnl + live.total_pnl,
        )

    # caller holds the lock
    def _bump(self, mode: Mode, opened=0, closed=0, wins=0, pnl=0.0) -> None:
        perf = self._perf[mode]
        self._perf[mode] = replace(
            perf,
            total_opened=perf.total_opened + opened,
            total_closed=perf.total_closed + closed,
            wins=perf.wins + wins,
            total_pnl=perf.total_pnl + pnl,
        )

"""
core/engine.py
--------------
The paper-trading engine: one object owning configuration, ledger, learning
model, graduation policy, scam filter, scheduler and event bus. This is the
only surface an outer shell (HTTP routes, CLI) talks to.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from core.errors import InvalidModeTransitionError
from models.events import EngineEvent
from models.settings import AccountSettings
from models.signal import Candidate, OrderRequest
from models.trade import Mode, Performance, Trade

logger = logging.getLogger(__name__)

LIMIT_ORDER_CONFIDENCE = 0.8


class TradingEngine:
    def __init__(
        self,
        *,
        ledger,
        learning_model,
        policy,
        scam_filter,
        signal_generator,
        scheduler,
        bus,
        account: Optional[AccountSettings] = None,
        persistence=None,
    ) -> None:
        self.ledger = ledger
        self.learning_model = learning_model
        self.policy = policy
        self.scam_filter = scam_filter
        self.signal_generator = signal_generator
        self.scheduler = scheduler
        self.bus = bus
        self.account = account or AccountSettings()
        self.persistence = persistence
        self._mode = Mode.PAPER

        # trades opened by the scheduler follow the current mode
        self.scheduler.mode_provider = lambda: self._mode

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    async def initialize(self) -> bool:
        logger.info("🧠 Initializing AI Trading Bot…")
        if self.persistence is not None:
            trades = self.persistence.load_trades()
            if trades:
                self.ledger.restore(trades)
                self.learning_model.replay(self.ledger.closed_history())
                for trade in self.ledger.open_positions():
                    self.scheduler.schedule_resolution(trade)
                logger.info("Restored %d journalled trades", len(trades))
        logger.info("📄 Paper trading mode enabled - Learning safely with virtual money")
        self.bus.publish(EngineEvent.INITIALIZED, self.status())
        return True

    def start(self) -> bool:
        already = self.scheduler.is_running
        self.scheduler.start()
        if not already:
            logger.info("🚀 Starting trading in %s mode", self._mode.value.upper())
            self.bus.publish(EngineEvent.TRADING_STARTED, self.status())
        return True

    def stop(self) -> bool:
        was_running = self.scheduler.is_running
        self.scheduler.stop()
        if was_running:
            logger.info("⏹️ Trading stopped")
            self.bus.publish(EngineEvent.TRADING_STOPPED, self.status())
        return True

    async def shutdown(self, *, wait: bool = True) -> None:
        """Stop the driver and either await or cancel pending resolutions."""
        self.stop()
        await self.scheduler.join()
        if wait:
            await self.scheduler.wait_for_resolutions()
        else:
            await self.scheduler.cancel_resolutions()
        await self.bus.aclose()

    # ------------------------------------------------------------------ #
    # Orders
    # ------------------------------------------------------------------ #
    def submit_order(
        self,
        symbol: str,
        side: str,
        size: float,
        price: Optional[float] = None,
        leverage: Optional[float] = None,
    ) -> Trade:
        """Market (no price), limit (price) or futures (leverage) order.

        All variants open through the same ledger path; leverage is folded
        into the effective size. Raises ``pydantic.ValidationError`` on bad
        input.
        """
        order = OrderRequest(symbol=symbol, side=side, size=size, price=price, leverage=leverage)

        if order.price is not None:
            entry, confidence = order.price, LIMIT_ORDER_CONFIDENCE
        else:
            analysis = self.signal_generator.generate(order.symbol)
            entry, confidence = analysis.price, analysis.confidence

        candidate = Candidate(
            symbol=order.symbol,
            price=entry,
            confidence=confidence,
            side=order.side,
            size=order.effective_size,
            leverage=order.leverage or 1.0,
        )
        return self.scheduler.open_trade(candidate)

    # ------------------------------------------------------------------ #
    # Mode
    # ------------------------------------------------------------------ #
    @property
    def mode(self) -> Mode:
        return self._mode

    def is_paper_trading(self) -> bool:
        return self._mode is Mode.PAPER

    def set_mode(self, mode: Mode) -> Mode:
        mode = Mode(mode)
        if mode is self._mode:
            return mode
        if mode is Mode.LIVE:
            performance = self.ledger.performance(Mode.PAPER)
            if not self.policy.can_graduate(performance):
                reasons = ", ".join(self.policy.shortfall(performance))
                raise InvalidModeTransitionError(f"AI not ready for live trading yet: {reasons}")
        self._mode = mode
        logger.info("🔄 Switched to %s trading mode", mode.value.upper())
        self.bus.publish(EngineEvent.MODE_CHANGED, mode)
        return mode

    def toggle_mode(self) -> bool:
        target = Mode.LIVE if self._mode is Mode.PAPER else Mode.PAPER
        try:
            self.set_mode(target)
        except InvalidModeTransitionError as exc:
            logger.warning("⚠️ %s", exc)
            return False
        return True

    # ------------------------------------------------------------------ #
    # Read side
    # ------------------------------------------------------------------ #
    def performance(self, mode: Optional[Mode] = Mode.PAPER) -> Performance:
        """Counters for ``mode`` (the paper track record by default) plus learning state."""
        perf = self.ledger.performance(mode)
        confidence = self.learning_model.confidence
        return Performance(
            total_opened=perf.total_opened,
            total_closed=perf.total_closed,
            wins=perf.wins,
            total_pnl=perf.total_pnl,
            confidence_level=confidence,
            learning_progress=self.learning_model.progress(),
        )

    def ready_for_live(self) -> bool:
        return self.policy.can_graduate(self.ledger.performance(Mode.PAPER))

    def status(self) -> Dict[str, Any]:
        # trade count and profit follow the current mode; the rest is the paper record
        paper = self.performance(Mode.PAPER)
        current = self.ledger.performance(self._mode)
        realised = self.ledger.performance().total_pnl
        return {
            "running": self.scheduler.is_running,
            "mode": self._mode.value,
            "balance": round(self.account.initial_balance + realised, 2),
            "totalTrades": current.total_opened,
            "successRate": round(paper.win_rate * 100, 1),
            "totalProfit": round(current.total_pnl, 2),
            "confidence": round(paper.confidence_level * 100, 1),
            "learningProgress": round(paper.learning_progress, 1),
            "readyForLive": self.policy.can_graduate(paper),
        }

    def learning_status(self) -> Dict[str, Any]:
        perf = self.performance(Mode.PAPER)
        return {
            "mode": self._mode.value,
            "totalClosed": perf.total_closed,
            "winRate": perf.win_rate,
            "confidence": perf.confidence_level,
            "learningProgress": perf.learning_progress,
            "readyForLive": self.policy.can_graduate(perf),
            "blockedAssetCount": self.scam_filter.blocked_count,
            "strategiesLearned": len(self.learning_model.strategies),
        }

    def open_positions(self, mode: Optional[Mode] = None) -> List[Dict[str, Any]]:
        """Open trades of ``mode``, defaulting to the current trading mode."""
        mode = self._mode if mode is None else Mode(mode)
        return [t.to_dict() for t in self.ledger.open_positions(mode)]

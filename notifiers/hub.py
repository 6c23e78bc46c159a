"""
notifiers/hub.py
----------------
Fan-out layer that owns multiple back-end notifiers and turns engine
lifecycle events into human-readable messages.
"""
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from models.events import EngineEvent
from models.trade import Mode, Performance, Trade
from notifiers.base import BaseNotifier
from notifiers.log import LogNotifier

logger = logging.getLogger(__name__)


class NotifierHub:
    """Collects active back-ends based on config and broadcasts messages."""

    TOPICS = (
        EngineEvent.INITIALIZED,
        EngineEvent.TRADING_STARTED,
        EngineEvent.TRADING_STOPPED,
        EngineEvent.TRADE_CLOSED,
        EngineEvent.ASSET_BLOCKED,
        EngineEvent.READY_FOR_LIVE,
        EngineEvent.MODE_CHANGED,
    )

    def __init__(self, cfg: Optional[Dict] = None, backends: Optional[List[BaseNotifier]] = None) -> None:
        cfg = cfg or {}
        self.backends: List[BaseNotifier] = list(backends) if backends is not None else [LogNotifier()]

        tg_cfg = cfg.get("TELEGRAM", {}) or {}
        if tg_cfg.get("token") and tg_cfg.get("chat_id"):
            from notifiers.telegram import TelegramNotifier  # lazy: optional backend

            self.backends.append(TelegramNotifier(token=tg_cfg["token"], chat_id=tg_cfg["chat_id"]))

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def attach(self, bus) -> None:
        """Subscribe to every lifecycle topic on ``bus``."""
        for topic in self.TOPICS:
            bus.subscribe(topic, lambda payload, t=topic: self.notify(t, payload))

    async def notify(self, topic: EngineEvent, payload) -> None:
        await self.broadcast(self.format_event(topic, payload))

    async def broadcast(self, text: str) -> None:
        for b in self.backends:
            try:
                await b.send(text)
            except Exception:  # noqa: BLE001 (keep hub robust)
                # do NOT let one failing back-end crash the whole bot
                logger.exception("[NotifierHub] back-end %s failed", b.__class__.__name__)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def format_event(topic: EngineEvent, payload) -> str:
        topic = EngineEvent(topic)
        if topic is EngineEvent.TRADE_CLOSED and isinstance(payload, Trade):
            icon = "✅" if payload.pnl > 0 else "❌"
            return (
                f"{icon} {payload.symbol} {payload.side.value.upper()} closed @ {payload.exit_price:.4f}"
                f"  P&L ${payload.pnl:.2f}"
            )
        if topic is EngineEvent.READY_FOR_LIVE and isinstance(payload, Performance):
            return (
                f"🎓 AI ready for live trading: {payload.total_closed} trades, "
                f"{payload.win_rate:.0%} win rate, ${payload.total_pnl:.2f} profit"
            )
        if topic is EngineEvent.MODE_CHANGED:
            return f"🔄 Switched to {Mode(payload).value.upper()} trading mode"
        if topic is EngineEvent.ASSET_BLOCKED:
            return f"🛡️ Blocked {payload['symbol']} ({payload['asset_id']})"
        if topic is EngineEvent.TRADING_STARTED:
            return f"🚀 Trading started in {payload['mode'].upper()} mode"
        if topic is EngineEvent.TRADING_STOPPED:
            return "⏹️ Trading stopped"
        return f"🤖 {topic.value.replace('_', ' ')}"

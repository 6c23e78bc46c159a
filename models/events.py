"""
models/events.py
----------------
Lifecycle topics published on the engine's event bus.

Payloads:
    INITIALIZED, TRADING_STARTED, TRADING_STOPPED  -> status dict
    TRADE_OPENED, TRADE_CLOSED                     -> Trade
    ASSET_BLOCKED                                  -> {"asset_id", "symbol", "verdict"}
    READY_FOR_LIVE                                 -> Performance
    MODE_CHANGED                                   -> Mode
"""
from __future__ import annotations

from enum import Enum


class EngineEvent(str, Enum):
    INITIALIZED = "initialized"
    TRADING_STARTED = "trading_started"
    TRADING_STOPPED = "trading_stopped"
    TRADE_OPENED = "trade_opened"
    TRADE_CLOSED = "trade_closed"
    ASSET_BLOCKED = "asset_blocked"
    READY_FOR_LIVE = "ready_for_live"
    MODE_CHANGED = "mode_changed"

"""
learning_model.py
-----------------
Turns closed-trade outcomes into a confidence level and a 0-100
learning-progress score.

Confidence only moves up: every observed trade adds ``confidence_step`` until
``confidence_ceiling`` is reached, win or lose.
"""
from __future__ import annotations

import logging
import threading
from typing import List, Optional

from models.settings import LearningSettings
from models.trade import Mode, Performance, Trade

logger = logging.getLogger(__name__)


class LearningModel:
    def __init__(self, ledger, settings: Optional[LearningSettings] = None) -> None:
        self.ledger = ledger
        self.settings = settings or LearningSettings()
        self._confidence = self.settings.initial_confidence
        self._lock = threading.Lock()

    @property
    def confidence(self) -> float:
        return self._confidence

    @property
    def strategies(self) -> List[str]:
        return list(self.settings.strategies)

    def observe(self, trade: Trade) -> float:
        """Learn from a closed trade; returns the new confidence level."""
        if trade.is_open:
            raise ValueError(f"cannot learn from open trade {trade.id}")
        with self._lock:
            self._confidence = min(
                self.settings.confidence_ceiling,
                self._confidence + self.settings.confidence_step,
            )
            confidence = self._confidence
        logger.debug(
            "[Learning] %s pnl=%.2f -> confidence=%.2f", trade.symbol, trade.pnl, confidence
        )
        return confidence

    def replay(self, trades: List[Trade]) -> float:
        """Rebuild confidence from journalled closed trades after a restart."""
        closed = sum(1 for t in trades if not t.is_open)
        with self._lock:
            self._confidence = min(
                self.settings.confidence_ceiling,
                self.settings.initial_confidence + self.settings.confidence_step * closed,
            )
            confidence = self._confidence
        logger.info("[Learning] replayed %d closed trades -> confidence=%.2f", closed, confidence)
        return confidence

    def score(self, performance: Performance, confidence: Optional[float] = None) -> float:
        if performance.total_closed == 0:
            return 0.0
        confidence = self._confidence if confidence is None else confidence
        factors = [
            min(1.0, performance.total_closed / self.settings.target_trades),
            min(1.0, performance.win_rate / self.settings.target_win_rate),
            confidence,
        ]
        return min(100.0, sum(factors) / len(factors) * 100)

    def progress(self) -> float:
        return self.score(self.ledger.performance(Mode.PAPER))

"""
strategy/heuristic.py
---------------------
Synthetic sentiment + technical scorer used while paper trading:

• price      – per-symbol base price perturbed by ±5 %
• confidence – mean of a sentiment and a technical sub-score, each in [0, 1]
• side       – buy / sell with equal odds
• size       – 100..500 units of account
"""

from __future__ import annotations
import random
from typing import Dict, Optional

from models.signal import Candidate
from models.settings import DEFAULT_BASE_PRICES
from models.trade import Side

from .base import BaseSignalGenerator


class HeuristicSignalGenerator(BaseSignalGenerator):
    """Random-walk stand-in for a real market model."""

    DEFAULT_PRICE = 100.0
    PRICE_VARIATION = 0.05
    MIN_SIZE = 100.0
    MAX_SIZE = 500.0

    def __init__(
        self,
        base_prices: Optional[Dict[str, float]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.base_prices = dict(base_prices or DEFAULT_BASE_PRICES)
        self.rng = rng or random.Random()

    def reference_price(self, symbol: str) -> float:
        base = self.base_prices.get(symbol, self.DEFAULT_PRICE)
        return base * self.rng.uniform(1 - self.PRICE_VARIATION, 1 + self.PRICE_VARIATION)

    def generate(self, symbol: str) -> Candidate:
        sentiment = self.rng.random()
        technical = self.rng.random()
        return Candidate(
            symbol=symbol,
            price=self.reference_price(symbol),
            confidence=(sentiment + technical) / 2,
            side=Side.BUY if self.rng.random() < 0.5 else Side.SELL,
            size=self.rng.uniform(self.MIN_SIZE, self.MAX_SIZE),
            sentiment=sentiment,
            technical=technical,
        )

"""
strategy/base.py
----------------
Common interface for all signal generators.

A signal generator receives a traded symbol and returns a scored trade
candidate. Implementations must keep no state between calls beyond static
reference data, so a real model can replace the heuristic one without any
other component noticing.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from models.signal import Candidate


class BaseSignalGenerator(ABC):
    """Abstract signal generator with a single entry point."""

    @abstractmethod
    def generate(self, symbol: str) -> Candidate:
        """
        Score the market for ``symbol`` and return a candidate.

        Expected candidate fields
        -------------------------
        symbol      : str   – trading pair (e.g. 'BTC/USDT')
        price       : float – reference entry price
        confidence  : float – 0..1 score
        side        : Side  – suggested direction
        size        : float – suggested size in units of account
        """
        raise NotImplementedError

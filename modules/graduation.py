from __future__ import annotations

from typing import Optional

from models.settings import GraduationThresholds
from models.trade import Performance


class GraduationPolicy:
    """Decides whether paper results are good enough to trade live."""

    def __init__(self, thresholds: Optional[GraduationThresholds] = None) -> None:
        self.thresholds = thresholds or GraduationThresholds()

    def can_graduate(self, performance: Performance) -> bool:
        t = self.thresholds
        return (
            performance.total_closed >= t.min_closed_trades
            and performance.win_rate >= t.min_win_rate
            and performance.total_pnl > t.min_total_pnl
        )

    def shortfall(self, performance: Performance) -> list[str]:
        """Human-readable reasons why ``can_graduate`` is false."""
        t = self.thresholds
        reasons = []
        if performance.total_closed < t.min_closed_trades:
            reasons.append(f"closed trades {performance.total_closed}/{t.min_closed_trades}")
        if performance.win_rate < t.min_win_rate:
            reasons.append(f"win rate {performance.win_rate:.0%} < {t.min_win_rate:.0%}")
        if performance.total_pnl <= t.min_total_pnl:
            reasons.append(f"profit ${performance.total_pnl:.2f} <= ${t.min_total_pnl:.2f}")
        return reasons

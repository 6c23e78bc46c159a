import pytest

from models.settings import GraduationThresholds
from models.trade import Performance
from modules.graduation import GraduationPolicy

# ------------------------- Fixtures ------------------------- #

@pytest.fixture
def policy():
    return GraduationPolicy()

# ------------------------- Tests ------------------------- #

def test_graduates_at_fifty_trades(policy):
    perf = Performance(total_opened=50, total_closed=50, wins=38, total_pnl=600.0)
    assert perf.win_rate == pytest.approx(0.76)
    assert policy.can_graduate(perf) is True


def test_does_not_graduate_at_forty_nine_trades(policy):
    perf = Performance(total_opened=49, total_closed=49, wins=38, total_pnl=600.0)
    assert perf.win_rate > 0.76
    assert policy.can_graduate(perf) is False


@pytest.mark.parametrize("closed", [0, 1, 10, 49])
def test_never_graduates_below_trade_threshold(policy, closed):
    perf = Performance(total_opened=closed, total_closed=closed, wins=closed, total_pnl=1_000_000.0)
    assert policy.can_graduate(perf) is False


def test_win_rate_below_threshold_blocks(policy):
    perf = Performance(total_opened=100, total_closed=100, wins=74, total_pnl=5000.0)
    assert policy.can_graduate(perf) is False


def test_profit_must_exceed_threshold(policy):
    perf = Performance(total_opened=60, total_closed=60, wins=50, total_pnl=500.0)
    assert policy.can_graduate(perf) is False


def test_thresholds_are_overridable():
    policy = GraduationPolicy(GraduationThresholds(min_closed_trades=5, min_win_rate=0.5, min_total_pnl=10))
    perf = Performance(total_opened=5, total_closed=5, wins=3, total_pnl=11.0)
    assert policy.can_graduate(perf) is True


def test_shortfall_lists_every_unmet_condition(policy):
    reasons = policy.shortfall(Performance(total_opened=3, total_closed=3, wins=1, total_pnl=-2.0))
    assert len(reasons) == 3
    assert reasons[0].startswith("closed trades 3/50")
    assert policy.shortfall(Performance(total_opened=50, total_closed=50, wins=38, total_pnl=600.0)) == []

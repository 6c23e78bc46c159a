import dataclasses
import threading
from unittest.mock import MagicMock

import pytest

from core.errors import NotFoundError
from models.signal import Candidate
from models.trade import Mode, Side, TradeState
from modules.ledger import TradeLedger

# ------------------------- Fixtures ------------------------- #

@pytest.fixture
def ledger():
    return TradeLedger(clock=lambda: 1_700_000_000_000)


def make_candidate(side=Side.BUY, price=100.0, size=100.0, symbol="BTC/USDT", confidence=0.8):
    return Candidate(symbol=symbol, price=price, confidence=confidence, side=side, size=size)


def assert_counters_consistent(ledger):
    perf = ledger.performance()
    assert perf.wins <= perf.total_closed <= perf.total_opened

# ------------------------- Tests ------------------------- #

def test_open_creates_open_trade(ledger):
    trade = ledger.open(make_candidate())

    assert trade.state is TradeState.OPEN
    assert trade.entry_price == 100.0
    assert trade.opened_at == 1_700_000_000_000
    assert trade.mode is Mode.PAPER
    assert ledger.open_positions() == [trade]
    assert ledger.performance().total_opened == 1


def test_open_assigns_unique_ids(ledger):
    ids = {ledger.open(make_candidate()).id for _ in range(100)}
    assert len(ids) == 100


def test_close_buy_at_higher_price_is_a_win(ledger):
    trade = ledger.open(make_candidate(side=Side.BUY, price=100.0, size=100.0))

    closed = ledger.close(trade.id, 102.0)

    assert closed.pnl == pytest.approx(2.0)
    assert closed.state is TradeState.CLOSED
    assert closed.exit_price == 102.0
    perf = ledger.performance()
    assert perf.wins == 1
    assert perf.total_closed == 1
    assert perf.total_pnl == pytest.approx(2.0)
    assert ledger.open_positions() == []
    assert ledger.closed_history() == [closed]


def test_close_sell_at_lower_price_is_a_win(ledger):
    trade = ledger.open(make_candidate(side=Side.SELL, price=200.0, size=400.0))

    closed = ledger.close(trade.id, 190.0)

    # (190 - 200) * (400 / 200) = -20, negated for a sell
    assert closed.pnl == pytest.approx(20.0)
    assert ledger.performance().wins == 1


def test_losing_trades_do_not_count_as_wins(ledger):
    buy = ledger.open(make_candidate(side=Side.BUY))
    sell = ledger.open(make_candidate(side=Side.SELL))

    assert ledger.close(buy.id, 99.0).pnl < 0
    assert ledger.close(sell.id, 101.0).pnl < 0
    perf = ledger.performance()
    assert perf.wins == 0
    assert perf.total_pnl == pytest.approx(-2.0)


def test_close_unknown_trade_raises(ledger):
    with pytest.raises(NotFoundError):
        ledger.close("does-not-exist", 100.0)


def test_close_twice_raises_and_leaves_counters(ledger):
    trade = ledger.open(make_candidate())
    ledger.close(trade.id, 101.0)

    with pytest.raises(NotFoundError):
        ledger.close(trade.id, 150.0)

    perf = ledger.performance()
    assert perf.total_closed == 1
    assert perf.total_pnl == pytest.approx(1.0)


def test_closed_trade_is_immutable(ledger):
    trade = ledger.open(make_candidate())
    closed = ledger.close(trade.id, 101.0)

    with pytest.raises(dataclasses.FrozenInstanceError):
        closed.pnl = 1000.0


def test_counters_hold_invariant_after_every_operation(ledger):
    trades = [ledger.open(make_candidate(side=Side.BUY if i % 2 else Side.SELL)) for i in range(10)]
    assert_counters_consistent(ledger)
    for i, trade in enumerate(trades):
        ledger.close(trade.id, 100.0 + (i - 5))
        assert_counters_consistent(ledger)


def test_snapshots_are_copies(ledger):
    ledger.open(make_candidate())
    snapshot = ledger.open_positions()
    snapshot.clear()

    assert len(ledger.open_positions()) == 1


def test_get_returns_open_and_closed_trades(ledger):
    trade = ledger.open(make_candidate())
    assert ledger.get(trade.id) is trade
    closed = ledger.close(trade.id, 100.5)
    assert ledger.get(trade.id) == closed
    with pytest.raises(NotFoundError):
        ledger.get("nope")


def test_concurrent_closes_keep_counters_consistent(ledger):
    trades = [ledger.open(make_candidate()) for _ in range(400)]
    chunks = [trades[i::8] for i in range(8)]

    def worker(chunk):
        for t in chunk:
            ledger.close(t.id, 101.0)

    threads = [threading.Thread(target=worker, args=(c,)) for c in chunks]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    perf = ledger.performance()
    assert perf.total_opened == 400
    assert perf.total_closed == 400
    assert perf.wins == 400
    assert perf.total_pnl == pytest.approx(400.0)


def test_persistence_receives_open_and_close():
    persistence = MagicMock()
    ledger = TradeLedger(persistence=persistence)

    trade = ledger.open(make_candidate())
    closed = ledger.close(trade.id, 101.0)

    assert [c.args[0] for c in persistence.upsert_trade.call_args_list] == [trade, closed]


def test_restore_rebuilds_counters(ledger):
    opened = ledger.open(make_candidate())
    won = ledger.open(make_candidate())
    ledger.close(won.id, 110.0)

    fresh = TradeLedger()
    fresh.restore(ledger.open_positions() + ledger.closed_history())

    perf = fresh.performance()
    assert perf.total_opened == 2
    assert perf.total_closed == 1
    assert perf.wins == 1
    assert perf.total_pnl == pytest.approx(10.0)
    assert [t.id for t in fresh.open_positions()] == [opened.id]


def test_counters_are_kept_per_mode():
    ledger = TradeLedger()
    paper = ledger.open(Candidate(symbol="BTC/USDT", price=100.0, confidence=0.8, side=Side.BUY, size=100.0))
    live = ledger.open(
        Candidate(symbol="BTC/USDT", price=100.0, confidence=0.8, side=Side.BUY, size=100.0), mode=Mode.LIVE
    )
    ledger.close(paper.id, 102.0)
    ledger.close(live.id, 90.0)

    assert (ledger.performance(Mode.PAPER).wins, ledger.performance(Mode.PAPER).total_pnl) == (1, pytest.approx(2.0))
    assert (ledger.performance(Mode.LIVE).wins, ledger.performance(Mode.LIVE).total_pnl) == (0, pytest.approx(-10.0))
    combined = ledger.performance()
    assert (combined.total_opened, combined.total_closed) == (2, 2)
    assert [t.id for t in ledger.closed_history(Mode.LIVE)] == [live.id]

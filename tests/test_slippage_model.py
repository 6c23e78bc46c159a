import random

import pytest

from models.trade import Side
from modules.slippage_model import apply_entry_slippage, simulate_exit_price


def test_buy_fills_above_and_sell_below():
    rng = random.Random(5)
    for _ in range(100):
        assert 100.0 <= apply_entry_slippage(100.0, Side.BUY, 0.001, rng) <= 100.1
        assert 99.9 <= apply_entry_slippage(100.0, "sell", 0.001, rng) <= 100.0


def test_zero_slippage_keeps_price():
    assert apply_entry_slippage(123.45, Side.BUY, 0) == 123.45


def test_exit_price_stays_in_window():
    rng = random.Random(9)
    prices = [simulate_exit_price(100.0, 0.02, rng) for _ in range(500)]
    assert min(prices) >= 98.0 - 1e-9
    assert max(prices) <= 102.0 + 1e-9
    assert min(prices) < 100.0 < max(prices)


@pytest.mark.parametrize("variation", [0.0])
def test_no_variation_returns_entry(variation):
    assert simulate_exit_price(50.0, variation) == pytest.approx(50.0)

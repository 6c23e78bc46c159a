import random

import pytest

from models.trade import Side
from modules.strategy.base import BaseSignalGenerator
from modules.strategy.heuristic import HeuristicSignalGenerator

# ------------------------- Fixtures ------------------------- #

@pytest.fixture
def generator():
    return HeuristicSignalGenerator(rng=random.Random(1234))

# ------------------------- Tests ------------------------- #

def test_is_a_signal_generator(generator):
    assert isinstance(generator, BaseSignalGenerator)


def test_candidates_stay_within_bounds(generator):
    sides = set()
    for _ in range(500):
        c = generator.generate("BTC/USDT")
        assert 45000 * 0.95 <= c.price <= 45000 * 1.05
        assert 0.0 <= c.confidence <= 1.0
        assert 100 <= c.size <= 500
        assert c.confidence == pytest.approx((c.sentiment + c.technical) / 2)
        sides.add(c.side)
    assert sides == {Side.BUY, Side.SELL}


def test_unknown_symbol_uses_default_base_price(generator):
    c = generator.generate("DOGE/USDT")
    assert 95 <= c.price <= 105
    assert c.asset_id == "DOGE"


def test_same_seed_gives_same_candidates():
    a = HeuristicSignalGenerator(rng=random.Random(7))
    b = HeuristicSignalGenerator(rng=random.Random(7))
    assert a.generate("ETH/USDT") == b.generate("ETH/USDT")


def test_custom_base_prices():
    generator = HeuristicSignalGenerator(base_prices={"XYZ/USDT": 10.0}, rng=random.Random(3))
    assert 9.5 <= generator.generate("XYZ/USDT").price <= 10.5

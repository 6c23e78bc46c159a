import random
from typing import Optional

from models.trade import Side


def apply_entry_slippage(price, side, max_slippage=0.001, rng: Optional[random.Random] = None):
    # Buys fill above, sells below the quoted price
    if max_slippage <= 0:
        return price
    slippage = max_slippage * (rng or random).random()
    return price * (1 + slippage) if Side(side) is Side.BUY else price * (1 - slippage)


def simulate_exit_price(entry_price, variation=0.02, rng: Optional[random.Random] = None):
    # Uniform in [entry * (1 - variation), entry * (1 + variation)]
    return entry_price * (rng or random).uniform(1 - variation, 1 + variation)

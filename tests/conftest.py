import random

import pytest

from hit_trader.core.config_models import EngineConfig
from hit_trader.engine import TradingEngine


class ScriptedRandom(random.Random):
    """random.Random whose random() replays ``rolls`` before falling back.

    getrandbits is overridden too so choice() keeps using bits and never
    eats a scripted roll.
    """

    def __new__(cls, *args, **kwargs):
        # keep constructor args away from the C-level seeding in Random.__new__
        return super().__new__(cls)

    def __init__(self, rolls=(), seed=0):
        super().__init__(seed)
        self.rolls = list(rolls)

    def random(self):
        if self.rolls:
            return self.rolls.pop(0)
        return super().random()

    def getrandbits(self, k):
        return super().getrandbits(k)


class ConstantRandom(ScriptedRandom):
    """Every random() is ``value``; 0.5 makes symmetric uniform() draws zero."""

    def __init__(self, value=0.5, seed=0):
        super().__init__(seed=seed)
        self.value = value

    def random(self):
        return self.value

    def getrandbits(self, k):
        return super().getrandbits(k)


@pytest.fixture
def flat_engine():
    """Engine whose price never moves off 420.69."""
    return TradingEngine(EngineConfig(), rng=ConstantRandom(0.5), clock=lambda: 0.0)


@pytest.fixture
def fast_config():
    return EngineConfig.validate_config(
        {
            "price": {"tick_interval_sec": 0.01, "history_length": 30},
            "stake": {"tick_interval_sec": 0.01},
            "auto_trade": {"interval_sec": 0.01, "sma_period": 5},
            "session": {"heartbeat_interval_sec": 0.05},
        }
    )

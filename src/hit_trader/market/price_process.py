from __future__ import annotations

import math
import random
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional, Sequence

from hit_trader.core.config_models import BiasTerm, PriceConfig
from hit_trader.core.logger import logger
from hit_trader.core.protocols import RandomSource


@dataclass(frozen=True)
class PriceState:
    current: float
    previous: Optional[float]
    volatility: float


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def bias_component(terms: Sequence[BiasTerm], price: float, t: float) -> float:
    """Sum of the periodic momentum terms at wall-clock time ``t``."""
    total = 0.0
    for term in terms:
        total += term.amplitude * math.sin(2.0 * math.pi * t / term.period_sec) * price
    return total


def step_price(
    state: PriceState,
    rng: RandomSource,
    t: float,
    cfg: PriceConfig,
    include_bias: bool = True,
) -> PriceState:
    """Pure transition: previous state in, next state out.

    Volatility random-walks inside its bounds, the price moves by a
    volatility-scaled random delta plus the bias terms, and is floored
    at ``cfg.min_price``.
    """
    vol = clamp(
        state.volatility + rng.uniform(-cfg.volatility_step, cfg.volatility_step),
        cfg.min_volatility,
        cfg.max_volatility,
    )
    prev = state.current
    delta = rng.uniform(-0.5, 0.5) * vol * prev
    if include_bias:
        delta += bias_component(cfg.bias_terms, prev, t)
    new_price = max(cfg.min_price, prev + delta)
    return PriceState(current=new_price, previous=prev, volatility=vol)


class PriceProcess:
    """Owns the live price state and its rolling history buffer."""

    def __init__(
        self,
        cfg: Optional[PriceConfig] = None,
        rng: Optional[RandomSource] = None,
        clock: Callable[[], float] = time.time,
        seed_history: bool = True,
    ) -> None:
        self.cfg = cfg or PriceConfig()
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.clock = clock
        self._history: Deque[float] = deque(maxlen=self.cfg.history_length)
        self._state = PriceState(
            current=self.cfg.initial_price,
            previous=None,
            volatility=self.cfg.initial_volatility,
        )
        if seed_history:
            self.seed_history()
        else:
            self._history.append(self.cfg.initial_price)

    @property
    def current_price(self) -> float:
        return self._state.current

    @property
    def previous_price(self) -> Optional[float]:
        return self._state.previous

    @property
    def volatility(self) -> float:
        return self._state.volatility

    def history(self) -> List[float]:
        """Copy of the buffer, oldest first."""
        return list(self._history)

    def seed_history(self) -> None:
        """Fill the buffer with a bias-free random walk from the initial price."""
        self._history.clear()
        state = PriceState(
            current=self.cfg.initial_price,
            previous=None,
            volatility=self.cfg.initial_volatility,
        )
        self._history.append(state.current)
        for _ in range(self.cfg.history_length - 1):
            state = step_price(state, self.rng, 0.0, self.cfg, include_bias=False)
            self._history.append(state.current)
        self._state = state
        logger.info(
            f"Seeded {len(self._history)} synthetic prices, last={state.current:.4f}"
        )

    def tick(self, now: Optional[float] = None) -> float:
        t = self.clock() if now is None else now
        self._state = step_price(self._state, self.rng, t, self.cfg)
        self._history.append(self._state.current)
        return self._state.current

from __future__ import annotations

import asyncio
import random
import time
from typing import Optional

from hit_trader.core.config_models import EngineConfig
from hit_trader.core.logger import logger
from hit_trader.engine import TradingEngine
from hit_trader.session.lifecycle import request_shutdown, run_session_lifecycle
from hit_trader.session.session_state import SessionResult, build_session_result


class SimulationRunner:
    """Owns the asyncio timers around one ``TradingEngine``."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        engine: Optional[TradingEngine] = None,
        seed: Optional[int] = None,
        stake_on_start: bool = False,
    ) -> None:
        if engine is None:
            engine = TradingEngine(config, rng=random.Random(seed))
        self.engine = engine
        self.config = engine.config
        self.stake_on_start = stake_on_start
        self.status = "initializing"
        self.stopped_reason = "completed"
        self.start_time = time.time()
        self.starting_value = engine.get_snapshot().wallet_value
        self.price_ticks = 0
        self.stake_ticks = 0
        self.auto_trade_ticks = 0
        self.auto_trades = 0
        self.stakes_started = 0
        self.stakes_resolved = 0
        self.drains = 0
        self.errors = 0
        self.stake_idle_since = self.start_time
        self._shutdown_event: Optional[asyncio.Event] = None

    @property
    def shutdown_event(self) -> asyncio.Event:
        # Created lazily so it binds to the loop that runs the session
        if self._shutdown_event is None:
            self._shutdown_event = asyncio.Event()
        return self._shutdown_event

    def request_shutdown(self, reason: str) -> None:
        request_shutdown(self, reason)

    async def run(self, duration_sec: float) -> SessionResult:
        self.start_time = time.time()
        self.starting_value = self.engine.get_snapshot().wallet_value
        self.stake_idle_since = self.start_time
        if self.stake_on_start and self.engine.trigger_stake() is not None:
            self.stakes_started += 1
        await run_session_lifecycle(self, duration_sec)
        result = build_session_result(self)
        logger.info(
            f"Session result: value {result.starting_value:.2f} -> "
            f"{result.ending_value:.2f} FauxUSD",
        )
        return result


def run_session(
    config: Optional[EngineConfig] = None,
    duration_sec: float = 60.0,
    seed: Optional[int] = None,
    stake_on_start: bool = False,
) -> SessionResult:
    """Blocking helper for the CLI."""
    runner = SimulationRunner(config, seed=seed, stake_on_start=stake_on_start)
    return asyncio.run(runner.run(duration_sec))

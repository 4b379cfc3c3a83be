from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Callable

from hit_trader.core.logger import logger

if TYPE_CHECKING:
    from hit_trader.session.runner import SimulationRunner


async def periodic_task(
    runner: "SimulationRunner", interval: float, step: Callable[[], None]
) -> None:
    """Call ``step`` every ``interval`` seconds until shutdown."""
    try:
        while not runner.shutdown_event.is_set():
            await asyncio.sleep(interval)
            if runner.shutdown_event.is_set():
                break
            step()
    except asyncio.CancelledError:
        pass


async def price_task(runner: "SimulationRunner") -> None:
    def step() -> None:
        runner.engine.tick_price()
        runner.price_ticks += 1

    await periodic_task(runner, runner.config.price.tick_interval_sec, step)


async def stake_task(runner: "SimulationRunner") -> None:
    session = runner.config.session

    def step() -> None:
        if runner.engine.stake.is_locked:
            runner.stake_ticks += 1
        resolution = runner.engine.tick_stake()
        if resolution is not None:
            runner.stakes_resolved += 1
            runner.stake_idle_since = time.time()
            if resolution.outcome.is_failure:
                # Nobody is around to click "Close" in a headless session
                message = runner.engine.acknowledge_notification()
                logger.warning(f"STAKE FAILED: {message}")
        if not session.auto_restake or runner.engine.stake.is_locked:
            return
        # The auto-trader is gated while locked; leave it an idle window
        if time.time() - runner.stake_idle_since < session.restake_cooldown_sec:
            return
        if runner.engine.trigger_stake() is not None:
            runner.stakes_started += 1

    await periodic_task(runner, runner.config.stake.tick_interval_sec, step)


async def auto_trade_task(runner: "SimulationRunner") -> None:
    def step() -> None:
        runner.auto_trade_ticks += 1
        if runner.engine.tick_auto_trade() is not None:
            runner.auto_trades += 1

    await periodic_task(runner, runner.config.auto_trade.interval_sec, step)


async def drain_task(runner: "SimulationRunner", interval: float) -> None:
    def step() -> None:
        runner.engine.drain(runner.config.session.drain_multiplier)
        runner.drains += 1

    await periodic_task(runner, interval, step)


async def heartbeat_task(runner: "SimulationRunner") -> None:
    """Logs a one-line status at the configured cadence."""

    def step() -> None:
        snap = runner.engine.get_snapshot()
        lock = snap.stake_lock.remaining_seconds if snap.stake_lock else 0
        logger.info(
            f"HEARTBEAT | price={snap.current_price:.4f} "
            f"$HIT={snap.wallet.hit:.6f} FauxUSD={snap.wallet.faux_usd:.2f} "
            f"value={snap.wallet_value:.2f} stake={snap.stake_state.value}({lock}s) "
            f"trend={snap.trend}",
            {"elapsed": round(time.time() - runner.start_time, 1)},
        )

    await periodic_task(runner, runner.config.session.heartbeat_interval_sec, step)


async def timer_task(runner: "SimulationRunner", end_time: float) -> None:
    """Triggers shutdown after the duration limit."""
    try:
        while time.time() < end_time:
            await asyncio.sleep(min(0.1, max(0.0, end_time - time.time())))
        logger.info("Duration limit reached. Shutting down...")
        runner.request_shutdown("duration_limit")
    except asyncio.CancelledError:
        pass

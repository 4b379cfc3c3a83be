"""Session lifecycle management: task orchestration and shutdown."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, List

from hit_trader.core.logger import logger
from hit_trader.session.tasks import (
    auto_trade_task,
    drain_task,
    heartbeat_task,
    price_task,
    stake_task,
    timer_task,
)

if TYPE_CHECKING:
    from hit_trader.session.runner import SimulationRunner


async def run_session_lifecycle(runner: "SimulationRunner", duration_sec: float) -> None:
    """Start every timer, wait for a shutdown request, then tear down."""
    end_time = runner.start_time + duration_sec
    runner.status = "running"
    logger.info(f"Session started for {duration_sec:.1f}s")

    tasks = [
        asyncio.create_task(price_task(runner), name="price"),
        asyncio.create_task(stake_task(runner), name="stake"),
        asyncio.create_task(auto_trade_task(runner), name="auto_trade"),
        asyncio.create_task(heartbeat_task(runner), name="heartbeat"),
        asyncio.create_task(timer_task(runner, end_time), name="timer"),
    ]
    drain_interval = runner.config.session.drain_interval_sec
    if drain_interval:
        tasks.append(
            asyncio.create_task(drain_task(runner, drain_interval), name="drain")
        )
    for task in tasks:
        task.add_done_callback(lambda t: handle_task_done(runner, t))

    try:
        await runner.shutdown_event.wait()
    finally:
        await perform_shutdown(runner, tasks)


async def perform_shutdown(runner: "SimulationRunner", tasks: List[asyncio.Task]) -> None:
    """Cancel every timer and close the engine; nothing ticks afterwards."""
    if runner.status == "stopped":
        return
    runner.status = "shutting_down"
    logger.info("GRACEFUL SHUTDOWN INITIATED")

    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)

    runner.engine.close()
    runner.status = "stopped"
    logger.info(f"Session stopped ({runner.stopped_reason})")


def request_shutdown(runner: "SimulationRunner", reason: str) -> None:
    """Request a graceful shutdown with the given reason."""
    if not runner.shutdown_event.is_set():
        if runner.stopped_reason == "completed":
            runner.stopped_reason = reason
        runner.shutdown_event.set()


def handle_task_done(runner: "SimulationRunner", task: asyncio.Task) -> None:
    """Callback for task completion, handles exceptions."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc:
        logger.error(f"Task failed: {task.get_name()} | {exc}")
        runner.errors += 1
        request_shutdown(runner, "task_failed")

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from hit_trader.session.runner import SimulationRunner


@dataclass
class SessionResult:
    """Result of a simulation session."""

    price_ticks: int = 0
    stake_ticks: int = 0
    auto_trade_ticks: int = 0
    auto_trades: int = 0
    stakes_started: int = 0
    stakes_resolved: int = 0
    drains: int = 0
    errors: int = 0
    starting_value: float = 0.0
    ending_value: float = 0.0
    ending_price: float = 0.0
    ending_wallet: Optional[Dict[str, float]] = None
    duration_sec: float = 0.0
    stopped_reason: str = "completed"


def build_session_result(runner: "SimulationRunner") -> SessionResult:
    snap = runner.engine.get_snapshot()
    return SessionResult(
        price_ticks=runner.price_ticks,
        stake_ticks=runner.stake_ticks,
        auto_trade_ticks=runner.auto_trade_ticks,
        auto_trades=runner.auto_trades,
        stakes_started=runner.stakes_started,
        stakes_resolved=runner.stakes_resolved,
        drains=runner.drains,
        errors=runner.errors,
        starting_value=runner.starting_value,
        ending_value=snap.wallet_value,
        ending_price=snap.current_price,
        ending_wallet=snap.wallet.as_dict(),
        duration_sec=time.time() - runner.start_time,
        stopped_reason=runner.stopped_reason,
    )

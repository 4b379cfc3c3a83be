"""Asyncio host that drives the engine's tick functions on timers."""

from .runner import SimulationRunner, run_session
from .session_state import SessionResult

__all__ = ["SimulationRunner", "SessionResult", "run_session"]

"""Timed stake lock."""

from .stake_controller import (
    StakeController,
    StakeLock,
    StakeOutcome,
    StakeResolution,
    StakeState,
    expected_multiplier,
)

__all__ = [
    "StakeController",
    "StakeLock",
    "StakeOutcome",
    "StakeResolution",
    "StakeState",
    "expected_multiplier",
]

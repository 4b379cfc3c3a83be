from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hit_trader.core.config_models import StakeConfig
from hit_trader.core.logger import logger
from hit_trader.core.protocols import RandomSource
from hit_trader.paper.ledger import Ledger
from hit_trader.paper.wallet_types import Wallet


class StakeState(str, Enum):
    IDLE = "idle"
    LOCKED = "locked"


@dataclass(frozen=True)
class StakeOutcome:
    multiplier: float
    is_failure: bool
    lock_seconds: int
    message: Optional[str] = None


@dataclass
class StakeLock:
    remaining_seconds: int


@dataclass(frozen=True)
class StakeResolution:
    outcome: StakeOutcome
    wallet: Wallet


def sample_outcome(cfg: StakeConfig, rng: RandomSource) -> StakeOutcome:
    """Failure with ``cfg.failure_probability``, else a uniformly chosen tier."""
    roll = rng.random()
    if roll < cfg.failure_probability:
        return StakeOutcome(
            multiplier=cfg.failure_multiplier,
            is_failure=True,
            lock_seconds=cfg.failure_lock_seconds,
            message=rng.choice(cfg.failure_messages),
        )
    tier = rng.choice(cfg.tiers)
    return StakeOutcome(
        multiplier=tier.multiplier,
        is_failure=False,
        lock_seconds=tier.lock_seconds,
    )


def expected_multiplier(cfg: StakeConfig) -> float:
    p = cfg.failure_probability
    tier_avg = sum(t.multiplier for t in cfg.tiers) / len(cfg.tiers)
    return p * cfg.failure_multiplier + (1.0 - p) * tier_avg


class StakeController:
    """Idle -> Locked(outcome, remaining) -> Idle.

    The outcome is drawn when the stake starts and applied to the ledger
    only when the countdown reaches zero. At most one stake is in flight.
    """

    def __init__(
        self,
        ledger: Ledger,
        cfg: Optional[StakeConfig] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.ledger = ledger
        self.cfg = cfg or StakeConfig()
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self._outcome: Optional[StakeOutcome] = None
        self._lock: Optional[StakeLock] = None
        self._notification: Optional[str] = None
        self.resolved = 0

    @property
    def state(self) -> StakeState:
        return StakeState.LOCKED if self._lock is not None else StakeState.IDLE

    @property
    def is_locked(self) -> bool:
        return self._lock is not None

    @property
    def lock(self) -> Optional[StakeLock]:
        if self._lock is None:
            return None
        return StakeLock(self._lock.remaining_seconds)

    @property
    def pending_outcome(self) -> Optional[StakeOutcome]:
        return self._outcome

    @property
    def notification(self) -> Optional[str]:
        return self._notification

    def trigger(self, rng: Optional[RandomSource] = None) -> Optional[StakeOutcome]:
        """Start a stake. Returns None (and changes nothing) if one is pending."""
        if self.is_locked:
            logger.debug("Stake already pending; trigger ignored")
            return None
        outcome = sample_outcome(self.cfg, rng if rng is not None else self.rng)
        self._outcome = outcome
        self._lock = StakeLock(remaining_seconds=outcome.lock_seconds)
        logger.info(f"Stake locked for {outcome.lock_seconds}s")
        return outcome

    def tick(self) -> Optional[StakeResolution]:
        """One-second countdown step; resolves the stake when it hits zero."""
        if self._lock is None or self._outcome is None:
            return None
        self._lock.remaining_seconds = max(0, self._lock.remaining_seconds - 1)
        if self._lock.remaining_seconds > 0:
            return None

        outcome = self._outcome
        self._outcome = None
        self._lock = None
        wallet = self.ledger.scale(outcome.multiplier)
        self.resolved += 1
        if outcome.is_failure:
            self._notification = outcome.message or "Unknown error"
            logger.warning(f"Stake failed: {self._notification}")
        else:
            logger.info(f"Stake paid out x{outcome.multiplier}")
        return StakeResolution(outcome=outcome, wallet=wallet)

    def cancel(self) -> bool:
        """Drop the pending stake without applying it."""
        if self._lock is None:
            return False
        self._outcome = None
        self._lock = None
        logger.info("Stake cancelled")
        return True

    def acknowledge(self) -> Optional[str]:
        message, self._notification = self._notification, None
        return message

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from hit_trader import constants as c


class BiasTerm(BaseModel):
    """Periodic drift: ``amplitude * sin(2*pi*t / period_sec) * price``."""

    amplitude: float = Field(ge=0.0)
    period_sec: float = Field(gt=0.0)


class PriceConfig(BaseModel):
    initial_price: float = Field(default=c.INITIAL_PRICE, gt=0.0)
    history_length: int = Field(default=c.PRICE_HISTORY_LENGTH, ge=2)
    min_price: float = Field(default=c.MIN_PRICE, gt=0.0)
    initial_volatility: float = c.INITIAL_VOLATILITY
    min_volatility: float = Field(default=c.MIN_VOLATILITY, gt=0.0)
    max_volatility: float = Field(default=c.MAX_VOLATILITY, gt=0.0)
    volatility_step: float = Field(default=c.VOLATILITY_STEP, ge=0.0)
    bias_terms: List[BiasTerm] = Field(
        default_factory=lambda: [
            BiasTerm(amplitude=0.01, period_sec=60.0),
            BiasTerm(amplitude=0.005, period_sec=600.0),
        ]
    )
    tick_interval_sec: float = Field(default=c.PRICE_TICK_INTERVAL, gt=0.0)

    @model_validator(mode="after")
    def _check_volatility_bounds(self) -> "PriceConfig":
        if self.min_volatility > self.max_volatility:
            raise ValueError("min_volatility must not exceed max_volatility")
        if not self.min_volatility <= self.initial_volatility <= self.max_volatility:
            raise ValueError("initial_volatility must lie within the volatility bounds")
        return self


class WalletConfig(BaseModel):
    hit: float = Field(default=c.STARTING_HIT, ge=0.0)
    faux_usd: float = Field(default=c.STARTING_FAUX_USD, ge=0.0)


class StakeTier(BaseModel):
    multiplier: float = Field(gt=0.0)
    lock_seconds: int = Field(gt=0)


DEFAULT_FAILURE_MESSAGES = [
    "Validator node failed. Stake slashed!",
    "Coins lost to MEV attack!",
    "DeFi contract hack!",
    "Dex owner rug pulled!",
]


class StakeConfig(BaseModel):
    failure_probability: float = Field(default=0.10, ge=0.0, le=1.0)
    failure_multiplier: float = Field(default=0.5, gt=0.0)
    failure_lock_seconds: int = Field(default=10, gt=0)
    failure_messages: List[str] = Field(
        default_factory=lambda: list(DEFAULT_FAILURE_MESSAGES), min_length=1
    )
    tiers: List[StakeTier] = Field(
        default_factory=lambda: [
            StakeTier(multiplier=1.1, lock_seconds=10),
            StakeTier(multiplier=1.4, lock_seconds=30),
            StakeTier(multiplier=2.0, lock_seconds=60),
        ],
        min_length=1,
    )
    tick_interval_sec: float = Field(default=c.STAKE_TICK_INTERVAL, gt=0.0)


class AutoTradeSettings(BaseModel):
    enabled: bool = False
    proportion: float = Field(default=0.1, ge=0.0, le=1.0)
    sma_period: int = Field(default=c.DEFAULT_SMA_PERIOD, gt=0)
    interval_sec: float = Field(default=c.AUTO_TRADE_INTERVAL, gt=0.0)


class SessionSettings(BaseModel):
    heartbeat_interval_sec: float = Field(default=5.0, gt=0.0)
    drain_interval_sec: Optional[float] = Field(default=None, gt=0.0)
    drain_multiplier: float = Field(default=0.99, ge=0.0, le=1.0)
    auto_restake: bool = False
    # Idle seconds after a resolution before auto_restake locks again
    restake_cooldown_sec: float = Field(default=5.0, ge=0.0)


class EngineConfig(BaseModel):
    """
    Validation schema for the whole simulation.
    Every section falls back to the built-in defaults when omitted.
    """

    price: PriceConfig = Field(default_factory=lambda: PriceConfig())
    wallet: WalletConfig = Field(default_factory=lambda: WalletConfig())
    stake: StakeConfig = Field(default_factory=lambda: StakeConfig())
    auto_trade: AutoTradeSettings = Field(default_factory=lambda: AutoTradeSettings())
    session: SessionSettings = Field(default_factory=lambda: SessionSettings())
    block_manual_swaps_while_staking: bool = False

    @classmethod
    def validate_config(cls, config: Dict[str, Any]) -> EngineConfig:
        """Helper to validate a dict against the model."""
        return cls(**config)

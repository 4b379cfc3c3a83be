"""Single owner of the simulation state and the tick functions that move it.

The engine does not schedule anything itself. A host (``hit_trader.session``
or any other timer facility) calls ``tick_price`` every 500 ms and
``tick_stake``/``tick_auto_trade`` every second. All calls are expected on
one thread; each is a short synchronous step, so two ticks never see each
other's partial writes.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple, Union

from hit_trader.core.config_models import AutoTradeSettings, EngineConfig
from hit_trader.core.events import EventJournal
from hit_trader.core.exceptions import EngineClosed, InvalidSwapPair, StakeLockActive
from hit_trader.core.logger import logger
from hit_trader.core.protocols import RandomSource
from hit_trader.indicators import price_change, sma, trend
from hit_trader.market.price_process import PriceProcess
from hit_trader.paper.ledger import Ledger, parse_amount, receive_amount
from hit_trader.paper.wallet_types import Asset, Wallet
from hit_trader.staking.stake_controller import (
    StakeController,
    StakeLock,
    StakeOutcome,
    StakeResolution,
    StakeState,
)
from hit_trader.trading.auto_trader import AutoTradeController, AutoTradeDecision

AssetLike = Union[Asset, str]


@dataclass(frozen=True)
class SwapResult:
    applied_amount: float
    received_amount: float


@dataclass(frozen=True)
class EngineSnapshot:
    current_price: float
    previous_price: Optional[float]
    history: Tuple[float, ...]
    wallet: Wallet
    stake_state: StakeState
    stake_lock: Optional[StakeLock]
    auto_trade: AutoTradeSettings
    notification: Optional[str]
    trend: Optional[str]
    pending_outcome: Optional[StakeOutcome] = None
    # What the swap form advertises while locked; a failure shows the
    # smallest tier's reward so the player cannot tell in advance
    expected_reward_pct: Optional[float] = None

    @property
    def change(self) -> Optional[Tuple[float, float]]:
        return price_change(self.current_price, self.previous_price)

    @property
    def wallet_value(self) -> float:
        return self.wallet.value_in_faux_usd(self.current_price)


class TradingEngine:
    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rng: Optional[RandomSource] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or EngineConfig()
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.journal = EventJournal()
        self.market = PriceProcess(self.config.price, rng=self.rng, clock=clock)
        self.ledger = Ledger(
            Wallet(hit=self.config.wallet.hit, faux_usd=self.config.wallet.faux_usd)
        )
        self.stake = StakeController(self.ledger, self.config.stake, rng=self.rng)
        self.auto_trader = AutoTradeController(
            self.market,
            self.ledger,
            self.stake,
            self.config.auto_trade.model_copy(),
        )
        self.closed = False

    # -- read side -------------------------------------------------------

    def get_snapshot(self) -> EngineSnapshot:
        price = self.market.current_price
        history = self.market.history()
        series = sma(history, self.auto_trader.settings.sma_period)
        outcome = self.stake.pending_outcome
        return EngineSnapshot(
            current_price=price,
            previous_price=self.market.previous_price,
            history=tuple(history),
            wallet=self.ledger.wallet,
            stake_state=self.stake.state,
            stake_lock=self.stake.lock,
            auto_trade=self.auto_trader.settings.model_copy(),
            notification=self.stake.notification,
            trend=trend(price, series[-1] if series else None),
            pending_outcome=outcome,
            expected_reward_pct=self._advertised_reward_pct(outcome),
        )

    def _advertised_reward_pct(self, outcome: Optional[StakeOutcome]) -> Optional[float]:
        if outcome is None:
            return None
        if outcome.is_failure:
            multiplier = min(t.multiplier for t in self.config.stake.tiers)
        else:
            multiplier = outcome.multiplier
        return round((multiplier - 1.0) * 100.0, 6)

    def indicator(self, period: Optional[int] = None) -> List[Optional[float]]:
        return sma(self.market.history(), period or self.auto_trader.settings.sma_period)

    def quote(self, from_asset: AssetLike, to_asset: AssetLike, amount: Any) -> float:
        """Amount received at the current price, without touching the wallet."""
        src, dst = Asset.parse(from_asset), Asset.parse(to_asset)
        if src is dst:
            raise InvalidSwapPair(f"Cannot swap {src.value} for itself")
        return receive_amount(src, parse_amount(amount), self.market.current_price)

    def preset_amount(self, asset: AssetLike, fraction: float = 1.0) -> float:
        """Share of a balance for the max/50%/25% shortcuts."""
        if not 0 < fraction <= 1:
            raise ValueError(f"fraction must be in (0, 1] (got {fraction})")
        src = Asset.parse(asset)
        return round(self.ledger.balance(src) * fraction, src.precision)

    # -- control plane ---------------------------------------------------

    def manual_swap(
        self, from_asset: AssetLike, to_asset: AssetLike, amount: Any
    ) -> SwapResult:
        self._ensure_open()
        if self.config.block_manual_swaps_while_staking and self.stake.is_locked:
            raise StakeLockActive("Swaps are disabled while a stake is pending")
        conversion = self.ledger.convert(
            from_asset, to_asset, amount, self.market.current_price
        )
        self.journal.append_event(
            {
                "event": "SwapExecuted",
                "from": conversion.from_asset.value,
                "to": conversion.to_asset.value,
                "requested": conversion.requested_amount,
                "applied": conversion.applied_amount,
                "received": conversion.received_amount,
                "rate": conversion.rate,
            }
        )
        return SwapResult(
            applied_amount=conversion.applied_amount,
            received_amount=conversion.received_amount,
        )

    def trigger_stake(self, rng: Optional[RandomSource] = None) -> Optional[StakeOutcome]:
        if self.closed:
            return None
        outcome = self.stake.trigger(rng)
        if outcome is not None:
            self.journal.append_event(
                {"event": "StakeStarted", "lock_seconds": outcome.lock_seconds}
            )
        return outcome

    def cancel_stake(self) -> bool:
        cancelled = self.stake.cancel()
        if cancelled:
            self.journal.append_event({"event": "StakeCancelled"})
        return cancelled

    def acknowledge_notification(self) -> Optional[str]:
        return self.stake.acknowledge()

    def set_auto_trade(
        self, enabled: bool, proportion: Optional[float] = None
    ) -> AutoTradeSettings:
        self._ensure_open()
        return self.auto_trader.configure(enabled, proportion)

    def drain(self, multiplier: float) -> Wallet:
        """Scale the wallet on behalf of the external withdrawal drain."""
        self._ensure_open()
        wallet = self.ledger.scale(multiplier)
        self.journal.append_event({"event": "WalletDrained", "multiplier": multiplier})
        return wallet

    # -- timer entry points ----------------------------------------------

    def tick_price(self, now: Optional[float] = None) -> Optional[float]:
        if self.closed:
            return None
        return self.market.tick(now)

    def tick_stake(self) -> Optional[StakeResolution]:
        if self.closed:
            return None
        resolution = self.stake.tick()
        if resolution is not None:
            outcome = resolution.outcome
            self.journal.append_event(
                {
                    "event": "StakeResolved",
                    "multiplier": outcome.multiplier,
                    "is_failure": outcome.is_failure,
                    "message": outcome.message,
                }
            )
        return resolution

    def tick_auto_trade(self) -> Optional[AutoTradeDecision]:
        if self.closed:
            return None
        decision = self.auto_trader.tick()
        if decision is not None:
            conv = decision.conversion
            self.journal.append_event(
                {
                    "event": "AutoTradeExecuted",
                    "side": decision.side,
                    "price": decision.price,
                    "sma": decision.sma,
                    "applied": conv.applied_amount,
                    "received": conv.received_amount,
                }
            )
        return decision

    def _ensure_open(self) -> None:
        if self.closed:
            raise EngineClosed("Engine is closed")

    def close(self) -> None:
        if self.closed:
            return
        self.cancel_stake()
        self.closed = True
        logger.info("Engine closed")


from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from hit_trader.core.exceptions import InvalidSwapAmount, InvalidSwapPair
from hit_trader.core.logger import logger
from .wallet_types import Asset, Wallet


@dataclass(frozen=True)
class Conversion:
    """Outcome of one swap. ``applied_amount`` is after balance capping."""

    from_asset: Asset
    to_asset: Asset
    requested_amount: float
    applied_amount: float
    received_amount: float
    rate: float
    wallet: Wallet

    @property
    def capped(self) -> bool:
        return self.applied_amount < self.requested_amount


def parse_amount(amount: Any) -> float:
    """Coerce user input to a positive finite float or raise InvalidSwapAmount."""
    if isinstance(amount, bool):
        raise InvalidSwapAmount(f"Not an amount: {amount!r}")
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise InvalidSwapAmount(f"Not a number: {amount!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidSwapAmount(f"Amount must be a positive number (got {amount!r})")
    return value


def check_rate(rate: float) -> None:
    if rate <= 0 or not math.isfinite(rate):
        raise ValueError(f"rate must be > 0 (got {rate})")


def receive_amount(from_asset: Asset, amount: float, rate: float) -> float:
    """Destination amount for ``amount`` of ``from_asset`` at ``rate`` FauxUSD/$HIT."""
    check_rate(rate)
    if from_asset is Asset.HIT:
        return amount * rate
    return amount / rate


class Ledger:
    """Sole writer of the wallet.

    Every mutation is a single synchronous step, so no caller can see a
    half-applied swap. Oversized requests are capped at the available
    balance and the capped amount is reported back.
    """

    def __init__(self, wallet: Optional[Wallet] = None) -> None:
        self._wallet = wallet if wallet is not None else Wallet()
        if self._wallet.hit < 0 or self._wallet.faux_usd < 0:
            raise ValueError("starting balances must be >= 0")
        self.conversions = 0

    @property
    def wallet(self) -> Wallet:
        """Defensive copy; mutate through convert/scale only."""
        return self._wallet.copy()

    def balance(self, asset: Union[Asset, str]) -> float:
        return self._wallet.balance(Asset.parse(asset))

    def convert(
        self,
        from_asset: Union[Asset, str],
        to_asset: Union[Asset, str],
        amount: Any,
        rate: float,
    ) -> Conversion:
        src = Asset.parse(from_asset)
        dst = Asset.parse(to_asset)
        if src is dst:
            raise InvalidSwapPair(f"Cannot swap {src.value} for itself")
        requested = parse_amount(amount)
        check_rate(rate)

        available = self._wallet.balance(src)
        applied = min(requested, available)
        if applied < requested:
            logger.info(
                f"Swap capped to balance: requested {requested} {src.value}, "
                f"available {available}"
            )
        received = receive_amount(src, applied, rate) if applied > 0 else 0.0

        if applied > 0:
            # Floor at zero to absorb float residue
            self._wallet.set_balance(src, max(0.0, available - applied))
            self._wallet.set_balance(dst, max(0.0, self._wallet.balance(dst) + received))
            self.conversions += 1

        return Conversion(
            from_asset=src,
            to_asset=dst,
            requested_amount=requested,
            applied_amount=applied,
            received_amount=received,
            rate=rate,
            wallet=self.wallet,
        )

    def scale(self, multiplier: float) -> Wallet:
        """Multiply both balances by ``multiplier`` (stake payouts, drains)."""
        if multiplier < 0 or not math.isfinite(multiplier):
            raise ValueError(f"multiplier must be >= 0 (got {multiplier})")
        self._wallet.hit = max(0.0, self._wallet.hit * multiplier)
        self._wallet.faux_usd = max(0.0, self._wallet.faux_usd * multiplier)
        return self.wallet

"""Types for the Ledger."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from hit_trader.constants import FAUX_USD_SYMBOL, HIT_SYMBOL
from hit_trader.core.exceptions import InvalidSwapPair


class Asset(str, Enum):
    HIT = HIT_SYMBOL  # asset A, priced in FauxUSD
    FAUX_USD = FAUX_USD_SYMBOL  # asset B

    @classmethod
    def parse(cls, value: Union["Asset", str]) -> "Asset":
        if isinstance(value, Asset):
            return value
        key = str(value).strip().upper()
        aliases = {
            "A": cls.HIT,
            "HIT": cls.HIT,
            "$HIT": cls.HIT,
            "B": cls.FAUX_USD,
            "FAUX_USD": cls.FAUX_USD,
            "FAUXUSD": cls.FAUX_USD,
        }
        try:
            return aliases[key]
        except KeyError:
            raise InvalidSwapPair(f"Unknown asset: {value!r}") from None

    @property
    def other(self) -> "Asset":
        return Asset.FAUX_USD if self is Asset.HIT else Asset.HIT

    @property
    def precision(self) -> int:
        """Display decimals: 8 for the coin, 2 for the dollar."""
        return 8 if self is Asset.HIT else 2


@dataclass
class Wallet:
    hit: float = 0.0
    faux_usd: float = 0.0

    def balance(self, asset: Asset) -> float:
        return self.hit if asset is Asset.HIT else self.faux_usd

    def set_balance(self, asset: Asset, value: float) -> None:
        if asset is Asset.HIT:
            self.hit = value
        else:
            self.faux_usd = value

    def value_in_faux_usd(self, price: float) -> float:
        """Total wallet value at ``price`` FauxUSD per $HIT."""
        return self.hit * price + self.faux_usd

    def copy(self) -> "Wallet":
        return Wallet(hit=self.hit, faux_usd=self.faux_usd)

    def as_dict(self) -> dict:
        return {HIT_SYMBOL: self.hit, FAUX_USD_SYMBOL: self.faux_usd}

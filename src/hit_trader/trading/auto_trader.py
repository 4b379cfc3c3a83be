"""SMA crossover policy that swaps a fixed share of the wallet each tick."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from hit_trader.core.config_models import AutoTradeSettings
from hit_trader.core.logger import logger
from hit_trader.indicators import latest_sma
from hit_trader.market.price_process import PriceProcess
from hit_trader.paper.ledger import Conversion, Ledger
from hit_trader.paper.wallet_types import Asset
from hit_trader.staking.stake_controller import StakeController


@dataclass(frozen=True)
class AutoTradeDecision:
    price: float
    sma: float
    conversion: Conversion

    @property
    def side(self) -> str:
        return "BUY" if self.conversion.to_asset is Asset.HIT else "SELL"


class AutoTradeController:
    def __init__(
        self,
        market: PriceProcess,
        ledger: Ledger,
        stake: StakeController,
        settings: Optional[AutoTradeSettings] = None,
    ) -> None:
        self.market = market
        self.ledger = ledger
        self.stake = stake
        self.settings = settings or AutoTradeSettings()
        self.executed = 0

    @property
    def enabled(self) -> bool:
        return self.settings.enabled

    @property
    def proportion(self) -> float:
        return self.settings.proportion

    def configure(self, enabled: bool, proportion: Optional[float] = None) -> AutoTradeSettings:
        """Replace the settings; pydantic rejects a proportion outside [0, 1]."""
        update = {"enabled": enabled}
        if proportion is not None:
            update["proportion"] = proportion
        self.settings = AutoTradeSettings.model_validate(
            {**self.settings.model_dump(), **update}
        )
        logger.info(
            f"Auto-trade {'enabled' if self.settings.enabled else 'disabled'} "
            f"(proportion={self.settings.proportion})"
        )
        return self.settings

    def tick(self) -> Optional[AutoTradeDecision]:
        """Evaluate the policy once. Issues at most one swap."""
        if not self.settings.enabled or self.stake.is_locked:
            return None

        history = self.market.history()
        average = latest_sma(history, self.settings.sma_period)
        if average is None:
            return None

        price = self.market.current_price
        if price > average:
            src, dst = Asset.FAUX_USD, Asset.HIT
        elif price < average:
            src, dst = Asset.HIT, Asset.FAUX_USD
        else:
            return None

        amount = self.settings.proportion * self.ledger.balance(src)
        if amount <= 0:
            return None

        conversion = self.ledger.convert(src, dst, amount, price)
        self.executed += 1
        return AutoTradeDecision(price=price, sma=average, conversion=conversion)

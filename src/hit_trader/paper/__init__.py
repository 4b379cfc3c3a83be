"""Two-asset paper wallet."""

from .ledger import Conversion, Ledger, parse_amount
from .wallet_types import Asset, Wallet

__all__ = ["Asset", "Conversion", "Ledger", "Wallet", "parse_amount"]

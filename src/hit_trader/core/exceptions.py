"""Typed exception hierarchy for trading operations."""


class TradingException(Exception):
    """Base for all trading-related errors."""


class SwapError(TradingException):
    """A swap request was refused; the wallet is untouched."""


class InvalidSwapAmount(SwapError):
    """Amount is non-positive, non-finite or not a number."""


class InvalidSwapPair(SwapError):
    """Source and destination asset are the same."""


class StakeLockActive(SwapError):
    """Manual swaps are configured off while a stake is pending."""


class EngineClosed(TradingException):
    """The engine was shut down; no further state changes are accepted."""

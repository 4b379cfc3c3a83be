"""Synthetic price generation."""

from .price_process import PriceProcess, PriceState, step_price

__all__ = ["PriceProcess", "PriceState", "step_price"]

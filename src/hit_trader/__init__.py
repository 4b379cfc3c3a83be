"""Simulated $HIT coin trading engine."""

__version__ = "0.3.0"

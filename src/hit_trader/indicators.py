from __future__ import annotations

from typing import List, Optional, Sequence, Tuple


def sma(values: Sequence[float], period: int) -> List[Optional[float]]:
    """Simple moving average series, aligned with ``values``.

    The first ``period - 1`` entries are ``None``. If the window can never
    fill (``period <= 0`` or too few values) every entry is ``None``.
    Uses a running sum so each extra value costs O(1).
    """
    n = len(values)
    if period <= 0 or n < period:
        return [None] * n

    out: List[Optional[float]] = [None] * (period - 1)
    window_sum = 0.0
    for k in range(period):
        window_sum += values[k]
    out.append(window_sum / period)

    for i in range(period, n):
        window_sum += values[i] - values[i - period]
        out.append(window_sum / period)
    return out


def latest_sma(values: Sequence[float], period: int) -> Optional[float]:
    series = sma(values, period)
    return series[-1] if series else None


def price_change(
    current: float, previous: Optional[float]
) -> Optional[Tuple[float, float]]:
    """Absolute and percentage change since the previous tick."""
    if previous is None:
        return None
    delta = current - previous
    pct = (delta / previous) * 100.0 if previous else 0.0
    return delta, pct


def trend(price: float, average: Optional[float]) -> Optional[str]:
    """'above' when price sits on or over its average, else 'below'."""
    if average is None:
        return None
    return "above" if price >= average else "below"

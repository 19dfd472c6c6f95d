"""
Mathematical helper functions.

Latest-anchored EMA and max-deviation volatility proxy.
"""

import numpy as np


def latest_anchored_ema(prices: np.ndarray) -> np.ndarray:
    """
    Exponential moving average seeded on the newest price.

    Walks the series from newest to oldest with multiplier k = 2 / (n + 1):
        ema_i = p_i * k + ema_{i+1} * (1 - k)

    Args:
        prices: Prices, oldest to newest

    Returns:
        EMA array aligned with prices; out[0] is the last value computed
    """
    arr = np.asarray(prices, dtype=float)
    n = len(arr)
    if n < 1:
        raise ValueError("EMA needs at least one price")

    k = 2.0 / (n + 1)
    out = np.empty_like(arr)
    acc = arr[-1]
    out[-1] = acc

    for i in range(n - 2, -1, -1):
        acc = arr[i] * k + acc * (1 - k)
        out[i] = acc

    return out


def max_deviation_pct(values: np.ndarray) -> float:
    """
    Largest single-point deviation from the mean, as % of the mean.

    sqrt(max((v - mean)^2)) / mean * 100. Not a standard deviation.
    """
    arr = np.asarray(values, dtype=float)
    if len(arr) == 0:
        return 0.0

    mu = np.mean(arr)
    if mu == 0:
        return float("inf")

    return float(np.sqrt(np.max((arr - mu) ** 2)) / mu * 100.0)

"""
Per-bar lookback primitives of the divergence formula language.

Each function answers a question about bar `i` using only bars 0..i.
They are the reference semantics the incremental CD state machine follows.
"""

from typing import Sequence


def distance_since_true(cond: Sequence[bool], i: int) -> int:
    """Bars back to the latest j <= i with cond[j]; i + 1 if it never held."""
    for j in range(i, -1, -1):
        if cond[j]:
            return i - j
    return i + 1


def trailing_min(series: Sequence[float], i: int, window: int) -> float:
    """Minimum of series[max(0, i - window + 1) .. i]."""
    return min(series[max(0, i - window + 1) : i + 1])


def trailing_max(series: Sequence[float], i: int, window: int) -> float:
    """Maximum of series[max(0, i - window + 1) .. i]."""
    return max(series[max(0, i - window + 1) : i + 1])


def look_back(series: Sequence, i: int, n: int, default=0.0):
    """series[i - n], or `default` when that index precedes the first bar."""
    j = i - n
    if j < 0:
        return default
    return series[j]


def true_count(cond: Sequence[bool], i: int, window: int) -> int:
    """Number of true values in cond[max(0, i - window + 1) .. i]."""
    return sum(1 for flag in cond[max(0, i - window + 1) : i + 1] if flag)

"""
Binomial distribution helpers for the Galton board.

A ball crossing `n` rows, deflecting right with probability `p` at each peg,
lands in bin `k` with probability C(n, k) p^k (1 - p)^(n - k).
"""

from __future__ import annotations

import enum
import math

import numpy as np
from numba import njit


class Unavailable(enum.Enum):
    """Marker for a statistic that is undefined (e.g. no balls have landed)."""

    NOT_AVAILABLE = "N/A"

    def __str__(self) -> str:
        return self.value


NOT_AVAILABLE = Unavailable.NOT_AVAILABLE


def _check_probability(p: float) -> None:
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"probability must be in [0, 1], got {p}")


@njit(cache=True)
def _binomial_coefficient_kernel(n, k):
    # (n)(n-1)...(n-k+1) / k!, interleaved so intermediates stay small
    coefficient = 1.0
    for i in range(1, k + 1):
        coefficient = coefficient * (n - k + i) / i
    return coefficient


def binomial_coefficient(n: int, k: int) -> float:
    """Return "n choose k", built as a running product/quotient instead of factorials."""
    if not 0 <= k <= n:
        raise ValueError(f"bin number k must be in [0, {n}], got {k}")
    return float(round(_binomial_coefficient_kernel(int(n), int(k))))


def binomial_probability(n: int, k: int, p: float) -> float:
    _check_probability(p)
    return binomial_coefficient(n, k) * p**k * (1.0 - p) ** (n - k)


def binomial_distribution(n: int, p: float) -> np.ndarray:
    """P(n, k, p) for k = 0..n."""
    return np.array([binomial_probability(n, k, p) for k in range(n + 1)], dtype=np.float64)


def normalized_distribution(n: int, p: float) -> np.ndarray:
    """
    Binomial distribution scaled so that its tallest bar is exactly 1.0.
    Used to overlay the theoretical curve on the empirical histogram.
    """
    dist = binomial_distribution(n, p)
    return dist / dist.max()


###############################################################################
# Theoretical statistics
###############################################################################


def theoretical_mean(row_count: int, probability: float) -> float:
    return row_count * probability


def theoretical_standard_deviation(row_count: int, probability: float) -> float:
    return math.sqrt(row_count * probability * (1.0 - probability))


def theoretical_standard_deviation_of_mean(
    row_count: int, probability: float, landed_count: int
) -> float | Unavailable:
    if landed_count <= 0:
        return NOT_AVAILABLE
    return theoretical_standard_deviation(row_count, probability) / math.sqrt(landed_count)

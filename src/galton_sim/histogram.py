from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass

import numpy as np

from . import binomial
from .binomial import NOT_AVAILABLE, Unavailable

logger = logging.getLogger(__name__)


class HistogramMode(enum.Enum):
    COUNT = "count"
    FRACTION = "fraction"


class Histogram:
    """
    Accumulates landed balls into `row_count + 1` bins.

    Keeps running sums of bin indices so the sample mean and variance are
    available in O(1). `bin_cap` is a soft limit: reaching it only flips
    `is_capped`; further balls are still counted.
    """

    def __init__(self, row_count: int, bin_cap: int | None = None) -> None:
        self.bin_cap = bin_cap
        self.reset(row_count)

    def reset(self, row_count: int | None = None) -> None:
        if row_count is not None:
            self.row_count = row_count
        self.counts = np.zeros(self.row_count + 1, dtype=np.int64)
        self.landed_count = 0
        self._sum = 0
        self._sum_sq = 0

    def __len__(self) -> int:
        return self.counts.shape[0]

    def add_ball(self, bin_index: int) -> int:
        """Count one ball in `bin_index` and return that bin's new count."""
        if not 0 <= bin_index <= self.row_count:
            raise ValueError(f"bin index must be in [0, {self.row_count}], got {bin_index}")
        was_capped = self.is_capped
        self.counts[bin_index] += 1
        self.landed_count += 1
        self._sum += bin_index
        self._sum_sq += bin_index * bin_index
        if self.is_capped and not was_capped:
            logger.info("Bin %d reached the cap of %d balls", bin_index, self.bin_cap)
        return int(self.counts[bin_index])

    def maximum_bin_count(self) -> int:
        return int(self.counts.max())

    @property
    def is_capped(self) -> bool:
        return self.bin_cap is not None and self.maximum_bin_count() >= self.bin_cap

    # ------------------------------------------------------------------ heights
    def fractions(self) -> np.ndarray:
        if self.landed_count == 0:
            return np.zeros(len(self), dtype=np.float64)
        return self.counts / self.landed_count

    def heights(self, mode: HistogramMode) -> np.ndarray:
        if mode is HistogramMode.COUNT:
            return self.counts.astype(np.float64)
        elif mode is HistogramMode.FRACTION:
            return self.fractions()
        raise ValueError(f"Unhandled histogram mode: {mode}")

    # ------------------------------------------------------------------ statistics
    @property
    def sample_mean(self) -> float | Unavailable:
        if self.landed_count == 0:
            return NOT_AVAILABLE
        return self._sum / self.landed_count

    @property
    def sample_variance(self) -> float | Unavailable:
        """Bessel-corrected variance of the landed bin indices."""
        n = self.landed_count
        if n < 2:
            return NOT_AVAILABLE
        # integer sums keep this exact until the final division
        return (n * self._sum_sq - self._sum * self._sum) / (n * (n - 1))

    @property
    def sample_standard_deviation(self) -> float | Unavailable:
        variance = self.sample_variance
        if variance is NOT_AVAILABLE:
            return NOT_AVAILABLE
        return math.sqrt(variance)

    @property
    def sample_standard_deviation_of_mean(self) -> float | Unavailable:
        std = self.sample_standard_deviation
        if std is NOT_AVAILABLE:
            return NOT_AVAILABLE
        return std / math.sqrt(self.landed_count)


@dataclass(frozen=True)
class Statistics:
    landed_count: int
    sample_mean: float | Unavailable
    sample_standard_deviation: float | Unavailable
    sample_standard_deviation_of_mean: float | Unavailable
    theoretical_mean: float
    theoretical_standard_deviation: float
    theoretical_standard_deviation_of_mean: float | Unavailable


def summarize(histogram: Histogram, probability: float) -> Statistics:
    """Sample statistics of `histogram` next to the binomial values they estimate."""
    n = histogram.row_count
    return Statistics(
        landed_count=histogram.landed_count,
        sample_mean=histogram.sample_mean,
        sample_standard_deviation=histogram.sample_standard_deviation,
        sample_standard_deviation_of_mean=histogram.sample_standard_deviation_of_mean,
        theoretical_mean=binomial.theoretical_mean(n, probability),
        theoretical_standard_deviation=binomial.theoretical_standard_deviation(n, probability),
        theoretical_standard_deviation_of_mean=binomial.theoretical_standard_deviation_of_mean(
            n, probability, histogram.landed_count
        ),
    )

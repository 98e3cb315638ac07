"""
Unit tests for the binomial distribution helpers.
"""

import sys
from pathlib import Path

import numpy as np
import pytest
from scipy.stats import binom

ROOT = Path(__file__).resolve().parents[1] / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from galton_sim.binomial import (
    NOT_AVAILABLE,
    binomial_coefficient,
    binomial_distribution,
    binomial_probability,
    normalized_distribution,
    theoretical_mean,
    theoretical_standard_deviation,
    theoretical_standard_deviation_of_mean,
)


def test_binomial_coefficient_edges():
    """n choose 0 and n choose n are both 1 for every row count."""
    for n in range(0, 31):
        assert binomial_coefficient(n, 0) == 1
        assert binomial_coefficient(n, n) == 1


def test_binomial_coefficient_pascal():
    """Known values and Pascal's rule."""
    assert binomial_coefficient(4, 2) == 6
    assert binomial_coefficient(26, 13) == 10_400_600
    for n in range(2, 27):
        for k in range(1, n):
            assert binomial_coefficient(n, k) == (
                binomial_coefficient(n - 1, k - 1) + binomial_coefficient(n - 1, k)
            ), f"Pascal's rule fails at n={n}, k={k}"


def test_binomial_coefficient_rejects_bad_k():
    with pytest.raises(ValueError):
        binomial_coefficient(4, 5)
    with pytest.raises(ValueError):
        binomial_coefficient(4, -1)


def test_distribution_sums_to_one():
    """Probabilities over all bins add up to 1 for any valid n, p."""
    for n in (1, 5, 12, 26, 30):
        for p in (0.0, 0.1, 0.25, 0.5, 0.73, 1.0):
            total = binomial_distribution(n, p).sum()
            assert abs(total - 1.0) < 1e-9, f"sum={total} for n={n}, p={p}"


def test_distribution_matches_scipy():
    for n in (5, 12, 26):
        for p in (0.2, 0.5, 0.9):
            expected = binom.pmf(np.arange(n + 1), n, p)
            assert np.allclose(binomial_distribution(n, p), expected, atol=1e-12)


def test_four_rows_half_probability():
    """Four rows at p = 0.5 give 1, 4, 6, 4, 1 over 16."""
    dist = binomial_distribution(4, 0.5)
    assert np.allclose(dist, [0.0625, 0.25, 0.375, 0.25, 0.0625])

    norm = normalized_distribution(4, 0.5)
    assert np.allclose(norm, [1 / 6, 4 / 6, 1.0, 4 / 6, 1 / 6])


def test_normalized_distribution_peaks_at_one():
    for n in (5, 12, 26):
        for p in (0.0, 0.3, 0.5, 1.0):
            assert normalized_distribution(n, p).max() == 1.0


def test_binomial_probability_rejects_bad_p():
    with pytest.raises(ValueError):
        binomial_probability(4, 2, 1.5)
    with pytest.raises(ValueError):
        binomial_probability(4, 2, -0.1)


def test_theoretical_statistics():
    assert theoretical_mean(12, 0.5) == 6.0
    assert theoretical_standard_deviation(12, 0.5) == pytest.approx(np.sqrt(3.0))
    assert theoretical_standard_deviation_of_mean(12, 0.5, 3) == pytest.approx(1.0)


def test_standard_deviation_of_mean_without_balls():
    """With nothing landed the value is explicitly unavailable, not zero or NaN."""
    value = theoretical_standard_deviation_of_mean(12, 0.5, 0)
    assert value is NOT_AVAILABLE
    assert str(value) == "N/A"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

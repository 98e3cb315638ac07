"""
Tests for the goodness-of-fit helpers in the analysis script.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1] / "src"
for path in (ROOT, ROOT / "scripts"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from analyse_histogram import goodness_of_fit, merge_sparse_bins


def test_merge_sparse_bins_keeps_totals():
    observed = np.array([0, 2, 10, 20, 10, 3, 1])
    expected = np.array([0.5, 3.0, 12.0, 17.0, 12.0, 3.0, 0.5])
    obs, exp = merge_sparse_bins(observed, expected, min_expected=5.0)
    assert obs.sum() == observed.sum()
    assert exp.sum() == pytest.approx(expected.sum())
    assert exp.min() >= 5.0
    assert len(obs) == 3


def test_merge_sparse_bins_folds_into_edge_neighbour():
    """Each sparse tail bin is added to the bin that becomes the new edge."""
    counts = np.array([1, 1, 10, 10, 10, 1, 1], dtype=np.float64)
    obs, exp = merge_sparse_bins(counts, counts.copy(), min_expected=5.0)
    assert obs.tolist() == [12.0, 10.0, 12.0]
    assert exp.tolist() == [12.0, 10.0, 12.0]

    obs, exp = merge_sparse_bins(np.array([1.0, 1.0]), np.array([1.0, 1.0]))
    assert obs.tolist() == [2.0]
    assert exp.tolist() == [2.0]


def test_binomial_sample_fits():
    rng = np.random.default_rng(0)
    counts = np.bincount(rng.binomial(12, 0.5, size=5000), minlength=13)
    _, p_value, dof = goodness_of_fit(counts, 0.5)
    assert p_value > 0.001
    assert dof > 0


def test_wrong_probability_rejected():
    rng = np.random.default_rng(1)
    counts = np.bincount(rng.binomial(12, 0.5, size=5000), minlength=13)
    _, p_value, _ = goodness_of_fit(counts, 0.3)
    assert p_value < 1e-6


def test_empty_histogram_rejected():
    with pytest.raises(ValueError):
        goodness_of_fit(np.zeros(5), 0.5)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

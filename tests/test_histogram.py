"""
Tests for histogram accumulation and statistics.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1] / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from galton_sim import NOT_AVAILABLE, Histogram, HistogramMode
from galton_sim.histogram import summarize


def test_add_ball_returns_new_count():
    hist = Histogram(4)
    assert hist.add_ball(2) == 1
    assert hist.add_ball(2) == 2
    assert hist.add_ball(0) == 1
    assert hist.maximum_bin_count() == 2


def test_counts_sum_to_landed():
    """Bin counts always add up to the number of add_ball calls since reset."""
    rng = np.random.default_rng(3)
    hist = Histogram(12)
    indices = rng.integers(0, 13, size=500)
    for i, k in enumerate(indices, start=1):
        hist.add_ball(int(k))
        assert hist.counts.sum() == hist.landed_count == i

    hist.reset()
    assert hist.landed_count == 0
    assert hist.counts.sum() == 0
    hist.add_ball(5)
    assert hist.counts.sum() == 1


def test_out_of_range_bin_rejected():
    hist = Histogram(4)
    with pytest.raises(ValueError):
        hist.add_ball(5)
    with pytest.raises(ValueError):
        hist.add_ball(-1)
    assert hist.landed_count == 0


def test_sample_statistics_match_numpy():
    rng = np.random.default_rng(8)
    data = rng.binomial(10, 0.4, size=300)
    hist = Histogram(10)
    for k in data:
        hist.add_ball(int(k))

    assert hist.sample_mean == pytest.approx(data.mean())
    assert hist.sample_variance == pytest.approx(data.var(ddof=1))
    assert hist.sample_standard_deviation == pytest.approx(data.std(ddof=1))
    assert hist.sample_standard_deviation_of_mean == pytest.approx(
        data.std(ddof=1) / np.sqrt(len(data))
    )


def test_statistics_unavailable_when_undefined():
    hist = Histogram(6)
    assert hist.sample_mean is NOT_AVAILABLE
    assert hist.sample_variance is NOT_AVAILABLE
    hist.add_ball(3)
    assert hist.sample_mean == 3.0
    assert hist.sample_standard_deviation is NOT_AVAILABLE
    assert hist.sample_standard_deviation_of_mean is NOT_AVAILABLE


def test_fraction_mode():
    hist = Histogram(3)
    assert np.array_equal(hist.heights(HistogramMode.FRACTION), np.zeros(4))
    for k in (0, 1, 1, 3):
        hist.add_ball(k)
    assert np.allclose(hist.heights(HistogramMode.FRACTION), [0.25, 0.5, 0.0, 0.25])
    assert np.array_equal(hist.heights(HistogramMode.COUNT), [1.0, 2.0, 0.0, 1.0])


def test_bin_cap_sets_flag_without_stopping():
    hist = Histogram(4, bin_cap=3)
    for _ in range(2):
        hist.add_ball(1)
    assert not hist.is_capped
    hist.add_ball(1)
    assert hist.is_capped
    assert hist.add_ball(2) == 1, "other bins keep accumulating"


def test_reset_with_new_row_count():
    hist = Histogram(4)
    hist.add_ball(4)
    hist.reset(8)
    assert len(hist) == 9
    assert hist.landed_count == 0


def test_summarize():
    hist = Histogram(12)
    stats = summarize(hist, 0.5)
    assert stats.landed_count == 0
    assert stats.theoretical_mean == 6.0
    assert stats.theoretical_standard_deviation_of_mean is NOT_AVAILABLE

    for k in (5, 6, 7, 6):
        hist.add_ball(k)
    stats = summarize(hist, 0.5)
    assert stats.sample_mean == 6.0
    assert stats.theoretical_standard_deviation_of_mean == pytest.approx(np.sqrt(3.0) / 2)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

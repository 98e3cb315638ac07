"""
Goodness-of-fit analysis for Galton board runs.

Runs a headless simulation (or several seeds) and compares the bin counts to
the binomial distribution with a chi-square test. Sparse tail bins are merged
so every expected count is at least `min_expected`.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
from scipy.stats import chisquare

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from galton_sim import SimulationConfig, binomial, run_model  # type: ignore[import]


def merge_sparse_bins(
    observed: np.ndarray, expected: np.ndarray, min_expected: float = 5.0
) -> tuple[np.ndarray, np.ndarray]:
    """
    Fold low-expectation bins into their neighbours, working inwards from both tails.

    Args:
        observed: Observed counts per bin
        expected: Expected counts per bin (same total as observed)
        min_expected: Smallest expected count allowed in a merged bin

    Returns:
        Tuple of (observed, expected) after merging
    """
    obs = list(np.asarray(observed, dtype=np.float64))
    exp = list(np.asarray(expected, dtype=np.float64))

    while len(exp) > 1 and exp[0] < min_expected:
        value = exp.pop(0)
        exp[0] += value
        value = obs.pop(0)
        obs[0] += value
    while len(exp) > 1 and exp[-1] < min_expected:
        value = exp.pop()
        exp[-1] += value
        value = obs.pop()
        obs[-1] += value
    return np.array(obs), np.array(exp)


def goodness_of_fit(counts: np.ndarray, probability: float, min_expected: float = 5.0):
    """
    Chi-square test of `counts` against Binomial(len(counts) - 1, probability).

    Returns:
        Tuple of (statistic, p_value, degrees_of_freedom)
    """
    counts = np.asarray(counts, dtype=np.float64)
    total = counts.sum()
    if total <= 0:
        raise ValueError("No landed balls; cannot perform goodness-of-fit analysis.")
    row_count = len(counts) - 1
    expected = binomial.binomial_distribution(row_count, probability) * total
    obs, exp = merge_sparse_bins(counts, expected, min_expected)
    # rescale so the sums agree exactly, as chisquare requires
    exp = exp * obs.sum() / exp.sum()
    result = chisquare(obs, exp)
    return float(result.statistic), float(result.pvalue), len(obs) - 1


def main():
    parser = argparse.ArgumentParser(description="Chi-square test of Galton board runs")
    parser.add_argument("--rows", type=int, default=12)
    parser.add_argument("--probability", type=float, default=0.5)
    parser.add_argument("--duration", type=float, default=60.0, help="simulated seconds per run")
    parser.add_argument("--seeds", type=int, nargs="+", default=[42])
    parser.add_argument("--display", choices=["ball", "path", "none"], default="none")
    args = parser.parse_args()

    print(f"{'seed':>6} {'N':>7} {'chi2':>10} {'dof':>4} {'p-value':>9}")
    for seed in args.seeds:
        config = SimulationConfig.from_dict(
            {
                "row_count": args.rows,
                "probability": args.probability,
                "launch_mode": "continuous",
                "display_mode": args.display,
                "total_launch_cap": None,
                "bin_cap": SimulationConfig.lab().bin_cap,
                "seed": seed,
            }
        )
        result = run_model(config, duration=args.duration)
        stat, p_value, dof = goodness_of_fit(result.counts, args.probability)
        print(f"{seed:>6} {int(result.counts.sum()):>7} {stat:>10.3f} {dof:>4} {p_value:>9.4f}")


if __name__ == "__main__":
    main()

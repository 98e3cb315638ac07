# src/scripts/plot_histogram.py
import argparse
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from galton_sim import SimulationConfig, run_model, utils  # type: ignore[import]


def format_title(meta):
    """
    Format a title string with the important run parameters.

    Args:
        meta: Dictionary of run metadata

    Returns:
        Formatted title string
    """
    if not meta:
        return None
    seed = meta.get("seed")
    seed_str = str(seed) if seed is not None else "?"
    parts = [
        f"rows={meta.get('row_count', '?')}",
        f"p={meta.get('probability', '?')}",
        f"N={meta.get('landed', '?')}",
        f"seed={seed_str}",
    ]
    mean = meta.get("sample_mean")
    if isinstance(mean, float):
        parts.append(f"mean={mean:.2f} (theory {meta['theoretical_mean']:.2f})")
    return ", ".join(parts)


def plot_histogram(counts, theoretical, meta=None, fraction=False, ax=None):
    """
    Bar chart of the bin counts with the theoretical curve overlaid.

    The theoretical curve is normalized to a peak of 1.0, so it is scaled to
    the tallest empirical bar before drawing.
    """
    counts = np.asarray(counts, dtype=np.float64)
    total = counts.sum()
    heights = counts / total if (fraction and total > 0) else counts
    bins = np.arange(len(counts))

    if ax is None:
        _, ax = plt.subplots(figsize=(8, 5))
    ax.bar(bins, heights, width=0.9, color="tab:red", alpha=0.7, label="sample")
    peak = heights.max() if heights.max() > 0 else 1.0
    ax.plot(bins, np.asarray(theoretical) * peak, "o-", color="tab:blue", label="theoretical")
    ax.set_xlabel("bin")
    ax.set_ylabel("fraction" if fraction else "count")
    ax.set_xticks(bins)
    title = format_title(meta)
    if title:
        ax.set_title(title, fontsize=10)
    ax.legend()
    return ax


def main():
    parser = argparse.ArgumentParser(description="Run a simulation and plot its histogram")
    parser.add_argument("--rows", type=int, default=12, help="number of peg rows")
    parser.add_argument("--probability", type=float, default=0.5, help="right-deflection probability")
    parser.add_argument("--duration", type=float, default=60.0, help="simulated seconds")
    parser.add_argument("--seed", type=int, default=42, help="random seed")
    parser.add_argument("--fraction", action="store_true", help="plot fractions instead of counts")
    parser.add_argument("--out", default=None, help="output image (default: results/histogram_<time>.png)")
    args = parser.parse_args()

    config = SimulationConfig.lab(
        row_count=args.rows,
        probability=args.probability,
        seed=args.seed,
    )
    result = run_model(config, duration=args.duration)

    out = args.out
    if out is None:
        output_dir = Path("results")
        output_dir.mkdir(exist_ok=True)
        out = str(output_dir / f"histogram_R{args.rows}_S{args.seed}_{utils.now_str()}.png")

    ax = plot_histogram(result.counts, result.theoretical, result.meta, fraction=args.fraction)
    ax.figure.tight_layout()
    ax.figure.savefig(out, dpi=150)
    print(f"✅ Histogram saved to {out}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Single Galton Board Simulation Runner

A small CLI for running one headless simulation and printing its statistics.
Supports the discrete launch modes (single, batch, all_remaining) and the
continuous mode with any display mode.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src/ to path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from galton_sim import (
    ConfigurationError,
    LaunchMode,
    SimulationConfig,
    run_model,
    utils,
)

LOG_FORMAT = "%(levelname)s: %(message)s"


def build_config(args: argparse.Namespace) -> SimulationConfig:
    """Merge an optional parameter file with command line overrides."""
    params = utils.load_params(args.params) if args.params else {}
    overrides = {
        "row_count": args.rows,
        "probability": args.probability,
        "launch_mode": args.mode,
        "display_mode": args.display,
        "seed": args.seed,
    }
    params.update({k: v for k, v in overrides.items() if v is not None})

    if params.get("launch_mode") == LaunchMode.CONTINUOUS.value:
        base = SimulationConfig.lab(lower_bin_cap=args.lower_bin_cap)
        params = {"total_launch_cap": None, "bin_cap": base.bin_cap, **params}
    if args.total_cap is not None:
        params["total_launch_cap"] = args.total_cap

    config = SimulationConfig.from_dict(params)
    config.validate()
    return config


def format_value(value) -> str:
    if isinstance(value, float):
        return f"{value:.4f}"
    return str(value)


def main():
    parser = argparse.ArgumentParser(
        description="Run a single headless Galton board simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--params", type=str, default=None, help="JSON or TOML parameter file")
    parser.add_argument("--rows", type=int, default=None, help="Number of peg rows")
    parser.add_argument("--probability", type=float, default=None, help="Chance of a right deflection")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in LaunchMode],
        default=None,
        help="Launch mode (default: single)",
    )
    parser.add_argument(
        "--display",
        choices=["ball", "path", "none"],
        default=None,
        help="Display mode, sets the continuous launch rate (default: ball)",
    )
    parser.add_argument("--duration", type=float, default=30.0, help="Simulated seconds to run")
    parser.add_argument("--dt", type=float, default=1.0 / 60.0, help="Tick length in seconds")
    parser.add_argument("--total-cap", type=int, default=None, help="Total launch cap")
    parser.add_argument(
        "--lower-bin-cap",
        action="store_true",
        help="Use the lowered per-bin cap in continuous mode",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log launches and landings")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)

    try:
        config = build_config(args)
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    print(
        f"Running Galton board: rows={config.row_count}, p={config.probability}, "
        f"mode={config.launch_mode.value}/{config.display_mode.value}, seed={config.seed}"
    )
    result = run_model(config, duration=args.duration, dt=args.dt)
    meta = result.meta

    print("\nBin counts:")
    for k, count in enumerate(result.counts):
        print(f"   {k:3d}: {count}")
    print("\nStatistics:")
    for key in (
        "launched",
        "landed",
        "is_capped",
        "sample_mean",
        "theoretical_mean",
        "sample_standard_deviation",
        "theoretical_standard_deviation",
    ):
        print(f"   {key:32s} {format_value(meta[key])}")
    print(f"   time elapsed: {meta['time_elapsed']:.2f} seconds")

    return 0


if __name__ == "__main__":
    sys.exit(main())

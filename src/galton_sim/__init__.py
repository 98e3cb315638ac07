"""
Galton Board Simulation Library - Core Models

This package provides the stochastic ball-drop engine behind a bean-machine
demonstration:
- PegLattice: triangular peg layout for a given row count
- Trajectory: one ball's precomputed left/right path through the pegs
- Ball: a trajectory animated over time (FALLING -> EXITED_PEGS -> LANDED)
- Histogram: bin counts with running sample statistics
- LaunchScheduler: launch policy, caps and the per-frame advance(dt) driver
"""

from .ball import Ball, BallState, StepResult
from .binomial import NOT_AVAILABLE, Unavailable
from .config import ConfigChange, DisplayMode, LaunchMode, SimulationConfig, reconcile
from .errors import ConfigurationError
from .histogram import Histogram, HistogramMode, Statistics
from .lattice import Peg, PegLattice
from .scheduler import BallSnapshot, LaunchScheduler
from .simulation import run_model
from .trajectory import Trajectory
from . import binomial, lattice, trajectory, utils

__all__ = [
    # Engine
    "LaunchScheduler",
    "Ball",
    "Histogram",
    "PegLattice",
    "Trajectory",
    "run_model",
    # Configuration
    "SimulationConfig",
    "ConfigChange",
    "LaunchMode",
    "DisplayMode",
    "HistogramMode",
    "reconcile",
    "ConfigurationError",
    # Results
    "BallState",
    "BallSnapshot",
    "StepResult",
    "Statistics",
    "Peg",
    "Unavailable",
    "NOT_AVAILABLE",
    # Modules
    "binomial",
    "lattice",
    "trajectory",
    "utils",
]

"""
Per-ball path generation.

A trajectory is drawn once, when the ball is created, from the probability in
effect at that instant. It fixes the left/right decision at every row, the
bin the ball ends up in, the peg contact points it bounces through, and the
point where it comes to rest on top of the stack already in its bin.

Time along a trajectory is measured in hops: segment i of the path (contact
point i to contact point i + 1) is traversed between t = i and t = i + 1.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numba import njit

from . import lattice
from .constants import BIN_FLOOR_Y, MAX_STACK_HEIGHT


@njit(cache=True)
def _contact_points(decisions, spacing, lift, exit_x, exit_y):
    """
    Walk the decisions through the triangular lattice.

    Row 0 first: point 0 sits above the apex peg, points 1..n rest on the peg
    hit in each row, and point n + 1 is where the ball leaves the lattice.
    Each decision shifts the horizontal offset by half a peg spacing.
    """
    n = decisions.shape[0]
    out = np.empty((n + 2, 2), dtype=np.float64)
    out[0, 0] = 0.0
    out[0, 1] = spacing + lift
    column = 0
    for r in range(n):
        out[r + 1, 0] = (column - 0.5 * r) * spacing
        out[r + 1, 1] = -r * spacing + lift
        if decisions[r]:
            column += 1
    out[n + 1, 0] = exit_x
    out[n + 1, 1] = exit_y
    return out


def stack_height(bin_count: int, row_count: int) -> float:
    """Visual height of `bin_count` stacked balls, capped at MAX_STACK_HEIGHT."""
    return min(bin_count * 2.0 * lattice.ball_radius(row_count), MAX_STACK_HEIGHT)


@dataclass(frozen=True, eq=False)
class Trajectory:
    row_count: int
    probability: float
    decisions: np.ndarray
    bin_index: int
    contact_points: np.ndarray
    landing_position: tuple[float, float]

    @property
    def peg_duration(self) -> float:
        """Hops spent among the pegs, from the drop point to the exit point."""
        return float(len(self.contact_points) - 1)

    @property
    def fall_duration(self) -> float:
        exit_y = self.contact_points[-1, 1]
        drop = exit_y - self.landing_position[1]
        return math.sqrt(max(drop, 0.0) / lattice.peg_spacing(self.row_count))

    @property
    def total_duration(self) -> float:
        return self.peg_duration + self.fall_duration

    def position_at(self, elapsed: float) -> tuple[float, float]:
        if elapsed >= self.total_duration:
            return self.landing_position

        if elapsed >= self.peg_duration:
            # free fall from the exit point into the bin, accelerating
            x, y0 = self.contact_points[-1]
            y1 = self.landing_position[1]
            f = (elapsed - self.peg_duration) / self.fall_duration
            return float(x), float(y0 + (y1 - y0) * f * f)

        segment = int(elapsed)
        f = elapsed - segment
        x0, y0 = self.contact_points[segment]
        x1, y1 = self.contact_points[segment + 1]
        return float(x0 + (x1 - x0) * f), float(y0 + (y1 - y0) * f * f)


def generate(
    row_count: int,
    probability: float,
    rng: np.random.Generator,
    bin_counts: Sequence[int] | None = None,
) -> Trajectory:
    """
    Draw one ball's path.

    Each row consumes one uniform draw from `rng`; the ball goes right iff the
    draw is below `probability`. `bin_counts` holds the balls already sitting
    in each bin; it only affects where the ball comes to rest.
    """
    if row_count < 1:
        raise ValueError(f"row_count must be positive, got {row_count}")
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"probability must be in [0, 1], got {probability}")

    decisions = rng.random(row_count) < probability
    bin_index = int(np.count_nonzero(decisions))

    spacing = lattice.peg_spacing(row_count)
    radius = lattice.ball_radius(row_count)
    exit_x = lattice.bin_center_x(bin_index, row_count)
    points = _contact_points(
        decisions, spacing, 2.0 * radius, exit_x, lattice.exit_y(row_count)
    )
    stacked = 0 if bin_counts is None else int(bin_counts[bin_index])
    landing_y = BIN_FLOOR_Y + radius + stack_height(stacked, row_count)

    return Trajectory(
        row_count=row_count,
        probability=probability,
        decisions=decisions,
        bin_index=bin_index,
        contact_points=points,
        landing_position=(exit_x, landing_y),
    )

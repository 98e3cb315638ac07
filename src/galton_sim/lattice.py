from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
from numba import njit

from .constants import BALL_RADIUS_FACTOR, BOARD_WIDTH, ROWS_RANGE


@dataclass(frozen=True)
class Peg:
    row: int
    column: int
    x: float
    y: float


def peg_spacing(row_count: int) -> float:
    """Distance between neighbouring pegs; the lattice always spans the board width."""
    return BOARD_WIDTH / (row_count + 1)


def ball_radius(row_count: int) -> float:
    return BALL_RADIUS_FACTOR * peg_spacing(row_count)


def total_pegs(row_count: int) -> int:
    return row_count * (row_count + 1) // 2


@njit(cache=True)
def _peg_coordinates(row_count, spacing):
    """
    Returns an (N, 4) array of (row, column, x, y) in row-major order.
    Row r holds r + 1 pegs centred on x = 0; rows descend from y = 0.
    """
    n = row_count * (row_count + 1) // 2
    out = np.empty((n, 4), dtype=np.float64)
    idx = 0
    for r in range(row_count):
        for c in range(r + 1):
            out[idx, 0] = r
            out[idx, 1] = c
            out[idx, 2] = (c - 0.5 * r) * spacing
            out[idx, 3] = -r * spacing
            idx += 1
    return out


def peg_array(row_count: int, spacing: float | None = None) -> np.ndarray:
    if spacing is None:
        spacing = peg_spacing(row_count)
    return _peg_coordinates(int(row_count), float(spacing))


def peg_positions_for(row_count: int) -> list[Peg]:
    """Ordered (row, column, x, y) for every peg of a board with `row_count` rows."""
    return [
        Peg(int(r), int(c), float(x), float(y))
        for r, c, x, y in peg_array(row_count)
    ]


def peg_position(row: int, column: int, row_count: int) -> tuple[float, float]:
    spacing = peg_spacing(row_count)
    return (column - 0.5 * row) * spacing, -row * spacing


def peg_row(index: int) -> int:
    """Row of the peg stored at `index` in row-major order."""
    return (math.isqrt(8 * index + 1) - 1) // 2


def is_peg_visible(index: int, row_count: int) -> bool:
    return peg_row(index) < row_count


def bin_center_x(bin_index: int, row_count: int) -> float:
    return (bin_index - 0.5 * row_count) * peg_spacing(row_count)


def exit_y(row_count: int) -> float:
    """Height at which a ball leaves the last row and starts falling into its bin."""
    return -row_count * peg_spacing(row_count)


@dataclass
class PegLattice:
    """
    Peg layout pre-built for `max_row_count` rows and masked down to
    `row_count`. Positions are recomputed whenever the row count changes
    because the spacing depends on it.
    """

    row_count: int
    max_row_count: int = ROWS_RANGE[1]
    pegs: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_row_count < self.row_count:
            self.max_row_count = self.row_count
        self._rebuild()

    def _rebuild(self) -> None:
        self.pegs = peg_array(self.max_row_count, peg_spacing(self.row_count))

    def set_row_count(self, row_count: int) -> None:
        if row_count > self.max_row_count:
            self.max_row_count = row_count
        self.row_count = row_count
        self._rebuild()

    @property
    def spacing(self) -> float:
        return peg_spacing(self.row_count)

    def is_peg_visible(self, index: int) -> bool:
        return is_peg_visible(index, self.row_count)

    def visible_pegs(self) -> np.ndarray:
        return self.pegs[: total_pegs(self.row_count)]

    def bin_centers(self) -> np.ndarray:
        return (np.arange(self.row_count + 1) - 0.5 * self.row_count) * self.spacing

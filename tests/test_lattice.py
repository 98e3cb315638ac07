"""
Tests for the peg lattice geometry.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1] / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from galton_sim import lattice
from galton_sim.lattice import PegLattice


def test_row_sizes():
    """Row r holds r + 1 pegs and the total is triangular."""
    for n in (1, 5, 12, 26):
        pegs = lattice.peg_positions_for(n)
        assert len(pegs) == n * (n + 1) // 2
        for r in range(n):
            assert sum(1 for p in pegs if p.row == r) == r + 1


def test_positions_are_deterministic_and_symmetric():
    a = lattice.peg_positions_for(12)
    b = lattice.peg_positions_for(12)
    assert a == b

    spacing = lattice.peg_spacing(12)
    for peg in a:
        mirror = next(p for p in a if p.row == peg.row and p.column == peg.row - peg.column)
        assert peg.x == pytest.approx(-mirror.x)
        assert peg.y == pytest.approx(-peg.row * spacing)


def test_neighbouring_rows_offset_by_half_spacing():
    n = 8
    spacing = lattice.peg_spacing(n)
    x0, _ = lattice.peg_position(3, 1, n)
    left, _ = lattice.peg_position(4, 1, n)
    right, _ = lattice.peg_position(4, 2, n)
    assert left - x0 == pytest.approx(-0.5 * spacing)
    assert right - x0 == pytest.approx(0.5 * spacing)


def test_peg_row_of_index():
    index = 0
    for r in range(26):
        for _ in range(r + 1):
            assert lattice.peg_row(index) == r
            index += 1


def test_visibility_mask():
    assert lattice.is_peg_visible(0, 1)
    assert not lattice.is_peg_visible(1, 1)
    # last peg of row 4 is visible with 5 rows, first peg of row 5 is not
    assert lattice.is_peg_visible(14, 5)
    assert not lattice.is_peg_visible(15, 5)


def test_peg_lattice_rebuilds_on_row_change():
    board = PegLattice(row_count=5)
    assert board.pegs.shape == (26 * 27 // 2, 4)
    assert len(board.visible_pegs()) == 15
    old_spacing = board.spacing

    board.set_row_count(20)
    assert len(board.visible_pegs()) == 210
    assert board.spacing < old_spacing
    assert board.pegs[1, 2] == pytest.approx(-0.5 * board.spacing)


def test_bin_centers():
    board = PegLattice(row_count=6)
    centers = board.bin_centers()
    assert len(centers) == 7
    assert np.allclose(centers, -centers[::-1])
    assert centers[3] == pytest.approx(0.0)
    assert lattice.bin_center_x(0, 6) == pytest.approx(centers[0])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

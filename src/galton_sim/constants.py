"""
Constants shared across the Galton board simulator.

Times are in simulated seconds. Ball motion is measured in "hops": one hop
is the time a ball needs to travel from one peg row to the next.
"""

from __future__ import annotations

###############################################################################
# Configuration ranges
###############################################################################

ROWS_RANGE = (5, 26)
BINARY_PROBABILITY_RANGE = (0.0, 1.0)

DEFAULT_ROW_COUNT = 12
DEFAULT_PROBABILITY = 0.5

###############################################################################
# Launch caps
###############################################################################

# Total balls the Intro screen may launch per run. ALL_REMAINING counts
# against this same number, not against a per-activation budget.
INTRO_TOTAL_LAUNCH_CAP = 100

# Max balls per bin on the Lab screen, and the lowered value used for testing.
LAB_BIN_CAP = 9999
LAB_LOWER_BIN_CAP = 25

BATCH_SIZE = 10
BATCH_TIME_SEPARATION = 0.100

###############################################################################
# Timing
###############################################################################

# Intro balls move 5 hops per second.
INTRO_TIME_SCALE = 5.0

# Lab balls move 10 hops per second, but never more than 0.09 hop per tick.
LAB_TIME_SCALE = 10.0
LAB_MAX_STEP = 0.090

# Continuous launch intervals, keyed by display mode name.
BALL_MODE_INTERVAL = 0.100
PATH_MODE_INTERVAL = 0.050
NONE_MODE_INTERVAL = 0.015

###############################################################################
# Board geometry (board-normalized units, y points up, apex peg at y=0)
###############################################################################

BOARD_WIDTH = 2.0
BALL_RADIUS_FACTOR = 0.25  # ball radius as a fraction of peg spacing
BIN_FLOOR_Y = -3.0
MAX_STACK_HEIGHT = 0.9  # tallest visual stack above the bin floor

from __future__ import annotations

import enum
from typing import NamedTuple

from .trajectory import Trajectory


class BallState(enum.Enum):
    FALLING = "falling"
    EXITED_PEGS = "exited_pegs"
    LANDED = "landed"


class StepResult(NamedTuple):
    """
    Outcome of advancing a ball. `exited` and `landed` are one-shot flags:
    each is True in exactly one result over the ball's lifetime. Both can be
    set by the same step when dt is large enough to cover the whole fall.
    """

    state: BallState
    exited: bool = False
    landed: bool = False

    @property
    def transitioned(self) -> bool:
        return self.exited or self.landed


class Ball:
    """
    A ball following a precomputed trajectory.

    FALLING -> EXITED_PEGS -> LANDED. The ball never clamps dt; callers decide
    how far to advance it per tick.
    """

    def __init__(self, trajectory: Trajectory, count_on_exit: bool = False) -> None:
        self.trajectory = trajectory
        # whether the histogram counts this ball on leaving the pegs or on landing
        self.count_on_exit = count_on_exit
        self.bin_index = trajectory.bin_index
        self.elapsed_time = 0.0
        self.state = BallState.FALLING
        self.position = trajectory.position_at(0.0)

    def __repr__(self) -> str:
        return (
            f"Ball(bin_index={self.bin_index}, state={self.state.name}, "
            f"elapsed_time={self.elapsed_time:.3f})"
        )

    def step(self, dt: float) -> StepResult:
        if self.state is BallState.LANDED:
            return StepResult(self.state)
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        self.elapsed_time += dt
        return self._update()

    def land_immediately(self) -> StepResult:
        """Skip the animation: exit and land within this call."""
        if self.state is BallState.LANDED:
            return StepResult(self.state)
        self.elapsed_time = max(self.elapsed_time, self.trajectory.total_duration)
        return self._update()

    def _update(self) -> StepResult:
        exited = landed = False
        if self.state is BallState.FALLING and self.elapsed_time >= self.trajectory.peg_duration:
            self.state = BallState.EXITED_PEGS
            exited = True
        if self.state is BallState.EXITED_PEGS and self.elapsed_time >= self.trajectory.total_duration:
            self.state = BallState.LANDED
            landed = True
        self.position = self.trajectory.position_at(self.elapsed_time)
        return StepResult(self.state, exited, landed)

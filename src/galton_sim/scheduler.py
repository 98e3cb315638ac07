"""
Launch scheduling and the per-frame driver.

`LaunchScheduler.advance(dt)` is the single entry point an animation loop
calls once per frame. Within one call it

1. fires any launches that have come due (staggered batches, or the
   continuous-mode interval timer),
2. advances every active ball,
3. feeds exit/landing transitions to the histogram and drops finished balls.

Everything is driven by accumulated simulated time, so a run is fully
reproducible from its seed and the sequence of dt values.
"""

from __future__ import annotations

import heapq
import logging
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from . import trajectory, utils
from .ball import Ball, BallState, StepResult
from .binomial import normalized_distribution
from .config import ConfigChange, DisplayMode, LaunchMode, SimulationConfig, reconcile
from .constants import (
    BALL_MODE_INTERVAL,
    INTRO_TIME_SCALE,
    LAB_MAX_STEP,
    LAB_TIME_SCALE,
    NONE_MODE_INTERVAL,
    PATH_MODE_INTERVAL,
)
from .histogram import Histogram, Statistics, summarize
from .lattice import PegLattice

logger = logging.getLogger(__name__)

# absorbs float drift when batch offsets (i * separation) are compared to the clock
TIME_EPSILON = 1e-9


class BallSnapshot(NamedTuple):
    position: Tuple[float, float]
    state: BallState
    bin_index: int


def launch_interval(display_mode: DisplayMode) -> float:
    """Continuous-mode launch interval; shorter when individual balls are not drawn."""
    if display_mode is DisplayMode.BALL:
        return BALL_MODE_INTERVAL
    elif display_mode is DisplayMode.PATH:
        return PATH_MODE_INTERVAL
    elif display_mode is DisplayMode.NONE:
        return NONE_MODE_INTERVAL
    raise ValueError(f"Unhandled display mode: {display_mode}")


class LaunchScheduler:
    """
    Owns the active balls, the histogram and the launch counters.

    Two independent caps can stop launching: `total_launch_cap` bounds the
    number of balls launched in a run, `bin_cap` bounds the count of any
    single bin (balls in flight that will be counted on exit are included,
    so no bin can overshoot). Reaching a cap sets `is_capped`; it never
    clears existing balls or statistics.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        *,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.config = config or SimulationConfig()
        self.config.validate()
        self.rng = rng if rng is not None else utils.make_rng(self.config.seed)

        self.lattice = PegLattice(self.config.row_count)
        self.histogram = Histogram(self.config.row_count, self.config.bin_cap)
        self.balls: List[Ball] = []

        self.is_playing = False
        self.clock = 0.0
        # min-heap of launch times; overlapping batches interleave
        self._pending: List[float] = []
        self._clear_run()

    def _clear_run(self) -> None:
        """Drop every ball and all statistics; the play state is left alone."""
        self.balls.clear()
        self._pending.clear()
        self.histogram.reset(self.config.row_count)
        self.launched_count = 0
        self.time_since_last_launch = 0.0
        self.is_capped = False

    # ------------------------------------------------------------------ configuration
    def apply_config(self, config: SimulationConfig) -> ConfigChange:
        """
        Validate and adopt a new configuration. Changing the row count, the
        probability or the display mode discards the current run.
        """
        config.validate()
        change = reconcile(self.config, config)
        self.config = config
        self.histogram.bin_cap = config.bin_cap

        if change.row_count:
            self.lattice.set_row_count(config.row_count)
        if change.requires_reset:
            logger.info(
                "Configuration changed (rows=%d, p=%.3f, display=%s); clearing run",
                config.row_count,
                config.probability,
                config.display_mode.value,
            )
            self._clear_run()
        elif change.launch_mode:
            # staggered launches belong to the mode that scheduled them
            self._pending.clear()
        if change.launch_mode and not config.is_continuous:
            self.is_playing = False
        self._refresh_cap()
        return change

    def set_row_count(self, row_count: int) -> ConfigChange:
        return self.apply_config(self.config.with_changes(row_count=row_count))

    def set_probability(self, probability: float) -> ConfigChange:
        return self.apply_config(self.config.with_changes(probability=probability))

    def set_launch_mode(self, launch_mode: LaunchMode) -> ConfigChange:
        return self.apply_config(self.config.with_changes(launch_mode=launch_mode))

    def set_display_mode(self, display_mode: DisplayMode) -> ConfigChange:
        return self.apply_config(self.config.with_changes(display_mode=display_mode))

    # ------------------------------------------------------------------ user triggers
    def play(self) -> int:
        """
        Handle the play button. Discrete modes schedule their launches and
        return how many were scheduled; CONTINUOUS starts the launch timer.
        """
        mode = self.config.launch_mode
        if mode is LaunchMode.SINGLE:
            count = self._allowance(1)
        elif mode is LaunchMode.BATCH:
            count = self._allowance(self.config.batch_size)
        elif mode is LaunchMode.ALL_REMAINING:
            count = self._allowance(self.config.total_launch_cap)
        elif mode is LaunchMode.CONTINUOUS:
            self.is_playing = True
            return 0
        else:
            raise ValueError(f"Unhandled launch mode: {mode}")

        for i in range(count):
            heapq.heappush(self._pending, self.clock + i * self.config.time_separation)
        self._refresh_cap()
        self._launch_due()
        return count

    def pause(self) -> None:
        """Stop launching. Balls already in flight keep moving."""
        self.is_playing = False
        self._pending.clear()
        self._refresh_cap()

    def set_playing(self, playing: bool) -> None:
        if playing:
            self.play()
        else:
            self.pause()

    def reset(self) -> None:
        """Reset all: stop playback and clear balls, histogram and counters."""
        self.is_playing = False
        self.clock = 0.0
        self._clear_run()

    # ------------------------------------------------------------------ caps
    def _committed(self) -> int:
        return self.launched_count + len(self._pending)

    def _projected_counts(self) -> np.ndarray:
        """Bin counts once every ball already launched has been counted."""
        counts = self.histogram.counts.copy()
        for ball in self.balls:
            if ball.count_on_exit:
                uncounted = ball.state is BallState.FALLING
            else:
                uncounted = ball.state is not BallState.LANDED
            if uncounted:
                counts[ball.bin_index] += 1
        return counts

    def _total_cap_reached(self) -> bool:
        cap = self.config.total_launch_cap
        return cap is not None and self._committed() >= cap

    def _bin_cap_reached(self) -> bool:
        cap = self.config.bin_cap
        return cap is not None and int(self._projected_counts().max()) >= cap

    def _allowance(self, requested: int) -> int:
        if self._bin_cap_reached():
            return 0
        cap = self.config.total_launch_cap
        if cap is not None:
            requested = min(requested, cap - self._committed())
        return max(0, requested)

    def _refresh_cap(self) -> None:
        capped = self._total_cap_reached() or self._bin_cap_reached()
        if capped and not self.is_capped:
            logger.info("Launch cap reached after %d launches", self.launched_count)
        self.is_capped = capped

    # ------------------------------------------------------------------ launching
    def _launch(self) -> Ball:
        path = trajectory.generate(
            self.config.row_count,
            self.config.probability,
            self.rng,
            self.histogram.counts,
        )
        ball = Ball(path, count_on_exit=self.config.is_continuous)
        self.balls.append(ball)
        self.launched_count += 1
        logger.debug("Launched ball %d into bin %d", self.launched_count, ball.bin_index)
        return ball

    def _launch_due(self) -> None:
        while self._pending and self._pending[0] <= self.clock + TIME_EPSILON:
            heapq.heappop(self._pending)
            if self._bin_cap_reached():
                # a bin filled up while this batch was staggering
                self._pending.clear()
                break
            self._launch()
        self._refresh_cap()

    def _launch_continuous(self, dt: float) -> None:
        self.time_since_last_launch += dt
        if self.time_since_last_launch > launch_interval(self.config.display_mode):
            if self._allowance(1) > 0:
                self._launch()
            self.time_since_last_launch = 0.0
        self._refresh_cap()

    # ------------------------------------------------------------------ stepping
    def _step_ball(self, ball: Ball, dt: float) -> StepResult:
        if not self.config.is_continuous:
            return ball.step(INTRO_TIME_SCALE * dt)

        display = self.config.display_mode
        if display is DisplayMode.BALL:
            # cap the step so a ball never visibly jumps across a bin
            return ball.step(min(LAB_MAX_STEP, LAB_TIME_SCALE * dt))
        elif display in (DisplayMode.PATH, DisplayMode.NONE):
            return ball.land_immediately()
        raise ValueError(f"Unhandled display mode: {display}")

    def _handle(self, ball: Ball, result: StepResult) -> None:
        if result.exited and ball.count_on_exit:
            self.histogram.add_ball(ball.bin_index)
        if not result.landed:
            return
        logger.debug("Ball landed in bin %d", ball.bin_index)
        if not ball.count_on_exit:
            self.histogram.add_ball(ball.bin_index)
            self.balls.remove(ball)
        else:
            # trail: the newest landed ball replaces every earlier ball that has
            # already been counted
            index = self.balls.index(ball)
            self.balls[:index] = [b for b in self.balls[:index] if b.state is BallState.FALLING]

    def advance(self, dt: float) -> None:
        """Advance the simulation by `dt` seconds."""
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        self.clock += dt

        self._launch_due()
        if self.is_playing and self.config.is_continuous:
            self._launch_continuous(dt)

        for ball in list(self.balls):
            if ball in self.balls:
                self._handle(ball, self._step_ball(ball, dt))
        self._refresh_cap()

    # ------------------------------------------------------------------ observables
    @property
    def pending_launches(self) -> int:
        return len(self._pending)

    def ball_snapshots(self) -> List[BallSnapshot]:
        return [BallSnapshot(b.position, b.state, b.bin_index) for b in self.balls]

    def bin_heights(self) -> np.ndarray:
        return self.histogram.heights(self.config.histogram_mode)

    def theoretical_curve(self) -> np.ndarray:
        return normalized_distribution(self.config.row_count, self.config.probability)

    def statistics(self) -> Statistics:
        return summarize(self.histogram, self.config.probability)

from __future__ import annotations

import logging
import time

from . import utils
from .ball import BallState
from .config import SimulationConfig
from .scheduler import LaunchScheduler

logger = logging.getLogger(__name__)


def run_model(
    params: SimulationConfig | dict | None = None,
    duration: float = 10.0,
    dt: float = 1.0 / 60.0,
    drain: bool = True,
) -> utils.RunResult:
    """
    Headless run: press play, tick the scheduler for `duration` seconds of
    simulated time and return the histogram with the theoretical curve.

    With `drain`, keeps ticking (without new launches) until every ball that
    is still falling has been counted.
    """
    if params is None:
        params = SimulationConfig()
    elif isinstance(params, dict):
        params = SimulationConfig.from_dict(params)
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")

    t_start = time.perf_counter()
    scheduler = LaunchScheduler(params)
    scheduler.play()

    ticks = 0
    while scheduler.clock < duration:
        scheduler.advance(dt)
        ticks += 1
        if not params.is_continuous and scheduler.pending_launches == 0 and not scheduler.balls:
            # discrete modes: relaunch until the total cap stops us
            if scheduler.is_capped or scheduler.play() == 0:
                break

    scheduler.pause()
    if drain:
        while scheduler.balls and any(
            b.state is BallState.FALLING or not b.count_on_exit for b in scheduler.balls
        ):
            scheduler.advance(dt)
            ticks += 1

    elapsed = time.perf_counter() - t_start
    stats = scheduler.statistics()
    logger.info(
        "Run finished: %d launched, %d landed, %d ticks in %.2fs",
        scheduler.launched_count,
        stats.landed_count,
        ticks,
        elapsed,
    )

    meta = {
        "model": "galton",
        "row_count": params.row_count,
        "probability": params.probability,
        "launch_mode": params.launch_mode.value,
        "display_mode": params.display_mode.value,
        "seed": params.seed,
        "launched": scheduler.launched_count,
        "landed": stats.landed_count,
        "is_capped": scheduler.is_capped,
        "sample_mean": stats.sample_mean,
        "sample_standard_deviation": stats.sample_standard_deviation,
        "theoretical_mean": stats.theoretical_mean,
        "theoretical_standard_deviation": stats.theoretical_standard_deviation,
        "simulated_time": scheduler.clock,
        "time_elapsed": elapsed,
    }
    return utils.RunResult(
        counts=scheduler.histogram.counts.copy(),
        theoretical=scheduler.theoretical_curve(),
        meta=meta,
    )

from __future__ import annotations

import enum
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from .constants import (
    BATCH_SIZE,
    BATCH_TIME_SEPARATION,
    BINARY_PROBABILITY_RANGE,
    DEFAULT_PROBABILITY,
    DEFAULT_ROW_COUNT,
    INTRO_TOTAL_LAUNCH_CAP,
    LAB_BIN_CAP,
    LAB_LOWER_BIN_CAP,
    ROWS_RANGE,
)
from .errors import ConfigurationError
from .histogram import HistogramMode


class LaunchMode(enum.Enum):
    SINGLE = "single"
    BATCH = "batch"
    ALL_REMAINING = "all_remaining"
    CONTINUOUS = "continuous"


class DisplayMode(enum.Enum):
    BALL = "ball"
    PATH = "path"
    NONE = "none"


@dataclass(frozen=True)
class SimulationConfig:
    """
    Everything the UI may set on the simulator.

    Discrete launch modes (SINGLE, BATCH, ALL_REMAINING) behave like the Intro
    screen: balls are counted when they land and removed right away.
    CONTINUOUS behaves like the Lab screen: balls are counted on leaving the
    pegs and each landing ball removes the one launched before it.
    A cap of None disables that cap.
    """

    row_count: int = DEFAULT_ROW_COUNT
    probability: float = DEFAULT_PROBABILITY
    launch_mode: LaunchMode = LaunchMode.SINGLE
    display_mode: DisplayMode = DisplayMode.BALL
    histogram_mode: HistogramMode = HistogramMode.COUNT
    batch_size: int = BATCH_SIZE
    time_separation: float = BATCH_TIME_SEPARATION
    total_launch_cap: Optional[int] = INTRO_TOTAL_LAUNCH_CAP
    bin_cap: Optional[int] = None
    seed: Optional[int] = None

    @classmethod
    def intro(cls, **overrides: Any) -> "SimulationConfig":
        return cls(**overrides)

    @classmethod
    def lab(cls, lower_bin_cap: bool = False, **overrides: Any) -> "SimulationConfig":
        params: Dict[str, Any] = {
            "launch_mode": LaunchMode.CONTINUOUS,
            "total_launch_cap": None,
            "bin_cap": LAB_LOWER_BIN_CAP if lower_bin_cap else LAB_BIN_CAP,
        }
        params.update(overrides)
        return cls(**params)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationConfig":
        """Build a config from plain values, e.g. a loaded JSON/TOML file."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")
        params = dict(data)
        for key, enum_type in (
            ("launch_mode", LaunchMode),
            ("display_mode", DisplayMode),
            ("histogram_mode", HistogramMode),
        ):
            if key in params and not isinstance(params[key], enum_type):
                try:
                    params[key] = enum_type(params[key])
                except ValueError as exc:
                    raise ConfigurationError(f"Invalid {key}: {params[key]!r}") from exc
        return cls(**params)

    def with_changes(self, **changes: Any) -> "SimulationConfig":
        return replace(self, **changes)

    @property
    def is_continuous(self) -> bool:
        return self.launch_mode is LaunchMode.CONTINUOUS

    def validate(self) -> None:
        lo, hi = ROWS_RANGE
        if isinstance(self.row_count, bool) or not isinstance(self.row_count, int):
            raise ConfigurationError(f"row_count must be an integer, got {self.row_count!r}")
        if not lo <= self.row_count <= hi:
            raise ConfigurationError(f"row_count must be in [{lo}, {hi}], got {self.row_count}")

        p_lo, p_hi = BINARY_PROBABILITY_RANGE
        if not p_lo <= self.probability <= p_hi:
            raise ConfigurationError(
                f"probability must be in [{p_lo}, {p_hi}], got {self.probability}"
            )

        if self.batch_size < 1:
            raise ConfigurationError(f"batch_size must be positive, got {self.batch_size}")
        if self.time_separation < 0:
            raise ConfigurationError(
                f"time_separation must be non-negative, got {self.time_separation}"
            )
        for name in ("total_launch_cap", "bin_cap"):
            cap = getattr(self, name)
            if cap is not None and cap < 1:
                raise ConfigurationError(f"{name} must be positive or None, got {cap}")

        if self.launch_mode is LaunchMode.ALL_REMAINING and self.total_launch_cap is None:
            raise ConfigurationError("ALL_REMAINING launch mode needs a total_launch_cap")

        for name, enum_type in (
            ("launch_mode", LaunchMode),
            ("display_mode", DisplayMode),
            ("histogram_mode", HistogramMode),
        ):
            if not isinstance(getattr(self, name), enum_type):
                raise ConfigurationError(f"{name} must be a {enum_type.__name__}")


@dataclass(frozen=True)
class ConfigChange:
    row_count: bool = False
    probability: bool = False
    display_mode: bool = False
    launch_mode: bool = False
    histogram_mode: bool = False
    caps: bool = False

    @property
    def requires_reset(self) -> bool:
        """The distribution is only meaningful for a fixed row count, probability and display."""
        return self.row_count or self.probability or self.display_mode

    @property
    def changed(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))


def reconcile(previous: SimulationConfig, current: SimulationConfig) -> ConfigChange:
    return ConfigChange(
        row_count=previous.row_count != current.row_count,
        probability=previous.probability != current.probability,
        display_mode=previous.display_mode is not current.display_mode,
        launch_mode=previous.launch_mode is not current.launch_mode,
        histogram_mode=previous.histogram_mode is not current.histogram_mode,
        caps=(
            previous.total_launch_cap != current.total_launch_cap
            or previous.bin_cap != current.bin_cap
        ),
    )

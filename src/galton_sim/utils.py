# src/galton_sim/utils.py
from __future__ import annotations

import json
import os
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np


@dataclass
class RunResult:
    """Common container for a finished headless run."""

    counts: Optional[np.ndarray] = None
    theoretical: Optional[np.ndarray] = None
    meta: Optional[Dict[str, Any]] = None


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Random generator for reproducible trajectories; None draws fresh OS entropy."""
    return np.random.default_rng(seed)


def now_str() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """Read a JSON or TOML parameter file into a dict for `SimulationConfig.from_dict`."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".toml":
        return tomllib.loads(text)
    if suffix in {".json", ""}:
        return json.loads(text)
    raise ValueError(f"Unsupported parameter file format: {suffix}")

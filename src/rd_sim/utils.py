# src/rd_sim/utils.py
from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np


@dataclass
class SimulationResult:
    """Common container for reaction-diffusion outputs."""

    activator: Optional[np.ndarray] = None
    substrate: Optional[np.ndarray] = None
    width: int = 0
    height: int = 0
    meta: Optional[Dict[str, Any]] = None

    def activator_grid(self) -> Optional[np.ndarray]:
        """Activator reshaped to (height, width)."""
        if self.activator is None:
            return None
        return self.activator.reshape(self.height, self.width)


def write_snapshot(path: str | os.PathLike[str], text: str) -> None:
    """Write a rendered text snapshot, creating parent directories."""
    out_dir = Path(path).parent
    out_dir.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(text)


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load simulation parameters from JSON or TOML.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        return json.loads(data.decode("utf-8"))
    if suffix in {".toml", ".tml"}:
        return tomllib.loads(data.decode("utf-8"))
    raise ValueError(f"Unsupported parameter file format: {suffix}")

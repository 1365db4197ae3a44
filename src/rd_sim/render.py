from __future__ import annotations

import numpy as np
from numba import njit

from .grid import get_index

PALETTE = " .:;=+xX%$"
NUM_LEVELS = len(PALETTE)
# Activator concentrations for the default kinetics stay below roughly 0.4
FULL_SCALE = 0.4
BORDER = "_"


@njit(cache=True)
def _round_half_away(x: float) -> float:
    """
    Round half away from zero. Python's round() rounds half to even,
    which would send 4.5 to 4 instead of 5.
    """
    if x >= 0.0:
        return np.floor(x + 0.5)
    else:
        return np.ceil(x - 0.5)


@njit(cache=True)
def concentration_level(concentration: float) -> int:
    """Palette index for one concentration, clamped to [0, NUM_LEVELS - 1]."""
    level = _round_half_away((NUM_LEVELS - 1) * (concentration / FULL_SCALE))
    if level > NUM_LEVELS - 1:
        return NUM_LEVELS - 1
    if level > 0.0:
        return int(level)
    # negatives and NaN
    return 0


@njit(cache=True)
def quantize(field):
    """Palette index for every cell of a flat field."""
    levels = np.empty(field.shape[0], dtype=np.int64)
    for i in range(field.shape[0]):
        levels[i] = concentration_level(field[i])
    return levels


def to_symbol(concentration: float) -> str:
    return PALETTE[concentration_level(float(concentration))]


def render(width: int, height: int, field: np.ndarray) -> str:
    """
    Bordered text block of a flat row-major field: a line of `width`
    underscores, one line of symbols per row, then another border line.
    """
    levels = quantize(np.ascontiguousarray(field, dtype=np.float64))
    border = BORDER * width
    lines = [border]
    for y in range(height):
        lines.append(
            "".join(PALETTE[levels[get_index(x, y, width)]] for x in range(width))
        )
    lines.append(border)
    return "\n".join(lines) + "\n"


__all__ = ["PALETTE", "concentration_level", "quantize", "render", "to_symbol"]

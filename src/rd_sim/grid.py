from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numba import njit


@njit(cache=True)
def get_index(x, y, width):
    """Row-major offset of cell (x, y). Coordinates must already be in range."""
    return y * width + x


@njit(cache=True)
def laplacian(field, x, y, width, height):
    """
    5-point discrete Laplacian of a flat field at (x, y).

    Each axis wraps independently (periodic boundaries), so edges and corners
    need no special handling.
    """
    left = width - 1 if x == 0 else x - 1
    right = 0 if x >= width - 1 else x + 1
    up = height - 1 if y == 0 else y - 1
    down = 0 if y >= height - 1 else y + 1

    return (
        -4.0 * field[get_index(x, y, width)]
        + field[get_index(left, y, width)]
        + field[get_index(x, up, width)]
        + field[get_index(x, down, width)]
        + field[get_index(right, y, width)]
    )


@dataclass
class ActivatorSubstrate:
    """Concentrations of both species over one width x height grid."""

    activator: np.ndarray
    substrate: np.ndarray
    width: int
    height: int

    @classmethod
    def allocate(cls, width: int, height: int) -> "ActivatorSubstrate":
        """Substrate filled with 1.0, activator with 0.0."""
        size = width * height
        return cls(
            activator=np.zeros(size, dtype=np.float64),
            substrate=np.ones(size, dtype=np.float64),
            width=width,
            height=height,
        )

    def seed_square(self, size: int, value: float = 0.5) -> None:
        """Set the activator inside the size x size block at the origin."""
        for x in range(size):
            for y in range(size):
                self.activator[get_index(x, y, self.width)] = value

    def activator_grid(self) -> np.ndarray:
        """Activator as a (height, width) view."""
        return self.activator.reshape(self.height, self.width)


__all__ = ["ActivatorSubstrate", "get_index", "laplacian"]

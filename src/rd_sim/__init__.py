"""
Reaction-Diffusion Simulation Library

This package provides a Gray-Scott reaction-diffusion simulator on a
periodic lattice plus a text renderer for its activator field:
- GrayScottSimulator: double-buffered (Jacobi) or in-place (Gauss-Seidel) driver
- render / to_symbol: quantize concentrations into a 10-symbol palette
"""

from .grid import ActivatorSubstrate, get_index, laplacian
from .gray_scott import (
    GAUSS_SEIDEL,
    JACOBI,
    GrayScottParams,
    GrayScottSimulator,
    SimulationConfig,
    config_from_dict,
    run_model,
    step,
    step_in_place,
)
from .render import PALETTE, quantize, render, to_symbol
from . import utils

__all__ = [
    # Simulator
    "GrayScottSimulator",
    "run_model",
    # Configuration classes
    "GrayScottParams",
    "SimulationConfig",
    "config_from_dict",
    "JACOBI",
    "GAUSS_SEIDEL",
    # Numerics
    "ActivatorSubstrate",
    "get_index",
    "laplacian",
    "step",
    "step_in_place",
    # Rendering
    "PALETTE",
    "quantize",
    "render",
    "to_symbol",
    # Utilities
    "utils",
]

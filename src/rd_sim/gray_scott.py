"""
Gray-Scott Reaction-Diffusion Simulator.

Two chemical species (activator `a`, substrate `s`) on a periodic square
lattice, advanced with an explicit Euler step of

    da/dt = Da * lap(a) + s * a^2 - (F + k) * a
    ds/dt = Ds * lap(s) - s * a^2 + F * (1 - s)

Update schemes:
1.  **Jacobi (default):** every cell is computed from one frozen read buffer
    and written to a second buffer. The two buffers swap roles (ping-pong)
    after each iteration, so the result does not depend on traversal order.
2.  **Gauss-Seidel (opt-in):** a single buffer is updated in place. Cells
    visited later in a pass see neighbours already advanced in the same pass,
    which changes the effective discretization.

The hot loops are compiled with `@numba.njit`; the simulator class owns the
buffers and unpacks the dataclass configuration into kernel arguments.
"""

from __future__ import annotations

import math
import numbers
import sys
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np
from numba import njit

from . import utils
from .grid import ActivatorSubstrate, get_index, laplacian

###############################################################################
# Constants
###############################################################################

JACOBI = 0
GAUSS_SEIDEL = 1
UPDATE_SCHEME = JACOBI

SCHEME_NAMES = {
    "jacobi": JACOBI,
    "gauss-seidel": GAUSS_SEIDEL,
}

SEED_VALUE = 0.5

###############################################################################
# Configuration
###############################################################################


@dataclass(frozen=True)
class GrayScottParams:
    """Reaction kinetics and diffusion rates. Fixed for a whole run."""

    F: float = 0.042
    k: float = 0.063
    dt: float = 0.2
    Da: float = 0.25
    Ds: float = 0.5

    def __post_init__(self) -> None:
        for name in ("F", "k", "dt", "Da", "Ds"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")


@dataclass(frozen=True)
class SimulationConfig:
    """Grid geometry, run length and update scheme."""

    width: int = 100
    height: int = 100
    iterations: int = 100_000
    seed_patch_size: int = 10
    scheme: int = UPDATE_SCHEME
    params: GrayScottParams = field(default_factory=GrayScottParams)
    verbose: bool = False

    def __post_init__(self) -> None:
        for name in ("width", "height", "iterations", "seed_patch_size"):
            value = getattr(self, name)
            if not isinstance(value, numbers.Integral):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Grid dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.iterations <= 0:
            raise ValueError(f"iterations must be positive, got {self.iterations}")
        if not 0 <= self.seed_patch_size <= min(self.width, self.height):
            raise ValueError(
                f"seed_patch_size must lie in [0, {min(self.width, self.height)}], "
                f"got {self.seed_patch_size}"
            )
        if self.scheme not in (JACOBI, GAUSS_SEIDEL):
            raise ValueError(f"Unknown update scheme: {self.scheme}")


def scheme_from_name(name: str) -> int:
    try:
        return SCHEME_NAMES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown update scheme {name!r}, expected one of {sorted(SCHEME_NAMES)}"
        ) from None


def scheme_name(scheme: int) -> str:
    for name, value in SCHEME_NAMES.items():
        if value == scheme:
            return name
    raise ValueError(f"Unknown update scheme: {scheme}")


###############################################################################
# Kernels
###############################################################################


@njit(cache=True)
def gray_scott_kernel(
    read_a, read_s, write_a, write_s, width, height, F, k, dt, Da, Ds
):
    """
    One Jacobi pass. Reads only from read_a/read_s, writes only to
    write_a/write_s; the two pairs must be distinct arrays.
    """
    for y in range(height):
        for x in range(width):
            index = get_index(x, y, width)
            a = read_a[index]
            s = read_s[index]
            lap_a = laplacian(read_a, x, y, width, height)
            lap_s = laplacian(read_s, x, y, width, height)

            write_a[index] = (Da * lap_a + s * a * a - (F + k) * a) * dt + a
            write_s[index] = (Ds * lap_s - s * a * a + F * (1.0 - s)) * dt + s


@njit(cache=True)
def gray_scott_in_place_kernel(act, sub, width, height, F, k, dt, Da, Ds):
    """
    One Gauss-Seidel pass over a single buffer, x outer and y inner.
    Both species of a cell are advanced from that cell's values before update.
    """
    for x in range(width):
        for y in range(height):
            index = get_index(x, y, width)
            a = act[index]
            s = sub[index]
            lap_a = laplacian(act, x, y, width, height)
            lap_s = laplacian(sub, x, y, width, height)

            act[index] = (Da * lap_a + s * a * a - (F + k) * a) * dt + a
            sub[index] = (Ds * lap_s - s * a * a + F * (1.0 - s)) * dt + s


def step(
    read: ActivatorSubstrate, write: ActivatorSubstrate, params: GrayScottParams
) -> None:
    """Advance `read` by one Jacobi step, storing the result in `write`."""
    if read.activator is write.activator or read.substrate is write.substrate:
        raise ValueError("Jacobi step needs distinct read and write buffers")
    gray_scott_kernel(
        read.activator,
        read.substrate,
        write.activator,
        write.substrate,
        read.width,
        read.height,
        params.F,
        params.k,
        params.dt,
        params.Da,
        params.Ds,
    )


def step_in_place(state: ActivatorSubstrate, params: GrayScottParams) -> None:
    """Advance `state` by one Gauss-Seidel step."""
    gray_scott_in_place_kernel(
        state.activator,
        state.substrate,
        state.width,
        state.height,
        params.F,
        params.k,
        params.dt,
        params.Da,
        params.Ds,
    )


###############################################################################
# Simulator
###############################################################################


class GrayScottSimulator:
    """
    Owns the two-slot buffer arena and drives the step kernels.

    Slot 0 is the first read buffer and slot 1 the first write buffer. After
    each Jacobi iteration the roles swap, tracked by `read_slot`.
    """

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = config or SimulationConfig()
        self.read_slot = 0
        self.iterations_run = 0
        self.elapsed = 0.0
        self.buffers: list[ActivatorSubstrate] = [
            ActivatorSubstrate.allocate(self.config.width, self.config.height),
            ActivatorSubstrate.allocate(self.config.width, self.config.height),
        ]
        self.reset()

    def reset(self) -> None:
        """Refill both buffers in place with the initial state and seed patch."""
        cfg = self.config
        for buf in self.buffers:
            buf.activator.fill(0.0)
            buf.substrate.fill(1.0)
            buf.seed_square(cfg.seed_patch_size, SEED_VALUE)
        self.read_slot = 0
        self.iterations_run = 0

    @property
    def current(self) -> ActivatorSubstrate:
        """The buffer holding the latest state."""
        return self.buffers[self.read_slot]

    def run(self, cancel: Optional[Callable[[], bool]] = None) -> np.ndarray:
        """
        Run exactly `config.iterations` steps and return the final activator.
        Each call starts again from the initial state.

        `cancel` is polled between iterations; returning True stops the run
        with the last completed iteration as the final state.
        """
        self.reset()
        cfg = self.config
        params = cfg.params
        start_time = time.time()
        report_every = max(1, cfg.iterations // 10)

        if cfg.verbose:
            print(
                f"Running Gray-Scott: {cfg.width}x{cfg.height}, "
                f"iterations={cfg.iterations}, scheme={scheme_name(cfg.scheme)}",
                file=sys.stderr,
            )

        for i in range(cfg.iterations):
            if cancel is not None and cancel():
                if cfg.verbose:
                    print(f"[rd] Cancelled after {i} iterations", file=sys.stderr)
                break

            if cfg.scheme == GAUSS_SEIDEL:
                step_in_place(self.buffers[0], params)
            else:
                write_slot = 1 - self.read_slot
                step(self.buffers[self.read_slot], self.buffers[write_slot], params)
                self.read_slot = write_slot
            self.iterations_run += 1

            if cfg.verbose and self.iterations_run % report_every == 0:
                elapsed = time.time() - start_time
                print(
                    f"[rd] {self.iterations_run}/{cfg.iterations} iterations, "
                    f"elapsed={elapsed:.1f}s",
                    file=sys.stderr,
                )

        self.elapsed = time.time() - start_time
        return self.current.activator

    def result(self) -> utils.SimulationResult:
        cfg = self.config
        meta = {
            "model": "gray_scott",
            "scheme": scheme_name(cfg.scheme),
            "width": int(cfg.width),
            "height": int(cfg.height),
            "iterations": int(cfg.iterations),
            "iterations_run": int(self.iterations_run),
            "seed_patch_size": int(cfg.seed_patch_size),
            "F": float(cfg.params.F),
            "k": float(cfg.params.k),
            "dt": float(cfg.params.dt),
            "Da": float(cfg.params.Da),
            "Ds": float(cfg.params.Ds),
            "time_elapsed": float(self.elapsed),
        }
        return utils.SimulationResult(
            activator=self.current.activator,
            substrate=self.current.substrate,
            width=cfg.width,
            height=cfg.height,
            meta=meta,
        )


def config_from_dict(config: dict | None = None) -> SimulationConfig:
    """
    Build a SimulationConfig from a flat dict (e.g. loaded with
    utils.load_params). Kinetics may be given flat or under a "params" key.
    """
    values = dict(config or {})
    kinetics = dict(values.pop("params", {}) or {})
    for name in ("F", "k", "dt", "Da", "Ds"):
        if name in values:
            kinetics[name] = values.pop(name)
    scheme = values.pop("scheme", UPDATE_SCHEME)
    if isinstance(scheme, str):
        scheme = scheme_from_name(scheme)
    return SimulationConfig(
        params=GrayScottParams(**kinetics), scheme=scheme, **values
    )


def run_model(config: dict | None = None) -> utils.SimulationResult:
    """Run a Gray-Scott simulation from a plain dict and return its result."""
    sim = GrayScottSimulator(config_from_dict(config))
    sim.run()
    return sim.result()


__all__ = [
    "GAUSS_SEIDEL",
    "JACOBI",
    "GrayScottParams",
    "GrayScottSimulator",
    "SimulationConfig",
    "config_from_dict",
    "run_model",
    "scheme_from_name",
    "scheme_name",
    "step",
    "step_in_place",
]

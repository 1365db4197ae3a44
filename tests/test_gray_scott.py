"""
Unit tests for the Gray-Scott step kernels and the simulation driver.
"""

import numpy as np
import pytest

from rd_sim import render
from rd_sim.grid import ActivatorSubstrate, get_index
from rd_sim.gray_scott import (
    GAUSS_SEIDEL,
    JACOBI,
    GrayScottParams,
    GrayScottSimulator,
    SimulationConfig,
    config_from_dict,
    run_model,
    scheme_from_name,
    step,
    step_in_place,
)


def test_step_single_cell_update():
    """Fully seeded grid: the Laplacian vanishes and only the kinetics act."""
    params = GrayScottParams()
    read = ActivatorSubstrate.allocate(3, 3)
    read.seed_square(3)
    write = ActivatorSubstrate.allocate(3, 3)

    step(read, write, params)

    a, s = 0.5, 1.0
    expected_a = a + params.dt * (s * a * a - (params.F + params.k) * a)
    expected_s = s + params.dt * (-s * a * a + params.F * (1.0 - s))
    assert np.allclose(write.activator, expected_a)
    assert np.allclose(write.substrate, expected_s)


def test_step_leaves_read_buffer_untouched():
    read = ActivatorSubstrate.allocate(8, 8)
    read.seed_square(3)
    write = ActivatorSubstrate.allocate(8, 8)
    before_a = read.activator.copy()
    before_s = read.substrate.copy()

    step(read, write, GrayScottParams())

    assert np.array_equal(read.activator, before_a)
    assert np.array_equal(read.substrate, before_s)
    assert not np.array_equal(write.activator, before_a)


def test_step_rejects_aliased_buffers():
    state = ActivatorSubstrate.allocate(4, 4)
    with pytest.raises(ValueError):
        step(state, state, GrayScottParams())


def test_unseeded_grid_is_steady():
    config = SimulationConfig(width=12, height=9, iterations=25, seed_patch_size=0)
    sim = GrayScottSimulator(config)
    activator = sim.run()

    assert np.all(activator == 0.0)
    assert np.all(sim.current.substrate == 1.0)


def test_unseeded_grid_is_steady_gauss_seidel():
    config = SimulationConfig(
        width=6, height=6, iterations=10, seed_patch_size=0, scheme=GAUSS_SEIDEL
    )
    sim = GrayScottSimulator(config)
    activator = sim.run()

    assert np.all(activator == 0.0)
    assert np.all(sim.current.substrate == 1.0)


def test_buffer_alternation_odd():
    sim = GrayScottSimulator(SimulationConfig(width=5, height=5, iterations=3, seed_patch_size=2))
    first_read, first_write = sim.buffers
    activator = sim.run()

    assert activator is first_write.activator
    assert activator is not first_read.activator
    assert sim.read_slot == 1
    assert sim.iterations_run == 3


def test_buffer_alternation_even():
    sim = GrayScottSimulator(SimulationConfig(width=5, height=5, iterations=2, seed_patch_size=2))
    first_read = sim.buffers[0]
    activator = sim.run()

    assert activator is first_read.activator
    assert sim.read_slot == 0


def test_fully_seeded_grid_stays_uniform():
    config = SimulationConfig(
        width=10,
        height=10,
        iterations=1,
        seed_patch_size=10,
        params=GrayScottParams(F=0.042, k=0.063, dt=0.2, Da=0.25, Ds=0.5),
    )
    sim = GrayScottSimulator(config)
    activator = sim.run()

    assert np.all(activator == activator[0])
    assert activator[0] != 0.5

    lines = render(10, 10, activator).splitlines()
    assert lines[0] == "_" * 10
    assert lines[-1] == "_" * 10
    interior = "".join(lines[1:-1])
    assert len(interior) == 100
    assert len(set(interior)) == 1


def test_gauss_seidel_differs_from_jacobi():
    base = dict(width=8, height=8, iterations=1, seed_patch_size=4)
    jacobi = GrayScottSimulator(SimulationConfig(scheme=JACOBI, **base))
    gauss = GrayScottSimulator(SimulationConfig(scheme=GAUSS_SEIDEL, **base))

    a_jacobi = jacobi.run()
    a_gauss = gauss.run()

    assert a_gauss is gauss.buffers[0].activator
    # first visited cell has no updated neighbours yet
    assert a_gauss[0] == a_jacobi[0]
    assert not np.array_equal(a_jacobi, a_gauss)


def test_step_in_place_sees_updated_neighbours():
    params = GrayScottParams()
    read = ActivatorSubstrate.allocate(4, 4)
    read.seed_square(4)
    write = ActivatorSubstrate.allocate(4, 4)
    in_place = ActivatorSubstrate.allocate(4, 4)
    in_place.seed_square(4)

    step(read, write, params)
    step_in_place(in_place, params)

    assert in_place.activator[get_index(0, 0, 4)] == write.activator[get_index(0, 0, 4)]
    # (0, 1) reads the already advanced (0, 0)
    assert in_place.activator[get_index(0, 1, 4)] != write.activator[get_index(0, 1, 4)]


def test_pattern_spreads_from_seed():
    config = SimulationConfig(width=20, height=20, iterations=200, seed_patch_size=4)
    activator = GrayScottSimulator(config).run()

    assert np.all(np.isfinite(activator))
    # activator has diffused beyond the seed square
    assert activator[get_index(6, 6, 20)] > 0.0
    # periodic wrap carries it to the far edges too
    assert activator[get_index(19, 0, 20)] > 0.0


def test_cancel_stops_between_iterations():
    config = SimulationConfig(width=6, height=6, iterations=50, seed_patch_size=2)
    sim = GrayScottSimulator(config)
    calls = []

    def cancel():
        calls.append(1)
        return len(calls) > 4

    sim.run(cancel=cancel)
    assert sim.iterations_run == 4
    assert sim.read_slot == 0


def test_repeated_runs_start_from_initial_state():
    config = SimulationConfig(width=8, height=8, iterations=3, seed_patch_size=3)
    sim = GrayScottSimulator(config)
    first_write = sim.buffers[1]

    first = sim.run().copy()
    second = sim.run()

    assert np.array_equal(first, second)
    assert second is first_write.activator
    assert sim.iterations_run == 3
    assert sim.result().meta["iterations_run"] == config.iterations


def test_jacobi_result_matches_transposed_grid():
    """Jacobi output does not depend on traversal order, so transposing commutes."""
    width, height = 7, 5
    params = GrayScottParams()
    read = ActivatorSubstrate.allocate(width, height)
    read.activator[:] = np.linspace(0.0, 0.4, width * height)
    read.substrate[:] = np.linspace(1.0, 0.6, width * height)
    write = ActivatorSubstrate.allocate(width, height)

    flipped = ActivatorSubstrate.allocate(height, width)
    flipped.activator[:] = read.activator_grid().T.ravel()
    flipped.substrate[:] = read.substrate.reshape(height, width).T.ravel()
    flipped_write = ActivatorSubstrate.allocate(height, width)

    step(read, write, params)
    step(flipped, flipped_write, params)

    assert np.allclose(write.activator_grid().T, flipped_write.activator_grid())


def test_config_validation():
    with pytest.raises(ValueError):
        SimulationConfig(width=0)
    with pytest.raises(ValueError):
        SimulationConfig(height=-3)
    with pytest.raises(ValueError):
        SimulationConfig(iterations=0)
    with pytest.raises(ValueError):
        SimulationConfig(width=5, height=5, seed_patch_size=6)
    with pytest.raises(ValueError):
        SimulationConfig(scheme=7)
    with pytest.raises(ValueError):
        SimulationConfig(width=10.0, height=10)
    with pytest.raises(ValueError):
        SimulationConfig(iterations=2.5)
    with pytest.raises(ValueError):
        SimulationConfig(width=5, height=5, seed_patch_size="2")
    with pytest.raises(ValueError):
        GrayScottParams(F=float("nan"))


def test_scheme_names():
    assert scheme_from_name("jacobi") == JACOBI
    assert scheme_from_name("Gauss-Seidel") == GAUSS_SEIDEL
    with pytest.raises(ValueError):
        scheme_from_name("red-black")


def test_config_from_dict_flat_and_nested():
    flat = config_from_dict({"width": 8, "height": 6, "iterations": 3, "F": 0.03})
    assert flat.width == 8
    assert flat.params.F == 0.03
    assert flat.params.k == GrayScottParams().k

    nested = config_from_dict(
        {"iterations": 2, "scheme": "gauss-seidel", "params": {"k": 0.06}}
    )
    assert nested.scheme == GAUSS_SEIDEL
    assert nested.params.k == 0.06

    with pytest.raises(TypeError):
        config_from_dict({"depth": 3})


def test_run_model_result():
    result = run_model(
        {"width": 10, "height": 8, "iterations": 5, "seed_patch_size": 3}
    )
    assert result.activator.shape == (80,)
    assert result.activator_grid().shape == (8, 10)
    assert result.meta["model"] == "gray_scott"
    assert result.meta["scheme"] == "jacobi"
    assert result.meta["iterations_run"] == 5
    assert result.meta["time_elapsed"] >= 0.0

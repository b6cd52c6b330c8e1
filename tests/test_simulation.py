"""Integration tests for the simulation driver."""

import logging

import pytest
import numpy as np
import jax.numpy as jnp

from jax_swe import (
    Simulation,
    SimulationStatus,
    ProbeConfig,
    ConfigurationError,
    ContractViolationError,
    NonPhysicalStateError,
    OutputError,
)
from jax_swe.data_utils import load_snapshot, load_probe
from jax_swe.integrate import ForwardEuler, RK2, compute_l2_error
from jax_swe.solvers import (
    UniformMesh, RusanovFlux, ZeroFlux, LakeAtRest, DamBreak, ExponentialDecay
)

from conftest import ConstantSource, TruncatedFlux


def snapshot_files(directory, flux_name):
    return sorted(p.name for p in directory.glob(f"solution_{flux_name}_*.txt"))


class TestOutput:

    def test_initial_snapshot_is_exact(self, mesh, make_config, tmp_path):
        """Snapshot 0 reproduces the initial condition before any step."""
        physics = DamBreak(mesh, h_left=2.0, h_right=1.0)
        sim = Simulation(make_config(time_step=1e-3, final_time=0.01), mesh, physics, RusanovFlux())
        sim.run()

        snapshot = load_snapshot(tmp_path / "solution_Rusanov_0.txt")
        initial = np.asarray(physics.initial_condition())
        assert snapshot.shape == (mesh.n_cells, 6)
        assert np.array_equal(snapshot[:, 0], np.asarray(mesh.cell_centers))
        assert np.array_equal(snapshot[:, 2], initial[:, 0])
        assert np.array_equal(snapshot[:, 4], initial[:, 1])
        # Fluid at rest on a flat bottom: H = h, u = 0, Fr = 0
        assert np.array_equal(snapshot[:, 1], initial[:, 0])
        assert np.all(snapshot[:, 3] == 0.0)
        assert np.all(snapshot[:, 5] == 0.0)

    def test_snapshot_header(self, mesh, make_config, tmp_path):
        Simulation(make_config(), mesh, LakeAtRest(mesh), ZeroFlux()).run()
        first_line = (tmp_path / "solution_Zero_0.txt").read_text().splitlines()[0]
        assert first_line.startswith("# x")
        assert "Fr=|u|/sqrt(gh)" in first_line

    def test_topography_file(self, mesh, make_config, tmp_path):
        Simulation(make_config(), mesh, LakeAtRest(mesh), ZeroFlux()).run()
        topo = np.loadtxt(tmp_path / "topography.txt")
        assert topo.shape == (mesh.n_cells, 2)
        assert np.allclose(topo[:, 0], mesh.cell_centers)
        assert np.all(topo[:, 1] == 0.0)

    def test_snapshot_cadence(self, mesh, make_config, tmp_path):
        """32 steps with save_frequency = 10: snapshots after steps 10, 20, 30."""
        result = Simulation(make_config(), mesh, LakeAtRest(mesh), ZeroFlux()).run()
        assert result.n_steps == 32
        assert snapshot_files(tmp_path, "Zero") == [
            "solution_Zero_0.txt",
            "solution_Zero_1.txt",
            "solution_Zero_2.txt",
            "solution_Zero_3.txt",
        ]

    def test_save_final_time_only(self, mesh, make_config, tmp_path):
        """Only the initial and the final snapshot, indexed n // save_frequency."""
        config = make_config(save_final_time_only=True)
        physics = ExponentialDecay(mesh, rate=1.0)
        result = Simulation(config, mesh, physics, ZeroFlux()).run()

        assert snapshot_files(tmp_path, "Zero") == ["solution_Zero_0.txt", "solution_Zero_3.txt"]
        final = load_snapshot(tmp_path / "solution_Zero_3.txt")
        assert np.allclose(final[:, 2], result.state[:, 0])
        assert np.allclose(final[:, 4], result.state[:, 1])

    def test_probes(self, mesh, make_config, tmp_path):
        """Probe every save_frequency // 10 steps at the nearest cell."""
        config = make_config(
            save_frequency=20,
            probes=[
                ProbeConfig(reference=1, position=0.31),
                ProbeConfig(reference="gauge", position=0.01),
            ],
        )
        physics = ExponentialDecay(mesh, rate=1.0)
        sim = Simulation(config, mesh, physics, ZeroFlux())
        result = sim.run()

        assert [p.cell_index for p in sim.probes] == [6, 0]

        samples = load_probe(tmp_path / "probe_1.txt")
        assert samples.shape == (16, 6)
        assert np.allclose(samples[:, 0], 2.0 / 64.0 * np.arange(1, 17))
        assert np.allclose(samples[-1, 2], result.state[6, 0])
        assert np.allclose(samples[-1, 4], result.state[6, 1])
        assert np.allclose(samples[-1, 3], result.state[6, 1] / result.state[6, 0])

        gauge = load_probe(tmp_path / "probe_gauge.txt")
        assert np.allclose(gauge[-1, 2], result.state[0, 0])

    def test_probe_files_restart_each_run(self, mesh, make_config, tmp_path):
        config = make_config(save_frequency=10, probes=[ProbeConfig(reference=3, position=0.5)])
        sim = Simulation(config, mesh, LakeAtRest(mesh), ZeroFlux())
        sim.run()
        sim.initialize(config, mesh, LakeAtRest(mesh), ZeroFlux())
        sim.run()
        assert load_probe(tmp_path / "probe_3.txt").shape == (32, 6)


class TestSteadyState:

    @pytest.mark.parametrize("scheme", ["ExplicitEuler", "RK2"])
    def test_lake_at_rest(self, mesh, make_config, scheme):
        physics = LakeAtRest(mesh, depth=1.5)
        config = make_config(scheme=scheme, time_step=1e-3, final_time=0.05)
        result = Simulation(config, mesh, physics, RusanovFlux(config.gravity)).run()
        assert jnp.allclose(result.state, physics.initial_condition(), atol=1e-12)

    @pytest.mark.parametrize("stepper", [ForwardEuler(), RK2()])
    def test_zero_flux_zero_source(self, mesh, make_config, stepper):
        physics = ExponentialDecay(mesh, rate=0.0)
        result = Simulation(make_config(), mesh, physics, ZeroFlux(), stepper=stepper).run()
        assert jnp.allclose(result.state, physics.initial_condition())


class TestVerification:

    def test_errors_reported(self, mesh, make_config, tmp_path, caplog):
        caplog.set_level(logging.INFO, logger="jax_swe")
        physics = ExponentialDecay(mesh, rate=1.0)
        config = make_config(is_test_case=True, scheme="RK2")
        result = Simulation(config, mesh, physics, ZeroFlux()).run()

        exact = physics.exact_solution(result.final_time)
        assert result.l2_error == pytest.approx(compute_l2_error(result.state, exact, mesh.dx))
        assert result.l1_error[0] < 1e-4
        assert result.l2_error[0] < 1e-4

        saved = load_snapshot(tmp_path / "solution_exact.txt")
        assert np.allclose(saved[:, 2], exact[:, 0])
        assert "Error h L2" in caplog.text
        assert "Error h L1" in caplog.text

    def test_configured_dx_scales_errors(self, mesh, make_config):
        physics = ExponentialDecay(mesh, rate=1.0)
        default = Simulation(make_config(is_test_case=True), mesh, physics, ZeroFlux()).run()
        scaled = Simulation(
            make_config(is_test_case=True, dx=2 * mesh.dx), mesh, physics, ZeroFlux()
        ).run()
        assert scaled.l1_error[0] == pytest.approx(2 * default.l1_error[0])

    def test_no_errors_outside_verification(self, mesh, make_config):
        result = Simulation(make_config(), mesh, LakeAtRest(mesh), ZeroFlux()).run()
        assert result.l1_error is None
        assert result.l2_error is None

    @pytest.mark.parametrize("scheme, ratio", [("ExplicitEuler", 2.0), ("RK2", 4.0)])
    def test_order_of_accuracy(self, mesh, make_config, scheme, ratio):
        """Halving dt halves the error of Forward Euler and quarters that of RK2."""
        physics = ExponentialDecay(mesh, rate=1.0)
        errors = []
        for dt in (1.0 / 32.0, 1.0 / 64.0):
            config = make_config(is_test_case=True, scheme=scheme, time_step=dt, final_time=1.0)
            errors.append(Simulation(config, mesh, physics, ZeroFlux()).run().l2_error[0])
        assert errors[0] / errors[1] == pytest.approx(ratio, rel=0.1)


class TestLifecycle:

    def test_status_transitions(self, mesh, make_config):
        sim = Simulation()
        assert sim.status == SimulationStatus.UNINITIALIZED
        with pytest.raises(ConfigurationError):
            sim.run()

        sim.initialize(make_config(), mesh, LakeAtRest(mesh), ZeroFlux())
        assert sim.status == SimulationStatus.INITIALIZED
        sim.run()
        assert sim.status == SimulationStatus.FINISHED

        with pytest.raises(ConfigurationError):
            sim.run()

    def test_reinitialize_resets(self, mesh, make_config):
        physics = ExponentialDecay(mesh, rate=1.0)
        config = make_config(initial_time=0.25, final_time=0.5)
        sim = Simulation(config, mesh, physics, ZeroFlux())
        first = sim.run()

        sim.initialize(config, mesh, physics, ZeroFlux())
        assert sim.current_time == 0.25
        assert sim.n_steps == 0
        assert sim.probes == []
        assert jnp.array_equal(sim.state, physics.initial_condition())

        second = sim.run()
        assert jnp.array_equal(first.state, second.state)
        assert first.n_steps == second.n_steps == 16

    def test_clock_overshoots_horizon(self, mesh, make_config):
        """No clamping: the last step may go past final_time."""
        result = Simulation(
            make_config(time_step=0.3, final_time=1.0), mesh, LakeAtRest(mesh), ZeroFlux()
        ).run()
        assert result.n_steps == 4
        assert result.final_time == pytest.approx(1.2)

    def test_without_jit(self, mesh, make_config):
        physics = ConstantSource(mesh, source=(1.0, 2.0))
        config = make_config(time_step=0.1, final_time=0.1)
        result = Simulation(config, mesh, physics, ZeroFlux(), jit=False).run()
        assert jnp.allclose(result.state, jnp.array([1.1, 0.2]))


class TestErrors:

    def test_missing_collaborator(self, mesh, make_config):
        with pytest.raises(ConfigurationError, match="flux"):
            Simulation(make_config(), mesh, LakeAtRest(mesh), None)

    def test_empty_mesh(self, make_config):
        class EmptyMesh:
            n_cells = 0
            cell_centers = jnp.zeros(0)
            dx = 1.0

        with pytest.raises(ConfigurationError, match="0 cells"):
            Simulation(make_config(), EmptyMesh(), LakeAtRest(UniformMesh(0.0, 1.0, 1)), ZeroFlux())

    def test_degenerate_probe_cadence(self, mesh, make_config):
        config = make_config(probes=[ProbeConfig(reference=1, position=0.5)])
        # model_copy skips validation, as a programmatically built config could
        invalid = config.model_copy(update={'save_frequency': 5})
        with pytest.raises(ConfigurationError, match="save_frequency"):
            Simulation(invalid, mesh, LakeAtRest(mesh), ZeroFlux())

    def test_no_exact_solution(self, mesh, make_config):
        with pytest.raises(ConfigurationError, match="exact solution"):
            Simulation(make_config(is_test_case=True), mesh, DamBreak(mesh), RusanovFlux())

    def test_missing_results_dir(self, mesh, make_config, tmp_path):
        config = make_config(results_dir=tmp_path / "missing")
        with pytest.raises(OutputError, match="does not exist"):
            Simulation(config, mesh, LakeAtRest(mesh), ZeroFlux())

    def test_probe_outside_mesh(self, mesh, make_config):
        config = make_config(probes=[ProbeConfig(reference=7, position=1.5)])
        with pytest.raises(OutputError, match="Probe 7"):
            Simulation(config, mesh, LakeAtRest(mesh), ZeroFlux())

    def test_flux_shape_mismatch(self, mesh, make_config):
        sim = Simulation(make_config(), mesh, ConstantSource(mesh), TruncatedFlux())
        with pytest.raises(ContractViolationError):
            sim.run()

    def test_initial_condition_shape_mismatch(self, make_config):
        coarse = UniformMesh(0.0, 1.0, 10)
        fine = UniformMesh(0.0, 1.0, 20)
        with pytest.raises(ContractViolationError, match="initial condition"):
            Simulation(make_config(), coarse, LakeAtRest(fine), ZeroFlux())

    def test_depth_becomes_non_positive(self, mesh, make_config):
        """h: 1.0 -> 0.5 -> 0.0, the run stops at the second step."""
        physics = ConstantSource(mesh, source=(-10.0, 0.0))
        sim = Simulation(make_config(time_step=0.05, final_time=1.0), mesh, physics, ZeroFlux())
        with pytest.raises(NonPhysicalStateError, match="Step 2") as excinfo:
            sim.run()
        assert excinfo.value.cell == 0
        assert excinfo.value.time == pytest.approx(0.1)

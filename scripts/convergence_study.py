"""
Temporal convergence study for the explicit time schemes.

Runs the manufactured exponential-decay case with a zero flux at a sequence
of halved time steps, in verification mode, and reports the L2 error on h
and the observed order of accuracy for each scheme.
"""

import argparse
import tempfile

import jax

from jax_swe import SimulationConfig, Simulation
from jax_swe.integrate import estimate_convergence_order
from jax_swe.solvers import UniformMesh, ZeroFlux, ExponentialDecay


def run_case(scheme: str, dt: float, final_time: float, mesh: UniformMesh, rate: float) -> float:
    """Return the L2 error on h at the end of one verification run."""
    with tempfile.TemporaryDirectory() as results_dir:
        config = SimulationConfig(
            time_step=dt,
            final_time=final_time,
            save_frequency=10**9,
            is_test_case=True,
            scheme=scheme,
            flux="Zero",
            results_dir=results_dir,
        )
        physics = ExponentialDecay(mesh, rate=rate)
        result = Simulation(config, mesh, physics, ZeroFlux()).run()
    return result.l2_error[0]


def main():
    parser = argparse.ArgumentParser("Temporal convergence study")
    parser.add_argument("--n-cells", type=int, default=64, help="Number of cells")
    parser.add_argument("--dt", type=float, default=1.0 / 16.0, help="Coarsest time step")
    parser.add_argument("--levels", type=int, default=4, help="Number of halvings")
    parser.add_argument("--final-time", type=float, default=1.0, help="Time horizon")
    parser.add_argument("--rate", type=float, default=1.0, help="Decay rate")
    args = parser.parse_args()

    jax.config.update("jax_enable_x64", True)
    mesh = UniformMesh(0.0, 1.0, args.n_cells)
    steps = [args.dt / 2**k for k in range(args.levels)]

    print("=" * 60)
    print("Temporal convergence study")
    print("=" * 60)
    print(f"Cells: {args.n_cells}, dx = {mesh.dx}")
    print(f"Time steps: {steps}")
    print()

    for scheme in ("ExplicitEuler", "RK2"):
        errors = [run_case(scheme, dt, args.final_time, mesh, args.rate) for dt in steps]
        print(f"{scheme}:")
        for dt, err in zip(steps, errors):
            print(f"  dt = {dt:.3e}: L2 error on h = {err:.3e}")
        print(f"  observed order: {estimate_convergence_order(steps, errors):.2f}")
        print()


if __name__ == "__main__":
    main()

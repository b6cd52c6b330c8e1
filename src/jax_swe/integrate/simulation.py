"""
Simulation driver for the 1D Saint-Venant equations.

The driver owns the solution state and the clock, advances them with a
stepper, writes snapshots and probe samples on the configured cadence and,
in verification mode, compares the final state with the exact solution.

Example usage:
```python
from jax_swe import Simulation, SimulationConfig
from jax_swe.solvers import UniformMesh, RusanovFlux, LakeAtRest

config = SimulationConfig(time_step=1e-3, final_time=0.1, save_frequency=10)
mesh = UniformMesh(0.0, 1.0, 100)
sim = Simulation(config, mesh, LakeAtRest(mesh), RusanovFlux(config.gravity))
result = sim.run()
```
"""

import logging
import os
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Optional, Tuple

import jax
import jax.numpy as jnp
import numpy as np
from jax import Array

from ..config import PROBES_PER_SAVE, SimulationConfig
from ..data_utils import readwrite
from ..exceptions import (
    ConfigurationError,
    ContractViolationError,
    NonPhysicalStateError,
    OutputError,
)
from .custom_types import State
from .norms import compute_l1_error, compute_l2_error
from .probes import Probe, resolve_probes
from .protocols import FluxAssemblerProtocol, MeshProtocol, PhysicsProtocol
from .solve import make_rhs
from .timesteppers import StepperProtocol, get_stepper

logger = logging.getLogger(__name__)


class SimulationStatus(IntEnum):
    """Lifecycle of a `Simulation`."""
    UNINITIALIZED = 0
    INITIALIZED = 1
    RUNNING = 2
    FINISHED = 3


@dataclass(frozen=True)
class SimulationResult:
    """
    Outcome of a completed run.

    Attributes:
        final_time: Time reached, possibly past final_time by less than a step.
        n_steps: Number of steps taken.
        state: Final solution table [h, q].
        l1_error: (h, q) L1 errors, verification mode only.
        l2_error: (h, q) L2 errors, verification mode only.
    """
    final_time: float
    n_steps: int
    state: State
    l1_error: Optional[Tuple[float, float]] = None
    l2_error: Optional[Tuple[float, float]] = None


class Simulation:
    """
    Time loop for the semi-discrete system dy/dt = F(t, y)/dx + S(y).

    Args:
        config: Run configuration.
        mesh: Mesh providing cell centres and spacing.
        physics: Initial condition, topography, source term, exact solution.
        flux: Flux assembler.
        stepper: Time-stepping scheme. Defaults to the scheme named in
            `config.scheme`.
        jit: Compile the step with `jax.jit`. Disable for collaborators
            that cannot be traced.

    If any collaborator is given, `initialize` is called immediately.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        mesh: Optional[MeshProtocol] = None,
        physics: Optional[PhysicsProtocol] = None,
        flux: Optional[FluxAssemblerProtocol] = None,
        *,
        stepper: Optional[StepperProtocol] = None,
        jit: bool = True,
    ):
        self.status = SimulationStatus.UNINITIALIZED
        self.jit = jit
        self._stepper_override = stepper

        self.config = None
        self.mesh = None
        self.physics = None
        self.flux = None
        self.stepper = None
        self.state: Optional[State] = None
        self.cell_centers = None
        self.topography = None
        self.error_dx = None
        self.current_time = 0.0
        self.n_steps = 0
        self.probes: list[Probe] = []

        if any(c is not None for c in (config, mesh, physics, flux)):
            self.initialize(config, mesh, physics, flux)

    def initialize(
        self,
        config: SimulationConfig,
        mesh: MeshProtocol,
        physics: PhysicsProtocol,
        flux: FluxAssemblerProtocol,
    ):
        """
        Bind collaborators and reset the clock, the state and the probes.

        Calling it again discards everything from the previous run.

        Raises:
            ConfigurationError: Missing collaborator, empty mesh, probes with
                a save frequency below 10, verification requested for a
                physics without exact solution, or unknown scheme.
            ContractViolationError: Initial condition or topography of the
                wrong shape.
            OutputError: Unusable results directory or probe outside the mesh.
        """
        missing = [
            name for name, obj in
            (("config", config), ("mesh", mesh), ("physics", physics), ("flux", flux))
            if obj is None
        ]
        if missing:
            raise ConfigurationError(f"Missing collaborators: {', '.join(missing)}")

        n_cells = int(mesh.n_cells)
        if n_cells <= 0:
            raise ConfigurationError(f"Mesh has {n_cells} cells")
        if config.probes and config.save_frequency < PROBES_PER_SAVE:
            raise ConfigurationError(
                f"save_frequency = {config.save_frequency} gives a zero probe "
                f"cadence, it must be at least {PROBES_PER_SAVE} when probes are set"
            )
        if config.is_test_case and not physics.has_exact_solution:
            raise ConfigurationError(
                f"{type(physics).__name__} has no exact solution, "
                "cannot run in verification mode"
            )
        stepper = self._stepper_override or get_stepper(config.scheme)

        cell_centers = jnp.asarray(mesh.cell_centers)
        if cell_centers.shape != (n_cells,):
            raise ContractViolationError(
                f"cell centres have shape {cell_centers.shape}, expected ({n_cells},)"
            )
        initial = jnp.asarray(physics.initial_condition())
        if initial.shape != (n_cells, 2):
            raise ContractViolationError(
                f"initial condition has shape {initial.shape}, expected ({n_cells}, 2)"
            )
        topography = jnp.asarray(physics.topography())
        if topography.shape != (n_cells,):
            raise ContractViolationError(
                f"topography has shape {topography.shape}, expected ({n_cells},)"
            )

        self._check_results_dir(Path(config.results_dir))
        self._check_probe_positions(config, cell_centers, float(mesh.dx))

        self.config = config
        self.mesh = mesh
        self.physics = physics
        self.flux = flux
        self.stepper = stepper
        self.cell_centers = cell_centers
        self.topography = topography
        self.state = initial
        self.current_time = config.initial_time
        self.n_steps = 0
        self.probes = []
        self.error_dx = config.dx if config.dx is not None else float(mesh.dx)

        rhs = make_rhs(flux, physics, float(mesh.dx))
        dt = config.time_step

        def advance(t, y):
            return stepper.step(rhs, t, y, dt)

        self._advance = jax.jit(advance) if self.jit else advance
        self.status = SimulationStatus.INITIALIZED

    def run(self) -> SimulationResult:
        """
        Run the time loop up to the configured horizon.

        Raises:
            ConfigurationError: If the simulation is not freshly initialized.
            NonPhysicalStateError: If a step produces a non-positive depth or
                a non-finite value.
            ContractViolationError: If a collaborator returns a table of the
                wrong shape.
            OutputError: If an output file cannot be written.
        """
        if self.status != SimulationStatus.INITIALIZED:
            raise ConfigurationError(
                f"run() needs an initialized simulation, status is {self.status.name}"
            )
        config = self.config
        results_dir = Path(config.results_dir)
        self.status = SimulationStatus.RUNNING
        logger.info(
            "Time loop (%s, flux %s): t = %g -> %g, dt = %g",
            type(self.stepper).__name__, self.flux.name,
            config.initial_time, config.final_time, config.time_step,
        )

        self._save_solution(results_dir / self._snapshot_name(0))
        readwrite.save_topography(
            results_dir / "topography.txt", self.cell_centers, self.topography
        )

        self.probes = resolve_probes(
            [p.reference for p in config.probes],
            [p.position for p in config.probes],
            self.cell_centers,
        )
        for probe in self.probes:
            try:
                self._probe_path(probe).unlink(missing_ok=True)
            except OSError as exc:
                raise OutputError(f"Cannot reset probe file: {exc}") from exc

        n = 0
        while self.current_time < config.final_time:
            self.state = self._advance(self.current_time, self.state)
            n += 1
            self.current_time += config.time_step
            self.n_steps = n
            self._check_state()
            if not config.save_final_time_only and n % config.save_frequency == 0:
                self._save_solution(
                    results_dir / self._snapshot_name(n // config.save_frequency)
                )
            if self.probes and n % config.probe_frequency == 0:
                self._save_probes()

        if config.save_final_time_only:
            path = results_dir / self._snapshot_name(n // config.save_frequency)
            logger.info("Saving final solution at t = %g to %s", self.current_time, path)
            self._save_solution(path)

        l1_error = l2_error = None
        if config.is_test_case:
            l1_error, l2_error = self._verify(results_dir)

        self.status = SimulationStatus.FINISHED
        logger.info(
            "Solved 1D Saint-Venant equations: %d steps, t = %g", n, self.current_time
        )
        return SimulationResult(
            final_time=self.current_time,
            n_steps=n,
            state=self.state,
            l1_error=l1_error,
            l2_error=l2_error,
        )

    def _verify(self, results_dir: Path):
        exact = jnp.asarray(self.physics.exact_solution(self.current_time))
        if exact.shape != self.state.shape:
            raise ContractViolationError(
                f"exact solution has shape {exact.shape}, expected {self.state.shape}"
            )
        readwrite.save_snapshot(
            results_dir / "solution_exact.txt", self.cell_centers, exact,
            self.topography, self.config.gravity, self.current_time,
        )
        l2_error = compute_l2_error(self.state, exact, self.error_dx)
        logger.info(
            "Error h L2 = %g and error q L2 = %g for dx = %g", *l2_error, self.error_dx
        )
        l1_error = compute_l1_error(self.state, exact, self.error_dx)
        logger.info(
            "Error h L1 = %g and error q L1 = %g for dx = %g", *l1_error, self.error_dx
        )
        return l1_error, l2_error

    def _check_state(self):
        cell = readwrite.first_invalid_cell(self.state)
        if cell is not None:
            h, q = (float(v) for v in self.state[cell])
            raise NonPhysicalStateError(
                f"Step {self.n_steps}, t = {self.current_time}: cell {cell} "
                f"has h = {h}, q = {q}",
                cell=cell,
                time=self.current_time,
            )

    def _snapshot_name(self, index: int) -> str:
        return f"solution_{self.flux.name}_{index}.txt"

    def _probe_path(self, probe: Probe) -> Path:
        return Path(self.config.results_dir) / f"probe_{probe.reference}.txt"

    def _save_solution(self, path: Path):
        logger.debug("Saving solution at t = %g to %s", self.current_time, path)
        readwrite.save_snapshot(
            path, self.cell_centers, self.state, self.topography,
            self.config.gravity, self.current_time,
        )

    def _save_probes(self):
        for probe in self.probes:
            i = probe.cell_index
            row = readwrite.derived_quantities(
                self.state[i:i + 1], self.topography[i:i + 1],
                self.config.gravity, self.current_time,
            )[0]
            readwrite.append_probe_sample(self._probe_path(probe), self.current_time, row)

    @staticmethod
    def _check_results_dir(path: Path):
        if not path.is_dir():
            raise OutputError(f"Results directory {path} does not exist")
        if not os.access(path, os.W_OK):
            raise OutputError(f"Results directory {path} is not writable")

    @staticmethod
    def _check_probe_positions(config: SimulationConfig, cell_centers: Array, dx: float):
        centers = np.asarray(cell_centers)
        lower = centers[0] - 0.5 * dx
        upper = centers[-1] + 0.5 * dx
        for probe in config.probes:
            if not lower <= probe.position <= upper:
                raise OutputError(
                    f"Probe {probe.reference} at x = {probe.position} lies outside "
                    f"the mesh [{lower}, {upper}]"
                )

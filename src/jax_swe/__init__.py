"""
JAX Saint-Venant time integration

Explicit time integration of the 1D shallow-water (Saint-Venant) equations
on a fixed finite-volume mesh, with snapshot and probe output and error
norms for order-of-accuracy verification.

Main components:
- integrate: Time-stepping schemes and the simulation driver
- solvers: Reference mesh, fluxes and test cases
- data_utils: Snapshot and probe file I/O
"""

from .config import SimulationConfig, ProbeConfig, MeshConfig, CaseConfig
from .exceptions import (
    SimulationError,
    ConfigurationError,
    ContractViolationError,
    NonPhysicalStateError,
    OutputError,
)

# Time integration
from .integrate import (
    Simulation,
    SimulationResult,
    SimulationStatus,
    solve_ivp,
    ForwardEuler,
    RK2,
    compute_l1_error,
    compute_l2_error,
)

__all__ = [
    # Configuration
    "SimulationConfig",
    "ProbeConfig",
    "MeshConfig",
    "CaseConfig",

    # Errors
    "SimulationError",
    "ConfigurationError",
    "ContractViolationError",
    "NonPhysicalStateError",
    "OutputError",

    # Time integration
    "Simulation",
    "SimulationResult",
    "SimulationStatus",
    "solve_ivp",
    "ForwardEuler",
    "RK2",
    "compute_l1_error",
    "compute_l2_error",
]

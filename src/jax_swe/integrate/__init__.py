"""
Time integration of the semi-discrete Saint-Venant system written in JAX.
"""

# Solver interfaces
from .solve import make_rhs, solve_ivp
from .simulation import Simulation, SimulationResult, SimulationStatus

# Time-stepping schemes
from .timesteppers import ForwardEuler, RK2, StepperProtocol, get_stepper

# Collaborator protocols
from .protocols import MeshProtocol, PhysicsProtocol, FluxAssemblerProtocol

# Instrumentation
from .probes import Probe, resolve_cell_index, resolve_probes
from .norms import compute_l1_error, compute_l2_error, estimate_convergence_order

__all__ = [
    # Solver interfaces
    'make_rhs',
    'solve_ivp',
    'Simulation',
    'SimulationResult',
    'SimulationStatus',

    # Time-stepping methods
    'StepperProtocol',
    'ForwardEuler',
    'RK2',
    'get_stepper',

    # Collaborator protocols
    'MeshProtocol',
    'PhysicsProtocol',
    'FluxAssemblerProtocol',

    # Probes
    'Probe',
    'resolve_cell_index',
    'resolve_probes',

    # Error norms
    'compute_l1_error',
    'compute_l2_error',
    'estimate_convergence_order',
]

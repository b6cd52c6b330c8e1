"""
Built-in collaborators

Flux assemblers and reference test cases for the Saint-Venant equations.

All fluxes follow the FluxAssemblerProtocol:
- evaluate(t, state) -> net flux entering each cell
All cases follow the PhysicsProtocol:
- initial_condition(), topography(), source_term(state), exact_solution(t)
"""

from .fluxes import ZeroFlux, RusanovFlux
from .cases import FlatBottomCase, LakeAtRest, DamBreak, ExponentialDecay

__all__ = [
    "ZeroFlux",
    "RusanovFlux",
    "FlatBottomCase",
    "LakeAtRest",
    "DamBreak",
    "ExponentialDecay",
]

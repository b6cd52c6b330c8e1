"""
Reference mesh, fluxes and test cases

Collaborators consumed by the time integration core. They are enough to run
the CLI and the test suite; any object following the protocols in
`jax_swe.integrate.protocols` can replace them.
"""

from .grid import create_uniform_grid, UniformMesh
from .equations import (
    ZeroFlux, RusanovFlux,
    FlatBottomCase, LakeAtRest, DamBreak, ExponentialDecay
)

__all__ = [
    # Grid utilities
    "create_uniform_grid",
    "UniformMesh",

    # Fluxes
    "ZeroFlux",
    "RusanovFlux",

    # Test cases
    "FlatBottomCase",
    "LakeAtRest",
    "DamBreak",
    "ExponentialDecay",
]

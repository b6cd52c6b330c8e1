"""
Reference test cases on a flat or absent bottom.

Each case implements PhysicsProtocol for a given mesh.
"""

import jax.numpy as jnp
from jax import Array

from ...integrate.protocols import MeshProtocol


class FlatBottomCase:
    """Zero topography and zero source term."""

    has_exact_solution = False

    def __init__(self, mesh: MeshProtocol):
        self.mesh = mesh

    def topography(self) -> Array:
        return jnp.zeros(self.mesh.n_cells)

    def source_term(self, state: Array) -> Array:
        return jnp.zeros_like(state)

    def exact_solution(self, t: float) -> Array:
        raise NotImplementedError(
            f"{type(self).__name__} has no closed-form solution"
        )


class LakeAtRest(FlatBottomCase):
    """Still water of uniform depth. Any consistent scheme keeps it steady."""

    has_exact_solution = True

    def __init__(self, mesh: MeshProtocol, depth: float = 1.0):
        super().__init__(mesh)
        self.depth = depth

    def initial_condition(self) -> Array:
        n = self.mesh.n_cells
        return jnp.stack([jnp.full(n, self.depth), jnp.zeros(n)], axis=1)

    def exact_solution(self, t: float) -> Array:
        return self.initial_condition()


class DamBreak(FlatBottomCase):
    """
    Riemann problem: water at rest with depth h_left upstream of x_dam and
    h_right downstream.
    """

    def __init__(
        self,
        mesh: MeshProtocol,
        h_left: float = 2.0,
        h_right: float = 1.0,
        x_dam: float | None = None
    ):
        super().__init__(mesh)
        self.h_left = h_left
        self.h_right = h_right
        if x_dam is None:
            centers = mesh.cell_centers
            x_dam = 0.5 * float(centers[0] + centers[-1])
        self.x_dam = x_dam

    def initial_condition(self) -> Array:
        x = self.mesh.cell_centers
        h = jnp.where(x < self.x_dam, self.h_left, self.h_right)
        return jnp.stack([h, jnp.zeros_like(h)], axis=1)


class ExponentialDecay(FlatBottomCase):
    """
    Manufactured problem dy/dt = -rate * y with a smooth initial profile.

    Exact solution: y(t) = y(t0) exp(-rate (t - t0)). Used with a zero flux
    to measure the temporal order of accuracy of a scheme.
    """

    has_exact_solution = True

    def __init__(self, mesh: MeshProtocol, rate: float = 1.0, initial_time: float = 0.0):
        super().__init__(mesh)
        self.rate = rate
        self.initial_time = initial_time

    def initial_condition(self) -> Array:
        x = self.mesh.cell_centers
        phase = 2.0 * jnp.pi * (x - x[0]) / (x[-1] - x[0] + self.mesh.dx)
        h = 1.0 + 0.5 * jnp.sin(phase)
        q = 0.25 * jnp.cos(phase)
        return jnp.stack([h, q], axis=1)

    def source_term(self, state: Array) -> Array:
        return -self.rate * state

    def exact_solution(self, t: float) -> Array:
        return self.initial_condition() * jnp.exp(-self.rate * (t - self.initial_time))

"""Shared fixtures and stub collaborators."""

import jax

jax.config.update("jax_enable_x64", True)

import jax.numpy as jnp
import pytest

from jax_swe import SimulationConfig
from jax_swe.solvers import UniformMesh


class ConstantSource:
    """Uniform state driven by a constant source term."""

    has_exact_solution = False

    def __init__(self, mesh, source=(1.0, 2.0), h0=1.0, q0=0.0):
        self.mesh = mesh
        self.source = source
        self.h0 = h0
        self.q0 = q0

    def initial_condition(self):
        n = self.mesh.n_cells
        return jnp.stack([jnp.full(n, self.h0), jnp.full(n, self.q0)], axis=1)

    def topography(self):
        return jnp.zeros(self.mesh.n_cells)

    def source_term(self, state):
        return jnp.broadcast_to(jnp.asarray(self.source, dtype=state.dtype), state.shape)

    def exact_solution(self, t):
        raise NotImplementedError


class TruncatedFlux:
    """Flux assembler that drops the last row, violating the shape contract."""

    name = "Truncated"

    def evaluate(self, t, state):
        return jnp.zeros_like(state)[:-1]


@pytest.fixture
def mesh():
    """20 cells of width 0.05 on [0, 1]."""
    return UniformMesh(0.0, 1.0, 20)


@pytest.fixture
def make_config(tmp_path):
    """
    Factory for configurations writing to a temporary directory.

    Default: dt = 1/64 up to t = 0.5 (exactly 32 steps), snapshots every 10 steps.
    """
    def factory(**overrides):
        params = {
            'time_step': 1.0 / 64.0,
            'final_time': 0.5,
            'save_frequency': 10,
            'results_dir': tmp_path,
        }
        params.update(overrides)
        return SimulationConfig(**params)

    return factory

"""
Finite-volume flux assemblers for the Saint-Venant equations.

Each assembler returns the net numerical flux entering every cell,
$$ -(F_{i+1/2} - F_{i-1/2}), $$
which the time integrator divides by the cell width.
"""

import jax.numpy as jnp
from jax import Array


class ZeroFlux:
    """Identically zero flux, leaving only the source term."""

    name = "Zero"

    def evaluate(self, t: Array, state: Array) -> Array:
        return jnp.zeros_like(state)


class RusanovFlux:
    """
    Rusanov (local Lax-Friedrichs) flux with transmissive boundaries.

    Interface flux:
    $$ F_{i+1/2} = \\frac{1}{2}(F(U_i) + F(U_{i+1}))
       - \\frac{a_{i+1/2}}{2}(U_{i+1} - U_i), $$
    with $a_{i+1/2} = \\max(|u| + \\sqrt{g h})$ over the two neighbours.
    One ghost cell on each side copies the adjacent boundary cell.

    Implements: FluxAssemblerProtocol
    """

    name = "Rusanov"

    def __init__(self, gravity: float = 9.81):
        self.gravity = gravity

    def physical_flux(self, state: Array) -> Array:
        """Saint-Venant flux (q, q^2/h + g h^2 / 2) for every row of `state`."""
        h = state[:, 0]
        q = state[:, 1]
        return jnp.stack([q, q**2 / h + 0.5 * self.gravity * h**2], axis=1)

    def evaluate(self, t: Array, state: Array) -> Array:
        extended = jnp.concatenate([state[:1], state, state[-1:]], axis=0)
        flux = self.physical_flux(extended)

        # Local wave speed bound
        h = extended[:, 0]
        speed = jnp.abs(extended[:, 1] / h) + jnp.sqrt(self.gravity * h)
        a = jnp.maximum(speed[:-1], speed[1:])[:, None]

        interface = (
            0.5 * (flux[:-1] + flux[1:])
            - 0.5 * a * (extended[1:] - extended[:-1])
        )
        return -(interface[1:] - interface[:-1])

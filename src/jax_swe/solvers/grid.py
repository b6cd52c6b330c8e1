from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array


def create_uniform_grid(x_min: float, x_max: float, n_cells: int, return_spacing=False):
    """
    Create a uniform cell-centred grid on [x_min, x_max].

    Args:
        x_min: Left end of the domain
        x_max: Right end of the domain
        n_cells: Number of cells

    Returns:
        x: Cell centres
        dx: Cell width (only if return_spacing is True)
    """
    if n_cells <= 0:
        raise ValueError(f"Number of cells must be positive, got {n_cells}")
    if x_max <= x_min:
        raise ValueError(f"Empty domain [{x_min}, {x_max}]")

    dx = (x_max - x_min) / n_cells
    x = x_min + dx * (jnp.arange(n_cells) + 0.5)

    if return_spacing:
        return x, dx
    else:
        return x


@dataclass(frozen=True)
class UniformMesh:
    """
    Fixed 1D mesh of `n_cells` cells of equal width.

    Implements: MeshProtocol
    """

    x_min: float
    x_max: float
    n_cells: int

    def __post_init__(self):
        # Validate eagerly so a bad mesh fails where it is built
        create_uniform_grid(self.x_min, self.x_max, self.n_cells)

    @property
    def dx(self) -> float:
        return (self.x_max - self.x_min) / self.n_cells

    @property
    def cell_centers(self) -> Array:
        return create_uniform_grid(self.x_min, self.x_max, self.n_cells)

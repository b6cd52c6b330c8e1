"""Protocols for the collaborators consumed by the time integration core."""

from typing import Protocol, runtime_checkable

from jax import Array


@runtime_checkable
class MeshProtocol(Protocol):
    """
    Fixed 1D mesh with uniform spacing.

    Attributes:
        n_cells: Number of cells.
        cell_centers: Cell-centre coordinates, shape (n_cells,).
        dx: Uniform cell width.
    """

    @property
    def n_cells(self) -> int: ...

    @property
    def cell_centers(self) -> Array: ...

    @property
    def dx(self) -> float: ...


@runtime_checkable
class PhysicsProtocol(Protocol):
    """
    Physics of the Saint-Venant system on a given mesh.

    All tables have one row per cell and the columns [h, q].
    """

    has_exact_solution: bool

    def initial_condition(self) -> Array:
        """Initial state, shape (n_cells, 2)."""
        ...

    def topography(self) -> Array:
        """Bottom elevation z per cell, shape (n_cells,)."""
        ...

    def source_term(self, state: Array) -> Array:
        """Source term evaluated at `state`, shape (n_cells, 2)."""
        ...

    def exact_solution(self, t: float) -> Array:
        """Exact solution at time `t`, shape (n_cells, 2)."""
        ...


@runtime_checkable
class FluxAssemblerProtocol(Protocol):
    """
    Finite-volume flux assembler.

    `evaluate` returns the net numerical flux entering each cell. The
    caller divides it by the cell width.
    """

    name: str

    def evaluate(self, t: float, state: Array) -> Array:
        """Net flux at time `t` for `state`, shape (n_cells, 2)."""
        ...

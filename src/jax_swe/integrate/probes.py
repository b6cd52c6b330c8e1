"""Resolution of probe positions to mesh cells."""

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from jax import Array


@dataclass(frozen=True)
class Probe:
    """
    A fixed sampling point, resolved once to its nearest cell.

    Attributes:
        reference: Identifier used to name the probe's output file.
        position: Target coordinate.
        cell_index: Index of the cell whose centre is closest to `position`.
    """

    reference: int | str
    position: float
    cell_index: int


def resolve_cell_index(position: float, cell_centers: Array) -> int:
    """
    Index of the cell centre closest to `position`.

    Ties go to the lowest index: a candidate replaces the current best only
    if it is strictly closer.
    """
    centers = np.asarray(cell_centers)
    index = 0
    dist_min = abs(position - centers[0])
    for k in range(1, centers.shape[0]):
        dist = abs(position - centers[k])
        if dist < dist_min:
            dist_min = dist
            index = k
    return index


def resolve_probes(
    references: Sequence[int | str],
    positions: Sequence[float],
    cell_centers: Array
) -> list[Probe]:
    """Resolve every (reference, position) pair to a `Probe`."""
    return [
        Probe(reference, float(position), resolve_cell_index(position, cell_centers))
        for reference, position in zip(references, positions, strict=True)
    ]

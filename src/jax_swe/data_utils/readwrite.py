"""
Readers and writers for snapshot, topography and probe files.

Snapshot layout, one row per cell:

    x  H=h+z  h  u=q/h  q  Fr=|u|/sqrt(g h)
"""

import os
from typing import Optional, Union

import numpy as np
import jax.numpy as jnp
from jax import Array

from ..exceptions import NonPhysicalStateError, OutputError

SNAPSHOT_HEADER = "x  H=h+z   h       u       q       Fr=|u|/sqrt(gh)"

PathLike = Union[str, os.PathLike]


def first_invalid_cell(state: Array) -> Optional[int]:
    """
    Index of the first cell with a non-positive depth or a non-finite value.

    Returns:
        The cell index, or None if every cell is valid.
    """
    state = jnp.atleast_2d(jnp.asarray(state))
    bad = ~(jnp.isfinite(state).all(axis=1) & (state[:, 0] > 0.0))
    if not bool(bad.any()):
        return None
    return int(jnp.argmax(bad))


def derived_quantities(
    state: Array,
    topography: Array,
    gravity: float,
    t: float
) -> np.ndarray:
    """
    Compute the quantities written to snapshots and probe files.

    Args:
        state: Solution table [h, q], shape (n, 2).
        topography: Bottom elevation, shape (n,).
        gravity: Gravitational acceleration.
        t: Simulated time, used in diagnostics only.

    Returns:
        Array of shape (n, 5) with columns H = h + z, h, u = q/h, q and
        Fr = |u| / sqrt(g h).

    Raises:
        NonPhysicalStateError: If any depth is non-positive or any value is
            not finite.
    """
    state = jnp.atleast_2d(jnp.asarray(state))
    h = state[:, 0]
    q = state[:, 1]

    cell = first_invalid_cell(state)
    if cell is not None:
        raise NonPhysicalStateError(
            f"Cannot derive velocity at t = {t}: cell {cell} has "
            f"h = {float(h[cell])}, q = {float(q[cell])}",
            cell=cell,
            time=t,
        )

    u = q / h
    froude = jnp.abs(u) / jnp.sqrt(gravity * h)
    return np.asarray(jnp.stack([h + topography, h, u, q, froude], axis=1))


def save_snapshot(
    path: PathLike,
    x: Array,
    state: Array,
    topography: Array,
    gravity: float,
    t: float
):
    """
    Write a full-field snapshot as whitespace-separated text.

    Args:
        path: Output file, overwritten if it exists.
        x: Cell centres.
        state: Solution table [h, q].
        topography: Bottom elevation per cell.
        gravity: Gravitational acceleration.
        t: Simulated time of the snapshot.
    """
    table = derived_quantities(state, topography, gravity, t)
    columns = np.column_stack([np.asarray(x), table])
    try:
        np.savetxt(path, columns, header=SNAPSHOT_HEADER)
    except OSError as exc:
        raise OutputError(f"Cannot write snapshot {path}: {exc}") from exc


def save_topography(path: PathLike, x: Array, topography: Array):
    """Write cell centres and bottom elevation as two columns."""
    columns = np.column_stack([np.asarray(x), np.asarray(topography)])
    try:
        np.savetxt(path, columns)
    except OSError as exc:
        raise OutputError(f"Cannot write topography {path}: {exc}") from exc


def append_probe_sample(path: PathLike, t: float, row: np.ndarray):
    """
    Append one comma-separated sample `t,H,h,u,q,Fr` to a probe file.

    Args:
        path: Probe file, created if missing.
        t: Simulated time of the sample.
        row: The five derived quantities at the probe's cell.
    """
    sample = np.concatenate([[t], np.asarray(row)])[None, :]
    try:
        with open(path, 'a') as f:
            np.savetxt(f, sample, delimiter=',')
    except OSError as exc:
        raise OutputError(f"Cannot append to probe file {path}: {exc}") from exc


def load_snapshot(path: PathLike) -> np.ndarray:
    """
    Load a snapshot file.

    Returns:
        Array of shape (n, 6) with columns x, H, h, u, q, Fr.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Snapshot file not found: {path}")
    return np.loadtxt(path, ndmin=2)


def load_probe(path: PathLike) -> np.ndarray:
    """
    Load every sample of a probe file.

    Returns:
        Array of shape (n_samples, 6) with columns t, H, h, u, q, Fr.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Probe file not found: {path}")
    return np.loadtxt(path, delimiter=',', ndmin=2)

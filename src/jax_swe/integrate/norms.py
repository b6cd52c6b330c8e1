"""
Discrete error norms used to verify the order of accuracy of a scheme.

Both norms assume a uniform mesh spacing `dx` and are computed per channel,
returning a pair (error on h, error on q).
"""

from typing import Sequence, Tuple

import jax.numpy as jnp
import numpy as np
from jax import Array

from ..exceptions import ContractViolationError


def _difference(state: Array, exact: Array) -> Array:
    if state.shape != exact.shape:
        raise ContractViolationError(
            f"exact solution has shape {exact.shape}, expected {state.shape}"
        )
    return jnp.asarray(state) - jnp.asarray(exact)


def compute_l2_error(state: Array, exact: Array, dx: float) -> Tuple[float, float]:
    """
    Euclidean norm of the error in each channel, scaled by dx.

    $$ e_c = \\Delta x \\, \\| y_{:,c} - y^{exact}_{:,c} \\|_2 $$
    """
    err = dx * jnp.linalg.norm(_difference(state, exact), axis=0)
    return float(err[0]), float(err[1])


def compute_l1_error(state: Array, exact: Array, dx: float) -> Tuple[float, float]:
    """
    Sum of absolute errors in each channel, scaled by dx.

    $$ e_c = \\Delta x \\sum_i | y_{i,c} - y^{exact}_{i,c} | $$
    """
    err = dx * jnp.sum(jnp.abs(_difference(state, exact)), axis=0)
    return float(err[0]), float(err[1])


def estimate_convergence_order(
    steps: Sequence[float],
    errors: Sequence[float],
) -> float:
    """Estimate convergence order from (step size, error) pairs via log-log fit.

    Args:
        steps: Time or space step sizes.
        errors: Corresponding errors.

    Returns:
        Estimated order p in error ~ step**p, or 0.0 when fewer than two
        finite, positive pairs are available.
    """
    log_h: list[float] = []
    log_e: list[float] = []
    for h, err in zip(steps, errors, strict=True):
        if np.isfinite(err) and err > 0 and h > 0:
            log_h.append(np.log(float(h)))
            log_e.append(np.log(float(err)))

    if len(log_h) < 2:
        return 0.0

    A = np.vstack([np.array(log_h), np.ones(len(log_h))]).T
    slope = np.linalg.lstsq(A, np.array(log_e), rcond=None)[0][0]

    return float(slope)

from typing import Callable, Tuple

import jax
import jax.numpy as jnp
from jax import Array

from ..exceptions import ContractViolationError
from .custom_types import RightHandSide, State
from .protocols import FluxAssemblerProtocol, PhysicsProtocol
from .timesteppers import StepperProtocol


def make_rhs(
    flux: FluxAssemblerProtocol,
    physics: PhysicsProtocol,
    dx: float
) -> RightHandSide:
    """
    Build the semi-discrete right-hand side of the Saint-Venant system.

    The returned function computes
    $$ f(t, y) = \\frac{F(t, y)}{\\Delta x} + S(y), $$
    where F is the net numerical flux from the flux assembler and S the
    source term from the physics. Both tables are requested afresh on every
    call.

    Args:
        flux: Flux assembler.
        physics: Physics providing the source term.
        dx: Uniform cell width.

    Returns:
        A function with signature (t, y) -> dy/dt.

    Raises:
        ContractViolationError: (when called) if either collaborator returns
            a table whose shape differs from the state's.
    """

    def rhs(t: Array, y: State) -> State:
        flux_vector = flux.evaluate(t, y)
        source = physics.source_term(y)
        # Shapes are static, so this also holds while tracing under jit
        for label, table in (("flux", flux_vector), ("source", source)):
            if table.shape != y.shape:
                raise ContractViolationError(
                    f"{label} table has shape {table.shape}, "
                    f"expected {y.shape}"
                )
        return flux_vector / dx + source

    return rhs


def solve_ivp(
    fun: Callable,
    t_span: Tuple[float, float],
    y0: Array,
    method: StepperProtocol,
    step_size: float,
    args: tuple = ()
) -> Tuple[Array, Array]:
    """
    Integrate dy/dt = fun(t, y, *args) over the time interval t_span.

    Uses the same fixed-step rule as `Simulation`: steps of exactly
    `step_size` are taken while t < t_end, so the final time may overshoot
    t_end by less than one step. No output is written.

    Args:
        fun: Callable right-hand side of system dy/dt = fun(t, y, *args)
        t_span: (t_start, t_end) time interval
        y0: Initial condition
        method: Time-stepping method instance (e.g., ForwardEuler(), RK2())
        step_size: Time step size
        args: Additional arguments to pass to fun

    Returns:
        t_final: Final time
        y_final: Solution at t_final

    Example usage:
    ```python
    import jax.numpy as jnp
    from jax_swe.integrate import solve_ivp, RK2

    # Define ODE: dy/dt = -k*y
    def fun(t, y, k):
        return -k * y

    y0 = jnp.array([[1.0, 0.5]])
    t, y = solve_ivp(fun, (0.0, 2.0), y0, RK2(), step_size=0.01, args=(0.5,))
    ```
    """
    t_start, t_end = t_span

    def cond_fn(carry):
        t, _ = carry
        return t < t_end

    def body_fn(carry):
        t, y = carry
        y_next = method.step(fun, t, y, step_size, args)
        return (t + step_size, y_next)

    t0 = jnp.asarray(t_start, dtype=y0.dtype)
    t_final, y_final = jax.lax.while_loop(cond_fn, body_fn, (t0, y0))

    return t_final, y_final

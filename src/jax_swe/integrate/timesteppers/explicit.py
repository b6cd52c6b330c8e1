"""Explicit schemes for the semi-discrete Saint-Venant system."""

from flax import nnx

from ..custom_types import RightHandSide, State


class ForwardEuler(nnx.Module):
    """
    Explicit Euler, first order, one right-hand side evaluation per step.

    Update:
        $$ U^{n+1} = U^n + \\Delta t \\, f(t_n, U^n) $$
    """

    def step(
        self,
        fun: RightHandSide,
        t: float,
        y: State,
        h: float,
        args: tuple = ()
    ) -> State:
        return y + h * fun(t, y, *args)


class RK2(nnx.Module):
    """
    Heun's two-stage Runge-Kutta scheme, second order for smooth solutions.

    Update:
        $$ k_1 = f(t_n, U^n), \\quad k_2 = f(t_n + \\Delta t, U^n + \\Delta t \\, k_1), $$
        $$ U^{n+1} = U^n + \\frac{\\Delta t}{2} (k_1 + k_2). $$

    The predictor `U^n + dt k1` is a temporary; the incoming state is never
    overwritten.
    """

    def step(
        self,
        fun: RightHandSide,
        t: float,
        y: State,
        h: float,
        args: tuple = ()
    ) -> State:
        k1 = fun(t, y, *args)
        predictor = y + h * k1
        k2 = fun(t + h, predictor, *args)
        return y + (0.5 * h) * (k1 + k2)

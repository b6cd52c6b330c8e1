"""Structural interface shared by the time-stepping schemes."""

from typing import Protocol, runtime_checkable

from ..custom_types import RightHandSide, State


@runtime_checkable
class StepperProtocol(Protocol):
    """
    Advances the [h, q] table of the semi-discrete system by one step.

    Anything with a matching `step` is accepted by `Simulation` and
    `solve_ivp`; the scheme keeps no state between calls.
    """

    def step(
        self,
        fun: RightHandSide,
        t: float,
        y: State,
        h: float,
        args: tuple = ()
    ) -> State:
        """
        Return the state one step of size `h` after `t`.

        `fun(t, y, *args)` is the assembled flux/dx + source term. `y` is
        left untouched.
        """
        ...

"""Time-stepping schemes for the semi-discrete Saint-Venant system."""

from ...exceptions import ConfigurationError
from .protocol import StepperProtocol
from .explicit import ForwardEuler, RK2

# Scheme names as they appear in configuration files
STEPPERS = {
    'ExplicitEuler': ForwardEuler,
    'RK2': RK2,
}


def get_stepper(name: str) -> StepperProtocol:
    """
    Instantiate the time-stepping scheme registered under `name`.

    Raises:
        ConfigurationError: If no scheme is registered under `name`.
    """
    try:
        return STEPPERS[name]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown time scheme '{name}', expected one of {sorted(STEPPERS)}"
        ) from None


__all__ = [
    # Protocol
    'StepperProtocol',

    # Explicit methods
    'ForwardEuler',
    'RK2',

    # Registry
    'STEPPERS',
    'get_stepper',
]

"""Exceptions raised by the simulation driver and its collaborators."""


class SimulationError(Exception):
    """Base class for every error that aborts a run."""


class ConfigurationError(SimulationError):
    """Invalid or incomplete configuration, detected before the time loop."""


class ContractViolationError(SimulationError):
    """A collaborator returned a table with the wrong shape."""


class NonPhysicalStateError(SimulationError):
    """
    Non-positive depth or non-finite value in the solution.

    Attributes:
        cell: Index of the first offending cell.
        time: Simulated time at which the state was inspected.
    """

    def __init__(self, message: str, cell: int, time: float):
        super().__init__(message)
        self.cell = cell
        self.time = time


class OutputError(SimulationError):
    """Results directory or output file cannot be used."""

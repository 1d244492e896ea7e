"""Exception hierarchy raised by the minimization driver and its methods."""

from __future__ import annotations


class OptimizeError(Exception):
    """Base class for all localmin errors."""


class ConfigurationError(OptimizeError, ValueError):
    """Inputs rejected before the first evaluation of the objective."""


class EvaluationError(OptimizeError, RuntimeError):
    """A method requested an evaluation the driver cannot honour.

    This signals a programming error in the method or the objective and is
    never converted into a termination status.
    """


class StartingLocationError(OptimizeError):
    """The objective returned an unusable value at the starting location."""


class FunctionNaNError(StartingLocationError):
    def __init__(self) -> None:
        super().__init__("function value is NaN at the starting location")


class FunctionInfError(StartingLocationError):
    def __init__(self) -> None:
        super().__init__("function value is +Inf at the starting location")


class GradientNaNError(StartingLocationError):
    def __init__(self) -> None:
        super().__init__("gradient has a NaN element at the starting location")


class GradientInfError(StartingLocationError):
    def __init__(self) -> None:
        super().__init__("gradient has an Inf element at the starting location")


class LinesearchError(OptimizeError):
    """The line search could not find an acceptable step."""


class NoProgressError(OptimizeError):
    """The next trial point coincides with the current one."""


__all__ = [
    "OptimizeError",
    "ConfigurationError",
    "EvaluationError",
    "StartingLocationError",
    "FunctionNaNError",
    "FunctionInfError",
    "GradientNaNError",
    "GradientInfError",
    "LinesearchError",
    "NoProgressError",
]

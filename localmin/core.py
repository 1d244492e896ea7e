"""Core types shared by the minimization driver, its methods and recorders.

A minimization run threads three mutable records through the driver: the
working :class:`Location` the method moves around, the best :class:`Location`
seen so far and the :class:`Stats` counters. :class:`Settings` holds the
stopping criteria and is never modified during a run.

References:
    - Nocedal & Wright, *Numerical Optimization* (2006)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

import numpy as np

if TYPE_CHECKING:
    from .recorder import Recorder

Array = np.ndarray
Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]
Hessian = Callable[[Array], Array]

DEFAULT_GRADIENT_ABS_TOL = 1e-6


class EvaluationType(Enum):
    """Quantities a method asks the driver to compute at the next point."""

    NO_EVALUATION = "no_evaluation"
    FUNC_ONLY = "func_only"
    GRAD_ONLY = "grad_only"
    HESS_ONLY = "hess_only"
    FUNC_AND_GRAD = "func_and_grad"
    FUNC_AND_GRAD_AND_HESS = "func_and_grad_and_hess"


class IterationType(Enum):
    """Why an evaluation happened; gates which convergence tests apply."""

    INIT_ITERATION = "init_iteration"
    MAJOR_ITERATION = "major_iteration"
    MINOR_ITERATION = "minor_iteration"
    POST_ITERATION = "post_iteration"


class Status(Enum):
    """Termination status of a minimization run."""

    NOT_TERMINATED = "not_terminated"
    GRADIENT_THRESHOLD = "gradient_threshold"
    FUNCTION_THRESHOLD = "function_threshold"
    FUNCTION_NEGATIVE_INFINITY = "function_negative_infinity"
    FUNCTION_EVALUATION_LIMIT = "function_evaluation_limit"
    GRADIENT_EVALUATION_LIMIT = "gradient_evaluation_limit"
    HESSIAN_EVALUATION_LIMIT = "hessian_evaluation_limit"
    RUNTIME_LIMIT = "runtime_limit"
    ITERATION_LIMIT = "iteration_limit"
    FAILURE = "failure"


@dataclass(frozen=True)
class Needs:
    """Derivative information a method requires from the objective."""

    gradient: bool = False
    hessian: bool = False


@dataclass
class Location:
    """
    A point together with the quantities currently known there.

    ``gradient`` and ``hessian`` are ``None`` when the method does not track
    them. Fields that are not valid for the current ``x`` hold NaN.
    """

    x: Array
    f: float = math.nan
    gradient: Optional[Array] = None
    hessian: Optional[Array] = None

    def copy(self) -> "Location":
        return Location(
            x=self.x.copy(),
            f=self.f,
            gradient=None if self.gradient is None else self.gradient.copy(),
            hessian=None if self.hessian is None else self.hessian.copy(),
        )

    def copy_from(self, src: "Location") -> None:
        """Overwrite this location with ``src``, reusing storage where possible."""
        self.x = _copy_into(self.x, src.x)
        self.f = src.f
        self.gradient = None if src.gradient is None else _copy_into(self.gradient, src.gradient)
        self.hessian = None if src.hessian is None else _copy_into(self.hessian, src.hessian)


def _copy_into(dst: Optional[Array], src: Array) -> Array:
    if dst is None or dst.shape != src.shape:
        return src.copy()
    np.copyto(dst, src)
    return dst


@dataclass
class Stats:
    """Counters accumulated over one run. Runtime is in seconds."""

    func_evaluations: int = 0
    grad_evaluations: int = 0
    hess_evaluations: int = 0
    func_grad_evaluations: int = 0
    func_grad_hess_evaluations: int = 0
    major_iterations: int = 0
    runtime: float = 0.0


@dataclass(frozen=True)
class Settings:
    """
    Stopping criteria and options for :func:`localmin.minimize`.

    Attributes:
        gradient_abs_tol: Stop when the infinity norm of the gradient at a
            major iteration drops below this value.
        function_abs_tol: Stop when the function value at a major iteration
            drops below this value. Disabled by default.
        func_evaluations: Cap on calls that compute the function value.
        grad_evaluations: Cap on calls that compute the gradient.
        hess_evaluations: Cap on calls that compute the Hessian.
        major_iterations: Cap on major iterations.
        runtime: Cap on wall-clock time in seconds.
        use_initial_data: Take the starting function value (and gradient and
            Hessian when the method needs them) from the ``initial_*``
            fields instead of evaluating the objective.
        recorder: Receives every location produced during the run.

    A cap of zero disables the corresponding limit.
    """

    gradient_abs_tol: float = DEFAULT_GRADIENT_ABS_TOL
    function_abs_tol: float = -math.inf
    func_evaluations: int = 0
    grad_evaluations: int = 0
    hess_evaluations: int = 0
    major_iterations: int = 0
    runtime: float = 0.0
    use_initial_data: bool = False
    initial_function_value: Optional[float] = None
    initial_gradient: Optional[Array] = None
    initial_hessian: Optional[Array] = None
    recorder: Optional["Recorder"] = None


def default_settings() -> Settings:
    """Return settings with every limit disabled and the default gradient tolerance."""
    return Settings()


@dataclass(frozen=True)
class Problem:
    """
    Objective assembled from plain callables.

    Any object exposing some of these methods can be minimized directly;
    ``Problem`` is a convenience for functions that are not bound to a class.
    Only ``func`` is mandatory. ``func_grad`` returns ``(f, g)`` and
    ``func_grad_hess`` returns ``(f, g, H)``.
    """

    func: Objective
    grad: Optional[Gradient] = None
    func_grad: Optional[Callable[[Array], tuple[float, Array]]] = None
    hess: Optional[Hessian] = None
    func_grad_hess: Optional[Callable[[Array], tuple[float, Array, Array]]] = None
    status: Optional[Callable[[], Status]] = None


@dataclass
class Result:
    """
    Outcome of a minimization run.

    Attributes:
        location: Copy of the best location found.
        stats: Copy of the final counters.
        status: Reason the run stopped.
        error: Error that ended the run early, if any.
    """

    location: Location
    stats: Stats
    status: Status
    error: Optional[BaseException] = None

    @property
    def x(self) -> Array:
        return self.location.x

    @property
    def fun(self) -> float:
        return self.location.f

    @property
    def success(self) -> bool:
        return self.error is None and self.status not in (Status.FAILURE, Status.NOT_TERMINATED)


__all__ = [
    "Array",
    "Objective",
    "Gradient",
    "Hessian",
    "DEFAULT_GRADIENT_ABS_TOL",
    "EvaluationType",
    "IterationType",
    "Status",
    "Needs",
    "Location",
    "Stats",
    "Settings",
    "default_settings",
    "Problem",
    "Result",
]

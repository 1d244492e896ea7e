"""Deterministic line searches following Nocedal & Wright.

A line search works on the one-dimensional restriction
``phi(step) = f(x + step * direction)``. The driver evaluates each trial
point, so a linesearcher only sees ``phi`` and its derivative
``phi'(step) = grad(x + step * direction) @ direction`` and returns the next
trial step together with the evaluation it needs there.
"""

from __future__ import annotations

import math
from typing import Protocol

from .core import EvaluationType
from .errors import LinesearchError

MIN_BACKTRACKING_STEP = 1e-20


class Linesearcher(Protocol):
    """Protocol for step-size searches driven by :class:`LinesearchMethod`."""

    def init(self, value: float, derivative: float, step: float) -> EvaluationType:
        """Start a search from ``phi(0) = value``, ``phi'(0) = derivative``."""
        ...

    def finished(self, value: float, derivative: float) -> bool:
        """Return True if the current trial step is acceptable."""
        ...

    def iterate(self, value: float, derivative: float) -> tuple[float, EvaluationType]:
        """Return the next trial step and the evaluation it needs."""
        ...


def armijo_condition_met(
    curr_obj: float, init_obj: float, init_grad: float, step: float, func_const: float
) -> bool:
    """Sufficient decrease: ``phi(step) <= phi(0) + c * step * phi'(0)``."""
    return curr_obj <= init_obj + func_const * step * init_grad


def strong_wolfe_conditions_met(
    curr_obj: float,
    curr_grad: float,
    init_obj: float,
    init_grad: float,
    step: float,
    func_const: float,
    grad_const: float,
) -> bool:
    """Sufficient decrease plus ``|phi'(step)| <= c2 * |phi'(0)|``."""
    if not armijo_condition_met(curr_obj, init_obj, init_grad, step, func_const):
        return False
    return abs(curr_grad) <= grad_const * abs(init_grad)


class Backtracking:
    """
    Armijo backtracking line search.

    The step shrinks by ``decrease`` until the sufficient decrease condition
    with constant ``func_const`` holds. Only the function value is evaluated
    at trial points, which makes it a good match for objectives with an
    expensive gradient. It does not enforce the curvature condition, so it
    is not suitable for quasi-Newton updates.
    """

    def __init__(self, func_const: float = 1e-4, decrease: float = 0.5) -> None:
        if not (0 < func_const < 1):
            raise ValueError("Armijo constant func_const must lie in (0, 1)")
        if not (0 < decrease < 1):
            raise ValueError("decrease must lie in (0, 1)")
        self.func_const = func_const
        self.decrease = decrease
        self._step = 0.0
        self._init_f = math.nan
        self._init_g = math.nan

    def init(self, value: float, derivative: float, step: float) -> EvaluationType:
        if step <= 0:
            raise ValueError("initial step size must be positive")
        self._step = float(step)
        self._init_f = value
        self._init_g = derivative
        return EvaluationType.FUNC_ONLY

    def finished(self, value: float, derivative: float) -> bool:
        return armijo_condition_met(value, self._init_f, self._init_g, self._step, self.func_const)

    def iterate(self, value: float, derivative: float) -> tuple[float, EvaluationType]:
        self._step *= self.decrease
        if self._step < MIN_BACKTRACKING_STEP:
            raise LinesearchError("backtracking step size fell below the minimum")
        return self._step, EvaluationType.FUNC_ONLY


class Bisection:
    """
    Strong Wolfe line search by bracketing and bisection.

    The step doubles until the minimum along the direction is bracketed,
    then the bracket is halved until the strong Wolfe conditions hold with
    curvature constant ``grad_const`` and a zero sufficient-decrease
    constant.
    """

    def __init__(self, grad_const: float = 0.9) -> None:
        if not (0 < grad_const < 1):
            raise ValueError("grad_const must lie in (0, 1)")
        self.grad_const = grad_const
        self._min_step = 0.0
        self._max_step = math.inf
        self._curr_step = 0.0
        self._init_f = math.nan
        self._min_f = math.nan
        self._init_g = math.nan

    def init(self, value: float, derivative: float, step: float) -> EvaluationType:
        if step <= 0:
            raise ValueError("initial step size must be positive")
        if derivative >= 0:
            raise ValueError("Search direction must be a descent direction.")
        self._min_step = 0.0
        self._max_step = math.inf
        self._curr_step = float(step)
        self._init_f = value
        self._min_f = value
        self._init_g = derivative
        return EvaluationType.FUNC_AND_GRAD

    def finished(self, value: float, derivative: float) -> bool:
        return strong_wolfe_conditions_met(
            value, derivative, self._init_f, self._init_g, self._curr_step, 0.0, self.grad_const
        )

    def iterate(self, value: float, derivative: float) -> tuple[float, EvaluationType]:
        if math.isinf(self._max_step):
            # Minimum not bracketed yet.
            if derivative > 0 or value > self._min_f:
                self._max_step = self._curr_step
                return self._next_step(0.5 * (self._min_step + self._max_step))
            self._set_min(value)
            return self._next_step(2.0 * self._curr_step)

        if derivative < 0 and value <= self._min_f:
            self._set_min(value)
        else:
            self._max_step = self._curr_step
        return self._next_step(0.5 * (self._min_step + self._max_step))

    def _set_min(self, value: float) -> None:
        self._min_step = self._curr_step
        self._min_f = value

    def _next_step(self, step: float) -> tuple[float, EvaluationType]:
        if step == self._curr_step:
            raise LinesearchError("bisection step size stopped changing")
        self._curr_step = step
        return step, EvaluationType.FUNC_AND_GRAD


__all__ = [
    "MIN_BACKTRACKING_STEP",
    "Linesearcher",
    "armijo_condition_met",
    "strong_wolfe_conditions_met",
    "Backtracking",
    "Bisection",
]

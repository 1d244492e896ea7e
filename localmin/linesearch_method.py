"""Base class for methods that move along a search direction each iteration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .core import Array, EvaluationType, IterationType, Location, Needs
from .errors import LinesearchError, NoProgressError
from .functions import FunctionInfo
from .line_search import Linesearcher
from .logging import get_logger

logger = get_logger(__name__)


class LinesearchMethod(ABC):
    """
    Method that alternates search-direction updates with line searches.

    Subclasses supply the direction: :meth:`init_direction` at the starting
    location and :meth:`next_direction` after every accepted step. Both write
    the direction into ``direction`` in place and return the initial trial
    step. The line search runs as a sequence of minor iterations; once it
    accepts a point the missing derivatives are evaluated there and the
    point is announced as a major iteration.
    """

    def __init__(self, linesearcher: Linesearcher) -> None:
        self.linesearcher = linesearcher
        self._x: Optional[Array] = None
        self._dir: Optional[Array] = None
        self._first = True
        self._pending: Optional[list[EvaluationType]] = None
        self._last_eval = EvaluationType.NO_EVALUATION
        self._last_iter = IterationType.INIT_ITERATION

    @abstractmethod
    def init_direction(self, loc: Location, direction: Array) -> float:
        """Write the first search direction and return the first trial step."""

    @abstractmethod
    def next_direction(self, loc: Location, direction: Array) -> float:
        """Write the next search direction and return its first trial step."""

    def needs(self) -> Needs:
        return Needs(gradient=True, hessian=False)

    def init(
        self, loc: Location, info: FunctionInfo, x_next: Array
    ) -> tuple[EvaluationType, IterationType]:
        del info  # the driver already checked needs() against the objective
        if loc.gradient is None:
            raise ValueError(f"{type(self).__name__} requires a location with a gradient")
        self._x = loc.x.copy()
        self._dir = np.zeros_like(loc.x)
        self._first = True
        self._pending = None
        return self._init_next_linesearch(loc, x_next)

    def iterate(self, loc: Location, x_next: Array) -> tuple[EvaluationType, IterationType]:
        if self._last_iter is IterationType.MAJOR_ITERATION:
            # The accepted point did not converge; search from it.
            return self._init_next_linesearch(loc, x_next)

        if self._pending is not None:
            return self._complete(loc, x_next)

        proj_grad = float(np.dot(loc.gradient, self._dir))
        if self.linesearcher.finished(loc.f, proj_grad):
            np.copyto(self._x, loc.x)
            self._pending = self._complement(self._last_eval)
            return self._complete(loc, x_next)

        step, eval_type = self.linesearcher.iterate(loc.f, proj_grad)
        self._trial_point(step, x_next)
        return self._request(eval_type, IterationType.MINOR_ITERATION)

    def _init_next_linesearch(
        self, loc: Location, x_next: Array
    ) -> tuple[EvaluationType, IterationType]:
        np.copyto(self._x, loc.x)
        if self._first:
            step = self.init_direction(loc, self._dir)
            self._first = False
        else:
            step = self.next_direction(loc, self._dir)
        proj_grad = float(np.dot(loc.gradient, self._dir))
        if not proj_grad < 0:
            raise LinesearchError(
                f"search direction is not a descent direction (projected gradient {proj_grad})"
            )
        eval_type = self.linesearcher.init(loc.f, proj_grad, step)
        logger.debug("line search from f=%g with initial step %g", loc.f, step)
        self._trial_point(step, x_next)
        return self._request(eval_type, IterationType.MINOR_ITERATION)

    def _trial_point(self, step: float, x_next: Array) -> None:
        np.copyto(x_next, self._x + step * self._dir)
        if np.array_equal(x_next, self._x):
            raise NoProgressError(f"step {step} does not move the current point")

    def _announce_major(
        self, loc: Location, x_next: Array
    ) -> tuple[EvaluationType, IterationType]:
        np.copyto(x_next, loc.x)
        return self._request(EvaluationType.NO_EVALUATION, IterationType.MAJOR_ITERATION)

    def _complete(self, loc: Location, x_next: Array) -> tuple[EvaluationType, IterationType]:
        """Request the next missing quantity at the accepted point, then announce it."""
        while self._pending:
            eval_type = self._pending.pop(0)
            # A combined call made for the gradient may have refreshed the Hessian too.
            if eval_type is EvaluationType.HESS_ONLY and not np.isnan(loc.hessian).any():
                continue
            np.copyto(x_next, loc.x)
            return self._request(eval_type, IterationType.MINOR_ITERATION)
        self._pending = None
        return self._announce_major(loc, x_next)

    def _complement(self, last_eval: EvaluationType) -> list[EvaluationType]:
        """Evaluations that complete a location last evaluated with ``last_eval``.

        The function value is never requested again: line searches always
        evaluate it at the trial point.
        """
        missing = []
        if last_eval is EvaluationType.FUNC_ONLY:
            missing.append(EvaluationType.GRAD_ONLY)
        if self.needs().hessian and last_eval is not EvaluationType.FUNC_AND_GRAD_AND_HESS:
            missing.append(EvaluationType.HESS_ONLY)
        return missing

    def _request(
        self, eval_type: EvaluationType, iter_type: IterationType
    ) -> tuple[EvaluationType, IterationType]:
        self._last_eval = eval_type
        self._last_iter = iter_type
        return eval_type, iter_type


__all__ = ["LinesearchMethod"]

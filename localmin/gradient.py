"""Steepest descent with an Armijo line search."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from .core import Array, Location
from .line_search import Backtracking, Linesearcher
from .linesearch_method import LinesearchMethod


class GradientDescent(LinesearchMethod):
    """
    Steepest descent along the negative gradient.

    The first trial step is ``1 / ||g||``. Later trial steps assume the
    decrease of the last iteration repeats itself (Nocedal & Wright,
    eq. 3.60), capped at one.
    """

    def __init__(self, linesearcher: Optional[Linesearcher] = None) -> None:
        super().__init__(linesearcher if linesearcher is not None else Backtracking())
        self._prev_f = math.nan
        self._init_step = 1.0

    def init_direction(self, loc: Location, direction: Array) -> float:
        np.negative(loc.gradient, out=direction)
        norm = float(np.linalg.norm(direction))
        self._init_step = 1.0 / norm if norm > 0 else 1.0
        self._prev_f = loc.f
        return self._init_step

    def next_direction(self, loc: Location, direction: Array) -> float:
        np.negative(loc.gradient, out=direction)
        proj_grad = -float(np.dot(direction, direction))
        decrease = loc.f - self._prev_f
        self._prev_f = loc.f
        if proj_grad == 0:
            return self._init_step
        step = min(1.0, 1.01 * 2.0 * decrease / proj_grad)
        if not (step > 0 and math.isfinite(step)):
            return self._init_step
        return step


__all__ = ["GradientDescent"]

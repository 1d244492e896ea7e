"""Quasi-Newton optimization methods (BFGS and L-BFGS)."""

from __future__ import annotations

from collections import deque
from typing import Deque, Optional

import numpy as np

from .core import Array, Location
from .line_search import Bisection, Linesearcher
from .linesearch_method import LinesearchMethod

# Curvature below which an update is skipped.
_CURVATURE_EPS = 1e-12


def _steepest_descent(loc: Location, direction: Array) -> float:
    np.negative(loc.gradient, out=direction)
    norm = float(np.linalg.norm(direction))
    return 1.0 / norm if norm > 0 else 1.0


class BFGS(LinesearchMethod):
    """
    Full-memory BFGS with a strong Wolfe line search.

    The inverse Hessian approximation starts as the identity and is rescaled
    after the first step (Nocedal & Wright, eq. 6.20). When a step violates
    the curvature condition the approximation is reset to the identity.
    """

    def __init__(self, linesearcher: Optional[Linesearcher] = None) -> None:
        super().__init__(linesearcher if linesearcher is not None else Bisection())
        self._prev_x: Optional[Array] = None
        self._prev_grad: Optional[Array] = None
        self._inv_hessian: Optional[Array] = None
        self._first_update = True

    def init_direction(self, loc: Location, direction: Array) -> float:
        n = loc.x.size
        self._prev_x = loc.x.copy()
        self._prev_grad = loc.gradient.copy()
        self._inv_hessian = np.eye(n)
        self._first_update = True
        return _steepest_descent(loc, direction)

    def next_direction(self, loc: Location, direction: Array) -> float:
        n = loc.x.size
        s = loc.x - self._prev_x
        y = loc.gradient - self._prev_grad
        ys = float(np.dot(y, s))
        if self._first_update:
            yy = float(np.dot(y, y))
            if ys > 0 and yy > 0:
                self._inv_hessian = (ys / yy) * np.eye(n)
            self._first_update = False
        if ys <= _CURVATURE_EPS:
            self._inv_hessian = np.eye(n)
        else:
            rho = 1.0 / ys
            identity = np.eye(n)
            outer_sy = np.outer(s, y)
            self._inv_hessian = (
                (identity - rho * outer_sy)
                @ self._inv_hessian
                @ (identity - rho * outer_sy.T)
                + rho * np.outer(s, s)
            )
        np.copyto(self._prev_x, loc.x)
        np.copyto(self._prev_grad, loc.gradient)
        np.copyto(direction, -(self._inv_hessian @ loc.gradient))
        return 1.0


class LBFGS(LinesearchMethod):
    """Limited-memory BFGS using two-loop recursion over ``store`` pairs."""

    def __init__(self, store: int = 15, linesearcher: Optional[Linesearcher] = None) -> None:
        if store <= 0:
            raise ValueError("Memory parameter store must be positive.")
        super().__init__(linesearcher if linesearcher is not None else Bisection())
        self.store = store
        self._s_history: Deque[Array] = deque(maxlen=store)
        self._y_history: Deque[Array] = deque(maxlen=store)
        self._prev_x: Optional[Array] = None
        self._prev_grad: Optional[Array] = None

    def init_direction(self, loc: Location, direction: Array) -> float:
        self._s_history.clear()
        self._y_history.clear()
        self._prev_x = loc.x.copy()
        self._prev_grad = loc.gradient.copy()
        return _steepest_descent(loc, direction)

    def next_direction(self, loc: Location, direction: Array) -> float:
        s = loc.x - self._prev_x
        y = loc.gradient - self._prev_grad
        if float(np.dot(y, s)) > _CURVATURE_EPS:
            self._s_history.append(s)
            self._y_history.append(y)
        np.copyto(self._prev_x, loc.x)
        np.copyto(self._prev_grad, loc.gradient)
        np.copyto(direction, self._two_loop(loc.gradient))
        return 1.0

    def _two_loop(self, g: Array) -> Array:
        q = g.copy()
        alpha_vals = []
        for s, y in reversed(list(zip(self._s_history, self._y_history))):
            rho = 1.0 / float(np.dot(y, s))
            alpha_i = rho * float(np.dot(s, q))
            q = q - alpha_i * y
            alpha_vals.append((rho, alpha_i, s, y))
        if len(self._s_history) > 0:
            last_s = self._s_history[-1]
            last_y = self._y_history[-1]
            gamma = float(np.dot(last_s, last_y) / np.dot(last_y, last_y))
        else:
            gamma = 1.0
        r = gamma * q
        for rho, alpha_i, s, y in reversed(alpha_vals):
            beta = rho * float(np.dot(y, r))
            r = r + s * (alpha_i - beta)
        return -r


__all__ = ["BFGS", "LBFGS"]

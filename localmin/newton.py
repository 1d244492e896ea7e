"""Newton's method with Hessian modification."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .core import Array, Location, Needs
from .line_search import Backtracking, Linesearcher
from .linesearch_method import LinesearchMethod
from .logging import get_logger

logger = get_logger(__name__)

_MAX_SHIFTS = 100


class Newton(LinesearchMethod):
    """
    Newton's method with an Armijo line search.

    When the Hessian is not positive definite a multiple of the identity is
    added until a Cholesky factorization succeeds (Nocedal & Wright,
    Algorithm 3.3). The shift starts at ``min_shift`` and grows by a factor
    of ``increase``.
    """

    def __init__(
        self,
        increase: float = 5.0,
        min_shift: float = 1e-3,
        linesearcher: Optional[Linesearcher] = None,
    ) -> None:
        if increase <= 1:
            raise ValueError("increase must be greater than one")
        if min_shift <= 0:
            raise ValueError("min_shift must be positive")
        super().__init__(linesearcher if linesearcher is not None else Backtracking())
        self.increase = increase
        self.min_shift = min_shift

    def needs(self) -> Needs:
        return Needs(gradient=True, hessian=True)

    def init_direction(self, loc: Location, direction: Array) -> float:
        return self.next_direction(loc, direction)

    def next_direction(self, loc: Location, direction: Array) -> float:
        hess = 0.5 * (loc.hessian + loc.hessian.T)
        eye = np.eye(hess.shape[0])
        min_diag = float(np.min(np.diag(hess)))
        shift = 0.0 if min_diag > 0 else self.min_shift - min_diag
        for _ in range(_MAX_SHIFTS):
            try:
                chol = np.linalg.cholesky(hess + shift * eye)
            except np.linalg.LinAlgError:
                shift = max(self.increase * shift, self.min_shift)
                continue
            if shift > 0:
                logger.debug("Hessian shifted by %g to make it positive definite", shift)
            y = np.linalg.solve(chol, -loc.gradient)
            np.copyto(direction, np.linalg.solve(chol.T, y))
            return 1.0
        logger.warning("Hessian modification failed, falling back to steepest descent")
        np.negative(loc.gradient, out=direction)
        return 1.0


__all__ = ["Newton"]

"""Typed evaluation of an objective at a requested point.

A method asks for an :class:`~localmin.core.EvaluationType`; the objective
exposes some subset of the calls ``func``, ``grad``, ``func_grad``, ``hess``
and ``func_grad_hess``. :data:`ROUTES` lists, per evaluation type, the call
sequences able to serve it in order of preference. The first sequence whose
calls are all implemented is used, so combined calls are preferred and
decomposed calls are the fallback.
"""

from __future__ import annotations

import math

import numpy as np

from .core import Array, EvaluationType, Location, Stats
from .diagnostics import check_gradient, check_hessian
from .errors import EvaluationError
from .functions import FunctionInfo

ROUTES: dict[EvaluationType, tuple[tuple[str, ...], ...]] = {
    EvaluationType.NO_EVALUATION: ((),),
    EvaluationType.FUNC_ONLY: (("func",),),
    EvaluationType.GRAD_ONLY: (
        ("grad",),
        ("func_grad",),
        ("func_grad_hess",),
    ),
    EvaluationType.HESS_ONLY: (
        ("hess",),
        ("func_grad_hess",),
    ),
    EvaluationType.FUNC_AND_GRAD: (
        ("func_grad",),
        ("func_grad_hess",),
        ("func", "grad"),
    ),
    EvaluationType.FUNC_AND_GRAD_AND_HESS: (
        ("func_grad_hess",),
        ("func", "grad", "hess"),
    ),
}

# Location fields each call refreshes.
PRODUCES: dict[str, frozenset[str]] = {
    "func": frozenset({"f"}),
    "grad": frozenset({"gradient"}),
    "func_grad": frozenset({"f", "gradient"}),
    "hess": frozenset({"hessian"}),
    "func_grad_hess": frozenset({"f", "gradient", "hessian"}),
}

COUNTERS: dict[str, str] = {
    "func": "func_evaluations",
    "grad": "grad_evaluations",
    "func_grad": "func_grad_evaluations",
    "hess": "hess_evaluations",
    "func_grad_hess": "func_grad_hess_evaluations",
}


def plan_evaluation(eval_type: EvaluationType, info: FunctionInfo) -> tuple[str, ...]:
    """Return the objective calls that serve ``eval_type``.

    Raises:
        EvaluationError: if the evaluation type is unknown or no route is
            supported by the objective.
    """
    try:
        routes = ROUTES[eval_type]
    except (KeyError, TypeError):
        raise EvaluationError(f"unknown evaluation type {eval_type!r}") from None
    for calls in routes:
        if all(info.supports(call) for call in calls):
            return calls
    raise EvaluationError(f"objective does not support {eval_type.name} evaluation")


def invalidate(loc: Location, f: bool, gradient: bool, hessian: bool) -> None:
    """Mark the selected fields of ``loc`` with NaN.

    This helps method implementers find bugs where a field is read after an
    evaluation that did not refresh it. The whole field is overwritten.
    """
    if f:
        loc.f = math.nan
    if gradient and loc.gradient is not None:
        loc.gradient.fill(math.nan)
    if hessian and loc.hessian is not None:
        loc.hessian.fill(math.nan)


def evaluate(
    eval_type: EvaluationType,
    x_next: Array,
    loc: Location,
    stats: Stats,
    info: FunctionInfo,
) -> None:
    """Evaluate the objective at ``x_next`` and store the results in ``loc``.

    If ``x_next`` differs from ``loc.x`` it is copied in and every field the
    chosen calls do not refresh is invalidated. Exactly the counters of the
    calls made are incremented.

    Raises:
        EvaluationError: for ``NO_EVALUATION`` at a new point, or for an
            evaluation type the objective cannot serve.
    """
    calls = plan_evaluation(eval_type, info)
    different = not np.array_equal(loc.x, x_next)
    if eval_type is EvaluationType.NO_EVALUATION:
        if different:
            raise EvaluationError("no evaluation requested at a new location")
        return

    if different:
        np.copyto(loc.x, x_next)
        fresh = frozenset().union(*(PRODUCES[call] for call in calls))
        invalidate(
            loc,
            f="f" not in fresh,
            gradient="gradient" not in fresh,
            hessian="hessian" not in fresh,
        )

    objective = info.objective
    n = loc.x.size
    for call in calls:
        if call == "func":
            loc.f = float(objective.func(loc.x))
        elif call == "grad":
            _store_gradient(loc, objective.grad(loc.x), n)
        elif call == "func_grad":
            f, g = objective.func_grad(loc.x)
            loc.f = float(f)
            _store_gradient(loc, g, n)
        elif call == "hess":
            _store_hessian(loc, objective.hess(loc.x), n)
        else:
            f, g, h = objective.func_grad_hess(loc.x)
            loc.f = float(f)
            _store_gradient(loc, g, n)
            _store_hessian(loc, h, n)
        counter = COUNTERS[call]
        setattr(stats, counter, getattr(stats, counter) + 1)


def _store_gradient(loc: Location, grad: Array, n: int) -> None:
    grad = np.asarray(grad, dtype=float)
    check_gradient(grad, n)
    if loc.gradient is None:
        loc.gradient = np.empty(n)
    loc.gradient[:] = grad


def _store_hessian(loc: Location, hess: Array, n: int) -> None:
    hess = np.asarray(hess, dtype=float)
    check_hessian(hess, n)
    if loc.hessian is None:
        loc.hessian = np.empty((n, n))
    loc.hessian[:] = hess


__all__ = ["ROUTES", "PRODUCES", "COUNTERS", "plan_evaluation", "invalidate", "evaluate"]

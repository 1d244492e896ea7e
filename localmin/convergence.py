"""Termination tests applied to the best location after every evaluation."""

from __future__ import annotations

import math

import numpy as np

from .core import IterationType, Location, Settings, Stats, Status


def check_convergence(
    loc: Location, iter_type: IterationType, stats: Stats, settings: Settings
) -> Status:
    """Return the termination status implied by ``loc`` and ``stats``.

    The tolerance tests only apply at initial and major iterations, where
    ``loc`` is guaranteed to be fully evaluated. The limits are tested at
    every iteration, except the iteration limit which only counts major
    iterations. None of the arguments are modified.
    """
    if iter_type in (IterationType.MAJOR_ITERATION, IterationType.INIT_ITERATION):
        if loc.gradient is not None:
            norm = float(np.linalg.norm(loc.gradient, ord=np.inf))
            if norm < settings.gradient_abs_tol:
                return Status.GRADIENT_THRESHOLD
        if loc.f < settings.function_abs_tol:
            return Status.FUNCTION_THRESHOLD

    # Checked at every iteration: -Inf is the best value there is and would
    # mislead a line search.
    if loc.f == -math.inf:
        return Status.FUNCTION_NEGATIVE_INFINITY

    if settings.func_evaluations > 0:
        total_func = (
            stats.func_evaluations
            + stats.func_grad_evaluations
            + stats.func_grad_hess_evaluations
        )
        if total_func >= settings.func_evaluations:
            return Status.FUNCTION_EVALUATION_LIMIT

    if settings.grad_evaluations > 0:
        total_grad = (
            stats.grad_evaluations
            + stats.func_grad_evaluations
            + stats.func_grad_hess_evaluations
        )
        if total_grad >= settings.grad_evaluations:
            return Status.GRADIENT_EVALUATION_LIMIT

    if settings.hess_evaluations > 0:
        total_hess = stats.hess_evaluations + stats.func_grad_hess_evaluations
        if total_hess >= settings.hess_evaluations:
            return Status.HESSIAN_EVALUATION_LIMIT

    if settings.runtime > 0 and stats.runtime >= settings.runtime:
        return Status.RUNTIME_LIMIT

    if iter_type is IterationType.MAJOR_ITERATION and settings.major_iterations > 0:
        if stats.major_iterations >= settings.major_iterations:
            return Status.ITERATION_LIMIT

    return Status.NOT_TERMINATED


__all__ = ["check_convergence"]

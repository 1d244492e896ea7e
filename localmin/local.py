"""Sequential local minimization driver.

:func:`minimize` evaluates the objective at the starting point, then hands
control to an iterative method: the method proposes points and the
quantities it needs there, the driver evaluates them, tracks the best
location and stops at the first satisfied criterion in
:class:`~localmin.core.Settings`.

Example
-------
>>> import numpy as np
>>> from localmin import Problem, minimize
>>> def rosen(x):
...     return (1 - x[0])**2 + 100 * (x[1] - x[0]**2)**2
>>> def rosen_grad(x):
...     return np.array([
...         -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
...         200 * (x[1] - x[0] ** 2),
...     ])
>>> res = minimize(Problem(func=rosen, grad=rosen_grad), [-1.2, 1.0])
>>> round(res.fun, 6)
0.0
"""

from __future__ import annotations

import dataclasses
import math
import time
from typing import Any, Optional, Sequence

import numpy as np

from .convergence import check_convergence
from .core import (
    Array,
    EvaluationType,
    IterationType,
    Location,
    Needs,
    Result,
    Settings,
    Stats,
    Status,
)
from .errors import (
    ConfigurationError,
    FunctionInfError,
    FunctionNaNError,
    GradientInfError,
    GradientNaNError,
    StartingLocationError,
)
from .evaluate import evaluate
from .functions import FunctionInfo, implements
from .logging import get_logger
from .method import Method
from .quasi_newton import BFGS

logger = get_logger(__name__)


def minimize(
    problem: Any,
    x0: Sequence[float] | Array,
    settings: Optional[Settings] = None,
    method: Optional[Method] = None,
) -> Result:
    """Find a local minimum of ``problem`` starting from ``x0``.

    Parameters
    ----------
    problem:
        Objective exposing ``func(x)`` and optionally ``grad``,
        ``func_grad``, ``hess``, ``func_grad_hess`` and ``status``. See
        :class:`~localmin.core.Problem`.
    x0:
        Non-empty starting point. It is copied and never modified.
    settings:
        Stopping criteria. ``None`` uses :func:`~localmin.core.default_settings`.
    method:
        Optimization method. ``None`` picks :func:`default_method`.

    Returns
    -------
    Result
        Copies of the best location and the counters, the termination
        status, and the error that ended the run if a collaborator failed or
        the starting location was unusable.

    Raises
    ------
    ConfigurationError
        If the inputs are rejected before the first evaluation, including
        when the objective's ``status`` or the recorder's ``init`` raises.
    EvaluationError
        If the method requests an evaluation the objective cannot serve.
    """
    x0 = np.array(x0, dtype=float)
    if x0.ndim != 1 or x0.size == 0:
        raise ConfigurationError("initial point must be a non-empty one-dimensional sequence")

    start_time = time.perf_counter()
    info = FunctionInfo.from_objective(problem)
    if method is None:
        method = default_method(info)
    needs = method.needs()
    info.satisfies(needs)
    if info.is_statuser:
        # Only availability matters here; a terminal status is acted on in the loop.
        try:
            problem.status()
        except Exception as err:
            raise ConfigurationError(f"objective status check failed: {err}") from err
    settings = resolve_settings(settings, x0.size, needs)

    recorder = settings.recorder
    if recorder is not None:
        # Before any evaluation so that a broken recorder costs nothing.
        try:
            recorder.init(info)
        except Exception as err:
            raise ConfigurationError(f"recorder initialization failed: {err}") from err

    logger.debug(
        "minimizing %s in %d dimensions with %s",
        type(problem).__name__,
        x0.size,
        type(method).__name__,
    )
    stats = Stats()
    opt_loc = _starting_location(info, needs, x0, stats, settings)
    try:
        _check_starting_location(opt_loc)
    except StartingLocationError as err:
        logger.warning("minimization aborted: %s", err)
        stats.runtime = time.perf_counter() - start_time
        return Result(location=opt_loc.copy(), stats=stats, status=Status.FAILURE, error=err)
    eval_type = EvaluationType.NO_EVALUATION if settings.use_initial_data else _starting_evaluation(needs)

    stats.runtime = time.perf_counter() - start_time
    status = check_convergence(opt_loc, IterationType.INIT_ITERATION, stats, settings)
    error: Optional[BaseException] = None
    if recorder is not None:
        try:
            recorder.record(opt_loc, eval_type, IterationType.INIT_ITERATION, stats)
        except Exception as err:
            error = err
            if status is Status.NOT_TERMINATED:
                status = Status.FAILURE

    if status is Status.NOT_TERMINATED and error is None:
        status, error = _minimize(problem, info, method, settings, stats, opt_loc, start_time)

    if recorder is not None and error is None:
        try:
            recorder.record(opt_loc, EvaluationType.NO_EVALUATION, IterationType.POST_ITERATION, stats)
        except Exception as err:
            error = err

    stats.runtime = time.perf_counter() - start_time
    if error is not None:
        logger.warning("minimization stopped with %s: %s", status.name, error)
    else:
        logger.info(
            "minimization terminated with %s after %d major iterations, f=%g",
            status.name,
            stats.major_iterations,
            opt_loc.f,
        )
    return Result(
        location=opt_loc.copy(),
        stats=dataclasses.replace(stats),
        status=status,
        error=error,
    )


def default_method(info: FunctionInfo) -> Method:
    """Return the method used when the caller does not choose one.

    BFGS is used whenever the objective provides a gradient in some form.

    Raises:
        ConfigurationError: for objectives without a gradient, since no
            gradient-free method is available.
    """
    if info.has_gradient:
        return BFGS()
    raise ConfigurationError("no gradient-free default method is available; supply a method")


def resolve_settings(settings: Optional[Settings], dim: int, needs: Needs) -> Settings:
    """Validate ``settings`` and return the effective settings for a run."""
    if settings is None:
        return Settings()

    for name in ("func_evaluations", "grad_evaluations", "hess_evaluations", "major_iterations"):
        if getattr(settings, name) < 0:
            raise ConfigurationError(f"{name} must be non-negative")
    if settings.runtime < 0:
        raise ConfigurationError("runtime must be non-negative")

    if not settings.use_initial_data:
        return settings

    if settings.initial_function_value is None:
        raise ConfigurationError("use_initial_data requires initial_function_value")
    updates: dict[str, Any] = {"initial_function_value": float(settings.initial_function_value)}
    if needs.gradient:
        updates["initial_gradient"] = _initial_array(
            settings.initial_gradient, (dim,), "initial_gradient"
        )
    if needs.hessian:
        updates["initial_hessian"] = _initial_array(
            settings.initial_hessian, (dim, dim), "initial_hessian"
        )
    return dataclasses.replace(settings, **updates)


def _initial_array(value: Optional[Array], shape: tuple[int, ...], name: str) -> Array:
    if value is None:
        raise ConfigurationError(f"use_initial_data requires {name} for this method")
    arr = np.array(value, dtype=float)
    if arr.shape != shape:
        raise ConfigurationError(f"{name} has shape {arr.shape}, expected {shape}")
    return arr


def _starting_evaluation(needs: Needs) -> EvaluationType:
    if needs.hessian:
        return EvaluationType.FUNC_AND_GRAD_AND_HESS
    if needs.gradient:
        return EvaluationType.FUNC_AND_GRAD
    return EvaluationType.FUNC_ONLY


def _starting_location(
    info: FunctionInfo, needs: Needs, x0: Array, stats: Stats, settings: Settings
) -> Location:
    dim = x0.size
    loc = Location(x=x0.copy())
    if needs.gradient:
        loc.gradient = np.zeros(dim)
    if needs.hessian:
        loc.hessian = np.zeros((dim, dim))

    if settings.use_initial_data:
        loc.f = settings.initial_function_value
        if loc.gradient is not None:
            np.copyto(loc.gradient, settings.initial_gradient)
        if loc.hessian is not None:
            np.copyto(loc.hessian, settings.initial_hessian)
    else:
        evaluate(_starting_evaluation(needs), loc.x, loc, stats, info)
    return loc


def _check_starting_location(loc: Location) -> None:
    if math.isnan(loc.f):
        raise FunctionNaNError()
    if loc.f == math.inf:
        raise FunctionInfError()
    if loc.gradient is not None:
        bad = np.flatnonzero(~np.isfinite(loc.gradient))
        if bad.size:
            if np.isnan(loc.gradient[bad[0]]):
                raise GradientNaNError()
            raise GradientInfError()


def _minimize(
    problem: Any,
    info: FunctionInfo,
    method: Method,
    settings: Settings,
    stats: Stats,
    opt_loc: Location,
    start_time: float,
) -> tuple[Status, Optional[BaseException]]:
    """Run the method until a termination status is reached.

    ``opt_loc`` is updated in place with the best location found.
    """
    loc = opt_loc.copy()
    x_next = np.zeros_like(loc.x)
    recorder = settings.recorder
    method_is_statuser = implements(method, "status")

    try:
        eval_type, iter_type = method.init(loc, info, x_next)
    except Exception as err:
        return Status.FAILURE, err

    while True:
        if info.is_statuser:
            status, err = _poll_status(problem)
            if err is not None or status is not Status.NOT_TERMINATED:
                return status, err

        evaluate(eval_type, x_next, loc, stats, info)
        _update(loc, opt_loc, stats, iter_type, start_time)
        status = check_convergence(opt_loc, iter_type, stats, settings)

        if recorder is not None:
            try:
                recorder.record(loc, eval_type, iter_type, stats)
            except Exception as err:
                if status is Status.NOT_TERMINATED:
                    status = Status.FAILURE
                return status, err

        if status is not Status.NOT_TERMINATED:
            return status, None

        if method_is_statuser:
            status, err = _poll_status(method)
            if err is not None or status is not Status.NOT_TERMINATED:
                return status, err

        try:
            eval_type, iter_type = method.iterate(loc, x_next)
        except Exception as err:
            return Status.FAILURE, err


def _poll_status(statuser: Any) -> tuple[Status, Optional[BaseException]]:
    try:
        return statuser.status(), None
    except Exception as err:
        return Status.FAILURE, err


def _update(
    loc: Location,
    opt_loc: Location,
    stats: Stats,
    iter_type: IterationType,
    start_time: float,
) -> None:
    if iter_type is IterationType.MAJOR_ITERATION:
        stats.major_iterations += 1
    # Ties go to the newer location.
    if loc.f <= opt_loc.f:
        opt_loc.copy_from(loc)
    stats.runtime = time.perf_counter() - start_time


__all__ = ["minimize", "default_method", "resolve_settings"]

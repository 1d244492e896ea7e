"""Recorders receive every location produced during a minimization run."""

from __future__ import annotations

import math
import sys
import time
from dataclasses import dataclass, field
from typing import IO, Optional, Protocol

import numpy as np

from .core import EvaluationType, IterationType, Location, Stats
from .functions import FunctionInfo

_BASE_TEMPLATE = "{:>9}  {:>16}  {:>9}  {:>22}"
_COLUMN_TEMPLATE = "  {:>22}"

# Iteration types at which a location is complete.
_REPORTED = (
    IterationType.INIT_ITERATION,
    IterationType.MAJOR_ITERATION,
    IterationType.POST_ITERATION,
)


class Recorder(Protocol):
    """Protocol for progress sinks.

    ``init`` is called once before the objective is evaluated. ``record`` is
    called for every produced location, after its convergence status has
    been computed, and once more with the best location and
    ``IterationType.POST_ITERATION`` when the run ends. Raising from either
    method stops the run.
    """

    def init(self, info: FunctionInfo) -> None:
        ...

    def record(
        self,
        loc: Location,
        eval_type: EvaluationType,
        iter_type: IterationType,
        stats: Stats,
    ) -> None:
        ...


class Printer:
    """
    Writes a column-format progress table.

    Values are written at initial, major and post iterations, at most once
    every ``value_interval`` seconds except for the final post iteration.
    The heading is repeated every ``heading_interval`` rows. Gradient and
    Hessian norm columns appear when the location tracks them.
    """

    def __init__(
        self,
        stream: Optional[IO[str]] = None,
        heading_interval: int = 30,
        value_interval: float = 0.5,
    ) -> None:
        self.stream = stream
        self.heading_interval = heading_interval
        self.value_interval = value_interval
        self._last_heading = 0
        self._last_value = -math.inf

    def init(self, info: FunctionInfo) -> None:
        del info
        self._last_heading = self.heading_interval
        self._last_value = -math.inf

    def record(
        self,
        loc: Location,
        eval_type: EvaluationType,
        iter_type: IterationType,
        stats: Stats,
    ) -> None:
        del eval_type
        if iter_type not in _REPORTED:
            return
        is_post = iter_type is IterationType.POST_ITERATION
        now = time.monotonic()
        if not is_post and now - self._last_value < self.value_interval:
            return
        self._last_value = now

        stream = self.stream if self.stream is not None else sys.stdout
        if self._last_heading >= self.heading_interval and not is_post:
            self._last_heading = 1
            heading = _BASE_TEMPLATE.format("Iter", "Runtime", "FuncEval", "Func")
            if loc.gradient is not None:
                heading += _COLUMN_TEMPLATE.format("Gradient")
            if loc.hessian is not None:
                heading += _COLUMN_TEMPLATE.format("Hessian")
            print("\n" + heading, file=stream)
        else:
            self._last_heading += 1

        values = _BASE_TEMPLATE.format(
            stats.major_iterations,
            f"{stats.runtime:.6f}s",
            stats.func_evaluations,
            f"{loc.f:.15g}",
        )
        if loc.gradient is not None:
            values += _COLUMN_TEMPLATE.format(f"{np.linalg.norm(loc.gradient, ord=np.inf):.15g}")
        if loc.hessian is not None:
            values += _COLUMN_TEMPLATE.format(f"{_spectral_norm(loc.hessian):.15g}")
        print(values, file=stream)


def _spectral_norm(mat: np.ndarray) -> float:
    # An invalidated Hessian holds NaN, which the SVD rejects.
    if not np.all(np.isfinite(mat)):
        return float("nan")
    return float(np.linalg.norm(mat, ord=2))


@dataclass
class History:
    """Keeps a copy of every complete location reported during a run."""

    locations: list[Location] = field(default_factory=list)
    iteration_types: list[IterationType] = field(default_factory=list)

    def init(self, info: FunctionInfo) -> None:
        del info
        self.locations.clear()
        self.iteration_types.clear()

    def record(
        self,
        loc: Location,
        eval_type: EvaluationType,
        iter_type: IterationType,
        stats: Stats,
    ) -> None:
        del eval_type, stats
        if iter_type in _REPORTED:
            self.locations.append(loc.copy())
            self.iteration_types.append(iter_type)


__all__ = ["Recorder", "Printer", "History"]

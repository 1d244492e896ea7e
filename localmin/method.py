"""Protocols implemented by optimization methods plugged into the driver."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .core import Array, EvaluationType, IterationType, Location, Needs, Status
from .functions import FunctionInfo


class Method(Protocol):
    """
    Protocol for iterative optimization methods.

    The driver owns the working location. A method reads it and writes the
    next point to evaluate into ``x_next`` in place, returning which
    quantities it needs there and what kind of iteration the point belongs
    to. Methods keep state between calls, so one instance must not be shared
    by concurrent runs.
    """

    def init(
        self, loc: Location, info: FunctionInfo, x_next: Array
    ) -> tuple[EvaluationType, IterationType]:
        """Start from the fully evaluated ``loc`` and propose the first point."""
        ...

    def iterate(self, loc: Location, x_next: Array) -> tuple[EvaluationType, IterationType]:
        """Consume the evaluated ``loc`` and propose the next point."""
        ...

    def needs(self) -> Needs:
        """Derivative information the method reads from locations."""
        ...


@runtime_checkable
class Statuser(Protocol):
    """Optional protocol for collaborators that can ask the driver to stop.

    ``status`` returns ``Status.NOT_TERMINATED`` to continue, another status
    to stop, or raises to stop with :attr:`Status.FAILURE`.
    """

    def status(self) -> Status:
        ...


__all__ = ["Method", "Statuser"]

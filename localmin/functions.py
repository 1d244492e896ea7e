"""Detection of the evaluation forms an objective supports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .core import Needs
from .errors import ConfigurationError

# Call names an objective may expose, in the order they are looked up.
CALLS = ("func", "grad", "func_grad", "hess", "func_grad_hess")


def implements(obj: Any, name: str) -> bool:
    """Return True if ``obj`` exposes a callable attribute ``name``."""
    return callable(getattr(obj, name, None))


@dataclass(frozen=True)
class FunctionInfo:
    """
    Capabilities of an objective, computed once before a run.

    The record is handed to the method and the recorder at initialization so
    they can adapt to what the objective offers without probing it again.
    """

    is_function: bool
    is_gradient: bool
    is_function_gradient: bool
    is_hessian: bool
    is_function_gradient_hessian: bool
    is_statuser: bool
    objective: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_objective(cls, objective: Any) -> "FunctionInfo":
        if not implements(objective, "func"):
            raise ConfigurationError(
                f"objective {type(objective).__name__} does not implement func(x)"
            )
        return cls(
            is_function=True,
            is_gradient=implements(objective, "grad"),
            is_function_gradient=implements(objective, "func_grad"),
            is_hessian=implements(objective, "hess"),
            is_function_gradient_hessian=implements(objective, "func_grad_hess"),
            is_statuser=implements(objective, "status"),
            objective=objective,
        )

    @property
    def has_gradient(self) -> bool:
        """True if some call form produces the gradient."""
        return self.is_gradient or self.is_function_gradient or self.is_function_gradient_hessian

    @property
    def has_hessian(self) -> bool:
        """True if some call form produces the Hessian."""
        return self.is_hessian or self.is_function_gradient_hessian

    def supports(self, call: str) -> bool:
        flags = {
            "func": self.is_function,
            "grad": self.is_gradient,
            "func_grad": self.is_function_gradient,
            "hess": self.is_hessian,
            "func_grad_hess": self.is_function_gradient_hessian,
        }
        try:
            return flags[call]
        except KeyError:
            raise ValueError(f"unknown objective call {call!r}") from None

    def satisfies(self, needs: Needs) -> None:
        """Raise ConfigurationError if the objective cannot serve ``needs``."""
        if needs.gradient and not self.has_gradient:
            raise ConfigurationError(
                "method requires a gradient but the objective implements none of "
                "grad, func_grad or func_grad_hess"
            )
        if needs.hessian and not self.has_hessian:
            raise ConfigurationError(
                "method requires a Hessian but the objective implements neither "
                "hess nor func_grad_hess"
            )


__all__ = ["CALLS", "FunctionInfo", "implements"]

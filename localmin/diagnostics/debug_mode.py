"""Debug mode for localmin.

While debug mode is on, every gradient and Hessian an objective returns is
validated before it is stored in a location. The flag starts from the
``LOCALMIN_DEBUG`` environment variable.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

import numpy as np

from ..errors import EvaluationError

_DEBUG_ENV_VAR = "LOCALMIN_DEBUG"
_TRUTHY = frozenset({"1", "true", "yes", "on"})

_debug_enabled: bool = os.getenv(_DEBUG_ENV_VAR, "0").strip().lower() in _TRUTHY


def is_debug_enabled() -> bool:
    return _debug_enabled


def set_debug_enabled(enabled: bool) -> None:
    global _debug_enabled
    _debug_enabled = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Temporarily switch debug mode, restoring the previous flag on exit.

    Example
    -------
    >>> with debug_context(True):
    ...     # objective outputs are validated inside the block
    ...     pass
    """
    global _debug_enabled
    prev = _debug_enabled
    _debug_enabled = bool(enabled)
    try:
        yield
    finally:
        _debug_enabled = prev


def check_gradient(grad: np.ndarray, dim: int) -> None:
    """Raise :class:`EvaluationError` if debug mode is on and ``grad`` is not ``(dim,)``."""
    if _debug_enabled and grad.shape != (dim,):
        raise EvaluationError(f"gradient has shape {grad.shape}, expected {(dim,)}")


def check_hessian(hess: np.ndarray, dim: int) -> None:
    """
    Raise :class:`EvaluationError` if debug mode is on and ``hess`` is not a
    symmetric ``(dim, dim)`` matrix. NaN entries compare equal to each other.
    """
    if not _debug_enabled:
        return
    if hess.shape != (dim, dim):
        raise EvaluationError(f"Hessian has shape {hess.shape}, expected {(dim, dim)}")
    if not np.allclose(hess, hess.T, equal_nan=True):
        raise EvaluationError("Hessian is not symmetric")

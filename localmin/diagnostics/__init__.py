"""Diagnostics and debugging utilities for localmin."""

from .debug_mode import (
    check_gradient,
    check_hessian,
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

__all__ = [
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    "check_gradient",
    "check_hessian",
]

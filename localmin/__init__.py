"""localmin - a sequential local-minimization driver for NumPy objectives."""

__version__ = "0.1.0"

from .convergence import check_convergence
from .core import (
    EvaluationType,
    IterationType,
    Location,
    Needs,
    Problem,
    Result,
    Settings,
    Stats,
    Status,
    default_settings,
)
from .diagnostics import debug_context, is_debug_enabled, set_debug_enabled
from .errors import (
    ConfigurationError,
    EvaluationError,
    FunctionInfError,
    FunctionNaNError,
    GradientInfError,
    GradientNaNError,
    LinesearchError,
    NoProgressError,
    OptimizeError,
    StartingLocationError,
)
from .evaluate import evaluate, plan_evaluation
from .functions import FunctionInfo
from .gradient import GradientDescent
from .line_search import Backtracking, Bisection, Linesearcher
from .linesearch_method import LinesearchMethod
from .local import default_method, minimize, resolve_settings
from .logging import configure_logging, get_logger
from .method import Method, Statuser
from .newton import Newton
from .quasi_newton import BFGS, LBFGS
from .recorder import History, Printer, Recorder

__all__ = [
    "__version__",
    # Driver
    "minimize",
    "default_method",
    "resolve_settings",
    "check_convergence",
    "evaluate",
    "plan_evaluation",
    "FunctionInfo",
    # Types
    "EvaluationType",
    "IterationType",
    "Location",
    "Needs",
    "Problem",
    "Result",
    "Settings",
    "Stats",
    "Status",
    "default_settings",
    # Methods
    "Method",
    "Statuser",
    "LinesearchMethod",
    "BFGS",
    "LBFGS",
    "GradientDescent",
    "Newton",
    "Linesearcher",
    "Backtracking",
    "Bisection",
    # Recorders
    "Recorder",
    "Printer",
    "History",
    # Errors
    "OptimizeError",
    "ConfigurationError",
    "EvaluationError",
    "StartingLocationError",
    "FunctionNaNError",
    "FunctionInfError",
    "GradientNaNError",
    "GradientInfError",
    "LinesearchError",
    "NoProgressError",
    # Diagnostics and logging
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    "get_logger",
    "configure_logging",
]

"""
Example: Local Minimization with localmin

This example minimizes the Rosenbrock function with each of the available
methods, shows how evaluation caps and recorders change a run, and prints
the counters the driver keeps.
"""

import io
import sys

import numpy as np

from localmin import (
    BFGS,
    LBFGS,
    GradientDescent,
    History,
    Newton,
    Printer,
    Problem,
    Settings,
    configure_logging,
    minimize,
)


def rosenbrock(x):
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def rosenbrock_grad(x):
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


def rosenbrock_hess(x):
    return np.array(
        [
            [1200 * x[0] ** 2 - 400 * x[1] + 2, -400 * x[0]],
            [-400 * x[0], 200.0],
        ]
    )


PROBLEM = Problem(func=rosenbrock, grad=rosenbrock_grad, hess=rosenbrock_hess)
X0 = np.array([-1.2, 1.0])


def example_methods():
    """Example: Compare the methods on the same problem."""
    print("=" * 60)
    print("Example 1: Methods on the Rosenbrock function")
    print("=" * 60)

    methods = {
        "BFGS": BFGS(),
        "LBFGS": LBFGS(store=5),
        "GradientDescent": GradientDescent(),
        "Newton": Newton(),
    }
    settings = Settings(major_iterations=2000)
    for name, method in methods.items():
        result = minimize(PROBLEM, X0, settings, method)
        print(f"{name}")
        print(f"  Status: {result.status.name}")
        print(f"  x = {result.x}, f = {result.fun:.3e}")
        print(
            f"  iterations: {result.stats.major_iterations}, "
            f"func: {result.stats.func_evaluations}, "
            f"grad: {result.stats.grad_evaluations}, "
            f"hess: {result.stats.hess_evaluations}"
        )
    print()


def example_evaluation_cap():
    """Example: Stop after a fixed number of function evaluations."""
    print("=" * 60)
    print("Example 2: Function evaluation cap")
    print("=" * 60)

    result = minimize(PROBLEM, X0, Settings(func_evaluations=20))
    print(f"Status: {result.status.name}")
    print(f"Best value after {result.stats.func_evaluations} evaluations: {result.fun:.6f}")
    print()


def example_recorders():
    """Example: Watch a run with the Printer and keep its History."""
    print("=" * 60)
    print("Example 3: Recorders")
    print("=" * 60)

    result = minimize(PROBLEM, X0, Settings(major_iterations=10, recorder=Printer(value_interval=0.0)))
    print(f"Status: {result.status.name}")

    history = History()
    minimize(PROBLEM, X0, Settings(recorder=history))
    values = [loc.f for loc in history.locations]
    print(f"Recorded {len(values)} locations, first f = {values[0]:.3f}, last f = {values[-1]:.3e}")

    # A Printer can write anywhere.
    buffer = io.StringIO()
    minimize(PROBLEM, X0, Settings(major_iterations=3, recorder=Printer(stream=buffer)))
    print(f"Captured {len(buffer.getvalue().splitlines())} lines of progress output")
    print()


def example_logging():
    """Example: Let the driver report each run on stdout."""
    print("=" * 60)
    print("Example 4: Driver log messages")
    print("=" * 60)

    configure_logging("INFO", stream=sys.stdout)
    minimize(PROBLEM, X0, Settings(major_iterations=5))
    configure_logging("WARNING")
    print()


if __name__ == "__main__":
    example_methods()
    example_evaluation_cap()
    example_recorders()
    example_logging()

import numpy as np
import pytest

from localmin import (
    Backtracking,
    Bisection,
    EvaluationType,
    LinesearchError,
    Problem,
    Settings,
    Status,
    minimize,
)
from localmin.line_search import armijo_condition_met, strong_wolfe_conditions_met
from localmin.quasi_newton import BFGS


def phi(t: float) -> float:
    return (t - 1.0) ** 2


def dphi(t: float) -> float:
    return 2.0 * (t - 1.0)


def run_search(searcher, step: float, max_iter: int = 50) -> float:
    searcher.init(phi(0.0), dphi(0.0), step)
    for _ in range(max_iter):
        if searcher.finished(phi(step), dphi(step)):
            return step
        step, _ = searcher.iterate(phi(step), dphi(step))
    raise AssertionError("line search did not finish")


def test_armijo_condition():
    assert armijo_condition_met(0.5, 1.0, -1.0, 0.5, 1e-4)
    assert not armijo_condition_met(1.0, 1.0, -1.0, 0.5, 1e-4)


def test_strong_wolfe_conditions():
    assert strong_wolfe_conditions_met(0.0, 0.1, 1.0, -1.0, 1.0, 1e-4, 0.9)
    assert not strong_wolfe_conditions_met(0.0, -0.95, 1.0, -1.0, 1.0, 1e-4, 0.9)
    assert not strong_wolfe_conditions_met(2.0, 0.0, 1.0, -1.0, 1.0, 1e-4, 0.9)


def test_backtracking_halves_until_armijo():
    searcher = Backtracking()
    assert searcher.init(phi(0.0), dphi(0.0), 4.0) is EvaluationType.FUNC_ONLY
    assert run_search(searcher, 4.0) == 1.0


def test_backtracking_accepts_first_step_with_decrease():
    searcher = Backtracking()
    assert run_search(searcher, 0.5) == 0.5


def test_backtracking_gives_up_below_minimum_step():
    searcher = Backtracking()
    searcher.init(0.0, -1.0, 1.0)
    with pytest.raises(LinesearchError):
        for _ in range(200):
            step, eval_type = searcher.iterate(1.0, 0.0)
            assert eval_type is EvaluationType.FUNC_ONLY


@pytest.mark.parametrize("kwargs", [{"func_const": 1.5}, {"func_const": 0.0}, {"decrease": 1.1}])
def test_backtracking_rejects_invalid_params(kwargs):
    with pytest.raises(ValueError):
        Backtracking(**kwargs)


def test_backtracking_rejects_non_positive_step():
    with pytest.raises(ValueError):
        Backtracking().init(1.0, -1.0, 0.0)


def test_bisection_brackets_then_bisects():
    searcher = Bisection()
    assert searcher.init(phi(0.0), dphi(0.0), 4.0) is EvaluationType.FUNC_AND_GRAD
    assert run_search(searcher, 4.0) == 1.0


def test_bisection_expands_short_steps():
    searcher = Bisection(grad_const=0.1)
    step = run_search(searcher, 0.125)
    assert abs(dphi(step)) <= 0.1 * abs(dphi(0.0))
    assert step > 0.125


def test_bisection_requires_descent_direction():
    with pytest.raises(ValueError, match="descent direction"):
        Bisection().init(1.0, 0.5, 1.0)


@pytest.mark.parametrize("grad_const", [0.0, 1.0, -0.5])
def test_bisection_rejects_invalid_curvature_constant(grad_const):
    with pytest.raises(ValueError):
        Bisection(grad_const=grad_const)


def test_bfgs_with_backtracking_still_descends():
    problem = Problem(func=lambda x: float(x @ x), grad=lambda x: 2 * x)
    x0 = np.array([3.0, -4.0])
    res = minimize(problem, x0, Settings(major_iterations=20), BFGS(linesearcher=Backtracking()))
    assert res.status in (Status.GRADIENT_THRESHOLD, Status.ITERATION_LIMIT)
    assert res.fun < 25.0

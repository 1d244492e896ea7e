from dataclasses import replace

import numpy as np
import pytest

from localmin import Bisection, GradientDescent, Location, Problem, Settings, Status, minimize


def test_gradient_descent_quadratic_converges():
    A = np.array([[4.0, 1.0], [1.0, 3.0]])
    b = np.array([1.0, 2.0])

    def fun(x: np.ndarray) -> float:
        return 0.5 * x @ (A @ x) - b @ x

    def grad(x: np.ndarray) -> np.ndarray:
        return A @ x - b

    problem = Problem(func=fun, grad=grad)
    res = minimize(problem, np.array([3.0, -1.0]), Settings(major_iterations=1000), GradientDescent())
    expected = np.linalg.solve(A, b)
    assert res.status is Status.GRADIENT_THRESHOLD
    assert np.allclose(res.x, expected, atol=1e-5)


def test_gradient_descent_reduces_rosenbrock():
    def rosen(x: np.ndarray) -> float:
        return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2

    def rosen_grad(x: np.ndarray) -> np.ndarray:
        return np.array(
            [
                -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
                200 * (x[1] - x[0] ** 2),
            ]
        )

    problem = Problem(func=rosen, grad=rosen_grad)
    x0 = np.array([-1.2, 1.0])
    res = minimize(problem, x0, Settings(major_iterations=200), GradientDescent())
    assert res.status is Status.ITERATION_LIMIT
    assert res.fun < rosen(x0)


def test_gradient_descent_with_strong_wolfe_search():
    problem = Problem(func=lambda x: float(np.sum((x - 0.5) ** 2)), grad=lambda x: 2 * (x - 0.5))
    res = minimize(problem, np.array([2.0, -1.0]), method=GradientDescent(Bisection()))
    assert res.status is Status.GRADIENT_THRESHOLD
    assert np.allclose(res.x, [0.5, 0.5], atol=1e-6)


def test_gradient_descent_deterministic():
    def f(x: np.ndarray) -> float:
        return float(np.sum(x**2))

    def grad(x: np.ndarray) -> np.ndarray:
        return 2 * x

    problem = Problem(func=f, grad=grad)
    start = np.array([0.5, -0.25])
    res1 = minimize(problem, start, Settings(major_iterations=5), GradientDescent())
    res2 = minimize(problem, start, Settings(major_iterations=5), GradientDescent())
    assert np.array_equal(res1.x, res2.x)
    assert replace(res1.stats, runtime=0.0) == replace(res2.stats, runtime=0.0)


def test_first_step_is_normalized():
    loc = Location(x=np.zeros(2), f=1.0, gradient=np.array([0.0, -4.0]))
    direction = np.zeros(2)
    step = GradientDescent().init_direction(loc, direction)
    assert np.allclose(direction, [0.0, 4.0])
    assert step == 0.25


def test_next_step_follows_last_decrease():
    method = GradientDescent()
    direction = np.zeros(1)
    method.init_direction(Location(x=np.zeros(1), f=4.0, gradient=np.array([2.0])), direction)
    step = method.next_direction(Location(x=np.ones(1), f=3.0, gradient=np.array([1.0])), direction)
    # 2 * 1.01 * (3 - 4) / -(1 * 1)
    assert step == 1.0
    step = method.next_direction(Location(x=np.ones(1), f=2.9, gradient=np.array([10.0])), direction)
    assert step == pytest.approx(2.02 * 0.1 / 100)

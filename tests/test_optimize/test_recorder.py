from io import StringIO

import numpy as np

from localmin import (
    EvaluationType,
    FunctionInfo,
    History,
    IterationType,
    Location,
    Printer,
    Problem,
    Settings,
    Stats,
    minimize,
)

MAJOR = IterationType.MAJOR_ITERATION
NO_EVAL = EvaluationType.NO_EVALUATION
INFO = FunctionInfo.from_objective(Problem(func=lambda x: 0.0))


def make_printer(**kwargs):
    stream = StringIO()
    printer = Printer(stream=stream, **kwargs)
    printer.init(INFO)
    return printer, stream


def loc_with(gradient=None, hessian=None):
    return Location(x=np.zeros(2), f=1.5, gradient=gradient, hessian=hessian)


def test_heading_repeats_every_interval():
    printer, stream = make_printer(heading_interval=2, value_interval=0.0)
    for _ in range(5):
        printer.record(loc_with(), NO_EVAL, MAJOR, Stats())
    assert stream.getvalue().count("Iter") == 3


def test_post_iteration_never_prints_heading():
    printer, stream = make_printer(value_interval=0.0)
    printer.record(loc_with(), NO_EVAL, IterationType.POST_ITERATION, Stats(major_iterations=4))
    output = stream.getvalue()
    assert "Iter" not in output
    assert output.split() == ["4", "0.000000s", "0", "1.5"]


def test_minor_iterations_are_not_printed():
    printer, stream = make_printer(value_interval=0.0)
    printer.record(loc_with(), EvaluationType.FUNC_ONLY, IterationType.MINOR_ITERATION, Stats())
    assert stream.getvalue() == ""


def test_rows_are_throttled_except_post():
    printer, stream = make_printer(value_interval=1e6)
    for _ in range(3):
        printer.record(loc_with(), NO_EVAL, MAJOR, Stats())
    printer.record(loc_with(), NO_EVAL, IterationType.POST_ITERATION, Stats())
    lines = [line for line in stream.getvalue().splitlines() if line.strip()]
    assert len(lines) == 3
    assert lines[0].split() == ["Iter", "Runtime", "FuncEval", "Func"]


def test_derivative_columns_follow_location():
    printer, stream = make_printer(value_interval=0.0)
    hessian = np.full((2, 2), np.nan)
    printer.record(loc_with(np.array([3.0, -4.0]), hessian), NO_EVAL, MAJOR, Stats())
    heading, values = [line for line in stream.getvalue().splitlines() if line.strip()]
    assert heading.split()[-2:] == ["Gradient", "Hessian"]
    assert values.split()[-2:] == ["4", "nan"]


def test_printer_in_a_run():
    stream = StringIO()
    problem = Problem(func=lambda x: float(x @ x), grad=lambda x: 2 * x)
    minimize(problem, np.array([1.0, 2.0]), Settings(recorder=Printer(stream=stream, value_interval=0.0)))
    lines = [line for line in stream.getvalue().splitlines() if line.strip()]
    assert lines[0].split() == ["Iter", "Runtime", "FuncEval", "Func", "Gradient"]
    assert len(lines) >= 3


def test_history_records_copies_of_complete_locations():
    history = History()
    history.init(INFO)
    loc = loc_with(np.ones(2))
    history.record(loc, NO_EVAL, IterationType.INIT_ITERATION, Stats())
    history.record(loc, EvaluationType.FUNC_ONLY, IterationType.MINOR_ITERATION, Stats())
    loc.gradient[0] = 7.0
    history.record(loc, NO_EVAL, MAJOR, Stats())
    assert history.iteration_types == [IterationType.INIT_ITERATION, MAJOR]
    assert history.locations[0].gradient[0] == 1.0
    assert history.locations[1].gradient[0] == 7.0


def test_history_is_cleared_on_init():
    history = History()
    history.record(loc_with(), NO_EVAL, MAJOR, Stats())
    history.init(INFO)
    assert history.locations == []

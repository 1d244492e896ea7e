"""Tests for logging utilities."""

import logging
from io import StringIO

import numpy as np
import pytest

from localmin import Problem, minimize
from localmin.logging import configure_logging, get_logger


@pytest.fixture
def package_logger():
    """Give a test the package logger and restore its handlers and level afterwards."""
    logger = get_logger()
    handlers, level = logger.handlers[:], logger.level
    yield logger
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


def test_get_logger_returns_logger():
    """Test that get_logger returns a logger instance."""
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "localmin.test_module"


def test_get_logger_keeps_package_names():
    """Test that module names inside the package are not prefixed twice."""
    assert get_logger("localmin.local").name == "localmin.local"
    assert get_logger().name == "localmin"
    assert get_logger("localmin") is get_logger()


def test_get_logger_same_name_same_logger():
    assert get_logger("test_module") is get_logger("localmin.test_module")
    assert get_logger("module1") is not get_logger("module2")


def test_module_loggers_defer_to_package_logger():
    """Only the package logger owns a handler; it keeps output off the root logger."""
    logger = get_logger("test_module")
    assert logger.handlers == []
    assert logger.level == logging.NOTSET
    assert logger.propagate is True
    assert len(get_logger().handlers) == 1
    assert get_logger().propagate is False


def test_configure_logging(package_logger):
    """Test configure_logging function."""
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)

    get_logger("test_module").debug("Debug message")

    assert "[DEBUG] localmin.test_module: Debug message" in stream.getvalue()


def test_configure_logging_replaces_handler(package_logger):
    first, second = StringIO(), StringIO()
    configure_logging("INFO", stream=first)
    configure_logging("INFO", stream=second, format_string="%(message)s")

    get_logger("test_module").info("hello")

    assert first.getvalue() == ""
    assert second.getvalue() == "hello\n"
    assert len(package_logger.handlers) == 1


def test_configure_logging_string_level(package_logger):
    assert configure_logging("error").level == logging.ERROR
    assert not get_logger("test_module").isEnabledFor(logging.WARNING)


def test_level_from_environment(package_logger, monkeypatch: pytest.MonkeyPatch):
    """A fresh package logger takes its level from LOCALMIN_LOG_LEVEL."""
    monkeypatch.setenv("LOCALMIN_LOG_LEVEL", "debug")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    assert get_logger("test_module").getEffectiveLevel() == logging.DEBUG


def test_driver_reports_termination_at_info_level(package_logger):
    """Test that a finished run is logged by the driver logger."""
    stream = StringIO()
    problem = Problem(func=lambda x: float(x @ x), grad=lambda x: 2 * x)
    configure_logging(level=logging.INFO, stream=stream)
    minimize(problem, np.array([1.0, -2.0]))
    assert "[INFO] localmin.local:" in stream.getvalue()
    assert "GRADIENT_THRESHOLD" in stream.getvalue()

import logging

import pytest

import config
import logging_setup
from logging_setup import configure_logging, get_logger


@pytest.fixture()
def pkg_logger(monkeypatch):
    logger = logging.getLogger("expense_tracker")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    logger.handlers = []
    logger.propagate = True
    yield logger
    logger.level, logger.handlers, logger.propagate = saved


def test_configure_attaches_one_handler(pkg_logger):
    configure_logging("debug")
    configure_logging("error")

    assert len(pkg_logger.handlers) == 1
    assert pkg_logger.level == logging.DEBUG
    assert get_logger("expense_tracker.store").getEffectiveLevel() == logging.DEBUG


def test_level_comes_from_environment_setting(pkg_logger, monkeypatch):
    monkeypatch.setattr(config, "LOG_LEVEL", "warning")
    configure_logging()
    assert pkg_logger.level == logging.WARNING


def test_unknown_level_falls_back_to_info(pkg_logger, monkeypatch):
    monkeypatch.setattr(config, "LOG_LEVEL", None)
    configure_logging("chatty")
    assert pkg_logger.level == logging.INFO

"""Tests for chatsift.logging_setup."""

import logging

import pytest
from rich.logging import RichHandler

from chatsift.logging_setup import configure_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.captureWarnings(False)


def _managed(root):
    return [h for h in root.handlers if isinstance(h, RichHandler) and getattr(h, "_chatsift_managed", False)]


def test_configure_logging_is_idempotent(root_logger):
    configure_logging()
    configure_logging()
    assert len(_managed(root_logger)) == 1


def test_level_from_argument(root_logger):
    configure_logging("debug")
    assert root_logger.level == logging.DEBUG


def test_level_from_environment(root_logger, monkeypatch):
    monkeypatch.setenv("CHATSIFT_LOG_LEVEL", "WARNING")
    configure_logging()
    assert root_logger.level == logging.WARNING


def test_unknown_level_falls_back_to_info(root_logger):
    configure_logging("chatty")
    assert root_logger.level == logging.INFO

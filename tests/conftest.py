"""Shared fixtures for the test suite."""

import logging

import pytest


@pytest.fixture
def silent_logger():
    """A logger that swallows everything, so tests stay quiet."""
    logger = logging.getLogger("logicsudoku.tests.silent")
    logger.handlers = [logging.NullHandler()]
    logger.propagate = False
    return logger

"""Shared fixtures for pipedit tests."""

from __future__ import annotations

import pytest

from pipedit.core.logging import reset_loggers


@pytest.fixture(autouse=True)
def fresh_loggers() -> None:
    """Give every test its own component loggers and default settings."""
    reset_loggers()
    yield
    reset_loggers()

"""Pytest configuration and shared fixtures for bulky tests."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

from bulky._logging import clear_log_hooks


@pytest.fixture
def restore_logging() -> Generator[None]:
    """Restore root logger handlers, level and log hooks after the test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    clear_log_hooks()
    yield
    clear_log_hooks()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def uris() -> list[str]:
    """Two valid URIs, an invalid one, then another valid one."""
    return ['http://validUri', 'ftp://anotherValidUri', 'invalid\nuri', 'http://goldenUri']

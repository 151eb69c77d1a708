"""Shared fixtures for the test suite."""

import io
import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class FailingSource:
    """Binary source yielding some lines, then failing like a broken disk."""

    def __init__(self, lines):
        self.lines = lines

    def __iter__(self):
        yield from self.lines
        raise OSError("device not ready")


class FailingSink:
    """Binary sink accepting ``allowed`` writes, then failing."""

    def __init__(self, allowed):
        self.allowed = allowed
        self.buffer = io.BytesIO()

    def write(self, data):
        if self.allowed == 0:
            raise OSError("no space left on device")
        self.allowed -= 1
        return self.buffer.write(data)


@pytest.fixture
def failing_source():
    return FailingSource


@pytest.fixture
def failing_sink():
    return FailingSink

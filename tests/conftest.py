"""Shared fixtures."""

import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    """Collect loguru records emitted during the test as ``"LEVEL message"``."""
    messages: list[str] = []
    sink_id = logger.add(lambda m: messages.append(m.rstrip("\n")), format="{level} {message}")
    yield messages
    logger.remove(sink_id)

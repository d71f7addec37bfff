import logging

import pytest

from scene_inject import Scene
from scene_inject.constants import LOGGER

log_capture: list[logging.LogRecord] = []


class ListLogHandler(logging.Handler):
    def emit(self, record):
        log_capture.append(record)


@pytest.fixture(autouse=True)
def reset_logging_capture():
    log_capture.clear()


@pytest.fixture
def scene_log():
    """Records emitted on the scene_inject logger during the test."""
    handler = ListLogHandler(level=logging.DEBUG)
    old_level = LOGGER.level
    LOGGER.addHandler(handler)
    LOGGER.setLevel(logging.DEBUG)
    try:
        yield log_capture
    finally:
        LOGGER.removeHandler(handler)
        LOGGER.setLevel(old_level)


@pytest.fixture
def scene():
    return Scene()

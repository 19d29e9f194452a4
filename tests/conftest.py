import logging

import pytest

from pico_registry.constants import LOGGER_NAME

log_capture: list[str] = []


class ListLogHandler(logging.Handler):
    def emit(self, record):
        log_capture.append(self.format(record))


@pytest.fixture(autouse=True)
def reset_logging_capture():
    log_capture.clear()


@pytest.fixture
def captured_logs():
    logger = logging.getLogger(LOGGER_NAME)
    handler = ListLogHandler()
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield log_capture
    logger.removeHandler(handler)
    logger.setLevel(previous)

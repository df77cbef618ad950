import logging

import pytest

from logging_config import LOGGER_NAME
from strokes import Stroke, Template


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds=1.0):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def make_stroke(*pts, start_time=0.0, end_time=1.0):
    return Stroke.from_points(pts, start_time=start_time, end_time=end_time)


def horizontal(length=0.3, y=0.0, n=4):
    step = length / (n - 1)
    return make_stroke(*[(i * step, y, 0.0) for i in range(n)])


def vertical(length=0.3, x=0.0, n=4):
    step = length / (n - 1)
    return make_stroke(*[(x, length - i * step, 0.0) for i in range(n)])


@pytest.fixture
def one():
    return Template("一", (horizontal(),))


@pytest.fixture
def ten():
    return Template("十", (horizontal(y=0.15), vertical(x=0.15)))

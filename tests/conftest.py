import logging

import numpy as np
import pytest

from bounds import FieldBounds, reset_field_bounds


class StubRng:
    """Generator stand-in returning scripted values, then a constant."""
    def __init__(self, values=(), default=0.5):
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self):
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default


@pytest.fixture(autouse=True)
def _isolate_field_bounds():
    reset_field_bounds()
    yield
    reset_field_bounds()


@pytest.fixture
def bounds():
    return FieldBounds(0.031, 0.053, 0.006)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def stub_rng():
    return StubRng


@pytest.fixture
def debug_logs(caplog):
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)

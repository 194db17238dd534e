import numpy as np
import pytest


class RecordingSurface:
    """Drawing surface that remembers every call instead of painting."""
    def __init__(self, size=(800, 600)):
        self.size = size
        self.calls = []

    def fill_rect(self, x, y, w, h, color):
        self.calls.append(("fill_rect", x, y, w, h, color))

    def fill_circle(self, cx, cy, r, color):
        self.calls.append(("fill_circle", cx, cy, r, color))

    def stroke_rect(self, x, y, w, h, color):
        self.calls.append(("stroke_rect", x, y, w, h, color))

    def names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)

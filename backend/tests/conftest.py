import numpy as np
import pytest


def make_frame(h: int = 64, w: int = 64, seed: int = 42) -> np.ndarray:
    """Deterministic random RGBA uint8 frame."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, (h, w, 4), dtype=np.uint8)


def make_float_image(h: int = 32, w: int = 32, channels: int = 3, seed: int = 7) -> np.ndarray:
    """Deterministic float32 image in [0, 1]."""
    rng = np.random.default_rng(seed)
    return rng.random((h, w, channels), dtype=np.float32)


@pytest.fixture
def frame():
    return make_frame()


@pytest.fixture
def float_image():
    return make_float_image()

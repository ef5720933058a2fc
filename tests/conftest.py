"""Shared fixtures; also makes the project root importable when not installed."""

import os
import sys

import numpy as np
import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture
def noise_image():
    rng = np.random.default_rng(4128)
    return rng.integers(0, 256, size=(40, 33), dtype=np.uint8)


@pytest.fixture
def impulse_3x3():
    img = np.zeros((3, 3), dtype=np.uint8)
    img[1, 1] = 255
    return img

"""
Conftest: shared fixtures for all Filmstock test modules.

1. Synthetic RGBA frames (deterministic random, gradient, flat colors)
2. Encoded image bytes for codec and HTTP tests
"""

import os
import sys
from io import BytesIO

import numpy as np
import pytest
from PIL import Image

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _make_test_frame(width=64, height=48, seed=42):
    """Deterministic random RGBA frame with a non-trivial alpha channel."""
    rng = np.random.RandomState(seed)
    frame = rng.randint(0, 256, (height, width, 4), dtype=np.uint8)
    frame[:, :, 3] = rng.randint(1, 256, (height, width), dtype=np.uint8)
    return frame


def _make_gradient_frame(width=64, height=48):
    """Smooth RGB gradient (not blank), fully opaque."""
    frame = np.zeros((height, width, 4), dtype=np.uint8)
    frame[:, :, 0] = np.linspace(0, 255, width, dtype=np.uint8)
    frame[:, :, 1] = np.linspace(0, 255, height, dtype=np.uint8)[:, np.newaxis]
    frame[:, :, 2] = np.linspace(255, 0, width, dtype=np.uint8)
    frame[:, :, 3] = 255
    return frame


def _solid(rgb, width=8, height=8, alpha=255):
    """Flat-color RGBA frame."""
    frame = np.empty((height, width, 4), dtype=np.uint8)
    frame[:, :, :3] = rgb
    frame[:, :, 3] = alpha
    return frame


def _encode(frame, fmt="PNG", **save_kwargs):
    """Encode an RGBA frame to bytes with Pillow."""
    img = Image.fromarray(frame)
    if fmt == "JPEG":
        img = img.convert("RGB")
    buf = BytesIO()
    img.save(buf, format=fmt, **save_kwargs)
    return buf.getvalue()


@pytest.fixture
def frame():
    """64x48 deterministic random RGBA frame."""
    return _make_test_frame()


@pytest.fixture
def gradient_frame():
    return _make_gradient_frame()


@pytest.fixture
def png_bytes():
    """A small opaque gradient PNG."""
    return _encode(_make_gradient_frame(32, 24), "PNG")


@pytest.fixture
def jpeg_bytes():
    return _encode(_make_gradient_frame(32, 24), "JPEG", quality=90)

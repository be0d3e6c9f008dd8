"""Pytest configuration and fixtures."""

import numpy as np
import pytest
from PIL import Image as PILImage

from whatschanging.config import reset_settings
from whatschanging.model import Image


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Give every test default settings, untouched by the caller's environment."""
    monkeypatch.chdir(tmp_path)
    for key in (
        "DECODE_WIDTH",
        "DECODE_HEIGHT",
        "PRESERVE_ASPECT",
        "PANE_OFFSET",
        "WORKERS",
        "DEBUG_MODE",
        "LOG_FILE",
        "STRUCTURED_LOGS",
    ):
        monkeypatch.delenv(f"WHATSCHANGING_{key}", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_image():
    """Build an Image from a list of rows of RGB(A) tuples."""

    def _make(rows, alignment=1, name=None):
        array = np.array(rows, dtype=np.uint8)
        return Image.from_array(array, name=name, alignment=alignment)

    return _make


@pytest.fixture
def random_rgb():
    """Create a reproducible random (H, W, 3) uint8 array."""
    rng = np.random.default_rng(1234)

    def _random(height=48, width=64, channels=3):
        return rng.integers(0, 256, (height, width, channels), dtype=np.uint8)

    return _random


@pytest.fixture
def write_png(tmp_path):
    """Write an array to a PNG file under tmp_path and return the path."""

    def _write(name, array):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(np.asarray(array, dtype=np.uint8)).save(path)
        return path

    return _write

"""Shared fixtures for irregular puzzle tests."""

import base64
import io

import numpy as np
import pytest
from PIL import Image

from irregular_puzzle.config import Settings
from irregular_puzzle.services.puzzle_generator import IrregularPuzzleGenerator


def make_gradient_image(width: int, height: int) -> Image.Image:
    """Create an RGB image whose pixels encode their own coordinates.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        RGB image with red growing left to right and green top to bottom.
    """
    xs = np.linspace(0, 255, width, dtype=np.uint8)
    ys = np.linspace(0, 255, height, dtype=np.uint8)
    rgb = np.zeros((height, width, 3), dtype=np.uint8)
    rgb[:, :, 0] = xs[np.newaxis, :]
    rgb[:, :, 1] = ys[:, np.newaxis]
    rgb[:, :, 2] = 128
    return Image.fromarray(rgb)


def image_to_png_bytes(image: Image.Image) -> bytes:
    """Encode an image as PNG bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def make_data_uri(width: int, height: int) -> str:
    """Create a base64 PNG data URI of a gradient image."""
    png = image_to_png_bytes(make_gradient_image(width, height))
    return "data:image/png;base64," + base64.b64encode(png).decode("utf-8")


def decode_png_data_url(data_url: str) -> Image.Image:
    """Decode a PNG data URL into an RGBA image."""
    payload = data_url.split(",", 1)[1]
    return Image.open(io.BytesIO(base64.b64decode(payload))).convert("RGBA")


@pytest.fixture
def image_data_uri() -> str:
    """A 240x200 gradient image as a data URI."""
    return make_data_uri(240, 200)


@pytest.fixture
def small_image_data_uri() -> str:
    """A 100x100 gradient image as a data URI."""
    return make_data_uri(100, 100)


@pytest.fixture
def generator() -> IrregularPuzzleGenerator:
    """A generator with default settings and a small worker pool."""
    return IrregularPuzzleGenerator(Settings(MAX_WORKERS=2))

"""Pytest configuration for canvas-clip tests."""

from typing import Any

import pytest
from PIL import Image


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "fonts: mark test as depending on the font rasterizer output",
    )


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def red_image():
    """Opaque 200x100 red image."""
    return Image.new("RGBA", (200, 100), (255, 0, 0, 255))


@pytest.fixture
def gradient_image():
    """Opaque 64x32 image with distinct pixel values."""
    image = Image.new("RGBA", (64, 32))
    image.putdata(
        [(x * 4, y * 8, (x + y) % 256, 255) for y in range(32) for x in range(64)]
    )
    return image

import numpy as np
import pytest

from pixelshop.models.pixel_buffer import PixelBuffer
from pixelshop.repositories.image_registry import ImageRegistry
from pixelshop.repositories.image_repository import ImageRepository
from pixelshop.services.image_service import ImageService


@pytest.fixture
def service() -> ImageService:
    """Service over a fresh, empty registry."""
    return ImageService(registry=ImageRegistry(), image_repository=ImageRepository())


@pytest.fixture
def white_2x2() -> PixelBuffer:
    return PixelBuffer.filled(2, 2, (255, 255, 255))


@pytest.fixture
def gradient_4x4() -> PixelBuffer:
    """4x4 image where pixel (x, y) = (10x + y, 50 + x, 200 - 10y)."""
    pixels = [(10 * x + y, 50 + x, 200 - 10 * y) for y in range(4) for x in range(4)]
    return PixelBuffer(4, 4, pixels)


@pytest.fixture
def random_buffer() -> PixelBuffer:
    rng = np.random.default_rng(1234)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(7, 5, 3), dtype=np.uint8))

import numpy as np

from ..models.enums import GreyscaleComponentType
from ..models.histogram import Histogram
from ..models.pixel_buffer import PixelBuffer
from .transform_service import TransformService

BINS = 256


class HistogramService:
    """Channel histograms for display next to an image."""

    @staticmethod
    def _count(channel: np.ndarray) -> np.ndarray:
        return np.bincount(channel.ravel(), minlength=BINS).astype(np.int64)

    def compute(self, buffer: PixelBuffer) -> Histogram:
        px = buffer.pixels
        intensity = TransformService.greyscale_component(
            buffer, GreyscaleComponentType.INTENSITY
        ).pixels[..., 0]
        return Histogram(
            red=self._count(px[..., 0]),
            green=self._count(px[..., 1]),
            blue=self._count(px[..., 2]),
            intensity=self._count(intensity),
        )

from pathlib import Path
from typing import Callable, List, Optional, Union
import logging

from ..models.enums import FlipType, GreyscaleComponentType
from ..models.histogram import Histogram
from ..models.pixel_buffer import PixelBuffer
from ..repositories.image_registry import ImageRegistry
from ..repositories.image_repository import ImageRepository
from .histogram_service import HistogramService
from .transform_service import TransformService

logger = logging.getLogger(__name__)


class ImageService:
    """
    Named-image editing operations.

    Every transform reads ``src`` from the registry, builds a new buffer and
    only then registers it under ``dest`` (which may equal ``src``). A failure
    anywhere before the final put leaves the registry untouched.
    """
    def __init__(
        self,
        registry: Optional[ImageRegistry] = None,
        image_repository: Optional[ImageRepository] = None,
    ):
        self.registry = registry if registry is not None else ImageRegistry()
        self.image_repository = image_repository if image_repository is not None else ImageRepository()
        self.histogram_service = HistogramService()

    # ─── I/O ───────────────────────────────────────────────────────
    def load(self, path: Union[str, Path], name: str) -> None:
        """Decode *path* and register it as *name*."""
        buffer = self.image_repository.load(path)
        self.registry.put(name, buffer)
        logger.info(f"Loaded {path} as '{name}'")

    def save(self, path: Union[str, Path], name: str) -> None:
        """Encode image *name* to *path*."""
        buffer = self.registry.get(name)
        self.image_repository.save(buffer, path)
        logger.info(f"Saved '{name}' to {path}")

    def get_image(self, name: str) -> PixelBuffer:
        return self.registry.get(name)

    def put_image(self, name: str, buffer: PixelBuffer) -> None:
        self.registry.put(name, buffer)

    def names(self) -> List[str]:
        return self.registry.names()

    def histogram(self, name: str) -> Histogram:
        return self.histogram_service.compute(self.registry.get(name))

    # ─── Transforms ────────────────────────────────────────────────
    def _apply(self, op_name: str, src: str, dest: str,
               transform: Callable[[PixelBuffer], PixelBuffer]) -> None:
        source = self.registry.get(src)
        result = transform(source)
        self.registry.put(dest, result)
        logger.debug(f"{op_name}: '{src}' -> '{dest}' ({result.width}x{result.height})")

    def brighten(self, amount: int, src: str, dest: str) -> None:
        self._apply("brighten", src, dest, lambda b: TransformService.brighten(b, amount))

    def darken(self, amount: int, src: str, dest: str) -> None:
        self._apply("darken", src, dest, lambda b: TransformService.darken(b, amount))

    def flip(self, axis: FlipType, src: str, dest: str) -> None:
        self._apply(f"{axis.value} flip", src, dest, lambda b: TransformService.flip(b, axis))

    def greyscale_component(self, component: GreyscaleComponentType, src: str, dest: str) -> None:
        self._apply(
            f"{component.value} component", src, dest,
            lambda b: TransformService.greyscale_component(b, component),
        )

    def blur(self, src: str, dest: str) -> None:
        self._apply("blur", src, dest, TransformService.blur)

    def sharpen(self, src: str, dest: str) -> None:
        self._apply("sharpen", src, dest, TransformService.sharpen)

    def greyscale(self, src: str, dest: str) -> None:
        self._apply("greyscale", src, dest, TransformService.greyscale)

    def sepia(self, src: str, dest: str) -> None:
        self._apply("sepia", src, dest, TransformService.sepia)

    def downsize(self, width_percent: int, height_percent: int, src: str, dest: str) -> None:
        self._apply(
            "downsize", src, dest,
            lambda b: TransformService.downsize(b, width_percent, height_percent),
        )

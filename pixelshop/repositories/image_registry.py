import threading
from typing import Dict, List

from ..models.errors import InvalidArgumentError, NotFoundError
from ..models.pixel_buffer import PixelBuffer


class ImageRegistry:
    """
    Name -> PixelBuffer store.
    Entries are only ever added or overwritten. One lock guards the map so a
    single registry can be shared by server threads; buffers themselves are
    immutable and need no locking.
    """

    def __init__(self) -> None:
        self._images: Dict[str, PixelBuffer] = {}
        self._lock = threading.RLock()

    def put(self, name: str, buffer: PixelBuffer) -> None:
        if not isinstance(buffer, PixelBuffer):
            raise InvalidArgumentError(f"Expected a PixelBuffer for '{name}', got {type(buffer).__name__}")
        with self._lock:
            self._images[name] = buffer

    def get(self, name: str) -> PixelBuffer:
        with self._lock:
            try:
                return self._images[name]
            except KeyError:
                raise NotFoundError(name) from None

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._images)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._images

    def __len__(self) -> int:
        with self._lock:
            return len(self._images)

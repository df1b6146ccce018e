from __future__ import annotations
from typing import List, Sequence, Tuple, Union
import numpy as np

from .errors import InvalidArgumentError, InvalidDimensionError, OutOfBoundsError

Pixel = Tuple[int, int, int]


class PixelBuffer:
    """
    Immutable RGB raster.
    Pixels are held in a read-only numpy array of shape (H, W, 3), dtype uint8,
    so every channel is in [0, 255] by construction.
    """

    __slots__ = ("_pixels",)

    def __init__(
        self,
        width: int,
        height: int,
        pixels: Union[Sequence[Sequence[int]], np.ndarray],
    ):
        """
        Args:
            width: Number of columns, must be > 0.
            height: Number of rows, must be > 0.
            pixels: Row-major (r, g, b) triples, either flat (W*H, 3) or
                already shaped (H, W, 3).

        Raises:
            InvalidDimensionError: non-positive size or pixel count mismatch.
            InvalidArgumentError: a channel value outside [0, 255].
        """
        if width <= 0 or height <= 0:
            raise InvalidDimensionError(
                f"Width and height must be positive, got {width}x{height}"
            )

        try:
            arr = np.asarray(pixels)
        except ValueError as err:
            raise InvalidArgumentError(f"Every pixel must have exactly 3 channels: {err}") from err
        if arr.ndim == 3:
            if arr.shape != (height, width, 3):
                raise InvalidDimensionError(
                    f"Pixel array shape {arr.shape} does not match {width}x{height}"
                )
        else:
            if len(arr) != width * height:
                raise InvalidDimensionError(
                    f"Expected {width * height} pixels for {width}x{height}, got {len(arr)}"
                )
            if arr.ndim != 2 or arr.shape[1] != 3:
                raise InvalidArgumentError("Every pixel must have exactly 3 channels")
            arr = arr.reshape(height, width, 3)

        if arr.dtype != np.uint8:
            if arr.size and (arr.min() < 0 or arr.max() > 255):
                raise InvalidArgumentError("Channel values must be within [0, 255]")
            arr = arr.astype(np.uint8)
        else:
            arr = arr.copy()

        arr.setflags(write=False)
        self._pixels = arr

    # ─── Constructors ──────────────────────────────────────────────
    @classmethod
    def from_array(cls, array: np.ndarray) -> PixelBuffer:
        """Wrap (a copy of) an (H, W, 3) array."""
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != 3:
            raise InvalidDimensionError(f"Expected an (H, W, 3) array, got {array.shape}")
        return cls(array.shape[1], array.shape[0], array)

    @classmethod
    def filled(cls, width: int, height: int, color: Pixel) -> PixelBuffer:
        """Solid-color buffer."""
        return cls(width, height, [color] * (width * height))

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.width, self.height, self._pixels)

    # ─── Accessors ─────────────────────────────────────────────────
    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (H, W, 3) uint8 view."""
        return self._pixels

    def get(self, x: int, y: int) -> Pixel:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBoundsError(
                f"Pixel ({x}, {y}) outside {self.width}x{self.height} image"
            )
        r, g, b = self._pixels[y, x]
        return int(r), int(g), int(b)

    def to_list(self) -> List[Pixel]:
        return [tuple(int(c) for c in px) for px in self._pixels.reshape(-1, 3)]

    # ─── Value semantics ───────────────────────────────────────────
    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self._pixels, other._pixels)

    def __hash__(self):
        return hash((self.width, self.height, self._pixels.tobytes()))

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"

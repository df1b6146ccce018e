from __future__ import annotations

import logging
from numbers import Integral
from typing import Sequence

import numpy as np

from ..models.color_matrix import ColorMatrix, GREYSCALE_MATRIX, LUMA_WEIGHTS, SEPIA_MATRIX
from ..models.enums import FlipType, GreyscaleComponentType
from ..models.errors import InvalidArgumentError
from ..models.kernel import BLUR_KERNEL, SHARPEN_KERNEL, Kernel
from ..models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


def _require_int(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidArgumentError(f"{what} must be an integer, got {value!r}")
    return int(value)


def _to_channels(values: np.ndarray) -> np.ndarray:
    """Round half up, then clamp to [0, 255] and narrow to uint8."""
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


def _weighted_sum(rgb: np.ndarray, weights: Sequence[float]) -> np.ndarray:
    # Fixed left-to-right order so every caller gets the same float result.
    return weights[0] * rgb[..., 0] + weights[1] * rgb[..., 1] + weights[2] * rgb[..., 2]


def _grey(channel: np.ndarray) -> PixelBuffer:
    return PixelBuffer.from_array(np.repeat(channel[..., np.newaxis], 3, axis=2))


class TransformService:
    """
    Pure pixel algorithms.
    Every method takes a PixelBuffer and returns a *new* PixelBuffer; the
    input is never touched. No I/O, no registry access.
    """

    # ─── Point operations ─────────────────────────────────────────
    @staticmethod
    def brighten(buffer: PixelBuffer, delta: int) -> PixelBuffer:
        """Add *delta* (may be negative) to every channel, clamped to [0, 255]."""
        delta = _require_int(delta, "Brightness increment")
        # Anything beyond ±256 saturates the same way.
        delta = max(-256, min(256, delta))
        shifted = buffer.pixels.astype(np.int16) + delta
        return PixelBuffer.from_array(np.clip(shifted, 0, 255).astype(np.uint8))

    @staticmethod
    def darken(buffer: PixelBuffer, delta: int) -> PixelBuffer:
        return TransformService.brighten(buffer, -_require_int(delta, "Darkening increment"))

    @staticmethod
    def flip(buffer: PixelBuffer, axis: FlipType) -> PixelBuffer:
        if axis is FlipType.HORIZONTAL:
            return PixelBuffer.from_array(buffer.pixels[:, ::-1])
        if axis is FlipType.VERTICAL:
            return PixelBuffer.from_array(buffer.pixels[::-1, :])
        raise InvalidArgumentError(f"Unknown flip axis: {axis!r}")

    @staticmethod
    def greyscale_component(buffer: PixelBuffer, component: GreyscaleComponentType) -> PixelBuffer:
        """
        Replace all three channels with one derived value:
            RED/GREEN/BLUE  -> that channel
            VALUE           -> max(R, G, B)
            INTENSITY       -> round((R + G + B) / 3)
            LUMA            -> round(0.2126 R + 0.7152 G + 0.0722 B)
        """
        px = buffer.pixels
        if component is GreyscaleComponentType.RED:
            channel = px[..., 0]
        elif component is GreyscaleComponentType.GREEN:
            channel = px[..., 1]
        elif component is GreyscaleComponentType.BLUE:
            channel = px[..., 2]
        elif component is GreyscaleComponentType.VALUE:
            channel = px.max(axis=2)
        elif component is GreyscaleComponentType.INTENSITY:
            total = px.astype(np.int32).sum(axis=2)
            # floor(total / 3 + 0.5) in integer arithmetic
            channel = ((2 * total + 3) // 6).astype(np.uint8)
        elif component is GreyscaleComponentType.LUMA:
            channel = _to_channels(_weighted_sum(px.astype(np.float64), LUMA_WEIGHTS))
        else:
            raise InvalidArgumentError(f"Unknown greyscale component: {component!r}")
        return _grey(channel)

    # ─── Convolution ──────────────────────────────────────────────
    @staticmethod
    def convolve(buffer: PixelBuffer, kernel: Kernel) -> PixelBuffer:
        """
        out(x, y) = sum_ij kernel[i][j] * in(x + j - c, y + i - c), per channel,
        with c the kernel's center offset. Pixels outside the image count as 0.
        """
        c = kernel.center_offset
        h, w = buffer.height, buffer.width
        padded = np.pad(
            buffer.pixels.astype(np.float64),
            ((c, c), (c, c), (0, 0)),
            mode="constant",
            constant_values=0,
        )
        acc = np.zeros((h, w, 3), dtype=np.float64)
        for i in range(kernel.size):
            for j in range(kernel.size):
                weight = kernel.weights[i, j]
                if weight:
                    acc += weight * padded[i:i + h, j:j + w]
        return PixelBuffer.from_array(_to_channels(acc))

    @staticmethod
    def blur(buffer: PixelBuffer) -> PixelBuffer:
        return TransformService.convolve(buffer, BLUR_KERNEL)

    @staticmethod
    def sharpen(buffer: PixelBuffer) -> PixelBuffer:
        return TransformService.convolve(buffer, SHARPEN_KERNEL)

    # ─── Color matrices ───────────────────────────────────────────
    @staticmethod
    def apply_color_matrix(buffer: PixelBuffer, color_matrix: ColorMatrix) -> PixelBuffer:
        """out[i] = round(M[i] . [R, G, B]), clamped to [0, 255]."""
        rgb = buffer.pixels.astype(np.float64)
        out = np.stack(
            [_weighted_sum(rgb, row) for row in color_matrix.matrix],
            axis=2,
        )
        return PixelBuffer.from_array(_to_channels(out))

    @staticmethod
    def greyscale(buffer: PixelBuffer) -> PixelBuffer:
        return TransformService.apply_color_matrix(buffer, GREYSCALE_MATRIX)

    @staticmethod
    def sepia(buffer: PixelBuffer) -> PixelBuffer:
        return TransformService.apply_color_matrix(buffer, SEPIA_MATRIX)

    # ─── Resampling ───────────────────────────────────────────────
    @staticmethod
    def downsize(buffer: PixelBuffer, width_percent: int, height_percent: int) -> PixelBuffer:
        """
        Nearest-neighbour shrink to floor(W * wp / 100) x floor(H * hp / 100).
        Source column for destination x is floor(x * W / newW); rows likewise.

        Raises:
            InvalidArgumentError: percent not an integer in (0, 100], or a
                resulting dimension of 0.
        """
        width_percent = _require_int(width_percent, "Width percent")
        height_percent = _require_int(height_percent, "Height percent")
        for label, pct in (("Width", width_percent), ("Height", height_percent)):
            if not 0 < pct <= 100:
                raise InvalidArgumentError(f"{label} percent must be in (0, 100], got {pct}")

        w, h = buffer.width, buffer.height
        new_w = w * width_percent // 100
        new_h = h * height_percent // 100
        if new_w == 0 or new_h == 0:
            raise InvalidArgumentError(
                f"Downsizing {w}x{h} by {width_percent}%x{height_percent}% "
                f"gives an empty {new_w}x{new_h} image"
            )

        xs = np.arange(new_w) * w // new_w
        ys = np.arange(new_h) * h // new_h
        logger.debug(f"Downsize {w}x{h} -> {new_w}x{new_h}")
        return PixelBuffer.from_array(buffer.pixels[np.ix_(ys, xs)])

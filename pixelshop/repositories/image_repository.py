from io import BytesIO
from pathlib import Path
from typing import Union
import logging
import os

import cv2
import numpy as np
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..models.errors import DecodeError, EncodeError
from ..models.pixel_buffer import PixelBuffer

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_EXTS = ".ppm,.png,.jpg,.jpeg,.bmp"


class ImageRepository:
    """
    File codec for PixelBuffers.
    Format is chosen by file suffix (case-insensitive); OpenCV decodes,
    Pillow encodes.
    """
    def __init__(self):
        exts = os.getenv("VALID_IMAGE_EXTENSIONS") or DEFAULT_EXTS
        self.VALID_EXTS = {self._normalise_ext(ext) for ext in exts.split(",") if ext.strip()}
        self.JPEG_QUALITY = int(os.getenv("JPEG_QUALITY", "95"))

    @staticmethod
    def _normalise_ext(ext: str) -> str:
        ext = ext.strip().lower()
        return ext if ext.startswith(".") else f".{ext}"

    def is_supported(self, path: Union[str, Path]) -> bool:
        return Path(path).suffix.lower() in self.VALID_EXTS

    def load(self, path: Union[str, Path]) -> PixelBuffer:
        path = Path(path)
        if not self.is_supported(path):
            raise DecodeError(f"Unsupported image format '{path.suffix}': {path}")

        arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if arr_bgr is None:
            raise DecodeError(f"Image not found or unreadable: {path}")

        buffer = PixelBuffer.from_array(arr_bgr[:, :, ::-1])
        logger.info(f"Decoded {path} ({buffer.width}x{buffer.height})")
        return buffer

    def save(self, buffer: PixelBuffer, path: Union[str, Path]) -> None:
        path = Path(path)
        if not self.is_supported(path):
            raise EncodeError(f"Unsupported image format '{path.suffix}': {path}")

        pil_image = self.to_pil_image(buffer)
        try:
            if path.suffix.lower() in (".jpg", ".jpeg"):
                pil_image.save(path, quality=self.JPEG_QUALITY)
            else:
                pil_image.save(path)
        except (OSError, ValueError) as err:
            raise EncodeError(f"Could not write image to {path}: {err}") from err
        logger.info(f"Encoded {buffer.width}x{buffer.height} image to {path}")

    def encode(self, buffer: PixelBuffer, fmt: str = "png") -> bytes:
        """Encode to an in-memory file of the given format (no dot)."""
        fmt = fmt.lower()
        if self._normalise_ext(fmt) not in self.VALID_EXTS:
            raise EncodeError(f"Unsupported image format '{fmt}'")

        pil_format = {"jpg": "JPEG", "jpeg": "JPEG"}.get(fmt, fmt.upper())
        out = BytesIO()
        try:
            if pil_format == "JPEG":
                self.to_pil_image(buffer).save(out, format=pil_format, quality=self.JPEG_QUALITY)
            else:
                self.to_pil_image(buffer).save(out, format=pil_format)
        except (OSError, ValueError) as err:
            raise EncodeError(f"Could not encode image as {fmt}: {err}") from err
        return out.getvalue()

    @staticmethod
    def to_pil_image(buffer: PixelBuffer) -> PILImage.Image:
        """
        Convert PixelBuffer -> PIL Image object.
        Ensures the NumPy array is C-contiguous.
        """
        return PILImage.fromarray(np.ascontiguousarray(buffer.pixels))

class PixelshopError(Exception):
    """Base class for every error raised by pixelshop."""


class NotFoundError(PixelshopError, KeyError):
    """An operation referenced an image name that was never registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Image '{name}' not found: image must be loaded first")

    # KeyError repr-quotes its message; keep it readable
    def __str__(self) -> str:
        return self.args[0]


class InvalidArgumentError(PixelshopError, ValueError):
    """Malformed numeric parameter, out-of-range percent, bad kernel, etc."""


class InvalidDimensionError(InvalidArgumentError):
    """Width/height not positive, or pixel count does not match them."""


class DecodeError(PixelshopError, OSError):
    """File could not be read or its format is not supported."""


class EncodeError(PixelshopError, OSError):
    """Image could not be written to the requested path."""


class OutOfBoundsError(PixelshopError, IndexError):
    """Pixel access outside the buffer. Indicates a programming error."""

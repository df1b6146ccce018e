"""
pixelshop: a small raster image editor.

Named images live in an ImageRegistry; ImageService exposes the editing
operations (brighten, flip, blur, sepia, downsize, ...) over those names.
"""
from .services.image_service import ImageService

__version__ = "1.0.0"

__all__ = ["ImageService", "__version__"]

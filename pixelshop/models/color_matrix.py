from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from .errors import InvalidArgumentError


@dataclass(frozen=True, eq=False)
class ColorMatrix:
    """
    3x3 matrix M applied per pixel as M @ [R, G, B].
    Row i produces output channel i.
    """
    matrix: np.ndarray

    def __post_init__(self):
        m = np.array(self.matrix, dtype=np.float64)
        if m.shape != (3, 3):
            raise InvalidArgumentError(f"Color matrix must be 3x3, got shape {m.shape}")
        m.setflags(write=False)
        object.__setattr__(self, "matrix", m)


LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)

GREYSCALE_MATRIX = ColorMatrix(np.array([LUMA_WEIGHTS] * 3))

SEPIA_MATRIX = ColorMatrix(np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
]))

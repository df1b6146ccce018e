from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from .errors import InvalidArgumentError


@dataclass(frozen=True, eq=False)
class Kernel:
    """
    Square, odd-sized matrix of convolution weights.
    Weights are not normalised here; callers supply them pre-normalised.
    """
    weights: np.ndarray  # Shape (N, N), float64, N odd.

    def __post_init__(self):
        w = np.array(self.weights, dtype=np.float64)
        if w.ndim != 2 or w.shape[0] != w.shape[1] or w.shape[0] == 0:
            raise InvalidArgumentError(f"Kernel must be a non-empty square matrix, got shape {w.shape}")
        if w.shape[0] % 2 == 0:
            raise InvalidArgumentError(f"Kernel size must be odd, got {w.shape[0]}")
        w.setflags(write=False)
        object.__setattr__(self, "weights", w)

    @property
    def size(self) -> int:
        return self.weights.shape[0]

    @property
    def center_offset(self) -> int:
        return (self.size - 1) // 2


# 3x3 Gaussian-like blur, sums to 1.
BLUR_KERNEL = Kernel(np.array([
    [1 / 16, 1 / 8, 1 / 16],
    [1 / 8,  1 / 4, 1 / 8],
    [1 / 16, 1 / 8, 1 / 16],
]))

# 5x5 sharpen: negative outer ring, positive inner ring and center. Sums to 1.
SHARPEN_KERNEL = Kernel(np.array([
    [-1 / 8, -1 / 8, -1 / 8, -1 / 8, -1 / 8],
    [-1 / 8,  1 / 4,  1 / 4,  1 / 4, -1 / 8],
    [-1 / 8,  1 / 4,  1.0,    1 / 4, -1 / 8],
    [-1 / 8,  1 / 4,  1 / 4,  1 / 4, -1 / 8],
    [-1 / 8, -1 / 8, -1 / 8, -1 / 8, -1 / 8],
]))

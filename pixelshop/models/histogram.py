from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List
import numpy as np


@dataclass(frozen=True, eq=False)
class Histogram:
    """
    256-bin counts per channel plus per-pixel intensity.
    Each array sums to width * height of the source image.
    """
    red: np.ndarray
    green: np.ndarray
    blue: np.ndarray
    intensity: np.ndarray

    def to_dict(self) -> Dict[str, List[int]]:
        """JSON-friendly form (plain ints)."""
        return {
            "red": self.red.tolist(),
            "green": self.green.tolist(),
            "blue": self.blue.tolist(),
            "intensity": self.intensity.tolist(),
        }

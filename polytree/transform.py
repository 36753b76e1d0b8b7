"""
Transform - a reusable rule for deriving a child node from a parent.
"""

from dataclasses import dataclass, field, replace
from typing import Tuple

import numpy as np


def _frozen(values, shape: Tuple[int, int]) -> np.ndarray:
    arr = np.array(values, dtype=float)
    if arr.shape != shape:
        raise ValueError(f"Expected a {shape} matrix, got {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Transform:
    """
    Attach a child polygon to a parent, born `gestation` time units after it.

    `matrix` maps child template coordinates into parent template coordinates;
    `color_adjust` is applied to the parent colour in HLS space.
    """
    matrix: np.ndarray = field(default_factory=lambda: np.eye(3))
    color_adjust: np.ndarray = field(default_factory=lambda: np.eye(4))
    gestation: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, 'matrix', _frozen(self.matrix, (3, 3)))
        object.__setattr__(self, 'color_adjust', _frozen(self.color_adjust, (4, 4)))
        object.__setattr__(self, 'gestation', float(self.gestation))

    @property
    def scale(self) -> float:
        """Linear scale factor of the geometric map."""
        return float(np.sqrt(abs(np.linalg.det(self.matrix[:2, :2]))))

    def with_color(self, color_adjust: np.ndarray) -> 'Transform':
        return replace(self, color_adjust=color_adjust)

    def with_gestation(self, gestation: float) -> 'Transform':
        return replace(self, gestation=gestation)

    def __repr__(self) -> str:
        return f"Transform(scale={self.scale:.3f}, gestation={self.gestation:.2f})"

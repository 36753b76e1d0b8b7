"""
Rendering utility functions.
"""

from typing import Sequence

import numpy as np


def center_and_fit(bounds: Sequence[float], width: int, height: int,
                   buffer: float = 0.0, flip_y: bool = True) -> np.ndarray:
    """
    3x3 transform mapping model-space `bounds` (min_x, min_y, max_x, max_y)
    onto a `width` x `height` image, centred, keeping the aspect ratio.

    `buffer` is the fraction of the image left empty on each side. With
    `flip_y` the model's y axis points up in the image.
    """
    min_x, min_y, max_x, max_y = (float(v) for v in bounds)
    span_x = max(max_x - min_x, 1e-9)
    span_y = max(max_y - min_y, 1e-9)

    usable = 1.0 - 2.0 * buffer
    scale = min(width * usable / span_x, height * usable / span_y)
    sy = -scale if flip_y else scale

    cx = (min_x + max_x) / 2.0
    cy = (min_y + max_y) / 2.0
    return np.array([
        [scale, 0.0, width / 2.0 - scale * cx],
        [0.0, sy, height / 2.0 - sy * cy],
        [0.0, 0.0, 1.0]
    ])

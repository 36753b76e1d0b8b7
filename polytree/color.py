"""
Colour utilities for node colours.

Node colours are RGBA tuples of floats in [0, 1]. Colour adjustments are 4x4
affine maps acting on `(h, l, s, 1)` in OpenCV's float HLS convention
(hue in degrees [0, 360), lightness and saturation in [0, 1]).
"""

from typing import Sequence, Tuple

import cv2
import numpy as np


Color = Tuple[float, float, float, float]


def _convert(triple: Sequence[float], code: int) -> np.ndarray:
    pixel = np.array([[triple]], dtype=np.float32)
    return cv2.cvtColor(pixel, code)[0, 0].astype(float)


def rgb_to_hls(color: Sequence[float]) -> np.ndarray:
    return _convert(color[:3], cv2.COLOR_RGB2HLS)


def hls_to_rgb(hls: Sequence[float]) -> np.ndarray:
    return np.clip(_convert(hls, cv2.COLOR_HLS2RGB), 0.0, 1.0)


def hsv_to_rgb(hue: float, saturation: float, value: float) -> np.ndarray:
    return np.clip(_convert((hue, saturation, value), cv2.COLOR_HSV2RGB), 0.0, 1.0)


def adjust_color(color: Sequence[float], matrix: np.ndarray) -> Color:
    """Apply an HLS-space affine adjustment to an RGBA colour; alpha is kept."""
    h, l, s = rgb_to_hls(color)
    h, l, s, _ = matrix @ np.array([h, l, s, 1.0])

    h = h % 360.0
    l = min(max(l, 0.0), 1.0)
    s = min(max(s, 0.0), 1.0)
    r, g, b = hls_to_rgb((h, l, s))
    alpha = float(color[3]) if len(color) > 3 else 1.0
    return (float(r), float(g), float(b), alpha)


def color_sink(hue: float, lightness: float, saturation: float, amount: float) -> np.ndarray:
    """
    HLS adjustment pulling a colour `amount` of the way toward a target colour.

    Applied repeatedly down a lineage, colours converge on the target.
    """
    keep = 1.0 - amount
    return np.array([
        [keep, 0.0, 0.0, amount * hue],
        [0.0, keep, 0.0, amount * lightness],
        [0.0, 0.0, keep, amount * saturation],
        [0.0, 0.0, 0.0, 1.0]
    ])


def color_sink_toward(color: Sequence[float], amount: float) -> np.ndarray:
    h, l, s = rgb_to_hls(color)
    return color_sink(h, l, s, amount)


def to_hex(color: Sequence[float]) -> str:
    """'#RRGGBB', or '#RRGGBBAA' when the colour is not opaque."""
    channels = [int(round(min(max(float(c), 0.0), 1.0) * 255)) for c in color]
    if len(channels) > 3 and channels[3] != 255:
        return '#{:02X}{:02X}{:02X}{:02X}'.format(*channels[:4])
    return '#{:02X}{:02X}{:02X}'.format(*channels[:3])


def from_hex(text: str) -> Color:
    """Parse '#RRGGBB' or '#RRGGBBAA' into an RGBA float tuple."""
    digits = text.strip().lstrip('#')
    if len(digits) not in (6, 8):
        raise ValueError(f"Expected '#RRGGBB' or '#RRGGBBAA', got {text!r}")

    channels = [int(digits[i:i + 2], 16) / 255.0 for i in range(0, len(digits), 2)]
    if len(channels) == 3:
        channels.append(1.0)
    return tuple(channels)

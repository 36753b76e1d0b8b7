"""
Configuration for rendering module.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class PolygonRenderConfig:
    output_width: int = 512
    output_height: int = 512
    background_color: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)

    # fraction of the image left empty around the tree
    fit_buffer: float = 0.05

    # None = use the line colour and thickness stored with the tree
    outline_color: Optional[Tuple[float, float, float, float]] = None
    outline_width: Optional[float] = None

    antialiasing: bool = True

"""
Per-tree settings records shared by every growth variant.
"""

from dataclasses import dataclass

from .color import Color


@dataclass
class Tunables:
    max_radius: float = 100.0        # growth bound, model units from the origin
    field_resolution: int = 40       # occupancy cells per model unit, independent of display resolution

    # minimum size (relative to the root node) for new nodes to be considered viable
    minimum_scale: float = 0.01

    # reserved jitter magnitude on child begin times; 0 disables
    gestation_randomness: float = 0.0

    root_color: Color = (1.0, 0.0, 0.0, 1.0)


@dataclass
class DrawSettings:
    line_color: Color = (0.0, 0.0, 0.0, 1.0)
    line_thickness: int = 1

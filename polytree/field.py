"""
Occupancy field: a raster record of claimed area used as the collision oracle.

Footprints are rasterized with OpenCV and returned as values, so a footprint
produced for one node can never be confused with another node's. The caller
passes the same footprint to `overlaps`, then `commit` (or `retract`).

OpenCV fills always include a one-cell outline, so two polygons sharing an
edge would collide on that outline. Every footprint has its outline erased
again, which leaves edge-adjacent polygons disjoint.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np
from PIL import Image

from .errors import ConfigurationError
from .geometry import as_polygon, scale_translate, transform_points
from .node import Node
from .profiling import profile


MAX_FIELD_SIDE = 32768
FILL_VALUE = 255


@dataclass(frozen=True, eq=False)
class Footprint:
    """Rasterized node: a mask covering the field box at (x, y)."""
    x: int
    y: int
    mask: np.ndarray

    @property
    def width(self) -> int:
        return self.mask.shape[1]

    @property
    def height(self) -> int:
        return self.mask.shape[0]

    @property
    def bbox(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height

    @property
    def slices(self) -> Tuple[slice, slice]:
        return slice(self.y, self.y + self.height), slice(self.x, self.x + self.width)

    @property
    def cell_count(self) -> int:
        return int(np.count_nonzero(self.mask))


class OccupancyField:
    def __init__(self, polygon: np.ndarray, max_radius: float, field_resolution: float):
        self.polygon = as_polygon(polygon)
        self.max_radius = float(max_radius)
        self.field_resolution = float(field_resolution)

        if self.max_radius <= 0 or self.field_resolution <= 0:
            raise ConfigurationError(
                f"Field needs positive radius and resolution, got "
                f"radius={max_radius}, resolution={field_resolution}"
            )

        self.size = int(0.5 + self.max_radius * 2 * self.field_resolution)
        if not 0 < self.size <= MAX_FIELD_SIDE:
            raise ConfigurationError(
                f"Field side of {self.size} cells is outside (0, {MAX_FIELD_SIDE}]; "
                f"reduce maxRadius ({max_radius}) or fieldResolution ({field_resolution})"
            )

        try:
            self._field = np.zeros((self.size, self.size), dtype=np.uint8)
        except MemoryError as exc:
            raise ConfigurationError(f"Cannot allocate a {self.size}x{self.size} field") from exc

        offset = self.max_radius * self.field_resolution
        self.field_transform = scale_translate(self.field_resolution, offset, offset)

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the committed layer."""
        view = self._field.view()
        view.setflags(write=False)
        return view

    @property
    def cell_count(self) -> int:
        return int(np.count_nonzero(self._field))

    def clear(self):
        self._field[:] = 0

    def in_radius(self, node: Node) -> bool:
        world = node.world_polygon(self.polygon)
        if not np.all(np.isfinite(world)):
            return False
        return bool(np.all(np.einsum('ij,ij->i', world, world) <= self.max_radius ** 2))

    @profile
    def draw(self, node: Node) -> Optional[Footprint]:
        """
        Rasterize a node's footprint without touching the committed layer.

        Returns None when any vertex lies beyond the growth radius or the
        footprint's box falls outside the field.
        """
        if not self.in_radius(node):
            return None

        pts = transform_points(self.polygon, self.field_transform @ node.global_transform)
        pts = np.rint(pts).astype(np.int32)

        x, y, w, h = cv2.boundingRect(pts)
        if x < 0 or y < 0 or x + w > self.size or y + h > self.size:
            return None

        local = (pts - np.array([x, y], dtype=np.int32)).reshape(-1, 1, 2)
        mask = np.zeros((h, w), dtype=np.uint8)
        cv2.fillPoly(mask, [local], FILL_VALUE, cv2.LINE_8)
        cv2.polylines(mask, [local], True, 0, 1, cv2.LINE_8)
        return Footprint(x, y, mask)

    def overlaps(self, footprint: Footprint) -> bool:
        committed = self._field[footprint.slices]
        return bool(np.any(committed & footprint.mask))

    def commit(self, footprint: Footprint):
        region = self._field[footprint.slices]
        np.bitwise_or(region, footprint.mask, out=region)

    def retract(self, footprint: Footprint):
        """Clear a committed footprint; assumes no other committed footprint shares its cells."""
        region = self._field[footprint.slices]
        np.bitwise_and(region, np.bitwise_not(footprint.mask), out=region)

    def save(self, path: str):
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(self._field).save(path)

"""
Growth variants - the shape strategies that configure what a tree grows.

Each variant supplies a template polygon, the transform set applied to every
accepted node, and its tunables. Everything is derived from an integer seed
through a private random generator, so one seed always yields one tree.

Variants are looked up by their persisted `_class` name in VARIANT_REGISTRY.
"""

import math
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Type

import numpy as np

from .color import Color, color_sink, color_sink_toward, hsv_to_rgb
from .config import DrawSettings, Tunables
from .errors import ConfigurationError, MalformedConfigError, UnknownVariantError, require
from .field import OccupancyField
from .geometry import (as_polygon, edge_map, edge_transform, heading_path,
                       mirrored_edge_map, regular_polygon, star_polygon)
from .transform import Transform


class GrowthVariant(ABC):
    kind: str = ''

    def __init__(self, seed: int = 0):
        self.random_seed = 0
        self.rng = np.random.default_rng(0)
        self.tunables = Tunables()
        self.draw_settings = DrawSettings()
        self.polygon: np.ndarray = np.zeros((0, 2))
        self.transforms: List[Transform] = []
        self.configure(seed)

    def configure(self, seed: int) -> 'GrowthVariant':
        """Rebuild tunables, template and transforms from scratch for `seed`."""
        self.reseed(seed)
        self.derive_tunables(seed)
        self.polygon = as_polygon(self.build_template())
        self.transforms = list(self.build_transforms(self.polygon))
        return self

    def reseed(self, seed: int):
        seed = int(seed)
        if seed < 0:
            raise ConfigurationError(f"Random seed must be non-negative, got {seed}")
        self.random_seed = seed
        self.rng = np.random.default_rng(seed)

    @abstractmethod
    def derive_tunables(self, seed: int):
        pass

    @abstractmethod
    def build_template(self) -> np.ndarray:
        pass

    @abstractmethod
    def build_transforms(self, polygon: np.ndarray) -> List[Transform]:
        pass

    # --- randomization ---

    def random_color(self) -> Color:
        r, g, b = hsv_to_rgb(self.rng.uniform(0.0, 360.0), 1.0, 0.5)
        return (float(r), float(g), float(b), 1.0)

    def color_palette(self, size: int = 3) -> List[np.ndarray]:
        """HLS colour sinks toward random hues."""
        return [
            color_sink(self.rng.uniform(-360.0, 360.0), 0.5 + self.rng.uniform(0.0, 0.5),
                       1.0, self.rng.uniform(0.0, 0.5))
            for _ in range(size)
        ]

    def randomized(self, transforms: List[Transform], colors: bool = True,
                   gestation: bool = True) -> List[Transform]:
        """Copies of `transforms` with palette colours and/or gestation delays in [1, 11)."""
        palette = self.color_palette() if colors else []
        result = []
        for t in transforms:
            if colors:
                t = t.with_color(palette[self.rng.integers(len(palette))])
            if gestation:
                t = t.with_gestation(1.0 + self.rng.uniform(0.0, 10.0))
            result.append(t)
        return result

    def randomize_transforms(self, colors: bool = True, gestation: bool = True):
        self.transforms = self.randomized(self.transforms, colors, gestation)

    # --- persistence hooks ---

    def dump_fields(self) -> dict:
        """Variant-specific keys of the persisted record."""
        return {}

    def load_fields(self, record: dict):
        pass

    def save_artifacts(self, field: OccupancyField, image_path: str):
        """Write auxiliary files next to an exported image."""

    def clone(self) -> 'GrowthVariant':
        from .serialization import variant_from_dict, variant_to_dict
        return variant_from_dict(variant_to_dict(self))

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(seed={self.random_seed}, vertices={len(self.polygon)}, "
                f"transforms={len(self.transforms)})")


class RegularPolygonGrowth(GrowthVariant):
    """Regular polygon or star; a child may attach to every edge of its parent."""
    kind = 'SelfLimitingPolygonTree'

    def __init__(self, seed: int = 0):
        self.polygon_sides = 5
        self.star_angle = 0.0
        super().__init__(seed)

    def derive_tunables(self, seed: int):
        self.tunables = Tunables(max_radius=10.0, field_resolution=40,
                                 root_color=(1.0, 0.0, 0.0, 1.0))
        self.polygon_sides = 5
        self.star_angle = 0.0

        if seed:
            self.tunables.max_radius = 5.0 + self.rng.uniform(0.0, 40.0)
            self.polygon_sides = seed % 6 + 3
            self.star_angle = 36.0 if seed % 12 < 6 else 0.0

    def build_template(self) -> np.ndarray:
        if self.star_angle:
            return star_polygon(self.polygon_sides, self.star_angle)
        return regular_polygon(self.polygon_sides)

    def build_transforms(self, polygon: np.ndarray) -> List[Transform]:
        # child edge 0 lands on each parent edge in turn
        transforms = [Transform(edge_transform(polygon, 0, i)) for i in range(len(polygon))]
        return self.randomized(transforms)

    def dump_fields(self) -> dict:
        return {
            'polygonSides': self.polygon_sides,
            'starAngle': self.star_angle
        }

    def load_fields(self, record: dict):
        self.polygon_sides = int(record.get('polygonSides', 5))
        self.star_angle = float(record.get('starAngle', 0.0))


# child size / parent size
RATIO_PRESETS = (
    (math.sqrt(5.0) - 1.0) / 2.0,
    0.5,
    1.0 / 3.0,
    1.0 / math.sqrt(2.0),
    (math.sqrt(3.0) - 1.0) / 2.0
)


class ScaledPolygonGrowth(RegularPolygonGrowth):
    """Self-similar growth: every child is a scaled copy nested on the parent's last edge."""
    kind = 'ScaledPolygonTree'

    def __init__(self, seed: int = 0):
        self.ratio = RATIO_PRESETS[0]
        self.ambidextrous = False
        super().__init__(seed)

    def derive_tunables(self, seed: int):
        super().derive_tunables(seed)
        self.tunables.field_resolution = 100
        self.tunables.max_radius = 4.0

        self.ratio = RATIO_PRESETS[seed % len(RATIO_PRESETS)]
        self.ambidextrous = bool(self.rng.integers(2))

    def build_transforms(self, polygon: np.ndarray) -> List[Transform]:
        last = len(polygon) - 1
        transforms = []
        for i in range(len(polygon)):
            transforms.append(Transform(edge_transform(polygon, i, last, False, 0.0, self.ratio)))
            if self.ambidextrous:
                transforms.append(Transform(edge_transform(polygon, i, last, True, 1.0 - self.ratio, 1.0)))
        return self.randomized(transforms)

    def dump_fields(self) -> dict:
        fields = super().dump_fields()
        fields['ratio'] = self.ratio
        fields['ambidextrous'] = self.ambidextrous
        return fields

    def load_fields(self, record: dict):
        super().load_fields(record)
        self.ratio = float(require(record, 'ratio'))
        self.ambidextrous = bool(require(record, 'ambidextrous'))
        if not 0.0 < self.ratio < 1.0:
            raise MalformedConfigError(f"ratio must lie in (0, 1), got {self.ratio}")


class TrapezoidGrowth(GrowthVariant):
    """Annular-sector quadrilateral walked edge to edge into a logarithmic spiral."""
    kind = 'TrapezoidTree'

    steps = 24
    inner_radius = 0.5
    outer_radius = 1.0

    def derive_tunables(self, seed: int):
        self.tunables = Tunables(max_radius=10.0, field_resolution=200,
                                 gestation_randomness=10.0,
                                 root_color=(0.0, 0.5, 0.2, 1.0))

    @property
    def growth_factor(self) -> float:
        return (self.outer_radius / self.inner_radius) ** (2.0 / self.steps)

    def build_template(self) -> np.ndarray:
        angle = 2.0 * math.pi / self.steps
        r0, r1, k = self.inner_radius, self.outer_radius, self.growth_factor
        return np.array([
            [r0, 0.0],
            [r1, 0.0],
            [r1 * k * math.cos(angle), r1 * k * math.sin(angle)],
            [r0 * k * math.cos(angle), r0 * k * math.sin(angle)]
        ])

    def build_transforms(self, polygon: np.ndarray) -> List[Transform]:
        p0, p1, p2, p3 = polygon
        matrices = [
            mirrored_edge_map(p0, p1, p1, p2),
            edge_map(p0, p1, p3, p2),         # one step along the spiral, radius grows by growth_factor
            mirrored_edge_map(p0, p1, p3, p0),
        ]
        return [
            Transform(m, color_sink_toward(self.random_color(), 0.5), self.rng.uniform(0.0, 10.0))
            for m in matrices
        ]


THORN_HEADINGS = (0.0, 120.0, 105.0, 90.0, 75.0, 240.0, 255.0, 270.0)


class ThornGrowth(GrowthVariant):
    """
    Tilings of the thorn-shaped equilateral 9-gon.

    Only a sparse random subset of edge pairings becomes a transform, so
    different seeds produce different irregular tilings.
    """
    kind = 'ThornTree'

    pairing_odds = 20

    def derive_tunables(self, seed: int):
        self.tunables = Tunables(max_radius=50.0, field_resolution=20,
                                 gestation_randomness=0.0,
                                 root_color=(0.0, 1.0, 1.0, 1.0))

    def build_template(self) -> np.ndarray:
        return heading_path(THORN_HEADINGS)

    def build_transforms(self, polygon: np.ndarray) -> List[Transform]:
        n = len(polygon)
        transforms = []
        for i in range(n):
            for j in range(n):
                if self.rng.integers(self.pairing_odds) == 0:
                    transforms.append(Transform(edge_transform(polygon, i, j)))
                if self.rng.integers(self.pairing_odds) == 0:
                    transforms.append(Transform(edge_transform(polygon, i, j, mirror=True)))
        return self.randomized(transforms)

    def save_artifacts(self, field: OccupancyField, image_path: str):
        mask_path = Path(image_path).with_suffix('.mask.png')
        field.save(str(mask_path))
        print(f"Saved occupancy field to {mask_path}")


VARIANT_REGISTRY: Dict[str, Type[GrowthVariant]] = {
    'SelfLimitingPolygonTree': RegularPolygonGrowth,
    'ScaledPolygonTree': ScaledPolygonGrowth,
    'TrapezoidTree': TrapezoidGrowth,
    'ThornTree': ThornGrowth,
}


def variant_class(kind: str) -> Type[GrowthVariant]:
    if kind not in VARIANT_REGISTRY:
        raise UnknownVariantError(
            f"Variant not registered: {kind!r} (known: {', '.join(sorted(VARIANT_REGISTRY))})"
        )
    return VARIANT_REGISTRY[kind]


def create_variant(kind: str, seed: int = 0) -> GrowthVariant:
    return variant_class(kind)(seed)

"""
Self-limiting polygon growth.

Copies of a single template polygon are attached edge to edge in time order.
A copy is kept only if its rasterized footprint does not overlap the copies
already kept, so growth stops once the bounded domain fills up.
"""

from .errors import (ConfigurationError, GeometryError, MalformedConfigError,
                     PolytreeError, UnknownVariantError)
from .field import Footprint, OccupancyField
from .node import Node, beget
from .transform import Transform
from .variants import (GrowthVariant, RegularPolygonGrowth, ScaledPolygonGrowth,
                       ThornGrowth, TrapezoidGrowth, VARIANT_REGISTRY, create_variant)
from .serialization import load_variant, save_variant, variant_from_dict, variant_to_dict
from .tree import PolygonTree, StepOutcome

__all__ = [
    'PolygonTree',
    'StepOutcome',
    'Node',
    'beget',
    'Transform',
    'OccupancyField',
    'Footprint',
    'GrowthVariant',
    'RegularPolygonGrowth',
    'ScaledPolygonGrowth',
    'TrapezoidGrowth',
    'ThornGrowth',
    'VARIANT_REGISTRY',
    'create_variant',
    'variant_to_dict',
    'variant_from_dict',
    'save_variant',
    'load_variant',
    'PolytreeError',
    'GeometryError',
    'ConfigurationError',
    'MalformedConfigError',
    'UnknownVariantError'
]

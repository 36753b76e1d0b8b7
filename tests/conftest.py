import numpy as np
import pytest

from polytree import RegularPolygonGrowth
from polytree.transform import Transform
from polytree.geometry import edge_transform


UNIT_SQUARE = np.array([[-0.5, -0.5], [0.5, -0.5], [0.5, 0.5], [-0.5, 0.5]])


@pytest.fixture
def square():
    return UNIT_SQUARE.copy()


@pytest.fixture
def small_pentagon_variant():
    """Seed-0 pentagons inside a radius-3 disc: grows to completion in a few dozen steps."""
    variant = RegularPolygonGrowth(0)
    variant.tunables.max_radius = 3.0
    return variant


@pytest.fixture
def overlap_variant():
    """Square template whose two transforms land on the same spot, one after the other."""
    variant = RegularPolygonGrowth(0)
    variant.polygon = UNIT_SQUARE.copy()
    variant.transforms = [
        Transform(edge_transform(variant.polygon, 0, 1), gestation=1.0),
        Transform(edge_transform(variant.polygon, 2, 1), gestation=2.0),
    ]
    return variant

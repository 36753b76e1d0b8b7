"""
Node class - a single placed occurrence of the template polygon.
"""

import numpy as np

from .color import Color, adjust_color
from .geometry import transform_points
from .transform import Transform


# |det| at or below this is treated as a collapsed transform regardless of minimum scale
DEGENERATE_DET = 1e-5


class Node:
    __slots__ = ('id', 'parent_id', 'begin_time', 'generation', 'global_transform', 'color')

    def __init__(self, id: int = 0, parent_id: int = 0, begin_time: float = 0.0,
                 generation: int = 0, global_transform: np.ndarray = None,
                 color: Color = (1.0, 1.0, 1.0, 1.0)):
        self.id = id
        self.parent_id = parent_id
        self.begin_time = float(begin_time)
        self.generation = generation
        self.global_transform = np.eye(3) if global_transform is None else np.asarray(global_transform, dtype=float)
        self.color = tuple(float(c) for c in color)

    @property
    def det(self) -> float:
        m = self.global_transform
        return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])

    def is_degenerate(self, minimum_scale: float) -> bool:
        """True when the node has collapsed or shrunk below `minimum_scale` of the template."""
        det = abs(self.det)
        if not np.isfinite(det) or det <= DEGENERATE_DET:
            return True
        return det < minimum_scale * minimum_scale

    def world_polygon(self, polygon: np.ndarray) -> np.ndarray:
        return transform_points(polygon, self.global_transform)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'parent_id': self.parent_id,
            'begin_time': self.begin_time,
            'generation': self.generation,
            'transform': self.global_transform.tolist(),
            'color': list(self.color)
        }

    def __repr__(self) -> str:
        return (f"Node(id={self.id}, parent={self.parent_id}, gen={self.generation}, "
                f"t={self.begin_time:.2f})")


def beget(parent: Node, transform: Transform, node_id: int, jitter: float = 0.0) -> Node:
    """
    Derive a child of `parent` through `transform`.

    Malformed transforms are not rejected here; they produce degenerate children
    that fail the viability test when popped.
    """
    return Node(
        id=node_id,
        parent_id=parent.id,
        begin_time=parent.begin_time + transform.gestation + jitter,
        generation=parent.generation + 1,
        global_transform=parent.global_transform @ transform.matrix,
        color=adjust_color(parent.color, transform.color_adjust)
    )

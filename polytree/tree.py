"""
PolygonTree - the time-ordered growth loop of a self-limiting polygon tree.

Pending nodes wait in a heap keyed by begin time (ties resolved by insertion
order). Each step pops the earliest node and accepts it only if its footprint
fits into the occupancy field without overlapping an accepted node. Every
accepted node enqueues one child per transform; children are only tested when
they are popped.

Growth stops by itself: shrinking children eventually fall below the minimum
scale, and the bounded field eventually has no room left for new footprints.
"""

import heapq
import itertools
from enum import Enum
from typing import Callable, List, Optional, Tuple

import numpy as np

from .field import Footprint, OccupancyField
from .geometry import centroid, polygon_bbox, scale_translate
from .node import Node, beget
from .profiling import profile
from .serialization import variant_from_dict
from .transform import Transform
from .variants import GrowthVariant


class StepOutcome(Enum):
    ACCEPTED = 'accepted'
    DISCARDED = 'discarded'
    EMPTY = 'empty'


class PolygonTree:
    def __init__(self, variant: GrowthVariant, log_interval: int = 100):
        self.variant = variant
        self.log_interval = log_interval

        self.field: OccupancyField = None
        self.nodes: List[Node] = []
        self._pending: List[Tuple[float, int, Node]] = []
        self.rng = np.random.default_rng(variant.random_seed)

        self.create()

    @classmethod
    def from_config(cls, record: dict, **kwargs) -> 'PolygonTree':
        return cls(variant_from_dict(record), **kwargs)

    @property
    def polygon(self) -> np.ndarray:
        return self.variant.polygon

    @property
    def transforms(self) -> List[Transform]:
        return self.variant.transforms

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def create(self):
        """Reset to a single pending root centred on the origin."""
        tunables = self.variant.tunables
        self.field = OccupancyField(self.polygon, tunables.max_radius, tunables.field_resolution)
        self.rng = np.random.default_rng(self.variant.random_seed)

        self.nodes = []
        self._pending = []
        self._sequence = itertools.count()
        self._ids = itertools.count()

        self.iteration = 0
        self.accepted_count = 0
        self.discarded_count = 0

        cx, cy = centroid(self.polygon)
        root = Node(
            id=next(self._ids),
            parent_id=0,
            begin_time=0.0,
            generation=0,
            global_transform=scale_translate(1.0, -cx, -cy),
            color=tunables.root_color
        )
        self.enqueue(root)

    def enqueue(self, node: Node):
        heapq.heappush(self._pending, (node.begin_time, next(self._sequence), node))

    def peek(self) -> Optional[Node]:
        """The node the next `process` call will pop."""
        return self._pending[0][2] if self._pending else None

    def beget(self, parent: Node, transform: Transform) -> Node:
        jitter = 0.0
        spread = self.variant.tunables.gestation_randomness
        if spread > 0:
            jitter = self.rng.uniform(-spread / 2, spread / 2)

        child = beget(parent, transform, next(self._ids), jitter)
        # never born before the parent
        child.begin_time = max(child.begin_time, parent.begin_time)
        return child

    def _spawn(self, parent: Node):
        for transform in self.transforms:
            self.enqueue(self.beget(parent, transform))

    def footprint(self, node: Node) -> Optional[Footprint]:
        """Rasterized footprint, or None for degenerate or out-of-bounds nodes."""
        if node.is_degenerate(self.variant.tunables.minimum_scale):
            return None
        return self.field.draw(node)

    def is_viable(self, node: Node) -> bool:
        footprint = self.footprint(node)
        return footprint is not None and not self.field.overlaps(footprint)

    @profile
    def process(self) -> StepOutcome:
        """Pop the earliest pending node and accept or discard it."""
        if not self._pending:
            return StepOutcome.EMPTY

        _, _, node = heapq.heappop(self._pending)
        self.iteration += 1

        footprint = self.footprint(node)
        if footprint is None or self.field.overlaps(footprint):
            self.discarded_count += 1
            return StepOutcome.DISCARDED

        self.field.commit(footprint)
        self.nodes.append(node)
        self.accepted_count += 1
        self._spawn(node)
        return StepOutcome.ACCEPTED

    def step(self) -> bool:
        """
        Perform one growth step.
        Returns True if a node was processed, False if nothing is pending.
        """
        return self.process() is not StepOutcome.EMPTY

    def grow(self, max_steps: Optional[int] = None,
             callback: Optional[Callable[['PolygonTree', StepOutcome], None]] = None) -> int:
        """
        Run the growth loop until the queue drains or `max_steps` steps were taken.
        Optional callback is called after each step with (tree, outcome).
        Returns the number of steps taken.
        """
        print(f"Starting growth: {self.variant.kind} (seed {self.variant.random_seed}), "
              f"{len(self.transforms)} transforms, field {self.field.size}x{self.field.size}")

        steps = 0
        while max_steps is None or steps < max_steps:
            outcome = self.process()
            if outcome is StepOutcome.EMPTY:
                break
            steps += 1

            if callback:
                callback(self, outcome)

            if (outcome is StepOutcome.ACCEPTED and self.log_interval
                    and self.accepted_count % self.log_interval == 0):
                print(f"  Step {self.iteration}: {len(self.nodes)} nodes, "
                      f"{self.pending_count} pending, {self.discarded_count} discarded")

        if self._pending:
            print(f"Growth paused after {steps} steps ({self.pending_count} still pending)")
        else:
            print(f"Growth complete after {self.iteration} steps")
        print(f"  Accepted nodes: {len(self.nodes)}")
        print(f"  Discarded candidates: {self.discarded_count}")
        print(f"  Occupied cells: {self.field.cell_count}")

        return steps

    def regrow_all(self) -> int:
        """Re-enqueue children of every accepted node for the current transform set."""
        before = self.pending_count
        for node in list(self.nodes):
            self._spawn(node)
        added = self.pending_count - before
        print(f"Regrow: {added} candidates enqueued from {len(self.nodes)} nodes")
        return added

    def find_node(self, node_id: int) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def remove_node(self, node_id: Optional[int] = None) -> int:
        """
        Remove an accepted node, the oldest one when `node_id` is None.

        The node's footprint is cleared from the field. Its descendants stay in
        place, so they may end up detached from the rest of the tree.
        Returns the number of nodes removed (0 or 1).
        """
        if not self.nodes:
            return 0

        if node_id is None:
            index = 0
        else:
            index = next((i for i, n in enumerate(self.nodes) if n.id == node_id), None)
            if index is None:
                return 0

        node = self.nodes.pop(index)
        # same node, same raster: redrawing reproduces the committed footprint
        footprint = self.field.draw(node)
        if footprint is not None:
            self.field.retract(footprint)

        print(f"Removed node {node.id} (generation {node.generation}), {len(self.nodes)} remaining")
        return 1

    def world_polygon(self, node: Node) -> np.ndarray:
        return node.world_polygon(self.polygon)

    def bounds(self) -> np.ndarray:
        """World bounds `[min_x, min_y, max_x, max_y]` of the accepted nodes."""
        if not self.nodes:
            r = self.variant.tunables.max_radius
            return np.array([-r, -r, r, r])
        return polygon_bbox(np.vstack([self.world_polygon(n) for n in self.nodes]))

    def export_artifact(self, image_path: str):
        """Write the variant's auxiliary files for an image exported to `image_path`."""
        self.variant.save_artifacts(self.field, image_path)

    def generation_counts(self) -> List[int]:
        if not self.nodes:
            return []
        counts = np.bincount([n.generation for n in self.nodes])
        return counts.tolist()

    def __repr__(self) -> str:
        return (f"PolygonTree({self.variant.kind}, nodes={len(self.nodes)}, "
                f"pending={self.pending_count}, step={self.iteration})")

"""
Geometry kernel: polygon templates and 3x3 affine transform builders.

Conventions:
- A polygon is an `(N, 2)` float array of vertices; edge `i` runs from
  vertex `i` to vertex `(i + 1) % N`.
- Transforms are 3x3 homogeneous matrices acting on column vectors, so
  `parent @ child` applies `child` first.
- Angles are in degrees, counter-clockwise.
"""

import math
from typing import Sequence, Tuple

import numpy as np

from .errors import GeometryError


EDGE_EPSILON = 1e-12


def as_polygon(points) -> np.ndarray:
    """Coerce points to an `(N, 2)` float array with at least two vertices."""
    arr = np.asarray(points, dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise GeometryError(f"Polygon must have shape (N, 2), got {arr.shape}")
    if len(arr) < 2:
        raise GeometryError(f"Polygon needs at least 2 vertices, got {len(arr)}")
    return arr


def transform_points(points: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Apply a 3x3 affine transform to `(N, 2)` points."""
    points = np.asarray(points, dtype=float)
    return points @ matrix[:2, :2].T + matrix[:2, 2]


def scale_translate(scale: float, tx: float, ty: float) -> np.ndarray:
    return np.array([
        [scale, 0.0, tx],
        [0.0, scale, ty],
        [0.0, 0.0, 1.0]
    ])


def rotate_scale_translate(angle: float, scale: float = 1.0,
                           translation: Tuple[float, float] = (0.0, 0.0)) -> np.ndarray:
    """Rotate by `angle` degrees about the origin, scale, then translate."""
    theta = math.radians(angle)
    c = scale * math.cos(theta)
    s = scale * math.sin(theta)
    tx, ty = translation
    return np.array([
        [c, -s, tx],
        [s, c, ty],
        [0.0, 0.0, 1.0]
    ])


def _as_complex(p) -> complex:
    return complex(float(p[0]), float(p[1]))


def edge_map(a, b, c, d) -> np.ndarray:
    """
    Direct similarity (rotation + uniform scale + translation) with a -> c, b -> d.

    Solved in the complex plane as z' = s * z + t.
    """
    za, zb, zc, zd = (_as_complex(p) for p in (a, b, c, d))
    if abs(zb - za) < EDGE_EPSILON:
        raise GeometryError("Cannot map from a zero-length edge")

    s = (zd - zc) / (zb - za)
    t = zc - s * za
    return np.array([
        [s.real, -s.imag, t.real],
        [s.imag, s.real, t.imag],
        [0.0, 0.0, 1.0]
    ])


def mirrored_edge_map(a, b, c, d) -> np.ndarray:
    """
    Opposite similarity (reflection + rotation + scale + translation) with a -> c, b -> d.

    Solved in the complex plane as z' = s * conj(z) + t.
    """
    za, zb, zc, zd = (_as_complex(p) for p in (a, b, c, d))
    if abs(zb - za) < EDGE_EPSILON:
        raise GeometryError("Cannot map from a zero-length edge")

    s = (zd - zc) / (zb - za).conjugate()
    t = zc - s * za.conjugate()
    return np.array([
        [s.real, s.imag, t.real],
        [s.imag, -s.real, t.imag],
        [0.0, 0.0, 1.0]
    ])


def edge_transform(polygon: np.ndarray, src: int, dst: int, mirror: bool = False,
                   scale_start: float = 0.0, scale_end: float = 1.0) -> np.ndarray:
    """
    Transform that attaches a child copy of `polygon` to edge `dst` of a parent copy.

    The child's edge `src` is laid onto the sub-segment [scale_start, scale_end]
    of the parent's edge `dst`, on the outer side of that edge. A direct map
    runs the child edge against the parent edge (p[src] -> segment end); a
    mirrored map reflects the child across it (p[src] -> segment start).

    Args:
        polygon: Template vertices `(N, 2)`
        src: Edge index on the child
        dst: Edge index on the parent
        mirror: Use a reflecting map
        scale_start: Start of the target sub-segment, as a fraction of edge `dst`
        scale_end: End of the target sub-segment
    """
    polygon = as_polygon(polygon)
    n = len(polygon)

    a = polygon[src % n]
    b = polygon[(src + 1) % n]
    p = polygon[dst % n]
    q = polygon[(dst + 1) % n]

    start = p + (q - p) * scale_start
    end = p + (q - p) * scale_end

    if mirror:
        return mirrored_edge_map(a, b, start, end)
    return edge_map(a, b, end, start)


def centroid(polygon) -> np.ndarray:
    """Area centroid of a simple polygon; falls back to the vertex mean for zero area."""
    polygon = as_polygon(polygon)
    x, y = polygon[:, 0], polygon[:, 1]
    xn, yn = np.roll(x, -1), np.roll(y, -1)

    cross = x * yn - xn * y
    area = cross.sum() / 2.0
    if abs(area) < EDGE_EPSILON:
        return polygon.mean(axis=0)

    cx = ((x + xn) * cross).sum() / (6.0 * area)
    cy = ((y + yn) * cross).sum() / (6.0 * area)
    return np.array([cx, cy])


def signed_area(polygon) -> float:
    polygon = as_polygon(polygon)
    x, y = polygon[:, 0], polygon[:, 1]
    return float((x * np.roll(y, -1) - np.roll(x, -1) * y).sum() / 2.0)


def regular_polygon(sides: int, radius: float = 1.0) -> np.ndarray:
    """Counter-clockwise regular polygon with edge 0 horizontal along the bottom."""
    if sides < 3:
        raise GeometryError(f"A regular polygon needs at least 3 sides, got {sides}")

    offset = -math.pi / 2 - math.pi / sides
    angles = offset + 2 * math.pi * np.arange(sides) / sides
    return radius * np.column_stack([np.cos(angles), np.sin(angles)])


def star_polygon(points: int, tip_angle: float, radius: float = 1.0) -> np.ndarray:
    """
    Counter-clockwise star with `points` tips, alternating outer and inner vertices.

    `tip_angle` is the interior angle at each tip in degrees (36 gives the
    pentagram). It must be smaller than the interior angle of the regular
    polygon with the same number of points.
    """
    if points < 3:
        raise GeometryError(f"A star needs at least 3 points, got {points}")
    if not 0.0 < tip_angle < 180.0 - 360.0 / points:
        raise GeometryError(f"Tip angle {tip_angle} is invalid for a {points}-pointed star")

    half = math.radians(tip_angle) / 2
    step = math.pi / points
    inner = radius * math.sin(half) / math.sin(step + half)

    offset = -math.pi / 2
    angles = offset + step * np.arange(2 * points)
    radii = np.where(np.arange(2 * points) % 2 == 0, radius, inner)
    return np.column_stack([radii * np.cos(angles), radii * np.sin(angles)])


def heading_step(heading: float, length: float = 1.0) -> np.ndarray:
    theta = math.radians(heading)
    return length * np.array([math.cos(theta), math.sin(theta)])


def heading_path(headings: Sequence[float], start=(0.0, 0.0)) -> np.ndarray:
    """Polygon traced from `start` by unit steps along absolute headings (degrees)."""
    pt = np.asarray(start, dtype=float)
    vertices = [pt]
    for heading in headings:
        pt = pt + heading_step(heading)
        vertices.append(pt)
    return np.array(vertices)


def polygon_bbox(polygon: np.ndarray) -> np.ndarray:
    """Axis-aligned bounds `[min_x, min_y, max_x, max_y]`."""
    min_xy = np.min(polygon, axis=0)
    max_xy = np.max(polygon, axis=0)
    return np.array([min_xy[0], min_xy[1], max_xy[0], max_xy[1]], dtype=float)

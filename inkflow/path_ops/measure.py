"""Path measurement and hit-testing.

Point-in-polygon (even-odd ray casting), area, perimeter, centroid and
bounding boxes. Curves are flattened with ``tolerance`` before measuring;
functions taking a raw polygon accept any (N, 2) point list.
"""

from typing import Sequence, Tuple

import numpy as np

from ..utils.geometry import as_points, polyline_length
from .path import Path

BBox = Tuple[float, float, float, float]


def point_in_polygon(point: Sequence[float], polygon) -> bool:
    """Even-odd ray cast; polygons with fewer than 3 points contain nothing."""
    poly = as_points(polygon)
    n = poly.shape[0]
    if n < 3:
        return False

    x, y = float(point[0]), float(point[1])
    xs, ys = poly[:, 0], poly[:, 1]
    xj, yj = np.roll(xs, 1), np.roll(ys, 1)

    crosses = (ys > y) != (yj > y)
    with np.errstate(divide='ignore', invalid='ignore'):
        x_cross = (xj - xs) * (y - ys) / (yj - ys) + xs
    hits = crosses & (x < x_cross)
    return bool(np.count_nonzero(hits) % 2)


def polygon_area(polygon) -> float:
    """Unsigned shoelace area; 0.0 for fewer than 3 points."""
    poly = as_points(polygon)
    if poly.shape[0] < 3:
        return 0.0
    x, y = poly[:, 0], poly[:, 1]
    return float(abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))) / 2.0)


def path_area(path: Path, tolerance: float = 0.25) -> float:
    """Even-odd area: outer rings minus holes, via signed shoelace sums.

    Exact for non-self-intersecting subpaths whose holes are wound opposite
    to their outer ring (pyclipper output satisfies this).
    """
    total = 0.0
    for poly in path.flatten(tolerance):
        if poly.shape[0] < 3:
            continue
        x, y = poly[:, 0], poly[:, 1]
        total += (np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))) / 2.0
    return float(abs(total))


def path_perimeter(path: Path, tolerance: float = 0.25) -> float:
    """Flattened length of every subpath, closing edges included when closed."""
    total = 0.0
    for poly in path.flatten(tolerance):
        if path.closed and poly.shape[0] > 1:
            poly = np.vstack([poly, poly[:1]])
        total += polyline_length(poly)
    return total


def path_centroid(path: Path) -> Tuple[float, float]:
    """Mean of the path's vertices; (0, 0) for an empty path."""
    vertices = path.vertices()
    if vertices.shape[0] == 0:
        return (0.0, 0.0)
    cx, cy = vertices.mean(axis=0)
    return (float(cx), float(cy))


def bounding_box(path: Path, tolerance: float = 0.25) -> BBox:
    """Tight ``(xmin, ymin, xmax, ymax)``; (0, 0, 0, 0) for an empty path."""
    return path.bounding_box(tolerance)


def bbox_distance(a: BBox, b: BBox) -> float:
    """Gap between two boxes; 0.0 when they touch or overlap."""
    dx = max(0.0, max(a[0], b[0]) - min(a[2], b[2]))
    dy = max(0.0, max(a[1], b[1]) - min(a[3], b[3]))
    return float(np.hypot(dx, dy))

"""Polyline and path simplification (Douglas-Peucker).

Freehand strokes arrive with one vertex per pointer event, which is far more
than a renderer or a file needs. This module reduces them while keeping the
shape:

    douglas_peucker     plain Douglas-Peucker with a fixed epsilon
    simplify_polyline   density-adaptive tolerance + minimum retention
    simplify_path       simplify a Path's vertices and rebuild it with
                        quadratic blends so brush strokes do not facet

Douglas-Peucker runs over an explicit stack of ``(start, end)`` index
ranges, so arbitrarily long strokes never hit the recursion limit.
"""

import logging

import numpy as np

from ..utils.geometry import as_points, points_segment_distance
from .path import Path, PathBuilder, rebuild_subpaths

logger = logging.getLogger(__name__)

DENSE_PATH_POINTS = 50
DENSE_MAX_TOLERANCE = 0.5
SPARSE_MAX_TOLERANCE = 2.0
MIN_RETENTION_FRACTION = 10  # keep at least n // 10 points


def douglas_peucker(points, epsilon: float) -> np.ndarray:
    """Douglas-Peucker reduction of a polyline.

    Parameters
    ----------
    points : array-like
        Polyline vertices, shape (N, 2)
    epsilon : float
        Maximum allowed distance (px) from a dropped point to the kept chord

    Returns
    -------
    np.ndarray
        Retained vertices in input order, shape (M, 2), M ≤ N. First and
        last points are always kept; inputs of ≤ 2 points come back as-is.

    Notes
    -----
    Distances are measured to the chord *segment* (projection clamped), so
    points overshooting an endpoint are not treated as on-chord.
    """
    pts = as_points(points)
    n = pts.shape[0]
    if n <= 2:
        return pts

    keep = np.zeros(n, dtype=bool)
    keep[0] = keep[-1] = True

    stack = [(0, n - 1)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue
        dists = points_segment_distance(pts[start + 1:end], pts[start], pts[end])
        idx = int(np.argmax(dists))
        if dists[idx] > epsilon:
            split = start + 1 + idx
            keep[split] = True
            stack.append((split, end))
            stack.append((start, split))

    return pts[keep]


def adaptive_tolerance(tolerance: float, n_points: int) -> float:
    """Cap the tolerance harder for dense inputs (> 50 points)."""
    if n_points > DENSE_PATH_POINTS:
        return min(tolerance, DENSE_MAX_TOLERANCE)
    return min(tolerance, SPARSE_MAX_TOLERANCE)


def simplify_polyline(points, tolerance: float) -> np.ndarray:
    """Density-adaptive Douglas-Peucker with a minimum-retention floor.

    If fewer than ``max(3, n // 10)`` points survive, the input is instead
    resampled uniformly with step ``n // min_points``, always ending on the
    last input point. Inputs of ≥ 3 points therefore never come back with
    fewer than 3.
    """
    pts = as_points(points)
    n = pts.shape[0]
    if n < 3:
        return pts

    result = douglas_peucker(pts, adaptive_tolerance(tolerance, n))

    min_points = max(3, n // MIN_RETENTION_FRACTION)
    if result.shape[0] < min_points:
        step = max(1, n // min_points)
        indices = list(range(0, n, step))
        if indices[-1] != n - 1:
            indices.append(n - 1)
        logger.debug(f"Simplified to {result.shape[0]} < {min_points} points; resampling every {step}")
        result = pts[indices]

    return result


def simplify_path(path: Path, tolerance: float) -> Path:
    """Simplify a path and rebuild it with smooth joins.

    Parameters
    ----------
    path : Path
        Input path (not modified)
    tolerance : float
        Requested simplification tolerance (px), capped by density

    Returns
    -------
    Path
        Each subpath becomes ``MoveTo(first)``, a quadratic blend into every
        interior retained point, and a ``LineTo`` for the last one. Subpaths
        stay separate; those with fewer than 3 vertices are copied through.
        Closed flag and fill rule are carried over; paths with fewer than 3
        segments are returned unchanged.

    Notes
    -----
    Blend control for retained point ``curr`` between ``prev`` and ``next``:
    ``((prev + (curr-prev)*0.7) + (curr + (next-curr)*0.3)) / 2``.
    """
    if len(path) < 3:
        return path

    def emit(builder: PathBuilder, vertices: np.ndarray) -> None:
        kept = simplify_polyline(vertices, tolerance)
        builder.move_to(kept[0])
        if kept.shape[0] == 2:
            builder.line_to(kept[1])
            return
        last = kept.shape[0] - 1
        for i in range(1, last):
            prev, curr, nxt = kept[i - 1], kept[i], kept[i + 1]
            control = ((prev + (curr - prev) * 0.7) + (curr + (nxt - curr) * 0.3)) / 2.0
            builder.quad_to(control, curr)
        builder.line_to(kept[last])

    return rebuild_subpaths(path, 3, emit)

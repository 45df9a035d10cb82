"""Curve math shared by the stroke engine and the path operations.

Provides:
    - Cubic Bézier evaluation and adaptive flattening
    - Quadratic → cubic degree elevation (exact)
    - Point-to-segment distance (scalar and vectorized)
    - Polyline operations: length, bbox

Used by:
    - Stroke engine: control-point placement for stroke segments
    - Simplifier: Douglas-Peucker chord distances
    - Boolean engine / outliner: curve flattening before clipping
    - Shape generator: elliptical arcs

All coordinates are canvas pixels. Points are ``(x, y)`` tuples or numpy
arrays of shape ``(2,)``; point lists are ``(N, 2)`` float arrays.
"""

from typing import Sequence, Tuple, Union

import numpy as np

PointLike = Union[Sequence[float], np.ndarray]


def as_points(points) -> np.ndarray:
    """Coerce a point sequence to a float ``(N, 2)`` array (copy)."""
    arr = np.array(points, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=np.float64)
    return arr.reshape(-1, 2)


def bezier_cubic_eval(
    p0: PointLike,
    p1: PointLike,
    p2: PointLike,
    p3: PointLike,
    t: Union[float, np.ndarray]
) -> np.ndarray:
    """Evaluate cubic Bézier curve at parameter t.

    Parameters
    ----------
    p0, p1, p2, p3 : array-like
        Control points, shape (2,)
    t : float or np.ndarray
        Parameter value(s) in [0, 1], scalar or shape (N,)

    Returns
    -------
    np.ndarray
        Point(s) on curve, shape (2,) for scalar t, (N, 2) otherwise

    Notes
    -----
    B(t) = (1-t)³·p0 + 3(1-t)²t·p1 + 3(1-t)t²·p2 + t³·p3
    """
    p0, p1, p2, p3 = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2, p3))
    t_arr = np.asarray(t, dtype=np.float64)
    scalar = t_arr.ndim == 0
    t_arr = np.atleast_1d(t_arr)[:, None]

    u = 1.0 - t_arr
    result = (
        (u ** 3) * p0
        + 3.0 * (u ** 2) * t_arr * p1
        + 3.0 * u * (t_arr ** 2) * p2
        + (t_arr ** 3) * p3
    )
    return result[0] if scalar else result


def bezier_quad_to_cubic(
    p0: PointLike,
    control: PointLike,
    p2: PointLike
) -> Tuple[np.ndarray, np.ndarray]:
    """Degree-elevate a quadratic Bézier to cubic control points.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        ``(c1, c2)`` such that the cubic ``p0, c1, c2, p2`` traces the
        same curve as the quadratic ``p0, control, p2``.
    """
    p0, control, p2 = (np.asarray(p, dtype=np.float64) for p in (p0, control, p2))
    c1 = p0 + (control - p0) * (2.0 / 3.0)
    c2 = p2 + (control - p2) * (2.0 / 3.0)
    return c1, c2


def bezier_cubic_polyline(
    p0: PointLike,
    p1: PointLike,
    p2: PointLike,
    p3: PointLike,
    max_err: float = 0.25,
    max_depth: int = 12
) -> np.ndarray:
    """Flatten cubic Bézier to polyline via adaptive subdivision.

    Parameters
    ----------
    p0, p1, p2, p3 : array-like
        Control points, shape (2,)
    max_err : float
        Maximum allowed deviation in px, default 0.25
    max_depth : int
        Maximum subdivision depth, default 12

    Returns
    -------
    np.ndarray
        Polyline vertices, shape (N, 2), N ≥ 2, endpoints exact

    Notes
    -----
    Flatness criterion: distance from both inner control points to the
    chord ≤ max_err. Subdivision is De Casteljau at t=0.5.
    """
    start = np.asarray(p0, dtype=np.float64)
    out = [start]
    # Depth-first with an explicit stack; right half pushed first so the
    # left half is emitted first.
    stack = [(start, np.asarray(p1, dtype=np.float64),
              np.asarray(p2, dtype=np.float64), np.asarray(p3, dtype=np.float64), 0)]
    while stack:
        q0, q1, q2, q3, depth = stack.pop()
        flat = max(
            point_segment_distance(q1, q0, q3),
            point_segment_distance(q2, q0, q3),
        ) <= max_err
        if flat or depth >= max_depth:
            out.append(q3)
            continue

        q01 = (q0 + q1) / 2.0
        q12 = (q1 + q2) / 2.0
        q23 = (q2 + q3) / 2.0
        q012 = (q01 + q12) / 2.0
        q123 = (q12 + q23) / 2.0
        mid = (q012 + q123) / 2.0

        stack.append((mid, q123, q23, q3, depth + 1))
        stack.append((q0, q01, q012, mid, depth + 1))

    return np.vstack(out)


def point_segment_distance(p: PointLike, a: PointLike, b: PointLike) -> float:
    """Distance from point p to segment ab.

    The projection parameter is clamped to [0, 1], so points beyond the
    segment ends measure to the nearest endpoint. A degenerate segment
    (a == b) measures to a.
    """
    p, a, b = (np.asarray(v, dtype=np.float64) for v in (p, a, b))
    ab = b - a
    len_sq = float(ab @ ab)
    if len_sq == 0.0:
        return float(np.hypot(*(p - a)))
    t = min(1.0, max(0.0, float((p - a) @ ab) / len_sq))
    proj = a + t * ab
    return float(np.hypot(*(p - proj)))


def points_segment_distance(points: np.ndarray, a: PointLike, b: PointLike) -> np.ndarray:
    """Vectorized point_segment_distance over an (N, 2) array."""
    points = as_points(points)
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    ab = b - a
    len_sq = float(ab @ ab)
    if len_sq == 0.0:
        return np.linalg.norm(points - a, axis=1)
    t = np.clip((points - a) @ ab / len_sq, 0.0, 1.0)
    proj = a + t[:, None] * ab
    return np.linalg.norm(points - proj, axis=1)


def polyline_length(points: np.ndarray) -> float:
    """Total length of a polyline; 0.0 for fewer than 2 points."""
    points = as_points(points)
    if points.shape[0] < 2:
        return 0.0
    return float(np.linalg.norm(np.diff(points, axis=0), axis=1).sum())


def polyline_bbox(points: np.ndarray) -> Tuple[float, float, float, float]:
    """Axis-aligned bounding box ``(xmin, ymin, xmax, ymax)``.

    Returns (0, 0, 0, 0) for an empty point list.
    """
    points = as_points(points)
    if points.shape[0] == 0:
        return (0.0, 0.0, 0.0, 0.0)
    xmin, ymin = points.min(axis=0)
    xmax, ymax = points.max(axis=0)
    return (float(xmin), float(ymin), float(xmax), float(ymax))

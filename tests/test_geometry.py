"""Test curve math shared by the stroke engine and path operations.

Tests for inkflow.utils.geometry:
    - Cubic Bézier evaluation at t=0, 0.5, 1 (scalar and array t)
    - Quadratic → cubic elevation traces the same curve
    - Adaptive flattening: exact endpoints, straight curves stay 2 points
    - Point-to-segment distance with clamping and degenerate segments
    - Polyline length and bounding box

Test cases:
    - test_bezier_cubic_eval_endpoints()
    - test_bezier_cubic_eval_array_t()
    - test_bezier_quad_to_cubic_matches_quadratic()
    - test_bezier_cubic_polyline_straight()
    - test_bezier_cubic_polyline_convergence()
    - test_point_segment_distance_*()
    - test_points_segment_distance_matches_scalar()
    - test_polyline_length()
    - test_polyline_bbox()

Run:
    pytest tests/test_geometry.py -v
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from inkflow.utils import geometry


# ============================================================================
# BÉZIER
# ============================================================================

def test_bezier_cubic_eval_endpoints():
    """Curve starts at p0 and ends at p3."""
    p0, p1, p2, p3 = (0, 0), (10, 20), (30, 20), (40, 0)
    assert_allclose(geometry.bezier_cubic_eval(p0, p1, p2, p3, 0.0), p0)
    assert_allclose(geometry.bezier_cubic_eval(p0, p1, p2, p3, 1.0), p3)
    # Symmetric control polygon: midpoint at x=20, y = 0.75 * 20
    assert_allclose(geometry.bezier_cubic_eval(p0, p1, p2, p3, 0.5), (20.0, 15.0))


def test_bezier_cubic_eval_array_t():
    """Array t returns one point per parameter."""
    t = np.linspace(0.0, 1.0, 5)
    pts = geometry.bezier_cubic_eval((0, 0), (1, 1), (2, 1), (3, 0), t)
    assert pts.shape == (5, 2)
    assert_allclose(pts[0], (0, 0))
    assert_allclose(pts[-1], (3, 0))


def test_bezier_quad_to_cubic_matches_quadratic():
    """Elevated cubic reproduces the quadratic at every t."""
    p0, c, p2 = np.array([0.0, 0.0]), np.array([5.0, 10.0]), np.array([10.0, 0.0])
    c1, c2 = geometry.bezier_quad_to_cubic(p0, c, p2)

    t = np.linspace(0.0, 1.0, 11)[:, None]
    quad = (1 - t) ** 2 * p0 + 2 * (1 - t) * t * c + t ** 2 * p2
    cubic = geometry.bezier_cubic_eval(p0, c1, c2, p2, t[:, 0])
    assert_allclose(cubic, quad, atol=1e-12)


def test_bezier_cubic_polyline_straight():
    """Collinear control points need no subdivision."""
    poly = geometry.bezier_cubic_polyline((0, 0), (1, 0), (2, 0), (3, 0))
    assert_allclose(poly, [(0, 0), (3, 0)])


def test_bezier_cubic_polyline_convergence():
    """Tighter tolerance → more vertices, length converging from below."""
    ctrl = [(0, 0), (0, 50), (100, 50), (100, 0)]
    coarse = geometry.bezier_cubic_polyline(*ctrl, max_err=2.0)
    fine = geometry.bezier_cubic_polyline(*ctrl, max_err=0.01)

    assert_allclose(coarse[0], ctrl[0])
    assert_allclose(fine[-1], ctrl[-1])
    assert fine.shape[0] > coarse.shape[0]
    assert geometry.polyline_length(coarse) <= geometry.polyline_length(fine) + 1e-9

    # Every flattened vertex lies on the curve's convex hull box
    assert fine[:, 1].max() <= 50.0


def test_bezier_cubic_polyline_depth_limit():
    """max_depth bounds the vertex count even with zero tolerance."""
    poly = geometry.bezier_cubic_polyline((0, 0), (0, 10), (10, 10), (10, 0), max_err=0.0, max_depth=3)
    assert poly.shape[0] == 2 ** 3 + 1


# ============================================================================
# DISTANCES
# ============================================================================

def test_point_segment_distance_perpendicular():
    assert geometry.point_segment_distance((5, 3), (0, 0), (10, 0)) == pytest.approx(3.0)


def test_point_segment_distance_clamped_to_endpoint():
    """Projection beyond the segment measures to the nearest end."""
    assert geometry.point_segment_distance((13, 4), (0, 0), (10, 0)) == pytest.approx(5.0)
    assert geometry.point_segment_distance((-3, 0), (0, 0), (10, 0)) == pytest.approx(3.0)


def test_point_segment_distance_degenerate():
    """Zero-length segment measures to its start point."""
    assert geometry.point_segment_distance((3, 4), (0, 0), (0, 0)) == pytest.approx(5.0)


def test_points_segment_distance_matches_scalar():
    rng = np.random.default_rng(0)
    pts = rng.uniform(-20, 20, size=(50, 2))
    a, b = (1.0, -2.0), (8.0, 5.0)
    vec = geometry.points_segment_distance(pts, a, b)
    scalar = [geometry.point_segment_distance(p, a, b) for p in pts]
    assert_allclose(vec, scalar)


# ============================================================================
# POLYLINES
# ============================================================================

def test_polyline_length():
    assert geometry.polyline_length([(0, 0), (3, 4), (3, 10)]) == pytest.approx(11.0)
    assert geometry.polyline_length([(1, 1)]) == 0.0
    assert geometry.polyline_length([]) == 0.0


def test_polyline_bbox():
    assert geometry.polyline_bbox([(2, -1), (-3, 4), (0, 0)]) == (-3.0, -1.0, 2.0, 4.0)
    assert geometry.polyline_bbox([]) == (0.0, 0.0, 0.0, 0.0)


def test_as_points_shapes():
    assert geometry.as_points([]).shape == (0, 2)
    assert geometry.as_points((1, 2)).shape == (1, 2)
    assert geometry.as_points([[1, 2], [3, 4]]).dtype == np.float64

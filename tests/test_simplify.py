"""Test Douglas-Peucker simplification.

Tests for inkflow.path_ops.simplify:
    - Near-collinear middle point dropped, spikes kept
    - Endpoints always retained, short inputs returned as-is
    - Zero tolerance keeps every point not exactly on its chord
    - Density-adaptive tolerance caps
    - Minimum retention resampling on dense collinear input
    - simplify_path rebuild: quadratic blends, final line, flags carried over,
      one rebuilt subpath per input subpath
    - Very long strokes do not hit the recursion limit

Run:
    pytest tests/test_simplify.py -v
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from inkflow.path_ops import (
    CubicTo,
    FillRule,
    LineTo,
    MoveTo,
    Path,
    adaptive_tolerance,
    douglas_peucker,
    simplify_path,
    simplify_polyline,
)


# ============================================================================
# DOUGLAS-PEUCKER
# ============================================================================

def test_drops_near_collinear_point():
    out = douglas_peucker([(0, 0), (1, 0.01), (2, 0)], 0.5)
    assert_allclose(out, [(0, 0), (2, 0)])


def test_keeps_spike():
    pts = [(0, 0), (1, 5), (2, 0)]
    assert_allclose(douglas_peucker(pts, 0.5), pts)


def test_short_inputs_returned():
    assert douglas_peucker([], 1.0).shape == (0, 2)
    assert_allclose(douglas_peucker([(0, 0), (3, 4)], 1.0), [(0, 0), (3, 4)])


def test_distance_threshold_is_strict():
    # Exactly epsilon away: not kept
    assert douglas_peucker([(0, 0), (1, 1), (2, 0)], 1.0).shape[0] == 2


def test_zero_epsilon_keeps_non_collinear_points():
    pts = [(0, 0), (1, 1), (2, 0.5), (3, 2), (4, 0)]
    assert_allclose(douglas_peucker(pts, 0.0), pts)
    assert_allclose(simplify_polyline(pts, 0.0), pts)


def test_zero_epsilon_drops_exactly_collinear_point():
    assert_allclose(douglas_peucker([(0, 0), (1, 0), (2, 0), (3, 4)], 0.0), [(0, 0), (2, 0), (3, 4)])


def test_retained_points_are_subset_in_order():
    rng = np.random.default_rng(0)
    pts = np.cumsum(rng.normal(size=(200, 2)), axis=0)
    out = douglas_peucker(pts, 1.5)
    assert_allclose(out[0], pts[0])
    assert_allclose(out[-1], pts[-1])
    indices = [int(np.flatnonzero((pts == p).all(axis=1))[0]) for p in out]
    assert indices == sorted(indices)


def test_long_stroke_no_recursion_error():
    t = np.linspace(0, 200 * np.pi, 50_000)
    pts = np.stack([t, np.sin(t) * 10], axis=1)
    out = douglas_peucker(pts, 0.01)
    assert 3 <= out.shape[0] <= pts.shape[0]


# ============================================================================
# ADAPTIVE TOLERANCE AND RETENTION
# ============================================================================

@pytest.mark.parametrize("tolerance,n_points,expected", [
    (1.0, 60, 0.5),
    (0.3, 60, 0.3),
    (5.0, 10, 2.0),
    (1.0, 50, 1.0),
])
def test_adaptive_tolerance(tolerance, n_points, expected):
    assert adaptive_tolerance(tolerance, n_points) == expected


def test_minimum_retention_resamples_collinear():
    pts = np.stack([np.arange(100.0), np.zeros(100)], axis=1)
    out = simplify_polyline(pts, 1.0)
    # n // 10 = 10 → step 10 → indices 0..90 plus the last point
    assert out.shape[0] == 11
    assert_allclose(out[:, 0], list(range(0, 100, 10)) + [99])


def test_simplify_polyline_never_below_three():
    out = simplify_polyline([(0, 0), (1, 0), (2, 0), (3, 0)], 1.0)
    assert out.shape[0] >= 3
    assert_allclose(out[-1], (3, 0))


# ============================================================================
# PATH REBUILD
# ============================================================================

def test_simplify_path_blend_controls():
    path = Path.from_polygon([(0, 0), (1, 1), (2, 0)])
    out = simplify_path(path, 0.5)

    assert out.segments[0] == MoveTo((0, 0))
    cubic = out.segments[1]
    assert isinstance(cubic, CubicTo)
    # Blend control (1, 0.7) elevated from the quadratic
    assert_allclose(cubic.c1, (2.0 / 3.0, 0.7 * 2.0 / 3.0))
    assert_allclose(cubic.c2, (1.0, 0.8))
    assert cubic.point == (1.0, 1.0)
    assert out.segments[2] == LineTo((2, 0))


def test_simplify_path_short_returned_unchanged():
    path = Path.from_polygon([(0, 0), (5, 5)])
    assert simplify_path(path, 1.0) is path
    assert simplify_path(Path.empty(), 1.0).is_empty


def test_simplify_path_carries_flags():
    pts = [(0, 0), (10, 0.1), (20, 0), (20, 10), (0, 10)]
    path = Path.from_polygon(pts, closed=True, fill_rule=FillRule.NON_ZERO)
    out = simplify_path(path, 1.0)
    assert out.closed
    assert out.fill_rule is FillRule.NON_ZERO


def test_simplify_path_reduces_dense_stroke():
    x = np.linspace(0, 100, 400)
    path = Path.from_polygon(np.stack([x, np.sin(x / 10) * 5], axis=1))
    out = simplify_path(path, 1.0)
    vertices = out.vertices()
    assert vertices.shape[0] < 400
    assert vertices.shape[0] >= 40
    assert_allclose(vertices[0], (0, 0))
    assert_allclose(vertices[-1], path.vertices()[-1])


def test_simplify_path_keeps_holes_separate():
    outer = [(0, 0), (10, 0), (10, 10), (0, 10)]
    hole = [(3, 3), (3, 7), (7, 7), (7, 3)]
    out = simplify_path(Path.from_polygons([outer, hole]), 1.0)

    assert len(out.subpaths()) == 2
    outer_v, hole_v = out.subpath_vertices()
    assert_allclose(outer_v, outer)
    assert_allclose(hole_v, hole)
    assert out.closed

"""Test region boolean operations.

Tests for inkflow.path_ops.boolean:
    - Union / intersection / subtraction / xor areas on overlapping squares
    - Results are closed even-odd polygon paths
    - Empty operand table
    - Degenerate operands are skipped, not fatal
    - Curved operands are flattened before clipping
    - paths_intersect, clip_to_rect, clip, combine dispatch, from_config

Run:
    pytest tests/test_boolean.py -v
"""

import math

import pytest

from inkflow.path_ops import (
    BooleanOperation,
    FillRule,
    Path,
    PathBooleanEngine,
    ShapeGenerator,
    bounding_box,
    path_area,
)
from inkflow.utils import validators


def _square(x0, y0, x1, y1):
    return Path.from_polygon([(x0, y0), (x1, y0), (x1, y1), (x0, y1)], closed=True)


@pytest.fixture
def engine():
    return PathBooleanEngine()


@pytest.fixture
def a():
    return _square(0, 0, 10, 10)


@pytest.fixture
def b():
    return _square(5, 0, 15, 10)


# ============================================================================
# OPERATIONS
# ============================================================================

def test_union_area(engine, a, b):
    result = engine.union(a, b)
    assert path_area(result) == pytest.approx(150.0)
    assert bounding_box(result) == pytest.approx((0.0, 0.0, 15.0, 10.0))
    assert result.closed
    assert result.fill_rule is FillRule.EVEN_ODD


def test_intersection_area(engine, a, b):
    result = engine.intersection(a, b)
    assert path_area(result) == pytest.approx(50.0)
    assert bounding_box(result) == pytest.approx((5.0, 0.0, 10.0, 10.0))


def test_subtraction_area(engine, a, b):
    result = engine.subtraction(a, b)
    assert path_area(result) == pytest.approx(50.0)
    assert bounding_box(result) == pytest.approx((0.0, 0.0, 5.0, 10.0))


def test_xor_area(engine, a, b):
    result = engine.xor(a, b)
    assert path_area(result) == pytest.approx(100.0)
    assert len(result.subpaths()) == 2


def test_xor_with_self_is_empty(engine, a):
    assert engine.xor(a, a).is_empty


def test_hole_from_subtraction(engine):
    outer = _square(0, 0, 10, 10)
    inner = _square(3, 3, 7, 7)
    donut = engine.subtraction(outer, inner)
    assert len(donut.subpaths()) == 2
    assert path_area(donut) == pytest.approx(84.0)


def test_curved_operand_is_flattened():
    engine = PathBooleanEngine(flatten_tolerance=0.01)
    circle = ShapeGenerator().ellipse((0, 0), 10, 10)
    right_half = _square(0, -20, 20, 20)
    half = engine.intersection(circle, right_half)
    assert path_area(half) == pytest.approx(math.pi * 50.0, rel=0.01)


# ============================================================================
# EMPTY AND DEGENERATE OPERANDS
# ============================================================================

def test_empty_operands(engine, a):
    empty = Path.empty()
    assert engine.union(a, empty) == a
    assert engine.union(empty, a) == a
    assert engine.xor(a, empty) == a
    assert engine.xor(empty, a) == a
    assert engine.subtraction(a, empty) == a
    assert engine.subtraction(empty, a).is_empty
    assert engine.intersection(a, empty).is_empty
    assert engine.intersection(empty, a).is_empty
    assert engine.union(empty, empty).is_empty


def test_degenerate_operand_skipped(engine, a):
    sliver = Path.from_polygon([(0, 0), (10, 0)])
    assert path_area(engine.union(a, sliver)) == pytest.approx(100.0)
    assert path_area(engine.union(sliver, a)) == pytest.approx(100.0)
    assert engine.intersection(a, sliver).is_empty
    assert engine.subtraction(sliver, a).is_empty


# ============================================================================
# QUERIES AND CLIPPING
# ============================================================================

def test_paths_intersect(engine, a, b):
    assert engine.paths_intersect(a, b)
    assert not engine.paths_intersect(a, _square(20, 20, 30, 30))
    assert not engine.paths_intersect(a, Path.empty())


def test_clip_to_rect(engine, a):
    clipped = engine.clip_to_rect(a, (5, 5, 10, 10))
    assert path_area(clipped) == pytest.approx(25.0)
    assert bounding_box(clipped) == pytest.approx((5.0, 5.0, 10.0, 10.0))


def test_clip_is_intersection(engine, a, b):
    assert engine.clip(a, b) == engine.intersection(a, b)


def test_combine_dispatch(engine, a, b):
    assert engine.combine(a, b, BooleanOperation.UNION) == engine.union(a, b)
    assert engine.combine(a, b, BooleanOperation.XOR) == engine.xor(a, b)
    assert engine.combine(a, b, BooleanOperation.SUBTRACTION) == engine.subtraction(a, b)
    with pytest.raises(ValueError, match="Unknown boolean operation"):
        engine.combine(a, b, "union")


def test_from_config(a, b):
    cfg = validators.EngineConfigV1()
    cfg.paths.clipper_scale = 1024
    engine = PathBooleanEngine.from_config(cfg.paths)
    assert engine.clipper_scale == 1024
    assert path_area(engine.union(a, b)) == pytest.approx(150.0)

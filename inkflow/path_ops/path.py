"""Path value type: an explicit segment list plus closure and fill rule.

A Path is a tuple of segments drawn from three variants:

    MoveTo(point)            start a new subpath
    LineTo(point)            straight segment to point
    CubicTo(c1, c2, point)   cubic Bézier to point

Quadratic curves are stored exactly as cubics (see PathBuilder.quad_to).
``closed`` applies to every subpath; ``fill_rule`` decides insideness for
region operations. Paths are immutable values: every operation in
inkflow.path_ops returns a new Path.

Derived representations:
    - vertices(): segment endpoints as an (N, 2) array (the polygon point
      list)
    - subpath_vertices(): the same, split per subpath (consumed by
      simplify/smooth through rebuild_subpaths)
    - flatten(): one polyline per subpath with curves subdivided
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..utils.geometry import (
    as_points,
    bezier_cubic_polyline,
    bezier_quad_to_cubic,
    polyline_bbox,
)

Point = Tuple[float, float]


def _pt(p) -> Point:
    return (float(p[0]), float(p[1]))


class FillRule(Enum):
    EVEN_ODD = "even_odd"
    NON_ZERO = "non_zero"


@dataclass(frozen=True)
class MoveTo:
    point: Point

    def __post_init__(self):
        object.__setattr__(self, 'point', _pt(self.point))


@dataclass(frozen=True)
class LineTo:
    point: Point

    def __post_init__(self):
        object.__setattr__(self, 'point', _pt(self.point))


@dataclass(frozen=True)
class CubicTo:
    c1: Point
    c2: Point
    point: Point

    def __post_init__(self):
        object.__setattr__(self, 'c1', _pt(self.c1))
        object.__setattr__(self, 'c2', _pt(self.c2))
        object.__setattr__(self, 'point', _pt(self.point))


Segment = Union[MoveTo, LineTo, CubicTo]


@dataclass(frozen=True)
class Path:
    """Immutable 2-D path.

    Attributes
    ----------
    segments : Tuple[Segment, ...]
        MoveTo / LineTo / CubicTo in drawing order
    closed : bool
        Every subpath is implicitly closed back to its MoveTo
    fill_rule : FillRule
        EVEN_ODD (used by all region operations) or NON_ZERO
    """
    segments: Tuple[Segment, ...] = ()
    closed: bool = False
    fill_rule: FillRule = field(default=FillRule.EVEN_ODD)

    def __post_init__(self):
        object.__setattr__(self, 'segments', tuple(self.segments))

    def __len__(self) -> int:
        return len(self.segments)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls, fill_rule: FillRule = FillRule.EVEN_ODD) -> "Path":
        return cls((), False, fill_rule)

    @classmethod
    def from_polygon(
        cls,
        points,
        closed: bool = False,
        fill_rule: FillRule = FillRule.EVEN_ODD
    ) -> "Path":
        """Polyline path: MoveTo the first point, LineTo the rest."""
        pts = as_points(points)
        if pts.shape[0] == 0:
            return cls.empty(fill_rule)
        segments = [MoveTo(pts[0])]
        segments.extend(LineTo(p) for p in pts[1:])
        return cls(tuple(segments), closed, fill_rule)

    @classmethod
    def from_polygons(
        cls,
        polygons: Iterable,
        closed: bool = True,
        fill_rule: FillRule = FillRule.EVEN_ODD
    ) -> "Path":
        """One subpath per polygon; polygons with no points are skipped."""
        segments: List[Segment] = []
        for poly in polygons:
            pts = as_points(poly)
            if pts.shape[0] == 0:
                continue
            segments.append(MoveTo(pts[0]))
            segments.extend(LineTo(p) for p in pts[1:])
        return cls(tuple(segments), closed, fill_rule)

    def with_fill_rule(self, fill_rule: FillRule) -> "Path":
        return replace(self, fill_rule=fill_rule)

    def as_closed(self, closed: bool = True) -> "Path":
        return replace(self, closed=closed)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.segments

    def vertices(self) -> np.ndarray:
        """Segment endpoints in order, shape (N, 2). Control points excluded."""
        if not self.segments:
            return np.zeros((0, 2), dtype=np.float64)
        return np.array([seg.point for seg in self.segments], dtype=np.float64)

    def subpaths(self) -> List[Tuple[Segment, ...]]:
        """Split at MoveTo boundaries."""
        out: List[List[Segment]] = []
        for seg in self.segments:
            if isinstance(seg, MoveTo) or not out:
                out.append([seg])
            else:
                out[-1].append(seg)
        return [tuple(s) for s in out]

    def subpath_vertices(self) -> List[np.ndarray]:
        """Segment endpoints of each subpath, one (N, 2) array per subpath."""
        return [np.array([seg.point for seg in sub], dtype=np.float64) for sub in self.subpaths()]

    def flatten(self, tolerance: float = 0.25) -> List[np.ndarray]:
        """Polyline per subpath with cubic segments subdivided.

        Parameters
        ----------
        tolerance : float
            Maximum deviation from the true curve (px), default 0.25

        Returns
        -------
        List[np.ndarray]
            One (N, 2) array per subpath. Closing edges are not repeated;
            consult ``closed`` to know whether they are implied.
        """
        polylines: List[np.ndarray] = []
        for sub in self.subpaths():
            pts: List[np.ndarray] = [np.asarray(sub[0].point, dtype=np.float64)]
            for seg in sub[1:]:
                if isinstance(seg, CubicTo):
                    curve = bezier_cubic_polyline(pts[-1], seg.c1, seg.c2, seg.point, max_err=tolerance)
                    pts.extend(curve[1:])
                else:
                    pts.append(np.asarray(seg.point, dtype=np.float64))
            polylines.append(np.vstack(pts))
        return polylines

    def bounding_box(self, tolerance: float = 0.25) -> Tuple[float, float, float, float]:
        """Tight bbox ``(xmin, ymin, xmax, ymax)`` of the flattened path."""
        polylines = self.flatten(tolerance)
        if not polylines:
            return (0.0, 0.0, 0.0, 0.0)
        return polyline_bbox(np.vstack(polylines))


def path_to_polygon(path: Path) -> np.ndarray:
    """Polygon point list of a path (its segment endpoints)."""
    return path.vertices()


def rebuild_subpaths(
    path: Path,
    min_vertices: int,
    emit: Callable[["PathBuilder", np.ndarray], None]
) -> Path:
    """Rebuild a path one subpath at a time from its vertices.

    Parameters
    ----------
    path : Path
        Input path (not modified)
    min_vertices : int
        Subpaths with fewer vertices are copied through unchanged
    emit : callable
        ``emit(builder, vertices)`` writes the replacement for one subpath,
        starting with its own ``move_to``

    Returns
    -------
    Path
        Same closed flag and fill rule as the input. The input itself is
        returned when no subpath reaches ``min_vertices``.
    """
    subpaths = path.subpaths()
    vertex_lists = path.subpath_vertices()
    if all(v.shape[0] < min_vertices for v in vertex_lists):
        return path

    builder = PathBuilder()
    for sub, vertices in zip(subpaths, vertex_lists):
        if vertices.shape[0] < min_vertices:
            for seg in sub:
                builder.append(seg)
        else:
            emit(builder, vertices)
    return builder.build(closed=path.closed, fill_rule=path.fill_rule)


class PathBuilder:
    """Incremental Path construction.

    Examples
    --------
    >>> b = PathBuilder()
    >>> b.move_to((0, 0)).line_to((10, 0)).quad_to((15, 5), (10, 10))
    >>> path = b.build(closed=True)
    """

    def __init__(self):
        self._segments: List[Segment] = []
        self._current: Optional[Point] = None

    @property
    def current_point(self) -> Optional[Point]:
        return self._current

    def move_to(self, point: Sequence[float]) -> "PathBuilder":
        seg = MoveTo(point)
        self._segments.append(seg)
        self._current = seg.point
        return self

    def line_to(self, point: Sequence[float]) -> "PathBuilder":
        if self._current is None:
            return self.move_to(point)
        seg = LineTo(point)
        self._segments.append(seg)
        self._current = seg.point
        return self

    def cubic_to(
        self,
        c1: Sequence[float],
        c2: Sequence[float],
        point: Sequence[float]
    ) -> "PathBuilder":
        if self._current is None:
            self.move_to((0.0, 0.0))
        seg = CubicTo(c1, c2, point)
        self._segments.append(seg)
        self._current = seg.point
        return self

    def quad_to(self, control: Sequence[float], point: Sequence[float]) -> "PathBuilder":
        """Quadratic Bézier, stored as its exact cubic elevation."""
        if self._current is None:
            self.move_to((0.0, 0.0))
        c1, c2 = bezier_quad_to_cubic(self._current, control, point)
        return self.cubic_to(c1, c2, point)

    def append(self, segment: Segment) -> "PathBuilder":
        """Add an existing segment unchanged."""
        if isinstance(segment, MoveTo):
            return self.move_to(segment.point)
        if isinstance(segment, CubicTo):
            return self.cubic_to(segment.c1, segment.c2, segment.point)
        return self.line_to(segment.point)

    def build(self, closed: bool = False, fill_rule: FillRule = FillRule.EVEN_ODD) -> Path:
        return Path(tuple(self._segments), closed, fill_rule)

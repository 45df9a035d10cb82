"""Polyline → curve conversion and stroked outlines.

Provides:
    - smooth_path: cubic through every interior vertex, tangent taken from
      its neighbours
    - convert_to_curve: replace each straight run with a cubic
    - outline_path / offset_path: stroke a path at a width with round
      joins and caps (pyclipper offsetting)

Smoothing and conversion read each subpath's vertices (segment endpoints)
and rebuild it from them, so holes stay holes; closed flag and fill rule
are carried over. Outlines are regions: closed, even-odd, made of polygon
subpaths.
"""

import logging

import pyclipper

from .boolean import DEFAULT_CLIPPER_SCALE, DEFAULT_FLATTEN_TOLERANCE, from_clipper_paths, to_clipper_paths
from .path import Path, PathBuilder, rebuild_subpaths

logger = logging.getLogger(__name__)

DEFAULT_ARC_TOLERANCE = 0.1


def smooth_path(path: Path, smoothness: float) -> Path:
    """Smooth a polyline path into cubic segments.

    Parameters
    ----------
    path : Path
        Input path (not modified)
    smoothness : float
        Tangent scale; 0 reproduces the polyline corners, ~1 is round

    Returns
    -------
    Path
        Per subpath: ``MoveTo(p0)``, then for each interior ``p[i]`` a cubic
        ending on it with controls ``p[i] ± (p[i+1] - p[i-1]) * smoothness *
        0.15``, then ``LineTo(last)``. Subpaths with fewer than 3 vertices
        are copied through; a path with none to smooth comes back as-is.
    """
    if len(path) < 3:
        return path
    k = smoothness * 0.15

    def emit(builder: PathBuilder, points) -> None:
        builder.move_to(points[0])
        for i in range(1, points.shape[0] - 1):
            tangent = (points[i + 1] - points[i - 1]) * k
            builder.cubic_to(points[i] + tangent, points[i] - tangent, points[i])
        builder.line_to(points[-1])

    return rebuild_subpaths(path, 3, emit)


def convert_to_curve(path: Path) -> Path:
    """Turn every straight segment into a cubic.

    For each vertex ``curr`` after the first, with ``prev`` before it and
    ``next`` after it (``next = curr`` on the last vertex), emits
    ``CubicTo(prev + (curr-prev)*0.67, curr - (next-curr)*0.33, curr)``.
    Works per subpath: a two-vertex subpath becomes a single line, a
    one-vertex subpath is copied through.
    """
    if len(path) < 2:
        return path

    def emit(builder: PathBuilder, points) -> None:
        builder.move_to(points[0])
        if points.shape[0] == 2:
            builder.line_to(points[1])
            return
        last = points.shape[0] - 1
        for i in range(1, points.shape[0]):
            prev, curr = points[i - 1], points[i]
            nxt = points[i + 1] if i < last else curr
            builder.cubic_to(prev + (curr - prev) * 0.67, curr - (nxt - curr) * 0.33, curr)

    return rebuild_subpaths(path, 2, emit)


def outline_path(
    path: Path,
    width: float,
    *,
    clipper_scale: int = DEFAULT_CLIPPER_SCALE,
    flatten_tolerance: float = DEFAULT_FLATTEN_TOLERANCE,
    arc_tolerance: float = DEFAULT_ARC_TOLERANCE
) -> Path:
    """Stroke outline of a path at the given width.

    Parameters
    ----------
    path : Path
        Centerline; open subpaths get round caps, closed ones become rings
    width : float
        Full stroke width (px); ≤ 0 yields an empty path
    clipper_scale : int
        Float → integer scale for pyclipper
    flatten_tolerance : float
        Curve flattening error (px)
    arc_tolerance : float
        Max deviation of round joins/caps from a true arc (px)

    Returns
    -------
    Path
        Closed even-odd region

    Notes
    -----
    Uses JT_ROUND joins with ET_OPENROUND (open) or ET_CLOSEDLINE (closed)
    end types, offset by width/2.
    """
    if path.is_empty or width <= 0.0:
        return Path.empty()

    offsetter = pyclipper.PyclipperOffset(2.0, arc_tolerance * clipper_scale)
    end_type = pyclipper.ET_CLOSEDLINE if path.closed else pyclipper.ET_OPENROUND

    added = 0
    for poly in to_clipper_paths(path, clipper_scale, flatten_tolerance):
        try:
            offsetter.AddPath(poly, pyclipper.JT_ROUND, end_type)
            added += 1
        except pyclipper.ClipperException as e:
            logger.debug(f"Skipping degenerate subpath in outline ({len(poly)} points): {e}")
    if added == 0:
        return Path.empty()

    result = offsetter.Execute(width / 2.0 * clipper_scale)
    return from_clipper_paths(result, clipper_scale)


def offset_path(path: Path, distance: float, **kwargs) -> Path:
    """Outline at ``2 * |distance|`` (the region within distance of the path)."""
    return outline_path(path, 2.0 * abs(distance), **kwargs)

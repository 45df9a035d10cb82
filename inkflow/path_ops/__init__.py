"""Path geometry operations.

Modules:
    - path: Path value type (MoveTo / LineTo / CubicTo, closed flag, fill rule)
    - simplify: Douglas-Peucker with density-adaptive tolerance
    - smooth: smoothing, curve conversion, stroked outlines
    - boolean: union / intersection / subtraction / xor via pyclipper
    - shapes: star, gear, arrow and basic primitives
    - measure: hit-testing, area, perimeter, bounds

Depends only on inkflow.utils.
"""

from .boolean import BooleanOperation, PathBooleanEngine
from .measure import bbox_distance, bounding_box, path_area, path_centroid, path_perimeter, point_in_polygon, polygon_area
from .path import CubicTo, FillRule, LineTo, MoveTo, Path, PathBuilder, path_to_polygon
from .shapes import ShapeGenerator
from .simplify import adaptive_tolerance, douglas_peucker, simplify_path, simplify_polyline
from .smooth import convert_to_curve, offset_path, outline_path, smooth_path

__all__ = [
    'BooleanOperation',
    'CubicTo',
    'FillRule',
    'LineTo',
    'MoveTo',
    'Path',
    'PathBooleanEngine',
    'PathBuilder',
    'ShapeGenerator',
    'adaptive_tolerance',
    'bbox_distance',
    'bounding_box',
    'convert_to_curve',
    'douglas_peucker',
    'offset_path',
    'outline_path',
    'path_area',
    'path_centroid',
    'path_perimeter',
    'path_to_polygon',
    'point_in_polygon',
    'polygon_area',
    'simplify_path',
    'simplify_polyline',
    'smooth_path',
]

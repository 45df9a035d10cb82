"""Boolean composition of path regions (union, intersection, subtraction, xor).

Both operands are treated as filled regions under the even-odd rule: curves
are flattened, every subpath is implicitly closed, and the result comes back
as a closed even-odd Path made of polygon subpaths. Clipping itself is
pyclipper (Vatti) on integer coordinates; floats are scaled by
``clipper_scale`` on the way in and divided back on the way out.

Empty operands never reach pyclipper:

    op            A, ∅    ∅, B    ∅, ∅
    union         A       B       ∅
    xor           A       B       ∅
    subtraction   A       ∅       ∅
    intersection  ∅       ∅       ∅

Usage:
    engine = PathBooleanEngine()
    merged = engine.union(shape_a, shape_b)
    holed = engine.combine(shape_a, shape_b, BooleanOperation.SUBTRACTION)
"""

import logging
from enum import Enum
from typing import List, Sequence, Tuple

import numpy as np
import pyclipper

from .measure import bbox_distance
from .path import FillRule, Path

logger = logging.getLogger(__name__)

DEFAULT_CLIPPER_SCALE = 1 << 16
DEFAULT_FLATTEN_TOLERANCE = 0.25


class BooleanOperation(Enum):
    UNION = "union"
    INTERSECTION = "intersection"
    SUBTRACTION = "subtraction"
    XOR = "xor"


def to_clipper_paths(
    path: Path,
    scale: int = DEFAULT_CLIPPER_SCALE,
    tolerance: float = DEFAULT_FLATTEN_TOLERANCE
) -> List[List[Tuple[int, int]]]:
    """Flatten a Path and scale it to pyclipper integer coordinates."""
    out = []
    for poly in path.flatten(tolerance):
        scaled = np.round(poly * scale).astype(np.int64)
        out.append([(int(x), int(y)) for x, y in scaled])
    return out


def from_clipper_paths(polygons: Sequence, scale: int = DEFAULT_CLIPPER_SCALE) -> Path:
    """Closed even-odd Path from pyclipper output polygons."""
    polys = [np.asarray(p, dtype=np.float64) / scale for p in polygons if len(p) > 0]
    return Path.from_polygons(polys, closed=True, fill_rule=FillRule.EVEN_ODD)


class PathBooleanEngine:
    """Region boolean operations on Paths.

    Parameters
    ----------
    clipper_scale : int
        Float → integer scale factor, default 2**16 (≈1.5e-5 px resolution)
    flatten_tolerance : float
        Curve flattening error before clipping (px), default 0.25
    """

    def __init__(
        self,
        clipper_scale: int = DEFAULT_CLIPPER_SCALE,
        flatten_tolerance: float = DEFAULT_FLATTEN_TOLERANCE
    ):
        self.clipper_scale = int(clipper_scale)
        self.flatten_tolerance = float(flatten_tolerance)

    @classmethod
    def from_config(cls, paths_cfg) -> "PathBooleanEngine":
        """Build from an engine.v1 ``paths`` section."""
        return cls(clipper_scale=paths_cfg.clipper_scale,
                   flatten_tolerance=paths_cfg.flatten_tolerance)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def union(self, a: Path, b: Path) -> Path:
        if a.is_empty:
            return b
        if b.is_empty:
            return a
        return self._execute(a, b, pyclipper.CT_UNION)

    def intersection(self, a: Path, b: Path) -> Path:
        if a.is_empty or b.is_empty:
            return Path.empty()
        return self._execute(a, b, pyclipper.CT_INTERSECTION)

    def subtraction(self, a: Path, b: Path) -> Path:
        """A minus B."""
        if a.is_empty:
            return Path.empty()
        if b.is_empty:
            return a
        return self._execute(a, b, pyclipper.CT_DIFFERENCE)

    def xor(self, a: Path, b: Path) -> Path:
        """Symmetric difference, computed as union minus intersection."""
        if a.is_empty:
            return b
        if b.is_empty:
            return a
        merged = self.union(a, b)
        common = self.intersection(a, b)
        return self.subtraction(merged, common)

    def combine(self, a: Path, b: Path, op: BooleanOperation) -> Path:
        """Dispatch on BooleanOperation."""
        if op is BooleanOperation.UNION:
            return self.union(a, b)
        if op is BooleanOperation.INTERSECTION:
            return self.intersection(a, b)
        if op is BooleanOperation.SUBTRACTION:
            return self.subtraction(a, b)
        if op is BooleanOperation.XOR:
            return self.xor(a, b)
        raise ValueError(f"Unknown boolean operation: {op}")

    # ------------------------------------------------------------------
    # Queries and clipping
    # ------------------------------------------------------------------

    def paths_intersect(self, a: Path, b: Path) -> bool:
        """True if the two regions overlap with non-zero area."""
        if a.is_empty or b.is_empty:
            return False
        if bbox_distance(a.bounding_box(self.flatten_tolerance),
                         b.bounding_box(self.flatten_tolerance)) > 0.0:
            return False
        return not self.intersection(a, b).is_empty

    def clip_to_rect(self, path: Path, rect: Tuple[float, float, float, float]) -> Path:
        """Intersect with the rectangle ``(x, y, width, height)``."""
        x, y, w, h = rect
        clip_region = Path.from_polygon(
            [(x, y), (x + w, y), (x + w, y + h), (x, y + h)], closed=True
        )
        return self.intersection(path, clip_region)

    def clip(self, path: Path, clip_path: Path) -> Path:
        """Intersect with an arbitrary clip region."""
        return self.intersection(path, clip_path)

    # ------------------------------------------------------------------
    # pyclipper plumbing
    # ------------------------------------------------------------------

    def _add_paths(self, clipper: pyclipper.Pyclipper, path: Path, poly_type) -> int:
        added = 0
        for poly in to_clipper_paths(path, self.clipper_scale, self.flatten_tolerance):
            try:
                clipper.AddPath(poly, poly_type, True)
                added += 1
            except pyclipper.ClipperException as e:
                logger.debug(f"Skipping degenerate polygon ({len(poly)} points): {e}")
        return added

    def _execute(self, a: Path, b: Path, clip_type) -> Path:
        clipper = pyclipper.Pyclipper()
        n_subject = self._add_paths(clipper, a, pyclipper.PT_SUBJECT)
        n_clip = self._add_paths(clipper, b, pyclipper.PT_CLIP)

        if n_subject == 0 and clip_type != pyclipper.CT_UNION:
            return Path.empty()
        if n_subject == 0 and n_clip == 0:
            return Path.empty()
        if n_subject == 0:
            # Union with only the clip operand left: the clip region itself.
            clipper = pyclipper.Pyclipper()
            self._add_paths(clipper, b, pyclipper.PT_SUBJECT)
        elif n_clip == 0 and clip_type == pyclipper.CT_INTERSECTION:
            return Path.empty()

        result = clipper.Execute(clip_type, pyclipper.PFT_EVENODD, pyclipper.PFT_EVENODD)
        return from_clipper_paths(result, self.clipper_scale)

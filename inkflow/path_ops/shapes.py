"""Parametric shape construction (stars, gears, arrows, basic primitives).

All shapes are built in canvas pixels around an explicit center. Closed
shapes set ``Path.closed``; the arrow is open (shaft plus a two-segment
head) and is meant to be stroked, not filled.

Angles start at -90° (pointing up in a +Y-down canvas) for stars and at 0
for gears and regular polygons.
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np

from .path import Path, PathBuilder

logger = logging.getLogger(__name__)

STAR_INNER_RATIO = 0.4
GEAR_TOOTH_FRACTION = 0.4
GEAR_TOOTH_HEIGHT = 0.2
ARROW_HEAD_SPREAD = 0.5
# Cubic arc handle length for a quarter circle.
KAPPA = 4.0 * (math.sqrt(2.0) - 1.0) / 3.0


class ShapeGenerator:
    """Builds procedural shape paths.

    Parameters
    ----------
    rng : np.random.Generator, optional
        Source for irregular shapes; default ``np.random.default_rng()``
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def star(self, center: Sequence[float], radius: float, points: int) -> Path:
        """Star with ``2 * points`` vertices alternating radius and 0.4 * radius.

        The first (outer) vertex is at -90°; vertices are ``pi / points``
        apart. ``points`` is clamped to at least 2.
        """
        if points < 2:
            logger.debug(f"Star point count {points} clamped to 2")
            points = 2
        cx, cy = float(center[0]), float(center[1])
        step = math.pi / points
        inner = radius * STAR_INNER_RATIO

        vertices = []
        for i in range(points * 2):
            angle = i * step - math.pi / 2.0
            r = radius if i % 2 == 0 else inner
            vertices.append((cx + math.cos(angle) * r, cy + math.sin(angle) * r))
        return Path.from_polygon(vertices, closed=True)

    def gear(self, center: Sequence[float], radius: float, teeth: int) -> Path:
        """Gear outline: four vertices per tooth, tips at 1.2 * radius.

        Each tooth spans ``0.4 * 2pi / teeth`` radians: root pair at
        ``radius``, then the tip pair at ``radius * 1.2`` walked back across
        the same span. ``teeth`` is clamped to at least 1.
        """
        if teeth < 1:
            logger.debug(f"Gear tooth count {teeth} clamped to 1")
            teeth = 1
        cx, cy = float(center[0]), float(center[1])
        step = 2.0 * math.pi / teeth
        half = step * GEAR_TOOTH_FRACTION / 2.0
        tip = radius + radius * GEAR_TOOTH_HEIGHT

        vertices = []
        for i in range(teeth):
            base = i * step
            for angle, r in ((base - half, radius), (base + half, radius),
                             (base + half, tip), (base - half, tip)):
                vertices.append((cx + math.cos(angle) * r, cy + math.sin(angle) * r))
        return Path.from_polygon(vertices, closed=True)

    def arrow(
        self,
        start: Sequence[float],
        end: Sequence[float],
        head_length: float
    ) -> Path:
        """Open arrow: shaft ``start → end`` plus a head ``p1 → end → p2``.

        ``p1, p2 = end - dir * head_length ± perp * head_length * 0.5``.
        A zero-length arrow has no direction; its head collapses onto ``end``.
        """
        start_v = np.asarray(start, dtype=np.float64)
        end_v = np.asarray(end, dtype=np.float64)
        delta = end_v - start_v
        length = float(np.hypot(*delta))

        if length == 0.0:
            p1 = p2 = end_v
        else:
            direction = delta / length
            perp = np.array([-direction[1], direction[0]])
            back = end_v - direction * head_length
            p1 = back + perp * head_length * ARROW_HEAD_SPREAD
            p2 = back - perp * head_length * ARROW_HEAD_SPREAD

        return (PathBuilder()
                .move_to(start_v).line_to(end_v)
                .move_to(p1).line_to(end_v).line_to(p2)
                .build(closed=False))

    def rectangle(self, x: float, y: float, width: float, height: float) -> Path:
        """Axis-aligned rectangle from its top-left corner."""
        return Path.from_polygon(
            [(x, y), (x + width, y), (x + width, y + height), (x, y + height)],
            closed=True,
        )

    def ellipse(self, center: Sequence[float], rx: float, ry: float) -> Path:
        """Ellipse as four cubic quarter arcs, starting at angle 0."""
        cx, cy = float(center[0]), float(center[1])
        kx, ky = rx * KAPPA, ry * KAPPA
        return (PathBuilder()
                .move_to((cx + rx, cy))
                .cubic_to((cx + rx, cy + ky), (cx + kx, cy + ry), (cx, cy + ry))
                .cubic_to((cx - kx, cy + ry), (cx - rx, cy + ky), (cx - rx, cy))
                .cubic_to((cx - rx, cy - ky), (cx - kx, cy - ry), (cx, cy - ry))
                .cubic_to((cx + kx, cy - ry), (cx + rx, cy - ky), (cx + rx, cy))
                .build(closed=True))

    def regular_polygon(
        self,
        center: Sequence[float],
        radius: float,
        sides: int,
        irregularity: float = 0.0
    ) -> Path:
        """Regular polygon with optional radial noise.

        Parameters
        ----------
        center : Sequence[float]
            Center (x, y)
        radius : float
            Circumradius (px)
        sides : int
            Vertex count, clamped to at least 3
        irregularity : float
            Each vertex radius is scaled by ``1 + uniform(-1, 1) * irregularity``
            drawn from this generator's RNG; 0 gives a regular polygon

        Returns
        -------
        Path
            Closed polygon, first vertex at angle 0
        """
        if sides < 3:
            logger.debug(f"Polygon side count {sides} clamped to 3")
            sides = 3
        cx, cy = float(center[0]), float(center[1])
        angles = np.arange(sides) * (2.0 * math.pi / sides)
        radii = np.full(sides, float(radius))
        if irregularity > 0.0:
            radii *= 1.0 + self.rng.uniform(-1.0, 1.0, size=sides) * irregularity
        vertices = np.stack([cx + np.cos(angles) * radii, cy + np.sin(angles) * radii], axis=1)
        return Path.from_polygon(vertices, closed=True)

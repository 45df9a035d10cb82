"""Stroke synthesizer: pointer samples → stroke Path + per-segment styles.

State machine:
    Idle --begin_stroke--> Drawing --add_point--> Drawing --end_stroke--> Idle

add_point / end_stroke / update_preview while Idle are no-ops.

Per add_point:
    1. velocity from the previous raw sample (px/s; 0 when dt <= 0)
    2. raw position/pressure pushed into the ring buffers
    3. position smoothed over the buffer, then jittered
    4. width and color computed once for the placed point
    5. whole stroke path regenerated (cubic per consecutive pair,
       controls at 30% / 70%)

Styles are computed when a point is placed and reused on every
regeneration, so a stroke does not flicker as it grows.

Usage:
    synth = StrokeSynthesizer(get_default_profile("Pencil"), rng=np.random.default_rng(7))
    synth.begin_stroke((0, 0), pressure=0.8, timestamp=0)
    synth.add_point((4, 1), pressure=0.9, timestamp=16)
    result = synth.end_stroke()
"""

import logging
import time
from typing import Callable, Optional, Sequence, Tuple

import numpy as np

from ..path_ops.path import LineTo, MoveTo, Path, PathBuilder
from ..utils.color import BLACK, RGBA, validate_rgba, with_alpha
from ..utils.logging_config import log_context
from . import dynamics
from .profile import StrokeProfile, default_profiles, get_default_profile
from .samples import (
    DEFAULT_BUFFER_SIZE,
    SegmentStyle,
    StrokePoint,
    StrokeResult,
    StrokeSample,
    StrokeState,
)

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def generate_stroke_path(
    points: Sequence[StrokePoint],
    opacity: float
) -> Tuple[Path, Tuple[SegmentStyle, ...]]:
    """Build the stroke geometry from placed points.

    Parameters
    ----------
    points : Sequence[StrokePoint]
        Placed points in drawing order
    opacity : float
        Alpha applied to every segment color

    Returns
    -------
    Tuple[Path, Tuple[SegmentStyle, ...]]
        Open path ``MoveTo(p0)`` + one cubic per consecutive pair with
        controls ``p[i-1] + d*0.3`` and ``p[i] - d*0.3`` (``d = p[i] - p[i-1]``),
        and one style per segment taken from its end point. Fewer than two
        points give an empty path and no styles.
    """
    if len(points) < 2:
        return Path.empty(), ()

    positions = np.array([p.position for p in points], dtype=np.float64)
    builder = PathBuilder().move_to(positions[0])
    styles = []
    for i in range(1, len(points)):
        prev, curr = positions[i - 1], positions[i]
        d = curr - prev
        builder.cubic_to(prev + d * 0.3, curr - d * 0.3, curr)
        styles.append(SegmentStyle(points[i].width, with_alpha(points[i].color, opacity)))

    return builder.build(closed=False), tuple(styles)


class StrokeSynthesizer:
    """Turns a stream of pointer samples into stroke geometry.

    Parameters
    ----------
    profile : StrokeProfile, optional
        Brush dynamics; default is the first built-in preset
    base_color : RGBA
        Color before variation, default opaque black
    rng : np.random.Generator, optional
        Source for jitter, width randomization and color variation;
        default ``np.random.default_rng()``
    buffer_size : int
        Smoothing window capacity, default 5
    clock : Callable[[], float], optional
        Millisecond clock used when the host omits timestamps; default
        ``time.monotonic`` in ms
    """

    def __init__(
        self,
        profile: Optional[StrokeProfile] = None,
        *,
        base_color: Sequence[float] = BLACK,
        rng: Optional[np.random.Generator] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        clock: Optional[Callable[[], float]] = None
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.base_color: RGBA = validate_rgba(base_color)
        self.clock = clock if clock is not None else _monotonic_ms
        self.state = StrokeState.create(profile or default_profiles()[0], buffer_size)

        self._path = Path.empty()
        self._styles: Tuple[SegmentStyle, ...] = ()
        self._preview = Path.empty()
        self._current_width = 0.0
        self._current_color: RGBA = self.base_color
        self._stroke_count = 0

    @classmethod
    def from_config(cls, engine_cfg, presets=None, clock=None) -> "StrokeSynthesizer":
        """Build from a validated engine.v1 config.

        Parameters
        ----------
        engine_cfg : EngineConfigV1
            Supplies buffer size, base color, default preset and RNG seed
        presets : BrushPresetsV1, optional
            Preset file to resolve ``default_preset`` against; built-in
            presets are used when omitted or when the name is missing
        """
        syn_cfg = engine_cfg.synthesizer
        preset = presets.get(syn_cfg.default_preset) if presets is not None else None
        profile = preset.to_profile() if preset is not None else get_default_profile(syn_cfg.default_preset)
        return cls(
            profile,
            base_color=syn_cfg.base_color,
            rng=np.random.default_rng(engine_cfg.randomness.seed),
            buffer_size=syn_cfg.buffer_size,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def profile(self) -> StrokeProfile:
        return self.state.profile

    @property
    def is_drawing(self) -> bool:
        return self.state.drawing

    @property
    def points(self) -> Tuple[StrokePoint, ...]:
        return tuple(self.state.points)

    @property
    def stroke_path(self) -> Path:
        return self._path

    @property
    def segment_styles(self) -> Tuple[SegmentStyle, ...]:
        return self._styles

    @property
    def preview_path(self) -> Path:
        return self._preview

    @property
    def current_width(self) -> float:
        return self._current_width

    @property
    def current_color(self) -> RGBA:
        return self._current_color

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def load_profile(self, profile: StrokeProfile) -> None:
        """Switch brush; takes effect for the next computed point."""
        self.state.profile = profile
        logger.debug(f"Loaded brush profile '{profile.name}'")

    def load_default_profile(self, name: str) -> StrokeProfile:
        """Switch to a built-in preset; unknown names get the first preset."""
        profile = get_default_profile(name)
        if profile.name != name:
            logger.debug(f"Unknown preset '{name}', using '{profile.name}'")
        self.load_profile(profile)
        return profile

    def set_base_color(self, color: Sequence[float]) -> None:
        self.base_color = validate_rgba(color)

    # ------------------------------------------------------------------
    # Stroke lifecycle
    # ------------------------------------------------------------------

    def begin_stroke(
        self,
        pos: Sequence[float],
        pressure: float = 1.0,
        timestamp: Optional[float] = None
    ) -> None:
        """Start a new stroke at ``pos`` (Idle or Drawing → Drawing)."""
        if timestamp is None:
            timestamp = self.clock()
        self._stroke_count += 1

        state = self.state
        state.reset()
        self._path = Path.empty()
        self._styles = ()
        self._preview = Path.empty()

        sample = StrokeSample(pos, pressure=pressure, velocity=0.0, timestamp=timestamp)
        point = self._place(sample)
        state.points.append(point)
        state.record(sample.position, sample.pressure, timestamp)
        state.drawing = True

        with log_context(stroke=self._stroke_count):
            logger.debug(
                f"Stroke began at ({sample.position[0]:.1f}, {sample.position[1]:.1f}) "
                f"with '{state.profile.name}', width {point.width:.3f}"
            )

    def add_point(
        self,
        pos: Sequence[float],
        pressure: float = 1.0,
        tilt_x: float = 0.0,
        tilt_y: float = 0.0,
        rotation: float = 0.0,
        timestamp: Optional[float] = None
    ) -> Optional[StrokePoint]:
        """Append a pointer sample to the stroke in progress.

        Returns
        -------
        StrokePoint or None
            The placed point, or None while idle
        """
        state = self.state
        if not state.drawing:
            return None
        if timestamp is None:
            timestamp = self.clock()

        velocity = dynamics.compute_velocity(state.last_position, pos, timestamp - state.last_timestamp)
        raw = StrokeSample(pos, pressure, tilt_x, tilt_y, rotation, velocity, timestamp)
        state.record(raw.position, raw.pressure, timestamp)

        profile = state.profile
        placed = dynamics.window_smooth(state.positions.values(), raw.position, profile.smoothing)
        placed = dynamics.jitter_position(placed, profile.jitter, self.rng)

        point = self._place(raw.moved_to(placed))
        state.points.append(point)
        self._regenerate()
        return point

    def end_stroke(self) -> Optional[StrokeResult]:
        """Finish the stroke (Drawing → Idle) and return its geometry.

        No smoothing or jitter is applied here; the path is rebuilt from the
        points already placed. Returns None while idle.
        """
        state = self.state
        if not state.drawing:
            return None

        state.drawing = False
        self._regenerate()
        self._preview = Path.empty()
        result = StrokeResult(self._path, self._styles, tuple(state.points))

        with log_context(stroke=self._stroke_count):
            if result.is_empty:
                logger.debug("Stroke ended with a single point; empty path")
            else:
                xmin, ymin, xmax, ymax = result.bounding_box()
                logger.debug(
                    f"Stroke ended: {len(result.points)} points, "
                    f"bbox {xmax - xmin:.1f}x{ymax - ymin:.1f}px"
                )
        return result

    def update_preview(self, pos: Sequence[float]) -> Path:
        """Current stroke plus a straight segment to the pointer.

        No-op while idle (returns the existing, empty, preview).
        """
        state = self.state
        if not state.drawing or not state.points:
            return self._preview

        if self._path.is_empty:
            head = (MoveTo(state.points[-1].position),)
        else:
            head = self._path.segments
        self._preview = Path(head + (LineTo(pos),), closed=False)
        return self._preview

    # ------------------------------------------------------------------
    # Dynamics
    # ------------------------------------------------------------------

    def calculate_width(self, sample: StrokeSample) -> float:
        return dynamics.calculate_width(sample, self.state.profile, self.rng)

    def calculate_color(self, sample: StrokeSample) -> RGBA:
        return dynamics.calculate_color(sample, self.state.profile, self.base_color, self.rng)

    def apply_color_variation(self, color: Sequence[float]) -> RGBA:
        return dynamics.apply_color_variation(color, self.state.profile, self.rng)

    def smooth_points(self, points: Optional[Sequence] = None) -> np.ndarray:
        """Whole-stroke Gaussian smoothing with the profile's smoothing factor.

        Smooths the placed points of the current stroke when ``points`` is
        omitted.
        """
        if points is None:
            points = [p.position for p in self.state.points]
        return dynamics.smooth_points(points, self.state.profile.smoothing)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _place(self, sample: StrokeSample) -> StrokePoint:
        width = self.calculate_width(sample)
        color = self.calculate_color(sample)
        self._current_width = width
        self._current_color = color
        return StrokePoint(sample, width, color)

    def _regenerate(self) -> None:
        self._path, self._styles = generate_stroke_path(self.state.points, self.state.profile.opacity)

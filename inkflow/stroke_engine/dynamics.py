"""Brush dynamics model: width response, color variation, position filters.

Width for a sample is

    base_width
      * pressure_effect   (if pressure enabled)
      * velocity_effect   (if velocity enabled)
      * tilt_effect       (if tilt enabled)
      * (1 + U(-1,1) * randomization)   (if randomization > 0)

clamped to [min_width, max_width], where

    pressure_effect = max(0.1, 1 - (1 - pressure**pressure_curve) * pressure_sensitivity)
    velocity_effect = max(0.1, 1 - velocity * velocity_sensitivity * 0.01) ** velocity_curve
    tilt_effect     = max(0.1, (1 + |tilt| * tilt_sensitivity * 0.01) ** tilt_curve)

Velocity is in px/s, tilt in degrees. All randomness comes from the
Generator passed in; nothing here touches a global RNG.

Position filters:
    - window_smooth: one-sided Gaussian over the ring buffer (live input)
    - smooth_points: symmetric Gaussian over a finished point list
"""

import math
from typing import Sequence, Tuple

import numpy as np

from ..utils.color import RGBA, vary_hsv
from .profile import StrokeProfile
from .samples import StrokeSample

EFFECT_FLOOR = 0.1


def pressure_effect(pressure: float, profile: StrokeProfile) -> float:
    """Pressure multiplier, floored at 0.1."""
    shaped = pressure ** profile.pressure_curve if pressure > 0 else 0.0
    return max(EFFECT_FLOOR, 1.0 - (1.0 - shaped) * profile.pressure_sensitivity)


def velocity_effect(velocity: float, profile: StrokeProfile) -> float:
    """Velocity multiplier; faster strokes get thinner, floored at 0.1 before the curve."""
    return max(EFFECT_FLOOR, 1.0 - velocity * profile.velocity_sensitivity * 0.01) ** profile.velocity_curve


def tilt_effect(tilt_x: float, tilt_y: float, profile: StrokeProfile) -> float:
    """Tilt multiplier; leaning the pen widens the mark."""
    magnitude = math.hypot(tilt_x, tilt_y)
    lean = max(0.0, 1.0 + magnitude * profile.tilt_sensitivity * 0.01)
    return max(EFFECT_FLOOR, lean ** profile.tilt_curve if lean > 0 else 0.0)


def clamp_width(width: float, profile: StrokeProfile) -> float:
    """Clamp into [min_width, max_width]; an inverted range collapses to min_width."""
    return max(profile.min_width, min(width, profile.max_width))


def calculate_width(
    sample: StrokeSample,
    profile: StrokeProfile,
    rng: np.random.Generator
) -> float:
    """Stroke width (px) for one sample.

    Parameters
    ----------
    sample : StrokeSample
        Pressure, velocity and tilt are read from here
    profile : StrokeProfile
        Response configuration (may be misconfigured; the result is clamped)
    rng : np.random.Generator
        Drawn from only when ``profile.randomization > 0``

    Returns
    -------
    float
        Width in [min_width, max_width]
    """
    width = profile.base_width

    if profile.pressure_enabled:
        width *= pressure_effect(sample.pressure, profile)
    if profile.velocity_enabled:
        width *= velocity_effect(sample.velocity, profile)
    if profile.tilt_enabled:
        width *= tilt_effect(sample.tilt_x, sample.tilt_y, profile)
    if profile.randomization > 0:
        width *= 1.0 + rng.uniform(-1.0, 1.0) * profile.randomization

    return clamp_width(width, profile)


def apply_color_variation(
    color: Sequence[float],
    profile: StrokeProfile,
    rng: np.random.Generator
) -> RGBA:
    """Randomly perturb hue, saturation and brightness; alpha kept.

    One uniform draw per enabled range, in hue, saturation, brightness
    order. Hue wraps modulo 1, the others clamp to [0,1].
    """
    d_hue = d_sat = d_val = 0.0
    if profile.hue_variation > 0:
        d_hue = rng.uniform(-1.0, 1.0) * profile.hue_variation
    if profile.saturation_variation > 0:
        d_sat = rng.uniform(-1.0, 1.0) * profile.saturation_variation
    if profile.brightness_variation > 0:
        d_val = rng.uniform(-1.0, 1.0) * profile.brightness_variation
    return vary_hsv(color, d_hue, d_sat, d_val)


def calculate_color(
    sample: StrokeSample,
    profile: StrokeProfile,
    base_color: Sequence[float],
    rng: np.random.Generator
) -> RGBA:
    """Base color, varied when the profile enables color variation."""
    if profile.color_variation:
        return apply_color_variation(base_color, profile, rng)
    r, g, b, a = (float(c) for c in base_color)
    return (r, g, b, a)


def compute_velocity(
    last_position: Sequence[float],
    position: Sequence[float],
    dt_ms: float
) -> float:
    """Speed in px/s between two positions ``dt_ms`` apart; 0 when dt <= 0."""
    if not dt_ms > 0:
        return 0.0
    distance = math.hypot(position[0] - last_position[0], position[1] - last_position[1])
    return distance / (dt_ms / 1000.0)


def window_smooth(buffer: np.ndarray, position: Sequence[float], smoothing: float) -> Tuple[float, float]:
    """Gaussian-weighted average over a chronological position window.

    Entry ``i`` of ``n`` gets weight ``exp(-0.5 * ((n-1-i) / (smoothing*3))**2)``,
    so the newest entry weighs most. With smoothing <= 0 or fewer than two
    entries, ``position`` passes through unchanged.
    """
    n = len(buffer)
    if smoothing <= 0 or n < 2:
        return (float(position[0]), float(position[1]))

    age = (n - 1) - np.arange(n, dtype=np.float64)
    weights = np.exp(-0.5 * (age / (smoothing * 3.0)) ** 2)
    smoothed = (buffer * weights[:, None]).sum(axis=0) / weights.sum()
    return (float(smoothed[0]), float(smoothed[1]))


def jitter_position(
    position: Sequence[float],
    amount: float,
    rng: np.random.Generator
) -> Tuple[float, float]:
    """Offset each axis by ``uniform(-1, 1) * amount``; identity for amount <= 0."""
    if amount <= 0:
        return (float(position[0]), float(position[1]))
    dx, dy = rng.uniform(-1.0, 1.0, size=2) * amount
    return (float(position[0] + dx), float(position[1] + dy))


def smooth_points(points, smoothing: float) -> np.ndarray:
    """Symmetric Gaussian smoothing of a whole point list.

    Parameters
    ----------
    points : array-like
        Positions, shape (N, 2)
    smoothing : float
        Profile smoothing factor; radius ``ceil(2 * smoothing)`` samples,
        sigma ``smoothing + 0.1`` samples

    Returns
    -------
    np.ndarray
        Smoothed positions, shape (N, 2); a copy of the input for N < 3 or
        smoothing <= 0

    Notes
    -----
    Each point keeps weight 1 for itself; the window is truncated at the
    ends rather than padded, so endpoints move only toward their interior
    neighbours.
    """
    pts = np.array(points, dtype=np.float64).reshape(-1, 2)
    n = pts.shape[0]
    if n < 3 or smoothing <= 0:
        return pts

    radius = int(math.ceil(smoothing * 2.0))
    sigma = smoothing + 0.1
    offsets = np.arange(-radius, radius + 1)
    kernel = np.exp(-0.5 * (offsets / sigma) ** 2)

    out = np.empty_like(pts)
    for i in range(n):
        lo, hi = max(0, i - radius), min(n - 1, i + radius)
        w = kernel[lo - i + radius:hi - i + radius + 1]
        out[i] = (pts[lo:hi + 1] * w[:, None]).sum(axis=0) / w.sum()
    return out

"""Color helpers for stroke color variation.

Provides:
    - RGB ↔ HSV conversion (hexcone model, all channels in [0,1])
    - HSV jitter with hue wrap and saturation/brightness clamping
    - Alpha replacement and validation for RGBA tuples

Conversions are vectorized over the last axis, so they accept a single
color of shape (3,) as well as arrays of shape (..., 3).

Invariants:
    - RGBA colors are float tuples in [0,1], alpha last
    - Hue is normalized to [0, 1), not degrees
"""

from typing import Sequence, Tuple

import numpy as np

RGBA = Tuple[float, float, float, float]

BLACK: RGBA = (0.0, 0.0, 0.0, 1.0)


def rgb_to_hsv(rgb) -> np.ndarray:
    """Convert RGB [0,1] to HSV [0,1].

    Parameters
    ----------
    rgb : array-like
        Shape (..., 3), range [0, 1]

    Returns
    -------
    np.ndarray
        HSV, same shape; hue in [0, 1)

    Notes
    -----
    Achromatic colors (max == min) get hue 0 and saturation 0.
    """
    rgb = np.clip(np.asarray(rgb, dtype=np.float64), 0.0, 1.0)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]

    maxc = rgb.max(axis=-1)
    minc = rgb.min(axis=-1)
    delta = maxc - minc

    v = maxc
    s = np.where(maxc > 0, delta / np.where(maxc > 0, maxc, 1.0), 0.0)

    safe_delta = np.where(delta > 0, delta, 1.0)
    rc = (maxc - r) / safe_delta
    gc = (maxc - g) / safe_delta
    bc = (maxc - b) / safe_delta

    h = np.where(r == maxc, bc - gc,
                 np.where(g == maxc, 2.0 + rc - bc, 4.0 + gc - rc))
    h = np.where(delta > 0, (h / 6.0) % 1.0, 0.0)

    return np.stack([h, s, v], axis=-1)


def hsv_to_rgb(hsv) -> np.ndarray:
    """Convert HSV [0,1] to RGB [0,1].

    Parameters
    ----------
    hsv : array-like
        Shape (..., 3); hue wraps, saturation/value are clamped

    Returns
    -------
    np.ndarray
        RGB, same shape, range [0, 1]
    """
    hsv = np.asarray(hsv, dtype=np.float64)
    h = hsv[..., 0] % 1.0
    s = np.clip(hsv[..., 1], 0.0, 1.0)
    v = np.clip(hsv[..., 2], 0.0, 1.0)

    i = np.floor(h * 6.0)
    f = h * 6.0 - i
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))
    i = i.astype(int) % 6

    r = np.choose(i, [v, q, p, p, t, v])
    g = np.choose(i, [t, v, v, q, p, p])
    b = np.choose(i, [p, p, t, v, v, q])

    return np.stack([r, g, b], axis=-1)


def vary_hsv(
    rgba: Sequence[float],
    d_hue: float = 0.0,
    d_saturation: float = 0.0,
    d_brightness: float = 0.0
) -> RGBA:
    """Shift an RGBA color in HSV space.

    Parameters
    ----------
    rgba : Sequence[float]
        Source color (r, g, b, a) in [0,1]
    d_hue, d_saturation, d_brightness : float
        Additive deltas

    Returns
    -------
    RGBA
        New color; hue wraps modulo 1.0, saturation and brightness clamp
        to [0,1], alpha unchanged
    """
    r, g, b, a = validate_rgba(rgba)
    h, s, v = rgb_to_hsv((r, g, b))
    h = (h + d_hue) % 1.0
    s = min(1.0, max(0.0, s + d_saturation))
    v = min(1.0, max(0.0, v + d_brightness))
    nr, ng, nb = hsv_to_rgb((h, s, v))
    return (float(nr), float(ng), float(nb), a)


def with_alpha(rgba: Sequence[float], alpha: float) -> RGBA:
    """Return rgba with its alpha replaced (clamped to [0,1])."""
    r, g, b, _ = validate_rgba(rgba)
    return (r, g, b, min(1.0, max(0.0, float(alpha))))


def validate_rgba(rgba: Sequence[float]) -> RGBA:
    """Normalize an RGB or RGBA sequence to a clamped RGBA float tuple.

    Raises
    ------
    ValueError
        If the sequence does not have 3 or 4 components
    """
    values = [float(c) for c in rgba]
    if len(values) == 3:
        values.append(1.0)
    if len(values) != 4:
        raise ValueError(f"Color must have 3 or 4 components, got {len(values)}")
    r, g, b, a = (min(1.0, max(0.0, c)) for c in values)
    return (r, g, b, a)

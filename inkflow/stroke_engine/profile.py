"""Brush dynamics profile and the built-in presets.

A StrokeProfile is plain immutable data: base/min/max width, the three
response curves (pressure, velocity, tilt), smoothing, jitter,
randomization, opacity and HSV color variation. It carries no validation;
misconfigured values are clamped by the dynamics model at use time. Strict
checking happens when profiles are loaded from YAML (see
inkflow.utils.validators.StrokeProfileV1).
"""

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class StrokeProfile:
    """Immutable brush configuration.

    Neutral defaults: only pressure response is active, no smoothing,
    jitter or randomization, full opacity.

    ``scattering`` is stored and round-tripped through the preset files
    for hosts that spray dabs around the stroke; the width and position
    model in inkflow.stroke_engine.dynamics does not read it.
    """

    name: str = "Default"
    description: str = ""

    base_width: float = 2.0
    min_width: float = 0.5
    max_width: float = 8.0

    pressure_enabled: bool = True
    pressure_curve: float = 1.0
    pressure_sensitivity: float = 1.0

    velocity_enabled: bool = False
    velocity_curve: float = 1.0
    velocity_sensitivity: float = 0.0

    tilt_enabled: bool = False
    tilt_curve: float = 1.0
    tilt_sensitivity: float = 0.0

    smoothing: float = 0.0
    jitter: float = 0.0
    randomization: float = 0.0

    opacity: float = 1.0
    scattering: float = 0.0

    color_variation: bool = False
    hue_variation: float = 0.0
    saturation_variation: float = 0.0
    brightness_variation: float = 0.0

    def evolve(self, **changes) -> "StrokeProfile":
        """Copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_DEFAULT_PROFILES: Tuple[StrokeProfile, ...] = (
    StrokeProfile(
        name="Basic Pen",
        description="Standard pen with pressure response",
        base_width=2.0, min_width=0.5, max_width=8.0,
        pressure_enabled=True, pressure_curve=1.5, pressure_sensitivity=0.8,
        velocity_enabled=True, velocity_curve=0.3, velocity_sensitivity=0.2,
        smoothing=0.3, jitter=0.1, randomization=0.05,
        opacity=1.0,
    ),
    StrokeProfile(
        name="Fountain Pen",
        description="Fountain pen with tapered strokes",
        base_width=3.0, min_width=0.5, max_width=8.0,
        pressure_enabled=True, pressure_curve=2.2, pressure_sensitivity=0.9,
        velocity_enabled=True, velocity_curve=0.4, velocity_sensitivity=0.3,
        smoothing=0.4, jitter=0.05, randomization=0.02,
        opacity=1.0,
    ),
    StrokeProfile(
        name="Ballpoint Pen",
        description="Ballpoint pen, even line weight",
        base_width=1.0, min_width=0.8, max_width=1.5,
        pressure_enabled=True, pressure_curve=0.8, pressure_sensitivity=0.3,
        velocity_enabled=False, velocity_curve=0.0, velocity_sensitivity=0.0,
        smoothing=0.2, jitter=0.02, randomization=0.01,
        opacity=1.0,
    ),
    StrokeProfile(
        name="Marker Pen",
        description="Felt-tip pen, heavier line",
        base_width=3.0, min_width=2.0, max_width=5.0,
        pressure_enabled=True, pressure_curve=1.0, pressure_sensitivity=0.5,
        velocity_enabled=True, velocity_curve=0.2, velocity_sensitivity=0.1,
        smoothing=0.3, jitter=0.1, randomization=0.05,
        opacity=0.95,
    ),
    StrokeProfile(
        name="Pencil",
        description="Graphite pencil with grain",
        base_width=1.5, min_width=0.3, max_width=6.0,
        pressure_enabled=True, pressure_curve=1.2, pressure_sensitivity=0.6,
        velocity_enabled=True, velocity_curve=0.5, velocity_sensitivity=0.3,
        tilt_enabled=True, tilt_curve=0.8, tilt_sensitivity=0.4,
        smoothing=0.2, jitter=0.8, randomization=0.3,
        opacity=0.9, scattering=0.1,
        color_variation=True, hue_variation=0.05,
        saturation_variation=0.1, brightness_variation=0.15,
    ),
    StrokeProfile(
        name="Marker",
        description="Broad marker with soft edges",
        base_width=8.0, min_width=4.0, max_width=20.0,
        pressure_enabled=True, pressure_curve=0.8, pressure_sensitivity=0.4,
        smoothing=0.6, jitter=0.2, randomization=0.1,
        opacity=0.8,
    ),
    StrokeProfile(
        name="Calligraphy",
        description="Brush pen with tilt response",
        base_width=3.0, min_width=0.5, max_width=15.0,
        pressure_enabled=True, pressure_curve=2.0, pressure_sensitivity=1.0,
        velocity_enabled=True, velocity_curve=0.2, velocity_sensitivity=0.15,
        tilt_enabled=True, tilt_curve=1.5, tilt_sensitivity=0.8,
        smoothing=0.4, jitter=0.3, randomization=0.2,
        opacity=1.0, scattering=0.05,
        color_variation=True, hue_variation=0.03,
        saturation_variation=0.05, brightness_variation=0.08,
    ),
    StrokeProfile(
        name="Airbrush",
        description="Airbrush with scatter",
        base_width=10.0, min_width=2.0, max_width=50.0,
        pressure_enabled=True, pressure_curve=1.8, pressure_sensitivity=0.7,
        velocity_enabled=True, velocity_curve=0.6, velocity_sensitivity=0.4,
        smoothing=0.8, jitter=1.5, randomization=0.4,
        opacity=0.6, scattering=0.8,
    ),
)


def default_profiles() -> Tuple[StrokeProfile, ...]:
    """Built-in presets, in menu order."""
    return _DEFAULT_PROFILES


def get_default_profile(name: str) -> StrokeProfile:
    """Look up a built-in preset by name; unknown names get the first preset."""
    for profile in _DEFAULT_PROFILES:
        if profile.name == name:
            return profile
    return _DEFAULT_PROFILES[0]

"""YAML schema validation and config loading.

Provides centralized validation for configuration files using pydantic:
    - Brush preset schema (brush_presets.v1.yaml): width range, response
      curves, smoothing/jitter/randomization, opacity, color variation
    - Engine schema (engine.v1.yaml): synthesizer defaults, path-operation
      tolerances, RNG seed, logging

Loaders fail fast with the offending file and field in the message. The
runtime StrokeProfile is deliberately permissive; these schemas are where
misconfigured brushes get rejected.

Units:
    - Geometry: canvas pixels (px)
    - Color: RGBA in [0.0, 1.0]
    - Hue variation: fraction of the color wheel

Usage:
    from inkflow.utils import validators

    presets = validators.load_brush_presets("configs/brush_presets.v1.yaml")
    engine_cfg = validators.load_engine_config("configs/engine.v1.yaml")
    profiles = [p.to_profile() for p in presets.presets]
"""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# BRUSH PRESET SCHEMA V1
# ============================================================================

class StrokeProfileV1(BaseModel):
    """Single brush preset (brush_presets.v1.yaml entry)."""
    name: str = Field(..., min_length=1, description="Display name, unique per file")
    description: str = Field("", description="Free-form description")

    base_width: float = Field(2.0, gt=0.0, le=500.0, description="Nominal width (px)")
    min_width: float = Field(0.5, gt=0.0, le=500.0, description="Lower width clamp (px)")
    max_width: float = Field(8.0, gt=0.0, le=500.0, description="Upper width clamp (px)")

    pressure_enabled: bool = True
    pressure_curve: float = Field(1.0, ge=0.0, le=10.0, description="Pressure exponent")
    pressure_sensitivity: float = Field(1.0, ge=0.0, le=1.0)

    velocity_enabled: bool = False
    velocity_curve: float = Field(1.0, ge=0.0, le=10.0, description="Velocity exponent")
    velocity_sensitivity: float = Field(0.0, ge=0.0, le=1.0)

    tilt_enabled: bool = False
    tilt_curve: float = Field(1.0, ge=0.0, le=10.0, description="Tilt exponent")
    tilt_sensitivity: float = Field(0.0, ge=0.0, le=1.0)

    smoothing: float = Field(0.0, ge=0.0, le=1.0, description="Ring-buffer Gaussian strength")
    jitter: float = Field(0.0, ge=0.0, le=10.0, description="Position jitter amplitude (px)")
    randomization: float = Field(0.0, ge=0.0, le=1.0, description="Relative width noise")

    opacity: float = Field(1.0, ge=0.0, le=1.0)
    scattering: float = Field(0.0, ge=0.0, le=1.0, description="Stored for hosts; not used by the width model")

    color_variation: bool = False
    hue_variation: float = Field(0.0, ge=0.0, le=1.0)
    saturation_variation: float = Field(0.0, ge=0.0, le=1.0)
    brightness_variation: float = Field(0.0, ge=0.0, le=1.0)

    @model_validator(mode='after')
    def validate_width_order(self) -> 'StrokeProfileV1':
        """Require min_width <= base_width <= max_width."""
        if not (self.min_width <= self.base_width <= self.max_width):
            raise ValueError(
                f"Preset '{self.name}': widths must satisfy min <= base <= max, got "
                f"min={self.min_width}, base={self.base_width}, max={self.max_width}"
            )
        return self

    @model_validator(mode='after')
    def validate_enabled_curves(self) -> 'StrokeProfileV1':
        """Curve exponents must be > 0 for every enabled response."""
        for dim in ('pressure', 'velocity', 'tilt'):
            curve = getattr(self, f"{dim}_curve")
            if getattr(self, f"{dim}_enabled") and curve <= 0.0:
                raise ValueError(f"Preset '{self.name}': {dim}_curve must be > 0 when enabled, got {curve}")
        return self

    def to_profile(self):
        """Build the runtime StrokeProfile for this preset."""
        from ..stroke_engine.profile import StrokeProfile

        return StrokeProfile(**self.model_dump())

    @classmethod
    def from_profile(cls, profile) -> 'StrokeProfileV1':
        """Validate a runtime StrokeProfile (raises ValueError if misconfigured)."""
        return cls(**profile.to_dict())


class BrushPresetsV1(BaseModel):
    """Preset file (brush_presets.v1.yaml)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("brush_presets.v1", alias="schema", description="Schema version")
    presets: List[StrokeProfileV1] = Field(..., min_length=1, description="Brush presets")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "brush_presets.v1":
            raise ValueError(f"Expected schema 'brush_presets.v1', got '{v}'")
        return v

    @model_validator(mode='after')
    def validate_unique_names(self) -> 'BrushPresetsV1':
        seen = set()
        for preset in self.presets:
            if preset.name in seen:
                raise ValueError(f"Duplicate preset name '{preset.name}'")
            seen.add(preset.name)
        return self

    def get(self, name: str) -> Optional[StrokeProfileV1]:
        """Preset by name, or None."""
        for preset in self.presets:
            if preset.name == name:
                return preset
        return None


# ============================================================================
# ENGINE SCHEMA V1
# ============================================================================

class SynthesizerConfig(BaseModel):
    """Stroke synthesizer defaults."""
    buffer_size: int = Field(5, ge=1, le=64, description="Smoothing ring-buffer capacity")
    base_color: Tuple[float, float, float, float] = Field(
        (0.0, 0.0, 0.0, 1.0), description="Default RGBA stroke color"
    )
    default_preset: str = Field("Basic Pen", description="Preset selected at startup")

    @field_validator('base_color')
    @classmethod
    def validate_color(cls, v: Tuple[float, float, float, float]) -> Tuple[float, float, float, float]:
        for i, c in enumerate(v):
            if not (0.0 <= c <= 1.0):
                raise ValueError(f"base_color[{i}] = {c} out of range [0, 1]")
        return v


class PathsConfig(BaseModel):
    """Path-operation tolerances."""
    flatten_tolerance: float = Field(0.25, gt=0.0, le=10.0, description="Curve flattening error (px)")
    clipper_scale: int = Field(65536, ge=1, description="Float → integer scale for pyclipper")
    arc_tolerance: float = Field(0.1, gt=0.0, le=10.0, description="Round join/cap error (px)")
    simplify_tolerance: float = Field(1.0, ge=0.0, le=100.0, description="Default simplify tolerance (px)")


class RandomnessConfig(BaseModel):
    """RNG seeding; None draws fresh OS entropy."""
    seed: Optional[int] = Field(None, ge=0)


class LoggingConfig(BaseModel):
    """Arguments forwarded to logging_config.setup_logging()."""
    level: str = Field("INFO")
    file: Optional[str] = Field(None, description="Log file path")
    json_format: bool = Field(False, alias="json")
    color: bool = True

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in allowed:
            raise ValueError(f"level must be one of {allowed}, got '{v}'")
        return v.upper()


class EngineConfigV1(BaseModel):
    """Engine configuration (engine.v1.yaml)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("engine.v1", alias="schema", description="Schema version")
    synthesizer: SynthesizerConfig = Field(default_factory=SynthesizerConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    randomness: RandomnessConfig = Field(default_factory=RandomnessConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "engine.v1":
            raise ValueError(f"Expected schema 'engine.v1', got '{v}'")
        return v


# ============================================================================
# LOADERS
# ============================================================================

def load_brush_presets(path: Union[str, Path]) -> BrushPresetsV1:
    """Load and validate a brush preset file from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to brush_presets.v1.yaml file

    Returns
    -------
    BrushPresetsV1
        Validated presets

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (message names the file and offending field)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Brush presets not found: {path}")

    data = fs.load_yaml(path)
    try:
        return BrushPresetsV1(**data)
    except Exception as e:
        raise ValueError(f"Brush presets validation failed at {path}: {e}") from e


def load_engine_config(path: Union[str, Path]) -> EngineConfigV1:
    """Load and validate engine config from YAML.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Engine config not found: {path}")

    data = fs.load_yaml(path)
    try:
        return EngineConfigV1(**data)
    except Exception as e:
        raise ValueError(f"Engine config validation failed at {path}: {e}") from e


def save_brush_presets(profiles: Sequence, path: Union[str, Path]) -> None:
    """Validate runtime profiles and write them as a brush_presets.v1 file.

    Parameters
    ----------
    profiles : Sequence[StrokeProfile]
        Runtime profiles, in menu order
    path : Union[str, Path]
        Target YAML path (written atomically)

    Raises
    ------
    ValueError
        If any profile violates the schema; nothing is written then
    """
    from . import fs

    try:
        presets = BrushPresetsV1(presets=[StrokeProfileV1.from_profile(p) for p in profiles])
    except Exception as e:
        raise ValueError(f"Refusing to save invalid presets to {path}: {e}") from e

    fs.atomic_yaml_dump(presets.model_dump(by_alias=True), path)

"""Stroke engine: brush profiles, dynamics and the stroke synthesizer.

Modules:
    - profile: StrokeProfile and the built-in presets
    - samples: sample/point/style records, ring buffer, per-stroke state
    - dynamics: width response, color variation, position filters
    - synthesizer: StrokeSynthesizer state machine

Depends on inkflow.path_ops (Path output) and inkflow.utils.
"""

from .profile import StrokeProfile, default_profiles, get_default_profile
from .samples import RingBuffer, SegmentStyle, StrokePoint, StrokeResult, StrokeSample, StrokeState
from .synthesizer import StrokeSynthesizer, generate_stroke_path

__all__ = [
    'RingBuffer',
    'SegmentStyle',
    'StrokePoint',
    'StrokeProfile',
    'StrokeResult',
    'StrokeSample',
    'StrokeState',
    'StrokeSynthesizer',
    'default_profiles',
    'generate_stroke_path',
    'get_default_profile',
]

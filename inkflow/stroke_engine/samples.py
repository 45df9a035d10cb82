"""Stroke sample records, per-stroke state and the smoothing ring buffer.

Records (immutable):
    StrokeSample   one pointer observation (position, pressure, tilt,
                   rotation, velocity, timestamp)
    StrokePoint    a sample as placed in the stroke, with its width/color
    SegmentStyle   width and RGBA for one rendered segment
    StrokeResult   finished stroke: Path + styles + points

Mutable state:
    RingBuffer     fixed-capacity window with an overwrite cursor
    StrokeState    everything the synthesizer owns for the stroke in progress

Units: positions in px, velocity in px/s, timestamps in ms.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..path_ops.path import Path
from ..utils.color import RGBA
from .profile import StrokeProfile

DEFAULT_BUFFER_SIZE = 5


@dataclass(frozen=True)
class StrokeSample:
    """One pointer observation; pressure clamped to [0,1], velocity to >= 0."""
    position: Tuple[float, float]
    pressure: float = 1.0
    tilt_x: float = 0.0
    tilt_y: float = 0.0
    rotation: float = 0.0
    velocity: float = 0.0
    timestamp: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'position', (float(self.position[0]), float(self.position[1])))
        object.__setattr__(self, 'pressure', min(1.0, max(0.0, float(self.pressure))))
        velocity = float(self.velocity)
        object.__setattr__(self, 'velocity', velocity if velocity > 0.0 else 0.0)

    def moved_to(self, position: Sequence[float]) -> "StrokeSample":
        return replace(self, position=position)


@dataclass(frozen=True)
class StrokePoint:
    sample: StrokeSample
    width: float
    color: RGBA

    @property
    def position(self) -> Tuple[float, float]:
        return self.sample.position


@dataclass(frozen=True)
class SegmentStyle:
    width: float
    color: RGBA


@dataclass(frozen=True)
class StrokeResult:
    """Finished stroke geometry.

    ``styles[i]`` belongs to the segment ending on ``points[i + 1]``.
    """
    path: Path
    styles: Tuple[SegmentStyle, ...]
    points: Tuple[StrokePoint, ...]

    @property
    def is_empty(self) -> bool:
        return self.path.is_empty

    def bounding_box(self) -> Tuple[float, float, float, float]:
        return self.path.bounding_box()


class RingBuffer:
    """Fixed-capacity sliding window backed by a numpy array.

    push() overwrites the oldest entry once full; values() returns the
    entries oldest first.

    Parameters
    ----------
    capacity : int
        Maximum number of entries (>= 1)
    shape : tuple
        Shape of one entry, e.g. (2,) for positions, () for scalars
    """

    def __init__(self, capacity: int = DEFAULT_BUFFER_SIZE, shape: Tuple[int, ...] = ()):
        if capacity < 1:
            raise ValueError(f"RingBuffer capacity must be >= 1, got {capacity}")
        self._data = np.zeros((capacity,) + tuple(shape), dtype=np.float64)
        self._cursor = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._data.shape[0]

    def __len__(self) -> int:
        return self._size

    def is_full(self) -> bool:
        return self._size == self.capacity

    def push(self, value) -> None:
        self._data[self._cursor] = value
        self._cursor = (self._cursor + 1) % self.capacity
        self._size = min(self._size + 1, self.capacity)

    def clear(self) -> None:
        self._cursor = 0
        self._size = 0

    def values(self) -> np.ndarray:
        if self._size < self.capacity:
            return self._data[:self._size].copy()
        return np.roll(self._data, -self._cursor, axis=0)

    def latest(self):
        if self._size == 0:
            return None
        return self._data[(self._cursor - 1) % self.capacity].copy()


@dataclass
class StrokeState:
    """Per-stroke mutable state owned by one StrokeSynthesizer."""
    profile: StrokeProfile
    positions: RingBuffer
    pressures: RingBuffer
    points: List[StrokePoint] = field(default_factory=list)
    last_position: Optional[Tuple[float, float]] = None
    last_timestamp: float = 0.0
    last_pressure: float = 1.0
    drawing: bool = False

    @classmethod
    def create(cls, profile: StrokeProfile, buffer_size: int = DEFAULT_BUFFER_SIZE) -> "StrokeState":
        return cls(
            profile=profile,
            positions=RingBuffer(buffer_size, shape=(2,)),
            pressures=RingBuffer(buffer_size),
        )

    def reset(self) -> None:
        self.points = []
        self.positions.clear()
        self.pressures.clear()
        self.last_position = None
        self.last_timestamp = 0.0
        self.last_pressure = 1.0
        self.drawing = False

    def record(self, position: Tuple[float, float], pressure: float, timestamp: float) -> None:
        """Push raw input into the windows and remember it as the last sample."""
        self.positions.push(position)
        self.pressures.push(pressure)
        self.last_position = position
        self.last_timestamp = timestamp
        self.last_pressure = pressure

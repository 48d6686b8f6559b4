"""
Raw track model (source records, before display derivation).

Track sources load their records into this structure. Velocities are
optional: NaN marks a sample whose source supplied no velocity, and the
velocity deriver fills those in from consecutive positions.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import numpy as np
from numpy.typing import NDArray


@dataclass
class RawSample:
    """One logged record, as seen by a single-row consumer."""

    time: float          # seconds since the first sample
    latitude: float      # degrees
    longitude: float     # degrees
    altitude: float      # meters
    velocity_north: float  # m/s
    velocity_east: float   # m/s
    velocity_down: float   # m/s, positive when descending


@dataclass
class RawTrack:
    """
    Ordered sequence of raw samples in columnar form.

    All arrays share one length. Timestamps are seconds and must be
    non-decreasing.
    """

    name: str

    timestamps: NDArray[np.float64]
    latitude: NDArray[np.float64]
    longitude: NDArray[np.float64]
    altitude: NDArray[np.float64]

    velocity_north: Optional[NDArray[np.float64]] = None
    velocity_east: Optional[NDArray[np.float64]] = None
    velocity_down: Optional[NDArray[np.float64]] = None

    start_time: Optional[datetime] = None

    def __post_init__(self):
        self.timestamps = np.asarray(self.timestamps, dtype=np.float64)
        n = len(self.timestamps)

        self.latitude = _column(self.latitude, n, "latitude")
        self.longitude = _column(self.longitude, n, "longitude")
        self.altitude = _column(self.altitude, n, "altitude")
        self.velocity_north = _column(self.velocity_north, n, "velocity_north")
        self.velocity_east = _column(self.velocity_east, n, "velocity_east")
        self.velocity_down = _column(self.velocity_down, n, "velocity_down")

        if np.any(np.isnan(self.timestamps)):
            raise ValueError("Track timestamps contain NaN")
        if n > 1 and np.any(np.diff(self.timestamps) < 0):
            raise ValueError("Track timestamps must be non-decreasing")

    @property
    def sample_count(self) -> int:
        return len(self.timestamps)

    @property
    def duration_s(self) -> float:
        if self.sample_count == 0:
            return 0.0
        return float(self.timestamps[-1] - self.timestamps[0])

    @property
    def end_time(self) -> Optional[datetime]:
        if self.start_time is None:
            return None
        return self.start_time + timedelta(seconds=self.duration_s)

    @property
    def missing_velocity(self) -> NDArray[np.bool_]:
        """Per-sample mask of records lacking any velocity component."""
        return (
            np.isnan(self.velocity_north)
            | np.isnan(self.velocity_east)
            | np.isnan(self.velocity_down)
        )

    @property
    def has_velocity(self) -> bool:
        return not bool(np.any(self.missing_velocity))

    def sample(self, idx: int) -> RawSample:
        return RawSample(
            time=float(self.timestamps[idx] - self.timestamps[0]),
            latitude=float(self.latitude[idx]),
            longitude=float(self.longitude[idx]),
            altitude=float(self.altitude[idx]),
            velocity_north=float(self.velocity_north[idx]),
            velocity_east=float(self.velocity_east[idx]),
            velocity_down=float(self.velocity_down[idx]),
        )


def _column(arr: Optional[NDArray[np.float64]], n_samples: int, name: str) -> NDArray[np.float64]:
    if arr is None:
        return np.full(n_samples, np.nan, dtype=np.float64)
    arr = np.asarray(arr, dtype=np.float64)
    if len(arr) != n_samples:
        raise ValueError(f"Column {name} has {len(arr)} samples, expected {n_samples}")
    return arr

"""
Display series data model.

A Series holds one graphed metric over one track: parallel time/value
arrays with the same length and index correspondence as the source
records. Bounds, viewports and the plot rectangle describe how a series
is mapped onto the screen.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

import numpy as np
from numpy.typing import NDArray


class DisplayMode(Enum):
    """Which derived metric populates the series values."""

    HORIZONTAL_SPEED = "horizontal_speed"
    VERTICAL_SPEED = "vertical_speed"
    GLIDE_RATIO = "glide_ratio"
    ALTITUDE = "altitude"


class UnitSystem(Enum):
    """Unit scale applied when populating series values."""

    METRIC = "metric"
    IMPERIAL = "imperial"


@dataclass
class Series:
    """
    Time/value pairs for one metric.

    x is seconds since the first sample and is non-decreasing; y is the
    metric value in display units. An empty series is valid and inert.
    """

    x: NDArray[np.float64]
    y: NDArray[np.float64]

    def __post_init__(self):
        self.x = np.asarray(self.x, dtype=np.float64)
        self.y = np.asarray(self.y, dtype=np.float64)
        if len(self.x) != len(self.y):
            raise ValueError(f"Series x/y length mismatch: {len(self.x)} != {len(self.y)}")
        if len(self.x) > 1 and np.any(np.diff(self.x) < 0):
            raise ValueError("Series x must be sorted ascending")

    @classmethod
    def empty(cls) -> "Series":
        return cls(x=np.zeros(0, dtype=np.float64), y=np.zeros(0, dtype=np.float64))

    def __len__(self) -> int:
        return len(self.x)

    @property
    def is_empty(self) -> bool:
        return len(self.x) == 0

    @property
    def duration_s(self) -> float:
        if self.is_empty:
            return 0.0
        return float(self.x[-1])


@dataclass(frozen=True)
class Bounds:
    """Axis extents of a series or a zoom window."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True)
class Viewport:
    """Current zoom window plus the grid step sizes derived from it."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float
    step_x: float = 0.0
    step_y: float = 0.0

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.min_x, self.max_x, self.min_y, self.max_y)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True)
class PixelRect:
    """Plot area of the rendering surface, in pixels (y grows downward)."""

    left: float
    top: float
    width: float
    height: float

    # Left gutter and bottom band reserved for axis labels
    LABEL_GUTTER_X: ClassVar[int] = 5
    LABEL_BAND_Y: ClassVar[int] = 30

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @classmethod
    def from_widget_size(cls, width: int, height: int) -> "PixelRect":
        """Plot area inside a widget of the given size."""
        return cls(
            left=cls.LABEL_GUTTER_X,
            top=0,
            width=max(width - cls.LABEL_GUTTER_X, 0),
            height=max(height - cls.LABEL_BAND_Y, 0),
        )


@dataclass(frozen=True)
class TimeRange:
    """
    Half-open row interval [min, max) used for selection correspondence.

    TimeRange.INVALID means no selection.
    """

    min: int
    max: int

    INVALID: ClassVar["TimeRange"]
    MIN_SELECTION_ROWS: ClassVar[int] = 10

    @property
    def width(self) -> int:
        return self.max - self.min

    @property
    def is_valid(self) -> bool:
        return self != TimeRange.INVALID

    def clamped(self, row_count: int) -> "TimeRange":
        """Clamp to the available rows; too-narrow selections become INVALID."""
        if self.width <= self.MIN_SELECTION_ROWS:
            return TimeRange.INVALID
        return TimeRange(max(0, self.min), min(row_count, self.max))


TimeRange.INVALID = TimeRange(-1, -1)

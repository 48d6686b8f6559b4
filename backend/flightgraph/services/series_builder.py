"""
Sample series builder.

Turns a raw track plus a (display mode, unit system) pair into a display
Series, then smooths the values.
"""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from flightgraph.models.raw import RawTrack
from flightgraph.models.series import DisplayMode, Series, UnitSystem


logger = logging.getLogger(__name__)


FEET_PER_METER = 3.2808399
MPS_TO_KPH = 3.6
MPS_TO_MPH = 2.23693629

SMOOTHING_PASSES = 3

# m/s -> display speed unit
SPEED_FACTORS = {
    UnitSystem.METRIC: MPS_TO_KPH,
    UnitSystem.IMPERIAL: MPS_TO_MPH,
}

# m -> display altitude unit (km, or thousands of feet)
ALTITUDE_FACTORS = {
    UnitSystem.METRIC: 1.0 / 1000.0,
    UnitSystem.IMPERIAL: FEET_PER_METER / 1000.0,
}


ValueTransform = Callable[[RawTrack, UnitSystem], NDArray[np.float64]]


def _horizontal_speed(track: RawTrack, units: UnitSystem) -> NDArray[np.float64]:
    return np.hypot(track.velocity_east, track.velocity_north) * SPEED_FACTORS[units]


def _vertical_speed(track: RawTrack, units: UnitSystem) -> NDArray[np.float64]:
    return track.velocity_down * SPEED_FACTORS[units]


def _glide_ratio(track: RawTrack, units: UnitSystem) -> NDArray[np.float64]:
    horizontal = _horizontal_speed(track, units)
    vertical = _vertical_speed(track, units)
    # Zero vertical speed saturates to a ratio of 0
    ratio = np.zeros_like(horizontal)
    np.divide(horizontal, vertical, out=ratio, where=vertical != 0)
    return ratio


def _altitude(track: RawTrack, units: UnitSystem) -> NDArray[np.float64]:
    return track.altitude * ALTITUDE_FACTORS[units]


VALUE_TRANSFORMS: dict[DisplayMode, ValueTransform] = {
    DisplayMode.HORIZONTAL_SPEED: _horizontal_speed,
    DisplayMode.VERTICAL_SPEED: _vertical_speed,
    DisplayMode.GLIDE_RATIO: _glide_ratio,
    DisplayMode.ALTITUDE: _altitude,
}


def populate_values(track: RawTrack, mode: DisplayMode, units: UnitSystem) -> Series:
    """
    Derive the unsmoothed series for a track.

    x is seconds since the first sample; y is the selected metric in
    display units (km/h or mph for speeds, km or thousands of feet for
    altitude, unitless for glide ratio).
    """
    if track.sample_count == 0:
        return Series.empty()

    x = track.timestamps - track.timestamps[0]
    y = VALUE_TRANSFORMS[mode](track, units)
    return Series(x=x, y=y)


def smooth(values: NDArray[np.float64], passes: int = SMOOTHING_PASSES) -> NDArray[np.float64]:
    """
    Apply a (1, 2, 1)/4 box filter to the interior values.

    Each pass reads only the previous pass's output. The first and last
    values are never changed; fewer than three values are returned as-is.
    """
    smoothed = np.array(values, dtype=np.float64, copy=True)
    if len(smoothed) < 3:
        return smoothed

    for _ in range(passes):
        interior = (smoothed[:-2] + 2 * smoothed[1:-1] + smoothed[2:]) / 4
        smoothed[1:-1] = interior

    return smoothed


def build_series(track: RawTrack, mode: DisplayMode, units: UnitSystem) -> Series:
    """
    Build the display series for a track: populate, then smooth y.

    An empty track yields an empty series.
    """
    series = populate_values(track, mode, units)
    if series.is_empty:
        return series

    logger.debug(f"Built {mode.value} series ({units.value}) with {len(series)} samples for {track.name}")
    return Series(x=series.x, y=smooth(series.y))

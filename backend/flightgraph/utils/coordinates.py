"""
Coordinate distance utilities.

Distances along a single coordinate axis (latitude or longitude taken
alone) on a spherical Earth, used to turn consecutive GPS fixes into
velocity components.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray


EARTH_RADIUS_M = 6371000.0  # mean radius (meters)


def signed_haversine(start_deg: ArrayLike, end_deg: ArrayLike) -> NDArray[np.float64]:
    """
    Great-circle distance between two angles on one axis, signed.

    The result is positive when the angle increases from start to end and
    negative when it decreases.

    Applied to longitudes this does not scale by cos(latitude), so east/west
    distances are overestimated away from the equator. Only use it for short,
    small-extent tracks.

    Args:
        start_deg: Starting angle(s) in degrees
        end_deg: Ending angle(s) in degrees

    Returns:
        Signed distance(s) in meters
    """
    delta = np.radians(np.asarray(end_deg, dtype=np.float64) - np.asarray(start_deg, dtype=np.float64))

    a = np.sin(delta / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    distance = EARTH_RADIUS_M * c

    return np.where(delta > 0, distance, -distance)


def degrees_for_distance(distance_m: ArrayLike) -> NDArray[np.float64]:
    """Inverse of signed_haversine for small distances: meters to degrees."""
    return np.degrees(np.asarray(distance_m, dtype=np.float64) / EARTH_RADIUS_M)

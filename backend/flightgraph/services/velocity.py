"""
Velocity deriver for tracks without logged velocity.

Fills north/east/down velocity for samples that lack it by differencing
consecutive positions and altitudes.
"""

from __future__ import annotations

import dataclasses
import logging

import numpy as np
from numpy.typing import NDArray

from flightgraph.models.raw import RawTrack
from flightgraph.utils.coordinates import signed_haversine


logger = logging.getLogger(__name__)


def derive_missing_velocity(track: RawTrack) -> RawTrack:
    """
    Return a copy of the track with velocity filled in where it is missing.

    For each sample i >= 1, absent velocity components come from the
    difference to sample i-1:
    - down = -altitude change / time change (positive when descending)
    - north = signed latitude distance / time change
    - east = signed longitude distance / time change (positive when the
      longitude increases)

    A non-positive time change, or a non-finite position, yields zero
    velocity for that sample. Sample 0 keeps the velocity it carries; absent
    components there become zero. Logged components are left untouched,
    even on a sample missing the others, as is everything other than velocity.
    """
    n_samples = track.sample_count
    missing = track.missing_velocity

    north = track.velocity_north.copy()
    east = track.velocity_east.copy()
    down = track.velocity_down.copy()

    if n_samples == 0:
        return dataclasses.replace(track, velocity_north=north, velocity_east=east, velocity_down=down)

    if n_samples > 1 and np.any(missing[1:]):
        derived_north, derived_east, derived_down = _difference_velocities(track)
        # Each component is filled only where that component is absent
        north[1:] = np.where(np.isnan(north[1:]), derived_north, north[1:])
        east[1:] = np.where(np.isnan(east[1:]), derived_east, east[1:])
        down[1:] = np.where(np.isnan(down[1:]), derived_down, down[1:])
        logger.debug(f"Derived velocity for {int(np.count_nonzero(missing[1:]))} of {n_samples} samples in {track.name}")

    # First sample has no predecessor; absent components default to zero
    north[0] = _zero_if_nan(north[0])
    east[0] = _zero_if_nan(east[0])
    down[0] = _zero_if_nan(down[0])

    return dataclasses.replace(track, velocity_north=north, velocity_east=east, velocity_down=down)


def _difference_velocities(
    track: RawTrack,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    dt = np.diff(track.timestamps)
    d_alt = np.diff(track.altitude)
    d_north = signed_haversine(track.latitude[:-1], track.latitude[1:])
    d_east = signed_haversine(track.longitude[:-1], track.longitude[1:])

    valid_dt = dt > 0
    safe_dt = np.where(valid_dt, dt, 1.0)

    down = _finite_or_zero(np.where(valid_dt, -d_alt / safe_dt, 0.0))
    north = _finite_or_zero(np.where(valid_dt, d_north / safe_dt, 0.0))
    east = _finite_or_zero(np.where(valid_dt, d_east / safe_dt, 0.0))
    return north, east, down


def _finite_or_zero(arr: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.where(np.isfinite(arr), arr, 0.0)


def _zero_if_nan(value: float) -> float:
    return 0.0 if np.isnan(value) else float(value)

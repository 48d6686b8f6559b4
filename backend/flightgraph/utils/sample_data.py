"""
Sample data generator for testing.

Generates realistic-looking skydive tracks: exit from the aircraft,
freefall, deployment and canopy descent.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import numpy as np

from flightgraph.models.raw import RawTrack
from flightgraph.utils.coordinates import degrees_for_distance


def generate_skydive_track(
    name: str = "demo_jump",
    exit_altitude_m: float = 4000.0,
    deploy_altitude_m: float = 1000.0,
    sample_rate_hz: float = 5.0,
    start_lat: float = 52.0,
    start_lon: float = 5.0,
    aircraft_speed_ms: float = 40.0,
    heading_deg: float = 45.0,
    include_velocity: bool = True,
    noise_m: float = 0.0,
    seed: Optional[int] = None,
) -> RawTrack:
    """
    Generate a skydive track from exit to landing.

    Vertical speed builds from 0 toward ~55 m/s terminal velocity during
    freefall, drops to ~5 m/s under canopy. Horizontal speed starts at the
    aircraft's forward speed and decays to ~10 m/s under canopy.

    Args:
        include_velocity: Also populate logged velocity columns (as a GPS
            logger would). Without it only position and altitude are set.
        noise_m: Standard deviation of position/altitude noise in meters
        seed: Random seed for the noise
    """
    rng = np.random.default_rng(seed)
    dt = 1.0 / sample_rate_hz

    velocity_down = []
    horizontal = []
    altitude = [exit_altitude_m]
    vd, vh = 0.0, aircraft_speed_ms

    while altitude[-1] > 0:
        if altitude[-1] > deploy_altitude_m:
            # Freefall: approach terminal velocity, lose forward throw
            vd += (55.0 - vd) * 0.1 * dt * 2
            vh += (0.0 - vh) * 0.15 * dt * 2
        else:
            # Canopy: decelerate to steady descent and forward drive
            vd += (5.0 - vd) * 0.5 * dt * 2
            vh += (10.0 - vh) * 0.5 * dt * 2
        velocity_down.append(vd)
        horizontal.append(vh)
        altitude.append(altitude[-1] - vd * dt)

    n_samples = len(altitude)
    velocity_down = np.array([0.0] + velocity_down)
    horizontal = np.array([aircraft_speed_ms] + horizontal)
    altitude = np.maximum(np.array(altitude), 0.0)

    heading = np.radians(heading_deg)
    velocity_north = horizontal * np.cos(heading)
    velocity_east = horizontal * np.sin(heading)

    north_m = np.concatenate([[0.0], np.cumsum(velocity_north[1:] * dt)])
    east_m = np.concatenate([[0.0], np.cumsum(velocity_east[1:] * dt)])

    if noise_m > 0:
        north_m = north_m + rng.normal(0, noise_m, n_samples)
        east_m = east_m + rng.normal(0, noise_m, n_samples)
        altitude = altitude + rng.normal(0, noise_m, n_samples)

    timestamps = np.arange(n_samples) * dt

    return RawTrack(
        name=name,
        timestamps=timestamps,
        latitude=start_lat + degrees_for_distance(north_m),
        longitude=start_lon + degrees_for_distance(east_m),
        altitude=altitude,
        velocity_north=velocity_north if include_velocity else None,
        velocity_east=velocity_east if include_velocity else None,
        velocity_down=velocity_down if include_velocity else None,
        start_time=datetime(2011, 6, 14, 17, 2, 12, tzinfo=timezone.utc),
    )


def flysight_records(track: RawTrack) -> list[dict]:
    """Render a track as FlySight-style log rows (ISO time, hMSL, velN/velE/velD)."""
    start = track.start_time or datetime(2000, 1, 1, tzinfo=timezone.utc)
    rows = []
    for i in range(track.sample_count):
        elapsed_ms = round(float(track.timestamps[i] - track.timestamps[0]) * 1000)
        stamp = start + timedelta(milliseconds=elapsed_ms)
        row = {
            "time": stamp.strftime("%Y-%m-%dT%H:%M:%S.") + f"{stamp.microsecond // 10000:02d}Z",
            "lat": float(track.latitude[i]),
            "lon": float(track.longitude[i]),
            "hMSL": float(track.altitude[i]),
        }
        if track.has_velocity:
            row["velN"] = float(track.velocity_north[i])
            row["velE"] = float(track.velocity_east[i])
            row["velD"] = float(track.velocity_down[i])
        rows.append(row)
    return rows

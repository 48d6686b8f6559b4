"""
Tabular record adapter.

Turns an already-loaded record table (a DataFrame, or a list of row dicts
as received over the API) into a RawTrack. Column names vary between
loggers and exporters, so each standard field accepts several aliases.
Reading files is left to the caller.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, Optional, Union

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from flightgraph.models.raw import RawTrack
from flightgraph.services.velocity import derive_missing_velocity


logger = logging.getLogger(__name__)


# Column name mappings - FlySight logs, GPX exports and hand-made tables
COLUMN_MAPPINGS = {
    "time": ["time", "Time", "TIME", "timestamp", "Timestamp"],
    "latitude": ["lat", "Lat", "latitude", "Latitude", "LATITUDE"],
    "longitude": ["lon", "Lon", "lng", "longitude", "Longitude", "LONGITUDE"],
    "altitude": ["hMSL", "altitude", "Altitude", "alt", "ele", "elevation", "Elevation"],
    "velocity_north": ["velN", "velocity_north", "vel_north"],
    "velocity_east": ["velE", "velocity_east", "vel_east"],
    "velocity_down": ["velD", "velocity_down", "vel_down"],
}

REQUIRED_COLUMNS = ("time", "latitude", "longitude", "altitude")


class TrackRecordParser:
    """Parser for record tables with FlySight-style or descriptive column names."""

    def parse_frame(self, df: pd.DataFrame, name: str = "track") -> RawTrack:
        df = df.copy()
        df.columns = [str(c).strip() for c in df.columns]
        col_map = self._map_columns(df.columns.tolist())

        missing = [std for std in REQUIRED_COLUMNS if col_map.get(std) is None]
        if missing:
            raise ValueError(f"Missing required columns: {', '.join(missing)}")

        timestamps, start_time = self._parse_time_column(df, col_map["time"])
        n_samples = len(timestamps)

        positions = {
            std: self._extract_column(df, col_map, std, n_samples)
            for std in ("latitude", "longitude", "altitude")
        }
        for std, values in positions.items():
            bad = np.flatnonzero(~np.isfinite(values))
            if len(bad):
                raise ValueError(f"Column {col_map[std]} has missing or non-numeric values (row {int(bad[0])})")

        return RawTrack(
            name=name,
            timestamps=timestamps,
            latitude=positions["latitude"],
            longitude=positions["longitude"],
            altitude=positions["altitude"],
            velocity_north=self._extract_column(df, col_map, "velocity_north", n_samples),
            velocity_east=self._extract_column(df, col_map, "velocity_east", n_samples),
            velocity_down=self._extract_column(df, col_map, "velocity_down", n_samples),
            start_time=start_time,
        )

    def _map_columns(self, columns: list[str]) -> dict[str, Optional[str]]:
        col_map: dict[str, Optional[str]] = {}
        for std_name, variants in COLUMN_MAPPINGS.items():
            col_map[std_name] = None
            for variant in variants:
                if variant in columns:
                    col_map[std_name] = variant
                    break
        return col_map

    def _parse_time_column(
        self,
        df: pd.DataFrame,
        time_col: str,
    ) -> tuple[NDArray[np.float64], Optional[datetime]]:
        values = df[time_col]
        if len(values) == 0:
            return np.zeros(0, dtype=np.float64), None

        if pd.api.types.is_numeric_dtype(values):
            times = values.to_numpy(dtype=np.float64)
            if np.any(np.isnan(times)):
                raise ValueError("Time column contains missing values")
            return times - times[0], None

        # ISO-8601 timestamps, e.g. FlySight "2011-06-14T17:02:12.40Z"
        stamps = pd.to_datetime(values, utc=True, errors="coerce")
        if stamps.isna().any():
            raise ValueError("Time column contains unparseable timestamps")

        seconds = (stamps - stamps.iloc[0]).dt.total_seconds().to_numpy(dtype=np.float64)
        return seconds, stamps.iloc[0].to_pydatetime()

    def _extract_column(
        self,
        df: pd.DataFrame,
        col_map: dict[str, Optional[str]],
        std_name: str,
        n_samples: int,
    ) -> NDArray[np.float64]:
        col = col_map.get(std_name)
        if col is None or col not in df.columns:
            return np.full(n_samples, np.nan, dtype=np.float64)
        return pd.to_numeric(df[col], errors="coerce").to_numpy(dtype=np.float64)


def track_from_frame(df: pd.DataFrame, name: str = "track") -> RawTrack:
    """
    Build a RawTrack from a record table, deriving velocity where absent.

    Raises:
        ValueError: On missing required columns, bad or decreasing timestamps
    """
    track = TrackRecordParser().parse_frame(df, name)
    if track.sample_count > 0 and not track.has_velocity:
        track = derive_missing_velocity(track)
    logger.debug(f"Loaded track {name}: {track.sample_count} samples, {track.duration_s:.2f}s")
    return track


def track_from_records(
    records: Union[pd.DataFrame, Iterable[dict[str, Any]]],
    name: str = "track",
) -> RawTrack:
    """Build a RawTrack from row dicts (or pass a DataFrame straight through)."""
    if isinstance(records, pd.DataFrame):
        return track_from_frame(records, name)

    rows = list(records)
    if not rows:
        return RawTrack(
            name=name,
            timestamps=np.zeros(0),
            latitude=np.zeros(0),
            longitude=np.zeros(0),
            altitude=np.zeros(0),
        )
    return track_from_frame(pd.DataFrame(rows), name)

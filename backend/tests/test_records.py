"""
Tests for the tabular record adapter.
"""

from datetime import timezone

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose

from flightgraph.services.records import TrackRecordParser, track_from_frame, track_from_records
from flightgraph.utils.sample_data import flysight_records, generate_skydive_track


@pytest.fixture
def flysight_rows():
    """FlySight-style rows with ISO timestamps and logged velocity."""
    return [
        {"time": "2011-06-14T17:02:12.40Z", "lat": 52.0, "lon": 5.0, "hMSL": 4000.0,
         "velN": 1.0, "velE": 2.0, "velD": 3.0},
        {"time": "2011-06-14T17:02:12.60Z", "lat": 52.00001, "lon": 5.0, "hMSL": 3999.0,
         "velN": 1.5, "velE": 2.5, "velD": 5.0},
        {"time": "2011-06-14T17:02:12.80Z", "lat": 52.00002, "lon": 5.0, "hMSL": 3997.0,
         "velN": 2.0, "velE": 3.0, "velD": 10.0},
    ]


@pytest.fixture
def descriptive_frame():
    """Numeric seconds, descriptive column names, no velocity."""
    return pd.DataFrame({
        "Time": [0.0, 1.0, 2.0],
        "Latitude": [0.0, 0.0001, 0.0002],
        "Longitude": [0.0, 0.0, 0.0],
        "Altitude": [100.0, 90.0, 80.0],
    })


class TestTrackRecordParser:
    """Tests for column mapping and time parsing."""

    def test_flysight_rows(self, flysight_rows):
        track = track_from_records(flysight_rows, name="flysight")

        assert track.sample_count == 3
        assert_allclose(track.timestamps, [0.0, 0.2, 0.4], atol=1e-6)
        assert_allclose(track.altitude, [4000.0, 3999.0, 3997.0])
        assert_allclose(track.velocity_down, [3.0, 5.0, 10.0])

    def test_iso_start_time(self, flysight_rows):
        track = track_from_records(flysight_rows)

        assert track.start_time.year == 2011
        assert track.start_time.tzinfo is not None
        assert track.start_time.astimezone(timezone.utc).hour == 17

    def test_numeric_time_relative_to_first(self):
        df = pd.DataFrame({"time": [100.0, 100.5], "lat": [0, 0], "lon": [0, 0], "alt": [10, 9]})

        track = TrackRecordParser().parse_frame(df)

        assert_allclose(track.timestamps, [0.0, 0.5])
        assert track.start_time is None

    def test_column_names_stripped(self):
        df = pd.DataFrame({" time ": [0.0, 1.0], "lat": [0, 0], " lon": [0, 0], "ele": [5, 4]})

        track = TrackRecordParser().parse_frame(df)

        assert_allclose(track.altitude, [5.0, 4.0])

    def test_missing_required_column(self):
        df = pd.DataFrame({"time": [0.0, 1.0], "lat": [0, 0], "lon": [0, 0]})

        with pytest.raises(ValueError, match="altitude"):
            TrackRecordParser().parse_frame(df)

    def test_decreasing_time_rejected(self):
        df = pd.DataFrame({"time": [0.0, 2.0, 1.0], "lat": [0] * 3, "lon": [0] * 3, "hMSL": [3, 2, 1]})

        with pytest.raises(ValueError, match="non-decreasing"):
            track_from_frame(df)

    def test_blank_altitude_rejected(self, flysight_rows):
        flysight_rows[1]["hMSL"] = None

        with pytest.raises(ValueError, match="hMSL"):
            track_from_records(flysight_rows)

    def test_non_numeric_latitude_rejected(self):
        df = pd.DataFrame({"time": [0.0, 1.0], "lat": [52.0, "n/a"], "lon": [5.0, 5.0], "alt": [10, 9]})

        with pytest.raises(ValueError, match="lat"):
            track_from_frame(df)

    def test_blank_velocity_is_derived(self, flysight_rows):
        flysight_rows[1]["velN"] = None

        track = track_from_records(flysight_rows)

        assert np.isfinite(track.velocity_north[1])
        assert track.velocity_down[1] == 5.0

    def test_unparseable_time_rejected(self):
        rows = [
            {"time": "2011-06-14T17:02:12.40Z", "lat": 0, "lon": 0, "hMSL": 1},
            {"time": "not a time", "lat": 0, "lon": 0, "hMSL": 1},
        ]

        with pytest.raises(ValueError, match="timestamps"):
            track_from_records(rows)


class TestTrackFromRecords:
    """Tests for velocity handling while loading."""

    def test_velocity_derived_when_absent(self, descriptive_frame):
        track = track_from_frame(descriptive_frame)

        assert track.has_velocity
        assert_allclose(track.velocity_down, [0.0, 10.0, 10.0])
        assert_allclose(track.velocity_north[1:], 11.12, rtol=1e-3)

    def test_logged_velocity_kept(self, flysight_rows):
        track = track_from_records(flysight_rows)

        assert_allclose(track.velocity_north, [1.0, 1.5, 2.0])
        assert_allclose(track.velocity_east, [2.0, 2.5, 3.0])

    def test_dataframe_passthrough(self, descriptive_frame):
        track = track_from_records(descriptive_frame, name="frame")

        assert track.name == "frame"
        assert track.sample_count == 3

    def test_empty_records(self):
        track = track_from_records([])

        assert track.sample_count == 0
        assert track.duration_s == 0.0

    def test_generated_flysight_rows_round_trip(self):
        source = generate_skydive_track(sample_rate_hz=5.0)

        track = track_from_records(flysight_records(source))

        assert track.sample_count == source.sample_count
        assert_allclose(track.timestamps, source.timestamps, atol=1e-3)
        assert_allclose(track.velocity_down, source.velocity_down)

"""
Graph session - the state behind one graph view.

Holds the source track, the selected display mode and units, the built
series with its global bounds, and the current zoom viewport. Swapping
the track rebuilds and resets the zoom; changing mode or units rebuilds
and keeps the zoomed time window.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from flightgraph.models.raw import RawTrack
from flightgraph.models.series import (
    Bounds,
    DisplayMode,
    PixelRect,
    Series,
    TimeRange,
    UnitSystem,
    Viewport,
)
from flightgraph.services import viewport as vp
from flightgraph.services.query import value_at
from flightgraph.services.selection import selection_for_window, window_for_selection
from flightgraph.services.series_builder import build_series
from flightgraph.services.velocity import derive_missing_velocity


logger = logging.getLogger(__name__)


DEFAULT_MODE = DisplayMode(os.getenv("FLIGHTGRAPH_DEFAULT_MODE", DisplayMode.VERTICAL_SPEED.value))
DEFAULT_UNITS = UnitSystem(os.getenv("FLIGHTGRAPH_DEFAULT_UNITS", UnitSystem.METRIC.value))
DEFAULT_PLOT_WIDTH = int(os.getenv("FLIGHTGRAPH_PLOT_WIDTH", "800"))
DEFAULT_PLOT_HEIGHT = int(os.getenv("FLIGHTGRAPH_PLOT_HEIGHT", "400"))

EMPTY_BOUNDS = Bounds(0.0, 0.0, 0.0, 0.0)


@dataclass
class GridLines:
    """Grid step sizes and the major line positions for the current viewport."""

    step_x: float
    step_y: float
    x_values: list[float]
    y_values: list[float]


class GraphSession:
    """
    One graph: a track rendered under a display mode and unit system.

    Callers serialize access per session; nothing here is shared between
    sessions.
    """

    def __init__(
        self,
        session_id: str,
        name: str = "",
        mode: DisplayMode = DEFAULT_MODE,
        units: UnitSystem = DEFAULT_UNITS,
        rect: Optional[PixelRect] = None,
    ):
        self.id = session_id
        self.name = name
        self._mode = mode
        self._units = units
        self._rect = rect or PixelRect.from_widget_size(DEFAULT_PLOT_WIDTH, DEFAULT_PLOT_HEIGHT)

        self._track: Optional[RawTrack] = None
        self._series = Series.empty()
        self._global = EMPTY_BOUNDS
        self._viewport = Viewport(0.0, 0.0, 0.0, 0.0)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def track(self) -> Optional[RawTrack]:
        return self._track

    @property
    def mode(self) -> DisplayMode:
        return self._mode

    @property
    def units(self) -> UnitSystem:
        return self._units

    @property
    def rect(self) -> PixelRect:
        return self._rect

    @property
    def series(self) -> Series:
        return self._series

    @property
    def global_bounds(self) -> Bounds:
        return self._global

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def has_data(self) -> bool:
        return not self._series.is_empty

    # ------------------------------------------------------------------
    # Rebuilds
    # ------------------------------------------------------------------

    def set_track(self, track: Optional[RawTrack]) -> None:
        """Replace the source records; the zoom resets to the whole track."""
        if track is not None and not track.has_velocity:
            track = derive_missing_velocity(track)
        self._track = track
        self._rebuild(reset_zoom=True)

    def set_display(self, mode: Optional[DisplayMode] = None, units: Optional[UnitSystem] = None) -> None:
        """Change mode and/or units, keeping the zoomed time window."""
        changed = False
        if mode is not None and mode != self._mode:
            self._mode = mode
            changed = True
        if units is not None and units != self._units:
            self._units = units
            changed = True
        if changed:
            self._rebuild(reset_zoom=False)

    def set_mode(self, mode: DisplayMode) -> None:
        self.set_display(mode=mode)

    def set_units(self, units: UnitSystem) -> None:
        self.set_display(units=units)

    def refresh(self) -> None:
        """Rebuild from the current track (e.g. after rows were edited) keeping the zoom."""
        self._rebuild(reset_zoom=False)

    def _rebuild(self, reset_zoom: bool) -> None:
        if self._track is None or self._track.sample_count == 0:
            self._series = Series.empty()
            self._global = EMPTY_BOUNDS
            self._viewport = Viewport(0.0, 0.0, 0.0, 0.0)
            return

        self._series = build_series(self._track, self._mode, self._units)
        self._global = vp.global_bounds(self._series)

        if reset_zoom:
            min_x, max_x = self._global.min_x, self._global.max_x
        else:
            a = min(self._global.max_x, max(self._viewport.min_x, self._global.min_x))
            b = min(self._global.max_x, max(self._viewport.max_x, self._global.min_x))
            min_x, max_x = min(a, b), max(a, b)

        self._fit_window(min_x, max_x)
        logger.debug(
            f"Rebuilt graph {self.id}: {len(self._series)} samples, "
            f"{self._mode.value}/{self._units.value}, reset_zoom={reset_zoom}"
        )

    def _fit_window(self, min_x: float, max_x: float) -> None:
        fitted = vp.viewport_bounds(self._series, min_x, max_x)
        self._viewport = vp.with_steps(fitted, self._rect)

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        """Resize the hosting widget; the zoom window is kept, grid steps follow."""
        self._rect = PixelRect.from_widget_size(width, height)
        self._viewport = vp.with_steps(self._viewport.bounds, self._rect)

    def set_zoom(self, min_x: float, min_y: float, max_x: float, max_y: float) -> Viewport:
        self._viewport = vp.clamp_zoom(self._global, self._rect, min_x, min_y, max_x, max_y)
        return self._viewport

    def reset_zoom(self) -> Viewport:
        if self.has_data:
            self._fit_window(self._global.min_x, self._global.max_x)
        return self._viewport

    def wheel(self, px: float, py: float, delta: float) -> Viewport:
        self._viewport = vp.zoom_about(self._viewport, self._global, self._rect, px, py, delta)
        return self._viewport

    def pan(self, from_px: float, from_py: float, to_px: float, to_py: float) -> Viewport:
        self._viewport = vp.pan_by_pixels(
            self._viewport, self._global, self._rect, from_px, from_py, to_px, to_py
        )
        return self._viewport

    def select_zoom(self, x1: float, y1: float, x2: float, y2: float) -> Viewport:
        self._viewport = vp.zoom_to_selection(self._viewport, self._global, self._rect, x1, y1, x2, y2)
        return self._viewport

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def value_at(self, t: float) -> float:
        return value_at(self._series, t)

    def hover(self, px: float, py: float) -> tuple[float, float]:
        """Time under the pixel column and the series value at that time."""
        t, _ = vp.data_from_pixel(px, py, self._viewport, self._rect)
        return t, value_at(self._series, t)

    def data_from_pixel(self, px: float, py: float) -> tuple[float, float]:
        return vp.data_from_pixel(px, py, self._viewport, self._rect)

    def pixel_from_data(self, x: float, y: float) -> tuple[float, float]:
        return vp.pixel_from_data(x, y, self._viewport, self._rect)

    def polyline(self) -> NDArray[np.float64]:
        return vp.polyline(self._series, self._viewport, self._rect)

    def grid(self) -> GridLines:
        view = self._viewport
        return GridLines(
            step_x=view.step_x,
            step_y=view.step_y,
            x_values=vp.grid_lines(view.min_x, view.max_x, view.step_x),
            y_values=vp.grid_lines(view.min_y, view.max_y, view.step_y),
        )

    def selection_for_window(self, t_min: float, t_max: float) -> TimeRange:
        return selection_for_window(self._series, t_min, t_max)

    def window_for_selection(self, rows: TimeRange) -> Optional[tuple[float, float]]:
        return window_for_selection(self._series, rows)

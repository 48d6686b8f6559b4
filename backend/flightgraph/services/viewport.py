"""
Extrema and viewport management.

Computes global and windowed value bounds for a series, clamps zoom
windows into the global bounds, derives grid step sizes, and maps between
data space (seconds, display value) and pixel space. Pan and zoom
requests are answered by returning a new Viewport; nothing here holds
state.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from flightgraph.models.series import Bounds, PixelRect, Series, Viewport
from flightgraph.services.query import index_at, values_at


EXTREMA_MARGIN = 1.05

# Grid spacing targets: a time line every 50 pixels, a value step near half the range
GRID_PIXELS_X = 50
GRID_FRACTION_Y = 0.5

WHEEL_NOTCH = 140.0
MIN_SELECTION_AREA = 10


# ============================================================================
# Extrema
# ============================================================================

def _margin_extrema(values: NDArray[np.float64]) -> tuple[float, float]:
    # Scale is signed: negative minima move down, positive minima move up
    return float(np.min(values)) * EXTREMA_MARGIN, float(np.max(values)) * EXTREMA_MARGIN


def global_bounds(series: Series) -> Bounds:
    """
    Bounds of the whole series.

    X spans [0, last sample time]; Y spans the value extrema scaled by the
    5% margin. An empty series has all-zero bounds.
    """
    if series.is_empty:
        return Bounds(0.0, 0.0, 0.0, 0.0)

    min_y, max_y = _margin_extrema(series.y)
    return Bounds(min_x=0.0, max_x=float(series.x[-1]), min_y=min_y, max_y=max_y)


def viewport_bounds(series: Series, t_min: float, t_max: float) -> Bounds:
    """
    Bounds that fit the Y axis to the samples inside a time window.

    Samples are taken from index_at(t_min) up to, not including,
    index_at(t_max). A window narrower than one sample uses the sample at
    index_at(t_min).
    """
    if series.is_empty:
        return Bounds(t_min, t_max, 0.0, 0.0)

    lo = index_at(series, t_min)
    hi = index_at(series, t_max)
    if hi <= lo:
        hi = lo + 1

    min_y, max_y = _margin_extrema(series.y[lo:hi])
    return Bounds(min_x=t_min, max_x=t_max, min_y=min_y, max_y=max_y)


# ============================================================================
# Zoom and grid
# ============================================================================

def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(value, low))


def grid_step_x(bounds: Bounds | Viewport, rect: PixelRect) -> float:
    """
    Time grid step in seconds, hundredth-second resolution.

    Chosen so consecutive lines land about 50 pixels apart. Returns 0.0 for
    a degenerate window or plot area (no grid).
    """
    if rect.width <= 0 or bounds.max_x - bounds.min_x <= 0:
        return 0.0
    seconds_per_pixel = (bounds.max_x - bounds.min_x) / rect.width
    return math.floor(seconds_per_pixel * GRID_PIXELS_X * 100) / 100.0


def grid_step_y(bounds: Bounds | Viewport) -> float:
    """
    Value grid step: the power of ten at or below half the visible range.

    Returns 0.0 for a zero-height window (no grid).
    """
    height = bounds.max_y - bounds.min_y
    if height <= 0:
        return 0.0
    return 10.0 ** math.floor(math.log10(height * GRID_FRACTION_Y))


def with_steps(bounds: Bounds, rect: PixelRect) -> Viewport:
    """Viewport for a zoom window with its grid steps computed."""
    return Viewport(
        min_x=bounds.min_x,
        max_x=bounds.max_x,
        min_y=bounds.min_y,
        max_y=bounds.max_y,
        step_x=grid_step_x(bounds, rect),
        step_y=grid_step_y(bounds),
    )


def clamp_zoom(
    global_: Bounds,
    rect: PixelRect,
    min_x: float,
    min_y: float,
    max_x: float,
    max_y: float,
) -> Viewport:
    """
    Set a zoom window.

    Each bound is clamped into the global bounds, and each axis pair is
    reordered so min <= max; swapped or out-of-range input is corrected,
    never rejected. Grid steps are recomputed for the result.
    """
    min_x = _clamp(min_x, global_.min_x, global_.max_x)
    max_x = _clamp(max_x, global_.min_x, global_.max_x)
    min_y = _clamp(min_y, global_.min_y, global_.max_y)
    max_y = _clamp(max_y, global_.min_y, global_.max_y)

    window = Bounds(
        min_x=min(min_x, max_x),
        max_x=max(min_x, max_x),
        min_y=min(min_y, max_y),
        max_y=max(min_y, max_y),
    )
    return with_steps(window, rect)


def grid_lines(min_value: float, max_value: float, step: float) -> list[float]:
    """Major grid line values covering [min_value, max_value], one step beyond each end."""
    if step <= 0 or not math.isfinite(step):
        return []
    first = int(min_value / step) - 1
    last = int(max_value / step) + 1
    return [i * step for i in range(first, last)]


# ============================================================================
# Pixel <-> data mapping
# ============================================================================

def data_from_pixel(px: float, py: float, viewport: Viewport, rect: PixelRect) -> tuple[float, float]:
    """
    Convert a pixel position to (seconds, value).

    The rect bottom maps to min_y and the top to max_y. An axis with a
    zero-width window or zero-size plot area passes its input through.
    """
    if viewport.width != 0 and rect.width != 0:
        dx = rect.width / viewport.width
        x = (px - rect.left) / dx + viewport.min_x
    else:
        x = px

    if viewport.height != 0 and rect.height != 0:
        dy = rect.height / viewport.height
        y = (rect.bottom - py) / dy + viewport.min_y
    else:
        y = py

    return x, y


def _pixel_y(values, viewport: Viewport, rect: PixelRect):
    """Y pixel(s) for value(s); passes through on a zero-height window or rect."""
    if viewport.height != 0 and rect.height != 0:
        return rect.bottom - (values - viewport.min_y) * (rect.height / viewport.height)
    return values


def pixel_from_data(x: float, y: float, viewport: Viewport, rect: PixelRect) -> tuple[float, float]:
    """Inverse of data_from_pixel."""
    if viewport.width != 0 and rect.width != 0:
        px = rect.left + (x - viewport.min_x) * (rect.width / viewport.width)
    else:
        px = x

    return px, _pixel_y(y, viewport, rect)


def polyline(series: Series, viewport: Viewport, rect: PixelRect) -> NDArray[np.float64]:
    """
    Curve points for the plot: one (px, py) per pixel column of the rect.

    Returns an (n, 2) array; empty for an empty series or zero-width rect.
    """
    n_columns = int(rect.width)
    if series.is_empty or n_columns <= 0:
        return np.zeros((0, 2), dtype=np.float64)

    columns = np.arange(n_columns, dtype=np.float64)
    times = viewport.min_x + columns * (viewport.width / rect.width)
    values = values_at(series, times)

    return np.column_stack([rect.left + columns, _pixel_y(values, viewport, rect)])


# ============================================================================
# Pan / zoom requests
# ============================================================================

def wheel_factor(delta: float) -> float:
    """Scale applied to the window for one wheel event (< 1 zooms in)."""
    if delta > 0:
        return delta / WHEEL_NOTCH
    if delta < 0:
        return WHEEL_NOTCH / -delta
    return 1.0


def zoom_about(
    viewport: Viewport,
    global_: Bounds,
    rect: PixelRect,
    px: float,
    py: float,
    wheel_delta: float,
) -> Viewport:
    """Zoom the window about the data point under (px, py)."""
    if wheel_delta == 0:
        return viewport

    factor = wheel_factor(wheel_delta)
    center_x, center_y = data_from_pixel(px, py, viewport, rect)

    return clamp_zoom(
        global_,
        rect,
        min_x=(viewport.min_x - center_x) * factor + center_x,
        min_y=(viewport.min_y - center_y) * factor + center_y,
        max_x=(viewport.max_x - center_x) * factor + center_x,
        max_y=(viewport.max_y - center_y) * factor + center_y,
    )


def pan_by_pixels(
    viewport: Viewport,
    global_: Bounds,
    rect: PixelRect,
    from_px: float,
    from_py: float,
    to_px: float,
    to_py: float,
) -> Viewport:
    """
    Drag the window by a pixel displacement.

    Each axis moves only if the shifted window stays strictly inside the
    global bounds; otherwise that axis keeps its position.
    """
    if viewport.width == 0 or viewport.height == 0 or rect.width == 0 or rect.height == 0:
        return viewport

    dx = rect.width / viewport.width
    dy = rect.height / viewport.height
    shift_x = (from_px - to_px) / dx
    shift_y = (to_py - from_py) / dy

    min_x, max_x = viewport.min_x, viewport.max_x
    min_y, max_y = viewport.min_y, viewport.max_y

    if max_x + shift_x < global_.max_x and min_x + shift_x > global_.min_x:
        min_x += shift_x
        max_x += shift_x

    if max_y + shift_y < global_.max_y and min_y + shift_y > global_.min_y:
        min_y += shift_y
        max_y += shift_y

    return with_steps(Bounds(min_x, max_x, min_y, max_y), rect)


def zoom_to_selection(
    viewport: Viewport,
    global_: Bounds,
    rect: PixelRect,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
) -> Viewport:
    """
    Zoom to a rubber-band pixel selection.

    Selections with an area of 10 square pixels or less are ignored.
    """
    left, right = min(x1, x2), max(x1, x2)
    top, bottom = min(y1, y2), max(y1, y2)
    if (right - left) * (bottom - top) <= MIN_SELECTION_AREA:
        return viewport

    min_x, max_y = data_from_pixel(left, top, viewport, rect)
    max_x, min_y = data_from_pixel(right, bottom, viewport, rect)
    return clamp_zoom(global_, rect, min_x, min_y, max_x, max_y)

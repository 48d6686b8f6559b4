"""
Interpolation and index queries over a sorted Series.

All lookups are binary searches over x and never index outside the series.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from flightgraph.models.series import Series


def value_at(series: Series, t: float) -> float:
    """
    Get the series value at time t.

    Exact sample times return that sample's value; times between samples
    are linearly interpolated from the bracketing pair; times outside the
    series clamp to the first or last value.

    Raises:
        ValueError: If the series is empty
    """
    return float(values_at(series, np.array([t], dtype=np.float64))[0])


def values_at(series: Series, times: ArrayLike) -> NDArray[np.float64]:
    """Vectorized value_at for many query times (one per pixel column)."""
    if series.is_empty:
        raise ValueError("Cannot query an empty series")

    x, y = series.x, series.y
    times = np.asarray(times, dtype=np.float64)
    n = len(x)
    if n == 1:
        return np.full(times.shape, y[0], dtype=np.float64)

    # First index with x >= t, clipped to [1, n-1] so both neighbours exist
    hi = np.clip(np.searchsorted(x, times, side="left"), 1, n - 1)
    lo = hi - 1

    x_lo, x_hi = x[lo], x[hi]
    span = x_hi - x_lo
    safe_span = np.where(span > 0, span, 1.0)
    fraction = np.where(span > 0, (times - x_lo) / safe_span, 0.0)
    result = y[lo] + fraction * (y[hi] - y[lo])

    # Exact matches return the stored sample, not an interpolation
    exact_idx = np.clip(np.searchsorted(x, times, side="left"), 0, n - 1)
    result = np.where(x[exact_idx] == times, y[exact_idx], result)

    result = np.where(times <= x[0], y[0], result)
    result = np.where(times >= x[-1], y[-1], result)
    return result


def index_at(series: Series, t: float) -> int:
    """
    Get the index of the last sample at or before time t.

    Returns 0 when t precedes the first sample.

    Raises:
        ValueError: If the series is empty
    """
    if series.is_empty:
        raise ValueError("Cannot query an empty series")

    idx = int(np.searchsorted(series.x, t, side="right")) - 1
    return max(idx, 0)

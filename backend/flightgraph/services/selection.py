"""
Row selection correspondence.

Translates between a time window on the graph and a row-index TimeRange
in the record grid.
"""

from typing import Optional

from flightgraph.models.series import Series, TimeRange
from flightgraph.services.query import index_at


def selection_for_window(series: Series, t_min: float, t_max: float) -> TimeRange:
    """Rows covered by a time window; INVALID if too narrow or the series is empty."""
    if series.is_empty:
        return TimeRange.INVALID

    t_min, t_max = min(t_min, t_max), max(t_min, t_max)
    rows = TimeRange(index_at(series, t_min), index_at(series, t_max) + 1)
    return rows.clamped(len(series))


def window_for_selection(series: Series, rows: TimeRange) -> Optional[tuple[float, float]]:
    """Time window spanned by a row selection, or None for no selection."""
    if series.is_empty or not rows.is_valid:
        return None

    first = max(0, min(rows.min, len(series) - 1))
    last = max(first, min(rows.max - 1, len(series) - 1))
    return float(series.x[first]), float(series.x[last])

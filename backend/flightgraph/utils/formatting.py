"""
Display text for graph values, grid labels and unit selectors.
"""

from typing import Optional

from flightgraph.models.series import DisplayMode, UnitSystem


SPEED_UNITS = {UnitSystem.METRIC: "Km/h", UnitSystem.IMPERIAL: "MPH"}
ALTITUDE_UNITS = {UnitSystem.METRIC: "m", UnitSystem.IMPERIAL: "ft"}

# Labels for the unit selector next to the graph
SELECTOR_LABELS = {
    DisplayMode.HORIZONTAL_SPEED: {UnitSystem.METRIC: "KMPH", UnitSystem.IMPERIAL: "MPH"},
    DisplayMode.VERTICAL_SPEED: {UnitSystem.METRIC: "KMPH", UnitSystem.IMPERIAL: "MPH"},
    DisplayMode.ALTITUDE: {UnitSystem.METRIC: "KM", UnitSystem.IMPERIAL: "ft (x1000)"},
}


def format_value(value: float, mode: DisplayMode, units: UnitSystem) -> str:
    """
    Hover readout for a series value.

    Altitude series are stored in thousands, so the readout scales back
    to whole meters or feet.
    """
    if mode == DisplayMode.ALTITUDE:
        return f"{value * 1000.0:.0f}{ALTITUDE_UNITS[units]}"
    if mode == DisplayMode.GLIDE_RATIO:
        return f"{value:.2f}"
    return f"{value:.1f}{SPEED_UNITS[units]}"


def format_time(seconds: float) -> str:
    """Time axis label, M:SS.cc."""
    sign = "-" if seconds < 0 else ""
    centis = int(round(abs(seconds) * 100))
    minutes, centis = divmod(centis, 6000)
    secs, centis = divmod(centis, 100)
    return f"{sign}{minutes % 60}:{secs:02d}.{centis:02d}"


def unit_label(mode: DisplayMode, units: UnitSystem) -> Optional[str]:
    """Unit selector caption; None when the mode is unitless."""
    labels = SELECTOR_LABELS.get(mode)
    if labels is None:
        return None
    return labels[units]

"""
API schemas (Pydantic models) for request/response validation.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from flightgraph.models.series import DisplayMode, UnitSystem


# ============================================================================
# Geometry Schemas
# ============================================================================

class BoundsResponse(BaseModel):
    """Axis extents in data space (seconds, display value)."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float


class ViewportResponse(BoundsResponse):
    """Zoom window with its grid step sizes."""
    step_x: float
    step_y: float


class RectResponse(BaseModel):
    """Plot area in pixels."""
    left: float
    top: float
    width: float
    height: float


class PointResponse(BaseModel):
    """A converted point (pixel or data space, depending on the endpoint)."""
    x: float
    y: float


# ============================================================================
# Graph Schemas
# ============================================================================

class GraphCreateRequest(BaseModel):
    """Request to create a graph session."""
    name: Optional[str] = None
    mode: Optional[DisplayMode] = None
    units: Optional[UnitSystem] = None
    width: Optional[int] = Field(default=None, ge=0)
    height: Optional[int] = Field(default=None, ge=0)


class GraphStateResponse(BaseModel):
    """Current state of a graph session."""
    id: str
    name: str
    mode: DisplayMode
    units: UnitSystem
    unit_label: Optional[str] = None
    has_data: bool
    sample_count: int
    duration_s: float
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    global_bounds: BoundsResponse
    viewport: ViewportResponse
    rect: RectResponse


class RecordsRequest(BaseModel):
    """Replace the record set behind a graph."""
    name: Optional[str] = None
    records: list[dict[str, Any]]


class DisplayRequest(BaseModel):
    """Change display mode and/or units."""
    mode: Optional[DisplayMode] = None
    units: Optional[UnitSystem] = None


class SizeRequest(BaseModel):
    """Widget size in pixels."""
    width: int = Field(ge=0)
    height: int = Field(ge=0)


class DemoRequest(BaseModel):
    """Load a synthetic skydive track."""
    exit_altitude_m: float = Field(default=4000.0, gt=0)
    deploy_altitude_m: float = Field(default=1000.0, gt=0)
    sample_rate_hz: float = Field(default=5.0, ge=1.0, le=50.0)
    include_velocity: bool = True
    noise_m: float = Field(default=0.0, ge=0.0)
    seed: Optional[int] = None


# ============================================================================
# Zoom / Pan Schemas
# ============================================================================

class ZoomRequest(BaseModel):
    """Requested zoom window in data space; clamped, never rejected."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float


class WheelRequest(BaseModel):
    """Mouse wheel event at a pixel position."""
    px: float
    py: float
    delta: float


class PanRequest(BaseModel):
    """Drag from one pixel position to another."""
    from_px: float
    from_py: float
    to_px: float
    to_py: float


class SelectZoomRequest(BaseModel):
    """Rubber-band selection corners in pixels."""
    x1: float
    y1: float
    x2: float
    y2: float


# ============================================================================
# Query Schemas
# ============================================================================

class SeriesResponse(BaseModel):
    """Built display series."""
    mode: DisplayMode
    units: UnitSystem
    x: list[float]
    y: list[Optional[float]]


class ValueResponse(BaseModel):
    """Series value at a query time."""
    t: float
    value: float
    text: str


class HoverResponse(BaseModel):
    """Hover marker for a mouse position."""
    t: float
    value: float
    text: str
    marker: PointResponse


class PolylineResponse(BaseModel):
    """Curve points, one per pixel column."""
    points: list[tuple[float, Optional[float]]]


class GridResponse(BaseModel):
    """Grid steps, line positions and time labels for the viewport."""
    step_x: float
    step_y: float
    x_values: list[float]
    y_values: list[float]
    x_labels: list[str]


class SelectionResponse(BaseModel):
    """Row range covered by a time window (min = max = -1 when invalid)."""
    min: int
    max: int
    valid: bool
    t_min: Optional[float] = None
    t_max: Optional[float] = None


class SampleResponse(BaseModel):
    """One source record as shown in the record grid."""
    row: int
    time: float
    latitude: float
    longitude: float
    altitude: float
    velocity_north: float
    velocity_east: float
    velocity_down: float


class RowsResponse(BaseModel):
    """Source records covered by a time window."""
    min: int
    max: int
    rows: list[SampleResponse]


# ============================================================================
# Error Schemas
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    code: Optional[str] = None

"""
API routes for graph sessions.
"""

import dataclasses
import logging
import math
from typing import Optional

import numpy as np
from fastapi import APIRouter, HTTPException, Query

from flightgraph.api.schemas import (
    BoundsResponse,
    DemoRequest,
    DisplayRequest,
    ErrorResponse,
    GraphCreateRequest,
    GraphStateResponse,
    GridResponse,
    HoverResponse,
    PanRequest,
    PointResponse,
    PolylineResponse,
    RecordsRequest,
    RectResponse,
    RowsResponse,
    SampleResponse,
    SelectionResponse,
    SelectZoomRequest,
    SeriesResponse,
    SizeRequest,
    ValueResponse,
    ViewportResponse,
    WheelRequest,
    ZoomRequest,
)
from flightgraph.models.series import TimeRange
from flightgraph.services.graph import DEFAULT_MODE, DEFAULT_UNITS, GraphSession
from flightgraph.services.records import track_from_records
from flightgraph.services.repository import get_repository
from flightgraph.utils.formatting import format_time, format_value, unit_label
from flightgraph.utils.sample_data import generate_skydive_track


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/graphs",
    tags=["graphs"],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)


def _nan_to_none(value: float) -> Optional[float]:
    """Convert NaN to None for JSON serialization."""
    if math.isnan(value):
        return None
    return value


def _clean_array(arr: np.ndarray) -> list[Optional[float]]:
    """Convert numpy array to list, replacing NaN with None."""
    return [None if math.isnan(x) else float(x) for x in arr]


def _get_session(graph_id: str) -> GraphSession:
    session = get_repository().get(graph_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Graph not found: {graph_id}")
    return session


def _require_data(session: GraphSession) -> None:
    if not session.has_data:
        raise HTTPException(status_code=409, detail=f"Graph has no records: {session.id}")


def _build_state_response(session: GraphSession) -> GraphStateResponse:
    """Build state response from a GraphSession."""
    track = session.track
    bounds = session.global_bounds
    rect = session.rect

    return GraphStateResponse(
        id=session.id,
        name=session.name,
        mode=session.mode,
        units=session.units,
        unit_label=unit_label(session.mode, session.units),
        has_data=session.has_data,
        sample_count=len(session.series),
        duration_s=session.series.duration_s,
        start_time=track.start_time.isoformat() if track is not None and track.start_time else None,
        end_time=track.end_time.isoformat() if track is not None and track.end_time else None,
        global_bounds=BoundsResponse(
            min_x=bounds.min_x, max_x=bounds.max_x, min_y=bounds.min_y, max_y=bounds.max_y
        ),
        viewport=_build_viewport_response(session),
        rect=RectResponse(left=rect.left, top=rect.top, width=rect.width, height=rect.height),
    )


def _build_viewport_response(session: GraphSession) -> ViewportResponse:
    view = session.viewport
    return ViewportResponse(
        min_x=view.min_x,
        max_x=view.max_x,
        min_y=view.min_y,
        max_y=view.max_y,
        step_x=view.step_x,
        step_y=view.step_y,
    )


# ============================================================================
# Session Routes
# ============================================================================

@router.post("", response_model=GraphStateResponse, status_code=201)
async def create_graph(request: GraphCreateRequest):
    """
    Create an empty graph session.

    Mode and units default to the configured defaults.
    """
    session = get_repository().create(
        name=request.name or "",
        mode=request.mode or DEFAULT_MODE,
        units=request.units or DEFAULT_UNITS,
        width=request.width,
        height=request.height,
    )
    return _build_state_response(session)


@router.get("", response_model=list[GraphStateResponse])
async def list_graphs():
    """List all graph sessions."""
    return [_build_state_response(s) for s in get_repository().list_sessions()]


@router.get("/{graph_id}", response_model=GraphStateResponse)
async def get_graph(graph_id: str):
    """Get the state of a graph session."""
    return _build_state_response(_get_session(graph_id))


@router.delete("/{graph_id}", status_code=204)
async def delete_graph(graph_id: str):
    """Delete a graph session."""
    if not get_repository().delete(graph_id):
        raise HTTPException(status_code=404, detail=f"Graph not found: {graph_id}")


@router.put("/{graph_id}/records", response_model=GraphStateResponse)
async def replace_records(graph_id: str, request: RecordsRequest):
    """
    Replace the record set behind a graph.

    Velocity is derived from positions for records without it. The zoom
    resets to the whole track.
    """
    session = _get_session(graph_id)
    try:
        track = track_from_records(request.records, name=request.name or session.name)
    except ValueError as e:
        logger.warning(f"Rejected records for graph {graph_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    session.set_track(track)
    logger.info(f"Loaded {track.sample_count} records into graph {graph_id}")
    return _build_state_response(session)


@router.post("/{graph_id}/demo", response_model=GraphStateResponse)
async def load_demo(graph_id: str, request: DemoRequest):
    """Load a synthetic skydive track into a graph."""
    session = _get_session(graph_id)
    track = generate_skydive_track(
        name=session.name,
        exit_altitude_m=request.exit_altitude_m,
        deploy_altitude_m=request.deploy_altitude_m,
        sample_rate_hz=request.sample_rate_hz,
        include_velocity=request.include_velocity,
        noise_m=request.noise_m,
        seed=request.seed,
    )
    session.set_track(track)
    return _build_state_response(session)


@router.put("/{graph_id}/mode", response_model=GraphStateResponse)
async def set_display(graph_id: str, request: DisplayRequest):
    """
    Change display mode and/or units.

    The zoomed time window is kept; the Y axis refits to it.
    """
    session = _get_session(graph_id)
    session.set_display(mode=request.mode, units=request.units)
    return _build_state_response(session)


@router.put("/{graph_id}/size", response_model=GraphStateResponse)
async def resize_graph(graph_id: str, request: SizeRequest):
    """Resize the hosting widget."""
    session = _get_session(graph_id)
    session.resize(request.width, request.height)
    return _build_state_response(session)


@router.get("/{graph_id}/series", response_model=SeriesResponse)
async def get_series(graph_id: str):
    """Get the built (smoothed) display series."""
    session = _get_session(graph_id)
    return SeriesResponse(
        mode=session.mode,
        units=session.units,
        x=session.series.x.tolist(),
        y=_clean_array(session.series.y),
    )


# ============================================================================
# Zoom / Pan Routes
# ============================================================================

@router.post("/{graph_id}/zoom", response_model=ViewportResponse)
async def set_zoom(graph_id: str, request: ZoomRequest):
    """Set the zoom window; bounds are clamped into the data extents."""
    session = _get_session(graph_id)
    _require_data(session)
    session.set_zoom(request.min_x, request.min_y, request.max_x, request.max_y)
    return _build_viewport_response(session)


@router.post("/{graph_id}/zoom/reset", response_model=ViewportResponse)
async def reset_zoom(graph_id: str):
    """Zoom out to the whole track."""
    session = _get_session(graph_id)
    session.reset_zoom()
    return _build_viewport_response(session)


@router.post("/{graph_id}/wheel", response_model=ViewportResponse)
async def wheel_zoom(graph_id: str, request: WheelRequest):
    """Zoom about the mouse position."""
    session = _get_session(graph_id)
    _require_data(session)
    session.wheel(request.px, request.py, request.delta)
    return _build_viewport_response(session)


@router.post("/{graph_id}/pan", response_model=ViewportResponse)
async def pan(graph_id: str, request: PanRequest):
    """Drag the zoom window by a pixel displacement."""
    session = _get_session(graph_id)
    _require_data(session)
    session.pan(request.from_px, request.from_py, request.to_px, request.to_py)
    return _build_viewport_response(session)


@router.post("/{graph_id}/select-zoom", response_model=ViewportResponse)
async def select_zoom(graph_id: str, request: SelectZoomRequest):
    """Zoom to a rubber-band pixel selection (tiny selections are ignored)."""
    session = _get_session(graph_id)
    _require_data(session)
    session.select_zoom(request.x1, request.y1, request.x2, request.y2)
    return _build_viewport_response(session)


# ============================================================================
# Query Routes
# ============================================================================

@router.get("/{graph_id}/value", response_model=ValueResponse)
async def get_value(
    graph_id: str,
    t: float = Query(..., description="Time in seconds since the first sample"),
):
    """Get the series value at a time, interpolated between samples."""
    session = _get_session(graph_id)
    _require_data(session)
    value = session.value_at(t)
    return ValueResponse(t=t, value=value, text=format_value(value, session.mode, session.units))


@router.get("/{graph_id}/hover", response_model=HoverResponse)
async def hover(
    graph_id: str,
    px: float = Query(..., description="Mouse x in pixels"),
    py: float = Query(0.0, description="Mouse y in pixels"),
):
    """Get the hover readout and marker position for a mouse position."""
    session = _get_session(graph_id)
    _require_data(session)
    t, value = session.hover(px, py)
    marker_x, marker_y = session.pixel_from_data(t, value)
    return HoverResponse(
        t=t,
        value=value,
        text=format_value(value, session.mode, session.units),
        marker=PointResponse(x=marker_x, y=marker_y),
    )


@router.get("/{graph_id}/polyline", response_model=PolylineResponse)
async def get_polyline(graph_id: str):
    """Get the curve to stroke, one point per pixel column."""
    session = _get_session(graph_id)
    points = session.polyline()
    return PolylineResponse(points=[(float(px), _nan_to_none(float(py))) for px, py in points])


@router.get("/{graph_id}/grid", response_model=GridResponse)
async def get_grid(graph_id: str):
    """Get grid steps, line positions and time labels."""
    session = _get_session(graph_id)
    grid = session.grid()
    return GridResponse(
        step_x=grid.step_x,
        step_y=grid.step_y,
        x_values=grid.x_values,
        y_values=grid.y_values,
        x_labels=[format_time(v) for v in grid.x_values],
    )


@router.get("/{graph_id}/pixel", response_model=PointResponse)
async def pixel_from_data(
    graph_id: str,
    x: float = Query(..., description="Time in seconds"),
    y: float = Query(..., description="Display value"),
):
    """Convert a data point to pixel coordinates."""
    session = _get_session(graph_id)
    px, py = session.pixel_from_data(x, y)
    return PointResponse(x=px, y=py)


@router.get("/{graph_id}/data", response_model=PointResponse)
async def data_from_pixel(
    graph_id: str,
    px: float = Query(..., description="Pixel x"),
    py: float = Query(..., description="Pixel y"),
):
    """Convert pixel coordinates to a data point."""
    session = _get_session(graph_id)
    x, y = session.data_from_pixel(px, py)
    return PointResponse(x=x, y=y)


@router.get("/{graph_id}/selection", response_model=SelectionResponse)
async def get_selection(
    graph_id: str,
    t_min: float = Query(..., description="Window start in seconds"),
    t_max: float = Query(..., description="Window end in seconds"),
):
    """Translate a time window into the row range it covers."""
    session = _get_session(graph_id)
    rows = session.selection_for_window(t_min, t_max)
    window = session.window_for_selection(rows)
    return SelectionResponse(
        min=rows.min,
        max=rows.max,
        valid=rows != TimeRange.INVALID,
        t_min=window[0] if window else None,
        t_max=window[1] if window else None,
    )


@router.get("/{graph_id}/rows", response_model=RowsResponse)
async def get_rows(
    graph_id: str,
    t_min: float = Query(..., description="Window start in seconds"),
    t_max: float = Query(..., description="Window end in seconds"),
):
    """Get the source records the record grid highlights for a time window."""
    session = _get_session(graph_id)
    rows = session.selection_for_window(t_min, t_max)
    if not rows.is_valid:
        return RowsResponse(min=rows.min, max=rows.max, rows=[])

    samples = []
    for idx in range(rows.min, rows.max):
        sample = session.track.sample(idx)
        samples.append(SampleResponse(row=idx, **dataclasses.asdict(sample)))
    return RowsResponse(min=rows.min, max=rows.max, rows=samples)

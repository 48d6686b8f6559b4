"""
Tests for extrema, zoom clamping, grid steps and pixel mapping.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from flightgraph.models.series import Bounds, PixelRect, Series, Viewport
from flightgraph.services.viewport import (
    clamp_zoom,
    data_from_pixel,
    global_bounds,
    grid_lines,
    grid_step_x,
    grid_step_y,
    pan_by_pixels,
    pixel_from_data,
    polyline,
    viewport_bounds,
    wheel_factor,
    with_steps,
    zoom_about,
    zoom_to_selection,
)


@pytest.fixture
def series():
    return Series(x=np.arange(5, dtype=np.float64), y=np.array([-10.0, 0.0, 20.0, 5.0, 10.0]))


@pytest.fixture
def rect():
    """400 x 200 plot area, 5 px in from the left."""
    return PixelRect(left=5, top=0, width=400, height=200)


@pytest.fixture
def square():
    """Global bounds used by the pan/zoom tests."""
    return Bounds(min_x=0.0, max_x=4.0, min_y=0.0, max_y=20.0)


class TestBounds:
    """Tests for global and windowed extrema."""

    def test_global_bounds(self, series):
        bounds = global_bounds(series)

        assert bounds.min_x == 0.0
        assert bounds.max_x == 4.0
        assert bounds.min_y == pytest.approx(-10.5)
        assert bounds.max_y == pytest.approx(21.0)

    def test_margin_narrows_positive_minimum(self):
        bounds = global_bounds(Series(x=[0.0, 1.0], y=[2.0, 4.0]))

        assert bounds.min_y == pytest.approx(2.1)
        assert bounds.max_y == pytest.approx(4.2)

    def test_empty_series(self):
        assert global_bounds(Series.empty()) == Bounds(0.0, 0.0, 0.0, 0.0)

    def test_viewport_bounds_window(self, series):
        bounds = viewport_bounds(series, 1.0, 3.0)

        assert bounds.min_x == 1.0
        assert bounds.max_x == 3.0
        assert bounds.min_y == pytest.approx(0.0)
        assert bounds.max_y == pytest.approx(21.0)

    def test_viewport_bounds_narrow_window(self, series):
        """A window inside one sample interval fits to that sample."""
        bounds = viewport_bounds(series, 0.5, 0.7)

        assert bounds.min_y == pytest.approx(-10.5)
        assert bounds.max_y == pytest.approx(-10.5)

    def test_viewport_bounds_inside_global(self, series):
        global_ = global_bounds(series)

        for t_min, t_max in [(0.0, 4.0), (0.5, 2.5), (2.0, 4.0)]:
            window = viewport_bounds(series, t_min, t_max)
            assert global_.min_y <= window.min_y <= window.max_y <= global_.max_y


class TestGridSteps:
    """Tests for grid step sizes."""

    def test_step_x(self):
        rect = PixelRect(left=5, top=0, width=600, height=300)

        assert grid_step_x(Bounds(0.0, 60.0, 0.0, 1.0), rect) == pytest.approx(5.0)

    def test_step_x_hundredths(self):
        rect = PixelRect.from_widget_size(805, 400)

        assert grid_step_x(Bounds(0.0, 4.0, 0.0, 1.0), rect) == pytest.approx(0.25)

    def test_step_x_degenerate(self, rect):
        assert grid_step_x(Bounds(2.0, 2.0, 0.0, 1.0), rect) == 0.0
        assert grid_step_x(Bounds(0.0, 1.0, 0.0, 1.0), PixelRect(5, 0, 0, 0)) == 0.0

    @pytest.mark.parametrize(
        "height, expected",
        [(31.5, 10.0), (1.0, 0.1), (200.0, 100.0), (2.0, 1.0)],
    )
    def test_step_y(self, height, expected):
        assert grid_step_y(Bounds(0.0, 1.0, 0.0, height)) == pytest.approx(expected)

    def test_step_y_degenerate(self):
        assert grid_step_y(Bounds(0.0, 1.0, 3.0, 3.0)) == 0.0

    def test_grid_lines(self):
        assert_allclose(grid_lines(0.0, 1.0, 0.25), [-0.25, 0.0, 0.25, 0.5, 0.75, 1.0])

    def test_grid_lines_no_step(self):
        assert grid_lines(0.0, 1.0, 0.0) == []


class TestClampZoom:
    """Tests for setting a zoom window."""

    def test_within_bounds_kept(self, square, rect):
        view = clamp_zoom(square, rect, 1.0, 2.0, 3.0, 18.0)

        assert (view.min_x, view.max_x, view.min_y, view.max_y) == (1.0, 3.0, 2.0, 18.0)

    def test_out_of_range_clamped(self, square, rect):
        view = clamp_zoom(square, rect, -5.0, -50.0, 10.0, 50.0)

        assert view.bounds == square

    def test_swapped_reordered(self, square, rect):
        view = clamp_zoom(square, rect, 3.0, 18.0, 1.0, 2.0)

        assert (view.min_x, view.max_x, view.min_y, view.max_y) == (1.0, 3.0, 2.0, 18.0)

    @pytest.mark.parametrize(
        "request_bounds",
        [(5.0, 100.0, -1.0, -100.0), (2.0, 2.0, 2.0, 2.0), (-3.0, 7.0, 9.0, 1.0)],
    )
    def test_result_inside_global(self, square, rect, request_bounds):
        view = clamp_zoom(square, rect, *request_bounds)

        assert square.min_x <= view.min_x <= view.max_x <= square.max_x
        assert square.min_y <= view.min_y <= view.max_y <= square.max_y

    def test_steps_recomputed(self, square, rect):
        view = clamp_zoom(square, rect, 0.0, 0.0, 4.0, 20.0)

        assert view.step_x == pytest.approx(0.5)
        assert view.step_y == pytest.approx(10.0)


class TestPixelMapping:
    """Tests for data <-> pixel conversion."""

    def test_corners(self, square, rect):
        view = with_steps(square, rect)

        assert data_from_pixel(5, 200, view, rect) == pytest.approx((0.0, 0.0))
        assert data_from_pixel(405, 0, view, rect) == pytest.approx((4.0, 20.0))

    def test_round_trip(self, rect):
        view = Viewport(min_x=1.5, max_x=9.25, min_y=-3.0, max_y=42.0)

        for px, py in [(5, 0), (123.4, 56.7), (405, 200), (-20, 300)]:
            x, y = data_from_pixel(px, py, view, rect)
            assert pixel_from_data(x, y, view, rect) == pytest.approx((px, py))

    def test_zero_width_passes_through(self, rect):
        view = Viewport(min_x=2.0, max_x=2.0, min_y=0.0, max_y=10.0)

        x, y = data_from_pixel(123.0, 100.0, view, rect)

        assert x == 123.0
        assert y == pytest.approx(5.0)

    def test_zero_rect_passes_through(self, square):
        empty = PixelRect(left=5, top=0, width=0, height=0)

        assert data_from_pixel(7.0, 9.0, with_steps(square, empty), empty) == (7.0, 9.0)
        assert pixel_from_data(7.0, 9.0, with_steps(square, empty), empty) == (7.0, 9.0)


class TestPolyline:
    """Tests for curve points."""

    def test_one_point_per_column(self, square, rect):
        line_series = Series(x=[0.0, 4.0], y=[0.0, 20.0])

        points = polyline(line_series, with_steps(square, rect), rect)

        assert points.shape == (400, 2)
        assert_allclose(points[0], [5.0, 200.0])
        assert_allclose(points[200], [205.0, 100.0])

    def test_points_agree_with_pixel_from_data(self, series, rect):
        view = Viewport(min_x=0.5, max_x=3.5, min_y=-12.0, max_y=25.0)

        points = polyline(series, view, rect)

        for px, py in points[::37]:
            t = view.min_x + (px - rect.left) * (view.width / rect.width)
            expected = pixel_from_data(t, float(np.interp(t, series.x, series.y)), view, rect)
            assert (px, py) == pytest.approx(expected)

    def test_zero_height_window_passes_values_through(self, series, rect):
        flat = Viewport(min_x=0.0, max_x=4.0, min_y=3.0, max_y=3.0)

        points = polyline(series, flat, rect)

        assert points[0, 1] == pytest.approx(-10.0)

    def test_empty_series(self, square, rect):
        assert polyline(Series.empty(), with_steps(square, rect), rect).shape == (0, 2)


class TestWheelZoom:
    """Tests for wheel zoom."""

    @pytest.mark.parametrize("delta, factor", [(140, 1.0), (280, 2.0), (-280, 0.5), (0, 1.0)])
    def test_wheel_factor(self, delta, factor):
        assert wheel_factor(delta) == pytest.approx(factor)

    def test_zoom_in_about_center(self, square, rect):
        view = with_steps(square, rect)

        zoomed = zoom_about(view, square, rect, 205, 100, -280)

        assert (zoomed.min_x, zoomed.max_x) == pytest.approx((1.0, 3.0))
        assert (zoomed.min_y, zoomed.max_y) == pytest.approx((5.0, 15.0))

    def test_zoom_out_clamped(self, square, rect):
        view = Viewport(1.0, 3.0, 5.0, 15.0)

        zoomed = zoom_about(view, square, rect, 205, 100, 1400)

        assert zoomed.bounds == square

    def test_zero_delta_is_noop(self, square, rect):
        view = with_steps(square, rect)

        assert zoom_about(view, square, rect, 100, 100, 0) == view


class TestPan:
    """Tests for drag panning."""

    def test_pan_moves_both_axes(self, square, rect):
        view = Viewport(1.0, 3.0, 5.0, 15.0)

        panned = pan_by_pixels(view, square, rect, 205, 100, 105, 120)

        assert (panned.min_x, panned.max_x) == pytest.approx((1.5, 3.5))
        assert (panned.min_y, panned.max_y) == pytest.approx((6.0, 16.0))

    def test_pan_blocked_at_edge(self, square, rect):
        view = Viewport(1.0, 3.0, 5.0, 15.0)

        # One second right would put max_x exactly on the edge
        panned = pan_by_pixels(view, square, rect, 305, 100, 105, 100)

        assert (panned.min_x, panned.max_x) == (1.0, 3.0)

    def test_axes_independent(self, square, rect):
        view = Viewport(1.0, 3.0, 5.0, 15.0)

        # X blocked, Y moves down by 2
        panned = pan_by_pixels(view, square, rect, 405, 100, 5, 60)

        assert (panned.min_x, panned.max_x) == (1.0, 3.0)
        assert (panned.min_y, panned.max_y) == pytest.approx((3.0, 13.0))


class TestSelectionZoom:
    """Tests for rubber-band zoom."""

    def test_zoom_to_selection(self, square, rect):
        view = with_steps(square, rect)

        zoomed = zoom_to_selection(view, square, rect, 105, 50, 205, 150)

        assert (zoomed.min_x, zoomed.max_x) == pytest.approx((1.0, 2.0))
        assert (zoomed.min_y, zoomed.max_y) == pytest.approx((5.0, 15.0))

    def test_corner_order_irrelevant(self, square, rect):
        view = with_steps(square, rect)

        a = zoom_to_selection(view, square, rect, 105, 50, 205, 150)
        b = zoom_to_selection(view, square, rect, 205, 150, 105, 50)

        assert a == b

    def test_tiny_selection_ignored(self, square, rect):
        view = with_steps(square, rect)

        assert zoom_to_selection(view, square, rect, 10, 10, 12, 14) == view

from __future__ import annotations

import logging
from typing import Callable

from grapher_core import ranges
from grapher_core.axis import AxisConfig
from grapher_core.measures import Measures
from grapher_plot.errors import PlotDataError
from grapher_plot.graph import DEFAULT_GRAPH_COLOR, Graph, GraphKind, InputGrid
from grapher_plot.raster.canvas import RGBA


LOGGER = logging.getLogger(__name__)

DEFAULT_PADDING = 10
ZOOM_FACTOR = 10**0.25
MOVE_FACTOR = 0.25
SMOOTH_FACTOR = 0.1
MOVE_SMOOTH_FACTOR = MOVE_FACTOR * SMOOTH_FACTOR
ZOOM_SMOOTH_FACTOR = ZOOM_FACTOR**SMOOTH_FACTOR


class Navigator:
    """Holds the X/Y axis state of one plot and turns host gestures into axis changes.

    Native coordinates are pixels of the whole drawing surface (Y grows
    downwards); view coordinates are relative to the padded plot area (Y grows
    upwards). Every gesture returns ``True`` only when an axis actually changed,
    so hosts can skip redundant renders. Gestures must be dispatched one at a
    time from a single thread.
    """

    def __init__(self, width: int, height: int, *, padding: int = DEFAULT_PADDING) -> None:
        if padding < 0:
            raise PlotDataError("padding must be >= 0")
        self.padding = padding
        self.width, self.height = self._check_size(width, height)
        self.axis_x = AxisConfig.from_view_area_size(self.width - 2 * padding)
        self.axis_y = AxisConfig.from_view_area_size(self.height - 2 * padding)
        self.grid = InputGrid.from_axis(self.axis_x, version=0)
        self.graphs: list[Graph] = []

    def _check_size(self, width: int, height: int) -> tuple[int, int]:
        min_size = 2 * self.padding + 2
        if width < min_size or height < min_size:
            raise PlotDataError(f"surface must be at least {min_size}x{min_size}, got {width}x{height}")
        return (int(width), int(height))

    # graphs

    def add_graph(
        self,
        calculate: Callable[[float], float],
        color: RGBA = DEFAULT_GRAPH_COLOR,
        *,
        kind: GraphKind = "default",
    ) -> Graph:
        graph = Graph(calculate=calculate, kind=kind, color=color)
        self.graphs.append(graph)
        return graph

    def add_integer_graph(self, calculate: Callable[[float], float], color: RGBA = DEFAULT_GRAPH_COLOR) -> Graph:
        return self.add_graph(calculate, color, kind="integer")

    # coordinates

    def native_to_view_x(self, native_x: int) -> int:
        return native_x - self.padding

    def native_to_view_y(self, native_y: int) -> int:
        return (self.height - self.padding - 1) - native_y

    def view_to_native_x(self, view_x: int) -> int:
        return self.padding + view_x

    def view_to_native_y(self, view_y: int) -> int:
        return (self.height - self.padding - 1) - view_y

    # state replacement

    def _set_x(self, axis_x: AxisConfig) -> bool:
        if axis_x == self.axis_x:
            return False
        window_changed = (
            axis_x.currents != self.axis_x.currents or axis_x.view_area_size != self.axis_x.view_area_size
        )
        self.axis_x = axis_x
        if window_changed:
            self.grid = InputGrid.from_axis(axis_x, version=self.grid.version + 1)
        return True

    def _set_y(self, axis_y: AxisConfig) -> bool:
        if axis_y == self.axis_y:
            return False
        self.axis_y = axis_y
        return True

    # gestures

    def set_measures(self, x: Measures | None = None, y: Measures | None = None) -> bool:
        is_x_changed = x is not None and self._set_x(ranges.with_measures(self.axis_x, x))
        is_y_changed = y is not None and self._set_y(ranges.with_measures(self.axis_y, y))
        return is_x_changed or is_y_changed

    def resize(self, width: int, height: int) -> bool:
        self.width, self.height = self._check_size(width, height)
        LOGGER.debug("surface resized to %dx%d", self.width, self.height)
        is_x_changed = self._set_x(ranges.with_view_area_size(self.axis_x, self.width - 2 * self.padding))
        is_y_changed = self._set_y(ranges.with_view_area_size(self.axis_y, self.height - 2 * self.padding))
        return is_x_changed or is_y_changed

    def set_as_default(self) -> bool:
        is_x_changed = self._set_x(ranges.set_as_default(self.axis_x))
        is_y_changed = self._set_y(ranges.set_as_default(self.axis_y))
        return is_x_changed or is_y_changed

    def reset(self) -> bool:
        is_x_changed = self._set_x(ranges.with_defaults(self.axis_x))
        is_y_changed = self._set_y(ranges.with_defaults(self.axis_y))
        return is_x_changed or is_y_changed

    def zoom(self, zoom_in: bool, *, smooth: bool = False, native_x: int | None = None, native_y: int | None = None) -> bool:
        step = ZOOM_SMOOTH_FACTOR if smooth else ZOOM_FACTOR
        factor = 1.0 / step if zoom_in else step
        axis_x, axis_y = self.axis_x, self.axis_y

        # Zooming out is pointless once the whole axis is already on screen.
        is_x_changed = native_x is not None and (
            zoom_in or axis_x.min_coord < 0 or axis_x.max_coord > axis_x.max_view_coord
        )
        is_y_changed = native_y is not None and (
            zoom_in or axis_y.min_coord < 0 or axis_y.max_coord > axis_y.max_view_coord
        )

        if is_x_changed:
            assert native_x is not None
            window = ranges.zoom_view_coords(axis_x.max_view_coord, factor, self.native_to_view_x(native_x))
            is_x_changed = self._set_x(ranges.with_view_coords(axis_x, *window))
        if is_y_changed:
            assert native_y is not None
            window = ranges.zoom_view_coords(axis_y.max_view_coord, factor, self.native_to_view_y(native_y))
            is_y_changed = self._set_y(ranges.with_view_coords(axis_y, *window))
        return is_x_changed or is_y_changed

    def move(self, native_dx: int, native_dy: int) -> bool:
        """Drag the content by a native pixel delta (the window moves the other way)."""
        axis_x, axis_y = self.axis_x, self.axis_y
        is_x_changed = native_dx != 0 and (
            (native_dx > 0 and axis_x.min_coord < 0) or (native_dx < 0 and axis_x.max_coord > axis_x.max_view_coord)
        )
        is_y_changed = native_dy != 0 and (
            (native_dy < 0 and axis_y.min_coord < 0) or (native_dy > 0 and axis_y.max_coord > axis_y.max_view_coord)
        )

        if is_x_changed:
            window = ranges.move_view_coords(axis_x.max_view_coord, -native_dx)
            is_x_changed = self._set_x(ranges.with_view_coords(axis_x, *window))
        if is_y_changed:
            window = ranges.move_view_coords(axis_y.max_view_coord, native_dy)
            is_y_changed = self._set_y(ranges.with_view_coords(axis_y, *window))
        return is_x_changed or is_y_changed

    def _move_step(self, axis: AxisConfig, smooth: bool) -> int:
        return int(round(axis.max_view_coord * (MOVE_SMOOTH_FACTOR if smooth else MOVE_FACTOR)))

    def move_left(self, smooth: bool = False) -> bool:
        return self.move(self._move_step(self.axis_x, smooth), 0)

    def move_right(self, smooth: bool = False) -> bool:
        return self.move(-self._move_step(self.axis_x, smooth), 0)

    def move_up(self, smooth: bool = False) -> bool:
        return self.move(0, self._move_step(self.axis_y, smooth))

    def move_down(self, smooth: bool = False) -> bool:
        return self.move(0, -self._move_step(self.axis_y, smooth))

    def select_range(self, native_min_x: int, native_max_x: int, native_min_y: int, native_max_y: int) -> bool:
        """Zoom to a rectangle given by native corners."""
        if native_min_x == native_max_x or native_min_y == native_max_y:
            return False
        is_x_changed = self._set_x(
            ranges.with_view_coords(
                self.axis_x, self.native_to_view_x(native_min_x), self.native_to_view_x(native_max_x)
            )
        )
        is_y_changed = self._set_y(
            ranges.with_view_coords(
                self.axis_y, self.native_to_view_y(native_max_y), self.native_to_view_y(native_min_y)
            )
        )
        return is_x_changed or is_y_changed

    def select_range_x(self, native_min_x: int, native_max_x: int) -> bool:
        return self.select_range(
            native_min_x, native_max_x, self.padding, self.height - self.padding - 1
        )

    def select_range_y(self, native_min_y: int, native_max_y: int) -> bool:
        return self.select_range(
            self.padding, self.width - self.padding - 1, native_min_y, native_max_y
        )

    def shift_min_log(self, x_diff: int, y_diff: int) -> bool:
        is_x_changed = x_diff != 0 and self._set_x(ranges.with_min_log_diff(self.axis_x, x_diff))
        is_y_changed = y_diff != 0 and self._set_y(ranges.with_min_log_diff(self.axis_y, y_diff))
        return is_x_changed or is_y_changed

    def shift_max_log(self, x_diff: int, y_diff: int) -> bool:
        is_x_changed = x_diff != 0 and self._set_x(ranges.with_max_log_diff(self.axis_x, x_diff))
        is_y_changed = y_diff != 0 and self._set_y(ranges.with_max_log_diff(self.axis_y, y_diff))
        return is_x_changed or is_y_changed

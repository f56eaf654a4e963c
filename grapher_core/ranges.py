from __future__ import annotations

from dataclasses import replace
import logging
import math

from grapher_core.axis import AxisConfig, AxisData, try_create
from grapher_core.errors import ConfigurationError
from grapher_core.measures import Measures


LOGGER = logging.getLogger(__name__)


def _rebuild(
    axis: AxisConfig,
    *,
    view_area_size: int | None = None,
    currents: AxisData | None = None,
    defaults: AxisData | None = None,
    limits: AxisData | None = None,
) -> AxisConfig:
    # Gesture paths never raise: an invalid candidate keeps the previous axis.
    result = try_create(
        view_area_size=axis.view_area_size if view_area_size is None else view_area_size,
        currents=axis.currents if currents is None else currents,
        defaults=axis.defaults if defaults is None else defaults,
        limits=axis.limits if limits is None else limits,
    )
    if isinstance(result, ConfigurationError):
        LOGGER.debug("axis change rejected, keeping previous state: %s", result)
        return axis
    return result


def _check_log_diff(diff: int) -> None:
    if diff not in (-1, 0, 1):
        raise ValueError(f"log diff must be -1, 0 or 1, got {diff!r}")


def with_view_coords(axis: AxisConfig, min_view_coord: float, max_view_coord: float) -> AxisConfig:
    """Show the coordinate window ``[min_view_coord, max_view_coord]``.

    The window is slide-clamped against the value limits: if one edge
    overshoots a limit the whole window is shifted back by the overshoot,
    keeping its width unless the opposite limit is reached too.
    """
    if min_view_coord == 0 and max_view_coord == axis.max_view_coord:
        return axis
    if math.isnan(min_view_coord) or math.isnan(max_view_coord):
        LOGGER.debug("ignoring NaN view window (%s, %s)", min_view_coord, max_view_coord)
        return axis

    min_coord_limit = axis.value_to_coord(axis.min_value_limit)
    max_coord_limit = axis.value_to_coord(axis.max_value_limit)

    adjusted_min = min_view_coord
    adjusted_max = max_view_coord
    if min_view_coord < min_coord_limit:
        adjusted_min = min_coord_limit
        adjusted_max = min(max_view_coord + (min_coord_limit - min_view_coord), max_coord_limit)
    elif max_view_coord > max_coord_limit:
        adjusted_min = max(min_view_coord - (max_view_coord - max_coord_limit), min_coord_limit)
        adjusted_max = max_coord_limit

    # An edge clamped onto a limit takes the limit value itself, not its round trip.
    if adjusted_min <= min_coord_limit:
        min_value = axis.min_value_limit
    else:
        min_value = max(axis.coord_to_value(adjusted_min), axis.min_value_limit)
    if adjusted_max >= max_coord_limit:
        max_value = axis.max_value_limit
    else:
        max_value = min(axis.coord_to_value(adjusted_max), axis.max_value_limit)
    return _rebuild(axis, currents=replace(axis.currents, min_value=min_value, max_value=max_value))


def with_min_log_diff(axis: AxisConfig, diff: int) -> AxisConfig:
    _check_log_diff(diff)
    min_log = axis.min_log + diff
    if min_log < axis.limits.min_log or min_log > axis.limits.max_log:
        return axis
    max_log = max(min_log, axis.max_log)
    return _rebuild(axis, currents=replace(axis.currents, min_log=min_log, max_log=max_log))


def with_max_log_diff(axis: AxisConfig, diff: int) -> AxisConfig:
    _check_log_diff(diff)
    max_log = axis.max_log + diff
    if max_log < axis.limits.min_log or max_log > axis.limits.max_log:
        return axis
    min_log = min(axis.min_log, max_log)
    return _rebuild(axis, currents=replace(axis.currents, min_log=min_log, max_log=max_log))


def with_view_area_size(axis: AxisConfig, view_area_size: int) -> AxisConfig:
    if view_area_size == axis.view_area_size:
        return axis
    return _rebuild(axis, view_area_size=view_area_size)


def set_as_default(axis: AxisConfig) -> AxisConfig:
    if axis.defaults == axis.currents:
        return axis
    return _rebuild(axis, defaults=axis.currents)


def with_defaults(axis: AxisConfig) -> AxisConfig:
    if axis.currents == axis.defaults:
        return axis
    return _rebuild(axis, currents=axis.defaults)


def with_measures(axis: AxisConfig, measures: Measures) -> AxisConfig:
    """Apply setup-time measures; the result also becomes the new default window."""
    currents = axis.currents
    limits = axis.limits

    min_log = currents.min_log if measures.min_log is None else measures.min_log
    max_log = currents.max_log if measures.max_log is None else measures.max_log
    min_value = currents.min_value if measures.min_value is None else float(measures.min_value)
    max_value = currents.max_value if measures.max_value is None else float(measures.max_value)
    min_value_limit = limits.min_value if measures.min_value_limit is None else float(measures.min_value_limit)
    max_value_limit = limits.max_value if measures.max_value_limit is None else float(measures.max_value_limit)

    new_currents = AxisData(
        min_log=max(min_log, limits.min_log),
        max_log=min(max_log, limits.max_log),
        min_value=max(min_value, min_value_limit),
        max_value=min(max_value, max_value_limit),
    )
    new_limits = replace(limits, min_value=min_value_limit, max_value=max_value_limit)
    result = _rebuild(axis, currents=new_currents, defaults=new_currents, limits=new_limits)
    if result is axis:
        LOGGER.warning("measures %s rejected for axis %s", measures, axis.currents)
    return result


def zoom_view_coords(max_view_coord: int, factor: float, anchor: float) -> tuple[float, float]:
    """Window for zooming by ``factor`` (< 1 zooms in) around view coordinate ``anchor``.

    The anchor keeps its relative position inside the window.
    """
    if factor <= 0:
        raise ValueError("zoom factor must be > 0")
    position = min(max(anchor / max_view_coord, 0.0), 1.0)
    zoomed = max_view_coord * factor
    new_min = (max_view_coord - zoomed) * position
    return (new_min, new_min + zoomed)


def move_view_coords(max_view_coord: int, delta: float) -> tuple[float, float]:
    return (delta, max_view_coord + delta)

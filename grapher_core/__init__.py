from grapher_core.axis import ABS_LOG_LIMIT, AxisConfig, AxisData, try_create
from grapher_core.errors import ConfigurationError
from grapher_core.measures import Measures
from grapher_core.ranges import (
    move_view_coords,
    set_as_default,
    with_defaults,
    with_max_log_diff,
    with_measures,
    with_min_log_diff,
    with_view_area_size,
    with_view_coords,
    zoom_view_coords,
)
from grapher_core.rulers import Ruler, RulerSettings, get_visible_rulers

__all__ = [
    "ABS_LOG_LIMIT",
    "AxisConfig",
    "AxisData",
    "ConfigurationError",
    "Measures",
    "Ruler",
    "RulerSettings",
    "get_visible_rulers",
    "move_view_coords",
    "set_as_default",
    "try_create",
    "with_defaults",
    "with_max_log_diff",
    "with_measures",
    "with_min_log_diff",
    "with_view_area_size",
    "with_view_coords",
    "zoom_view_coords",
]

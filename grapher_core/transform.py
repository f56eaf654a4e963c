from __future__ import annotations

from dataclasses import dataclass
import math

from grapher_core.errors import ConfigurationError


LOG10_E = math.log10(math.e)
# Natural-unit width of one decade of the logarithmic zone.
DECADE_WIDTH = 1.0 / LOG10_E


@dataclass(frozen=True)
class ZoneLayout:
    """Breakpoints and coefficients of the five-zone value/coordinate mapping.

    From left to right the zones are negative-hyperbolic, negative-logarithmic,
    linear, positive-logarithmic and positive-hyperbolic. ``multiplier`` is the
    number of view coordinates per natural unit; ``log_to_coord`` is the view
    coordinate width of one unit of ``log10``.
    """

    min_log: int
    max_linear_value: float
    max_log_value: float
    min_coord: float
    min_neg_log_coord: float
    min_linear_coord: float
    zero_coord: float
    max_linear_coord: float
    max_pos_log_coord: float
    max_coord: float
    multiplier: float
    log_to_coord: float

    def calibrated(self, multiplier: float, shift: float) -> "ZoneLayout":
        return ZoneLayout(
            min_log=self.min_log,
            max_linear_value=self.max_linear_value,
            max_log_value=self.max_log_value,
            min_coord=self.min_coord * multiplier + shift,
            min_neg_log_coord=self.min_neg_log_coord * multiplier + shift,
            min_linear_coord=self.min_linear_coord * multiplier + shift,
            zero_coord=self.zero_coord * multiplier + shift,
            max_linear_coord=self.max_linear_coord * multiplier + shift,
            max_pos_log_coord=self.max_pos_log_coord * multiplier + shift,
            max_coord=self.max_coord * multiplier + shift,
            multiplier=self.multiplier * multiplier,
            log_to_coord=self.log_to_coord * multiplier,
        )


def natural_layout(min_log: int, max_log: int) -> ZoneLayout:
    log_zone_size = DECADE_WIDTH * (max_log - min_log)
    return ZoneLayout(
        min_log=min_log,
        max_linear_value=10.0**min_log,
        max_log_value=10.0**max_log,
        min_coord=-2.0 - log_zone_size,
        min_neg_log_coord=-1.0 - log_zone_size,
        min_linear_coord=-1.0,
        zero_coord=0.0,
        max_linear_coord=1.0,
        max_pos_log_coord=1.0 + log_zone_size,
        max_coord=2.0 + log_zone_size,
        multiplier=1.0,
        log_to_coord=DECADE_WIDTH,
    )


def build_layout(
    view_area_size: int,
    *,
    min_log: int,
    max_log: int,
    min_value: float,
    max_value: float,
) -> ZoneLayout:
    """Lay the zones out in natural units, then calibrate the visible window.

    After calibration ``min_value`` maps to coordinate ``0`` and ``max_value``
    to ``view_area_size - 1``.
    """
    if view_area_size < 2:
        raise ConfigurationError(f"view_area_size must be >= 2, got {view_area_size}")
    natural = natural_layout(min_log, max_log)
    pre_min = value_to_coord(natural, min_value)
    pre_max = value_to_coord(natural, max_value)
    if not pre_min < pre_max:
        raise ConfigurationError(f"visible window collapses: [{min_value!r}, {max_value!r}]")

    multiplier = (view_area_size - 1) / (pre_max - pre_min)
    if not math.isfinite(multiplier):
        raise ConfigurationError(f"visible window too narrow: [{min_value!r}, {max_value!r}]")
    shift = -pre_min * multiplier
    layout = natural.calibrated(multiplier, shift)
    if not all(math.isfinite(c) for c in (layout.min_coord, layout.max_coord, layout.zero_coord, layout.log_to_coord)):
        raise ConfigurationError(f"visible window too narrow: [{min_value!r}, {max_value!r}]")
    return layout


def value_to_coord(layout: ZoneLayout, value: float) -> float:
    """Continuous coordinate of ``value``; ±inf land exactly on the outer bounds."""
    if value < -layout.max_log_value:
        coord = layout.min_coord + (layout.max_log_value / -value) * layout.multiplier
        return min(coord, layout.min_neg_log_coord)
    if value < -layout.max_linear_value:
        log_relative = math.log10(-value) - layout.min_log
        coord = layout.min_linear_coord - log_relative * layout.log_to_coord
        return max(layout.min_neg_log_coord, min(coord, layout.min_linear_coord))
    if value <= layout.max_linear_value:
        # Measured from zero so values far below the zone edge keep their digits.
        coord = layout.zero_coord + (value / layout.max_linear_value) * layout.multiplier
        return max(layout.min_linear_coord, min(coord, layout.max_linear_coord))
    if value <= layout.max_log_value:
        log_relative = math.log10(value) - layout.min_log
        coord = layout.max_linear_coord + log_relative * layout.log_to_coord
        return max(layout.max_linear_coord, min(coord, layout.max_pos_log_coord))
    coord = layout.max_coord - (layout.max_log_value / value) * layout.multiplier
    return max(coord, layout.max_pos_log_coord)


def coord_to_value(layout: ZoneLayout, coord: float) -> float:
    if coord < layout.min_neg_log_coord:
        if coord <= layout.min_coord:
            return -math.inf
        return -layout.max_log_value / ((coord - layout.min_coord) / layout.multiplier)
    if coord < layout.min_linear_coord:
        log = layout.min_log + (layout.min_linear_coord - coord) / layout.log_to_coord
        return -(10.0**log)
    if coord <= layout.max_linear_coord:
        return (coord - layout.zero_coord) / layout.multiplier * layout.max_linear_value
    if coord <= layout.max_pos_log_coord:
        log = layout.min_log + (coord - layout.max_linear_coord) / layout.log_to_coord
        return 10.0**log
    if coord >= layout.max_coord:
        return math.inf
    return layout.max_log_value / ((layout.max_coord - coord) / layout.multiplier)


def coord_to_view_coord(coord: float, max_view_coord: int) -> int | None:
    # Round half-to-even first, then test the integer: 10.5 -> 10 and -0.5 -> 0 stay
    # on screen for max_view_coord=10, while 10.6 and -0.6 do not.
    if not math.isfinite(coord):
        return None
    view_coord = round(coord)
    if view_coord < 0 or view_coord > max_view_coord:
        return None
    return view_coord

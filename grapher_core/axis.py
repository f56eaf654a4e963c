from __future__ import annotations

from dataclasses import dataclass, field
import math

from grapher_core.errors import ConfigurationError
from grapher_core.transform import (
    ZoneLayout,
    build_layout,
    coord_to_value,
    coord_to_view_coord,
    value_to_coord,
)


ABS_LOG_LIMIT = 300
DEFAULT_MIN_LOG = 0
DEFAULT_MAX_LOG = 6


@dataclass(frozen=True)
class AxisData:
    """Log-zone boundaries and value window of one axis snapshot.

    Snapshots are plain values; ``AxisConfig`` validates them on construction.
    """

    min_log: int
    max_log: int
    min_value: float
    max_value: float

    def validate(self, name: str) -> None:
        if not isinstance(self.min_log, int) or not isinstance(self.max_log, int):
            raise ConfigurationError(f"{name}: min_log/max_log must be integers")
        if self.min_log > self.max_log:
            raise ConfigurationError(f"{name}: min_log {self.min_log} > max_log {self.max_log}")
        if self.min_log < -ABS_LOG_LIMIT or self.max_log > ABS_LOG_LIMIT:
            raise ConfigurationError(f"{name}: log range [{self.min_log}, {self.max_log}] exceeds +/-{ABS_LOG_LIMIT}")
        if not self.min_value < self.max_value:
            raise ConfigurationError(f"{name}: min_value {self.min_value!r} must be < max_value {self.max_value!r}")

    def is_in_limits(self, limits: AxisData) -> bool:
        if self.min_log < limits.min_log:
            return False
        if self.max_log > limits.max_log:
            return False
        if self.min_value < limits.min_value:
            return False
        if self.max_value > limits.max_value:
            return False
        return True


@dataclass(frozen=True)
class AxisConfig:
    """Immutable state of one plot axis.

    Equality is structural over ``(view_area_size, currents, defaults, limits)``;
    the calibrated zone layout is derived in ``__post_init__`` and never compared.
    Every gesture replaces the value through ``grapher_core.ranges``.
    """

    view_area_size: int
    currents: AxisData
    defaults: AxisData
    limits: AxisData
    layout: ZoneLayout = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.view_area_size, int) or self.view_area_size < 2:
            raise ConfigurationError(f"view_area_size must be an int >= 2, got {self.view_area_size!r}")
        self.currents.validate("currents")
        self.defaults.validate("defaults")
        self.limits.validate("limits")
        if not self.currents.is_in_limits(self.limits):
            raise ConfigurationError(f"currents {self.currents} outside limits {self.limits}")
        if not self.defaults.is_in_limits(self.limits):
            raise ConfigurationError(f"defaults {self.defaults} outside limits {self.limits}")
        layout = build_layout(
            self.view_area_size,
            min_log=self.currents.min_log,
            max_log=self.currents.max_log,
            min_value=self.currents.min_value,
            max_value=self.currents.max_value,
        )
        object.__setattr__(self, "layout", layout)

    @classmethod
    def from_view_area_size(cls, view_area_size: int) -> AxisConfig:
        currents = AxisData(
            min_log=DEFAULT_MIN_LOG,
            max_log=DEFAULT_MAX_LOG,
            min_value=-math.inf,
            max_value=math.inf,
        )
        limits = AxisData(
            min_log=-ABS_LOG_LIMIT,
            max_log=ABS_LOG_LIMIT,
            min_value=-math.inf,
            max_value=math.inf,
        )
        return cls(view_area_size=view_area_size, currents=currents, defaults=currents, limits=limits)

    @property
    def max_view_coord(self) -> int:
        return self.view_area_size - 1

    @property
    def min_coord(self) -> float:
        return self.layout.min_coord

    @property
    def max_coord(self) -> float:
        return self.layout.max_coord

    @property
    def min_value(self) -> float:
        return self.currents.min_value

    @property
    def max_value(self) -> float:
        return self.currents.max_value

    @property
    def min_log(self) -> int:
        return self.currents.min_log

    @property
    def max_log(self) -> int:
        return self.currents.max_log

    @property
    def min_value_limit(self) -> float:
        return self.limits.min_value

    @property
    def max_value_limit(self) -> float:
        return self.limits.max_value

    def value_to_coord(self, value: float) -> float:
        if math.isnan(value):
            raise ValueError("value must not be NaN")
        return value_to_coord(self.layout, value)

    def coord_to_value(self, coord: float) -> float:
        return coord_to_value(self.layout, coord)

    def coord_to_view_coord(self, coord: float) -> int | None:
        return coord_to_view_coord(coord, self.max_view_coord)

    def value_to_view_coord(self, value: float) -> int | None:
        """Pixel coordinate of ``value``, or ``None`` for NaN and off-screen values."""
        if math.isnan(value):
            return None
        return coord_to_view_coord(value_to_coord(self.layout, value), self.max_view_coord)


def try_create(
    view_area_size: int,
    currents: AxisData,
    defaults: AxisData,
    limits: AxisData,
) -> AxisConfig | ConfigurationError:
    """Build an AxisConfig, returning the violation instead of raising it."""
    try:
        return AxisConfig(view_area_size=view_area_size, currents=currents, defaults=defaults, limits=limits)
    except ConfigurationError as exc:
        return exc

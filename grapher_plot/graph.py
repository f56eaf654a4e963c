from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Callable, Literal

import numpy as np

from grapher_core.axis import AxisConfig
from grapher_plot.errors import PlotDataError
from grapher_plot.raster.canvas import RGBA


LOGGER = logging.getLogger(__name__)

GraphKind = Literal["default", "integer"]
GRAPH_KINDS: tuple[str, ...] = ("default", "integer")
DEFAULT_GRAPH_COLOR: RGBA = (255, 255, 255, 255)


def evaluate(calculate: Callable[[float], float], value: float) -> float:
    """Evaluate ``calculate`` at ``value``; any failure is an undefined sample (NaN)."""
    try:
        return float(calculate(value))
    except Exception as exc:
        LOGGER.debug("sample undefined at %r: %s", value, exc)
        return math.nan


@dataclass(frozen=True)
class InputGrid:
    """Domain value of every X view coordinate for one X axis state."""

    version: int
    values: np.ndarray

    @classmethod
    def from_axis(cls, axis_x: AxisConfig, *, version: int) -> InputGrid:
        values = np.empty(axis_x.view_area_size, dtype=np.float64)
        for x in range(axis_x.view_area_size):
            value = axis_x.coord_to_value(float(x))
            values[x] = min(max(value, axis_x.min_value_limit), axis_x.max_value_limit)
        return cls(version=version, values=values)


@dataclass(frozen=True)
class GraphSamples:
    view_x: np.ndarray
    outs: np.ndarray


@dataclass
class Graph:
    calculate: Callable[[float], float]
    kind: GraphKind = "default"
    color: RGBA = DEFAULT_GRAPH_COLOR

    _cache_version: int | None = field(default=None, init=False, repr=False)
    _cached: GraphSamples | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if not callable(self.calculate):
            raise PlotDataError("graph function must be callable")
        if self.kind not in GRAPH_KINDS:
            raise PlotDataError(f"unsupported graph kind: {self.kind!r}")
        if len(self.color) != 4:
            raise PlotDataError("graph color must be an RGBA tuple")

    def samples(self, grid: InputGrid) -> GraphSamples:
        """Outputs for the grid, recomputed only when the grid version changes.

        Integer graphs sample ``floor(x)`` once per distinct integer input.
        """
        if self._cached is not None and self._cache_version == grid.version:
            return self._cached

        view_x: list[int] = []
        outs: list[float] = []
        prev_in = math.nan
        for x, value in enumerate(grid.values.tolist()):
            if self.kind == "integer":
                value = math.floor(value) if math.isfinite(value) else value
                if value == prev_in:
                    continue
                prev_in = value
            view_x.append(x)
            outs.append(evaluate(self.calculate, value))

        self._cached = GraphSamples(
            view_x=np.asarray(view_x, dtype=np.int32),
            outs=np.asarray(outs, dtype=np.float64),
        )
        self._cache_version = grid.version
        return self._cached

from __future__ import annotations

from dataclasses import dataclass
import math

from grapher_core.axis import AxisConfig


DEFAULT_MIN_COORD_STEP_FOR_DEEP = 50.0
# Largest decade exponent representable as a finite double.
MAX_DECADE_EXP = 308
MIN_HYPERBOLIC_ANCHOR_GAP = 1.0


@dataclass(frozen=True)
class Ruler:
    value: float
    coord: float
    view_coord: int | None
    weight: float
    level: int

    @property
    def is_visible(self) -> bool:
        return self.view_coord is not None


@dataclass(frozen=True)
class RulerSettings:
    # Pixel span an interval needs before it is subdivided one level deeper.
    min_coord_step_for_deep: float = DEFAULT_MIN_COORD_STEP_FOR_DEEP

    def __post_init__(self) -> None:
        if not self.min_coord_step_for_deep > 0:
            raise ValueError("min_coord_step_for_deep must be > 0")


def _weight(coord: float, parent_coord: float, max_view_coord: int) -> float:
    return min(abs(coord - parent_coord) / max_view_coord, 1.0)


def _make_ruler(axis: AxisConfig, value: float, weight: float, level: int) -> Ruler:
    coord = axis.value_to_coord(value)
    return Ruler(
        value=value,
        coord=coord,
        view_coord=axis.coord_to_view_coord(coord),
        weight=weight,
        level=level,
    )


def _fold_window(min_value: float, max_value: float) -> tuple[float, float, float, bool]:
    """Map the visible window onto the positive half-axis.

    Returns ``(lo, hi, sign, mirror)``: rulers are generated for ``[lo, hi]``,
    multiplied by ``sign`` and, when ``mirror`` is set, reflected about zero.
    """
    if min_value < 0.0 < max_value:
        return (0.0, max(-min_value, max_value), 1.0, True)
    if max_value <= 0.0:
        return (abs(max_value), -min_value, -1.0, False)
    return (min_value, max_value, 1.0, False)


def _anchor_values(axis: AxisConfig, lo: float, hi: float) -> list[float]:
    """Level-0 values on the positive half-axis whose segments can reach ``[lo, hi]``."""
    layout = axis.layout
    max_linear_value = layout.max_linear_value
    anchors: list[float] = []

    if lo <= max_linear_value:
        anchors.append(0.0)
        k_first = axis.min_log
    else:
        k_first = max(axis.min_log, math.floor(math.log10(lo)))

    if math.isinf(hi):
        k_last = MAX_DECADE_EXP
    else:
        k_last = min(MAX_DECADE_EXP, math.ceil(math.log10(hi)))
    if anchors:
        k_last = max(k_last, axis.min_log)

    prev_coord: float | None = None
    for k in range(k_first, k_last + 1):
        value = 10.0**k
        coord = axis.value_to_coord(value)
        if value > layout.max_log_value and prev_coord is not None and coord - prev_coord < MIN_HYPERBOLIC_ANCHOR_GAP:
            break
        anchors.append(value)
        prev_coord = coord

    if math.isinf(hi):
        anchors.append(math.inf)
    return anchors


def _anchor_parent(axis: AxisConfig, value: float) -> float:
    if value == 0.0:
        return -math.inf
    if math.isinf(value) or value <= axis.layout.max_linear_value:
        return 0.0
    return value / 10.0


def _positive_rulers(
    axis: AxisConfig,
    lo: float,
    hi: float,
    settings: RulerSettings,
) -> list[tuple[float, float, int]]:
    """Generate ``(value, weight, level)`` triples for ``[lo, hi]`` on the positive half-axis.

    Anchors are emitted first; the segments between them are refined through
    an explicit stack of ``(from, to, step, level)`` intervals. An interval is
    refined only while it reaches the window and spans at least
    ``settings.min_coord_step_for_deep`` pixels.
    """
    max_view_coord = axis.max_view_coord
    threshold = settings.min_coord_step_for_deep
    out: list[tuple[float, float, int]] = []

    anchors = _anchor_values(axis, lo, hi)
    coords = [axis.value_to_coord(value) for value in anchors]
    stack: list[tuple[float, float, float, float, float, int]] = []
    for i, value in enumerate(anchors):
        parent_coord = axis.value_to_coord(_anchor_parent(axis, value))
        out.append((value, _weight(coords[i], parent_coord, max_view_coord), 0))
        if i + 1 < len(anchors) and not math.isinf(anchors[i + 1]):
            step = axis.layout.max_linear_value / 10.0 if value == 0.0 else value
            stack.append((value, coords[i], anchors[i + 1], coords[i + 1], step, 1))

    while stack:
        start, start_coord, end, end_coord, step, level = stack.pop()
        if start > hi or end < lo:
            continue
        if end_coord - start_coord < threshold:
            continue
        first = start + step
        if not first > start:
            continue
        first_coord = axis.value_to_coord(first)
        weight = _weight(first_coord, start_coord, max_view_coord)
        if weight <= 0.0:
            continue

        prev_value, prev_coord = start, start_coord
        for n in range(1, 11):
            value = start + n * step
            if value >= end - 0.5 * step:
                break
            coord = first_coord if n == 1 else axis.value_to_coord(value)
            out.append((value, weight, level))
            stack.append((prev_value, prev_coord, value, coord, step / 10.0, level + 1))
            prev_value, prev_coord = value, coord
        stack.append((prev_value, prev_coord, end, end_coord, step / 10.0, level + 1))
    return out


def get_visible_rulers(axis: AxisConfig, settings: RulerSettings | None = None) -> list[Ruler]:
    """Gridlines to draw for ``axis`` this frame, sorted by view coordinate.

    Both window edges are always present as weight-1 border rulers. When
    several rulers round to the same pixel only the heaviest one is kept.
    """
    settings = settings or RulerSettings()
    lo, hi, sign, mirror = _fold_window(axis.min_value, axis.max_value)

    rulers = [
        Ruler(value=axis.min_value, coord=0.0, view_coord=0, weight=1.0, level=0),
        Ruler(
            value=axis.max_value,
            coord=float(axis.max_view_coord),
            view_coord=axis.max_view_coord,
            weight=1.0,
            level=0,
        ),
    ]
    for value, weight, level in _positive_rulers(axis, lo, hi, settings):
        rulers.append(_make_ruler(axis, sign * value if value else 0.0, weight, level))
        if mirror and value != 0.0:
            rulers.append(_make_ruler(axis, -value, weight, level))

    by_view_coord: dict[int, Ruler] = {}
    for ruler in rulers:
        if ruler.view_coord is None:
            continue
        kept = by_view_coord.get(ruler.view_coord)
        if kept is None or (ruler.weight, -ruler.level) > (kept.weight, -kept.level):
            by_view_coord[ruler.view_coord] = ruler
    return [by_view_coord[view_coord] for view_coord in sorted(by_view_coord)]

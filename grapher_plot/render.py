from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from pathlib import Path

import numpy as np
from PIL import Image

from grapher_core.rulers import Ruler, RulerSettings, get_visible_rulers
from grapher_plot.errors import PlotDataError
from grapher_plot.graph import Graph
from grapher_plot.navigator import Navigator
from grapher_plot.raster import (
    RGBA,
    draw_dotted_hline,
    draw_dotted_segment,
    draw_dotted_vline,
    draw_pixel,
    draw_text,
    new_canvas,
    text_size,
)


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderStyle:
    background: RGBA = (0, 0, 0, 255)
    ruler_gray_min: int = 24
    ruler_gray_max: int = 64
    label_gray: int = 128
    # Rulers at least this heavy get a value label.
    label_weight: float = 0.05
    label_font_px: float = 10.0
    label_gap: int = 4
    liga_bright: float = 0.4
    # Consecutive points closer than this (in both directions) are not joined.
    liga_min_gap: int = 4

    def __post_init__(self) -> None:
        if not 0 <= self.ruler_gray_min <= self.ruler_gray_max <= 255:
            raise PlotDataError("ruler gray levels must satisfy 0 <= min <= max <= 255")
        if not 0.0 <= self.liga_bright <= 1.0:
            raise PlotDataError("liga_bright must be within [0, 1]")


def ruler_color(weight: float, style: RenderStyle) -> RGBA:
    intensity = math.sqrt(min(max(weight, 0.0), 1.0))
    gray = int(round(style.ruler_gray_min + (style.ruler_gray_max - style.ruler_gray_min) * intensity))
    return (gray, gray, gray, 255)


def format_ruler_value(value: float) -> str:
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0:
        return "0"
    return f"{value:.6g}"


class FrameRenderer:
    """Draws the rulers and graphs of a Navigator into an RGBA numpy frame."""

    def __init__(self, style: RenderStyle | None = None, ruler_settings: RulerSettings | None = None) -> None:
        self.style = style or RenderStyle()
        self.ruler_settings = ruler_settings or RulerSettings()

    def render(self, navigator: Navigator) -> np.ndarray:
        canvas = new_canvas(navigator.width, navigator.height, self.style.background)
        x_rulers = get_visible_rulers(navigator.axis_x, self.ruler_settings)
        y_rulers = get_visible_rulers(navigator.axis_y, self.ruler_settings)
        self._render_x_rulers(canvas, navigator, x_rulers)
        self._render_y_rulers(canvas, navigator, y_rulers)
        for graph in navigator.graphs:
            self._render_graph(canvas, navigator, graph)
        LOGGER.debug(
            "rendered %dx%d frame: %d x rulers, %d y rulers, %d graphs",
            navigator.width,
            navigator.height,
            len(x_rulers),
            len(y_rulers),
            len(navigator.graphs),
        )
        return canvas

    def _label_color(self) -> RGBA:
        gray = self.style.label_gray
        return (gray, gray, gray, 255)

    def _is_labelled(self, ruler: Ruler) -> bool:
        return ruler.weight >= self.style.label_weight and math.isfinite(ruler.value)

    def _render_x_rulers(self, canvas: np.ndarray, navigator: Navigator, rulers: list[Ruler]) -> None:
        top = navigator.padding
        bottom = navigator.height - navigator.padding - 1
        label_right = -math.inf
        for ruler in rulers:
            assert ruler.view_coord is not None
            x = navigator.view_to_native_x(ruler.view_coord)
            draw_dotted_vline(canvas, x, top, bottom, ruler_color(ruler.weight, self.style))
            if not self._is_labelled(ruler):
                continue
            text = format_ruler_value(ruler.value)
            w, h = text_size(text, font_size_px=self.style.label_font_px)
            if x + 2 < label_right + self.style.label_gap or x + 2 + w > navigator.width:
                continue
            draw_text(canvas, x + 2, bottom - h - 2, text, self._label_color(), font_size_px=self.style.label_font_px)
            label_right = x + 2 + w

    def _render_y_rulers(self, canvas: np.ndarray, navigator: Navigator, rulers: list[Ruler]) -> None:
        left = navigator.padding
        right = navigator.width - navigator.padding - 1
        label_top = math.inf
        for ruler in rulers:
            assert ruler.view_coord is not None
            y = navigator.view_to_native_y(ruler.view_coord)
            draw_dotted_hline(canvas, left, right, y, ruler_color(ruler.weight, self.style))
            if not self._is_labelled(ruler):
                continue
            text = format_ruler_value(ruler.value)
            _, h = text_size(text, font_size_px=self.style.label_font_px)
            # Rulers come bottom-up, so labels stack upwards.
            if y > label_top - self.style.label_gap or y - h - 2 < 0:
                continue
            draw_text(canvas, left + 2, y - h - 2, text, self._label_color(), font_size_px=self.style.label_font_px)
            label_top = y - h - 2

    def _render_graph(self, canvas: np.ndarray, navigator: Navigator, graph: Graph) -> None:
        samples = graph.samples(navigator.grid)
        r, g, b, a = graph.color
        bright = self.style.liga_bright
        liga_color = (int(r * bright), int(g * bright), int(b * bright), a)
        min_gap = self.style.liga_min_gap

        prev: tuple[int, int] | None = None
        for view_x, out in zip(samples.view_x.tolist(), samples.outs.tolist()):
            view_y = navigator.axis_y.value_to_view_coord(out)
            if view_y is None:
                prev = None
                continue
            x = navigator.view_to_native_x(view_x)
            y = navigator.view_to_native_y(view_y)
            draw_pixel(canvas, x, y, graph.color)
            if prev is not None and (abs(x - prev[0]) >= min_gap or abs(y - prev[1]) >= min_gap):
                draw_dotted_segment(canvas, prev[0], prev[1], x, y, liga_color)
            prev = (x, y)


def save_png(frame: np.ndarray, path: Path) -> Path:
    if frame.dtype != np.uint8 or frame.ndim != 3 or frame.shape[2] != 4:
        raise PlotDataError("frame must be a uint8 array of shape (H, W, 4)")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(frame)).save(path)
    return path

from __future__ import annotations

from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from grapher_plot.raster.canvas import RGBA


DEFAULT_FONT_SIZE_PX = 10.0
FONT_CANDIDATES = ("DejaVuSans.ttf", "Tahoma.ttf", "Arial.ttf")


def draw_text(dst: np.ndarray, x: int, y: int, text: str, color: RGBA, *, font_size_px: float = DEFAULT_FONT_SIZE_PX) -> None:
    if not text:
        return
    mask = _render_mask(text, _load_font(font_size_px))
    h, w = mask.shape
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    cov = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    alpha = (color[3] / 255.0) * cov[:, :, None]
    patch = dst[y0:y1, x0:x1]
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out_rgb = src_rgb * alpha + patch[:, :, :3].astype(np.float32) * (1.0 - alpha)
    patch[:, :, :3] = np.clip(out_rgb, 0, 255).astype(np.uint8)
    patch[:, :, 3] = 255


def text_size(text: str, *, font_size_px: float = DEFAULT_FONT_SIZE_PX) -> tuple[int, int]:
    if not text:
        return (0, 0)
    mask = _render_mask(text, _load_font(font_size_px))
    return (mask.shape[1], mask.shape[0])


@lru_cache(maxsize=512)
def _render_mask(text: str, font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width, height), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=16)
def _load_font(font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(font_size_px)))
    for name in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size=size)
        except OSError:
            continue
    return ImageFont.load_default()

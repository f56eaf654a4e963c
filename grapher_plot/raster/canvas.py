from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    a = color[3] / 255.0
    inv = 1.0 - a
    current = dst[y, x, :3].astype(np.float32)
    dst[y, x, 0:3] = (np.asarray(color[0:3], dtype=np.float32) * a + current * inv).astype(np.uint8)
    dst[y, x, 3] = 255


def _blend_segment(segment: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    inv = 1.0 - a
    segment[..., :3] = (np.asarray(color[0:3], dtype=np.float32) * a + segment[..., :3].astype(np.float32) * inv).astype(np.uint8)
    segment[..., 3] = 255


def draw_dotted_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    """Every other pixel of row ``y``; the dot phase follows the row parity."""
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    if (xa - y) % 2:
        xa += 1
    _blend_segment(dst[y, xa : xb + 1 : 2], color)


def draw_dotted_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    """Every other pixel of column ``x``; same dot lattice as ``draw_dotted_hline``."""
    if x < 0 or x >= dst.shape[1]:
        return
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if ya > yb:
        return
    if (ya - x) % 2:
        ya += 1
    _blend_segment(dst[ya : yb + 1 : 2, x], color)


def draw_dotted_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Every second pixel strictly between two points, excluding the ends."""
    n = max(abs(x1 - x0), abs(y1 - y0))
    for i in range(2, n - 1, 2):
        x = x0 + int(round((x1 - x0) * i / n))
        y = y0 + int(round((y1 - y0) * i / n))
        draw_pixel(dst, x, y, color)

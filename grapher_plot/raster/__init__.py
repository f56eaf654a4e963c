from .canvas import RGBA, draw_dotted_hline, draw_dotted_segment, draw_dotted_vline, draw_pixel, new_canvas
from .text import draw_text, text_size

__all__ = [
    "RGBA",
    "draw_dotted_hline",
    "draw_dotted_segment",
    "draw_dotted_vline",
    "draw_pixel",
    "draw_text",
    "new_canvas",
    "text_size",
]

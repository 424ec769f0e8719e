from .canvas import blend_mask, clear_rect, fill_rect, new_canvas, with_alpha
from .draw_lines import clip_segment, draw_polyline, draw_polylines
from .draw_markers import draw_disc, draw_ring
from .draw_text import draw_text, text_size

__all__ = [
    "blend_mask",
    "clear_rect",
    "clip_segment",
    "draw_disc",
    "draw_polyline",
    "draw_polylines",
    "draw_ring",
    "draw_text",
    "fill_rect",
    "new_canvas",
    "text_size",
    "with_alpha",
]

from .canvas import blend_region, fill_rect, new_canvas
from .draw_lines import stroke_subpaths
from .draw_text import draw_text, text_size
from .surface import RasterSurface, decode_png, encode_png

__all__ = [
    "RasterSurface",
    "blend_region",
    "decode_png",
    "draw_text",
    "encode_png",
    "fill_rect",
    "new_canvas",
    "stroke_subpaths",
    "text_size",
]

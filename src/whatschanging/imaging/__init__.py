"""Image decoding and rendering around the comparison core."""

from .loader import fit_size, load_image
from .renderer import render_side_by_side, save_canvas

__all__ = ["load_image", "fit_size", "render_side_by_side", "save_canvas"]

"""whatschanging: show which pixels changed between two images.

Two decoded images of the same size are compared pixel by pixel; the result
is an RGB image that is black where the colours match and green where they
differ.

Example:
    from whatschanging import compare, load_image

    diff = compare(load_image("before.png"), load_image("after.png"))
    print(diff.different_pixels)
"""

__version__ = "0.2.0"

from .diff import PixelDiffer, compare
from .exceptions import (
    ChannelLayoutMismatch,
    DimensionMismatch,
    ImageLoadError,
    InvalidImageException,
    RowstrideMismatch,
    WhatschangingException,
)
from .imaging import load_image, render_side_by_side, save_canvas
from .model import DiffImage, Image
from .session import ComparisonResult, ComparisonSession

__all__ = [
    "__version__",
    "Image",
    "DiffImage",
    "PixelDiffer",
    "compare",
    "load_image",
    "render_side_by_side",
    "save_canvas",
    "ComparisonSession",
    "ComparisonResult",
    "WhatschangingException",
    "DimensionMismatch",
    "ChannelLayoutMismatch",
    "RowstrideMismatch",
    "InvalidImageException",
    "ImageLoadError",
]

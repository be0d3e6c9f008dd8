"""Pixel comparison."""

from .pixel_differ import PixelDiffer, compare

__all__ = ["PixelDiffer", "compare"]

"""Data model for decoded images and comparison results."""

from .image import (
    DIFFERENT_COLOR,
    SAME_COLOR,
    DiffImage,
    Image,
    aligned_rowstride,
)

__all__ = ["Image", "DiffImage", "aligned_rowstride", "SAME_COLOR", "DIFFERENT_COLOR"]

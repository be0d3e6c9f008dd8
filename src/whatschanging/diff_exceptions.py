"""Image comparison exceptions.

This module contains exceptions for invalid pixel buffers, failed image
decoding, and inputs that cannot be compared with each other.
"""

from .base_exceptions import WhatschangingException


class DiffException(WhatschangingException):
    """Base exception for image loading and comparison errors."""

    pass


class DimensionMismatch(DiffException):
    """Raised when two images cannot be compared pixel for pixel."""

    def __init__(
        self,
        first: tuple[int, int],
        second: tuple[int, int],
        reason: str | None = None,
        error_code: str = "DIMENSION_MISMATCH",
        **kwargs,
    ) -> None:
        """Initialize with the (width, height) of both images.

        Images that share a size are described by ``reason`` alone.
        """
        if first == second and reason:
            message = (
                f"Images of the same size ({first[0]}x{first[1]}) cannot be compared: {reason}"
            )
        else:
            message = (
                f"Images of different sizes cannot be compared: "
                f"{first[0]}x{first[1]} vs {second[0]}x{second[1]}"
            )
            if reason:
                message += f" ({reason})"

        super().__init__(
            message,
            error_code=error_code,
            context={"first": first, "second": second, "reason": reason, **kwargs},
        )


class ChannelLayoutMismatch(DimensionMismatch):
    """Raised when both images share a size but not a channel count."""

    def __init__(
        self, size: tuple[int, int], first_channels: int, second_channels: int, **kwargs
    ) -> None:
        """Initialize with the channel count of both images."""
        super().__init__(
            size,
            size,
            reason=f"{first_channels} channels vs {second_channels} channels",
            error_code="CHANNEL_LAYOUT_MISMATCH",
            first_channels=first_channels,
            second_channels=second_channels,
            **kwargs,
        )


class RowstrideMismatch(DimensionMismatch):
    """Raised when both images share a size but not a row stride."""

    def __init__(
        self, size: tuple[int, int], first_rowstride: int, second_rowstride: int, **kwargs
    ) -> None:
        """Initialize with the row stride of both images."""
        super().__init__(
            size,
            size,
            reason=f"rowstride {first_rowstride} vs {second_rowstride}",
            error_code="ROWSTRIDE_MISMATCH",
            first_rowstride=first_rowstride,
            second_rowstride=second_rowstride,
            **kwargs,
        )


class InvalidImageException(DiffException):
    """Raised when a pixel buffer does not describe a valid image."""

    def __init__(self, reason: str, name: str | None = None, **kwargs) -> None:
        """Initialize with image details."""
        message = "Invalid image"
        if name:
            message += f" '{name}'"
        message += f": {reason}"

        super().__init__(
            message,
            error_code="INVALID_IMAGE",
            context={"name": name, "reason": reason, **kwargs},
        )


class ImageLoadError(DiffException):
    """Raised when an image file cannot be read or decoded."""

    def __init__(self, image_path: str, reason: str, **kwargs) -> None:
        """Initialize with file details."""
        super().__init__(
            f"Failed to load image '{image_path}': {reason}",
            error_code="IMAGE_LOAD_FAILED",
            context={"image_path": image_path, "reason": reason, **kwargs},
        )

"""Pixel-by-pixel comparison of two decoded images."""

import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from ..config_exceptions import InvalidConfigurationException
from ..diff_exceptions import ChannelLayoutMismatch, DimensionMismatch, RowstrideMismatch
from ..logging import get_logger
from ..model.image import DIFFERENT_COLOR, RGB_CHANNELS, DiffImage, Image

logger = get_logger(__name__)


class PixelDiffer:
    """Classify every pixel of two equally sized images as same or different.

    Only the red, green and blue samples are compared, exactly and without
    tolerance; an alpha channel is never read. Each image is addressed with its
    own row stride and channel count.

    With ``workers > 1`` the rows are split into contiguous bands compared on a
    thread pool. Every band writes only its own rows of the output, and all
    bands are joined before the result is returned, so the output does not
    depend on the worker count.
    """

    def __init__(self, workers: int = 1) -> None:
        if workers < 1:
            raise InvalidConfigurationException("workers", f"must be at least 1, got {workers}")
        self.workers = workers

    def compare(self, image1: Image, image2: Image) -> DiffImage:
        """Compare two images.

        Args:
            image1: First image
            image2: Second image

        Returns:
            A new DiffImage, black where the pixels match and green elsewhere

        Raises:
            DimensionMismatch: If the images cannot be compared pixel for pixel
        """
        self.validate(image1, image2)

        start = time.perf_counter()
        first = image1.rgb()
        second = image2.rgb()
        out = np.zeros((image1.height, image1.width, RGB_CHANNELS), dtype=np.uint8)

        bands = self._bands(image1.height)
        if len(bands) == 1:
            _compare_rows(first, second, out, *bands[0])
        else:
            with ThreadPoolExecutor(max_workers=len(bands)) as executor:
                futures = [
                    executor.submit(_compare_rows, first, second, out, lo, hi)
                    for lo, hi in bands
                ]
                for future in futures:
                    future.result()

        diff = DiffImage(width=image1.width, height=image1.height, pixels=out.tobytes())
        duration = time.perf_counter() - start

        logger.info(
            "pixel_diff_completed",
            first=image1.name,
            second=image2.name,
            width=image1.width,
            height=image1.height,
            different_pixels=diff.different_pixels,
            workers=len(bands),
            duration=duration,
        )
        return diff

    @staticmethod
    def validate(image1: Image, image2: Image) -> None:
        """Check that two images can be compared.

        Raises:
            DimensionMismatch: Sizes or total buffer lengths differ
            ChannelLayoutMismatch: Channel counts differ
            RowstrideMismatch: Row strides differ
        """
        error: DimensionMismatch | None = None
        if image1.size != image2.size:
            error = DimensionMismatch(image1.size, image2.size)
        elif image1.byte_length != image2.byte_length:
            error = DimensionMismatch(
                image1.size,
                image2.size,
                reason=f"{image1.byte_length} bytes vs {image2.byte_length} bytes",
            )
        elif image1.channels != image2.channels:
            error = ChannelLayoutMismatch(image1.size, image1.channels, image2.channels)
        elif image1.rowstride != image2.rowstride:
            error = RowstrideMismatch(image1.size, image1.rowstride, image2.rowstride)

        if error is not None:
            logger.warning(
                "pixel_diff_rejected",
                first=image1.name,
                second=image2.name,
                error_code=error.error_code,
                reason=error.message,
            )
            raise error

    def _bands(self, height: int) -> list[tuple[int, int]]:
        """Split ``height`` rows into at most ``workers`` contiguous ranges."""
        count = min(self.workers, height)
        edges = np.linspace(0, height, count + 1).astype(int)
        return [(int(lo), int(hi)) for lo, hi in zip(edges[:-1], edges[1:])]


def _compare_rows(
    first: np.ndarray, second: np.ndarray, out: np.ndarray, start: int, stop: int
) -> None:
    different = np.any(first[start:stop] != second[start:stop], axis=2)
    out[start:stop][different] = DIFFERENT_COLOR


def compare(image1: Image, image2: Image, workers: int = 1) -> DiffImage:
    """Compare two images pixel by pixel.

    Convenience wrapper around :class:`PixelDiffer`.
    """
    return PixelDiffer(workers=workers).compare(image1, image2)

"""Image model - decoded pixel buffers and comparison results.

``Image`` is the decoded form of a source file; ``DiffImage`` is the RGB
buffer produced by comparing two of them.
"""

import logging
from dataclasses import dataclass, field

import numpy as np
from PIL import Image as PILImage

from ..diff_exceptions import InvalidImageException

logger = logging.getLogger(__name__)

RGB_CHANNELS = 3
RGBA_CHANNELS = 4
BITS_PER_SAMPLE = 8

SAME_COLOR = (0, 0, 0)
DIFFERENT_COLOR = (0, 255, 0)


def aligned_rowstride(width: int, channels: int, alignment: int = 4) -> int:
    """Return the row stride of a ``width`` pixel row padded to ``alignment`` bytes."""
    row = width * channels
    return (row + alignment - 1) // alignment * alignment


@dataclass(frozen=True)
class Image:
    """A decoded raster image.

    The sample for column ``x``, row ``y`` and channel ``c`` lives at byte
    offset ``y * rowstride + x * channels + c`` of ``pixels``. Rows may be
    padded, so ``rowstride`` can exceed ``width * channels``.
    """

    width: int
    height: int
    channels: int
    rowstride: int
    pixels: bytes = field(repr=False)
    name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.pixels, bytes):
            object.__setattr__(self, "pixels", bytes(self.pixels))

        if self.width <= 0 or self.height <= 0:
            raise InvalidImageException(
                f"size must be positive, got {self.width}x{self.height}", name=self.name
            )
        if self.channels not in (RGB_CHANNELS, RGBA_CHANNELS):
            raise InvalidImageException(
                f"expected 3 or 4 channels, got {self.channels}", name=self.name
            )
        if self.rowstride < self.width * self.channels:
            raise InvalidImageException(
                f"rowstride {self.rowstride} is shorter than a row of "
                f"{self.width * self.channels} bytes",
                name=self.name,
            )
        if len(self.pixels) < self.height * self.rowstride:
            raise InvalidImageException(
                f"buffer holds {len(self.pixels)} bytes, "
                f"{self.height * self.rowstride} required",
                name=self.name,
            )

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def byte_length(self) -> int:
        """Total length of the underlying buffer, padding included."""
        return len(self.pixels)

    @property
    def has_alpha(self) -> bool:
        return self.channels == RGBA_CHANNELS

    def pixel(self, x: int, y: int) -> tuple[int, int, int]:
        """Return the (R, G, B) sample at column ``x``, row ``y``.

        Raises:
            IndexError: If the coordinates fall outside the image
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        offset = y * self.rowstride + x * self.channels
        r, g, b = self.pixels[offset : offset + RGB_CHANNELS]
        return r, g, b

    def samples(self) -> np.ndarray:
        """Return a read-only (H, W, channels) view of the buffer, padding excluded."""
        rows = np.frombuffer(self.pixels, dtype=np.uint8, count=self.height * self.rowstride)
        rows = rows.reshape(self.height, self.rowstride)[:, : self.width * self.channels]
        return rows.reshape(self.height, self.width, self.channels)

    def rgb(self) -> np.ndarray:
        """Return the (H, W, 3) colour samples, alpha dropped."""
        return self.samples()[:, :, :RGB_CHANNELS]

    @classmethod
    def from_array(
        cls, array: np.ndarray, name: str | None = None, alignment: int = 1
    ) -> "Image":
        """Create an Image from an (H, W, 3) or (H, W, 4) uint8 array.

        Args:
            array: Pixel samples in RGB or RGBA order
            name: Optional name
            alignment: Row alignment in bytes; rows are zero padded up to it

        Returns:
            Image instance
        """
        if array.ndim != 3 or array.dtype != np.uint8:
            raise InvalidImageException(
                f"expected an (H, W, C) uint8 array, got shape {array.shape} "
                f"dtype {array.dtype}",
                name=name,
            )
        height, width, channels = array.shape
        rowstride = aligned_rowstride(width, channels, alignment)

        padded = np.zeros((height, rowstride), dtype=np.uint8)
        padded[:, : width * channels] = array.reshape(height, width * channels)

        return cls(
            width=width,
            height=height,
            channels=channels,
            rowstride=rowstride,
            pixels=padded.tobytes(),
            name=name,
        )

    @classmethod
    def from_pil(
        cls, pil_image: PILImage.Image, name: str | None = None, alignment: int = 4
    ) -> "Image":
        """Create an Image from a PIL Image.

        Images with transparency become RGBA, everything else RGB.

        Args:
            pil_image: PIL Image object
            name: Optional name
            alignment: Row alignment in bytes

        Returns:
            Image instance
        """
        has_alpha = pil_image.mode in ("RGBA", "LA", "PA") or "transparency" in pil_image.info
        mode = "RGBA" if has_alpha else "RGB"
        if pil_image.mode != mode:
            logger.debug(f"Converting {pil_image.mode} image to {mode}")
            pil_image = pil_image.convert(mode)
        return cls.from_array(np.asarray(pil_image), name=name, alignment=alignment)

    def to_pil(self) -> PILImage.Image:
        """Convert to a PIL Image in RGB or RGBA mode."""
        return PILImage.fromarray(np.ascontiguousarray(self.samples()))


@dataclass(frozen=True)
class DiffImage:
    """Tightly packed RGB buffer encoding per-pixel equality.

    Pixels whose colour matched are black, pixels that differed are green.
    """

    width: int
    height: int
    pixels: bytes = field(repr=False)

    channels = RGB_CHANNELS
    has_alpha = False

    @property
    def rowstride(self) -> int:
        return self.width * ((RGB_CHANNELS * BITS_PER_SAMPLE + 7) // 8)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def array(self) -> np.ndarray:
        """Return the buffer as a read-only (H, W, 3) array."""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(
            self.height, self.width, RGB_CHANNELS
        )

    def mask(self) -> np.ndarray:
        """Return an (H, W) boolean array, True where the images differ."""
        return self.array()[:, :, 1] == DIFFERENT_COLOR[1]

    @property
    def different_pixels(self) -> int:
        return int(np.count_nonzero(self.mask()))

    @property
    def same(self) -> bool:
        return self.different_pixels == 0

    def to_pil(self) -> PILImage.Image:
        return PILImage.frombytes("RGB", self.size, self.pixels)

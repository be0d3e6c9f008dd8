"""Decode image files into pixel buffers.

The loader is the only place that touches the filesystem or an image codec;
comparison works on the decoded :class:`~whatschanging.model.Image` only.
"""

import logging
from pathlib import Path

from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from ..config_exceptions import InvalidConfigurationException
from ..diff_exceptions import ImageLoadError
from ..model.image import Image

logger = logging.getLogger(__name__)

ROW_ALIGNMENT = 4


def fit_size(
    source: tuple[int, int],
    width: int | None = None,
    height: int | None = None,
    preserve_aspect: bool = True,
) -> tuple[int, int]:
    """Compute the decoded size of a ``source`` (width, height) image.

    Args:
        source: Size of the image in the file
        width: Target width, or None to derive it from ``height``
        height: Target height, or None to derive it from ``width``
        preserve_aspect: Fit inside the target box instead of stretching to it

    Returns:
        (width, height) to decode at
    """
    src_w, src_h = source
    if width is None and height is None:
        return src_w, src_h
    if width is None:
        return max(1, round(src_w * height / src_h)), height
    if height is None:
        return width, max(1, round(src_h * width / src_w))
    if not preserve_aspect:
        return width, height

    scale = min(width / src_w, height / src_h)
    return max(1, round(src_w * scale)), max(1, round(src_h * scale))


def load_image(
    path: str | Path,
    width: int | None = None,
    height: int | None = None,
    *,
    preserve_aspect: bool = True,
) -> Image:
    """Load an image file, scaled to fit the requested size.

    Rows of the returned buffer are padded to a multiple of four bytes.

    Args:
        path: Image file
        width: Target width
        height: Target height
        preserve_aspect: Keep the aspect ratio when scaling

    Returns:
        Decoded RGB or RGBA Image

    Raises:
        InvalidConfigurationException: If the decode size is not positive
        ImageLoadError: If the file is missing or cannot be decoded
    """
    path = Path(path)
    if (width is not None and width <= 0) or (height is not None and height <= 0):
        raise InvalidConfigurationException(
            "decode_size", f"must be positive, got {width}x{height}"
        )
    if not path.is_file():
        raise ImageLoadError(str(path), "file not found")

    try:
        with PILImage.open(path) as pil_image:
            pil_image.load()
            size = fit_size(pil_image.size, width, height, preserve_aspect)
            if size != pil_image.size:
                logger.debug(f"Scaling {path.name} from {pil_image.size} to {size}")
                pil_image = pil_image.resize(size, PILImage.Resampling.BILINEAR)
            image = Image.from_pil(pil_image, name=path.stem, alignment=ROW_ALIGNMENT)
    except UnidentifiedImageError as e:
        raise ImageLoadError(str(path), "unrecognized image format") from e
    except OSError as e:
        raise ImageLoadError(str(path), str(e)) from e

    logger.debug(
        f"Loaded {path.name}: {image.width}x{image.height}, "
        f"{image.channels} channels, rowstride {image.rowstride}"
    )
    return image

"""Compose source images and their diff into a single canvas."""

import logging
from pathlib import Path

from PIL import Image as PILImage

from ..model.image import DiffImage, Image

logger = logging.getLogger(__name__)

DEFAULT_GAP = 4
WHITE = (255, 255, 255)


def render_side_by_side(
    image1: Image | None,
    image2: Image | None,
    diff: DiffImage | None = None,
    *,
    pane_offset: int | None = 350,
    gap: int = DEFAULT_GAP,
    background: tuple[int, int, int] = WHITE,
) -> PILImage.Image:
    """Paint the first image, the second image and the diff in three panes.

    Pane ``i`` starts at ``x = i * pane_offset``. Missing panes are left
    blank, so a failed comparison still shows both sources.

    Args:
        image1: Left pane
        image2: Middle pane
        diff: Right pane
        pane_offset: Horizontal distance between panes; None derives it from
            the widest pane plus ``gap``
        gap: Spacing used when ``pane_offset`` is None
        background: Canvas colour, also used under transparent pixels

    Returns:
        RGB canvas
    """
    panes: list[Image | DiffImage | None] = [image1, image2, diff]
    present = [pane for pane in panes if pane is not None]
    if not present:
        raise ValueError("Nothing to render: no image was given")

    if pane_offset is None:
        pane_offset = max(pane.width for pane in present) + gap

    last = max(i for i, pane in enumerate(panes) if pane is not None)
    width = last * pane_offset + panes[last].width
    height = max(pane.height for pane in present)

    canvas = PILImage.new("RGB", (width, height), background)
    for index, pane in enumerate(panes):
        if pane is None:
            continue
        _paint(canvas, pane, (index * pane_offset, 0))

    logger.debug(f"Rendered {width}x{height} canvas with {len(present)} panes")
    return canvas


def _paint(canvas: PILImage.Image, pane: Image | DiffImage, origin: tuple[int, int]) -> None:
    picture = pane.to_pil()
    if pane.has_alpha:
        canvas.paste(picture, origin, mask=picture)
    else:
        canvas.paste(picture, origin)


def save_canvas(canvas: PILImage.Image, path: str | Path) -> Path:
    """Write a rendered canvas as PNG.

    Args:
        canvas: Canvas to save
        path: Destination; parent directories are created

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    canvas.save(path, format="PNG")
    logger.info(f"Saved canvas to {path}")
    return path

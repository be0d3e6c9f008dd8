"""Comparison session - the state behind a two-image comparison view.

The session remembers which file was chosen for each side and turns a
comparison into a :class:`ComparisonResult`. A size mismatch is reported in the
result instead of being raised, so callers can still show both sources.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .diff import PixelDiffer
from .diff_exceptions import DimensionMismatch
from .imaging import load_image
from .logging import LogContext, get_logger
from .model import DiffImage, Image

logger = get_logger(__name__)


@dataclass
class ComparisonResult:
    """Outcome of one comparison run."""

    image1: Image | None = None
    image2: Image | None = None
    diff: DiffImage | None = None
    error: str | None = None
    error_code: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def compared(self) -> bool:
        return self.diff is not None

    def to_dict(self) -> dict[str, Any]:
        """Summarize the result as JSON-safe data."""
        data: dict[str, Any] = {
            "first": _describe(self.image1),
            "second": _describe(self.image2),
            "compared": self.compared,
            "error": self.error,
            "error_code": self.error_code,
        }
        if self.diff is not None:
            total = self.diff.width * self.diff.height
            data["width"] = self.diff.width
            data["height"] = self.diff.height
            data["different_pixels"] = self.diff.different_pixels
            data["total_pixels"] = total
            data["same"] = self.diff.same
        return data


def _describe(image: Image | None) -> dict[str, Any] | None:
    if image is None:
        return None
    return {
        "name": image.name,
        "width": image.width,
        "height": image.height,
        "channels": image.channels,
        "rowstride": image.rowstride,
    }


class ComparisonSession:
    """Holds the two chosen files and the decode parameters.

    Example:
        session = ComparisonSession(346, 382)
        session.choose_first("before.png")
        session.choose_second("after.png")
        result = session.run()
    """

    def __init__(
        self,
        decode_width: int | None = None,
        decode_height: int | None = None,
        *,
        preserve_aspect: bool = True,
        workers: int = 1,
    ) -> None:
        self.decode_width = decode_width
        self.decode_height = decode_height
        self.preserve_aspect = preserve_aspect
        self.differ = PixelDiffer(workers=workers)
        self.first: Path | None = None
        self.second: Path | None = None

    def choose_first(self, path: str | Path | None) -> None:
        self.first = Path(path) if path is not None else None

    def choose_second(self, path: str | Path | None) -> None:
        self.second = Path(path) if path is not None else None

    def _load(self, path: Path | None) -> Image | None:
        if path is None:
            return None
        return load_image(
            path,
            self.decode_width,
            self.decode_height,
            preserve_aspect=self.preserve_aspect,
        )

    def run(self) -> ComparisonResult:
        """Load the chosen files and compare them when both are set.

        Returns:
            ComparisonResult; ``diff`` is None unless both images were chosen
            and compatible, ``error`` carries the mismatch message if not

        Raises:
            ImageLoadError: If a chosen file cannot be decoded
        """
        result = ComparisonResult(image1=self._load(self.first), image2=self._load(self.second))
        if result.image1 is None or result.image2 is None:
            return result

        with LogContext(logger, first=str(self.first), second=str(self.second)) as log:
            try:
                result.diff = self.differ.compare(result.image1, result.image2)
            except DimensionMismatch as e:
                result.error = e.message
                result.error_code = e.error_code
                log.info("comparison_skipped", error_code=e.error_code, reason=e.message)
            else:
                log.info("comparison_finished", different_pixels=result.diff.different_pixels)

        return result

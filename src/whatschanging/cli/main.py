"""whatschanging CLI - Main entry point.

Provides commands for comparing a pair of images and for comparing two
directories of images file by file.

Exit codes:
    0: Success
    1: Differences found (with --fail-on-diff)
    2: Configuration or input error
    3: Images could not be compared (size mismatch)
    4: Runtime error
"""

import sys
import time
from pathlib import Path
from typing import Any

import click
from PIL import Image as PILImage
from pydantic import ValidationError

from .. import __version__
from ..config import WhatschangingSettings, get_settings
from ..diff_exceptions import ImageLoadError
from ..imaging import render_side_by_side, save_canvas
from ..logging import PerformanceLogger, get_logger, setup_logging
from ..session import ComparisonResult, ComparisonSession
from .formatters import FORMATS, format_results, summarize

# Exit codes
EXIT_SUCCESS = 0
EXIT_DIFFERENCES_FOUND = 1
EXIT_CONFIG_ERROR = 2
EXIT_DIMENSION_MISMATCH = 3
EXIT_RUNTIME_ERROR = 4

logger = get_logger(__name__)


def load_settings() -> WhatschangingSettings:
    """Load settings, exiting with a configuration error if they are invalid."""
    try:
        return get_settings()
    except ValidationError as e:
        click.echo(f"Error: Invalid settings: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)


def configure_logging(settings: WhatschangingSettings, verbose: bool) -> None:
    """Configure logging for CLI.

    Args:
        settings: Loaded settings
        verbose: Enable debug logging
    """
    setup_logging(
        level="DEBUG" if verbose or settings.debug_mode else "WARNING",
        log_file=settings.log_file,
        structured=settings.structured_logs,
        colorize=False,
    )


def decode_size(
    settings: WhatschangingSettings, width: int | None, height: int | None
) -> tuple[int | None, int | None]:
    """Pick the decode box. Settings apply only when neither dimension is given."""
    if width is None and height is None:
        return settings.decode_width, settings.decode_height
    return width, height


def render_result(
    result: ComparisonResult, diff_only: bool, pane_offset: int | None
) -> PILImage.Image | None:
    """Render a comparison as the side-by-side canvas, or the diff alone."""
    if diff_only:
        return result.diff.to_pil() if result.diff is not None else None
    return render_side_by_side(
        result.image1, result.image2, result.diff, pane_offset=pane_offset
    )


def exit_code_for(results: list[dict[str, Any]], fail_on_diff: bool) -> int:
    """Pick the process exit code for a list of comparison results."""
    codes = {r.get("error_code") for r in results if r.get("error")}
    if "IMAGE_LOAD_FAILED" in codes:
        return EXIT_CONFIG_ERROR
    if codes:
        return EXIT_DIMENSION_MISMATCH
    if fail_on_diff and any(r.get("compared") and not r.get("same") for r in results):
        return EXIT_DIFFERENCES_FOUND
    return EXIT_SUCCESS


@click.group()
@click.version_option(version=__version__, prog_name="whatschanging")
@click.pass_context
def main(ctx: click.Context) -> None:
    """whatschanging - see which pixels changed between two images.

    Identical pixels are painted black in the diff, changed pixels green.
    """
    ctx.ensure_object(dict)


@main.command()
@click.argument("image1", type=click.Path(exists=True, dir_okay=False))
@click.argument("image2", type=click.Path(exists=True, dir_okay=False))
@click.option("--width", "-W", type=click.IntRange(min=1), help="Decode width")
@click.option("--height", "-H", type=click.IntRange(min=1), help="Decode height")
@click.option("--stretch", is_flag=True, help="Stretch to the decode size instead of fitting")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the rendered PNG here")
@click.option("--diff-only", is_flag=True, help="Render only the diff pane")
@click.option("--pane-offset", type=click.IntRange(min=1), help="Distance between panes")
@click.option("--workers", type=click.IntRange(min=1), help="Worker threads for row bands")
@click.option("--format", "format_type", type=click.Choice(["text", "json"]), default="text")
@click.option("--fail-on-diff", is_flag=True, help="Exit with 1 when any pixel differs")
@click.option("--show", is_flag=True, help="Open the rendered image in the system viewer")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def compare(
    image1: str,
    image2: str,
    width: int | None,
    height: int | None,
    stretch: bool,
    output: str | None,
    diff_only: bool,
    pane_offset: int | None,
    workers: int | None,
    format_type: str,
    fail_on_diff: bool,
    show: bool,
    verbose: bool,
) -> None:
    """Compare two images pixel by pixel.

    IMAGE1, IMAGE2: Paths of the images to compare
    """
    settings = load_settings()
    configure_logging(settings, verbose)

    session = ComparisonSession(
        *decode_size(settings, width, height),
        preserve_aspect=settings.preserve_aspect and not stretch,
        workers=workers or settings.workers,
    )
    session.choose_first(image1)
    session.choose_second(image2)

    try:
        start_time = time.time()
        try:
            result = session.run()
        except ImageLoadError as e:
            click.echo(f"Error: {e.message}", err=True)
            sys.exit(EXIT_CONFIG_ERROR)
        duration = time.time() - start_time

        if result.error:
            click.echo(f"Warning: {result.error}; diff pane omitted", err=True)

        canvas = None
        if output or show:
            canvas = render_result(result, diff_only, pane_offset or settings.pane_offset)
        if output and canvas is None:
            click.echo("Warning: No diff to write, nothing saved", err=True)
        elif output:
            path = save_canvas(canvas, output)
            click.echo(f"Rendered image saved to: {path}", err=True)
        if show and canvas is not None:
            canvas.show()

        record = result.to_dict()
        click.echo(format_results([record], summarize([record], duration), format_type))
        sys.exit(exit_code_for([record], fail_on_diff))

    except Exception as e:
        click.echo(f"Runtime error: {e}", err=True)
        if verbose:
            import traceback

            traceback.print_exc()
        sys.exit(EXIT_RUNTIME_ERROR)


def iter_pairs(dir1: Path, dir2: Path) -> list[tuple[Path, Path]]:
    """Pair up image files that have the same name in both directories."""
    extensions = set(PILImage.registered_extensions())
    pairs = []
    for first in sorted(dir1.iterdir()):
        if not first.is_file() or first.suffix.lower() not in extensions:
            continue
        second = dir2 / first.name
        if second.is_file():
            pairs.append((first, second))
    return pairs


@main.command()
@click.argument("dir1", type=click.Path(exists=True, file_okay=False))
@click.argument("dir2", type=click.Path(exists=True, file_okay=False))
@click.option("--width", "-W", type=click.IntRange(min=1), help="Decode width")
@click.option("--height", "-H", type=click.IntRange(min=1), help="Decode height")
@click.option("--output-dir", "-o", type=click.Path(file_okay=False), help="Directory for renders")
@click.option("--workers", type=click.IntRange(min=1), help="Worker threads for row bands")
@click.option("--format", "format_type", type=click.Choice(FORMATS), default="text")
@click.option("--fail-on-diff", is_flag=True, help="Exit with 1 when any pixel differs")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def batch(
    dir1: str,
    dir2: str,
    width: int | None,
    height: int | None,
    output_dir: str | None,
    workers: int | None,
    format_type: str,
    fail_on_diff: bool,
    verbose: bool,
) -> None:
    """Compare images with the same file name in two directories.

    DIR1, DIR2: Directories to compare
    """
    settings = load_settings()
    configure_logging(settings, verbose)

    pairs = iter_pairs(Path(dir1), Path(dir2))
    if not pairs:
        click.echo("Error: No image file names are shared by both directories", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    session = ComparisonSession(
        *decode_size(settings, width, height),
        preserve_aspect=settings.preserve_aspect,
        workers=workers or settings.workers,
    )

    try:
        start_time = time.time()
        perf = PerformanceLogger(logger)
        records: list[dict[str, Any]] = []
        for first, second in pairs:
            pair_start = time.perf_counter()
            session.choose_first(first)
            session.choose_second(second)
            try:
                result = session.run()
            except ImageLoadError as e:
                records.append(
                    {
                        "pair": first.name,
                        "compared": False,
                        "error": e.message,
                        "error_code": e.error_code,
                    }
                )
                continue

            record = {"pair": first.name, **result.to_dict()}
            if output_dir:
                canvas = render_result(result, False, settings.pane_offset)
                record["output"] = str(save_canvas(canvas, Path(output_dir) / f"{first.stem}.png"))
            records.append(record)
            perf.log_timing("pair", time.perf_counter() - pair_start, pair=first.name)

        logger.info("batch_finished", **perf.get_stats("pair"))
        summary = summarize(records, time.time() - start_time)
        click.echo(format_results(records, summary, format_type))
        sys.exit(exit_code_for(records, fail_on_diff))

    except Exception as e:
        click.echo(f"Runtime error: {e}", err=True)
        if verbose:
            import traceback

            traceback.print_exc()
        sys.exit(EXIT_RUNTIME_ERROR)

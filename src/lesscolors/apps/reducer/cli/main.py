"""Command line interface for the palette reducer."""

from __future__ import annotations

import logging
import time
from functools import partial
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.progress import track

from lesscolors.logging_utils import configure_logging

from ..core.config import build_runtime_config, load_settings
from ..core.errors import ArgumentValidationError, ReducerError
from ..core.processor import process, validate_paths

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Reduce the colours of an image to the colours found in a palette image."
)


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


@app.command()
def reduce(
    input_path: Optional[str] = typer.Option(
        None, "-input", "--input", help="Path to the input image."
    ),
    output_path: Optional[str] = typer.Option(
        None, "-output", "--output", help="The output image path."
    ),
    output_type: Optional[str] = typer.Option(
        None,
        "-output-type",
        "--output-type",
        help="File format of the output image (png, jpg, webp, ...).",
    ),
    palette_path: Optional[str] = typer.Option(
        None,
        "-palette",
        "--palette",
        "-lut",
        "--lut",
        help="Path to the colour palette image; every pixel is one palette colour.",
    ),
    distance: Optional[str] = typer.Option(
        None,
        "--distance",
        help="Colour space used to find the closest colour (lab, oklab, rgb, xyz).",
    ),
    chunk_cells: Optional[int] = typer.Option(
        None,
        "--chunk-cells",
        help="Largest distance matrix (colours x palette) evaluated at once.",
    ),
    progress: Optional[bool] = typer.Option(
        None, "--progress/--no-progress", help="Show a progress bar while mapping."
    ),
) -> None:
    started = time.perf_counter()
    log_path = configure_logging("lesscolors")
    logger.info("lesscolors logging initialised → %s", log_path)

    settings = load_settings()
    palette = palette_path or settings.default_palette
    try:
        validate_paths(input_path, output_path, palette)
        config = build_runtime_config(
            settings=settings,
            input_path=Path(input_path),
            output_path=Path(output_path),
            palette_path=Path(palette),
            output_type=output_type,
            distance_space=distance,
            chunk_cells=chunk_cells,
            show_progress=progress,
        )
    except (ArgumentValidationError, ValueError) as exc:
        logger.info("Invalid arguments: %s", exc)
        _fail(str(exc))

    logger.info(
        "reduce_run_config",
        extra={
            "event_type": "config",
            "input": str(config.input_path),
            "output": str(config.output_path),
            "palette": str(config.palette_path),
            "output_format": config.output_format,
            "distance_space": config.distance_space.value,
        },
    )

    wrapper = (
        partial(track, description="Mapping colours", transient=True)
        if config.show_progress
        else None
    )
    try:
        process(config, progress=wrapper)
    except ReducerError as exc:
        logger.exception("Reduction failed")
        typer.echo(str(exc), err=True)
        _fail("An error occurred while processing the images.")

    millis = int((time.perf_counter() - started) * 1000)
    typer.echo(f"Successfully finished in {millis} ms.")


def main() -> None:  # pragma: no cover - console script entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    main()

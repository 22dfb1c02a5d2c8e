"""Palette reduction pipeline: load, map, write."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from lesscolors.libs.colors import ColorPalette, Image
from lesscolors.libs.colors.palette import ProgressWrapper

from .config import ReducerConfig
from .errors import (
    ImageProcessingError,
    err_file_not_found,
    err_missing_argument,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReductionResult:
    """Outcome of a single palette reduction."""

    output_path: Path
    width: int
    height: int
    palette_size: int
    distinct_palette_colors: int
    elapsed_ms: int

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def to_json(self) -> Dict[str, object]:
        return {
            "output_path": str(self.output_path),
            "width": self.width,
            "height": self.height,
            "pixels": self.pixel_count,
            "palette_size": self.palette_size,
            "distinct_palette_colors": self.distinct_palette_colors,
            "elapsed_ms": self.elapsed_ms,
        }


def _is_blank(value: Optional[object]) -> bool:
    return value is None or not str(value).strip()


def validate_paths(
    input_path: Optional[Path],
    output_path: Optional[Path],
    palette_path: Optional[Path],
) -> None:
    """Check the three paths in the order the user is told about them.

    Raises :class:`ArgumentValidationError` on the first problem found.
    """

    if _is_blank(input_path):
        raise err_missing_argument("input image")
    if _is_blank(output_path):
        raise err_missing_argument("output image")
    if _is_blank(palette_path):
        raise err_missing_argument("palette image")
    if not Path(input_path).exists():
        raise err_file_not_found(input_path)
    if not Path(palette_path).exists():
        raise err_file_not_found(palette_path)


def _load_image(path: Path, role: str) -> Image:
    try:
        return Image.open(path)
    except OSError as exc:
        raise ImageProcessingError(f"Could not read {role} image {path}: {exc}", path) from exc


def create_palette_from_file(path: Path) -> ColorPalette:
    """Every pixel of the image at *path* becomes one palette entry."""
    return ColorPalette.from_image(_load_image(Path(path), "palette"))


def process(
    config: ReducerConfig, progress: Optional[ProgressWrapper] = None
) -> ReductionResult:
    """Reduce the input image to the palette colours and write the result."""

    started = time.perf_counter()
    palette = create_palette_from_file(config.palette_path)
    image = _load_image(config.input_path, "input")
    logger.info(
        "Reducing %s (%dx%d) to %d palette colours (%d distinct) using %s distance",
        config.input_path,
        image.width,
        image.height,
        len(palette),
        palette.distinct_count,
        config.distance_space.value,
    )

    image.convert_colors_by_palette(
        palette,
        config.distance_space,
        chunk_cells=config.chunk_cells,
        progress=progress,
    )

    try:
        config.output_path.parent.mkdir(parents=True, exist_ok=True)
        image.save(config.output_path, config.output_type)
    except OSError as exc:
        raise ImageProcessingError(
            f"Could not write {config.output_path}: {exc}", config.output_path
        ) from exc

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    logger.info("Wrote %s in %d ms", config.output_path, elapsed_ms)
    return ReductionResult(
        output_path=config.output_path,
        width=image.width,
        height=image.height,
        palette_size=len(palette),
        distinct_palette_colors=palette.distinct_count,
        elapsed_ms=elapsed_ms,
    )

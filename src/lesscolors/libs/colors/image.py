"""RGBA raster wrapper used for palette based colour reduction."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image as PILImage

from .color import Color
from .errors import UnsupportedFormatError
from .palette import DEFAULT_CHUNK_CELLS, ColorPalette, ProgressWrapper
from .space import ColorSpace

logger = logging.getLogger(__name__)

# Pillow writers that reject RGBA input
_OPAQUE_FORMATS = {"JPEG", "MPO", "PPM", "PCX", "EPS"}


def resolve_format(name: str) -> str:
    """Map a user supplied type (``png``, ``jpg``, ``.webp``) to a Pillow format."""

    key = str(name or "").strip().lstrip(".").lower()
    if not key:
        raise UnsupportedFormatError(str(name))
    registered = PILImage.registered_extensions()
    fmt = registered.get(f".{key}", key.upper())
    if fmt not in PILImage.SAVE:
        raise UnsupportedFormatError(str(name))
    return fmt


class Image:
    """A mutable RGBA image backed by a ``(height, width, 4)`` uint8 array."""

    def __init__(self, array: np.ndarray):
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != 4:
            raise ValueError(f"expected a (height, width, 4) array, got {array.shape}")
        self._array = np.array(array, dtype=np.uint8, copy=True)

    @classmethod
    def from_pil(cls, image: PILImage.Image) -> "Image":
        return cls(np.asarray(image.convert("RGBA"), dtype=np.uint8))

    @classmethod
    def open(cls, path: Union[str, Path]) -> "Image":
        with PILImage.open(path) as handle:
            image = cls.from_pil(handle)
        logger.debug("Loaded %s (%dx%d)", path, image.width, image.height)
        return image

    @property
    def array(self) -> np.ndarray:
        return self._array

    @property
    def width(self) -> int:
        return int(self._array.shape[1])

    @property
    def height(self) -> int:
        return int(self._array.shape[0])

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"pixel ({x}, {y}) outside {self.width}x{self.height} image"
            )

    def get_pixel(self, x: int, y: int) -> Color:
        self._check_bounds(x, y)
        r, g, b, a = (int(value) for value in self._array[y, x])
        return Color.from_rgb_ints(r, g, b, a)

    def set_pixel(self, color: Color, x: int, y: int) -> None:
        self._check_bounds(x, y)
        self._array[y, x] = color.to_rgba_ints()

    def convert_colors_by_palette(
        self,
        palette: ColorPalette,
        space: Union[ColorSpace, str] = ColorSpace.LAB,
        *,
        chunk_cells: int = DEFAULT_CHUNK_CELLS,
        progress: Optional[ProgressWrapper] = None,
    ) -> None:
        """Replace every pixel with its closest colour from *palette*.

        The palette colour's alpha replaces the pixel's alpha.
        """
        flat = self._array.reshape(-1, 4)
        indices = palette.closest_indices(
            flat, space, chunk_cells=chunk_cells, progress=progress
        )
        self._array = palette.rgba[indices].reshape(self._array.shape)

    def to_pil(self) -> PILImage.Image:
        # (h, w, 4) uint8 is read as RGBA
        return PILImage.fromarray(np.ascontiguousarray(self._array))

    def save(self, path: Union[str, Path], fmt: str = "png") -> Path:
        """Write the image in *fmt*; alpha is dropped for opaque-only formats."""
        pil_format = resolve_format(fmt)
        image = self.to_pil()
        if pil_format in _OPAQUE_FORMATS:
            image = image.convert("RGB")
        target = Path(path)
        image.save(target, format=pil_format)
        logger.debug("Wrote %s as %s", target, pil_format)
        return target


class ImageModifier:
    """Fluent helper applying colour reductions to an :class:`Image`."""

    def __init__(self, image: Image):
        self._image = image

    def reduce_colors_by_palette(
        self,
        palette: Union[ColorPalette, Image],
        space: Union[ColorSpace, str] = ColorSpace.LAB,
    ) -> "ImageModifier":
        if isinstance(palette, Image):
            palette = ColorPalette.from_image(palette)
        self._image.convert_colors_by_palette(palette, space)
        return self

    @property
    def image(self) -> Image:
        return self._image

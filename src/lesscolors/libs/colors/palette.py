"""Palettes of colours and nearest-colour lookup."""

from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    Union,
)

import numpy as np

from . import conversion
from .color import Color
from .difference import metric_for
from .errors import EmptyPaletteError
from .space import ColorSpace

if TYPE_CHECKING:
    from .image import Image

logger = logging.getLogger(__name__)

# Upper bound on the cells of one (colours x palette) distance matrix
DEFAULT_CHUNK_CELLS = 2_000_000

ProgressWrapper = Callable[[Iterable[slice]], Iterable[slice]]


def rgba_to_space(rgba: np.ndarray, space: ColorSpace) -> np.ndarray:
    """Convert ``(N, 4)`` uint8 pixels to ``(N, 3)`` components in *space*."""
    rgb = conversion.srgb_u8_to_float(np.asarray(rgba)[:, :3])
    return conversion.convert(rgb, ColorSpace.RGB, space)


def unique_rows(rgba: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Split *rgba* rows into distinct rows, in first-occurrence order.

    Returns ``(distinct, first, inverse)`` where ``first[i]`` is the row
    index where ``distinct[i]`` first appears and ``distinct[inverse]``
    rebuilds the input.
    """
    _, first_index, inverse = np.unique(
        rgba, axis=0, return_index=True, return_inverse=True
    )
    # np.unique sorts by value; re-rank so the order follows first occurrence
    order = np.argsort(first_index, kind="stable")
    rank = np.empty_like(order)
    rank[order] = np.arange(order.size)
    first = first_index[order]
    return rgba[first], first, rank[np.asarray(inverse).reshape(-1)]


def _chunk_slices(count: int, rows_per_chunk: int) -> List[slice]:
    return [
        slice(start, min(start + rows_per_chunk, count))
        for start in range(0, count, rows_per_chunk)
    ]


class ColorPalette:
    """An ordered collection of colours.

    Duplicates are kept: palette order decides which entry wins when two
    entries are equally close to a colour. A palette built from colours
    looks them up by their exact components; one built from pixels
    (``from_array``, ``from_image``) works on the 8-bit RGBA rows.
    """

    def __init__(self, colors: Iterable[Color]):
        colors = list(colors)
        rgba = np.array([color.to_rgba_ints() for color in colors], dtype=np.uint8)
        self._setup(rgba.reshape(-1, 4), colors)

    def _setup(self, rgba: np.ndarray, colors: Optional[List[Color]]) -> None:
        if rgba.shape[0] == 0:
            raise EmptyPaletteError()
        self._rgba = rgba
        self._colors = colors
        self._exact = colors is not None
        if self._exact:
            first_seen: Dict[Color, int] = {}
            for index, color in enumerate(colors):
                first_seen.setdefault(color, index)
            self._first = np.fromiter(first_seen.values(), dtype=np.intp)
            self._distinct = rgba[self._first]
        else:
            self._distinct, self._first, _ = unique_rows(rgba)
        self._components: Dict[ColorSpace, np.ndarray] = {}

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> "ColorPalette":
        """Build a palette from a ``(N, 4)`` uint8 RGBA array."""
        rgba = np.asarray(rgba)
        if rgba.ndim != 2 or rgba.shape[1] != 4:
            raise ValueError(f"Expected an (N, 4) RGBA array, got shape {rgba.shape}")
        palette = cls.__new__(cls)
        palette._setup(np.ascontiguousarray(rgba, dtype=np.uint8), None)
        return palette

    @classmethod
    def from_image(cls, image: "Image") -> "ColorPalette":
        """One palette entry per pixel, collected column by column."""
        pixels = image.array.transpose(1, 0, 2).reshape(-1, 4)
        palette = cls.from_array(pixels)
        logger.debug(
            "Palette from %dx%d image: %d entries, %d distinct",
            image.width,
            image.height,
            len(palette),
            palette.distinct_count,
        )
        return palette

    @property
    def colors(self) -> List[Color]:
        if self._colors is None:
            self._colors = [
                Color.from_rgb_ints(*(int(value) for value in row)) for row in self._rgba
            ]
        return self._colors

    def __iter__(self) -> Iterator[Color]:
        return iter(self.colors)

    def __len__(self) -> int:
        return int(self._rgba.shape[0])

    def __getitem__(self, index: int) -> Color:
        return self.colors[index]

    @property
    def rgba(self) -> np.ndarray:
        """Palette entries as 8-bit RGBA rows, in palette order."""
        return self._rgba

    @property
    def distinct_count(self) -> int:
        return int(self._distinct.shape[0])

    def unique(self) -> List[Color]:
        """Distinct palette colours in first-occurrence order."""
        colors = self.colors
        return [colors[int(index)] for index in self._first]

    def _components_in(self, space: ColorSpace) -> np.ndarray:
        if space not in self._components:
            if self._exact:
                self._components[space] = np.array(
                    [
                        self._colors[int(index)].to_color_space(space).components
                        for index in self._first
                    ],
                    dtype=np.float64,
                )
            else:
                self._components[space] = rgba_to_space(self._distinct, space)
        return self._components[space]

    def find_closest_color(
        self, other: Color, space: Union[ColorSpace, str] = ColorSpace.LAB
    ) -> Color:
        """Return the palette colour closest to *other* in *space*."""
        target = ColorSpace.parse(space)
        values = np.asarray(other.to_color_space(target).components)
        distances = metric_for(target)(values[np.newaxis, :], self._components_in(target))
        return self.colors[int(self._first[int(np.argmin(distances))])]

    def closest_indices(
        self,
        rgba: np.ndarray,
        space: Union[ColorSpace, str] = ColorSpace.LAB,
        *,
        chunk_cells: int = DEFAULT_CHUNK_CELLS,
        progress: Optional[ProgressWrapper] = None,
    ) -> np.ndarray:
        """Index of the closest palette entry for every ``(N, 4)`` RGBA row.

        Distances ignore alpha. Each distinct input colour is evaluated once
        and the distance matrices are built in chunks of at most
        *chunk_cells* cells. *progress* may wrap the chunk iterable, e.g.
        with a progress bar.
        """

        if chunk_cells <= 0:
            raise ValueError("chunk_cells must be positive")
        target = ColorSpace.parse(space)
        rgba = np.asarray(rgba, dtype=np.uint8).reshape(-1, 4)
        if rgba.shape[0] == 0:
            return np.zeros(0, dtype=np.intp)

        palette_values = self._components_in(target)
        metric = metric_for(target)

        distinct, _, inverse = unique_rows(rgba)
        values = rgba_to_space(distinct, target)
        rows_per_chunk = max(1, chunk_cells // palette_values.shape[0])
        chunks: Iterable[slice] = _chunk_slices(values.shape[0], rows_per_chunk)
        if progress is not None:
            chunks = progress(chunks)

        logger.debug(
            "Matching %d distinct colours against %d palette colours in %s",
            values.shape[0],
            palette_values.shape[0],
            target.value,
        )
        best = np.empty(values.shape[0], dtype=np.intp)
        for chunk in chunks:
            distances = metric(
                values[chunk, np.newaxis, :], palette_values[np.newaxis, :, :]
            )
            best[chunk] = np.argmin(distances, axis=1)

        return self._first[best][inverse]

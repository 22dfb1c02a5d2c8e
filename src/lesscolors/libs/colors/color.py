"""Immutable colour value with conversions and colour difference metrics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

from . import conversion
from .difference import ciede2000, euclidean, metric_for
from .space import ColorSpace

SpaceLike = Union[ColorSpace, str]


@dataclass(frozen=True)
class Color:
    """A colour expressed in one :class:`ColorSpace`.

    ``components`` are the three channel values in that space (sRGB in
    [0, 1], L*a*b* with L in [0, 100], ...). ``alpha`` is always in [0, 1]
    and is carried through conversions unchanged.
    """

    space: ColorSpace
    components: Tuple[float, float, float]
    alpha: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "space", ColorSpace.parse(self.space))
        values = tuple(float(value) for value in self.components)
        if len(values) != 3:
            raise ValueError(f"expected 3 components, got {len(values)}")
        object.__setattr__(self, "components", values)
        object.__setattr__(self, "alpha", float(self.alpha))

    @classmethod
    def from_rgba(cls, r: float, g: float, b: float, alpha: float = 1.0) -> "Color":
        """Create an sRGB colour from floats in [0, 1]."""
        return cls(ColorSpace.RGB, (r, g, b), alpha)

    @classmethod
    def from_rgb_ints(cls, r: int, g: int, b: int, alpha: int = 255) -> "Color":
        """Create an sRGB colour from 8-bit channels."""
        return cls(ColorSpace.RGB, (r / 255.0, g / 255.0, b / 255.0), alpha / 255.0)

    @classmethod
    def from_argb_int(cls, argb: int) -> "Color":
        """Create a colour from a packed ``0xAARRGGBB`` integer.

        Only the low 32 bits are read, so signed values work as well.
        """
        argb &= 0xFFFFFFFF
        a = (argb >> 24) & 0xFF
        r = (argb >> 16) & 0xFF
        g = (argb >> 8) & 0xFF
        b = argb & 0xFF
        return cls.from_rgb_ints(r, g, b, a)

    @property
    def color_space(self) -> ColorSpace:
        return self.space

    def to_color_space(self, space: Optional[SpaceLike]) -> "Color":
        """Return this colour in *space*, or ``self`` if it already is."""
        if space is None:
            raise ValueError("colour space must not be None")
        target = ColorSpace.parse(space)
        if target == self.space:
            return self
        converted = conversion.convert(self.components, self.space, target)
        return Color(target, tuple(converted.tolist()), self.alpha)

    def to_rgba_ints(self) -> Tuple[int, int, int, int]:
        rgb = conversion.srgb_float_to_u8(self.to_color_space(ColorSpace.RGB).components)
        alpha = int(np.clip(np.rint(self.alpha * 255.0), 0, 255))
        return int(rgb[0]), int(rgb[1]), int(rgb[2]), alpha

    def to_argb_int(self) -> int:
        """Pack the colour into an unsigned ``0xAARRGGBB`` integer."""
        r, g, b, a = self.to_rgba_ints()
        return b | g << 8 | r << 16 | a << 24

    def distance(self, other: "Color", space: Optional[SpaceLike] = None) -> float:
        """Distance to *other*, measured in *space* or this colour's own space."""
        target = self.space if space is None else ColorSpace.parse(space)
        _require_colors(self, other)
        metric = metric_for(target)
        return float(
            metric(
                self.to_color_space(target).components,
                other.to_color_space(target).components,
            )
        )

    def __repr__(self) -> str:
        values = ", ".join(f"{value:.6g}" for value in self.components)
        return f"Color({self.space.value.upper()}: {values}, alpha={self.alpha:.6g})"


def _require_colors(color1: Optional[Color], color2: Optional[Color]) -> None:
    if color1 is None or color2 is None:
        raise TypeError("both colours are required")


def rgb_distance(color1: Color, color2: Color) -> float:
    """Euclidean distance between two colours in sRGB."""
    _require_colors(color1, color2)
    return float(
        euclidean(
            color1.to_color_space(ColorSpace.RGB).components,
            color2.to_color_space(ColorSpace.RGB).components,
        )
    )


def lab_distance(color1: Color, color2: Color) -> float:
    """CIEDE2000 difference between two colours."""
    _require_colors(color1, color2)
    return float(
        ciede2000(
            color1.to_color_space(ColorSpace.LAB).components,
            color2.to_color_space(ColorSpace.LAB).components,
        )
    )


def oklab_distance(color1: Color, color2: Color) -> float:
    """Euclidean distance between two colours in Oklab."""
    _require_colors(color1, color2)
    return float(
        euclidean(
            color1.to_color_space(ColorSpace.OKLAB).components,
            color2.to_color_space(ColorSpace.OKLAB).components,
        )
    )


def xyz_distance(color1: Color, color2: Color) -> float:
    """Euclidean distance between two colours in CIE XYZ."""
    _require_colors(color1, color2)
    return float(
        euclidean(
            color1.to_color_space(ColorSpace.XYZ).components,
            color2.to_color_space(ColorSpace.XYZ).components,
        )
    )

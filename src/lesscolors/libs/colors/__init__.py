"""Colour values, palettes and palette based colour reduction."""

from .color import Color, lab_distance, oklab_distance, rgb_distance, xyz_distance
from .conversion import lab_to_rgb, rgb_to_lab
from .errors import ColorError, EmptyPaletteError, UnsupportedFormatError
from .image import Image, ImageModifier, resolve_format
from .palette import ColorPalette
from .space import ColorSpace

__all__ = [
    "Color",
    "ColorError",
    "ColorPalette",
    "ColorSpace",
    "EmptyPaletteError",
    "Image",
    "ImageModifier",
    "UnsupportedFormatError",
    "lab_distance",
    "lab_to_rgb",
    "oklab_distance",
    "resolve_format",
    "rgb_distance",
    "rgb_to_lab",
    "xyz_distance",
]

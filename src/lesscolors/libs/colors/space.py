from __future__ import annotations

from enum import Enum
from typing import Union


class ColorSpace(str, Enum):
    """Colour spaces a :class:`Color` can be expressed and compared in."""

    RGB = "rgb"
    LAB = "lab"
    OKLAB = "oklab"
    XYZ = "xyz"

    @classmethod
    def parse(cls, value: Union[str, "ColorSpace"]) -> "ColorSpace":
        if isinstance(value, ColorSpace):
            return value
        if value is None:
            raise ValueError("colour space must not be None")
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(space.value for space in cls)
            raise ValueError(
                f"Unknown colour space '{value}' (expected one of: {choices})"
            ) from None

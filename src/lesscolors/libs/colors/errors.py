from __future__ import annotations


class ColorError(Exception):
    """Base class for errors raised by the colour library."""


class EmptyPaletteError(ColorError, ValueError):
    def __init__(self, message: str = "A colour palette needs at least one colour"):
        super().__init__(message)


class UnsupportedFormatError(ColorError, ValueError):
    def __init__(self, fmt: str):
        self.format = fmt
        super().__init__(f"Unsupported image format '{fmt}'")

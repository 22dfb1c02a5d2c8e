from __future__ import annotations

from pathlib import Path


class ReducerError(Exception):
    """Base class for failures the reducer reports to the user."""


class ArgumentValidationError(ReducerError):
    """Invalid or missing command line input; ``str(exc)`` is the user message."""


class ImageProcessingError(ReducerError):
    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


def err_missing_argument(what: str) -> ArgumentValidationError:
    return ArgumentValidationError(f"Missing {what} path argument.")


def err_file_not_found(path: Path | str) -> ArgumentValidationError:
    return ArgumentValidationError(f"Couldn't find file: {path}")

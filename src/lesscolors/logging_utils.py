"""Centralised logging setup for the lesscolors command line tools."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

__all__ = ["configure_logging"]

_MANAGED_HANDLER_FLAG = "_lesscolors_managed_handler"
_LOG_DIR_ENV = "LESSCOLORS_LOG_DIR"


def _default_log_directory() -> Path:
    """Return the directory log files go to when none is given."""

    env_override = os.environ.get(_LOG_DIR_ENV)
    if env_override:
        return Path(env_override).expanduser()

    module_path = Path(__file__).resolve()
    # Prefer the project root (folder containing pyproject.toml or .git)
    for candidate in [module_path] + list(module_path.parents):
        candidate_dir = candidate if candidate.is_dir() else candidate.parent
        if (candidate_dir / "pyproject.toml").exists() or (
            candidate_dir / ".git"
        ).exists():
            return candidate_dir / "logs"

    # Installed into site-packages: there is no project folder above the
    # module, so logs follow the directory the tool is run from
    return Path.cwd() / "logs"


def _remove_managed_handlers(logger: logging.Logger) -> None:
    """Detach any handlers previously installed by :func:`configure_logging`."""

    for handler in list(logger.handlers):
        if getattr(handler, _MANAGED_HANDLER_FLAG, False):
            logger.removeHandler(handler)
            handler.close()


def configure_logging(
    log_name: str,
    *,
    level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    include_console: bool = True,
) -> Path:
    """Configure root logging to write to ``<log_dir>/<log_name>.log``.

    Handlers installed by an earlier call are replaced, handlers added by
    anyone else are left alone. Returns the log file path.
    """

    target_directory = (
        Path(log_dir).expanduser() if log_dir else _default_log_directory()
    )
    target_directory.mkdir(parents=True, exist_ok=True)
    log_path = target_directory / f"{log_name}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    _remove_managed_handlers(root_logger)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    setattr(file_handler, _MANAGED_HANDLER_FLAG, True)
    root_logger.addHandler(file_handler)

    if include_console:
        # stdout carries the tool's own output; diagnostics only go to stderr
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        setattr(console_handler, _MANAGED_HANDLER_FLAG, True)
        root_logger.addHandler(console_handler)

    logging.captureWarnings(True)

    return log_path

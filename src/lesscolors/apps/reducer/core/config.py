"""Configuration helpers for the palette reducer."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import tomllib

from lesscolors.libs.colors import ColorSpace, resolve_format
from lesscolors.libs.colors.palette import DEFAULT_CHUNK_CELLS

logger = logging.getLogger(__name__)

_CONFIG_ENV_PREFIX = "LESSCOLORS_REDUCER__"


def _find_pyproject(start: Optional[Path] = None) -> Optional[Path]:
    """Locate the closest ``pyproject.toml`` relative to *start*."""

    current = (start or Path.cwd()).resolve()
    for candidate in [current, *current.parents]:
        pyproject = candidate / "pyproject.toml"
        if pyproject.exists():
            return pyproject
    return None


def _coerce_bool(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return default


def _coerce_int(value: object, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_path(value: object) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    if isinstance(value, str) and value.strip():
        return Path(value).expanduser()
    return None


@dataclass(frozen=True)
class ReducerSettings:
    """Default configuration values sourced from project metadata."""

    default_output_type: str = "png"
    default_distance_space: str = ColorSpace.LAB.value
    default_chunk_cells: int = DEFAULT_CHUNK_CELLS
    default_show_progress: bool = True
    default_palette: Optional[Path] = None


@dataclass(frozen=True)
class ReducerConfig:
    """Fully resolved runtime configuration for one reduction."""

    input_path: Path
    output_path: Path
    palette_path: Path
    output_type: str
    output_format: str
    distance_space: ColorSpace
    chunk_cells: int
    show_progress: bool


def _load_pyproject_settings(start: Optional[Path]) -> Dict[str, object]:
    pyproject = _find_pyproject(start)
    if not pyproject:
        return {}

    try:
        with pyproject.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring unreadable %s: %s", pyproject, exc)
        return {}

    tool_cfg = data.get("tool", {}).get("lesscolors", {})
    if not isinstance(tool_cfg, dict):
        return {}

    reducer_cfg = tool_cfg.get("reducer")
    return dict(reducer_cfg) if isinstance(reducer_cfg, dict) else {}


def _load_env_settings() -> Dict[str, object]:
    values: Dict[str, object] = {}
    for env_key, env_value in os.environ.items():
        if not env_key.startswith(_CONFIG_ENV_PREFIX):
            continue
        key = env_key[len(_CONFIG_ENV_PREFIX) :].lower()
        values[key] = env_value
    return values


def load_settings(start: Optional[Path] = None) -> ReducerSettings:
    """Load project defaults, applying environment overrides when present."""

    raw = _load_pyproject_settings(start)
    raw.update(_load_env_settings())

    output_type = (
        str(raw.get("default_output_type") or "").strip()
        or ReducerSettings.default_output_type
    )
    distance_space = (
        str(raw.get("default_distance_space") or "").strip()
        or ReducerSettings.default_distance_space
    )
    chunk_cells = _coerce_int(
        raw.get("default_chunk_cells"), ReducerSettings.default_chunk_cells
    )
    show_progress = _coerce_bool(
        raw.get("default_show_progress"), ReducerSettings.default_show_progress
    )
    palette = _as_path(raw.get("default_palette"))

    return ReducerSettings(
        default_output_type=output_type,
        default_distance_space=distance_space,
        default_chunk_cells=chunk_cells,
        default_show_progress=show_progress,
        default_palette=palette,
    )


def build_runtime_config(
    *,
    settings: ReducerSettings,
    input_path: Path,
    output_path: Path,
    palette_path: Optional[Path] = None,
    output_type: Optional[str] = None,
    distance_space: Optional[str] = None,
    chunk_cells: Optional[int] = None,
    show_progress: Optional[bool] = None,
) -> ReducerConfig:
    """Merge CLI overrides onto *settings* and validate the result."""

    resolved_palette = palette_path or settings.default_palette
    if resolved_palette is None:
        raise ValueError("a palette image path is required")

    resolved_type = (output_type or settings.default_output_type).strip().lower()
    # raises UnsupportedFormatError (a ValueError) for unknown types
    output_format = resolve_format(resolved_type)

    space = ColorSpace.parse(distance_space or settings.default_distance_space)

    resolved_chunk_cells = (
        settings.default_chunk_cells if chunk_cells is None else int(chunk_cells)
    )
    if resolved_chunk_cells <= 0:
        raise ValueError("chunk_cells must be a positive integer")

    return ReducerConfig(
        input_path=Path(input_path).expanduser(),
        output_path=Path(output_path).expanduser(),
        palette_path=Path(resolved_palette).expanduser(),
        output_type=resolved_type,
        output_format=output_format,
        distance_space=space,
        chunk_cells=resolved_chunk_cells,
        show_progress=(
            settings.default_show_progress if show_progress is None else show_progress
        ),
    )

import logging
import sys
from pathlib import Path
from typing import Iterable, Tuple

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from PIL import Image  # noqa: E402

from lesscolors import logging_utils  # noqa: E402

Pixel = Tuple[int, ...]


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path, monkeypatch):
    """Keep log files written by the CLI out of the working tree."""

    log_dir = tmp_path / "logs"
    monkeypatch.setenv("LESSCOLORS_LOG_DIR", str(log_dir))
    yield log_dir
    # CLI runs bind handlers to CliRunner streams that are closed afterwards
    logging_utils._remove_managed_handlers(logging.getLogger())


@pytest.fixture
def write_image(tmp_path):
    """Write a small RGBA image given as rows of pixels; return its path."""

    def _write(name: str, rows: Iterable[Iterable[Pixel]], fmt: str = "PNG") -> Path:
        rows = [list(row) for row in rows]
        height = len(rows)
        width = len(rows[0])
        image = Image.new("RGBA", (width, height))
        for y, row in enumerate(rows):
            for x, pixel in enumerate(row):
                if len(pixel) == 3:
                    pixel = (*pixel, 255)
                image.putpixel((x, y), tuple(pixel))
        path = tmp_path / name
        if fmt.upper() == "JPEG":
            image = image.convert("RGB")
        image.save(path, format=fmt)
        return path

    return _write

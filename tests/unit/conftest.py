"""Shared helpers for unit tests."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import numpy as np
from PIL import Image

from pixcmp.buffer import PixelBuffer

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
YELLOW = (255, 255, 0, 255)
EMPTY = (0, 0, 0, 0)


def make_buffer(rows: Sequence[Sequence[Sequence[int]]]) -> PixelBuffer:
    """Build a PixelBuffer from rows of pixels (rows[y][x] = channels)."""
    return PixelBuffer.from_array(np.array(rows, dtype=np.int64))


def solid_buffer(
    color: Sequence[int], width: int = 4, height: int = 4
) -> PixelBuffer:
    """Return a width x height buffer filled with *color*."""
    return make_buffer([[list(color)] * width for _ in range(height)])


def solid_png(
    tmp_path: Path,
    name: str,
    color: tuple[int, ...],
    size: tuple[int, int] = (4, 4),
    mode: str = "RGBA",
) -> Path:
    """Create a solid-color image and return its path."""
    p = tmp_path / name
    Image.new(mode, size, color).save(p)
    return p


def save_buffer(tmp_path: Path, name: str, buf: PixelBuffer) -> Path:
    """Write *buf* losslessly as PNG and return its path."""
    p = tmp_path / name
    Image.fromarray(np.ascontiguousarray(buf.data)).save(p)
    return p

"""Immutable decoded image representation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Decoded raster image addressable by (x, y, channel).

    ``data`` is a read-only ``uint8`` array of shape ``(height, width, depth)``.
    Use :meth:`from_array` to build one from arbitrary array-like input.
    """

    data: np.ndarray

    def __post_init__(self) -> None:
        if not isinstance(self.data, np.ndarray) or self.data.dtype != np.uint8:
            raise TypeError("PixelBuffer data must be a uint8 numpy array")
        if self.data.ndim != 3:
            raise ValueError(f"PixelBuffer data must be 3-D, got shape {self.data.shape}")
        if self.data.flags.writeable:
            frozen = self.data.copy()
            frozen.flags.writeable = False
            object.__setattr__(self, "data", frozen)

    @classmethod
    def from_array(cls, array: Any) -> PixelBuffer:
        """Validate *array* (height, width, depth) and copy it into a new buffer.

        Raises:
            ValueError: If the array is not 3-D or holds values outside 0..255.
        """
        arr = np.asarray(array)
        if arr.ndim != 3:
            raise ValueError(f"expected (height, width, depth) array, got shape {arr.shape}")
        if arr.dtype != np.uint8:
            if arr.size and not np.issubdtype(arr.dtype, np.integer):
                raise ValueError(f"channel values must be integers, got dtype {arr.dtype}")
            if arr.size and (arr.min() < 0 or arr.max() > 255):
                raise ValueError("channel values must be in 0..255")
        frozen = arr.astype(np.uint8, copy=True)
        frozen.flags.writeable = False
        return cls(frozen)

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def depth(self) -> int:
        return int(self.data.shape[2])

    @property
    def shape(self) -> tuple[int, int, int]:
        """(width, height, depth)."""
        return self.width, self.height, self.depth

    def get(self, x: int, y: int, channel: int) -> int:
        """Return the channel value at (x, y).

        Raises:
            IndexError: If any coordinate is outside the buffer.
        """
        if not (0 <= x < self.width and 0 <= y < self.height and 0 <= channel < self.depth):
            raise IndexError(
                f"pixel ({x}, {y}, {channel}) outside {self.width}x{self.height}x{self.depth}"
            )
        return int(self.data[y, x, channel])

    def pixel(self, x: int, y: int) -> tuple[int, ...]:
        """Return all channel values at (x, y)."""
        return tuple(self.get(x, y, c) for c in range(self.depth))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.data.shape == other.data.shape and bool(np.array_equal(self.data, other.data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height}, depth={self.depth})"

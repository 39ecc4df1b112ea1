"""Pixel-by-pixel comparison of two decoded images.

Every pixel of the result is chosen by one rule:

* equal in both images: the base pixel is kept;
* test pixel is transparent black ``(0, 0, 0, 0)``: ``base_color``;
* base pixel is transparent black: ``test_color``;
* otherwise: the channel-wise sum of both colors with alpha forced to 255.

The blended sum is not clamped. With the default red and green it yields
opaque yellow; larger colors produce values above 255, which are kept in the
result buffer and only reduced modulo 256 when the result is encoded.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from pixcmp.buffer import PixelBuffer
from pixcmp.errors import DepthMismatch, DimensionMismatch, InvalidColor, UnsupportedDepth

log = logging.getLogger(__name__)

Color = tuple[int, int, int, int]

DEFAULT_BASE_COLOR: Color = (255, 0, 0, 255)
DEFAULT_TEST_COLOR: Color = (0, 255, 0, 255)

_RGBA = 4


def validate_color(color: Sequence[int]) -> Color:
    """Return *color* as an RGBA tuple, or raise InvalidColor."""
    values = tuple(color)
    if len(values) != _RGBA:
        raise InvalidColor(f"color must have 4 channels (RGBA), got {len(values)}")
    for v in values:
        if isinstance(v, bool) or not isinstance(v, (int, np.integer)) or not 0 <= v <= 255:
            raise InvalidColor(f"color channel must be an integer in 0..255, got {v!r}")
    return (int(values[0]), int(values[1]), int(values[2]), int(values[3]))


def parse_color(text: str) -> Color:
    """Parse ``"R,G,B,A"`` into an RGBA tuple."""
    parts = [p.strip() for p in text.split(",")]
    try:
        values = [int(p) for p in parts]
    except ValueError as exc:
        raise InvalidColor(f"invalid color {text!r}: expected R,G,B,A integers") from exc
    return validate_color(values)


@dataclass(frozen=True, eq=False)
class ComparisonResult:
    """Outcome of one comparison.

    ``result_buffer`` is a flat ``uint16`` array in row-major order
    (y, then x, then channel) of length ``width * height * depth``.
    """

    is_same: bool
    result_buffer: np.ndarray
    width: int
    height: int
    depth: int
    mismatched_pixels: int = 0

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    @property
    def diff_ratio(self) -> float:
        """Percentage of mismatched pixels."""
        if self.total_pixels == 0:
            return 0.0
        return self.mismatched_pixels / self.total_pixels * 100.0

    def to_pixel_buffer(self) -> PixelBuffer:
        """Wrap the result for encoding, reducing each value modulo 256."""
        arr = self.result_buffer.reshape(self.height, self.width, self.depth)
        return PixelBuffer(arr.astype(np.uint8))

    def __bool__(self) -> bool:
        return self.is_same


def compare(
    base: PixelBuffer,
    test: PixelBuffer,
    base_color: Sequence[int] = DEFAULT_BASE_COLOR,
    test_color: Sequence[int] = DEFAULT_TEST_COLOR,
) -> ComparisonResult:
    """Compare *base* and *test* and build the highlighted result.

    Raises:
        DimensionMismatch: If width or height differ.
        DepthMismatch: If channel counts differ.
        UnsupportedDepth: If the images are not RGBA.
        InvalidColor: If a highlight color is malformed.
    """
    if base.width != test.width or base.height != test.height:
        raise DimensionMismatch(
            f"image sizes are not the same: {base.width}x{base.height} "
            f"vs {test.width}x{test.height}"
        )
    if base.depth != test.depth:
        raise DepthMismatch(f"image depths are not the same: {base.depth} vs {test.depth}")
    if base.depth != _RGBA:
        raise UnsupportedDepth(f"expected 4-channel RGBA images, got depth {base.depth}")

    bc = np.array(validate_color(base_color), dtype=np.uint16)
    tc = np.array(validate_color(test_color), dtype=np.uint16)
    blend = bc + tc
    blend[3] = 255

    b = base.data.astype(np.uint16)
    t = test.data.astype(np.uint16)

    differs = np.any(b != t, axis=2)
    test_empty = ~np.any(t, axis=2)
    base_empty = ~np.any(b, axis=2)

    out = b
    out[differs & test_empty] = bc
    out[differs & ~test_empty & base_empty] = tc
    out[differs & ~test_empty & ~base_empty] = blend

    mismatched = int(np.count_nonzero(differs))
    log.debug("compared %dx%d: %d mismatched pixel(s)", base.width, base.height, mismatched)
    return ComparisonResult(
        is_same=mismatched == 0,
        result_buffer=out.reshape(-1),
        width=base.width,
        height=base.height,
        depth=base.depth,
        mismatched_pixels=mismatched,
    )

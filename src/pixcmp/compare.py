"""Comparison entry point and baseline reuse.

``pixel_compare`` resolves its image sources, runs the comparator and
optionally writes the diff image. Called without a test image it decodes the
baseline once and returns a :class:`BoundComparator` that can be invoked any
number of times against new test images without decoding the baseline again.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from pixcmp import codec
from pixcmp.buffer import PixelBuffer
from pixcmp.comparator import (
    DEFAULT_BASE_COLOR,
    DEFAULT_TEST_COLOR,
    Color,
    ComparisonResult,
    compare,
    validate_color,
)
from pixcmp.errors import DecodeError

log = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_BASE_COLOR",
    "DEFAULT_TEST_COLOR",
    "BoundComparator",
    "CompareOptions",
    "ImageSource",
    "pixel_compare",
    "pixel_compare_options",
]

ImageSource = str | os.PathLike[str] | bytes | PixelBuffer


@dataclass(frozen=True)
class CompareOptions:
    """Settings for one comparison.

    Attributes:
        base_image: Baseline path, encoded bytes or decoded buffer.
        test_image: Image compared against the baseline. Without it a
            BoundComparator is produced instead of a result.
        output_image: Where to write the diff image (.png, .jpg or .jpeg).
        base_color: Highlight for pixels present only in the baseline.
        test_color: Highlight for pixels present only in the test image.
    """

    base_image: ImageSource
    test_image: ImageSource | None = None
    output_image: str | os.PathLike[str] | None = None
    base_color: Color = DEFAULT_BASE_COLOR
    test_color: Color = DEFAULT_TEST_COLOR

    def merged(self, **overrides: Any) -> CompareOptions:
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **overrides)


@dataclass(frozen=True)
class BoundComparator:
    """Comparison function closed over an already decoded baseline."""

    baseline: PixelBuffer
    options: CompareOptions

    def __call__(self, **overrides: Any) -> ComparisonResult | BoundComparator:
        """Compare the bound baseline using *overrides* over the bound options.

        A ``base_image`` override is ignored; the bound buffer is always used.
        """
        if overrides.pop("base_image", None) is not None:
            log.debug("ignoring base_image override, baseline is bound")
        opts = self.options.merged(**overrides, base_image=self.baseline)
        return pixel_compare_options(opts)


def _resolve(source: ImageSource, stage: str) -> PixelBuffer:
    if isinstance(source, PixelBuffer):
        return source
    try:
        return codec.decode(source)
    except DecodeError as exc:
        raise DecodeError(f"{stage}: {exc}") from exc


def _resolve_both(base: ImageSource, test: ImageSource) -> tuple[PixelBuffer, PixelBuffer]:
    """Resolve base and test, decoding concurrently when both need it."""
    if isinstance(base, PixelBuffer) or isinstance(test, PixelBuffer):
        return _resolve(base, "base image"), _resolve(test, "test image")

    out: list[PixelBuffer | None] = [None, None]
    errors: list[Exception | None] = [None, None]

    def _work(idx: int, source: ImageSource, stage: str) -> None:
        try:
            out[idx] = _resolve(source, stage)
        except Exception as exc:  # re-raised on the calling thread
            errors[idx] = exc

    t_a = threading.Thread(target=_work, args=(0, base, "base image"), daemon=True)
    t_b = threading.Thread(target=_work, args=(1, test, "test image"), daemon=True)
    t_a.start()
    t_b.start()
    t_a.join()
    t_b.join()

    for err in errors:
        if err is not None:
            raise err
    assert out[0] is not None and out[1] is not None
    return out[0], out[1]


def pixel_compare_options(options: CompareOptions) -> ComparisonResult | BoundComparator:
    """Run a comparison described by *options*.

    Returns:
        A BoundComparator if ``options.test_image`` is None, otherwise the
        ComparisonResult. When ``output_image`` is set the result is returned
        only after the diff image has been written.

    Raises:
        InvalidColor: If a highlight color is malformed.
        UnsupportedOutputFormat: If the output suffix is not supported.
        DecodeError: If an image source cannot be decoded.
        DimensionMismatch, DepthMismatch, UnsupportedDepth: From the comparator.
        EncodeError, WriteError: If the diff image cannot be written.
    """
    base_color = validate_color(options.base_color)
    test_color = validate_color(options.test_color)

    if options.test_image is None:
        baseline = _resolve(options.base_image, "base image")
        log.debug("bound baseline %r", baseline)
        return BoundComparator(baseline=baseline, options=options.merged(base_image=baseline))

    fmt = codec.output_format(options.output_image) if options.output_image is not None else None

    base, test = _resolve_both(options.base_image, options.test_image)
    result = compare(base, test, base_color, test_color)

    if fmt is not None and options.output_image is not None:
        codec.write_image(result.to_pixel_buffer(), fmt, options.output_image)
    return result


def pixel_compare(
    base_image: ImageSource,
    test_image: ImageSource | None = None,
    output_image: str | os.PathLike[str] | None = None,
    base_color: Sequence[int] = DEFAULT_BASE_COLOR,
    test_color: Sequence[int] = DEFAULT_TEST_COLOR,
) -> ComparisonResult | BoundComparator:
    """Compare *base_image* against *test_image*, or bind the baseline for reuse.

    Example::

        check = pixel_compare("baseline.png")
        for shot in ("run1.png", "run2.png"):
            assert check(test_image=shot).is_same
    """
    return pixel_compare_options(
        CompareOptions(
            base_image=base_image,
            test_image=test_image,
            output_image=output_image,
            base_color=validate_color(base_color),
            test_color=validate_color(test_color),
        )
    )

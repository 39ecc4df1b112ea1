"""pixcmp package."""

from importlib.metadata import PackageNotFoundError, version

from pixcmp.buffer import PixelBuffer
from pixcmp.codec import OutputFormat, decode, encode, output_format, write_image
from pixcmp.compare import (
    DEFAULT_BASE_COLOR,
    DEFAULT_TEST_COLOR,
    BoundComparator,
    CompareOptions,
    pixel_compare,
    pixel_compare_options,
)
from pixcmp.comparator import ComparisonResult, compare
from pixcmp.errors import (
    CodecError,
    DecodeError,
    DepthMismatch,
    DimensionMismatch,
    EncodeError,
    InvalidColor,
    PixelCompareError,
    UnsupportedDepth,
    UnsupportedOutputFormat,
    WriteError,
)

__all__ = [
    "__version__",
    "DEFAULT_BASE_COLOR",
    "DEFAULT_TEST_COLOR",
    "BoundComparator",
    "CodecError",
    "CompareOptions",
    "ComparisonResult",
    "DecodeError",
    "DepthMismatch",
    "DimensionMismatch",
    "EncodeError",
    "InvalidColor",
    "OutputFormat",
    "PixelBuffer",
    "PixelCompareError",
    "UnsupportedDepth",
    "UnsupportedOutputFormat",
    "WriteError",
    "compare",
    "decode",
    "encode",
    "output_format",
    "pixel_compare",
    "pixel_compare_options",
    "write_image",
]

try:
    __version__ = version("pixcmp")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

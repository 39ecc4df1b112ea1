"""Exception hierarchy for pixcmp.

Every error raised by the library derives from :class:`PixelCompareError`.
Validation errors also derive from ``ValueError`` and write failures from
``OSError`` so callers catching the builtin families keep working.
"""

from __future__ import annotations


class PixelCompareError(Exception):
    """Base class for all pixcmp errors."""


class DimensionMismatch(PixelCompareError, ValueError):
    """Base and test images differ in width or height."""


class DepthMismatch(PixelCompareError, ValueError):
    """Base and test images differ in channel count."""


class UnsupportedDepth(PixelCompareError, ValueError):
    """Images are not 4-channel RGBA."""


class UnsupportedOutputFormat(PixelCompareError, ValueError):
    """Output path suffix is not .jpeg, .jpg or .png."""


class InvalidColor(PixelCompareError, ValueError):
    """Highlight color is not four channel values in 0..255."""


class CodecError(PixelCompareError):
    """Failure inside the image codec."""


class DecodeError(CodecError):
    """Image source is missing, unreadable or malformed."""


class EncodeError(CodecError):
    """Pixel data could not be encoded to the requested format."""


class WriteError(CodecError, OSError):
    """Encoded image could not be written to its destination."""

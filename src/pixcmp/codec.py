"""Image decoding and encoding on top of Pillow."""

from __future__ import annotations

import io
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from pixcmp.buffer import PixelBuffer
from pixcmp.errors import DecodeError, EncodeError, UnsupportedOutputFormat, WriteError

log = logging.getLogger(__name__)

PathLike = str | os.PathLike[str]


class OutputFormat(Enum):
    JPEG = "jpeg"
    JPG = "jpg"
    PNG = "png"

    @property
    def pil_format(self) -> str:
        return "PNG" if self is OutputFormat.PNG else "JPEG"


def output_format(path: PathLike) -> OutputFormat:
    """Map an output path to its encoder format by exact, case-sensitive suffix.

    Raises:
        UnsupportedOutputFormat: If the path does not end in .jpeg, .jpg or .png.
    """
    name = os.fspath(path)
    if name.endswith(".jpeg"):
        return OutputFormat.JPEG
    if name.endswith(".png"):
        return OutputFormat.PNG
    if name.endswith(".jpg"):
        return OutputFormat.JPG
    raise UnsupportedOutputFormat(f"output image type is not supported: {name}")


def decode(source: PathLike | bytes) -> PixelBuffer:
    """Decode an image file (or in-memory bytes) into an RGBA PixelBuffer.

    Multi-frame images contribute their first frame only.

    Raises:
        DecodeError: If the source is missing, unreadable or not an image.
    """
    label = "<bytes>" if isinstance(source, bytes) else os.fspath(source)
    fp = io.BytesIO(source) if isinstance(source, bytes) else source
    try:
        with Image.open(fp) as img:
            rgba = img.convert("RGBA")
    except FileNotFoundError as exc:
        raise DecodeError(f"reading image failed: file not found: {label}") from exc
    except UnidentifiedImageError as exc:
        raise DecodeError(f"reading image failed: not a valid image: {label}") from exc
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"reading image failed: {label}: {exc}") from exc

    buf = PixelBuffer(np.array(rgba, dtype=np.uint8))
    log.debug("decoded %s: %dx%d", label, buf.width, buf.height)
    return buf


def encode(buffer: PixelBuffer, fmt: OutputFormat) -> bytes:
    """Encode *buffer* as PNG (RGBA) or JPEG (alpha dropped).

    Raises:
        EncodeError: If Pillow cannot encode the buffer.
    """
    if buffer.depth != 4:
        raise EncodeError(f"encoding {fmt.value} failed: expected RGBA, got depth {buffer.depth}")
    try:
        img = Image.fromarray(np.ascontiguousarray(buffer.data))
        if fmt is not OutputFormat.PNG:
            img = img.convert("RGB")
        out = io.BytesIO()
        img.save(out, format=fmt.pil_format)
    except (OSError, ValueError, TypeError) as exc:
        raise EncodeError(f"encoding {fmt.value} failed: {exc}") from exc
    return out.getvalue()


def write_image(buffer: PixelBuffer, fmt: OutputFormat, path: PathLike) -> None:
    """Encode *buffer* and write it to *path*.

    The image is fully encoded, written to a temporary file beside the
    destination and moved into place, so a failure leaves no partial file.

    Raises:
        EncodeError: If encoding fails.
        WriteError: If the destination cannot be created or written.
    """
    dest = Path(path)
    try:
        data = encode(buffer, fmt)
    except EncodeError as exc:
        raise EncodeError(f"{dest}: {exc}") from exc
    tmp: Path | None = None
    try:
        fd, name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".tmp", dir=dest.parent)
        tmp = Path(name)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, dest)
    except OSError as exc:
        if tmp is not None:
            tmp.unlink(missing_ok=True)
        raise WriteError(f"writing {dest} failed: {exc}") from exc
    log.debug("wrote %s (%d bytes, %s)", dest, len(data), fmt.value)

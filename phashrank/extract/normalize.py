"""Utilities for reducing decoded images to a fixed-size intensity matrix."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError
from PIL.Image import DecompressionBombError

from ..errors import DecodeError
from ..io.models import DEFAULT_SIZE

logger = logging.getLogger(__name__)

_PASSTHROUGH_MODES = {"RGB", "L"}
_WIDE_MODES = {"I", "F"}
_EIGHT_BIT_MAX = 255.0
_SIXTEEN_BIT_MAX = 65535.0


def decode_image(image_bytes: bytes) -> Image.Image:
    """Decode *image_bytes* into a fully loaded Pillow image."""
    if not image_bytes:
        raise DecodeError("Empty image payload cannot be decoded")

    try:
        with Image.open(BytesIO(image_bytes)) as img:
            img.load()
            return img.copy()
    except (
        UnidentifiedImageError,
        DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
        EOFError,
    ) as exc:
        logger.debug("Unable to decode %d byte payload", len(image_bytes), exc_info=True)
        raise DecodeError(f"Image payload could not be decoded: {exc}") from exc


def load_image(path: str | Path) -> Image.Image:
    """Read *path* and decode it, leaving filesystem errors untouched."""
    return decode_image(Path(path).read_bytes())


def to_intensity_matrix(img: Image.Image, size: int = DEFAULT_SIZE) -> np.ndarray:
    """Return a read-only *size* x *size* luma matrix with values in [0, 255].

    The image is resampled before grey conversion; the working resolution only
    bounds the cost of the DCT, it does not filter detail on its own.
    """
    if not isinstance(img, Image.Image):
        raise TypeError("to_intensity_matrix expects a PIL.Image.Image instance")
    if size <= 0:
        raise ValueError("Size must be a positive integer")

    width, height = img.size
    if width == 0 or height == 0:
        raise DecodeError("Image has no pixels")

    if img.mode.startswith("I;16") or img.mode in _WIDE_MODES:
        work_img = _to_eight_bit(img)
    elif img.mode not in _PASSTHROUGH_MODES:
        work_img = img.convert("RGB")
    else:
        work_img = img
    resized = work_img.resize((size, size), Image.Resampling.LANCZOS)
    gray = resized.convert("L")

    matrix = np.asarray(gray, dtype=np.float64).copy()
    matrix.flags.writeable = False
    return matrix


def _to_eight_bit(img: Image.Image) -> Image.Image:
    """Rescale a 16-bit, 32-bit integer or float image to an 8-bit "L" image.

    ``I;16`` data spans the full 16-bit range. ``I`` and ``F`` data is kept as
    is when it already fits 8 bits, divided down when it fits 16 bits, and
    min-max stretched otherwise.
    """
    values = np.asarray(img, dtype=np.float64)
    if img.mode.startswith("I;16"):
        values = values / (_SIXTEEN_BIT_MAX / _EIGHT_BIT_MAX)
    else:
        low, high = float(values.min()), float(values.max())
        if low < 0.0 or high > _SIXTEEN_BIT_MAX:
            span = high - low
            values = (values - low) * (_EIGHT_BIT_MAX / span) if span else np.zeros_like(values)
        elif high > _EIGHT_BIT_MAX:
            values = values / (_SIXTEEN_BIT_MAX / _EIGHT_BIT_MAX)
    pixels = np.clip(np.rint(values), 0, _EIGHT_BIT_MAX).astype(np.uint8)
    return Image.fromarray(pixels)

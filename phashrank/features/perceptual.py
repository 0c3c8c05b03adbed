"""Perceptual fingerprint computations."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from ..errors import ConfigurationError
from ..extract.normalize import decode_image, load_image, to_intensity_matrix
from ..io.models import (
    DEFAULT_POLICY,
    DEFAULT_SMALLER_SIZE,
    Fingerprint,
    HashConfig,
)
from .dct import dct2

_DEFAULT_CONFIG = HashConfig()


def low_frequency_threshold(block: np.ndarray) -> float:
    """Return the mean of *block* excluding the DC term at (0, 0)."""
    rows, cols = block.shape
    total = float(block.sum()) - float(block[0, 0])
    return total / (rows * cols - 1)


def fingerprint_from_coefficients(
    coefficients: np.ndarray,
    smaller_size: int = DEFAULT_SMALLER_SIZE,
    policy: str = DEFAULT_POLICY,
) -> Fingerprint:
    """Threshold the top-left block of *coefficients* into a fingerprint.

    Bits are emitted row-major over (vertical, horizontal) frequency. The
    threshold always averages every cell but the DC term; *policy* only
    decides which cells are emitted (see ``HashConfig``).
    """
    coeffs = np.asarray(coefficients, dtype=np.float64)
    if coeffs.ndim != 2 or coeffs.shape[0] != coeffs.shape[1]:
        raise ValueError(f"Expected a square coefficient matrix, got shape {coeffs.shape}")
    if not 2 <= smaller_size <= coeffs.shape[0]:
        raise ConfigurationError(
            f"smaller_size must be between 2 and {coeffs.shape[0]}, got {smaller_size}"
        )

    block = coeffs[:smaller_size, :smaller_size]
    above = block > low_frequency_threshold(block)

    if policy == "interior":
        cells = above[1:, 1:].ravel()
    elif policy == "no_dc":
        cells = above.ravel()[1:]
    else:
        raise ConfigurationError(f"Unknown bit policy: {policy!r}")

    return Fingerprint.from_bools(cells)


def compute_fingerprint(img: Image.Image, config: HashConfig = _DEFAULT_CONFIG) -> Fingerprint:
    """Return the perceptual fingerprint for a decoded image."""
    intensities = to_intensity_matrix(img, size=config.size)
    coefficients = dct2(intensities, method=config.dct_method)
    return fingerprint_from_coefficients(
        coefficients, smaller_size=config.smaller_size, policy=config.policy
    )


def fingerprint_bytes(image_bytes: bytes, config: HashConfig = _DEFAULT_CONFIG) -> Fingerprint:
    """Decode *image_bytes* and return its fingerprint."""
    with decode_image(image_bytes) as img:
        return compute_fingerprint(img, config)


def fingerprint_file(path: str | Path, config: HashConfig = _DEFAULT_CONFIG) -> Fingerprint:
    """Read the image at *path* and return its fingerprint."""
    with load_image(path) as img:
        return compute_fingerprint(img, config)

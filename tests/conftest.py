from __future__ import annotations

from io import BytesIO
from pathlib import Path

import numpy as np
import pytest
from PIL import Image


def _smooth_image(seed: int, side: int = 256) -> Image.Image:
    rng = np.random.default_rng(seed)
    base = rng.integers(0, 256, size=(6, 6, 3), dtype=np.uint8)
    return Image.fromarray(base, "RGB").resize((side, side), Image.Resampling.BICUBIC)


def _encode(img: Image.Image, fmt: str = "PNG", **params) -> bytes:
    buffer = BytesIO()
    img.save(buffer, format=fmt, **params)
    return buffer.getvalue()


@pytest.fixture
def smooth_image():
    """Factory for deterministic, low-frequency RGB test images."""
    return _smooth_image


@pytest.fixture
def encode():
    """Factory encoding a Pillow image to bytes in the given format."""
    return _encode


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """Directory holding two decodable images, one corrupt image and a text file."""
    directory = tmp_path / "images"
    directory.mkdir()
    (directory / "a.png").write_bytes(_encode(_smooth_image(1)))
    (directory / "b.jpg").write_bytes(_encode(_smooth_image(2), "JPEG", quality=90))
    (directory / "broken.png").write_bytes(b"this is not an image")
    (directory / "notes.txt").write_text("ignored", encoding="utf-8")
    return directory

from __future__ import annotations

import imagehash
import pytest
from PIL import Image

from phashrank.errors import ConfigurationError
from phashrank.io.models import Fingerprint, HashConfig, HashOutcome
from phashrank.rank.similarity import hamming_distance


def test_default_config():
    config = HashConfig()

    assert (config.size, config.smaller_size) == (32, 8)
    assert config.policy == "interior"
    assert config.bit_length == 49
    assert HashConfig(policy="no_dc").bit_length == 63


@pytest.mark.parametrize(
    "kwargs",
    [
        {"size": 1},
        {"smaller_size": 1},
        {"size": 8, "smaller_size": 9},
        {"policy": "everything"},
        {"dct_method": "wavelet"},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ConfigurationError):
        HashConfig(**kwargs)


def test_config_is_hashable_and_frozen():
    config = HashConfig()

    assert {config: 1}[HashConfig()] == 1
    with pytest.raises(AttributeError):
        config.size = 64  # type: ignore[misc]


def test_fingerprint_parsing():
    assert Fingerprint.from_bits(" 0101\n").bits == "0101"
    assert str(Fingerprint("110")) == "110"
    assert len(Fingerprint("110")) == 3
    assert Fingerprint.from_bools([True, False, True]).bits == "101"
    assert Fingerprint("101").to_bools() == [True, False, True]

    with pytest.raises(ValueError):
        Fingerprint("")
    with pytest.raises(ValueError):
        Fingerprint("01a1")
    with pytest.raises(TypeError):
        Fingerprint.from_bits(101)  # type: ignore[arg-type]


def test_image_hash_view_matches_hamming_distance():
    a = Fingerprint("0" * 49)
    b = Fingerprint("1" * 5 + "0" * 44)

    view_a = a.to_image_hash()
    assert view_a.hash.shape == (7, 7)
    assert view_a - b.to_image_hash() == hamming_distance(a, b)
    assert Fingerprint.from_image_hash(b.to_image_hash()) == b


def test_image_hash_view_requires_square_length():
    with pytest.raises(ValueError):
        Fingerprint("0" * 63).to_image_hash()


def test_from_image_hash_accepts_imagehash_output():
    img = Image.new("RGB", (64, 64), (200, 10, 10))

    fingerprint = Fingerprint.from_image_hash(imagehash.phash(img))

    assert len(fingerprint) == 64


def test_outcome_ok():
    assert HashOutcome("a", fingerprint=Fingerprint("01")).ok
    assert not HashOutcome("a", error="boom").ok

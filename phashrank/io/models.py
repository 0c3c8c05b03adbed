"""Data models shared across the fingerprinting and ranking pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, Literal, Tuple

import imagehash
import numpy as np

from ..errors import ConfigurationError

BitPolicy = Literal["interior", "no_dc"]
DCTMethod = Literal["matrix", "direct", "fft"]

BIT_POLICIES: Tuple[str, ...] = ("interior", "no_dc")
DCT_METHODS: Tuple[str, ...] = ("matrix", "direct", "fft")

DEFAULT_SIZE = 32
DEFAULT_SMALLER_SIZE = 8
DEFAULT_POLICY: BitPolicy = "interior"
DEFAULT_DCT_METHOD: DCTMethod = "matrix"

_BIT_CHARS = frozenset("01")


@dataclass(frozen=True, slots=True)
class HashConfig:
    """Parameters that must match for two fingerprints to be comparable.

    ``size`` is the working resolution fed to the DCT and ``smaller_size`` the
    side of the retained low-frequency block. ``policy`` selects which cells
    of that block become bits:

    * ``"interior"`` drops the whole first row and column, giving
      ``(smaller_size - 1) ** 2`` bits.
    * ``"no_dc"`` drops only the DC term, giving ``smaller_size ** 2 - 1`` bits.
    """

    size: int = DEFAULT_SIZE
    smaller_size: int = DEFAULT_SMALLER_SIZE
    policy: BitPolicy = DEFAULT_POLICY
    dct_method: DCTMethod = DEFAULT_DCT_METHOD

    def __post_init__(self) -> None:
        if self.size < 2:
            raise ConfigurationError(f"size must be at least 2, got {self.size}")
        if not 2 <= self.smaller_size <= self.size:
            raise ConfigurationError(
                f"smaller_size must be between 2 and size ({self.size}), "
                f"got {self.smaller_size}"
            )
        if self.policy not in BIT_POLICIES:
            raise ConfigurationError(f"Unknown bit policy: {self.policy!r}")
        if self.dct_method not in DCT_METHODS:
            raise ConfigurationError(f"Unknown DCT method: {self.dct_method!r}")

    @property
    def bit_length(self) -> int:
        """Number of bits in every fingerprint produced with this config."""
        return bit_length(self.smaller_size, self.policy)


def bit_length(smaller_size: int, policy: str) -> int:
    if policy == "interior":
        return (smaller_size - 1) ** 2
    if policy == "no_dc":
        return smaller_size * smaller_size - 1
    raise ConfigurationError(f"Unknown bit policy: {policy!r}")


@dataclass(frozen=True, slots=True)
class Fingerprint:
    """Fixed-length perceptual hash stored as a string of '0'/'1' characters."""

    bits: str

    def __post_init__(self) -> None:
        if not isinstance(self.bits, str):
            raise TypeError("Fingerprint bits must be provided as a string")
        if not self.bits:
            raise ValueError("Fingerprint must contain at least one bit")
        if not _BIT_CHARS.issuperset(self.bits):
            raise ValueError(f"Fingerprint may only contain '0' and '1': {self.bits!r}")

    def __len__(self) -> int:
        return len(self.bits)

    def __str__(self) -> str:
        return self.bits

    @classmethod
    def from_bits(cls, value: str) -> "Fingerprint":
        """Parse the textual form, tolerating surrounding whitespace."""
        if not isinstance(value, str):
            raise TypeError("Fingerprint text must be a string")
        return cls(value.strip())

    @classmethod
    def from_bools(cls, values: Iterable[bool]) -> "Fingerprint":
        return cls("".join("1" if value else "0" for value in values))

    def to_bools(self) -> list[bool]:
        return [char == "1" for char in self.bits]

    def to_int(self) -> int:
        return int(self.bits, 2)

    def to_image_hash(self) -> imagehash.ImageHash:
        """Return an ``imagehash.ImageHash`` view for square bit counts.

        The default ``interior`` layout (7x7 for an 8x8 block) maps onto a
        square grid, which lets the fingerprint be used with imagehash tooling
        (hex strings, ``-`` for Hamming distance).
        """
        side = math.isqrt(len(self.bits))
        if side * side != len(self.bits):
            raise ValueError(
                f"Only square bit counts convert to ImageHash, got {len(self.bits)} bits"
            )
        grid = np.array(self.to_bools(), dtype=bool).reshape(side, side)
        return imagehash.ImageHash(grid)

    @classmethod
    def from_image_hash(cls, value: imagehash.ImageHash) -> "Fingerprint":
        return cls.from_bools(bool(bit) for bit in np.asarray(value.hash).flatten())


@dataclass(frozen=True, slots=True)
class CorpusEntry:
    """A labelled fingerprint in a searchable corpus."""

    identifier: str
    fingerprint: Fingerprint


@dataclass(frozen=True, slots=True)
class RankedResult:
    """A corpus entry annotated with its distance to a query."""

    identifier: str
    fingerprint: Fingerprint
    distance: int


@dataclass(frozen=True, slots=True)
class HashOutcome:
    """Per-item result of a batch fingerprinting run."""

    identifier: str
    fingerprint: Fingerprint | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.fingerprint is not None and self.error is None


@dataclass(slots=True)
class BatchReport:
    """High-level summary of a batch fingerprinting run."""

    total: int
    hashed: int
    failed: int
    bit_length: int | None = None
    failures: Dict[str, str] = field(default_factory=dict)

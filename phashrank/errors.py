"""Exception types raised by the fingerprinting and ranking pipeline."""

from __future__ import annotations


class PHashError(Exception):
    """Base class for all phashrank errors."""


class DecodeError(PHashError, ValueError):
    """Raised when image bytes cannot be interpreted as a pixel grid."""


class ConfigurationError(PHashError, ValueError):
    """Raised for invalid or mismatched hashing configuration."""


class LengthMismatchError(ConfigurationError):
    """Raised when comparing fingerprints of different bit lengths."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(
            f"Cannot compare fingerprints of different lengths ({left} != {right})"
        )
        self.left = left
        self.right = right


class CorpusFormatError(PHashError, ValueError):
    """Raised when a corpus line does not match ``<identifier> <bits>``."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number

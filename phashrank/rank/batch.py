"""Batch fingerprinting with explicit per-item outcomes."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from tqdm import tqdm

from ..errors import DecodeError
from ..features.perceptual import fingerprint_file
from ..io.models import BatchReport, CorpusEntry, HashConfig, HashOutcome

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tif", ".tiff", ".webp"}


def iter_image_paths(directory: str | Path) -> Iterator[Path]:
    """Yield image files directly inside *directory*, sorted by name."""
    root = Path(directory)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")
    for path in sorted(root.iterdir()):
        if path.is_file() and path.suffix.lower() in IMAGE_SUFFIXES:
            yield path


def fingerprint_paths(
    paths: Iterable[str | Path],
    config: HashConfig,
    progress: bool = False,
) -> list[HashOutcome]:
    """Fingerprint every path, returning one outcome per input in order.

    Undecodable or unreadable files become failed outcomes instead of
    aborting the batch; anything else propagates.
    """
    path_list = [Path(path) for path in paths]
    outcomes: list[HashOutcome] = []
    iterator = tqdm(
        path_list, desc="Fingerprinting", unit="image", leave=False, disable=not progress
    )
    for path in iterator:
        try:
            fingerprint = fingerprint_file(path, config)
        except (DecodeError, OSError) as exc:
            logger.warning("Failed to fingerprint %s: %s", path, exc)
            outcomes.append(HashOutcome(path.name, error=str(exc)))
            continue
        logger.debug("Fingerprinted %s -> %s", path, fingerprint)
        outcomes.append(HashOutcome(path.name, fingerprint=fingerprint))
    return outcomes


def outcomes_to_corpus(outcomes: Iterable[HashOutcome]) -> list[CorpusEntry]:
    """Return corpus entries for the successful outcomes only."""
    return [
        CorpusEntry(outcome.identifier, outcome.fingerprint)
        for outcome in outcomes
        if outcome.ok and outcome.fingerprint is not None
    ]


def summarize(outcomes: Sequence[HashOutcome], config: HashConfig | None = None) -> BatchReport:
    """Return totals and failure messages for a batch run."""
    failures = {
        outcome.identifier: outcome.error or "unknown error"
        for outcome in outcomes
        if not outcome.ok
    }
    failed = sum(1 for outcome in outcomes if not outcome.ok)
    return BatchReport(
        total=len(outcomes),
        hashed=len(outcomes) - failed,
        failed=failed,
        bit_length=config.bit_length if config is not None else None,
        failures=failures,
    )

"""Reading and writing the ``<identifier> <bits>`` corpus line format."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..errors import CorpusFormatError
from ..rank.similarity import check_unique_identifiers
from .models import CorpusEntry, Fingerprint


def format_corpus_line(entry: CorpusEntry) -> str:
    """Return the corpus line for *entry* without a trailing newline."""
    identifier = entry.identifier
    unstorable = "\n" in identifier or "\r" in identifier
    if not identifier or identifier != identifier.strip() or unstorable:
        raise CorpusFormatError(f"Identifier cannot be stored: {identifier!r}")
    return f"{identifier} {entry.fingerprint.bits}"


def parse_corpus_line(line: str, line_number: int | None = None) -> CorpusEntry:
    """Parse a single corpus line.

    The fingerprint is everything after the last space, so identifiers such as
    file names may themselves contain spaces.
    """
    stripped = line.rstrip("\r\n").strip()
    identifier, sep, bits = stripped.rpartition(" ")
    identifier = identifier.rstrip()
    if not sep or not identifier:
        raise CorpusFormatError(f"expected '<identifier> <bits>', got {line!r}", line_number)
    try:
        fingerprint = Fingerprint.from_bits(bits)
    except ValueError as exc:
        raise CorpusFormatError(str(exc), line_number) from exc
    return CorpusEntry(identifier, fingerprint)


def parse_corpus(lines: Iterable[str]) -> list[CorpusEntry]:
    """Parse non-blank *lines* into corpus entries."""
    entries: list[CorpusEntry] = []
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        entries.append(parse_corpus_line(line, number))
    return entries


def read_corpus(path: Path) -> list[CorpusEntry]:
    """Read a corpus file, rejecting duplicate identifiers."""
    entries = parse_corpus(path.read_text(encoding="utf-8-sig").splitlines())
    check_unique_identifiers(entries)
    return entries


def read_corpus_dir(directory: Path) -> list[CorpusEntry]:
    """Read and concatenate every regular file in *directory* by name."""
    entries: list[CorpusEntry] = []
    for path in sorted(directory.iterdir()):
        if not path.is_file():
            continue
        entries.extend(parse_corpus(path.read_text(encoding="utf-8-sig").splitlines()))
    check_unique_identifiers(entries)
    return entries


def load_corpus(path: str | Path) -> list[CorpusEntry]:
    """Read a corpus from a single file or a directory of corpus files."""
    corpus_path = Path(path)
    if corpus_path.is_dir():
        return read_corpus_dir(corpus_path)
    if not corpus_path.exists():
        raise FileNotFoundError(f"Corpus does not exist: {corpus_path}")
    return read_corpus(corpus_path)


def write_corpus(path: Path, entries: Iterable[CorpusEntry]) -> Path:
    """Write *entries* to *path*, one newline-terminated line each."""
    lines = [format_corpus_line(entry) + "\n" for entry in entries]
    path.write_text("".join(lines), encoding="utf-8")
    return path

"""Command-line interface for the phashrank project."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable

from .errors import PHashError
from .features.perceptual import fingerprint_file
from .io.corpus import load_corpus, write_corpus
from .io.models import (
    BIT_POLICIES,
    DCT_METHODS,
    DEFAULT_DCT_METHOD,
    DEFAULT_POLICY,
    DEFAULT_SIZE,
    DEFAULT_SMALLER_SIZE,
    HashConfig,
    RankedResult,
)
from .io.outputs import write_ranking, write_report
from .rank.batch import fingerprint_paths, iter_image_paths, outcomes_to_corpus, summarize
from .rank.similarity import (
    DEFAULT_MATCH_THRESHOLD,
    DEFAULT_TOP_K,
    hamming_distance,
    rank,
    within_distance,
)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the fingerprinting tools."""
    parser = argparse.ArgumentParser(
        prog="phashrank",
        description="Compute DCT perceptual fingerprints and rank images by similarity.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=DEFAULT_SIZE,
        help=f"Working resolution fed to the DCT (default {DEFAULT_SIZE}).",
    )
    parser.add_argument(
        "--smaller-size",
        type=int,
        default=DEFAULT_SMALLER_SIZE,
        help=f"Side of the retained low-frequency block (default {DEFAULT_SMALLER_SIZE}).",
    )
    parser.add_argument(
        "--policy",
        choices=BIT_POLICIES,
        default=DEFAULT_POLICY,
        help="Which low-frequency cells become fingerprint bits.",
    )
    parser.add_argument(
        "--dct",
        choices=DCT_METHODS,
        default=DEFAULT_DCT_METHOD,
        help="How the DCT sum is evaluated; all methods give the same result.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    hash_parser = subparsers.add_parser("hash", help="Print the fingerprint of images.")
    hash_parser.add_argument("images", nargs="+", help="Image files to fingerprint.")

    compare_parser = subparsers.add_parser("compare", help="Compare two images.")
    compare_parser.add_argument("first", help="First image file.")
    compare_parser.add_argument("second", help="Second image file.")
    compare_parser.add_argument(
        "--threshold",
        type=int,
        default=DEFAULT_MATCH_THRESHOLD,
        help=f"Maximum distance reported as a match (default {DEFAULT_MATCH_THRESHOLD}).",
    )

    index_parser = subparsers.add_parser(
        "index", help="Fingerprint a directory of images into a corpus file."
    )
    index_parser.add_argument("directory", help="Directory containing images.")
    index_parser.add_argument("--out", required=True, help="Corpus file to write.")
    index_parser.add_argument(
        "--report",
        default=None,
        help="Optional path for a JSON summary of the run.",
    )
    index_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if any image fails to fingerprint.",
    )

    rank_parser = subparsers.add_parser(
        "rank", help="Rank a corpus by similarity to a query image."
    )
    rank_parser.add_argument("query", help="Query image file.")
    rank_parser.add_argument(
        "--corpus",
        required=True,
        help="Corpus file, or a directory of corpus files.",
    )
    rank_parser.add_argument(
        "-k",
        "--top",
        type=int,
        default=DEFAULT_TOP_K,
        help=f"Number of results to show (default {DEFAULT_TOP_K}).",
    )
    rank_parser.add_argument(
        "--max-distance",
        type=int,
        default=None,
        help="Only report entries within this Hamming distance.",
    )
    rank_parser.add_argument(
        "--out",
        default=None,
        help="Optional .csv or .parquet file for the full ranking.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def build_config(args: argparse.Namespace) -> HashConfig:
    """Return the hashing configuration selected on the command line."""
    return HashConfig(
        size=args.size,
        smaller_size=args.smaller_size,
        policy=args.policy,
        dct_method=args.dct,
    )


def _cmd_hash(args: argparse.Namespace, config: HashConfig) -> int:
    outcomes = fingerprint_paths(args.images, config)
    for outcome in outcomes:
        if outcome.ok:
            print(f"{outcome.identifier} {outcome.fingerprint}")
        else:
            print(f"[warn] {outcome.identifier}: {outcome.error}", file=sys.stderr)
    return 0 if all(outcome.ok for outcome in outcomes) else 1


def _cmd_compare(args: argparse.Namespace, config: HashConfig) -> int:
    first = fingerprint_file(args.first, config)
    second = fingerprint_file(args.second, config)
    distance = hamming_distance(first, second)
    verdict = "match" if distance <= args.threshold else "different"
    print(f"[{args.first}] : [{args.second}] distance {distance} ({verdict})")
    return 0


def _cmd_index(args: argparse.Namespace, config: HashConfig) -> int:
    directory = Path(args.directory)
    paths = list(iter_image_paths(directory))
    print(f"[index] {len(paths)} images in {directory}")
    outcomes = fingerprint_paths(paths, config, progress=True)
    for outcome in outcomes:
        if not outcome.ok:
            print(f"[warn] {outcome.identifier}: {outcome.error}", file=sys.stderr)

    corpus_path = Path(args.out)
    corpus_path.parent.mkdir(parents=True, exist_ok=True)
    entries = outcomes_to_corpus(outcomes)
    write_corpus(corpus_path, entries)
    print(f"[index] wrote {len(entries)} entries to {corpus_path}")

    report = summarize(outcomes, config)
    if args.report:
        report_path = write_report(Path(args.report), report)
        print(f"[index] report written to {report_path}")
    if args.strict and report.failed:
        return 1
    return 0


def _cmd_rank(args: argparse.Namespace, config: HashConfig) -> int:
    query = fingerprint_file(args.query, config)
    corpus = load_corpus(args.corpus)
    print(f"[rank] {len(corpus)} corpus entries, query {query}")

    if args.max_distance is not None:
        results = within_distance(query, corpus, args.max_distance)
    else:
        results = rank(query, corpus)

    if args.out:
        table_path = write_ranking(Path(args.out), results)
        print(f"[rank] full ranking written to {table_path}")

    top = results[: max(0, args.top)]
    _print_ranking(top)
    return 0


def _print_ranking(results: list[RankedResult]) -> None:
    if not results:
        print("[rank] no matching entries")
        return
    print(f"[rank] top {len(results)} most similar:")
    for index, result in enumerate(results, start=1):
        print(f"  {index}. {result.identifier}  {result.distance}")


_COMMANDS = {
    "hash": _cmd_hash,
    "compare": _cmd_compare,
    "index": _cmd_index,
    "rank": _cmd_rank,
}


def main(argv: Iterable[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = build_config(args)
        return _COMMANDS[args.command](args, config)
    except (PHashError, OSError) as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

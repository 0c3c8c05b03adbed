"""Output helpers for persisting ranking results and batch reports."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

import pandas as pd

from .models import BatchReport, RankedResult

RANKING_COLUMNS = ["rank", "identifier", "distance", "fingerprint"]


def ranking_frame(results: Sequence[RankedResult]) -> pd.DataFrame:
    """Return *results* as a DataFrame in ranked order."""
    rows = [
        {
            "rank": position,
            "identifier": result.identifier,
            "distance": result.distance,
            "fingerprint": result.fingerprint.bits,
        }
        for position, result in enumerate(results, start=1)
    ]
    return pd.DataFrame(rows, columns=RANKING_COLUMNS)


def write_ranking(path: Path, results: Sequence[RankedResult]) -> Path:
    """Write *results* to *path* as Parquet (``.parquet``) or CSV and return the path."""
    df = ranking_frame(results)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".parquet":
        df.to_parquet(path, index=False, engine="pyarrow")
    else:
        df.to_csv(path, index=False)
    return path


def write_report(path: Path, report: BatchReport) -> Path:
    """Write a batch report to *path* as JSON and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(report), indent=2), encoding="utf-8")
    return path

"""data_processor.py

Turn the raw, index-aligned text columns from one listing page into
MovieRecord rows and a pandas DataFrame.

Design notes:
- Columns are zipped, never filtered one by one; a length mismatch means the
  extraction lost alignment and is raised rather than papered over.
- Missing metascores, votes etc. stay missing (NaN in the frame); nothing is
  imputed.
- The genre list is additionally spread over fixed-width columns
  genre_1 .. genre_4 for plotting.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from listing_scraper import MAX_GENRES, clean_text, parse_genres, parse_runtime, parse_votes, parse_year
from ratings_bar import split_ratings_bars

logger = logging.getLogger("imdb-listing.data")

RAW_FIELDS = ("title", "year", "runtime", "genre", "ratings_bar", "votes", "description")
COLUMNS = ["title", "year", "genre", "runtime", "rating", "metascore", "votes", "description"]


@dataclass(frozen=True)
class MovieRecord:
    title: str
    year: Optional[int]
    genre: Tuple[str, ...] = ()
    runtime: Optional[int] = None
    rating: Optional[float] = None
    metascore: Optional[int] = None
    votes: Optional[int] = None
    description: str = ""

    def __post_init__(self) -> None:
        # lists passed in are stored as tuples
        object.__setattr__(self, "genre", tuple(self.genre))

    def to_dict(self) -> Dict:
        d = asdict(self)
        d["genre"] = list(self.genre)
        return d


def check_alignment(columns: Dict[str, Sequence]) -> int:
    """Return the shared column length or raise if the columns disagree."""
    lengths = {name: len(values) for name, values in columns.items()}
    if len(set(lengths.values())) > 1:
        raise ValueError(f"raw columns are not index-aligned: {lengths}")
    return next(iter(lengths.values()), 0)


def assemble_records(raw: Dict[str, Sequence[Optional[str]]]) -> List[MovieRecord]:
    missing = [name for name in RAW_FIELDS if name not in raw]
    if missing:
        raise ValueError(f"raw columns missing: {missing}")

    n = check_alignment({name: raw[name] for name in RAW_FIELDS})
    ratings, metascores = split_ratings_bars(raw["ratings_bar"])

    records: List[MovieRecord] = []
    for i in range(n):
        records.append(
            MovieRecord(
                title=clean_text(raw["title"][i]) or "",
                year=parse_year(raw["year"][i]),
                genre=tuple(parse_genres(raw["genre"][i])),
                runtime=parse_runtime(raw["runtime"][i]),
                rating=ratings[i],
                metascore=metascores[i],
                votes=parse_votes(raw["votes"][i]),
                description=clean_text(raw["description"][i]) or "",
            )
        )
    logger.info("Assembled %d records", len(records))
    return records


def build_dataframe(records: Sequence[MovieRecord]) -> pd.DataFrame:
    df = pd.DataFrame([r.to_dict() for r in records], columns=COLUMNS)
    # nullable ints so a missing metascore does not turn the column into floats
    df["year"] = pd.to_numeric(df["year"], errors="coerce").astype("Int64")
    df["runtime"] = pd.to_numeric(df["runtime"], errors="coerce").astype("Int64")
    df["rating"] = pd.to_numeric(df["rating"], errors="coerce").astype(float)
    df["metascore"] = pd.to_numeric(df["metascore"], errors="coerce").astype("Int64")
    df["votes"] = pd.to_numeric(df["votes"], errors="coerce").astype("Int64")
    df["genre"] = df["genre"].apply(lambda g: list(g) if isinstance(g, (list, tuple)) else [])
    return df


def split_genre_columns(df: pd.DataFrame, width: int = MAX_GENRES) -> pd.DataFrame:
    """Add genre_1 .. genre_<width> (missing cells are None)."""
    df = df.copy()
    for i in range(width):
        df[f"genre_{i + 1}"] = pd.Series(
            [g[i] if len(g) > i else None for g in df["genre"]], index=df.index, dtype=object
        )
    return df


def describe_missing(df: pd.DataFrame) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for col in ["year", "runtime", "rating", "metascore", "votes"]:
        if col in df.columns:
            counts[col] = int(df[col].isna().sum())
    counts["genre"] = int(df["genre"].apply(len).eq(0).sum()) if "genre" in df.columns else 0
    counts["description"] = int(df["description"].eq("").sum()) if "description" in df.columns else 0
    return counts


def numeric_summary(df: pd.DataFrame) -> Dict[str, Dict[str, float]]:
    """Mean/median/min/max per numeric column, NaN-free for the report."""
    out: Dict[str, Dict[str, float]] = {}
    for col in ["rating", "metascore", "runtime", "votes"]:
        s = pd.to_numeric(df[col], errors="coerce").astype(float).dropna()
        if s.empty:
            continue
        out[col] = {
            "count": int(s.count()),
            "mean": float(np.mean(s)),
            "median": float(np.median(s)),
            "min": float(s.min()),
            "max": float(s.max()),
        }
    return out

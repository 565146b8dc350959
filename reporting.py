"""Ranking, filtering, charts and the correlation test for one listing table.

Two charts are produced:

* runtime distribution stacked by primary genre;
* user rating against metascore, with a least-squares line.

The correlation test runs on the rows where both columns are present, so a
title without a metascore simply drops out of the statistic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from scipy import stats

logger = logging.getLogger("imdb-listing.reporting")

MIN_CORRELATION_ROWS = 3


@dataclass(frozen=True)
class CorrelationResult:
    x: str
    y: str
    method: str
    n: int
    statistic: float
    p_value: float


def top_rated(df: pd.DataFrame, n: int = 10, by: str = "rating") -> pd.DataFrame:
    ranked = df.sort_values(by, ascending=False, na_position="last", kind="mergesort")
    return ranked.head(n).reset_index(drop=True)


def filter_movies(
    df: pd.DataFrame,
    genre: Optional[str] = None,
    min_rating: Optional[float] = None,
    min_votes: Optional[int] = None,
    max_runtime: Optional[int] = None,
) -> pd.DataFrame:
    """Keep rows matching every given condition; a missing value never matches."""
    mask = pd.Series(True, index=df.index)
    if genre is not None:
        wanted = genre.strip().lower()
        mask &= df["genre"].apply(lambda gs: any(g.lower() == wanted for g in gs)).astype(bool)
    if min_rating is not None:
        mask &= (df["rating"] >= min_rating).fillna(False).astype(bool)
    if min_votes is not None:
        mask &= (df["votes"] >= min_votes).fillna(False).astype(bool)
    if max_runtime is not None:
        mask &= (df["runtime"] <= max_runtime).fillna(False).astype(bool)
    return df[mask].reset_index(drop=True)


def genre_counts(df: pd.DataFrame, column: str = "genre_1") -> pd.Series:
    return df[column].dropna().value_counts()


def correlation_test(
    df: pd.DataFrame, x: str = "rating", y: str = "metascore", method: str = "pearson"
) -> CorrelationResult:
    pair = df[[x, y]].apply(pd.to_numeric, errors="coerce").astype(float).dropna()
    if len(pair) < MIN_CORRELATION_ROWS:
        raise ValueError(
            f"need at least {MIN_CORRELATION_ROWS} rows with both {x} and {y}, got {len(pair)}"
        )
    if pair[x].nunique() < 2 or pair[y].nunique() < 2:
        raise ValueError(f"{x} or {y} is constant across the {len(pair)} complete rows")

    if method == "pearson":
        statistic, p_value = stats.pearsonr(pair[x], pair[y])
    elif method == "spearman":
        statistic, p_value = stats.spearmanr(pair[x], pair[y])
    else:
        raise ValueError(f"unknown correlation method: {method}")

    result = CorrelationResult(
        x=x, y=y, method=method, n=len(pair), statistic=float(statistic), p_value=float(p_value)
    )
    logger.info("%s correlation %s~%s: r=%.4f p=%.4g n=%d", method, x, y, result.statistic, result.p_value, result.n)
    return result


def format_correlation(result: CorrelationResult) -> str:
    return (
        f"{result.method.capitalize()} correlation between {result.x} and {result.y}: "
        f"r = {result.statistic:.3f}, p-value = {result.p_value:.3g} (n = {result.n})"
    )


def _save_figure(fig: plt.Figure, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    logger.info("Saved chart %s", path)


def plot_runtime_by_genre(df: pd.DataFrame, output_path: Path) -> bool:
    """Stacked runtime histogram coloured by primary genre; False when there is no data."""
    data = df.dropna(subset=["runtime"]).copy()
    if data.empty:
        logger.info("No runtimes to plot")
        return False
    data["runtime"] = data["runtime"].astype(float)
    data["genre_1"] = data["genre_1"].fillna("Unknown")

    # one distinct runtime leaves binwidth no range; use one bin centred on it
    if data["runtime"].nunique() < 2:
        lo, hi = data["runtime"].min(), data["runtime"].max()
        bin_args = {"bins": np.arange(lo - 5, hi + 15, 10)}
    else:
        bin_args = {"binwidth": 10}

    fig, ax = plt.subplots(figsize=(10, 6))
    sns.histplot(data=data, x="runtime", hue="genre_1", multiple="stack", ax=ax, **bin_args)
    ax.set_xlabel("Runtime (minutes)")
    ax.set_ylabel("Titles")
    ax.set_title("Runtime by primary genre")
    _save_figure(fig, output_path)
    return True


def plot_rating_vs_metascore(df: pd.DataFrame, output_path: Path) -> bool:
    data = df.dropna(subset=["rating", "metascore"]).copy()
    if data.empty:
        logger.info("No rows with both rating and metascore to plot")
        return False
    data["rating"] = data["rating"].astype(float)
    data["metascore"] = data["metascore"].astype(float)
    data["genre_1"] = data["genre_1"].fillna("Unknown")

    fig, ax = plt.subplots(figsize=(9, 7))
    sns.scatterplot(data=data, x="metascore", y="rating", hue="genre_1", alpha=0.8, ax=ax)

    if len(data) >= 2 and data["metascore"].nunique() > 1:
        fit = stats.linregress(data["metascore"], data["rating"])
        xs = np.linspace(data["metascore"].min(), data["metascore"].max(), 50)
        ax.plot(xs, fit.intercept + fit.slope * xs, color="#1f4e79", linewidth=1.5)

    ax.set_xlabel("Metascore")
    ax.set_ylabel("IMDb user rating")
    ax.set_title("User rating vs. metascore")
    sns.move_legend(ax, "lower right", title="Genre", fontsize=8)
    _save_figure(fig, output_path)
    return True


def _fmt(value, format_spec: str = "") -> str:
    if value is None or pd.isna(value):
        return "–"
    return format(value, format_spec)


def create_report(
    df: pd.DataFrame,
    top: pd.DataFrame,
    correlation: Optional[CorrelationResult],
    charts: Dict[str, Path],
    output_path: Path,
    source_url: Optional[str] = None,
) -> None:
    """Write a Markdown report: ranking table, correlation and chart links."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    lines = ["# IMDb listing analysis", ""]
    if source_url:
        lines.append(f"* Source: [{source_url}]({source_url})")
    lines.append(f"* Titles on the page: {len(df)}")
    lines.append(f"* Titles with a metascore: {int(df['metascore'].notna().sum())}")
    lines.append("")

    lines.extend(["## Correlation", ""])
    if correlation is not None:
        lines.append(format_correlation(correlation))
    else:
        lines.append("Not enough titles with both a rating and a metascore, or one of them never varies.")

    lines.extend(
        [
            "",
            "## Top rated",
            "",
            "| # | Title | Year | Genre | Runtime (min) | Rating | Metascore | Votes |",
            "| ---: | --- | ---: | --- | ---: | ---: | ---: | ---: |",
        ]
    )
    for pos, row in enumerate(top.itertuples(index=False), start=1):
        lines.append(
            f"| {pos} | {row.title} | {_fmt(row.year)} | {', '.join(row.genre)} | {_fmt(row.runtime)} | "
            f"{_fmt(row.rating, '.1f')} | {_fmt(row.metascore)} | {_fmt(row.votes, ',')} |"
        )

    counts = genre_counts(df) if "genre_1" in df.columns else pd.Series(dtype=int)
    if not counts.empty:
        lines.extend(["", "## Primary genres", "", "| Genre | Titles |", "| --- | ---: |"])
        for genre, count in counts.items():
            lines.append(f"| {genre} | {int(count)} |")

    if charts:
        lines.extend(["", "## Charts", ""])
        for name, path in charts.items():
            rel = path.name if path.parent == output_path.parent else str(path)
            lines.append(f"![{name}]({rel})")

    lines.append("")
    output_path.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Wrote report to %s", output_path)

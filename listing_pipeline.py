"""
IMDb listing scrape + table + charts + correlation, in one pass.

Usage:
  python listing_pipeline.py --year 2016 --count 100 --out-dir output
  python listing_pipeline.py --html-file saved_listing.html

Outputs (in --out-dir):
  - runtime_by_genre.png      : runtime histogram stacked by primary genre
  - rating_vs_metascore.png   : user rating against metascore
  - report.md                 : top-rated table, correlation, chart links
The correlation test result is also printed to stdout.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd
import seaborn as sns

from data_processor import assemble_records, build_dataframe, describe_missing, numeric_summary, split_genre_columns
from listing_scraper import (
    DEFAULT_COUNT,
    DEFAULT_YEAR,
    build_search_url,
    extract_raw_fields,
    fetch_listing,
    fetch_listing_with_browser,
)
from reporting import (
    CorrelationResult,
    correlation_test,
    create_report,
    format_correlation,
    plot_rating_vs_metascore,
    plot_runtime_by_genre,
    top_rated,
)

logger = logging.getLogger("imdb-listing")

# ---- Configuration ----
DEFAULT_OUT_DIR = Path("output")
DEFAULT_TOP_N = 10


def run_pipeline(
    url: Optional[str] = None,
    out_dir: Path = DEFAULT_OUT_DIR,
    top_n: int = DEFAULT_TOP_N,
    use_browser: bool = False,
    html: Optional[str] = None,
    expected_count: Optional[int] = None,
) -> Tuple[pd.DataFrame, Optional[CorrelationResult]]:
    """
    Orchestrate fetch -> extract -> split -> assemble -> report.
    Passing ``html`` skips the network entirely.
    """
    url = url or build_search_url()
    if html is None:
        html = fetch_listing_with_browser(url) if use_browser else fetch_listing(url)

    raw = extract_raw_fields(html)
    records = assemble_records(raw)
    if not records:
        logger.warning("Listing page had no items; is the layout or URL still valid? (%s)", url)
    elif expected_count is not None and len(records) != expected_count:
        logger.warning("Expected %d items on the page, found %d", expected_count, len(records))

    df = split_genre_columns(build_dataframe(records))
    logger.info("Missing values per column: %s", describe_missing(df))
    logger.info("Numeric summary: %s", numeric_summary(df))

    correlation = None
    try:
        correlation = correlation_test(df, "rating", "metascore")
    except ValueError as e:
        logger.warning("Skipping correlation test: %s", e)
    else:
        print(format_correlation(correlation))

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    sns.set_theme(style="whitegrid")

    charts = {}
    runtime_png = out_dir / "runtime_by_genre.png"
    if plot_runtime_by_genre(df, runtime_png):
        charts["Runtime by primary genre"] = runtime_png
    scatter_png = out_dir / "rating_vs_metascore.png"
    if plot_rating_vs_metascore(df, scatter_png):
        charts["User rating vs. metascore"] = scatter_png

    top = top_rated(df, n=top_n)
    create_report(df, top, correlation, charts, out_dir / "report.md", source_url=url)

    return df, correlation


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Scrape one IMDb listing page and summarise it")
    p.add_argument("--year", type=int, default=DEFAULT_YEAR, help=f"Release year (default {DEFAULT_YEAR})")
    p.add_argument("--count", type=int, default=DEFAULT_COUNT, help=f"Titles on the page (default {DEFAULT_COUNT})")
    p.add_argument("--url", help="Listing URL; overrides --year/--count")
    p.add_argument("--out-dir", type=Path, default=DEFAULT_OUT_DIR, help="Where charts and report go")
    p.add_argument("--top", type=int, default=DEFAULT_TOP_N, help="Rows in the top-rated table")
    p.add_argument("--browser", action="store_true", help="Load the page with headless Chrome")
    p.add_argument("--html-file", type=Path, help="Parse a saved listing page instead of fetching")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = p.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level))

    url = args.url or build_search_url(year=args.year, count=args.count)
    html = args.html_file.read_text(encoding="utf-8") if args.html_file else None
    expected = None if (args.url or args.html_file) else args.count

    df, _ = run_pipeline(
        url=url,
        out_dir=args.out_dir,
        top_n=args.top,
        use_browser=args.browser,
        html=html,
        expected_count=expected,
    )
    logger.info("Pipeline finished. Records=%d, output in %s", len(df), args.out_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

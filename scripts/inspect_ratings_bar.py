#!/usr/bin/env python3
"""Print each raw ratings-bar blob next to the parsed (rating, metascore).

Handy when IMDb tweaks the listing markup:
  python scripts/inspect_ratings_bar.py --year 2016 --count 50
  python scripts/inspect_ratings_bar.py --html-file saved_listing.html
"""
import argparse
import logging
from pathlib import Path

from listing_scraper import FIELD_SELECTORS, build_search_url, extract_field, fetch_listing, select_listing_items
from ratings_bar import split_ratings_bar


def main(argv=None):
    p = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    p.add_argument("--year", type=int, default=2016)
    p.add_argument("--count", type=int, default=50)
    p.add_argument("--html-file", type=Path)
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.WARNING)

    if args.html_file:
        html = args.html_file.read_text(encoding="utf-8")
    else:
        html = fetch_listing(build_search_url(year=args.year, count=args.count))

    items = select_listing_items(html)
    titles = extract_field(items, FIELD_SELECTORS["title"])
    blobs = extract_field(items, FIELD_SELECTORS["ratings_bar"])
    for i, (title, blob) in enumerate(zip(titles, blobs), start=1):
        rating, metascore = split_ratings_bar(blob)
        print(f"{i:3d}. {title}")
        print("     raw_ratings_bar:", blob)
        print("     parsed:", rating, metascore)


if __name__ == "__main__":
    main()

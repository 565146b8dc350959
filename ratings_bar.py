"""Split the listing's ratings-bar text into (user rating, metascore).

A ratings bar reads roughly like::

    8.1 Rate this 1 2 3 4 5 6 7 8 9 10 8.1/10 X 75 Metascore

The leading number is the user rating. The metascore, when the title has one,
is the integer directly in front of the literal ``Metascore``. The star widget
in between is dropped first so its digits never leak into either value.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger("imdb-listing.ratings_bar")

METASCORE_LABEL = "Metascore"

_WIDGET_RE = re.compile(r"Rate this(?:\s+\d+(?![\d.]|\s*/))*(?:\s+\d+(?:\.\d+)?\s*/\s*10)?(?:\s+X\b)?", re.I)
_METASCORE_RE = re.compile(r"(\d+)\s*" + METASCORE_LABEL, re.I)
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def split_ratings_bar(text: Optional[str]) -> Tuple[Optional[float], Optional[int]]:
    if not text:
        return None, None

    s = _WIDGET_RE.sub(" ", str(text))

    metascore = None
    m = _METASCORE_RE.search(s)
    if m:
        metascore = int(m.group(1))
        s = s[: m.start()] + " " + s[m.end():]

    rating = None
    m = _NUMBER_RE.search(s)
    if m:
        rating = float(m.group(0))

    return rating, metascore


def split_ratings_bars(
    blobs: Sequence[Optional[str]],
) -> Tuple[List[Optional[float]], List[Optional[int]]]:
    """Split every row; both result lists line up index-for-index with ``blobs``."""
    ratings: List[Optional[float]] = []
    metascores: List[Optional[int]] = []
    for blob in blobs:
        rating, metascore = split_ratings_bar(blob)
        ratings.append(rating)
        metascores.append(metascore)

    logger.info(
        "Split %d ratings bars: %d without rating, %d without metascore",
        len(blobs),
        sum(r is None for r in ratings),
        sum(m is None for m in metascores),
    )
    return ratings, metascores

"""Shared fixtures: a small listing page in the IMDb advanced-search layout."""

from __future__ import annotations

from typing import Callable, Optional

import pytest

STAR_WIDGET = (
    '<div class="inline-block ratings-user-rating">'
    '<span class="userRatingValue"><span name="ur" data-value="0" class="rate">Rate this</span></span>'
    '<div class="starBarWidget"><div class="rating rating-list">'
    '<span class="rating-bg">&nbsp;</span>'
    '<span class="rating-stars">'
    + "".join(f'<a href="#" rel="nofollow" title="Click to rate: {n}"><span>{n}</span></a>' for n in range(1, 11))
    + "</span>"
    '<span class="rating-rating "><span class="value">{rating}</span><span class="grey">/</span>'
    '<span class="grey">10</span></span>'
    '<span class="rating-cancel "><a href="#" rel="nofollow"><span>X</span></a></span>&nbsp;'
    "</div></div></div>"
)


def _ratings_bar(rating: Optional[str], metascore: Optional[str]) -> str:
    if rating is None:
        return ""
    meta = ""
    if metascore is not None:
        meta = (
            '<div class="inline-block ratings-metascore">'
            f'<span class="metascore  favorable">{metascore}        </span>\n        Metascore\n            </div>'
        )
    return (
        '<div class="ratings-bar">'
        f'<div class="inline-block ratings-imdb-rating" name="ir" data-value="{rating}">'
        f'<span class="global-sprite rating-star imdb-rating"></span><strong>{rating}</strong></div>'
        + STAR_WIDGET.replace("{rating}", rating)
        + meta
        + "</div>"
    )


def build_item(
    index: int,
    title: str,
    year: str = "(2016)",
    runtime: Optional[str] = "120 min",
    genre: Optional[str] = "Drama",
    rating: Optional[str] = "7.0",
    metascore: Optional[str] = "70",
    votes: Optional[str] = "1,000",
    description: str = "A plot.",
    gross: Optional[str] = "$1.00M",
) -> str:
    runtime_html = f'<span class="ghost">|</span><span class="runtime">{runtime}</span>' if runtime else ""
    genre_html = f'<span class="ghost">|</span><span class="genre">\n{genre}            </span>' if genre else ""
    parts = []
    if votes is not None:
        parts.append(
            '<span class="text-muted">Votes:</span>'
            f'<span name="nv" data-value="{votes.replace(",", "")}">{votes}</span>'
        )
    if gross is not None:
        parts.append(f'<span class="text-muted">Gross:</span><span name="nv" data-value="1">{gross}</span>')
    votes_html = ""
    if parts:
        votes_html = '<p class="sort-num_votes-visible">' + '<span class="ghost">|</span>'.join(parts) + "</p>"
    return (
        '<div class="lister-item mode-advanced">'
        '<div class="lister-item-image float-left"><a href="#"><img alt="poster"/></a></div>'
        '<div class="lister-item-content">'
        '<h3 class="lister-item-header">'
        f'<span class="lister-item-index unbold text-primary">{index}.</span>\n'
        f'<a href="/title/tt{index:07d}/">{title}</a>\n'
        f'<span class="lister-item-year text-muted unbold">{year}</span></h3>'
        f'<p class="text-muted "><span class="certificate">PG-13</span>{runtime_html}{genre_html}</p>'
        + _ratings_bar(rating, metascore)
        + f'<p class="text-muted">\n    {description}</p>'
        '<p class="">Director: <a href="#">Someone</a></p>'
        + votes_html
        + "</div></div>"
    )


def build_page(*items: str) -> str:
    return (
        "<html><head><title>Feature Film, Released between 2016-01-01 and 2016-12-31</title></head>"
        '<body><div class="lister list detail sub-list"><div class="lister-list">'
        + "".join(items)
        + "</div></div></body></html>"
    )


@pytest.fixture
def make_item() -> Callable[..., str]:
    return build_item


@pytest.fixture
def make_page() -> Callable[..., str]:
    return build_page


@pytest.fixture
def listing_html() -> str:
    """Four titles: full row, full row, no metascore, and an unrated upcoming title."""
    return build_page(
        build_item(
            1,
            "Suicide Squad",
            runtime="123 min",
            genre="Action, Adventure, Fantasy",
            rating="6.2",
            metascore="40",
            votes="636,948",
            description="A secret government agency recruits some of the most dangerous incarcerated super-villains.",
        ),
        build_item(
            2,
            "La La Land",
            runtime="128 min",
            genre="Comedy, Drama, Music",
            rating="8.0",
            metascore="93",
            votes="580,012",
            description="While navigating their careers in Los Angeles, a pianist and an actress fall in love.",
        ),
        build_item(
            3,
            "Hacksaw Ridge",
            year="(I) (2016)",
            runtime="139 min",
            genre="Biography, Drama, History",
            rating="8.1",
            metascore=None,
            votes="400,123",
            description="World War II American Army Medic Desmond T. Doss serves during the Battle of Okinawa.",
        ),
        build_item(
            4,
            "Untitled Project",
            runtime=None,
            genre="Drama",
            rating=None,
            metascore=None,
            votes=None,
            description="Plot unknown.",
        ),
    )

"""listing_scraper.py

Fetch one IMDb advanced-search listing page and pull raw text per field.

Design notes
- Exactly one request per run: requests by default, or headless Chrome
  (Selenium) when the plain GET gets a bot-check page.
- Each field is selected *inside* its listing item, so a missing node becomes
  None at that row instead of shifting every later row.
- Coercion helpers never raise: unparseable text -> None.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

import requests
from bs4 import BeautifulSoup
from bs4.element import Tag
from selenium import webdriver
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

logger = logging.getLogger("imdb-listing.scraper")

# ---- Configuration ----
SEARCH_URL_TEMPLATE = (
    "https://www.imdb.com/search/title/"
    "?count={count}&release_date={year},{year}&title_type={title_type}"
)
DEFAULT_YEAR = 2016
DEFAULT_COUNT = 100
DEFAULT_TITLE_TYPE = "feature"
UA = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
REQUEST_TIMEOUT = 15
PAGE_LOAD_WAIT = 10  # seconds max for WebDriverWait
MAX_GENRES = 4

ITEM_SELECTOR = "div.lister-item.mode-advanced"
FIELD_SELECTORS: Dict[str, str] = {
    "title": ".lister-item-header a",
    "year": ".lister-item-header .lister-item-year",
    "runtime": ".text-muted .runtime",
    "genre": ".text-muted .genre",
    "ratings_bar": ".ratings-bar",
    # the Gross figure shares name="nv"; anchor on the Votes label
    "votes": '.sort-num_votes-visible span.text-muted:-soup-contains("Votes") + span[name=nv]',
    # runtime/genre line is the first p.text-muted, the blurb is the second
    "description": ".lister-item-content p.text-muted:nth-of-type(2)",
}


def build_search_url(
    year: int = DEFAULT_YEAR,
    count: int = DEFAULT_COUNT,
    title_type: str = DEFAULT_TITLE_TYPE,
) -> str:
    return SEARCH_URL_TEMPLATE.format(year=year, count=count, title_type=title_type)


def fetch_listing(url: str, session: Optional[requests.Session] = None) -> str:
    """GET the listing page and return its HTML.

    No retries: a non-2xx response raises ``requests.HTTPError`` and
    connection problems surface as the underlying ``requests`` exception.
    """
    if session is None:
        session = requests.Session()
        session.headers.update({"User-Agent": UA, "Accept-Language": "en-US,en;q=0.8"})
    logger.info("Fetching listing page: %s", url)
    resp = session.get(url, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    logger.info("Fetched %d bytes (status %d)", len(resp.content), resp.status_code)
    return resp.text


def setup_driver(headless: bool = True) -> webdriver.Chrome:
    options = Options()
    if headless:
        options.add_argument("--headless=new")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--window-size=1920,1080")
    options.add_argument("--disable-blink-features=AutomationControlled")
    options.add_argument(f"--user-agent={UA}")

    # Block heavy resources; the listing text is all we read
    prefs = {
        "profile.managed_default_content_settings.images": 2,
        "profile.managed_default_content_settings.stylesheets": 2,
        "profile.managed_default_content_settings.fonts": 2,
    }
    options.add_experimental_option("prefs", prefs)

    service = Service(ChromeDriverManager().install())
    return webdriver.Chrome(service=service, options=options)


def fetch_listing_with_browser(url: str, headless: bool = True) -> str:
    """Load the listing once in Chrome and return the rendered page source."""
    logger.info("Fetching listing page via Chrome: %s", url)
    driver = setup_driver(headless=headless)
    try:
        driver.get(url)
        WebDriverWait(driver, PAGE_LOAD_WAIT).until(
            EC.presence_of_element_located((By.CSS_SELECTOR, ITEM_SELECTOR))
        )
        return driver.page_source
    finally:
        driver.quit()


# ---- Field extraction ----
def clean_text(text: Optional[str]) -> Optional[str]:
    """Collapse runs of whitespace; empty strings become None."""
    if text is None:
        return None
    s = re.sub(r"\s+", " ", text).strip()
    return s or None


def select_listing_items(html: str, item_selector: str = ITEM_SELECTOR) -> List[Tag]:
    soup = BeautifulSoup(html, "html.parser")
    items = soup.select(item_selector)
    logger.info("Found %d listing items (%s)", len(items), item_selector)
    return items


def extract_field(items: List[Tag], selector: str) -> List[Optional[str]]:
    values: List[Optional[str]] = []
    for item in items:
        node = item.select_one(selector)
        values.append(clean_text(node.get_text(" ")) if node is not None else None)
    return values


def extract_raw_fields(
    html: str,
    selectors: Optional[Dict[str, str]] = None,
    item_selector: str = ITEM_SELECTOR,
) -> Dict[str, List[Optional[str]]]:
    """Return one raw text column per field, all of length ``len(items)``."""
    fields = dict(FIELD_SELECTORS)
    if selectors:
        fields.update(selectors)

    items = select_listing_items(html, item_selector)
    raw = {name: extract_field(items, sel) for name, sel in fields.items()}
    for name, column in raw.items():
        missing = sum(1 for v in column if v is None)
        if missing:
            logger.info("Field %s missing in %d/%d items", name, missing, len(column))
    return raw


# ---- Text coercion ----
def parse_year(text: Optional[str]) -> Optional[int]:
    """'(2016)', '(I) (2016)', '(2016– )' -> 2016."""
    if not text:
        return None
    m = re.search(r"\b(1[89]\d{2}|20\d{2})\b", str(text))
    return int(m.group(1)) if m else None


def parse_runtime(text: Optional[str]) -> Optional[int]:
    """Convert '144 min' or '2h 24m' to integer minutes."""
    if not text:
        return None
    s = str(text).strip().lower()
    m = re.search(r"(\d+)\s*min", s)
    if m:
        return int(m.group(1))
    # hours and minutes like "2h 30m", "2 h 30 min", "2h"
    m = re.search(r"(\d+)\s*h(?:ours?)?\s*(?:(\d+)\s*m)?", s)
    if m:
        hours = int(m.group(1))
        minutes = int(m.group(2)) if m.group(2) else 0
        return hours * 60 + minutes
    m = re.fullmatch(r"(\d{2,3})", s)
    return int(m.group(1)) if m else None


def parse_genres(text: Optional[str], max_genres: int = MAX_GENRES) -> List[str]:
    if not text:
        return []
    genres = [g.strip() for g in str(text).split(",")]
    return [g for g in genres if g][:max_genres]


def parse_votes(text: Optional[str]) -> Optional[int]:
    if not text:
        return None
    s = str(text).replace(",", "").replace(".", "").strip()
    m = re.search(r"(\d+)", s)
    return int(m.group(1)) if m else None

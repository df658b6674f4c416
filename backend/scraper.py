"""Lightweight fetcher: plain HTTP GET plus static HTML parsing.

No script execution and no computed styles, so the snapshot it returns never
carries style analysis, viewport tests or mobile data. It is both the fallback
when the browser render fails and the only path when the browser is disabled.
"""

import os

import requests

from dom_extractor import HTML_CHAR_LIMIT, extract_structured_data, truncate
from errors import FetchError
from logger import get_logger
from models import Snapshot

logger = get_logger(__name__)

STATIC_FETCH_TIMEOUT_SECONDS = float(os.getenv("STATIC_FETCH_TIMEOUT_SECONDS", "30"))

_REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


def fetch_static_snapshot(url: str) -> Snapshot:
    """
    Fetch ``url`` without a browser and summarize its static HTML.
    Raises FetchError on network failure or a non-2xx response.
    """
    logger.info("Fetching website with simple fetch: %s", url)
    try:
        response = requests.get(url, timeout=STATIC_FETCH_TIMEOUT_SECONDS, headers=_REQUEST_HEADERS)
        response.raise_for_status()
        response.encoding = response.encoding or response.apparent_encoding or "utf-8"
        html = response.text
    except requests.RequestException as exc:
        raise FetchError(url, exc) from exc

    return Snapshot(
        url=url,
        html=truncate(html, HTML_CHAR_LIMIT),
        structured_data=extract_structured_data(html),
        render_mode="static",
    )

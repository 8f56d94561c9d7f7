"""
Catalog search scraper.
"""
from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import quote, urlparse

import httpx
from bs4 import BeautifulSoup

from ..http import fetch_text
from ..models import CandidateMatch

logger = logging.getLogger(__name__)

_PARSER = "html.parser"


def slug_from_href(href: Optional[str]) -> Optional[str]:
    """Return the final path segment of a result link, without query or fragment."""

    if not href:
        return None
    path = urlparse(href.strip()).path.rstrip("/")
    segment = path.rsplit("/", 1)[-1]
    return segment or None


class CatalogSearchScraper:
    ITEM_SELECTOR = ".film_list-wrap .flw-item"
    TITLE_SELECTOR = ".film-detail .film-name a"
    POSTER_SELECTOR = "a.film-poster[href], .film-poster a[href]"

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    @staticmethod
    def build_search_path(term: str) -> str:
        return f"/search?keyword={quote(term.strip(), safe='')}"

    def search(self, term: str) -> List[CandidateMatch]:
        """Search the catalog and return results in catalog order.

        Raises CatalogRequestError when the search page cannot be fetched.
        """

        if not term or not term.strip():
            return []
        markup = fetch_text(self.client, self.build_search_path(term))
        results = self.parse_results(markup)
        logger.debug("search %r returned %d candidates", term, len(results))
        return results

    def parse_results(self, markup: str) -> List[CandidateMatch]:
        soup = BeautifulSoup(markup, _PARSER)

        results: List[CandidateMatch] = []
        for item in soup.select(self.ITEM_SELECTOR):
            anchor = item.select_one(self.TITLE_SELECTOR)
            if anchor is None:
                continue
            title = anchor.get_text(strip=True)
            href = anchor.get("href")
            if not href:
                poster = item.select_one(self.POSTER_SELECTOR)
                href = poster.get("href") if poster is not None else None
            internal_id = slug_from_href(href if isinstance(href, str) else None)
            if not title or not internal_id:
                continue
            results.append(CandidateMatch(title=title, internal_id=internal_id))
        return results

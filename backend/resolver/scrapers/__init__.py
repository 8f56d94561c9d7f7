"""Catalog scrapers: title search and episode listings."""

from .episodes import EpisodeListScraper
from .search import CatalogSearchScraper

__all__ = ["CatalogSearchScraper", "EpisodeListScraper"]

"""
Resolver backend package for Animap.

This package maps AniList ids onto catalog slugs and scrapes the catalog
for episode lists. It has no web framework dependencies; the API and CLI
packages wrap it.
"""

__all__ = [
    "cache",
    "catalog",
    "identity_resolver",
    "lookup",
    "metadata_fetcher",
    "models",
    "scrapers",
    "title_matcher",
]

"""
Map AniList ids onto catalog slugs.

Lookup order is static table, then the resolution cache, then a
search-and-score pass over the titles AniList reports for the id.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Protocol, Sequence

from .cache import ResolutionCache
from .http import CatalogRequestError
from .metadata_fetcher import DEFAULT_TITLE_FIELDS
from .models import CandidateMatch, Resolution, TitleRecord
from .title_matcher import DEFAULT_ACCEPTANCE_THRESHOLD, DEFAULT_SUBSTRING_SCORE, TitleMatcher

logger = logging.getLogger(__name__)


class TitleRecordSource(Protocol):
    def fetch_title_record(self, external_id: int) -> Optional[TitleRecord]: ...


class CatalogSearch(Protocol):
    def search(self, term: str) -> List[CandidateMatch]: ...


@dataclass(frozen=True)
class ResolutionPolicy:
    """Which AniList title fields to search, in order, and how strictly to match."""

    title_fields: Sequence[str] = DEFAULT_TITLE_FIELDS
    search_synonyms: bool = True
    acceptance_threshold: float = DEFAULT_ACCEPTANCE_THRESHOLD
    substring_score: float = DEFAULT_SUBSTRING_SCORE
    # Trades precision for recall; off unless explicitly requested.
    first_result_fallback: bool = False


def build_query_terms(record: TitleRecord, *, include_synonyms: bool = True) -> List[str]:
    """Canonical titles first, then synonyms; case-insensitive duplicates removed."""

    seen = set()
    terms: List[str] = []
    pool = list(record.canonical_titles)
    if include_synonyms:
        pool.extend(record.synonyms)
    for term in pool:
        key = term.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        terms.append(term.strip())
    return terms


class IdentityResolver:
    def __init__(
        self,
        *,
        static_table: Mapping[int, str],
        cache: ResolutionCache,
        metadata: TitleRecordSource,
        search: CatalogSearch,
        policy: Optional[ResolutionPolicy] = None,
    ) -> None:
        self.policy = policy or ResolutionPolicy()
        self.static_table = static_table
        self.cache = cache
        self.metadata = metadata
        self.catalog_search = search
        self.matcher = TitleMatcher(
            acceptance_threshold=self.policy.acceptance_threshold,
            substring_score=self.policy.substring_score,
        )

    def resolve(self, external_id: int) -> Optional[str]:
        resolution = self.resolve_with_source(external_id)
        return resolution.internal_id if resolution else None

    def resolve_with_source(self, external_id: int) -> Optional[Resolution]:
        internal_id = self.static_table.get(external_id)
        if internal_id:
            logger.info("AniList %s -> %s (static mapping)", external_id, internal_id)
            return Resolution(external_id, internal_id, "static")

        internal_id = self.cache.get(external_id)
        if internal_id:
            logger.info("AniList %s -> %s (cached)", external_id, internal_id)
            return Resolution(external_id, internal_id, "cache")

        record = self.metadata.fetch_title_record(external_id)
        if record is None:
            logger.info("AniList %s unavailable; not searching", external_id)
            return None

        resolution = self._search_and_score(external_id, record)
        if resolution is None:
            logger.info("AniList %s could not be matched to a catalog title", external_id)
            return None

        self.cache.set(external_id, resolution.internal_id)
        logger.info(
            "AniList %s -> %s (%s, score=%s); cached",
            external_id,
            resolution.internal_id,
            resolution.source,
            "n/a" if resolution.score is None else f"{resolution.score:.3f}",
        )
        return resolution

    def _search_and_score(self, external_id: int, record: TitleRecord) -> Optional[Resolution]:
        synonyms = record.synonyms
        first_results: Optional[List[CandidateMatch]] = None

        for term in build_query_terms(record, include_synonyms=self.policy.search_synonyms):
            try:
                candidates = self.catalog_search.search(term)
            except CatalogRequestError as exc:
                logger.warning("Catalog search for %r failed: %s", term, exc)
                continue
            if not candidates:
                continue
            if first_results is None:
                first_results = candidates

            best = self.matcher.select(candidates, term, synonyms)
            if best is not None:
                logger.debug("Accepted %r for term %r", best.candidate.title, term)
                return Resolution(external_id, best.candidate.internal_id, "search", best.score)

        if self.policy.first_result_fallback and first_results:
            fallback = first_results[0]
            logger.warning(
                "No confident match for AniList %s; falling back to first result %s",
                external_id,
                fallback.internal_id,
            )
            return Resolution(external_id, fallback.internal_id, "fallback")
        return None

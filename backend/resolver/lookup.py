"""
Episode lookup for either an AniList id or a catalog slug.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .identity_resolver import IdentityResolver, TitleRecordSource
from .models import EpisodeCollection
from .scrapers.episodes import EpisodeListScraper

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"^\d+$")


def is_external_id(identifier: str) -> bool:
    """AniList ids are digits only; anything else is treated as a catalog slug."""

    return bool(_DIGITS_RE.match(identifier or ""))


@dataclass(frozen=True)
class LookupResult:
    success: bool
    message: Optional[str] = None
    external_id: Optional[int] = None
    internal_id: Optional[str] = None
    episodes: Optional[EpisodeCollection] = None


class EpisodeLookupService:
    def __init__(
        self,
        resolver: IdentityResolver,
        episode_scraper: EpisodeListScraper,
        *,
        describe_unresolved: bool = False,
        metadata: Optional[TitleRecordSource] = None,
    ) -> None:
        self.resolver = resolver
        self.episode_scraper = episode_scraper
        self.describe_unresolved = describe_unresolved
        self.metadata = metadata or resolver.metadata

    def lookup(self, identifier: str) -> LookupResult:
        identifier = (identifier or "").strip()
        if not identifier:
            return LookupResult(success=False, message="An AniList id or catalog id is required")
        if is_external_id(identifier):
            return self.lookup_external(int(identifier))
        return self.lookup_internal(identifier)

    def lookup_external(self, external_id: int) -> LookupResult:
        internal_id = self.resolver.resolve(external_id)
        if internal_id is None:
            return LookupResult(
                success=False,
                external_id=external_id,
                message=self._unresolved_message(external_id),
            )

        collection = self.episode_scraper.extract_episodes(internal_id)
        if collection.is_empty():
            return LookupResult(
                success=False,
                external_id=external_id,
                internal_id=internal_id,
                message=(
                    f"Episodes not found for AniList ID: {external_id} "
                    f"(mapped to internal ID: {internal_id})"
                ),
            )
        return LookupResult(
            success=True,
            external_id=external_id,
            internal_id=internal_id,
            episodes=collection,
        )

    def lookup_internal(self, internal_id: str) -> LookupResult:
        collection = self.episode_scraper.extract_episodes(internal_id)
        if collection.is_empty():
            return LookupResult(
                success=False,
                internal_id=internal_id,
                message=f"Episodes not found for internal ID: {internal_id}",
            )
        return LookupResult(
            success=True,
            external_id=collection.external_id,
            internal_id=internal_id,
            episodes=collection,
        )

    def _unresolved_message(self, external_id: int) -> str:
        base = (
            f"AniList ID {external_id} could not be found in our system. "
            "The anime might not be available on our source."
        )
        if not self.describe_unresolved:
            return base
        record = self.metadata.fetch_title_record(external_id)
        if record is None or record.display_title is None:
            return base
        return (
            f"AniList ID {external_id} ({record.display_title}) could not be found in our system. "
            "The anime might not be available on our source."
        )

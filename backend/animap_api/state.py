"""Shared state container for the Animap API."""
from __future__ import annotations

from dataclasses import dataclass

import httpx

from backend.resolver.cache import InMemoryResolutionCache, ResolutionCache
from backend.resolver.catalog import StaticMappingTable, load_static_mapping
from backend.resolver.http import create_client
from backend.resolver.identity_resolver import IdentityResolver
from backend.resolver.lookup import EpisodeLookupService
from backend.resolver.metadata_fetcher import MetadataFetcher
from backend.resolver.scrapers import CatalogSearchScraper, EpisodeListScraper

from .settings import AnimapSettings


@dataclass(slots=True)
class AppState:
    """Encapsulates the clients, mapping stores and services shared across routers."""

    settings: AnimapSettings
    catalog_client: httpx.Client
    anilist_client: httpx.Client
    static_table: StaticMappingTable
    cache: ResolutionCache
    resolver: IdentityResolver
    lookup_service: EpisodeLookupService

    def __init__(
        self,
        settings: AnimapSettings,
        *,
        transport: httpx.BaseTransport | None = None,
        cache: ResolutionCache | None = None,
    ) -> None:
        self.settings = settings
        self.catalog_client = create_client(
            settings.catalog_base_url,
            timeout=settings.request_timeout,
            user_agent=settings.user_agent,
            transport=transport,
        )
        self.anilist_client = create_client(
            timeout=settings.request_timeout,
            user_agent=settings.user_agent,
            transport=transport,
        )
        self.static_table = load_static_mapping(
            settings.static_mapping_path, include_builtin=settings.use_builtin_mappings
        )
        self.cache = cache if cache is not None else InMemoryResolutionCache(settings.cache_max_entries)

        policy = settings.resolution_policy()
        metadata = MetadataFetcher(
            self.anilist_client, endpoint=settings.anilist_url, title_fields=policy.title_fields
        )
        self.resolver = IdentityResolver(
            static_table=self.static_table,
            cache=self.cache,
            metadata=metadata,
            search=CatalogSearchScraper(self.catalog_client),
            policy=policy,
        )
        self.lookup_service = EpisodeLookupService(
            self.resolver,
            EpisodeListScraper(self.catalog_client),
            describe_unresolved=settings.describe_unresolved,
        )

    def close(self) -> None:
        self.catalog_client.close()
        self.anilist_client.close()

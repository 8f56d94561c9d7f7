"""Runtime configuration for the Animap API."""
from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from backend.resolver.http import DEFAULT_USER_AGENT
from backend.resolver.identity_resolver import ResolutionPolicy
from backend.resolver.metadata_fetcher import DEFAULT_TITLE_FIELDS, TITLE_FIELDS


class AnimapSettings(BaseSettings):
    """Environment-aware settings for the Animap service."""

    anilist_url: str = Field(
        "https://graphql.anilist.co", description="AniList GraphQL endpoint."
    )
    catalog_base_url: str = Field(
        "http://localhost:8080", description="Base URL of the catalog site that is searched and scraped."
    )
    request_timeout: float = Field(
        default=10.0, gt=0, description="Per-call timeout in seconds for every outbound request."
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT, description="User-Agent header sent to the catalog and AniList."
    )
    acceptance_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="A candidate is accepted only when its title score exceeds this value.",
    )
    substring_score: float = Field(
        default=0.9,
        ge=0.0,
        le=1.0,
        description="Score given when one normalized title contains the other.",
    )
    title_fields: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TITLE_FIELDS),
        description="AniList title fields searched, in order, before synonyms.",
    )
    search_synonyms: bool = Field(
        default=True, description="Whether AniList synonyms are used as extra search terms."
    )
    first_result_fallback: bool = Field(
        default=False,
        description="Accept the first search result when no candidate clears the threshold.",
    )
    static_mapping_path: Path | None = Field(
        default=None,
        description='Optional JSON file of {"<anilist id>": "<catalog id>"} entries.',
    )
    use_builtin_mappings: bool = Field(
        default=True, description="Seed the static table with the built-in mappings."
    )
    cache_max_entries: int | None = Field(
        default=None,
        gt=0,
        description="Bound the resolution cache (LRU). Unbounded when unset.",
    )
    describe_unresolved: bool = Field(
        default=False,
        description="Fetch the AniList title again to enrich not-found messages.",
    )
    log_level: str = Field(default="INFO", description="Root logging level for the service.")

    model_config = SettingsConfigDict(
        env_prefix="ANIMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @field_validator("title_fields")
    @classmethod
    def _known_title_fields(cls, value: list[str]) -> list[str]:
        unknown = [name for name in value if name not in TITLE_FIELDS]
        if unknown:
            raise ValueError(f"unknown AniList title fields: {', '.join(unknown)}")
        if not value:
            raise ValueError("at least one AniList title field is required")
        return value

    def resolution_policy(self) -> ResolutionPolicy:
        return ResolutionPolicy(
            title_fields=tuple(self.title_fields),
            search_synonyms=self.search_synonyms,
            acceptance_threshold=self.acceptance_threshold,
            substring_score=self.substring_score,
            first_result_fallback=self.first_result_fallback,
        )

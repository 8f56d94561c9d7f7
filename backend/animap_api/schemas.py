"""Pydantic models exposed by the Animap API."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.resolver.lookup import LookupResult
from backend.resolver.models import EpisodeRecord, Resolution


class CamelModel(BaseModel):
    """Serializes with camelCase keys while accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthStatus(BaseModel):
    """Service health payload."""

    status: Literal["ok"] = Field(default="ok")
    version: str = Field(default="0.1.0", description="Semantic version of the API service.")
    static_mappings: int = Field(default=0, description="Entries in the static mapping table.")
    cached_mappings: int = Field(default=0, description="Mappings resolved dynamically since startup.")


class EpisodeModel(CamelModel):
    episode_number: int = Field(gt=0)
    internal_episode_id: str
    display_title: str | None = None
    native_title: str | None = None
    is_filler: bool = False

    @classmethod
    def from_record(cls, record: EpisodeRecord) -> "EpisodeModel":
        return cls(
            episode_number=record.episode_number,
            internal_episode_id=record.internal_episode_id,
            display_title=record.display_title,
            native_title=record.native_title,
            is_filler=record.is_filler,
        )


class LookupResultsModel(CamelModel):
    """Domain-level outcome of an episode lookup."""

    success: bool
    message: str | None = None
    external_id: int | None = None
    internal_id: str | None = None
    total_episodes: int | None = None
    episodes: list[EpisodeModel] | None = None

    @classmethod
    def from_result(cls, result: LookupResult) -> "LookupResultsModel":
        episodes = None
        total = None
        if result.episodes is not None and result.success:
            episodes = [EpisodeModel.from_record(record) for record in result.episodes.episodes]
            total = len(episodes)
        return cls(
            success=result.success,
            message=result.message,
            external_id=result.external_id,
            internal_id=result.internal_id,
            total_episodes=total,
            episodes=episodes,
        )


class LookupEnvelope(BaseModel):
    """Transport-level wrapper; ``results.success`` carries the domain outcome."""

    success: bool = Field(default=True)
    results: LookupResultsModel


class ResolutionModel(BaseModel):
    external_id: int
    internal_id: str
    source: Literal["static", "cache", "search", "fallback"]
    score: float | None = None

    @classmethod
    def from_resolution(cls, resolution: Resolution) -> "ResolutionModel":
        return cls(
            external_id=resolution.external_id,
            internal_id=resolution.internal_id,
            source=resolution.source,
            score=resolution.score,
        )


class CacheSnapshotModel(BaseModel):
    total: int = Field(description="Number of cached mappings.")
    mappings: dict[int, str] = Field(default_factory=dict)

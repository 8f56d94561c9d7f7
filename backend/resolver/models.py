"""
Value objects shared by the resolver, the scrapers and the lookup service.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class TitleRecord:
    """Canonical titles and synonyms reported by the metadata service."""

    canonical_titles: Tuple[str, ...]
    synonyms: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not self.canonical_titles and not self.synonyms

    @property
    def display_title(self) -> Optional[str]:
        if self.canonical_titles:
            return self.canonical_titles[0]
        return self.synonyms[0] if self.synonyms else None


@dataclass(frozen=True)
class CandidateMatch:
    title: str
    internal_id: str


@dataclass(frozen=True)
class EpisodeRecord:
    episode_number: int
    internal_episode_id: str
    display_title: Optional[str] = None
    native_title: Optional[str] = None
    is_filler: bool = False


@dataclass(frozen=True)
class EpisodeCollection:
    """Episodes of one title, ordered by episode number.

    The total is derived from the list so the two can never disagree.
    """

    episodes: Tuple[EpisodeRecord, ...] = ()
    external_id: Optional[int] = None

    @property
    def total_episodes(self) -> int:
        return len(self.episodes)

    def is_empty(self) -> bool:
        return not self.episodes


@dataclass(frozen=True)
class Resolution:
    """Outcome of a successful identity resolution."""

    external_id: int
    internal_id: str
    source: str
    score: Optional[float] = field(default=None, compare=False)

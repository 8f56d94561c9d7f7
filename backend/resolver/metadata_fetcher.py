"""
AniList metadata fetcher.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

import httpx

from .models import TitleRecord

logger = logging.getLogger(__name__)

TITLE_FIELDS = ("english", "romaji", "userPreferred", "native")
DEFAULT_TITLE_FIELDS = ("english", "romaji", "userPreferred")

MEDIA_QUERY = """
query ($id: Int) {
  Media(id: $id, type: ANIME) {
    id
    title {
      romaji
      english
      native
      userPreferred
    }
    synonyms
  }
}
"""


def _unique(values: Iterable[object]) -> List[str]:
    seen = set()
    result: List[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        cleaned = value.strip()
        if not cleaned or cleaned.lower() in seen:
            continue
        seen.add(cleaned.lower())
        result.append(cleaned)
    return result


class MetadataFetcher:
    ANILIST_ENDPOINT = "https://graphql.anilist.co"

    def __init__(
        self,
        client: httpx.Client,
        *,
        endpoint: Optional[str] = None,
        title_fields: Sequence[str] = DEFAULT_TITLE_FIELDS,
    ) -> None:
        unknown = [name for name in title_fields if name not in TITLE_FIELDS]
        if unknown:
            raise ValueError(f"Unknown AniList title fields: {', '.join(unknown)}")
        self.client = client
        self.endpoint = endpoint or self.ANILIST_ENDPOINT
        self.title_fields = tuple(title_fields)

    def fetch_media(self, external_id: int) -> Optional[Dict[str, object]]:
        """Return the raw ``Media`` object, or None when AniList has nothing for the id."""

        payload = {"query": MEDIA_QUERY, "variables": {"id": int(external_id)}}
        try:
            resp = self.client.post(self.endpoint, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("AniList request for id %s failed: %s", external_id, exc)
            return None
        if resp.status_code != 200:
            logger.warning("AniList returned HTTP %s for id %s", resp.status_code, external_id)
            return None
        try:
            body = resp.json()
        except ValueError:
            logger.warning("AniList returned invalid JSON for id %s", external_id)
            return None
        media = ((body or {}).get("data") or {}).get("Media") if isinstance(body, dict) else None
        return media if isinstance(media, dict) else None

    def fetch_title_record(self, external_id: int) -> Optional[TitleRecord]:
        media = self.fetch_media(external_id)
        if not media:
            logger.info("AniList has no record for id %s", external_id)
            return None

        titles = media.get("title") or {}
        if not isinstance(titles, dict):
            titles = {}
        synonyms = media.get("synonyms") or []
        if not isinstance(synonyms, list):
            synonyms = []

        canonical = _unique(titles.get(name) for name in self.title_fields)
        extra = [value for value in _unique(synonyms) if value.lower() not in {t.lower() for t in canonical}]
        record = TitleRecord(canonical_titles=tuple(canonical), synonyms=tuple(extra))
        if record.is_empty():
            return None
        return record

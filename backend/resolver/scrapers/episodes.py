"""
Episode list scraper for catalog titles.
"""
from __future__ import annotations

import json
import logging
import re
from typing import List, Optional
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup, Tag

from ..http import CatalogRequestError, fetch_text
from ..models import EpisodeCollection, EpisodeRecord

logger = logging.getLogger(__name__)

_PARSER = "html.parser"
_NUMBER_RE = re.compile(r"[0-9]+")


def show_id_from_internal_id(internal_id: str) -> str:
    """``one-piece-100`` -> ``100``."""

    return internal_id.rsplit("-", 1)[-1]


def _positive_int(value: object) -> Optional[int]:
    raw = str(value or "").strip()
    if not _NUMBER_RE.fullmatch(raw):
        return None
    number = int(raw)
    return number if number > 0 else None


class EpisodeListScraper:
    ITEM_SELECTOR = ".ss-list a"
    FILLER_CLASS = "ssl-item-filler"

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    # ------------------------------------------------------------------ #
    # Fetching
    # ------------------------------------------------------------------ #

    def _listing_fragment(self, internal_id: str) -> Optional[str]:
        show_id = quote(show_id_from_internal_id(internal_id), safe="")
        slug = quote(internal_id, safe="")
        headers = {
            "X-Requested-With": "XMLHttpRequest",
            "Referer": str(self.client.base_url.join(f"/watch/{slug}")),
        }
        body = fetch_text(self.client, f"/ajax/v2/episode/list/{show_id}", headers=headers)
        stripped = body.lstrip()
        if stripped.startswith("{"):
            try:
                envelope = json.loads(stripped)
            except ValueError as exc:
                raise CatalogRequestError(f"Malformed episode envelope for {internal_id}") from exc
            fragment = envelope.get("html") if isinstance(envelope, dict) else None
            return fragment if isinstance(fragment, str) and fragment.strip() else None
        return body if stripped else None

    def fetch_external_id(self, internal_id: str) -> Optional[int]:
        """Read the AniList id embedded in the title page, if any."""

        try:
            markup = fetch_text(self.client, f"/{quote(internal_id, safe='')}")
        except CatalogRequestError as exc:
            logger.warning("Could not load detail page for %s: %s", internal_id, exc)
            return None
        soup = BeautifulSoup(markup, _PARSER)
        node = soup.select_one("#syncData")
        if node is None:
            return None
        try:
            sync_data = json.loads(node.string or "")
        except ValueError:
            logger.warning("Malformed syncData on detail page for %s", internal_id)
            return None
        if not isinstance(sync_data, dict):
            return None
        return _positive_int(sync_data.get("anilist_id"))

    # ------------------------------------------------------------------ #
    # Parsing
    # ------------------------------------------------------------------ #

    def _parse_item(self, item: Tag) -> Optional[EpisodeRecord]:
        episode_number = _positive_int(item.get("data-number"))
        if episode_number is None:
            return None
        href = item.get("href")
        episode_id = href.strip().rstrip("/").rsplit("/", 1)[-1] if isinstance(href, str) else ""
        if not episode_id:
            return None

        title = item.get("title")
        display_title = title.strip() if isinstance(title, str) and title.strip() else None
        native_title = None
        name_node = item.select_one(".ep-name")
        if name_node is not None:
            jname = name_node.get("data-jname")
            if isinstance(jname, str) and jname.strip():
                native_title = jname.strip()

        return EpisodeRecord(
            episode_number=episode_number,
            internal_episode_id=episode_id,
            display_title=display_title,
            native_title=native_title,
            is_filler=self.FILLER_CLASS in (item.get("class") or []),
        )

    def parse_episodes(self, fragment: Optional[str]) -> List[EpisodeRecord]:
        if not fragment:
            return []
        soup = BeautifulSoup(fragment, _PARSER)
        episodes: List[EpisodeRecord] = []
        for item in soup.select(self.ITEM_SELECTOR):
            record = self._parse_item(item)
            if record is None:
                logger.debug("Skipping malformed episode item: %s", item.get("href"))
                continue
            episodes.append(record)
        episodes.sort(key=lambda record: record.episode_number)
        return episodes

    def extract_episodes(self, internal_id: str) -> EpisodeCollection:
        """Return the episode list for a catalog slug.

        A missing listing, an empty listing and a failed listing request all
        produce an empty collection.
        """

        try:
            fragment = self._listing_fragment(internal_id)
        except CatalogRequestError as exc:
            logger.warning("Episode listing for %s unavailable: %s", internal_id, exc)
            return EpisodeCollection()

        episodes = self.parse_episodes(fragment)
        if not episodes:
            logger.info("No episodes listed for %s", internal_id)
            return EpisodeCollection()

        external_id = self.fetch_external_id(internal_id)
        return EpisodeCollection(episodes=tuple(episodes), external_id=external_id)

"""
Static AniList id to catalog slug table consulted before any search.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

logger = logging.getLogger(__name__)

# Long-running or ambiguously titled shows where search is unreliable.
BUILTIN_MAPPINGS: Dict[int, str] = {
    1: "cowboy-bebop",
    5: "naruto",
    20: "naruto-shippuden",
    21: "one-piece-100",
    124: "fushigi-yuugi-eikoden",
    1535: "death-note",
    9253: "steins-gate",
    11061: "hunter-x-hunter-2011",
    11757: "sword-art-online",
    15125: "tokyo-ghoul",
    16498: "attack-on-titan",
    30276: "one-punch-man",
    97938: "my-hero-academia",
    98707: "black-clover",
    99423: "dr-stone",
    101922: "demon-slayer-kimetsu-no-yaiba",
    113415: "jujutsu-kaisen",
}


class StaticMappingTable(Mapping[int, str]):
    """Immutable mapping seeded at startup. Authoritative over cache and search."""

    def __init__(self, entries: Optional[Mapping[int, str]] = None) -> None:
        self._entries = MappingProxyType(dict(entries or {}))

    def __getitem__(self, external_id: int) -> str:
        return self._entries[external_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"StaticMappingTable({len(self)} entries)"


def parse_mapping(data: object, *, source: str = "<mapping>") -> Dict[int, str]:
    """Validate a ``{"<anilist id>": "<slug>"}`` object."""

    if not isinstance(data, dict):
        raise ValueError(f"{source}: static mapping must be a JSON object")
    index: Dict[int, str] = {}
    for raw_key, raw_value in data.items():
        key = str(raw_key).strip()
        if not key.isdigit() or int(key) <= 0:
            raise ValueError(f"{source}: invalid AniList id {raw_key!r}")
        if not isinstance(raw_value, str) or not raw_value.strip():
            raise ValueError(f"{source}: empty slug for AniList id {key}")
        index[int(key)] = raw_value.strip()
    return index


def load_static_mapping(path: Optional[Path] = None, *, include_builtin: bool = True) -> StaticMappingTable:
    entries: Dict[int, str] = dict(BUILTIN_MAPPINGS) if include_builtin else {}
    if path is not None:
        if not path.exists():
            logger.warning("Static mapping file %s not found; using %d seeded entries", path, len(entries))
        else:
            data = json.loads(path.read_text(encoding="utf-8"))
            entries.update(parse_mapping(data, source=str(path)))
    return StaticMappingTable(entries)

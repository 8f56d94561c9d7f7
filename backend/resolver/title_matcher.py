"""Fuzzy comparison of catalog titles against AniList titles.

Titles are compared after normalization (lower-case, alphanumerics only), so
punctuation and spacing differences cost nothing. Scoring picks the highest
applicable rule:

1. Exact normalized equality scores 1.0.
2. One normalized string containing the other scores ``substring_score``.
3. Otherwise the Levenshtein similarity ``(max_len - distance) / max_len``.

A substring hit is a point score and must clear the same acceptance
threshold as edit-distance similarity.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from rapidfuzz.distance import Levenshtein

from .models import CandidateMatch

logger = logging.getLogger(__name__)

DEFAULT_ACCEPTANCE_THRESHOLD = 0.7
DEFAULT_SUBSTRING_SCORE = 0.9

_NON_ALNUM_RE = re.compile(r"[\W_]+", re.UNICODE)


def normalize_title(value: Optional[str]) -> str:
    if not value:
        return ""
    return _NON_ALNUM_RE.sub("", value.lower())


def edit_similarity(left: str, right: str) -> float:
    """Levenshtein similarity of two already-normalized strings."""

    longest = max(len(left), len(right))
    if longest == 0:
        return 0.0
    distance = Levenshtein.distance(left, right)
    return (longest - distance) / longest


@dataclass(frozen=True)
class ScoredCandidate:
    candidate: CandidateMatch
    score: float


class TitleMatcher:
    def __init__(
        self,
        acceptance_threshold: float = DEFAULT_ACCEPTANCE_THRESHOLD,
        substring_score: float = DEFAULT_SUBSTRING_SCORE,
    ) -> None:
        if not 0.0 <= acceptance_threshold <= 1.0:
            raise ValueError(f"acceptance_threshold must be between 0.0 and 1.0, got {acceptance_threshold}")
        if not 0.0 <= substring_score <= 1.0:
            raise ValueError(f"substring_score must be between 0.0 and 1.0, got {substring_score}")
        self.acceptance_threshold = acceptance_threshold
        self.substring_score = substring_score

    def compare(self, left: str, right: str) -> float:
        """Score two raw titles against each other. Symmetric."""

        a = normalize_title(left)
        b = normalize_title(right)
        if not a or not b:
            return 0.0
        if a == b:
            return 1.0
        if a in b or b in a:
            return self.substring_score
        return edit_similarity(a, b)

    def score(self, candidate_title: str, query_title: str, synonyms: Iterable[str] = ()) -> float:
        best = self.compare(candidate_title, query_title)
        if best >= 1.0:
            return best
        for synonym in synonyms:
            best = max(best, self.compare(candidate_title, synonym))
            if best >= 1.0:
                break
        return best

    def is_acceptable(self, score: float) -> bool:
        return score > self.acceptance_threshold

    def select(
        self,
        candidates: Sequence[CandidateMatch],
        query_title: str,
        synonyms: Iterable[str] = (),
    ) -> Optional[ScoredCandidate]:
        """Return the highest scoring acceptable candidate; ties keep catalog order."""

        synonyms = tuple(synonyms)
        best: Optional[ScoredCandidate] = None
        for candidate in candidates:
            value = self.score(candidate.title, query_title, synonyms)
            logger.debug("score %.3f for %r (%s) against %r", value, candidate.title, candidate.internal_id, query_title)
            if best is None or value > best.score:
                best = ScoredCandidate(candidate=candidate, score=value)
        if best is None or not self.is_acceptable(best.score):
            return None
        return best

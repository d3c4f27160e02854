"""Time-based cache of scored candidates.

A score is only valid for the filter set that produced it, so the key is the
candidate id plus all three keyword lists. Candidates without an id are scored
every time and never stored.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from shortlist.core.config import ScoringConfig, ScoringWeights
from shortlist.core.schemas import CandidateProfile, FilterCriteria, ScoredCandidate
from shortlist.pipeline.scorer import score_candidates

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


@dataclass(frozen=True)
class _CacheEntry:
    scored: ScoredCandidate
    timestamp: float


class ScoreCache:
    """Scores candidates through the engine, reusing fresh results.

    Usage::

        cache = ScoreCache.from_config(settings.scoring)
        scored = cache.get_scored_candidates(candidates, criteria)
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        weights: ScoringWeights | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._weights = weights
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    @classmethod
    def from_config(cls, config: ScoringConfig) -> "ScoreCache":
        """Build a cache using the configured TTL and weights."""
        return cls(ttl_seconds=config.cache_ttl_seconds, weights=config)

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def cache_key(candidate_id: str, criteria: FilterCriteria) -> str:
        return f"{candidate_id}::{criteria.cache_key()}"

    def get_scored_candidates(
        self,
        candidates: list[CandidateProfile],
        criteria: FilterCriteria,
    ) -> list[ScoredCandidate]:
        """Return scored candidates in input order, scoring only cache misses.

        Expired entries are purged first so the cache stays bounded.
        """
        self.purge_expired()
        now = self._clock()
        results: list[ScoredCandidate | None] = [None] * len(candidates)
        to_score: list[CandidateProfile] = []
        positions: list[int] = []

        for index, candidate in enumerate(candidates):
            entry = None
            if candidate.id:
                entry = self._entries.get(self.cache_key(candidate.id, criteria))
            if entry is not None and now - entry.timestamp < self._ttl:
                results[index] = entry.scored
            else:
                to_score.append(candidate)
                positions.append(index)

        logger.debug(
            "ScoreCache: %d hits, %d misses",
            len(candidates) - len(to_score), len(to_score),
        )

        if to_score:
            fresh = score_candidates(
                to_score,
                criteria.skills,
                criteria.experience,
                criteria.education,
                weights=self._weights,
            )
            for index, scored in zip(positions, fresh):
                results[index] = scored
                if scored.id:
                    self._entries[self.cache_key(scored.id, criteria)] = _CacheEntry(scored, now)

        return [r for r in results if r is not None]

    def purge_expired(self) -> int:
        """Drop entries older than the TTL. Returns how many were removed."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if now - e.timestamp >= self._ttl]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("ScoreCache: purged %d expired entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

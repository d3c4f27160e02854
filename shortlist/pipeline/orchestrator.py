"""Orchestrator: wires filter chain, score cache, scorer and ranking.

Data flow:
  1. Filter chain → candidates matching at least one keyword per active category
  2. Scorer (through the score cache when given) → scored candidates
  3. Optional ranking (score desc, prestige tie-break)
"""

import json
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from shortlist.core.config import ScoringWeights
from shortlist.core.schemas import CandidateProfile, FilterCriteria, ScoredCandidate
from shortlist.pipeline.matcher import build_filters, run_filter_chain
from shortlist.pipeline.score_cache import ScoreCache
from shortlist.pipeline.scorer import rank_candidates, score_candidates

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 20


@dataclass
class ShortlistResult:
    """Outcome of scoring one role's candidate pool."""

    criteria: FilterCriteria
    total_count: int
    filtered_count: int
    scored: list[ScoredCandidate] = field(default_factory=list)

    def top(self, n: int) -> list[ScoredCandidate]:
        return self.scored[:n]


def build_shortlist(
    candidates: list[CandidateProfile],
    criteria: FilterCriteria,
    *,
    cache: ScoreCache | None = None,
    selected_ids: Iterable[str] = (),
    replacing_id: str | None = None,
    rank: bool = False,
    weights: ScoringWeights | None = None,
) -> ShortlistResult:
    """Filter, score and optionally rank candidates for one role.

    Args:
        candidates: The full candidate pool.
        criteria: Keyword lists for the role.
        cache: Reuse scores from this cache; weights are then the cache's own.
        selected_ids: Candidates already on the roster, excluded from results.
        replacing_id: Roster member being replaced; stays in the results.
        rank: Sort the scored list (score desc, prestige tie-break).
        weights: Base weights when no cache is given.
    """
    filters = build_filters(criteria, selected_ids, replacing_id)
    filtered = run_filter_chain(candidates, filters)
    logger.info("Filtered %d of %d candidates", len(filtered), len(candidates))

    if cache is not None:
        scored = cache.get_scored_candidates(filtered, criteria)
    else:
        scored = score_candidates(
            filtered, criteria.skills, criteria.experience, criteria.education, weights=weights,
        )

    if rank:
        scored = rank_candidates(scored)

    return ShortlistResult(
        criteria=criteria,
        total_count=len(candidates),
        filtered_count=len(filtered),
        scored=scored,
    )


def iter_score_batches(
    candidates: list[CandidateProfile],
    criteria: FilterCriteria,
    batch_size: int = DEFAULT_BATCH_SIZE,
    weights: ScoringWeights | None = None,
) -> Iterator[list[ScoredCandidate]]:
    """Score a large pool in chunks, yielding each chunk's results in order."""
    if batch_size < 1:
        msg = f"batch_size must be at least 1, got {batch_size}"
        raise ValueError(msg)
    for start in range(0, len(candidates), batch_size):
        batch = candidates[start:start + batch_size]
        yield score_candidates(
            batch, criteria.skills, criteria.experience, criteria.education, weights=weights,
        )


def describe_filters(result: ShortlistResult) -> str:
    """One-line summary of the pool and the active criteria."""
    criteria = result.criteria
    if criteria.is_empty:
        return f"Showing all {result.filtered_count} candidates (no filters applied)"
    return (
        f"Showing {result.filtered_count} candidates matching "
        f"{criteria.active_count} filter criteria"
    )


def export_results_json(scored: list[ScoredCandidate]) -> str:
    """Export scored candidates as a JSON array using the dataset's field names."""
    data = [s.model_dump(mode="json", by_alias=True) for s in scored]
    return json.dumps(data, indent=2)

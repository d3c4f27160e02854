"""Keyword-based candidate scoring with weight redistribution.

Three categories are matched independently: skills, experience (role titles)
and education (degree titles and subjects). A category with no keywords is
inactive and its base weight is redistributed proportionally over the active
ones. Score range: 0-100, one decimal.

Scoring never reorders candidates; ranking is the separate rank_candidates step.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any

from shortlist.core.config import ScoringWeights
from shortlist.core.schemas import CandidateProfile, ScoredCandidate

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS = ScoringWeights()

_PROFILE_FIELDS = set(CandidateProfile.model_fields)

# Prestige rank used for tie-breaks: lower sorts first.
_TOP25_RANK = 0
_TOP50_RANK = 1
_NO_PRESTIGE_RANK = 2


class InvalidInputError(ValueError):
    """Raised when the engine is called with something that is not a list of records."""


def score_candidates(
    candidates: Sequence[CandidateProfile | Mapping[str, Any]],
    skill_keywords: Sequence[str],
    experience_keywords: Sequence[str],
    education_keywords: Sequence[str] = (),
    weights: ScoringWeights | None = None,
) -> list[ScoredCandidate]:
    """Score a batch of candidates, preserving input order.

    Args:
        candidates: Profiles (or raw dataset records) to score.
        skill_keywords: Matched against each skill.
        experience_keywords: Matched against each work experience role title.
        education_keywords: Matched against each degree title or subject.
        weights: Base weights; defaults to 0.5 / 0.3 / 0.2-0.15-0.1.

    Returns:
        A fresh ScoredCandidate per input, in the same order.

    Raises:
        InvalidInputError: If candidates or a keyword list is not a list-like
            sequence, or contains values of the wrong type.
    """
    _require_sequence("candidates", candidates)
    skills = _keyword_list("skill_keywords", skill_keywords)
    experience = _keyword_list("experience_keywords", experience_keywords)
    education = _keyword_list("education_keywords", education_keywords)

    if not candidates:
        return []

    weights = weights or DEFAULT_WEIGHTS
    logger.debug(
        "Scoring %d candidates (skills=%d, experience=%d, education=%d keywords)",
        len(candidates), len(skills), len(experience), len(education),
    )
    return [
        _score_profile(_as_profile(c), skills, experience, education, weights)
        for c in candidates
    ]


def score_candidate(
    candidate: CandidateProfile | Mapping[str, Any],
    skill_keywords: Sequence[str],
    experience_keywords: Sequence[str],
    education_keywords: Sequence[str] = (),
    weights: ScoringWeights | None = None,
) -> ScoredCandidate:
    """Score a single candidate. Same semantics as score_candidates."""
    return score_candidates(
        [candidate], skill_keywords, experience_keywords, education_keywords, weights,
    )[0]


def education_weight(
    candidate: CandidateProfile,
    weights: ScoringWeights | None = None,
) -> float:
    """Base education weight from the candidate's own prestige flags.

    Any Top 25 degree wins over Top 50; no flagged degree gets the default.
    """
    weights = weights or DEFAULT_WEIGHTS
    if candidate.education.has_top25:
        return weights.education_top25_weight
    if candidate.education.has_top50:
        return weights.education_top50_weight
    return weights.education_default_weight


def rank_candidates(scored: Sequence[ScoredCandidate]) -> list[ScoredCandidate]:
    """Return a new list sorted by score descending with prestige tie-breaks.

    Scores that are equal at one-decimal granularity tie. Ties put Top 25
    candidates first, then Top 50, then the rest; anything still tied keeps
    its input order.
    """
    return sorted(scored, key=lambda s: (-_tenths(s.score), _prestige_rank(s)))


def round_score(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    return math.copysign(math.floor(abs(value) * 10 + 0.5) / 10, value)


def _score_profile(
    candidate: CandidateProfile,
    skill_keywords: list[str],
    experience_keywords: list[str],
    education_keywords: list[str],
    weights: ScoringWeights,
) -> ScoredCandidate:
    skill_pct = _match_percentage(skill_keywords, candidate.skills)
    experience_pct = _match_percentage(
        experience_keywords, [exp.role_name for exp in candidate.work_experiences],
    )
    education_pct = _match_percentage(
        education_keywords,
        [value for d in candidate.education.degrees for value in (d.degree, d.subject)],
    )
    edu_weight = education_weight(candidate, weights)

    # (base weight, percentage) for every active category
    active: list[tuple[float, float]] = []
    if skill_keywords:
        active.append((weights.skills_weight, skill_pct))
    if experience_keywords:
        active.append((weights.experience_weight, experience_pct))
    if education_keywords:
        active.append((edu_weight, education_pct))

    total_weight = sum(w for w, _ in active)
    total = 0.0
    if total_weight > 0:
        total = sum(pct * (w / total_weight) for w, pct in active)

    data = candidate.model_dump(include=_PROFILE_FIELDS)
    data.update(
        score=round_score(total),
        skill_match_percentage=round_score(skill_pct),
        experience_match_percentage=round_score(experience_pct),
        education_match_percentage=round_score(education_pct),
        education_weight=edu_weight if education_keywords else 0.0,
    )
    return ScoredCandidate.model_validate(data)


def _match_percentage(keywords: list[str], values: list[str]) -> float:
    """Percentage of keywords contained (case-insensitively) in at least one value."""
    if not keywords:
        return 0.0
    lowered = [v.lower() for v in values if v]
    matched = sum(1 for kw in keywords if any(kw.lower() in v for v in lowered))
    return matched / len(keywords) * 100


def _tenths(score: float) -> int:
    return math.floor(score * 10 + 0.5)


def _prestige_rank(candidate: CandidateProfile) -> int:
    if candidate.education.has_top25:
        return _TOP25_RANK
    if candidate.education.has_top50:
        return _TOP50_RANK
    return _NO_PRESTIGE_RANK


def _as_profile(candidate: Any) -> CandidateProfile:
    if isinstance(candidate, CandidateProfile):
        return candidate
    if isinstance(candidate, Mapping):
        return CandidateProfile.model_validate(candidate)
    msg = f"candidate records must be mappings or CandidateProfile, got {type(candidate).__name__}"
    raise InvalidInputError(msg)


def _require_sequence(name: str, value: Any) -> None:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        msg = f"{name} must be a list, got {type(value).__name__}"
        raise InvalidInputError(msg)


def _keyword_list(name: str, keywords: Any) -> list[str]:
    _require_sequence(name, keywords)
    if not all(isinstance(kw, str) for kw in keywords):
        msg = f"{name} must contain only strings"
        raise InvalidInputError(msg)
    return list(keywords)

"""Filter chain narrowing the candidate pool before scoring.

Filter order:
  1. ExcludeSelectedFilter     — drop candidates already on the roster
  2. SkillKeywordsFilter       — any keyword in any skill
  3. ExperienceKeywordsFilter  — any keyword in "roleName company" history text
  4. EducationKeywordsFilter   — any keyword in "degree subject" text

Keyword filters are case-insensitive substring matches and are no-ops when
given no keywords.
"""

import logging
from collections.abc import Callable, Iterable

from shortlist.core.schemas import CandidateProfile, FilterCriteria

logger = logging.getLogger(__name__)

# A filter is a callable that takes candidates and returns a subset.
Filter = Callable[[list[CandidateProfile]], list[CandidateProfile]]


def _normalize(keywords: Iterable[str]) -> list[str]:
    return [kw.lower().strip() for kw in keywords if kw.strip()]


class ExcludeSelectedFilter:
    """Remove candidates already on the roster, except the one being replaced."""

    def __init__(self, selected_ids: Iterable[str], replacing_id: str | None = None) -> None:
        self._selected = {i for i in selected_ids if i}
        self._replacing_id = replacing_id

    def __call__(self, candidates: list[CandidateProfile]) -> list[CandidateProfile]:
        if not self._selected:
            return candidates
        result = [
            c for c in candidates
            if c.id not in self._selected or c.id == self._replacing_id
        ]
        excluded = len(candidates) - len(result)
        if excluded:
            logger.debug("ExcludeSelectedFilter: removed %d candidates", excluded)
        return result


class _KeywordFilter:
    """Keep candidates whose category text contains at least one keyword."""

    def __init__(self, keywords: Iterable[str]) -> None:
        self._keywords = _normalize(keywords)

    def __call__(self, candidates: list[CandidateProfile]) -> list[CandidateProfile]:
        if not self._keywords:
            return candidates
        result = [c for c in candidates if self._matches(c)]
        excluded = len(candidates) - len(result)
        if excluded:
            logger.debug("%s: removed %d candidates", type(self).__name__, excluded)
        return result

    def _matches(self, candidate: CandidateProfile) -> bool:
        raise NotImplementedError


class SkillKeywordsFilter(_KeywordFilter):
    """Keep candidates with at least one skill containing a keyword."""

    def _matches(self, candidate: CandidateProfile) -> bool:
        skills = [s.lower() for s in candidate.skills]
        return any(kw in skill for kw in self._keywords for skill in skills)


class ExperienceKeywordsFilter(_KeywordFilter):
    """Keep candidates whose work history (role and company) mentions a keyword."""

    def _matches(self, candidate: CandidateProfile) -> bool:
        text = " ".join(
            f"{exp.role_name} {exp.company}" for exp in candidate.work_experiences
        ).lower()
        return any(kw in text for kw in self._keywords)


class EducationKeywordsFilter(_KeywordFilter):
    """Keep candidates whose degrees (title or subject) mention a keyword."""

    def _matches(self, candidate: CandidateProfile) -> bool:
        text = " ".join(
            f"{d.degree} {d.subject}" for d in candidate.education.degrees
        ).lower()
        return any(kw in text for kw in self._keywords)


def build_filters(
    criteria: FilterCriteria,
    selected_ids: Iterable[str] = (),
    replacing_id: str | None = None,
) -> list[Filter]:
    """Build the filter chain for one role's criteria."""
    return [
        ExcludeSelectedFilter(selected_ids, replacing_id),
        SkillKeywordsFilter(criteria.skills),
        ExperienceKeywordsFilter(criteria.experience),
        EducationKeywordsFilter(criteria.education),
    ]


def run_filter_chain(
    candidates: list[CandidateProfile],
    filters: list[Filter],
) -> list[CandidateProfile]:
    """Apply filters in order, returning the surviving candidates."""
    result = candidates
    for f in filters:
        result = f(result)
    return result

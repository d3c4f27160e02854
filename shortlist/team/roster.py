"""Team roster: fixed number of role slots filled with shortlisted candidates."""

import logging
import sqlite3

from shortlist.core.config import TEAM_SIZE_MAX, TEAM_SIZE_MIN
from shortlist.core.db import (
    clear_roster,
    clear_team_size,
    load_roster,
    load_team_size,
    save_roster,
    save_team_size,
)
from shortlist.core.schemas import CandidateProfile, ScoredCandidate, TeamReview

logger = logging.getLogger(__name__)


def validate_team_size(size: int) -> int:
    if not TEAM_SIZE_MIN <= size <= TEAM_SIZE_MAX:
        msg = f"team size must be between {TEAM_SIZE_MIN} and {TEAM_SIZE_MAX}, got {size}"
        raise ValueError(msg)
    return size


def _as_scored(candidate: CandidateProfile) -> ScoredCandidate:
    if isinstance(candidate, ScoredCandidate):
        return candidate
    return ScoredCandidate.model_validate(candidate.model_dump())


class Roster:
    """Ordered team members, one per role slot.

    A team size of 0 means no size has been chosen yet.
    """

    def __init__(self, team_size: int = 0, members: list[ScoredCandidate] | None = None) -> None:
        if team_size:
            validate_team_size(team_size)
        self._team_size = team_size
        self._members: list[ScoredCandidate] = list(members or [])[: team_size or None]

    @property
    def team_size(self) -> int:
        return self._team_size

    @property
    def members(self) -> list[ScoredCandidate]:
        return list(self._members)

    @property
    def member_ids(self) -> list[str]:
        return [m.id for m in self._members]

    @property
    def is_complete(self) -> bool:
        return self._team_size > 0 and len(self._members) >= self._team_size

    @property
    def active_role_index(self) -> int:
        """Index of the first empty slot, or -1 when the team is complete."""
        if len(self._members) < self._team_size:
            return len(self._members)
        return -1

    def set_team_size(self, size: int) -> None:
        """Change the number of slots, dropping members beyond the new size."""
        validate_team_size(size)
        if size < len(self._members):
            dropped = self._members[size:]
            self._members = self._members[:size]
            logger.info("Team size reduced to %d, removed %d members", size, len(dropped))
        self._team_size = size

    def add(self, candidate: CandidateProfile) -> bool:
        """Fill the next empty slot.

        Returns False when the team is full; a candidate already on the team
        is left where it is and counts as added.
        """
        if candidate.id in self.member_ids:
            return True
        if self.active_role_index < 0:
            logger.info("Team is full, cannot add '%s'", candidate.name)
            return False
        self._members.append(_as_scored(candidate))
        logger.debug("Added '%s' to role %d", candidate.name, len(self._members))
        return True

    def replace(self, index: int, candidate: CandidateProfile) -> bool:
        """Swap the member in a filled slot.

        Returns False if the candidate already fills a different slot.
        """
        if not 0 <= index < len(self._members):
            msg = f"no filled role at index {index}"
            raise ValueError(msg)
        for i, member in enumerate(self._members):
            if member.id == candidate.id and i != index:
                return False
        self._members[index] = _as_scored(candidate)
        return True

    def remove(self, candidate_id: str) -> bool:
        before = len(self._members)
        self._members = [m for m in self._members if m.id != candidate_id]
        return len(self._members) < before

    def clear(self) -> None:
        self._members = []
        self._team_size = 0

    def review(self) -> TeamReview:
        """Team metrics: mean score rounded to an integer and the combined skill set."""
        team_score = 0
        if self._members:
            mean = sum(m.score for m in self._members) / len(self._members)
            team_score = int(mean + 0.5)
        unique_skills = list(dict.fromkeys(s for m in self._members for s in m.skills))
        return TeamReview(
            team_score=team_score,
            unique_skills=unique_skills,
            filled=len(self._members),
            team_size=self._team_size,
        )

    @classmethod
    def from_db(cls, conn: sqlite3.Connection) -> "Roster":
        """Restore a roster saved with save()."""
        return cls(team_size=load_team_size(conn), members=load_roster(conn))

    def save(self, conn: sqlite3.Connection) -> None:
        if self._team_size:
            save_team_size(conn, self._team_size)
        else:
            clear_team_size(conn)
        save_roster(conn, self._members)

    def delete(self, conn: sqlite3.Connection) -> None:
        """Clear this roster and its stored copy."""
        self.clear()
        clear_roster(conn)
        clear_team_size(conn)

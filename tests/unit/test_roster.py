"""Tests for Roster: slots, size changes, review metrics and persistence."""

import sqlite3
from pathlib import Path

import pytest

from shortlist.core.db import init_db
from shortlist.core.schemas import CandidateProfile, ScoredCandidate
from shortlist.team.roster import Roster, validate_team_size


def _member(candidate_id: str, score: float = 0.0, skills: list[str] | None = None) -> ScoredCandidate:
    return ScoredCandidate(
        id=candidate_id,
        name=f"Candidate {candidate_id}",
        skills=skills or [],
        score=score,
    )


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    return init_db(tmp_path / "test.db")


class TestTeamSize:
    def test_bounds(self) -> None:
        assert validate_team_size(1) == 1
        assert validate_team_size(15) == 15
        with pytest.raises(ValueError):
            validate_team_size(0)
        with pytest.raises(ValueError):
            validate_team_size(16)

    def test_constructor_validates(self) -> None:
        with pytest.raises(ValueError):
            Roster(team_size=20)

    def test_shrinking_trims_members(self) -> None:
        roster = Roster(team_size=3)
        for i in "abc":
            roster.add(_member(i))
        roster.set_team_size(2)
        assert roster.member_ids == ["a", "b"]
        assert roster.team_size == 2

    def test_growing_keeps_members(self) -> None:
        roster = Roster(team_size=1)
        roster.add(_member("a"))
        roster.set_team_size(3)
        assert roster.member_ids == ["a"]
        assert roster.active_role_index == 1


class TestAdd:
    def test_fills_slots_in_order(self) -> None:
        roster = Roster(team_size=2)
        assert roster.active_role_index == 0
        assert roster.add(_member("a"))
        assert roster.active_role_index == 1
        assert roster.add(_member("b"))
        assert roster.active_role_index == -1
        assert roster.is_complete

    def test_full_team_rejects(self) -> None:
        roster = Roster(team_size=1)
        roster.add(_member("a"))
        assert roster.add(_member("b")) is False
        assert roster.member_ids == ["a"]

    def test_duplicate_ignored(self) -> None:
        roster = Roster(team_size=3)
        roster.add(_member("a"))
        assert roster.add(_member("a")) is True
        assert roster.member_ids == ["a"]

    def test_no_size_rejects(self) -> None:
        roster = Roster()
        assert roster.add(_member("a")) is False
        assert not roster.is_complete

    def test_plain_profile_becomes_scored(self) -> None:
        roster = Roster(team_size=1)
        roster.add(CandidateProfile(id="p", name="Plain"))
        [member] = roster.members
        assert isinstance(member, ScoredCandidate)
        assert member.score == 0.0

    def test_members_is_a_copy(self) -> None:
        roster = Roster(team_size=2)
        roster.add(_member("a"))
        roster.members.append(_member("b"))
        assert roster.member_ids == ["a"]


class TestReplaceAndRemove:
    def test_replace(self) -> None:
        roster = Roster(team_size=2)
        roster.add(_member("a"))
        roster.add(_member("b"))
        assert roster.replace(0, _member("c"))
        assert roster.member_ids == ["c", "b"]

    def test_replace_with_member_of_other_slot(self) -> None:
        roster = Roster(team_size=2)
        roster.add(_member("a"))
        roster.add(_member("b"))
        assert roster.replace(0, _member("b")) is False
        assert roster.member_ids == ["a", "b"]

    def test_replace_same_slot_same_candidate(self) -> None:
        roster = Roster(team_size=1)
        roster.add(_member("a", score=10.0))
        assert roster.replace(0, _member("a", score=90.0))
        assert roster.members[0].score == 90.0

    def test_replace_empty_slot(self) -> None:
        with pytest.raises(ValueError):
            Roster(team_size=2).replace(0, _member("a"))

    def test_remove(self) -> None:
        roster = Roster(team_size=2)
        roster.add(_member("a"))
        assert roster.remove("a") is True
        assert roster.remove("a") is False

    def test_clear(self) -> None:
        roster = Roster(team_size=2)
        roster.add(_member("a"))
        roster.clear()
        assert roster.members == []
        assert roster.team_size == 0


class TestReview:
    def test_empty_team(self) -> None:
        review = Roster(team_size=3).review()
        assert review.team_score == 0
        assert review.unique_skills == []
        assert review.filled == 0
        assert review.team_size == 3

    def test_metrics(self) -> None:
        roster = Roster(team_size=3)
        roster.add(_member("a", 100.0, ["React", "Node.js"]))
        roster.add(_member("b", 50.0, ["React", "CSS"]))
        review = roster.review()
        assert review.team_score == 75
        assert review.unique_skills == ["React", "Node.js", "CSS"]
        assert review.filled == 2

    def test_team_score_rounds_half_up(self) -> None:
        roster = Roster(team_size=2)
        roster.add(_member("a", 62.5))
        roster.add(_member("b", 62.5))
        assert roster.review().team_score == 63


class TestPersistence:
    def test_save_and_restore(self, db: sqlite3.Connection) -> None:
        roster = Roster(team_size=2)
        roster.add(_member("a", 80.0))
        roster.save(db)
        restored = Roster.from_db(db)
        assert restored.team_size == 2
        assert restored.member_ids == ["a"]
        assert restored.members[0].score == 80.0

    def test_empty_store(self, db: sqlite3.Connection) -> None:
        roster = Roster.from_db(db)
        assert roster.team_size == 0
        assert roster.members == []

    def test_delete(self, db: sqlite3.Connection) -> None:
        roster = Roster(team_size=2)
        roster.add(_member("a"))
        roster.save(db)
        roster.delete(db)
        assert Roster.from_db(db).members == []
        assert Roster.from_db(db).team_size == 0

"""Tests for the database layer: init, roster and team size persistence."""

import pytest

from shortlist.core.db import (
    clear_roster,
    clear_team_size,
    init_db,
    load_roster,
    load_team_size,
    save_roster,
    save_team_size,
)
from shortlist.core.schemas import Degree, Education, ScoredCandidate, WorkExperience


def _scored(candidate_id: str = "1", score: float = 50.0) -> ScoredCandidate:
    return ScoredCandidate(
        id=candidate_id,
        name=f"Candidate {candidate_id}",
        skills=["Python"],
        work_experiences=[WorkExperience(company="Acme", role_name="Engineer")],
        education=Education(degrees=[Degree(degree="BSc", is_top25=True)]),
        score=score,
        skill_match_percentage=100.0,
        education_weight=0.2,
    )


@pytest.fixture()
def db(tmp_path):  # type: ignore[no-untyped-def]
    """Provide a fresh SQLite connection per test."""
    return init_db(tmp_path / "test.db")


class TestInitDb:
    def test_creates_tables(self, db) -> None:  # type: ignore[no-untyped-def]
        tables = {
            row[0]
            for row in db.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()
        }
        assert "roster" in tables
        assert "preferences" in tables

    def test_idempotent(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        """Calling init_db twice on the same path doesn't error."""
        p = tmp_path / "double.db"
        conn1 = init_db(p)
        conn1.close()
        conn2 = init_db(p)
        conn2.close()

    def test_creates_parent_dir(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        conn = init_db(tmp_path / "nested" / "dir" / "x.db")
        conn.close()
        assert (tmp_path / "nested" / "dir" / "x.db").exists()


class TestRoster:
    def test_empty(self, db) -> None:  # type: ignore[no-untyped-def]
        assert load_roster(db) == []

    def test_round_trip_preserves_order_and_fields(self, db) -> None:  # type: ignore[no-untyped-def]
        members = [_scored("2", 80.0), _scored("1", 60.5)]
        save_roster(db, members)
        loaded = load_roster(db)
        assert loaded == members
        assert loaded[0].education.degrees[0].is_top25 is True

    def test_save_replaces(self, db) -> None:  # type: ignore[no-untyped-def]
        save_roster(db, [_scored("1"), _scored("2")])
        save_roster(db, [_scored("3")])
        assert [m.id for m in load_roster(db)] == ["3"]

    def test_score_column(self, db) -> None:  # type: ignore[no-untyped-def]
        save_roster(db, [_scored("99", 87.5)])
        row = db.execute("SELECT score FROM roster WHERE candidate_id = '99'").fetchone()
        assert row["score"] == 87.5

    def test_clear(self, db) -> None:  # type: ignore[no-untyped-def]
        save_roster(db, [_scored("1")])
        clear_roster(db)
        assert load_roster(db) == []

    def test_persists_across_connections(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        p = tmp_path / "persist.db"
        conn = init_db(p)
        save_roster(conn, [_scored("1")])
        conn.close()
        conn = init_db(p)
        assert [m.id for m in load_roster(conn)] == ["1"]
        conn.close()


class TestTeamSize:
    def test_default_zero(self, db) -> None:  # type: ignore[no-untyped-def]
        assert load_team_size(db) == 0

    def test_save_and_overwrite(self, db) -> None:  # type: ignore[no-untyped-def]
        save_team_size(db, 4)
        assert load_team_size(db) == 4
        save_team_size(db, 7)
        assert load_team_size(db) == 7

    def test_clear(self, db) -> None:  # type: ignore[no-untyped-def]
        save_team_size(db, 4)
        clear_team_size(db)
        assert load_team_size(db) == 0

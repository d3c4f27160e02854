"""SQLite database layer for the shortlisted team and team size."""

import sqlite3
from datetime import datetime
from pathlib import Path

from shortlist.core.schemas import ScoredCandidate

_ROSTER_TABLE = """
CREATE TABLE IF NOT EXISTS roster (
    position        INTEGER PRIMARY KEY,
    candidate_id    TEXT    NOT NULL UNIQUE,
    name            TEXT    NOT NULL DEFAULT '',
    score           REAL    NOT NULL DEFAULT 0.0,
    payload_json    TEXT    NOT NULL,
    added_at        TEXT    NOT NULL
);
"""

_PREFERENCES_TABLE = """
CREATE TABLE IF NOT EXISTS preferences (
    key             TEXT PRIMARY KEY,
    value           TEXT NOT NULL
);
"""

_TEAM_SIZE_KEY = "team_size"


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_ROSTER_TABLE)
    conn.execute(_PREFERENCES_TABLE)
    conn.commit()
    return conn


def save_roster(conn: sqlite3.Connection, members: list[ScoredCandidate]) -> None:
    """Replace the stored roster with members, in order."""
    now = datetime.now().isoformat()
    with conn:
        conn.execute("DELETE FROM roster")
        conn.executemany(
            """
            INSERT INTO roster (position, candidate_id, name, score, payload_json, added_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    position,
                    m.id,
                    m.name,
                    m.score,
                    m.model_dump_json(by_alias=True),
                    now,
                )
                for position, m in enumerate(members)
            ],
        )


def load_roster(conn: sqlite3.Connection) -> list[ScoredCandidate]:
    """Return stored roster members ordered by position (empty if none)."""
    rows = conn.execute("SELECT payload_json FROM roster ORDER BY position").fetchall()
    return [ScoredCandidate.model_validate_json(row["payload_json"]) for row in rows]


def clear_roster(conn: sqlite3.Connection) -> None:
    with conn:
        conn.execute("DELETE FROM roster")


def save_team_size(conn: sqlite3.Connection, size: int) -> None:
    with conn:
        conn.execute(
            """
            INSERT INTO preferences (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (_TEAM_SIZE_KEY, str(size)),
        )


def load_team_size(conn: sqlite3.Connection) -> int:
    """Return the stored team size, or 0 when none was saved."""
    row = conn.execute(
        "SELECT value FROM preferences WHERE key = ?", (_TEAM_SIZE_KEY,),
    ).fetchone()
    if row is None:
        return 0
    return int(row["value"])


def clear_team_size(conn: sqlite3.Connection) -> None:
    with conn:
        conn.execute("DELETE FROM preferences WHERE key = ?", (_TEAM_SIZE_KEY,))

"""Candidate dataset loading: JSON array in, CandidateProfile list out.

The raw records carry no ids; one is derived from the email and the record's
position among the named records.
"""

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from shortlist.core.schemas import CandidateProfile

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


class DatasetError(ValueError):
    """The dataset file is missing or not an array of candidate records."""


def generate_candidate_id(email: str, index: int) -> str:
    """Deterministic id: email with its first '@' and '.' replaced, plus the index."""
    return f"{email.replace('@', '-', 1).replace('.', '-', 1)}-{index}"


def transform_candidate(raw: dict[str, Any], index: int) -> CandidateProfile:
    """Validate a raw record and fill in id and display fields."""
    profile = CandidateProfile.model_validate(raw)
    first = profile.work_experiences[0] if profile.work_experiences else None
    return profile.model_copy(update={
        "id": profile.id or generate_candidate_id(profile.email, index),
        "current_role": first.role_name if first else None,
        "current_company": first.company if first else None,
        "highest_education": profile.education.highest_level,
    })


def parse_candidates(raw_data: Any) -> list[CandidateProfile]:
    """Turn decoded JSON into profiles, skipping records without a name."""
    if not isinstance(raw_data, list):
        msg = "Invalid data format: expected an array of candidates"
        raise DatasetError(msg)

    named = [r for r in raw_data if isinstance(r, dict) and r.get("name")]
    skipped = len(raw_data) - len(named)
    if skipped:
        logger.debug("Skipped %d records without a name", skipped)

    candidates: list[CandidateProfile] = []
    for index, record in enumerate(named):
        try:
            candidates.append(transform_candidate(record, index))
        except ValidationError as e:
            msg = f"Invalid candidate record at index {index}: {e}"
            raise DatasetError(msg) from e
    return candidates


def load_candidates(path: str | Path) -> list[CandidateProfile]:
    """Read and parse the candidates JSON file."""
    path = Path(path)
    if not path.exists():
        msg = f"Dataset file not found: {path}"
        raise DatasetError(msg)
    try:
        raw_data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        msg = f"Dataset file is not valid JSON: {path}: {e}"
        raise DatasetError(msg) from e
    return parse_candidates(raw_data)


class CandidateDataset:
    """Loads the dataset on demand and keeps it for ttl_seconds.

    Failed loads are not cached; the next call tries again.
    """

    def __init__(
        self,
        path: str | Path,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._path = Path(path)
        self._ttl = ttl_seconds
        self._clock = clock
        self._cache: list[CandidateProfile] | None = None
        self._last_fetch = 0.0

    def get_candidates(self) -> list[CandidateProfile]:
        now = self._clock()
        if self._cache is not None and now - self._last_fetch < self._ttl:
            return self._cache

        candidates = load_candidates(self._path)
        logger.info("Loaded %d candidates from %s", len(candidates), self._path)
        self._cache = candidates
        self._last_fetch = now
        return candidates

    def get_by_id(self, candidate_id: str) -> CandidateProfile | None:
        return next((c for c in self.get_candidates() if c.id == candidate_id), None)

    def clear_cache(self) -> None:
        self._cache = None
        self._last_fetch = 0.0

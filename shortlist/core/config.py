"""Configuration models and YAML loader for the team shortlist engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from shortlist.core.schemas import RolePreset

TEAM_SIZE_MIN = 1
TEAM_SIZE_MAX = 15


class DatasetConfig(BaseModel):
    """Location of the candidate dataset and how long a loaded copy stays fresh."""

    path: str = "data/candidatesData.json"
    cache_ttl_seconds: float = Field(default=300.0, ge=0.0)


class DatabaseConfig(BaseModel):
    """Database configuration for the roster store."""

    path: str = "data/shortlist.db"


class ScoringWeights(BaseModel):
    """Base category weights used before redistribution."""

    skills_weight: float = Field(default=0.5, ge=0.0, le=1.0)
    experience_weight: float = Field(default=0.3, ge=0.0, le=1.0)
    education_top25_weight: float = Field(default=0.2, ge=0.0, le=1.0)
    education_top50_weight: float = Field(default=0.15, ge=0.0, le=1.0)
    education_default_weight: float = Field(default=0.1, ge=0.0, le=1.0)


class ScoringConfig(ScoringWeights):
    """Scoring weights plus the lifetime of cached scores."""

    cache_ttl_seconds: float = Field(default=300.0, ge=0.0)


class TeamConfig(BaseModel):
    """Default team size; None means the user picks one before building."""

    size: int | None = Field(default=None, ge=TEAM_SIZE_MIN, le=TEAM_SIZE_MAX)


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    dataset: DatasetConfig = Field(default_factory=DatasetConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    team: TeamConfig = Field(default_factory=TeamConfig)
    roles: list[RolePreset] = Field(default_factory=list)

    @model_validator(mode="after")
    def role_titles_unique(self) -> "Settings":
        titles = [r.title.lower() for r in self.roles]
        if len(titles) != len(set(titles)):
            msg = "role titles must be unique"
            raise ValueError(msg)
        return self

    @field_validator("roles", mode="before")
    @classmethod
    def none_is_no_roles(cls, v: Any) -> Any:
        return [] if v is None else v

    def get_role(self, title: str) -> RolePreset:
        """Look up a role preset by title (case-insensitive)."""
        wanted = title.strip().lower()
        for role in self.roles:
            if role.title.lower() == wanted:
                return role
        msg = f"Unknown role '{title}'. Configured roles: {[r.title for r in self.roles]}"
        raise ValueError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)

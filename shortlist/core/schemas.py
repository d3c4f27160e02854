"""Core data models for the team shortlist engine.

Field names follow Python conventions; the JSON dataset's camelCase keys are
accepted (and emitted) through aliases.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_empty_list(v: Any) -> Any:
    """None becomes an empty list; null entries inside a list are dropped."""
    if v is None:
        return []
    if isinstance(v, list):
        return [item for item in v if item is not None]
    return v


def _none_to_empty_str(v: Any) -> Any:
    return "" if v is None else v


class WorkExperience(BaseModel):
    """A single entry of a candidate's work history."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    company: str = ""
    role_name: str = Field(default="", alias="roleName")

    _coerce_strings = field_validator("company", "role_name", mode="before")(_none_to_empty_str)


class Degree(BaseModel):
    """An educational degree. Prestige flags default to False when absent."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    degree: str = ""
    subject: str = ""
    school: str = ""
    gpa: str = ""
    start_date: str = Field(default="", alias="startDate")
    end_date: str = Field(default="", alias="endDate")
    original_school: str = Field(default="", alias="originalSchool")
    is_top50: bool = Field(default=False, alias="isTop50")
    is_top25: bool = Field(default=False, alias="isTop25")

    _coerce_strings = field_validator(
        "degree", "subject", "school", "gpa", "start_date", "end_date", "original_school",
        mode="before",
    )(_none_to_empty_str)

    @field_validator("is_top50", "is_top25", mode="before")
    @classmethod
    def _none_is_false(cls, v: Any) -> Any:
        return False if v is None else v


class Education(BaseModel):
    """Education profile: highest level label plus the list of degrees."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    highest_level: str = ""
    degrees: list[Degree] = Field(default_factory=list)

    _coerce_level = field_validator("highest_level", mode="before")(_none_to_empty_str)
    _coerce_degrees = field_validator("degrees", mode="before")(_none_to_empty_list)

    @property
    def has_top25(self) -> bool:
        return any(d.is_top25 for d in self.degrees)

    @property
    def has_top50(self) -> bool:
        return any(d.is_top50 for d in self.degrees)


class CandidateProfile(BaseModel):
    """A person from the candidate dataset.

    Frozen: scoring never mutates a profile, it derives a ScoredCandidate.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    id: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    submitted_at: str = ""
    work_availability: list[str] = Field(default_factory=list)
    annual_salary_expectation: dict[str, str] = Field(default_factory=dict)
    work_experiences: list[WorkExperience] = Field(default_factory=list)
    education: Education = Field(default_factory=Education)
    skills: list[str] = Field(default_factory=list)

    # Display fields filled in by the dataset loader.
    current_role: str | None = Field(default=None, alias="currentRole")
    current_company: str | None = Field(default=None, alias="currentCompany")
    highest_education: str | None = Field(default=None, alias="highestEducation")

    _coerce_strings = field_validator(
        "id", "name", "email", "phone", "location", "submitted_at", mode="before",
    )(_none_to_empty_str)
    _coerce_lists = field_validator(
        "work_availability", "work_experiences", "skills", mode="before",
    )(_none_to_empty_list)

    @field_validator("annual_salary_expectation", mode="before")
    @classmethod
    def _none_is_empty_mapping(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("education", mode="before")
    @classmethod
    def _none_is_empty_education(cls, v: Any) -> Any:
        return {} if v is None else v


class ScoredCandidate(CandidateProfile):
    """A CandidateProfile annotated with the score fields of one scoring pass."""

    score: float = Field(default=0.0, ge=0.0, le=100.0)
    skill_match_percentage: float = Field(default=0.0, ge=0.0, le=100.0, alias="skillMatchPercentage")
    experience_match_percentage: float = Field(
        default=0.0, ge=0.0, le=100.0, alias="experienceMatchPercentage",
    )
    education_match_percentage: float = Field(
        default=0.0, ge=0.0, le=100.0, alias="educationMatchPercentage",
    )
    education_weight: float = Field(default=0.0, ge=0.0, le=1.0, alias="educationWeight")

    @property
    def profile(self) -> CandidateProfile:
        """Return the plain profile without score fields."""
        return CandidateProfile.model_validate(
            self.model_dump(include=set(CandidateProfile.model_fields)),
        )


class FilterCriteria(BaseModel):
    """Keyword lists for the three scoring categories.

    An empty list marks that category inactive for a scoring pass.
    """

    model_config = ConfigDict(frozen=True)

    skills: list[str] = Field(default_factory=list)
    experience: list[str] = Field(default_factory=list)
    education: list[str] = Field(default_factory=list)

    _coerce_lists = field_validator("skills", "experience", "education", mode="before")(
        _none_to_empty_list,
    )

    @property
    def is_empty(self) -> bool:
        return not (self.skills or self.experience or self.education)

    @property
    def active_count(self) -> int:
        """Total number of keywords across all categories."""
        return len(self.skills) + len(self.experience) + len(self.education)

    def cache_key(self) -> str:
        """Deterministic key covering all three keyword lists."""
        return json.dumps(
            {"skills": self.skills, "experience": self.experience, "education": self.education},
            separators=(",", ":"),
        )


class RolePreset(BaseModel):
    """Named set of role criteria, configured in settings.yaml."""

    title: str
    skills: list[str] = Field(default_factory=list)
    experience: list[str] = Field(default_factory=list)
    education: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "role title must not be empty"
            raise ValueError(msg)
        return v.strip()

    def to_criteria(self) -> FilterCriteria:
        return FilterCriteria(skills=self.skills, experience=self.experience, education=self.education)


class TeamReview(BaseModel):
    """Summary metrics for an assembled roster."""

    team_score: int
    unique_skills: list[str]
    filled: int
    team_size: int

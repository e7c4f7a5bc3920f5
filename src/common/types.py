"""
Canonical Types and Schemas for the Job Board

Defines the job record, the filter criteria a visitor applies to the
listing, the admin/CSV input forms, and the signed-in user identity.
"""

import hashlib
import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class JobType(str, Enum):
    """Employment type of a listing."""
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    INTERNSHIP = "Internship"


class ExperienceLevel(str, Enum):
    """Seniority band of a listing."""
    ENTRY = "Entry"
    MID = "Mid"
    SENIOR = "Senior"


def _check_salary_range(salary_min: Optional[int], salary_max: Optional[int]) -> None:
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise ValueError("salary_min must not exceed salary_max")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# =============================================================================
# Job record
# =============================================================================

class Job(BaseModel):
    """
    A single job listing.

    Immutable once loaded; edits go through the admin service, which writes
    the store and reloads.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    id: str = Field(..., min_length=1)
    title: str
    company: str
    location: str
    job_type: JobType
    experience_level: ExperienceLevel
    remote: bool = False
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    description: str = ""
    posted_at: datetime
    source: str = ""
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _salary_range(self) -> "Job":
        _check_salary_range(self.salary_min, self.salary_max)
        return self

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Job":
        """Build a Job from a MongoDB document (``_id`` holds the job id)."""
        data = {key: value for key, value in doc.items() if key != "_id"}
        data["id"] = str(doc.get("_id", doc.get("id", "")))
        return cls.model_validate(data)

    def to_document(self) -> Dict[str, Any]:
        """Serialize for MongoDB storage."""
        doc = self.model_dump(mode="python", exclude={"id"})
        doc["_id"] = self.id
        doc["job_type"] = self.job_type.value
        doc["experience_level"] = self.experience_level.value
        return doc

    def to_api(self) -> Dict[str, Any]:
        """Serialize for JSON responses."""
        return self.model_dump(mode="json")


# =============================================================================
# Filter criteria
# =============================================================================

class FilterCriteria(BaseModel):
    """
    Optional constraints a visitor applies to narrow the job list.

    Every field is independently optional; ``None`` means no constraint on
    that dimension. Empty type/level lists and ``remote=False`` are
    normalised to ``None`` since they impose no constraint either.
    """

    model_config = ConfigDict(frozen=True)

    keyword: Optional[str] = None
    location: Optional[str] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    job_type: Optional[List[JobType]] = None
    experience_level: Optional[List[ExperienceLevel]] = None
    remote: Optional[bool] = None

    @field_validator("keyword", "location", mode="before")
    @classmethod
    def _empty_text_to_none(cls, value: Any) -> Any:
        # Needles are matched as typed; only the empty string means "no filter"
        return None if value == "" else value

    @field_validator("salary_min", "salary_max", mode="before")
    @classmethod
    def _blank_salary_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("job_type", "experience_level", mode="before")
    @classmethod
    def _empty_list_to_none(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            value = [value]
        values = [item for item in value if _blank_to_none(item) is not None]
        return values or None

    @field_validator("remote")
    @classmethod
    def _false_to_none(cls, value: Optional[bool]) -> Optional[bool]:
        return True if value else None

    def is_empty(self) -> bool:
        """True when no dimension is constrained."""
        return all(value is None for value in self.model_dump().values())

    def key(self) -> str:
        """
        Stable fingerprint of the criteria.

        Two criteria with the same constraints (regardless of list order)
        produce the same key, so the web layer can tell whether the filter
        actually changed between requests.
        """
        data = self.model_dump(mode="json")
        for name in ("job_type", "experience_level"):
            if data[name] is not None:
                data[name] = sorted(set(data[name]))
        encoded = json.dumps(data, sort_keys=True)
        return hashlib.sha256(encoded.encode()).hexdigest()[:16]


# =============================================================================
# Input forms
# =============================================================================

class JobForm(BaseModel):
    """
    Admin add/edit job form.

    Salaries arrive as strings from HTML forms; blanks mean "not given".
    """

    title: str = Field(..., min_length=2)
    company: str = Field(..., min_length=2)
    location: str = Field(..., min_length=2)
    job_type: JobType = JobType.FULL_TIME
    experience_level: ExperienceLevel = ExperienceLevel.MID
    description: str = Field(..., min_length=10)
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    remote: bool = False

    @field_validator("title", "company", "location", "description", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("salary_min", "salary_max", mode="before")
    @classmethod
    def _blank_salary(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @model_validator(mode="after")
    def _salary_range(self) -> "JobForm":
        _check_salary_range(self.salary_min, self.salary_max)
        return self


_TRUTHY = {"true", "yes", "1", "y"}


class CsvJobRow(BaseModel):
    """One row of a CSV import. Only title, company, location and job_type are required."""

    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    job_type: JobType
    experience_level: Optional[ExperienceLevel] = ExperienceLevel.MID
    description: str = ""
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    remote: bool = False

    @field_validator("title", "company", "location", "description", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("experience_level", "salary_min", "salary_max", mode="before")
    @classmethod
    def _blank_optional(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("experience_level", mode="after")
    @classmethod
    def _default_level(cls, value: Optional[ExperienceLevel]) -> ExperienceLevel:
        return value or ExperienceLevel.MID

    @field_validator("remote", mode="before")
    @classmethod
    def _parse_remote(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return str(value or "").strip().lower() in _TRUTHY

    @model_validator(mode="after")
    def _salary_range(self) -> "CsvJobRow":
        _check_salary_range(self.salary_min, self.salary_max)
        return self


# =============================================================================
# Users
# =============================================================================

@dataclass(frozen=True)
class UserIdentity:
    """Signed-in user as issued by the auth service."""
    id: str
    email: str
    name: str = ""
    is_admin: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "is_admin": self.is_admin,
        }

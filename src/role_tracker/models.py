"""
Pydantic models for extracted and persisted roles.

Two families live here:

- Extraction records (RoleRecord, SourceRecord, ExtractedRole) built in memory
  by extractors during a single scrape pass.
- Persisted entities (Role, RoleSource) as returned by a RoleStore.

Identity keys:
- Role: (company_name, role_title), exact match after normalization
- RoleSource: (source, source_role_id)
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


class RoleLevel(str, Enum):
    """Seniority bucket assigned from title keywords."""

    ENTRY = "Entry"
    MID = "Mid"
    SENIOR = "Senior"


class WorkMode(str, Enum):
    """Where the work happens."""

    REMOTE = "Remote"
    HYBRID = "Hybrid"
    ONSITE = "Onsite"


class ScrapeStatus(str, Enum):
    """Outcome of the last scrape that touched a RoleSource."""

    SUCCESS = "success"
    FAILURE = "failure"


class RoleRecord(BaseModel):
    """
    Role content extracted from a job board.

    company_name and role_title form the identity key used by the reconciler,
    so they must be non-empty once whitespace is stripped.
    """

    # Company
    company_name: str = Field(description="Hiring company")
    company_domain: Optional[str] = None
    industry: Optional[str] = None
    funding_stage: Optional[str] = None
    company_size: Optional[str] = None

    # Role
    role_title: str = Field(description="Job title as shown on the board")
    role_level: RoleLevel = RoleLevel.MID
    role_type: str = "Full-time"
    work_mode: WorkMode = WorkMode.REMOTE
    location: Optional[str] = None

    # Compensation
    compensation_text: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_currency: Optional[str] = None
    offers_equity: Optional[bool] = None

    # Content
    company_description: Optional[str] = None
    role_description: Optional[str] = None

    # Dates
    posting_date: datetime = Field(default_factory=utcnow)
    closing_date: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("company_name", "role_title")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("must be non-empty")
        return value

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.company_name, self.role_title)


class SourceRecord(BaseModel):
    """Where a role was seen and how to apply to it."""

    source: str = Field(description="Identifier of the origin board")
    source_role_id: str = Field(description="Stable id scoped to the source")
    source_url: str = Field(description="The board's listing URL")
    application_url: str = Field(description="Direct apply link")
    raw_payload: Optional[Dict[str, Any]] = None

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.source, self.source_role_id)


class ExtractedRole(BaseModel):
    """A role/source pair produced by one extractor."""

    role: RoleRecord
    source: SourceRecord


class Role(RoleRecord):
    """Canonical, deduplicated job posting."""

    id: str
    is_active: bool = True
    first_seen_at: datetime
    last_seen_at: datetime


class RoleSource(BaseModel):
    """One sighting of a Role on one external source."""

    id: str
    tracker_role_id: str
    source: str
    source_role_id: str
    source_url: str
    application_url: str
    last_seen_at: datetime
    last_scraped_at: datetime
    scrape_status: ScrapeStatus = ScrapeStatus.SUCCESS
    raw_payload: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(use_enum_values=True)


class ExtractionResult(BaseModel):
    """Result of running a single extractor. Failures never raise past the runner."""

    success: bool
    source: str
    roles: List[ExtractedRole] = Field(default_factory=list)
    error: Optional[str] = None
    duration_seconds: float = 0.0


class UpsertOutcome(BaseModel):
    """What the reconciler did with one role/source pair."""

    role_id: str
    created: bool
    source_created: bool


class RunSummary(BaseModel):
    """Totals for one full pass over the registered extractors."""

    total_jobs: int = 0
    success_count: int = 0
    failure_count: int = 0

    new_roles: int = 0
    existing_roles: int = 0
    new_sources: int = 0
    updated_sources: int = 0
    skipped_records: int = 0

    errors: List[str] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=utcnow)
    finished_at: Optional[datetime] = None

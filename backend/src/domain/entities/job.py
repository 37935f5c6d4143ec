"""
Job Domain Entity
Immutable job posting with a guarded publication lifecycle
"""
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Sequence, Tuple
from uuid import UUID, uuid4

from core.clock import utc_now
from core.result import Result, Ok, invalid_transition, domain_rule
from ..enums import JobType, WorkMode, ExperienceLevel
from ..value_objects import JobStatus, SalaryRange


# (current status, action) -> new status
JOB_TRANSITIONS: Dict[Tuple[JobStatus, str], JobStatus] = {
    (JobStatus.DRAFT, "publish"): JobStatus.ACTIVE,
    (JobStatus.PAUSED, "publish"): JobStatus.ACTIVE,
    (JobStatus.ACTIVE, "pause"): JobStatus.PAUSED,
    (JobStatus.DRAFT, "close"): JobStatus.CLOSED,
    (JobStatus.ACTIVE, "close"): JobStatus.CLOSED,
    (JobStatus.PAUSED, "close"): JobStatus.CLOSED,
}

_ACTION_TARGETS = {
    "publish": JobStatus.ACTIVE,
    "pause": JobStatus.PAUSED,
    "close": JobStatus.CLOSED,
}


@dataclass(frozen=True)
class Job:
    """Job posting domain entity - immutable"""

    id: UUID
    employer_id: UUID
    title: str
    description: str
    job_type: JobType
    work_mode: WorkMode
    experience_level: ExperienceLevel
    status: JobStatus
    created_at: datetime
    updated_at: datetime

    requirements: Optional[str] = None
    benefits: Optional[str] = None
    company_name: Optional[str] = None
    company_logo_url: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None

    # Compensation
    salary_min: Optional[Decimal] = None
    salary_max: Optional[Decimal] = None
    salary_currency: str = "USD"
    is_salary_visible: bool = True

    # ServiceNow specifics
    skills_required: Tuple[str, ...] = ()
    certifications: Tuple[str, ...] = ()
    servicenow_versions: Tuple[str, ...] = ()

    # Counters
    application_count: int = 0
    view_count: int = 0

    expires_at: Optional[datetime] = None
    status_changed_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate job data"""
        if not self.title or len(self.title.strip()) == 0:
            raise ValueError("Job title cannot be empty")
        if self.salary_min is not None or self.salary_max is not None:
            SalaryRange(self.salary_min, self.salary_max, self.salary_currency)

    @classmethod
    def create(
        cls,
        employer_id: UUID,
        title: str,
        description: str,
        job_type: JobType,
        work_mode: WorkMode,
        experience_level: ExperienceLevel,
        requirements: Optional[str] = None,
        benefits: Optional[str] = None,
        company_name: Optional[str] = None,
        company_logo_url: Optional[str] = None,
        location: Optional[str] = None,
        country: Optional[str] = None,
        salary_min: Optional[Decimal] = None,
        salary_max: Optional[Decimal] = None,
        salary_currency: str = "USD",
        is_salary_visible: bool = True,
        skills_required: Sequence[str] = (),
        certifications: Sequence[str] = (),
        servicenow_versions: Sequence[str] = (),
        expires_at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> "Job":
        """New postings always start as drafts"""
        now = now or utc_now()
        return cls(
            id=uuid4(),
            employer_id=employer_id,
            title=title.strip(),
            description=description.strip(),
            job_type=job_type,
            work_mode=work_mode,
            experience_level=experience_level,
            status=JobStatus.DRAFT,
            created_at=now,
            updated_at=now,
            requirements=_clean(requirements),
            benefits=_clean(benefits),
            company_name=_clean(company_name),
            company_logo_url=_clean(company_logo_url),
            location=_clean(location),
            country=_clean(country),
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency=(salary_currency or "USD").upper(),
            is_salary_visible=is_salary_visible,
            skills_required=_tags(skills_required),
            certifications=_tags(certifications),
            servicenow_versions=_tags(servicenow_versions),
            expires_at=expires_at,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def salary_range(self) -> SalaryRange:
        return SalaryRange(self.salary_min, self.salary_max, self.salary_currency)

    def is_owned_by(self, user_id: Optional[UUID]) -> bool:
        return user_id is not None and self.employer_id == user_id

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at is not None and self.expires_at <= (now or utc_now())

    def is_active(self, now: Optional[datetime] = None) -> bool:
        """Published and not past its expiry"""
        return self.status == JobStatus.ACTIVE and not self.is_expired(now)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def publish(self, now: Optional[datetime] = None) -> Result["Job"]:
        if self.status == JobStatus.CLOSED:
            return invalid_transition("Job", self.status, JobStatus.ACTIVE, "Cannot publish a closed job.")
        if self.status == JobStatus.ACTIVE:
            return invalid_transition("Job", self.status, JobStatus.ACTIVE, "Job is already active.")
        return self._transition("publish", now)

    def pause(self, now: Optional[datetime] = None) -> Result["Job"]:
        if self.status != JobStatus.ACTIVE:
            return invalid_transition("Job", self.status, JobStatus.PAUSED, "Only active jobs can be paused.")
        return self._transition("pause", now)

    def close(self, now: Optional[datetime] = None) -> Result["Job"]:
        if self.status == JobStatus.CLOSED:
            return invalid_transition("Job", self.status, JobStatus.CLOSED, "Job is already closed.")
        return self._transition("close", now)

    def _transition(self, action: str, now: Optional[datetime]) -> Result["Job"]:
        target = JOB_TRANSITIONS.get((self.status, action))
        if target is None:
            return invalid_transition("Job", self.status, _ACTION_TARGETS[action])
        now = now or utc_now()
        return Ok(replace(self, status=target, status_changed_at=now, updated_at=now))

    # ------------------------------------------------------------------
    # Content changes
    # ------------------------------------------------------------------

    def update_details(self, now: Optional[datetime] = None, **changes) -> Result["Job"]:
        """Replace editable fields; closed postings are read-only"""
        if self.status == JobStatus.CLOSED:
            return domain_rule("job.closed", "A closed job cannot be edited.")
        for key in ("requirements", "benefits", "company_name", "company_logo_url", "location", "country"):
            if key in changes:
                changes[key] = _clean(changes[key])
        for key in ("title", "description"):
            if key in changes and changes[key] is not None:
                changes[key] = changes[key].strip()
        for key in ("skills_required", "certifications", "servicenow_versions"):
            if key in changes and changes[key] is not None:
                changes[key] = _tags(changes[key])
        if changes.get("salary_currency"):
            changes["salary_currency"] = changes["salary_currency"].upper()
        try:
            updated = replace(self, updated_at=now or utc_now(), **changes)
        except ValueError as e:
            return domain_rule("job.invalid", str(e))
        return Ok(updated)

    def apply_enhancement(
        self,
        title: Optional[str],
        description: Optional[str],
        requirements: Optional[str],
        suggested_skills: Sequence[str] = (),
        now: Optional[datetime] = None,
    ) -> Result["Job"]:
        """Adopt accepted AI-improved content; suggested skills are merged in"""
        if self.status == JobStatus.CLOSED:
            return domain_rule("job.closed", "A closed job cannot be edited.")
        merged = list(self.skills_required)
        known = {s.lower() for s in merged}
        for skill in suggested_skills:
            if skill and skill.lower() not in known:
                merged.append(skill)
                known.add(skill.lower())
        return Ok(replace(
            self,
            title=(title or self.title).strip(),
            description=(description or self.description).strip(),
            requirements=_clean(requirements) or self.requirements,
            skills_required=tuple(merged),
            updated_at=now or utc_now(),
        ))

    def record_view(self, now: Optional[datetime] = None) -> "Job":
        return replace(self, view_count=self.view_count + 1, updated_at=now or utc_now())

    def record_application(self, now: Optional[datetime] = None) -> "Job":
        return replace(self, application_count=self.application_count + 1, updated_at=now or utc_now())

    def __str__(self) -> str:
        return f"Job({self.id}, {self.title}, status={self.status.value})"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _tags(values: Sequence[str]) -> Tuple[str, ...]:
    """Trimmed, de-duplicated, order preserving"""
    seen = []
    for v in values or ():
        v = (v or "").strip()
        if v and v not in seen:
            seen.append(v)
    return tuple(seen)

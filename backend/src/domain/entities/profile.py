"""
Profile Domain Entities
Candidate and employer profiles, one of each per user
"""
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Tuple
from uuid import UUID, uuid4

from core.clock import utc_now
from ..enums import CandidateLevel, AvailabilityStatus
from .cv_parse_result import ParsedCv


# Completeness weights, capped at 100
_COMPLETENESS_WEIGHTS = (
    ("headline", 10),
    ("bio", 15),
    ("profile_picture_url", 10),
    ("cv_url", 20),
    ("skills", 20),
    ("certifications", 15),
    ("linkedin_url", 5),
    ("location", 5),
)


@dataclass(frozen=True)
class CandidateProfile:
    """Candidate profile domain entity - immutable"""

    id: UUID
    user_id: UUID
    created_at: datetime
    updated_at: datetime

    headline: Optional[str] = None
    bio: Optional[str] = None
    experience_level: CandidateLevel = CandidateLevel.MID
    years_of_experience: int = 0
    availability: AvailabilityStatus = AvailabilityStatus.OPEN_TO_OPPORTUNITIES
    current_role: Optional[str] = None
    desired_role: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    time_zone: Optional[str] = None

    profile_picture_url: Optional[str] = None
    cv_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    website_url: Optional[str] = None

    is_public: bool = True
    desired_salary_min: Optional[Decimal] = None
    desired_salary_max: Optional[Decimal] = None
    salary_currency: str = "USD"
    open_to_remote: bool = False
    open_to_relocation: bool = False

    skills: Tuple[str, ...] = ()
    certifications: Tuple[str, ...] = ()
    servicenow_versions: Tuple[str, ...] = ()

    profile_completeness: int = 0

    @classmethod
    def create(cls, user_id: UUID, now: Optional[datetime] = None) -> "CandidateProfile":
        now = now or utc_now()
        return cls(id=uuid4(), user_id=user_id, created_at=now, updated_at=now)

    def is_visible_to(self, user_id: Optional[UUID], is_admin: bool = False) -> bool:
        return self.is_public or is_admin or (user_id is not None and user_id == self.user_id)

    def update(self, now: Optional[datetime] = None, **changes) -> "CandidateProfile":
        for key in ("skills", "certifications", "servicenow_versions"):
            if key in changes:
                changes[key] = _tags(changes[key])
        for key, value in list(changes.items()):
            if isinstance(value, str):
                changes[key] = value.strip() or None
        if "salary_currency" in changes:
            changes["salary_currency"] = (changes["salary_currency"] or "USD").upper()
        updated = replace(self, updated_at=now or utc_now(), **changes)
        return replace(updated, profile_completeness=updated.completeness())

    def apply_parsed_cv(
        self, parsed: ParsedCv, fields: Iterable[str], now: Optional[datetime] = None
    ) -> "CandidateProfile":
        """Copy the accepted extracted fields; blanks never overwrite existing data"""
        changes = {}
        mapping = {
            "headline": parsed.headline,
            "bio": parsed.summary,
            "current_role": parsed.current_role,
            "years_of_experience": parsed.years_of_experience,
            "location": parsed.location,
            "linkedin_url": parsed.linkedin_url,
            "github_url": parsed.github_url,
            "skills": parsed.skills,
            "certifications": tuple(c.name for c in parsed.certifications),
            "servicenow_versions": parsed.servicenow_versions,
        }
        source_names = {"bio": "summary"}
        accepted = set(fields)
        for target, value in mapping.items():
            if source_names.get(target, target) not in accepted:
                continue
            if value is None or value == () or value == "":
                continue
            changes[target] = value
        return self.update(now=now, **changes)

    def completeness(self) -> int:
        score = sum(weight for name, weight in _COMPLETENESS_WEIGHTS if getattr(self, name))
        return min(score, 100)


@dataclass(frozen=True)
class EmployerProfile:
    """Employer profile domain entity - immutable"""

    id: UUID
    user_id: UUID
    created_at: datetime
    updated_at: datetime

    company_name: Optional[str] = None
    company_description: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    headquarters_city: Optional[str] = None
    headquarters_country: Optional[str] = None
    website_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    logo_url: Optional[str] = None
    is_verified: bool = False

    @classmethod
    def create(cls, user_id: UUID, now: Optional[datetime] = None) -> "EmployerProfile":
        now = now or utc_now()
        return cls(id=uuid4(), user_id=user_id, created_at=now, updated_at=now)

    def update(self, now: Optional[datetime] = None, **changes) -> "EmployerProfile":
        for key, value in list(changes.items()):
            if isinstance(value, str):
                changes[key] = value.strip() or None
        return replace(self, updated_at=now or utc_now(), **changes)


def _tags(values: Optional[Sequence[str]]) -> Tuple[str, ...]:
    seen = []
    for v in values or ():
        v = (v or "").strip()
        if v and v not in seen:
            seen.append(v)
    return tuple(seen)

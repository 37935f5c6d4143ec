"""
Profile DTOs
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from application.dtos import CamelModel
from domain.entities import CandidateProfile, EmployerProfile


class CandidateProfileDto(CamelModel):
    id: UUID
    user_id: UUID
    headline: Optional[str] = None
    bio: Optional[str] = None
    experience_level: str
    years_of_experience: int
    availability: str
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
    is_public: bool
    desired_salary_min: Optional[Decimal] = None
    desired_salary_max: Optional[Decimal] = None
    salary_currency: str
    open_to_remote: bool
    open_to_relocation: bool
    skills: List[str]
    certifications: List[str]
    servicenow_versions: List[str]
    profile_completeness: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, profile: CandidateProfile) -> "CandidateProfileDto":
        return cls(
            id=profile.id,
            user_id=profile.user_id,
            headline=profile.headline,
            bio=profile.bio,
            experience_level=profile.experience_level.value,
            years_of_experience=profile.years_of_experience,
            availability=profile.availability.value,
            current_role=profile.current_role,
            desired_role=profile.desired_role,
            location=profile.location,
            country=profile.country,
            time_zone=profile.time_zone,
            profile_picture_url=profile.profile_picture_url,
            cv_url=profile.cv_url,
            linkedin_url=profile.linkedin_url,
            github_url=profile.github_url,
            website_url=profile.website_url,
            is_public=profile.is_public,
            desired_salary_min=profile.desired_salary_min,
            desired_salary_max=profile.desired_salary_max,
            salary_currency=profile.salary_currency,
            open_to_remote=profile.open_to_remote,
            open_to_relocation=profile.open_to_relocation,
            skills=list(profile.skills),
            certifications=list(profile.certifications),
            servicenow_versions=list(profile.servicenow_versions),
            profile_completeness=profile.profile_completeness,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class EmployerProfileDto(CamelModel):
    id: UUID
    user_id: UUID
    company_name: Optional[str] = None
    company_description: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    headquarters_city: Optional[str] = None
    headquarters_country: Optional[str] = None
    website_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    logo_url: Optional[str] = None
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, profile: EmployerProfile) -> "EmployerProfileDto":
        return cls(
            id=profile.id,
            user_id=profile.user_id,
            company_name=profile.company_name,
            company_description=profile.company_description,
            industry=profile.industry,
            company_size=profile.company_size,
            headquarters_city=profile.headquarters_city,
            headquarters_country=profile.headquarters_country,
            website_url=profile.website_url,
            linkedin_url=profile.linkedin_url,
            logo_url=profile.logo_url,
            is_verified=profile.is_verified,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class UploadedFileDto(CamelModel):
    url: str
    file_name: str
    size_bytes: int

"""
Job Posting DTOs
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from application.dtos import CamelModel
from domain.entities import Job


class JobDto(CamelModel):
    id: UUID
    employer_id: UUID
    title: str
    description: str
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    company_name: Optional[str] = None
    company_logo_url: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    job_type: str
    work_mode: str
    experience_level: str
    status: str
    salary_min: Optional[Decimal] = None
    salary_max: Optional[Decimal] = None
    salary_currency: str
    is_salary_visible: bool
    skills_required: List[str]
    certifications: List[str]
    servicenow_versions: List[str]
    application_count: int
    view_count: int
    expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    status_changed_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, job: Job, show_hidden_salary: bool = False) -> "JobDto":
        """Hidden salaries are only shown to the owner and admins"""
        show_salary = job.is_salary_visible or show_hidden_salary
        return cls(
            id=job.id,
            employer_id=job.employer_id,
            title=job.title,
            description=job.description,
            requirements=job.requirements,
            benefits=job.benefits,
            company_name=job.company_name,
            company_logo_url=job.company_logo_url,
            location=job.location,
            country=job.country,
            job_type=job.job_type.value,
            work_mode=job.work_mode.value,
            experience_level=job.experience_level.value,
            status=job.status.value,
            salary_min=job.salary_min if show_salary else None,
            salary_max=job.salary_max if show_salary else None,
            salary_currency=job.salary_currency,
            is_salary_visible=job.is_salary_visible,
            skills_required=list(job.skills_required),
            certifications=list(job.certifications),
            servicenow_versions=list(job.servicenow_versions),
            application_count=job.application_count,
            view_count=job.view_count,
            expires_at=job.expires_at,
            created_at=job.created_at,
            updated_at=job.updated_at,
            status_changed_at=job.status_changed_at,
        )

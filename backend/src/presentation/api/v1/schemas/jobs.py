"""
Job Posting Request Schemas
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from domain.enums import ExperienceLevel, JobType, WorkMode
from .common import ApiBody


class JobCreateRequest(ApiBody):
    title: str
    description: str
    job_type: JobType
    work_mode: WorkMode
    experience_level: ExperienceLevel
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    company_name: Optional[str] = None
    company_logo_url: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    salary_min: Optional[Decimal] = None
    salary_max: Optional[Decimal] = None
    salary_currency: Optional[str] = Field(None, description="ISO 4217 code, defaults to USD")
    is_salary_visible: Optional[bool] = None
    skills_required: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    servicenow_versions: Optional[List[str]] = None
    expires_at: Optional[datetime] = None
    publish: bool = Field(False, description="Publish immediately instead of saving a draft")


class JobUpdateRequest(ApiBody):
    """Only the fields sent are changed"""
    title: Optional[str] = None
    description: Optional[str] = None
    job_type: Optional[JobType] = None
    work_mode: Optional[WorkMode] = None
    experience_level: Optional[ExperienceLevel] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    company_name: Optional[str] = None
    company_logo_url: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    salary_min: Optional[Decimal] = None
    salary_max: Optional[Decimal] = None
    salary_currency: Optional[str] = None
    is_salary_visible: Optional[bool] = None
    skills_required: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    servicenow_versions: Optional[List[str]] = None
    expires_at: Optional[datetime] = None

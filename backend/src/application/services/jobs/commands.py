"""
Job Posting Requests
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from application.dtos import RequestModel
from application.validators import check_absolute_url, check_currency
from domain.enums import ExperienceLevel, JobType, WorkMode
from domain.value_objects import JobStatus


class _SalaryChecks(RequestModel):
    salary_min: Optional[Decimal] = Field(default=None, ge=0)
    salary_max: Optional[Decimal] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def salary_order(self):
        if self.salary_min is not None and self.salary_max is not None and self.salary_max < self.salary_min:
            raise ValueError("salary_max must be greater than or equal to salary_min")
        return self


class CreateJob(_SalaryChecks):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=10000)
    job_type: JobType
    work_mode: WorkMode
    experience_level: ExperienceLevel
    requirements: Optional[str] = Field(default=None, max_length=5000)
    benefits: Optional[str] = Field(default=None, max_length=3000)
    company_name: Optional[str] = Field(default=None, max_length=200)
    company_logo_url: Optional[str] = Field(default=None, max_length=2048)
    location: Optional[str] = Field(default=None, max_length=200)
    country: Optional[str] = Field(default=None, max_length=100)
    salary_currency: str = "USD"
    is_salary_visible: bool = True
    skills_required: List[str] = Field(default_factory=list, max_length=50)
    certifications: List[str] = Field(default_factory=list, max_length=50)
    servicenow_versions: List[str] = Field(default_factory=list, max_length=50)
    expires_at: Optional[datetime] = None
    publish: bool = False

    @field_validator("salary_currency")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return check_currency(v)

    @field_validator("company_logo_url")
    @classmethod
    def valid_logo_url(cls, v: Optional[str]) -> Optional[str]:
        return check_absolute_url(v)


class UpdateJob(_SalaryChecks):
    """Omitted fields keep their current values"""
    job_id: UUID
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1, max_length=10000)
    job_type: Optional[JobType] = None
    work_mode: Optional[WorkMode] = None
    experience_level: Optional[ExperienceLevel] = None
    requirements: Optional[str] = Field(default=None, max_length=5000)
    benefits: Optional[str] = Field(default=None, max_length=3000)
    company_name: Optional[str] = Field(default=None, max_length=200)
    company_logo_url: Optional[str] = Field(default=None, max_length=2048)
    location: Optional[str] = Field(default=None, max_length=200)
    country: Optional[str] = Field(default=None, max_length=100)
    salary_currency: Optional[str] = None
    is_salary_visible: Optional[bool] = None
    skills_required: Optional[List[str]] = Field(default=None, max_length=50)
    certifications: Optional[List[str]] = Field(default=None, max_length=50)
    servicenow_versions: Optional[List[str]] = Field(default=None, max_length=50)
    expires_at: Optional[datetime] = None

    @field_validator("salary_currency")
    @classmethod
    def valid_currency(cls, v: Optional[str]) -> Optional[str]:
        return check_currency(v)

    @field_validator("company_logo_url")
    @classmethod
    def valid_logo_url(cls, v: Optional[str]) -> Optional[str]:
        return check_absolute_url(v)

    def changes(self) -> dict:
        return self.model_dump(exclude={"job_id"}, exclude_unset=True)


class PublishJob(RequestModel):
    job_id: UUID


class PauseJob(RequestModel):
    job_id: UUID


class CloseJob(RequestModel):
    job_id: UUID


class GetJob(RequestModel):
    job_id: UUID


class SearchJobs(RequestModel):
    keyword: Optional[str] = Field(default=None, max_length=200)
    country: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=200)
    job_type: Optional[JobType] = None
    work_mode: Optional[WorkMode] = None
    experience_level: Optional[ExperienceLevel] = None
    salary_min: Optional[Decimal] = Field(default=None, ge=0)
    salary_max: Optional[Decimal] = Field(default=None, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class GetMyJobs(RequestModel):
    status: Optional[JobStatus] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)

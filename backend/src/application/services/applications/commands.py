"""
Job Application Requests
"""
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from application.dtos import RequestModel
from application.validators import check_absolute_url
from domain.value_objects import ApplicationStatus


class ApplyToJob(RequestModel):
    job_id: UUID
    cover_letter: Optional[str] = Field(default=None, max_length=5000)
    cv_url: Optional[str] = Field(default=None, max_length=2048)

    @field_validator("cv_url")
    @classmethod
    def valid_cv_url(cls, v: Optional[str]) -> Optional[str]:
        return check_absolute_url(v)


class GetApplication(RequestModel):
    application_id: UUID


class GetMyApplications(RequestModel):
    status: Optional[ApplicationStatus] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class GetJobApplications(RequestModel):
    job_id: UUID
    status: Optional[ApplicationStatus] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class UpdateApplicationStatus(RequestModel):
    application_id: UUID
    status: ApplicationStatus
    notes: Optional[str] = Field(default=None, max_length=2000)
    rejection_reason: Optional[str] = Field(default=None, max_length=1000)


class WithdrawApplication(RequestModel):
    application_id: UUID

"""
Job Application Request Schemas
"""
from typing import Optional
from uuid import UUID

from pydantic import Field

from domain.value_objects import ApplicationStatus
from .common import ApiBody


class ApplyRequest(ApiBody):
    job_id: UUID
    cover_letter: Optional[str] = None
    cv_url: Optional[str] = Field(None, description="Absolute URL of the CV to send, defaults to the profile CV")


class StatusUpdateRequest(ApiBody):
    status: ApplicationStatus
    notes: Optional[str] = Field(None, description="Employer-side notes, never shown to the candidate")
    rejection_reason: Optional[str] = None

"""
Job Application DTOs
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from application.dtos import CamelModel
from domain.entities import JobApplication


class ApplicationDto(CamelModel):
    id: UUID
    job_id: UUID
    job_title: Optional[str] = None
    candidate_id: UUID
    status: str
    cover_letter: Optional[str] = None
    cv_url: Optional[str] = None
    employer_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    applied_at: datetime
    updated_at: datetime
    status_changed_at: Optional[datetime] = None

    @classmethod
    def from_entity(
        cls,
        application: JobApplication,
        job_title: Optional[str] = None,
        include_employer_notes: bool = False,
    ) -> "ApplicationDto":
        return cls(
            id=application.id,
            job_id=application.job_id,
            job_title=job_title,
            candidate_id=application.candidate_id,
            status=application.status.value,
            cover_letter=application.cover_letter,
            cv_url=application.cv_url,
            employer_notes=application.employer_notes if include_employer_notes else None,
            rejection_reason=application.rejection_reason,
            applied_at=application.applied_at,
            updated_at=application.updated_at,
            status_changed_at=application.status_changed_at,
        )

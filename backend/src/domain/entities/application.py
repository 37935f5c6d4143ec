"""
Application Domain Entity
Immutable job application with a guarded hiring pipeline
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from core.clock import utc_now
from core.result import Result, Ok, invalid_transition, access_denied
from ..value_objects import (
    ApplicationStatus,
    APPLICATION_PIPELINE,
    TERMINAL_APPLICATION_STATUSES,
)


def can_move(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    """Employer-driven transitions: forward along the pipeline, or rejection"""
    if current in TERMINAL_APPLICATION_STATUSES:
        return False
    if target == ApplicationStatus.REJECTED:
        return True
    if target not in APPLICATION_PIPELINE:
        return False
    return APPLICATION_PIPELINE.index(target) > APPLICATION_PIPELINE.index(current)


@dataclass(frozen=True)
class JobApplication:
    """Job application domain entity - immutable"""

    id: UUID
    job_id: UUID
    candidate_id: UUID
    status: ApplicationStatus
    applied_at: datetime
    updated_at: datetime

    cover_letter: Optional[str] = None
    cv_url: Optional[str] = None
    employer_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    status_changed_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        job_id: UUID,
        candidate_id: UUID,
        cover_letter: Optional[str] = None,
        cv_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "JobApplication":
        now = now or utc_now()
        return cls(
            id=uuid4(),
            job_id=job_id,
            candidate_id=candidate_id,
            status=ApplicationStatus.APPLIED,
            applied_at=now,
            updated_at=now,
            cover_letter=cover_letter.strip() if cover_letter else None,
            cv_url=cv_url,
        )

    @property
    def created_at(self) -> datetime:
        return self.applied_at

    def is_active(self) -> bool:
        """Still in the running"""
        return self.status not in (ApplicationStatus.WITHDRAWN, ApplicationStatus.REJECTED)

    def is_terminal(self) -> bool:
        return self.status in TERMINAL_APPLICATION_STATUSES

    def is_owned_by(self, candidate_id: Optional[UUID]) -> bool:
        return candidate_id is not None and self.candidate_id == candidate_id

    def update_status(
        self,
        new_status: ApplicationStatus,
        notes: Optional[str] = None,
        rejection_reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Result["JobApplication"]:
        """Employer moves the application through the pipeline"""
        if not can_move(self.status, new_status):
            return invalid_transition("Application", self.status, new_status)
        now = now or utc_now()
        return Ok(replace(
            self,
            status=new_status,
            employer_notes=notes.strip() if notes else self.employer_notes,
            rejection_reason=(
                rejection_reason.strip() if rejection_reason and new_status == ApplicationStatus.REJECTED
                else None
            ),
            status_changed_at=now,
            updated_at=now,
        ))

    def withdraw(self, candidate_id: UUID, now: Optional[datetime] = None) -> Result["JobApplication"]:
        """Only the applying candidate may withdraw, and only while active"""
        if not self.is_owned_by(candidate_id):
            return access_denied("You can only withdraw your own applications.")
        if self.is_terminal():
            return invalid_transition(
                "Application", self.status, ApplicationStatus.WITHDRAWN, "Application is already closed."
            )
        now = now or utc_now()
        return Ok(replace(self, status=ApplicationStatus.WITHDRAWN, status_changed_at=now, updated_at=now))

    def __str__(self) -> str:
        return f"JobApplication({self.id}, status={self.status.value})"

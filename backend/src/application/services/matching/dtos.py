"""
Matching DTOs
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from application.dtos import CamelModel
from domain.entities import EmbeddingRecord


class EmbeddingStatusDto(CamelModel):
    document_id: UUID
    document_type: str
    status: str
    retry_count: int
    can_retry: bool
    error_message: Optional[str] = None
    last_indexed_at: Optional[datetime] = None
    updated_at: datetime

    @classmethod
    def from_entity(cls, record: EmbeddingRecord) -> "EmbeddingStatusDto":
        return cls(
            document_id=record.document_id,
            document_type=record.document_type.value,
            status=record.status.value,
            retry_count=record.retry_count,
            can_retry=record.can_retry,
            error_message=record.error_message,
            last_indexed_at=record.last_indexed_at,
            updated_at=record.updated_at,
        )


class JobMatchDto(CamelModel):
    job_id: UUID
    title: str
    company_name: Optional[str] = None
    location: Optional[str] = None
    work_mode: str
    experience_level: str
    score: float
    match_percent: int
    matched_skills: List[str]


class CandidateMatchDto(CamelModel):
    user_id: UUID
    profile_id: UUID
    headline: Optional[str] = None
    current_role: Optional[str] = None
    location: Optional[str] = None
    experience_level: str
    years_of_experience: int
    score: float
    match_percent: int
    matched_skills: List[str]

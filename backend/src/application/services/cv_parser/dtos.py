"""
CV Parser DTOs
"""
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from application.dtos import CamelModel
from domain.entities import CvParseResult


class ExtractedCertificationDto(CamelModel):
    type: str
    name: str
    year: Optional[int] = None
    confidence: int


class CvParseResultDto(CamelModel):
    id: UUID
    user_id: UUID
    original_file_name: str
    content_type: str
    file_size_bytes: int
    status: str
    error_message: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    headline: Optional[str] = None
    summary: Optional[str] = None
    current_role: Optional[str] = None
    years_of_experience: Optional[int] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    skills: List[str] = []
    certifications: List[ExtractedCertificationDto] = []
    servicenow_versions: List[str] = []
    overall_confidence: int = 0
    field_confidences: Dict[str, int] = {}
    is_applied: bool
    applied_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, result: CvParseResult) -> "CvParseResultDto":
        fields = {}
        parsed = result.parsed
        if parsed is not None:
            fields = dict(
                first_name=parsed.first_name,
                last_name=parsed.last_name,
                email=parsed.email,
                phone=parsed.phone,
                location=parsed.location,
                headline=parsed.headline,
                summary=parsed.summary,
                current_role=parsed.current_role,
                years_of_experience=parsed.years_of_experience,
                linkedin_url=parsed.linkedin_url,
                github_url=parsed.github_url,
                skills=list(parsed.skills),
                certifications=[
                    ExtractedCertificationDto(type=c.type, name=c.name, year=c.year, confidence=c.confidence)
                    for c in parsed.certifications
                ],
                servicenow_versions=list(parsed.servicenow_versions),
                overall_confidence=parsed.overall_confidence,
                field_confidences=dict(parsed.field_confidences),
            )
        return cls(
            id=result.id,
            user_id=result.user_id,
            original_file_name=result.original_file_name,
            content_type=result.content_type,
            file_size_bytes=result.file_size_bytes,
            status=result.status.value,
            error_message=result.error_message,
            is_applied=result.is_applied,
            applied_at=result.applied_at,
            created_at=result.created_at,
            updated_at=result.updated_at,
            **fields,
        )


class AppliedCvDto(CamelModel):
    parse_result_id: UUID
    applied_fields: List[str]
    profile_completeness: int

"""
Job Enhancer DTOs
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from application.dtos import CamelModel
from domain.entities import EnhancementResult


class BiasIssueDto(CamelModel):
    text: str
    reason: str
    suggestion: str
    severity: str


class ImprovementDto(CamelModel):
    category: str
    description: str
    before: str
    after: str


class EnhancementDto(CamelModel):
    id: UUID
    job_id: UUID
    requested_by: UUID
    status: str
    original_title: str
    original_description: str
    original_requirements: Optional[str] = None
    enhanced_title: Optional[str] = None
    enhanced_description: Optional[str] = None
    enhanced_requirements: Optional[str] = None
    score_before: int = 0
    score_after: int = 0
    score_improvement: int = 0
    bias_issues: List[BiasIssueDto] = []
    missing_fields: List[str] = []
    improvements: List[ImprovementDto] = []
    suggested_skills: List[str] = []
    error_message: Optional[str] = None
    is_accepted: bool
    accepted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, result: EnhancementResult) -> "EnhancementDto":
        output = {}
        if result.output is not None:
            o = result.output
            output = dict(
                enhanced_title=o.enhanced_title,
                enhanced_description=o.enhanced_description,
                enhanced_requirements=o.enhanced_requirements,
                score_before=o.score_before,
                score_after=o.score_after,
                bias_issues=[
                    BiasIssueDto(text=b.text, reason=b.reason, suggestion=b.suggestion, severity=b.severity)
                    for b in o.bias_issues
                ],
                missing_fields=list(o.missing_fields),
                improvements=[
                    ImprovementDto(category=i.category, description=i.description, before=i.before, after=i.after)
                    for i in o.improvements
                ],
                suggested_skills=list(o.suggested_skills),
            )
        return cls(
            id=result.id,
            job_id=result.job_id,
            requested_by=result.requested_by,
            status=result.status.value,
            original_title=result.original_title,
            original_description=result.original_description,
            original_requirements=result.original_requirements,
            score_improvement=result.score_improvement,
            error_message=result.error_message,
            is_accepted=result.is_accepted,
            accepted_at=result.accepted_at,
            created_at=result.created_at,
            updated_at=result.updated_at,
            **output,
        )

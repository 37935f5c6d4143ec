"""
Enhancement Result Domain Entity
AI-assisted rewrite of a job description awaiting the employer's decision
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID, uuid4

from core.clock import utc_now
from core.result import Result, Ok, invalid_transition, conflict
from ..enums import EnhancementStatus


@dataclass(frozen=True)
class BiasIssue:
    text: str
    reason: str
    suggestion: str
    severity: str = "Low"


@dataclass(frozen=True)
class Improvement:
    category: str
    description: str
    before: str
    after: str


@dataclass(frozen=True)
class EnhancementOutput:
    """What an enhancer produced for one description"""
    enhanced_title: Optional[str] = None
    enhanced_description: Optional[str] = None
    enhanced_requirements: Optional[str] = None
    score_before: int = 0
    score_after: int = 0
    bias_issues: Tuple[BiasIssue, ...] = ()
    missing_fields: Tuple[str, ...] = ()
    improvements: Tuple[Improvement, ...] = ()
    suggested_skills: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EnhancementResult:
    """Enhancement attempt - Processing, then Completed or Failed"""

    id: UUID
    job_id: UUID
    requested_by: UUID
    status: EnhancementStatus
    original_title: str
    original_description: str
    created_at: datetime
    updated_at: datetime

    original_requirements: Optional[str] = None
    error_message: Optional[str] = None
    output: Optional[EnhancementOutput] = None

    is_accepted: bool = False
    accepted_at: Optional[datetime] = None
    status_changed_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        job_id: UUID,
        requested_by: UUID,
        title: str,
        description: str,
        requirements: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "EnhancementResult":
        now = now or utc_now()
        return cls(
            id=uuid4(),
            job_id=job_id,
            requested_by=requested_by,
            status=EnhancementStatus.PROCESSING,
            original_title=title.strip(),
            original_description=description.strip(),
            original_requirements=requirements.strip() if requirements else None,
            created_at=now,
            updated_at=now,
        )

    @property
    def score_improvement(self) -> int:
        if self.output is None:
            return 0
        return self.output.score_after - self.output.score_before

    def complete(self, output: EnhancementOutput, now: Optional[datetime] = None) -> Result["EnhancementResult"]:
        if self.status != EnhancementStatus.PROCESSING:
            return invalid_transition("Enhancement", self.status, EnhancementStatus.COMPLETED)
        now = now or utc_now()
        clamped = replace(
            output,
            enhanced_title=output.enhanced_title.strip() if output.enhanced_title else None,
            enhanced_description=output.enhanced_description.strip() if output.enhanced_description else None,
            enhanced_requirements=output.enhanced_requirements.strip() if output.enhanced_requirements else None,
            score_before=max(0, min(100, output.score_before)),
            score_after=max(0, min(100, output.score_after)),
        )
        return Ok(replace(
            self,
            status=EnhancementStatus.COMPLETED,
            output=clamped,
            status_changed_at=now,
            updated_at=now,
        ))

    def fail(self, error: str, now: Optional[datetime] = None) -> Result["EnhancementResult"]:
        if self.status != EnhancementStatus.PROCESSING:
            return invalid_transition("Enhancement", self.status, EnhancementStatus.FAILED)
        now = now or utc_now()
        return Ok(replace(
            self,
            status=EnhancementStatus.FAILED,
            error_message=error,
            status_changed_at=now,
            updated_at=now,
        ))

    def accept(self, now: Optional[datetime] = None) -> Result["EnhancementResult"]:
        if self.status != EnhancementStatus.COMPLETED:
            return invalid_transition(
                "Enhancement", self.status, "Accepted", "Enhancement has not completed yet."
            )
        if self.is_accepted:
            return conflict("enhancement.already_accepted", "This enhancement has already been accepted.")
        now = now or utc_now()
        return Ok(replace(self, is_accepted=True, accepted_at=now, updated_at=now))

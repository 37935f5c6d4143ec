"""
CV Parse Result Domain Entity
One extraction attempt, held until the candidate applies it to their profile
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID, uuid4

from core.clock import utc_now
from core.result import Result, Ok, invalid_transition, conflict
from ..enums import ParseStatus


@dataclass(frozen=True)
class ExtractedCertification:
    type: str
    name: str
    year: Optional[int] = None
    confidence: int = 0


@dataclass(frozen=True)
class ParsedCv:
    """Fields pulled out of a CV by the extractor"""
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
    skills: Tuple[str, ...] = ()
    certifications: Tuple[ExtractedCertification, ...] = ()
    servicenow_versions: Tuple[str, ...] = ()
    overall_confidence: int = 0
    field_confidences: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CvParseResult:
    """CV parse attempt - Pending, Processing, then Completed or Failed"""

    id: UUID
    user_id: UUID
    blob_path: str
    original_file_name: str
    content_type: str
    file_size_bytes: int
    status: ParseStatus
    created_at: datetime
    updated_at: datetime

    error_message: Optional[str] = None
    parsed: Optional[ParsedCv] = None

    is_applied: bool = False
    applied_at: Optional[datetime] = None
    status_changed_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        user_id: UUID,
        blob_path: str,
        original_file_name: str,
        content_type: str,
        file_size_bytes: int,
        now: Optional[datetime] = None,
    ) -> "CvParseResult":
        now = now or utc_now()
        return cls(
            id=uuid4(),
            user_id=user_id,
            blob_path=blob_path,
            original_file_name=original_file_name,
            content_type=content_type,
            file_size_bytes=file_size_bytes,
            status=ParseStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    @property
    def overall_confidence(self) -> int:
        return self.parsed.overall_confidence if self.parsed else 0

    def start_processing(self, now: Optional[datetime] = None) -> Result["CvParseResult"]:
        if self.status != ParseStatus.PENDING:
            return invalid_transition("CvParseResult", self.status, ParseStatus.PROCESSING)
        return Ok(self._moved(ParseStatus.PROCESSING, now))

    def complete(self, parsed: ParsedCv, now: Optional[datetime] = None) -> Result["CvParseResult"]:
        if self.status != ParseStatus.PROCESSING:
            return invalid_transition("CvParseResult", self.status, ParseStatus.COMPLETED)
        cleaned = replace(
            parsed,
            email=parsed.email.strip().lower() if parsed.email else None,
            overall_confidence=max(0, min(100, parsed.overall_confidence)),
        )
        return Ok(replace(self._moved(ParseStatus.COMPLETED, now), parsed=cleaned))

    def fail(self, error: str, now: Optional[datetime] = None) -> Result["CvParseResult"]:
        if self.status != ParseStatus.PROCESSING:
            return invalid_transition("CvParseResult", self.status, ParseStatus.FAILED)
        return Ok(replace(self._moved(ParseStatus.FAILED, now), error_message=error))

    def mark_applied(self, now: Optional[datetime] = None) -> Result["CvParseResult"]:
        """Only a completed result can be applied, and only once"""
        if self.status != ParseStatus.COMPLETED:
            return invalid_transition(
                "CvParseResult", self.status, "Applied",
                f"Parse result {self.id} is not completed. Current status: {self.status.value}.",
            )
        if self.is_applied:
            return conflict(
                "cvparseresult.already_applied",
                f"Parse result {self.id} has already been applied to your profile.",
            )
        now = now or utc_now()
        return Ok(replace(self, is_applied=True, applied_at=now, updated_at=now))

    def _moved(self, status: ParseStatus, now: Optional[datetime]) -> "CvParseResult":
        now = now or utc_now()
        return replace(self, status=status, status_changed_at=now, updated_at=now)


def fields_above_threshold(parsed: ParsedCv, threshold: int) -> List[str]:
    """Field names whose confidence meets the threshold; unscored fields pass"""
    names = [
        "headline", "summary", "current_role", "years_of_experience", "location",
        "linkedin_url", "github_url", "skills", "certifications", "servicenow_versions",
    ]
    return [n for n in names if parsed.field_confidences.get(n, 100) >= threshold]

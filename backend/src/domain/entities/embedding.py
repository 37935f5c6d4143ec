"""
Embedding Record Domain Entity
Indexing state of one job or candidate profile for similarity matching
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID, uuid4

from core.clock import utc_now
from core.result import Result, Ok, invalid_transition
from ..enums import DocumentType, EmbeddingStatus


MAX_EMBEDDING_RETRIES = 3


@dataclass(frozen=True)
class EmbeddingRecord:
    """Pending -> Processing -> Indexed | Failed, re-requestable back to Pending"""

    id: UUID
    document_id: UUID
    document_type: DocumentType
    status: EmbeddingStatus
    created_at: datetime
    updated_at: datetime

    vector: Optional[Tuple[float, ...]] = None
    skills: Tuple[str, ...] = ()
    error_message: Optional[str] = None
    retry_count: int = 0
    last_indexed_at: Optional[datetime] = None
    status_changed_at: Optional[datetime] = None

    @classmethod
    def create(cls, document_id: UUID, document_type: DocumentType, now: Optional[datetime] = None) -> "EmbeddingRecord":
        now = now or utc_now()
        return cls(
            id=uuid4(),
            document_id=document_id,
            document_type=document_type,
            status=EmbeddingStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    @property
    def can_retry(self) -> bool:
        return self.retry_count < MAX_EMBEDDING_RETRIES

    @property
    def is_indexed(self) -> bool:
        return self.status == EmbeddingStatus.INDEXED and self.vector is not None

    def request(self, now: Optional[datetime] = None) -> Result["EmbeddingRecord"]:
        """Queue for (re)indexing; a record already queued or running stays put"""
        if self.status in (EmbeddingStatus.PENDING, EmbeddingStatus.PROCESSING):
            return Ok(self)
        return Ok(self._moved(EmbeddingStatus.PENDING, now))

    def start_processing(self, now: Optional[datetime] = None) -> Result["EmbeddingRecord"]:
        if self.status != EmbeddingStatus.PENDING:
            return invalid_transition("Embedding", self.status, EmbeddingStatus.PROCESSING)
        return Ok(self._moved(EmbeddingStatus.PROCESSING, now))

    def set_indexed(
        self, vector: Tuple[float, ...], skills: Tuple[str, ...] = (), now: Optional[datetime] = None
    ) -> Result["EmbeddingRecord"]:
        if self.status != EmbeddingStatus.PROCESSING:
            return invalid_transition("Embedding", self.status, EmbeddingStatus.INDEXED)
        now = now or utc_now()
        return Ok(replace(
            self._moved(EmbeddingStatus.INDEXED, now),
            vector=tuple(vector),
            skills=tuple(skills),
            retry_count=0,
            error_message=None,
            last_indexed_at=now,
        ))

    def set_failed(self, error: str, now: Optional[datetime] = None) -> Result["EmbeddingRecord"]:
        if self.status != EmbeddingStatus.PROCESSING:
            return invalid_transition("Embedding", self.status, EmbeddingStatus.FAILED)
        return Ok(replace(
            self._moved(EmbeddingStatus.FAILED, now),
            vector=None,
            error_message=error,
            retry_count=self.retry_count + 1,
        ))

    def _moved(self, status: EmbeddingStatus, now: Optional[datetime]) -> "EmbeddingRecord":
        now = now or utc_now()
        return replace(self, status=status, status_changed_at=now, updated_at=now)

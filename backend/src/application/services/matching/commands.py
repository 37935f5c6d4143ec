"""
Matching Requests
"""
from typing import Optional
from uuid import UUID

from pydantic import Field, model_validator

from application.dtos import RequestModel
from domain.enums import DocumentType


class RequestEmbedding(RequestModel):
    """A candidate indexes their own profile; an employer names the job"""
    document_type: DocumentType
    document_id: Optional[UUID] = None

    @model_validator(mode="after")
    def job_needs_id(self) -> "RequestEmbedding":
        if self.document_type == DocumentType.JOB and self.document_id is None:
            raise ValueError("document_id is required for job embeddings")
        return self


class ProcessEmbedding(RequestModel):
    document_type: DocumentType
    document_id: UUID


class GetEmbeddingStatus(RequestModel):
    document_type: DocumentType
    document_id: UUID


class GetJobMatches(RequestModel):
    """Jobs matching the caller's candidate profile"""
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=50)


class GetCandidateMatches(RequestModel):
    """Candidates matching one of the caller's jobs"""
    job_id: UUID
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=50)

"""
Job Enhancer Requests
"""
from typing import Optional
from uuid import UUID

from pydantic import Field

from application.dtos import RequestModel


class EnhanceJobDescription(RequestModel):
    job_id: UUID
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=50, max_length=10000)
    requirements: Optional[str] = Field(default=None, max_length=5000)


class GetEnhancement(RequestModel):
    enhancement_id: UUID


class GetJobEnhancements(RequestModel):
    job_id: UUID
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class GetMyEnhancements(RequestModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class AcceptEnhancement(RequestModel):
    enhancement_id: UUID

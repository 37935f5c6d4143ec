"""
Matching Request Schemas
"""
from typing import Optional
from uuid import UUID

from pydantic import Field

from domain.enums import DocumentType
from .common import ApiBody


class EmbeddingRequest(ApiBody):
    document_type: DocumentType
    document_id: Optional[UUID] = Field(None, description="Required for jobs; candidates index their own profile")

"""
Job Enhancer Request Schemas
"""
from typing import Optional
from uuid import UUID

from .common import ApiBody


class EnhanceRequest(ApiBody):
    job_id: UUID
    title: str
    description: str
    requirements: Optional[str] = None

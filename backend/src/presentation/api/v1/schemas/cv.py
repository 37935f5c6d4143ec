"""
CV Parser Request Schemas
"""
from pydantic import Field

from .common import ApiBody


class ApplyCvRequest(ApiBody):
    confidence_threshold: int = Field(60, description="Only fields at or above this confidence (0-100) are copied")

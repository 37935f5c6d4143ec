"""
CV Parser Requests
"""
from typing import ClassVar, Dict
from uuid import UUID

from pydantic import Field

from core.config import settings
from application.dtos import RequestModel
from application.services.files.uploads import FileUpload


DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class ParseCv(FileUpload):
    allowed_types: ClassVar[Dict[str, str]] = {
        "application/pdf": "pdf",
        DOCX_CONTENT_TYPE: "docx",
    }
    max_size_mb: ClassVar[int] = settings.MAX_CV_SIZE_MB


class GetCvParseResult(RequestModel):
    parse_result_id: UUID


class GetMyCvParseResults(RequestModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class ApplyCvParseResult(RequestModel):
    parse_result_id: UUID
    confidence_threshold: int = Field(default=60, ge=0, le=100)

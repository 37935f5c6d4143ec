"""
Upload request base
Content type and size checks shared by every file upload
"""
from pathlib import PurePath
from typing import ClassVar, Dict

from pydantic import Field, model_validator

from application.dtos import RequestModel


class FileUpload(RequestModel):
    """Subclasses declare the accepted content types and size limit"""

    allowed_types: ClassVar[Dict[str, str]] = {}
    max_size_mb: ClassVar[int] = 5

    file_name: str = Field(min_length=1, max_length=255)
    content_type: str = Field(min_length=1, max_length=100)
    content: bytes

    @model_validator(mode="after")
    def acceptable_file(self):
        if self.content_type.lower() not in self.allowed_types:
            raise ValueError(
                f"Unsupported file type {self.content_type}. "
                f"Allowed: {', '.join(sorted(set(self.allowed_types.values())))}"
            )
        if not self.content:
            raise ValueError("File is empty")
        if len(self.content) > self.max_size_mb * 1024 * 1024:
            raise ValueError(f"File too large. Maximum size is {self.max_size_mb}MB")
        return self

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """Extension implied by the content type"""
        return "." + self.allowed_types[self.content_type.lower()]

    @property
    def safe_name(self) -> str:
        return PurePath(self.file_name.replace("\\", "/")).name

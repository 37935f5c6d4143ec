"""
Shared Request Body Base
camelCase JSON in, snake_case fields forwarded to the dispatcher
"""
from typing import Any, Dict

from fastapi import UploadFile
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiBody(BaseModel):
    """
    Request body accepted by an endpoint

    Only the shape is checked here; field rules live on the request models.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    def fields(self) -> Dict[str, Any]:
        """Fields the client actually sent"""
        return self.model_dump(exclude_unset=True)


def present(**params: Any) -> Dict[str, Any]:
    """Drop query parameters the client did not supply"""
    return {name: value for name, value in params.items() if value is not None}


async def read_upload(file: UploadFile) -> Dict[str, Any]:
    """Multipart file as the fields of an upload request"""
    try:
        content = await file.read()
    finally:
        await file.close()
    return {
        "file_name": file.filename or "",
        "content_type": file.content_type or "application/octet-stream",
        "content": content,
    }

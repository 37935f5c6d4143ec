"""
Base Models
Shared pydantic bases for request models and response DTOs
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    """Immutable use-case request; unknown fields are rejected"""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)


class CamelModel(BaseModel):
    """Response DTO serialised with camelCase keys"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

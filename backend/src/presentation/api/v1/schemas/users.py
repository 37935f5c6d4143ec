"""
User Account Request Schemas
"""
from typing import List, Optional

from pydantic import Field

from domain.enums import UserRole

from .common import ApiBody


class UpdateAccountRequest(ApiBody):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class SuspendUserRequest(ApiBody):
    reason: str = Field(..., description="Shown to moderators, up to 500 characters")


class UpdateRolesRequest(ApiBody):
    roles: List[UserRole] = Field(..., description="Replaces the current roles; SuperAdmin is never assignable")

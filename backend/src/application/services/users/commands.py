"""
User Account Requests
"""
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from application.dtos import RequestModel
from application.validators import check_person_name
from domain.enums import AccountStatus, UserRole


class GetUser(RequestModel):
    user_id: UUID


class UpdateMyAccount(RequestModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)

    @field_validator("first_name", "last_name")
    @classmethod
    def valid_names(cls, v: Optional[str]) -> Optional[str]:
        return check_person_name(v) if v is not None else v


class SearchUsers(RequestModel):
    search: Optional[str] = Field(default=None, max_length=200)
    status: Optional[AccountStatus] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class SuspendUser(RequestModel):
    user_id: UUID
    reason: str = Field(min_length=1, max_length=500)


class ReinstateUser(RequestModel):
    user_id: UUID


class DeleteUser(RequestModel):
    user_id: UUID


class UpdateUserRoles(RequestModel):
    user_id: UUID
    roles: List[UserRole] = Field(min_length=1)

    @field_validator("roles")
    @classmethod
    def no_super_admin(cls, v: List[UserRole]) -> List[UserRole]:
        if UserRole.SUPER_ADMIN in v:
            raise ValueError("SuperAdmin role cannot be assigned")
        return v

"""
User DTOs
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from application.dtos import CamelModel
from domain.entities import UserAccount


class UserDto(CamelModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    full_name: str
    phone: Optional[str] = None
    profile_picture_url: Optional[str] = None
    roles: List[str]
    status: str
    is_email_verified: bool
    suspension_reason: Optional[str] = None
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: UserAccount) -> "UserDto":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
            phone=user.phone,
            profile_picture_url=user.profile_picture_url,
            roles=[r.value for r in user.roles],
            status=user.status.value,
            is_email_verified=user.is_email_verified,
            suspension_reason=user.suspension_reason,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

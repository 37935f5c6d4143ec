"""
Notification Requests
"""
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import Field, field_validator

from application.dtos import RequestModel
from application.validators import check_absolute_url
from domain.enums import NotificationType


class GetMyNotifications(RequestModel):
    unread_only: bool = False
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class GetUnreadCount(RequestModel):
    pass


class MarkNotificationAsRead(RequestModel):
    notification_id: UUID


class MarkAllNotificationsAsRead(RequestModel):
    pass


class CreateNotification(RequestModel):
    """Internal: raised by admins or service accounts"""
    user_id: UUID
    type: NotificationType
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1, max_length=1000)
    action_url: Optional[str] = Field(default=None, max_length=2048)
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("action_url")
    @classmethod
    def valid_action_url(cls, v: Optional[str]) -> Optional[str]:
        return check_absolute_url(v)

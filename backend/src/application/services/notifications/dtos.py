"""
Notification DTOs
"""
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from application.dtos import CamelModel
from domain.entities import Notification


class NotificationDto(CamelModel):
    id: UUID
    user_id: UUID
    type: str
    title: str
    message: str
    action_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationDto":
        return cls(
            id=notification.id,
            user_id=notification.user_id,
            type=notification.type.value,
            title=notification.title,
            message=notification.message,
            action_url=notification.action_url,
            metadata=notification.metadata,
            is_read=notification.is_read,
            read_at=notification.read_at,
            created_at=notification.created_at,
        )


class UnreadCountDto(CamelModel):
    unread_count: int


class MarkedAsReadDto(CamelModel):
    updated: int

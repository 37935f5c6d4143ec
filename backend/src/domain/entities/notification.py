"""
Notification Domain Entity
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from core.clock import utc_now
from core.result import Result, Ok, access_denied
from ..enums import NotificationType


@dataclass(frozen=True)
class Notification:
    """In-app notification - unread until its owner reads it, never the other way"""

    id: UUID
    user_id: UUID
    type: NotificationType
    title: str
    message: str
    created_at: datetime
    updated_at: datetime

    action_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    is_read: bool = False
    read_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        user_id: UUID,
        type: NotificationType,
        title: str,
        message: str,
        action_url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> "Notification":
        now = now or utc_now()
        return cls(
            id=uuid4(),
            user_id=user_id,
            type=type,
            title=title.strip(),
            message=message.strip(),
            created_at=now,
            updated_at=now,
            action_url=action_url,
            metadata=dict(metadata) if metadata else None,
        )

    def mark_as_read(self, user_id: UUID, now: Optional[datetime] = None) -> Result["Notification"]:
        """Idempotent: a second call keeps the first read_at"""
        if self.user_id != user_id:
            return access_denied("You do not have access to this notification.")
        if self.is_read:
            return Ok(self)
        now = now or utc_now()
        return Ok(replace(self, is_read=True, read_at=now, updated_at=now))

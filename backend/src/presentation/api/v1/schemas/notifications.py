"""
Notification Request Schemas
"""
from typing import Any, Dict, Optional
from uuid import UUID

from domain.enums import NotificationType
from .common import ApiBody


class CreateNotificationRequest(ApiBody):
    user_id: UUID
    type: NotificationType
    title: str
    message: str
    action_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

"""
Notification ORM Model
"""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, JSON, Text, ForeignKey, Uuid

from core.database import Base


class NotificationModel(Base):
    """Notification table ORM model"""

    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(String(40), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    action_url = Column(String(2048), nullable=True)
    # "metadata" is reserved on declarative classes
    extra_data = Column("metadata", JSON, nullable=True)

    is_read = Column(Boolean, nullable=False, default=False, index=True)
    read_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<NotificationModel {self.id} user={self.user_id} read={self.is_read}>"

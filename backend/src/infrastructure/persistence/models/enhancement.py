"""
Job Enhancement ORM Model
"""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, JSON, Text, ForeignKey, Uuid

from core.database import Base


class EnhancementModel(Base):
    """Job description enhancement table ORM model"""

    __tablename__ = "job_enhancements"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    requested_by = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default="Processing")

    # Input as submitted
    original_title = Column(String(200), nullable=False)
    original_description = Column(Text, nullable=False)
    original_requirements = Column(Text, nullable=True)

    # Enhanced content, scores, bias issues, improvements
    output = Column(JSON, nullable=True)
    error_message = Column(Text, nullable=True)

    is_accepted = Column(Boolean, nullable=False, default=False)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    status_changed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<EnhancementModel {self.id} job={self.job_id} - {self.status}>"

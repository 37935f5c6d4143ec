"""
CV Parse Result ORM Model
"""
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, Text, ForeignKey, Uuid

from core.database import Base


class CvParseResultModel(Base):
    """CV parse result table ORM model"""

    __tablename__ = "cv_parse_results"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Uploaded file
    blob_path = Column(String(1024), nullable=False)
    original_file_name = Column(String(255), nullable=False)
    content_type = Column(String(100), nullable=False)
    file_size_bytes = Column(Integer, nullable=False)

    status = Column(String(20), nullable=False, default="Pending")
    error_message = Column(Text, nullable=True)
    # Extracted fields, certifications and per-field confidences
    parsed_data = Column(JSON, nullable=True)
    overall_confidence = Column(Integer, nullable=False, default=0)

    is_applied = Column(Boolean, nullable=False, default=False)
    applied_at = Column(DateTime(timezone=True), nullable=True)
    status_changed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<CvParseResultModel {self.id} - {self.status}>"

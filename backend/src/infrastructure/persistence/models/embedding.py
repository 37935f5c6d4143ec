"""
Embedding Record ORM Model
"""
import uuid
from sqlalchemy import Column, String, Integer, DateTime, JSON, Text, UniqueConstraint, Uuid

from core.database import Base


class EmbeddingRecordModel(Base):
    """Embedding state per job or candidate profile"""

    __tablename__ = "embedding_records"
    __table_args__ = (
        UniqueConstraint("document_id", "document_type", name="uq_embedding_records_document"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    document_id = Column(Uuid, nullable=False, index=True)
    document_type = Column(String(30), nullable=False, index=True)

    status = Column(String(20), nullable=False, default="Pending", index=True)
    vector = Column(JSON, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    error_message = Column(Text, nullable=True)
    retry_count = Column(Integer, nullable=False, default=0)

    last_indexed_at = Column(DateTime(timezone=True), nullable=True)
    status_changed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<EmbeddingRecordModel {self.document_type}:{self.document_id} - {self.status}>"

"""
Application ORM Model
SQLAlchemy model for job applications
"""
import uuid
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, UniqueConstraint, Uuid

from core.database import Base


class ApplicationModel(Base):
    """Job application table ORM model"""

    __tablename__ = "job_applications"
    __table_args__ = (
        UniqueConstraint("job_id", "candidate_id", name="uq_job_applications_job_candidate"),
    )

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Foreign Keys
    job_id = Column(Uuid, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    candidate_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # Application Details
    status = Column(String(20), nullable=False, default="Applied", index=True)
    cover_letter = Column(Text, nullable=True)
    cv_url = Column(String(2048), nullable=True)

    # Employer side
    employer_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    # Timestamps
    applied_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    status_changed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<ApplicationModel {self.id} - {self.status}>"

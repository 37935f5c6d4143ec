"""
Job ORM Model
SQLAlchemy model for job postings
"""
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, Text, Numeric, ForeignKey, Uuid

from core.database import Base


class JobModel(Base):
    """Job posting table ORM model"""

    __tablename__ = "jobs"

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Ownership
    employer_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # Content
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=True)
    benefits = Column(Text, nullable=True)
    company_name = Column(String(200), nullable=True)
    company_logo_url = Column(String(2048), nullable=True)
    location = Column(String(200), nullable=True)
    country = Column(String(100), nullable=True, index=True)

    # Classification
    job_type = Column(String(20), nullable=False)
    work_mode = Column(String(20), nullable=False)
    experience_level = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="Draft", index=True)

    # Compensation
    salary_min = Column(Numeric(12, 2), nullable=True)
    salary_max = Column(Numeric(12, 2), nullable=True)
    salary_currency = Column(String(3), nullable=False, default="USD")
    is_salary_visible = Column(Boolean, nullable=False, default=True)

    # ServiceNow specifics
    skills_required = Column(JSON, nullable=False, default=list)
    certifications = Column(JSON, nullable=False, default=list)
    servicenow_versions = Column(JSON, nullable=False, default=list)

    # Counters
    application_count = Column(Integer, nullable=False, default=0)
    view_count = Column(Integer, nullable=False, default=0)

    # Timestamps
    expires_at = Column(DateTime(timezone=True), nullable=True)
    status_changed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<JobModel {self.id} - {self.title}>"

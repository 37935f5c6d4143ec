"""
Profile ORM Models
Candidate and employer profiles, one of each per user
"""
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, Text, Numeric, ForeignKey, Uuid

from core.database import Base


class CandidateProfileModel(Base):
    """Candidate profile table ORM model"""

    __tablename__ = "candidate_profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    # About
    headline = Column(String(200), nullable=True)
    bio = Column(Text, nullable=True)
    experience_level = Column(String(20), nullable=False, default="Mid")
    years_of_experience = Column(Integer, nullable=False, default=0)
    availability = Column(String(30), nullable=False, default="OpenToOpportunities")
    current_role = Column(String(200), nullable=True)
    desired_role = Column(String(200), nullable=True)
    location = Column(String(200), nullable=True)
    country = Column(String(100), nullable=True, index=True)
    time_zone = Column(String(64), nullable=True)

    # Links and files
    profile_picture_url = Column(String(2048), nullable=True)
    cv_url = Column(String(2048), nullable=True)
    linkedin_url = Column(String(2048), nullable=True)
    github_url = Column(String(2048), nullable=True)
    website_url = Column(String(2048), nullable=True)

    # Preferences
    is_public = Column(Boolean, nullable=False, default=True)
    desired_salary_min = Column(Numeric(12, 2), nullable=True)
    desired_salary_max = Column(Numeric(12, 2), nullable=True)
    salary_currency = Column(String(3), nullable=False, default="USD")
    open_to_remote = Column(Boolean, nullable=False, default=False)
    open_to_relocation = Column(Boolean, nullable=False, default=False)

    # ServiceNow specifics
    skills = Column(JSON, nullable=False, default=list)
    certifications = Column(JSON, nullable=False, default=list)
    servicenow_versions = Column(JSON, nullable=False, default=list)

    profile_completeness = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<CandidateProfileModel user={self.user_id}>"


class EmployerProfileModel(Base):
    """Employer profile table ORM model"""

    __tablename__ = "employer_profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    company_name = Column(String(200), nullable=True)
    company_description = Column(Text, nullable=True)
    industry = Column(String(100), nullable=True)
    company_size = Column(String(10), nullable=True)
    headquarters_city = Column(String(100), nullable=True)
    headquarters_country = Column(String(100), nullable=True)
    website_url = Column(String(2048), nullable=True)
    linkedin_url = Column(String(2048), nullable=True)
    logo_url = Column(String(2048), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<EmployerProfileModel user={self.user_id} company={self.company_name}>"

"""
Profile Request Schemas
"""
from decimal import Decimal
from typing import List, Optional

from domain.enums import AvailabilityStatus, CandidateLevel
from .common import ApiBody


class CandidateProfileRequest(ApiBody):
    """Only the fields sent are changed; the profile is created on first save"""
    headline: Optional[str] = None
    bio: Optional[str] = None
    experience_level: Optional[CandidateLevel] = None
    years_of_experience: Optional[int] = None
    availability: Optional[AvailabilityStatus] = None
    current_role: Optional[str] = None
    desired_role: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    time_zone: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    website_url: Optional[str] = None
    is_public: Optional[bool] = None
    desired_salary_min: Optional[Decimal] = None
    desired_salary_max: Optional[Decimal] = None
    salary_currency: Optional[str] = None
    open_to_remote: Optional[bool] = None
    open_to_relocation: Optional[bool] = None
    skills: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    servicenow_versions: Optional[List[str]] = None


class EmployerProfileRequest(ApiBody):
    company_name: Optional[str] = None
    company_description: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    headquarters_city: Optional[str] = None
    headquarters_country: Optional[str] = None
    website_url: Optional[str] = None
    linkedin_url: Optional[str] = None

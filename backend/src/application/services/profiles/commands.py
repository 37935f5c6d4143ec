"""
Profile Requests
"""
from decimal import Decimal
from typing import ClassVar, Dict, List, Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from core.config import settings
from application.dtos import RequestModel
from application.services.files.uploads import FileUpload
from application.validators import check_absolute_url, check_currency
from domain.enums import AvailabilityStatus, CandidateLevel, COMPANY_SIZES


IMAGE_TYPES = {"image/jpeg": "jpg", "image/jpg": "jpg", "image/png": "png", "image/webp": "webp"}


# ----------------------------------------------------------------------
# Candidate
# ----------------------------------------------------------------------

class GetMyCandidateProfile(RequestModel):
    pass


class UpsertCandidateProfile(RequestModel):
    """Only the supplied fields change; the profile is created on first use"""
    headline: Optional[str] = Field(default=None, max_length=200)
    bio: Optional[str] = Field(default=None, max_length=3000)
    experience_level: Optional[CandidateLevel] = None
    years_of_experience: Optional[int] = Field(default=None, ge=0, le=50)
    availability: Optional[AvailabilityStatus] = None
    current_role: Optional[str] = Field(default=None, max_length=200)
    desired_role: Optional[str] = Field(default=None, max_length=200)
    location: Optional[str] = Field(default=None, max_length=200)
    country: Optional[str] = Field(default=None, max_length=100)
    time_zone: Optional[str] = Field(default=None, max_length=64)
    linkedin_url: Optional[str] = Field(default=None, max_length=2048)
    github_url: Optional[str] = Field(default=None, max_length=2048)
    website_url: Optional[str] = Field(default=None, max_length=2048)
    is_public: Optional[bool] = None
    desired_salary_min: Optional[Decimal] = Field(default=None, ge=0)
    desired_salary_max: Optional[Decimal] = Field(default=None, ge=0)
    salary_currency: Optional[str] = None
    open_to_remote: Optional[bool] = None
    open_to_relocation: Optional[bool] = None
    skills: Optional[List[str]] = Field(default=None, max_length=100)
    certifications: Optional[List[str]] = Field(default=None, max_length=50)
    servicenow_versions: Optional[List[str]] = Field(default=None, max_length=50)

    @field_validator("linkedin_url", "github_url", "website_url")
    @classmethod
    def valid_urls(cls, v: Optional[str]) -> Optional[str]:
        return check_absolute_url(v)

    @field_validator("salary_currency")
    @classmethod
    def valid_currency(cls, v: Optional[str]) -> Optional[str]:
        return check_currency(v)

    @model_validator(mode="after")
    def salary_order(self) -> "UpsertCandidateProfile":
        low, high = self.desired_salary_min, self.desired_salary_max
        if low is not None and high is not None and high < low:
            raise ValueError("desired_salary_max must be greater than or equal to desired_salary_min")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class GetCandidateProfile(RequestModel):
    user_id: UUID


class SearchCandidates(RequestModel):
    keyword: Optional[str] = Field(default=None, max_length=200)
    country: Optional[str] = Field(default=None, max_length=100)
    experience_level: Optional[CandidateLevel] = None
    min_years_of_experience: Optional[int] = Field(default=None, ge=0, le=50)
    open_to_remote: Optional[bool] = None
    availability: Optional[AvailabilityStatus] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class UploadProfilePicture(FileUpload):
    allowed_types: ClassVar[Dict[str, str]] = IMAGE_TYPES
    max_size_mb: ClassVar[int] = settings.MAX_PROFILE_PICTURE_SIZE_MB


class UploadCv(FileUpload):
    allowed_types: ClassVar[Dict[str, str]] = {"application/pdf": "pdf"}
    max_size_mb: ClassVar[int] = settings.MAX_CV_SIZE_MB


# ----------------------------------------------------------------------
# Employer
# ----------------------------------------------------------------------

class GetMyEmployerProfile(RequestModel):
    pass


class UpsertEmployerProfile(RequestModel):
    company_name: Optional[str] = Field(default=None, max_length=200)
    company_description: Optional[str] = Field(default=None, max_length=5000)
    industry: Optional[str] = Field(default=None, max_length=100)
    company_size: Optional[str] = None
    headquarters_city: Optional[str] = Field(default=None, max_length=100)
    headquarters_country: Optional[str] = Field(default=None, max_length=100)
    website_url: Optional[str] = Field(default=None, max_length=2048)
    linkedin_url: Optional[str] = Field(default=None, max_length=2048)

    @field_validator("company_size")
    @classmethod
    def valid_company_size(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in COMPANY_SIZES:
            raise ValueError(f"Company size must be one of {', '.join(COMPANY_SIZES)}")
        return v

    @field_validator("website_url", "linkedin_url")
    @classmethod
    def valid_urls(cls, v: Optional[str]) -> Optional[str]:
        return check_absolute_url(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class GetEmployerProfile(RequestModel):
    user_id: UUID


class UploadCompanyLogo(FileUpload):
    allowed_types: ClassVar[Dict[str, str]] = IMAGE_TYPES
    max_size_mb: ClassVar[int] = settings.MAX_PROFILE_PICTURE_SIZE_MB


class VerifyEmployerProfile(RequestModel):
    user_id: UUID

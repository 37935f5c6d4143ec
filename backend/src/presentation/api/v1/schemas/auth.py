"""
Authentication Request Schemas
"""
from typing import List, Optional

from pydantic import Field

from domain.enums import UserRole
from .common import ApiBody


class RegisterRequest(ApiBody):
    email: str = Field(..., description="Account e-mail, unique")
    password: str = Field(..., description="At least 8 characters with upper, lower, digit and special")
    confirm_password: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    roles: Optional[List[UserRole]] = Field(None, description="Defaults to Candidate")


class LoginRequest(ApiBody):
    email: str
    password: str
    remember_me: bool = Field(False, description="Longer-lived refresh token")


class RefreshTokenRequest(ApiBody):
    refresh_token: str


class TokenRequest(ApiBody):
    token: str


class EmailRequest(ApiBody):
    email: str


class ResetPasswordRequest(ApiBody):
    token: str
    new_password: str
    confirm_password: str


class ChangePasswordRequest(ApiBody):
    current_password: str
    new_password: str
    confirm_new_password: str

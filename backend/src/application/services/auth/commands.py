"""
Authentication Requests
"""
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from application.dtos import RequestModel
from application.validators import check_email, check_password_strength, check_person_name
from domain.enums import UserRole


class RegisterUser(RequestModel):
    email: str = Field(max_length=255)
    password: str = Field(max_length=128)
    confirm_password: str
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)
    roles: List[UserRole] = Field(default_factory=lambda: [UserRole.CANDIDATE])

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return check_email(v)

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def valid_names(cls, v: str) -> str:
        return check_person_name(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterUser":
        if self.password != self.confirm_password:
            raise ValueError("Password and confirmation do not match")
        return self


class LoginUser(RequestModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)
    remember_me: bool = False


class RefreshAccessToken(RequestModel):
    refresh_token: str = Field(min_length=1)


class RevokeRefreshToken(RequestModel):
    refresh_token: str = Field(min_length=1)


class VerifyEmail(RequestModel):
    token: str = Field(min_length=1)


class ResendVerificationEmail(RequestModel):
    email: str = Field(min_length=1, max_length=255)


class ForgotPassword(RequestModel):
    email: str = Field(min_length=1, max_length=255)


class ResetPassword(RequestModel):
    token: str = Field(min_length=1)
    new_password: str = Field(max_length=128)
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "ResetPassword":
        if self.new_password != self.confirm_password:
            raise ValueError("Password and confirmation do not match")
        return self


class ChangePassword(RequestModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(max_length=128)
    confirm_new_password: str

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)

    @model_validator(mode="after")
    def passwords_differ_and_match(self) -> "ChangePassword":
        if self.new_password != self.confirm_new_password:
            raise ValueError("Password and confirmation do not match")
        if self.new_password == self.current_password:
            raise ValueError("New password must differ from the current password")
        return self


class GetCurrentUser(RequestModel):
    pass

"""
Authentication DTOs
"""
from application.dtos import CamelModel
from application.services.users.dtos import UserDto


class AuthTokensDto(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserDto

"""
Authentication Service Interfaces
Abstract base classes for the collaborators of the auth handlers
"""
from abc import ABC, abstractmethod
from typing import Iterable, Optional
from uuid import UUID


class IPasswordHasher(ABC):
    """Password hashing interface"""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """Hash a plain password"""
        pass

    @abstractmethod
    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify password against hash"""
        pass


class IJwtService(ABC):
    """JWT token service interface"""

    @property
    @abstractmethod
    def access_token_ttl_seconds(self) -> int:
        pass

    @abstractmethod
    def create_access_token(self, user_id: UUID, email: str, roles: Iterable[str]) -> str:
        """Create access token carrying the user's roles"""
        pass

    @abstractmethod
    def verify_token(self, token: str) -> Optional[dict]:
        """Verify and decode token; None when invalid or expired"""
        pass


class IEmailSender(ABC):
    """Outgoing e-mail"""

    @abstractmethod
    async def send(self, to: str, subject: str, body: str) -> None:
        pass

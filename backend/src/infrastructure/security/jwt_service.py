"""
JWT Service Implementation
RS256 with a key pair when configured, HS256 with the shared secret otherwise
"""
from datetime import timedelta
from typing import Dict, Iterable, Optional
from uuid import UUID

from jose import jwt, JWTError
from loguru import logger

from core.clock import utc_now
from core.config import settings
from application.services.auth.interfaces import IJwtService


class JwtService(IJwtService):
    """Access tokens carrying user id, e-mail and roles"""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        private_key: Optional[str] = None,
        public_key: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        private_key = private_key or settings.JWT_PRIVATE_KEY
        public_key = public_key or settings.JWT_PUBLIC_KEY
        self.expire_minutes = expire_minutes or settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

        if private_key and public_key:
            self.algorithm = "RS256"
            self._signing_key = private_key
            self._verifying_key = public_key
        else:
            self.algorithm = settings.JWT_ALGORITHM if settings.JWT_ALGORITHM.startswith("HS") else "HS256"
            self._signing_key = self._verifying_key = secret_key or settings.JWT_SECRET_KEY
            if settings.ENVIRONMENT == "production":
                logger.warning("Using a symmetric JWT key in production. Configure an RSA key pair.")

    @property
    def access_token_ttl_seconds(self) -> int:
        return self.expire_minutes * 60

    def create_access_token(self, user_id: UUID, email: str, roles: Iterable[str]) -> str:
        """Create access token"""
        now = utc_now()
        payload = {
            "sub": str(user_id),
            "email": email,
            "roles": list(roles),
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
            "type": "access",
        }
        return jwt.encode(payload, self._signing_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Optional[Dict]:
        """Verify and decode token"""
        try:
            payload = jwt.decode(token, self._verifying_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"JWT verification failed: {str(e)}")
            return None

        if payload.get("type") != "access" or not payload.get("sub"):
            logger.warning("JWT rejected: not an access token")
            return None
        return payload

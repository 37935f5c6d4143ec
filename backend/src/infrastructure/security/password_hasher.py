"""
Password Hasher Implementation
bcrypt with a configurable work factor
"""
import bcrypt
from loguru import logger

from application.services.auth.interfaces import IPasswordHasher


class BcryptPasswordHasher(IPasswordHasher):
    """bcrypt password hashing"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        """Hash a plain password"""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify password against hash; malformed hashes never verify"""
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError as e:
            logger.warning(f"Stored password hash could not be checked: {str(e)}")
            return False

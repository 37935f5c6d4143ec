"""
User ORM Models
SQLAlchemy models for accounts and their refresh tokens
"""
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, Text, ForeignKey, Uuid

from core.database import Base


class UserModel(Base):
    """User account table ORM model"""

    __tablename__ = "users"

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    roles = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="Active", index=True)

    # Personal Information
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=True)
    profile_picture_url = Column(String(2048), nullable=True)

    # Email verification / password reset (SHA-256 digests)
    is_email_verified = Column(Boolean, nullable=False, default=False)
    email_verification_token_hash = Column(String(64), nullable=True, index=True)
    email_verification_expires_at = Column(DateTime(timezone=True), nullable=True)
    password_reset_token_hash = Column(String(64), nullable=True, index=True)
    password_reset_expires_at = Column(DateTime(timezone=True), nullable=True)

    # Login protection
    failed_login_attempts = Column(Integer, nullable=False, default=0)
    locked_out_until = Column(DateTime(timezone=True), nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    # Moderation
    suspension_reason = Column(Text, nullable=True)
    suspended_at = Column(DateTime(timezone=True), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(Uuid, nullable=True)
    status_changed_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<UserModel {self.email}>"


class RefreshTokenModel(Base):
    """Refresh token table ORM model"""

    __tablename__ = "refresh_tokens"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)
    replaced_by_hash = Column(String(64), nullable=True)

    def __repr__(self):
        return f"<RefreshTokenModel {self.id} user={self.user_id}>"

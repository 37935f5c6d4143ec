"""
User Account Domain Entity
Immutable account with credentials, lockout, refresh tokens and moderation state
"""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple
from uuid import UUID, uuid4

from core.clock import utc_now
from core.result import Result, Ok, invalid_transition, domain_rule, unauthenticated
from ..enums import AccountStatus, UserRole, ADMIN_ROLES, EMPLOYER_ROLES
from ..value_objects import Email


@dataclass(frozen=True)
class RefreshToken:
    """Opaque refresh token; only its digest is stored"""

    id: UUID
    user_id: UUID
    token_hash: str
    expires_at: datetime
    created_at: datetime
    revoked_at: Optional[datetime] = None
    replaced_by_hash: Optional[str] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at <= (now or utc_now())

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return self.revoked_at is None and not self.is_expired(now)

    def revoke(self, now: datetime, replaced_by_hash: Optional[str] = None) -> "RefreshToken":
        if self.revoked_at is not None:
            return self
        return replace(self, revoked_at=now, replaced_by_hash=replaced_by_hash)


@dataclass(frozen=True)
class UserAccount:
    """User account domain entity - immutable"""

    id: UUID
    email: str
    password_hash: str
    first_name: str
    last_name: str
    roles: Tuple[UserRole, ...]
    status: AccountStatus
    created_at: datetime
    updated_at: datetime

    phone: Optional[str] = None
    profile_picture_url: Optional[str] = None

    # Email verification / password reset (digests only)
    is_email_verified: bool = False
    email_verification_token_hash: Optional[str] = None
    email_verification_expires_at: Optional[datetime] = None
    password_reset_token_hash: Optional[str] = None
    password_reset_expires_at: Optional[datetime] = None

    # Login protection
    failed_login_attempts: int = 0
    locked_out_until: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    # Moderation
    suspension_reason: Optional[str] = None
    suspended_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[UUID] = None
    status_changed_at: Optional[datetime] = None

    refresh_tokens: Tuple[RefreshToken, ...] = ()

    def __post_init__(self):
        """Validate account data"""
        if not self.roles:
            raise ValueError("An account needs at least one role")

    @classmethod
    def create(
        cls,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        roles: Iterable[UserRole] = (UserRole.CANDIDATE,),
        phone: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "UserAccount":
        now = now or utc_now()
        return cls(
            id=uuid4(),
            email=Email(email).value,
            password_hash=password_hash,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            roles=tuple(dict.fromkeys(roles)) or (UserRole.CANDIDATE,),
            status=AccountStatus.ACTIVE,
            created_at=now,
            updated_at=now,
            phone=phone.strip() if phone else None,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return any(r in ADMIN_ROLES for r in self.roles)

    @property
    def is_employer(self) -> bool:
        return any(r in EMPLOYER_ROLES for r in self.roles)

    def is_locked_out(self, now: Optional[datetime] = None) -> bool:
        return self.locked_out_until is not None and self.locked_out_until > (now or utc_now())

    def active_refresh_tokens(self, now: Optional[datetime] = None) -> Tuple[RefreshToken, ...]:
        return tuple(t for t in self.refresh_tokens if t.is_active(now))

    def find_refresh_token(self, token_hash: str) -> Optional[RefreshToken]:
        for token in self.refresh_tokens:
            if token.token_hash == token_hash:
                return token
        return None

    # ------------------------------------------------------------------
    # Login bookkeeping
    # ------------------------------------------------------------------

    def record_failed_login(
        self,
        now: Optional[datetime] = None,
        max_attempts: int = 5,
        minutes_per_attempt: int = 5,
        max_minutes: int = 60,
    ) -> "UserAccount":
        """Lock for min(attempts * minutes_per_attempt, max_minutes) once the threshold is reached"""
        now = now or utc_now()
        attempts = self.failed_login_attempts + 1
        locked_until = self.locked_out_until
        if attempts >= max_attempts:
            locked_until = now + timedelta(minutes=min(attempts * minutes_per_attempt, max_minutes))
        return replace(self, failed_login_attempts=attempts, locked_out_until=locked_until, updated_at=now)

    def record_successful_login(self, now: Optional[datetime] = None) -> "UserAccount":
        now = now or utc_now()
        return replace(
            self,
            failed_login_attempts=0,
            locked_out_until=None,
            last_login_at=now,
            updated_at=now,
        )

    # ------------------------------------------------------------------
    # Refresh tokens
    # ------------------------------------------------------------------

    def issue_refresh_token(
        self, token_hash: str, expires_at: datetime, now: Optional[datetime] = None
    ) -> "UserAccount":
        now = now or utc_now()
        token = RefreshToken(
            id=uuid4(),
            user_id=self.id,
            token_hash=token_hash,
            expires_at=expires_at,
            created_at=now,
        )
        return replace(self, refresh_tokens=self.refresh_tokens + (token,), updated_at=now)

    def rotate_refresh_token(
        self,
        old_hash: str,
        new_hash: str,
        expires_at: datetime,
        now: Optional[datetime] = None,
    ) -> Result["UserAccount"]:
        now = now or utc_now()
        current = self.find_refresh_token(old_hash)
        if current is None or not current.is_active(now):
            return unauthenticated("Invalid or expired refresh token.")
        tokens = tuple(
            t.revoke(now, replaced_by_hash=new_hash) if t.token_hash == old_hash else t
            for t in self.refresh_tokens
        )
        rotated = replace(self, refresh_tokens=tokens)
        return Ok(rotated.issue_refresh_token(new_hash, expires_at, now))

    def revoke_refresh_token(self, token_hash: str, now: Optional[datetime] = None) -> Result["UserAccount"]:
        now = now or utc_now()
        current = self.find_refresh_token(token_hash)
        if current is None or not current.is_active(now):
            return unauthenticated("Invalid or expired refresh token.")
        tokens = tuple(t.revoke(now) if t.token_hash == token_hash else t for t in self.refresh_tokens)
        return Ok(replace(self, refresh_tokens=tokens, updated_at=now))

    def revoke_all_refresh_tokens(self, now: Optional[datetime] = None) -> "UserAccount":
        now = now or utc_now()
        tokens = tuple(t.revoke(now) if t.is_active(now) else t for t in self.refresh_tokens)
        return replace(self, refresh_tokens=tokens, updated_at=now)

    # ------------------------------------------------------------------
    # Moderation lifecycle
    # ------------------------------------------------------------------

    def suspend(self, reason: str, actor_id: UUID, now: Optional[datetime] = None) -> Result["UserAccount"]:
        """Suspension revokes every active session"""
        if actor_id == self.id:
            return domain_rule("user.self_suspension", "You cannot suspend your own account.")
        if self.status == AccountStatus.SUSPENDED:
            return invalid_transition("User", self.status, AccountStatus.SUSPENDED, "User is already suspended.")
        if self.status != AccountStatus.ACTIVE:
            return invalid_transition("User", self.status, AccountStatus.SUSPENDED)
        now = now or utc_now()
        revoked = self.revoke_all_refresh_tokens(now)
        return Ok(replace(
            revoked,
            status=AccountStatus.SUSPENDED,
            suspension_reason=reason.strip(),
            suspended_at=now,
            status_changed_at=now,
            updated_at=now,
        ))

    def soft_delete(self, actor_id: UUID, now: Optional[datetime] = None) -> Result["UserAccount"]:
        if actor_id == self.id:
            return domain_rule("user.self_deletion", "You cannot delete your own account.")
        if self.status == AccountStatus.DELETED:
            return invalid_transition("User", self.status, AccountStatus.DELETED, "User is already deleted.")
        if self.status != AccountStatus.ACTIVE:
            return invalid_transition("User", self.status, AccountStatus.DELETED)
        now = now or utc_now()
        revoked = self.revoke_all_refresh_tokens(now)
        return Ok(replace(
            revoked,
            status=AccountStatus.DELETED,
            deleted_at=now,
            deleted_by=actor_id,
            status_changed_at=now,
            updated_at=now,
        ))

    def reinstate(self, now: Optional[datetime] = None) -> Result["UserAccount"]:
        if self.status not in (AccountStatus.SUSPENDED, AccountStatus.DELETED):
            return invalid_transition("User", self.status, AccountStatus.ACTIVE, "User is not suspended or deleted.")
        now = now or utc_now()
        return Ok(replace(
            self,
            status=AccountStatus.ACTIVE,
            suspension_reason=None,
            suspended_at=None,
            deleted_at=None,
            deleted_by=None,
            failed_login_attempts=0,
            locked_out_until=None,
            status_changed_at=now,
            updated_at=now,
        ))

    def set_roles(self, roles: Iterable[UserRole], actor_id: UUID, now: Optional[datetime] = None) -> Result["UserAccount"]:
        """Replace the role set; SuperAdmin accounts are never changed"""
        if actor_id == self.id:
            return domain_rule("user.self_role_change", "You cannot update your own roles.")
        if UserRole.SUPER_ADMIN in self.roles:
            return domain_rule("user.super_admin_roles", "Cannot update roles of a SuperAdmin account.")
        new_roles = tuple(dict.fromkeys(roles))
        if not new_roles:
            return domain_rule("user.roles_required", "At least one role is required.")
        if UserRole.SUPER_ADMIN in new_roles:
            return domain_rule("user.super_admin_assignment", "SuperAdmin role cannot be assigned.")
        return Ok(replace(self, roles=new_roles, updated_at=now or utc_now()))

    # ------------------------------------------------------------------
    # Verification and password management
    # ------------------------------------------------------------------

    def set_email_verification_token(
        self, token_hash: str, expires_at: datetime, now: Optional[datetime] = None
    ) -> "UserAccount":
        return replace(
            self,
            email_verification_token_hash=token_hash,
            email_verification_expires_at=expires_at,
            updated_at=now or utc_now(),
        )

    def verify_email(self, token_hash: str, now: Optional[datetime] = None) -> Result["UserAccount"]:
        now = now or utc_now()
        if self.is_email_verified:
            return domain_rule("user.already_verified", "Email address is already verified.")
        if (
            self.email_verification_token_hash != token_hash
            or self.email_verification_expires_at is None
            or self.email_verification_expires_at <= now
        ):
            return domain_rule("user.invalid_token", "Invalid or expired verification token.")
        return Ok(replace(
            self,
            is_email_verified=True,
            email_verification_token_hash=None,
            email_verification_expires_at=None,
            updated_at=now,
        ))

    def set_password_reset_token(
        self, token_hash: str, expires_at: datetime, now: Optional[datetime] = None
    ) -> "UserAccount":
        return replace(
            self,
            password_reset_token_hash=token_hash,
            password_reset_expires_at=expires_at,
            updated_at=now or utc_now(),
        )

    def reset_password(
        self, token_hash: str, new_password_hash: str, now: Optional[datetime] = None
    ) -> Result["UserAccount"]:
        """Resetting the password signs out every session"""
        now = now or utc_now()
        if (
            self.password_reset_token_hash != token_hash
            or self.password_reset_expires_at is None
            or self.password_reset_expires_at <= now
        ):
            return domain_rule("user.invalid_token", "Invalid or expired password reset token.")
        revoked = self.revoke_all_refresh_tokens(now)
        return Ok(replace(
            revoked,
            password_hash=new_password_hash,
            password_reset_token_hash=None,
            password_reset_expires_at=None,
            failed_login_attempts=0,
            locked_out_until=None,
            updated_at=now,
        ))

    def change_password(self, new_password_hash: str, now: Optional[datetime] = None) -> "UserAccount":
        now = now or utc_now()
        revoked = self.revoke_all_refresh_tokens(now)
        return replace(revoked, password_hash=new_password_hash, updated_at=now)

    def update_contact(
        self,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "UserAccount":
        return replace(
            self,
            first_name=first_name.strip() if first_name else self.first_name,
            last_name=last_name.strip() if last_name else self.last_name,
            phone=phone.strip() if phone else self.phone,
            updated_at=now or utc_now(),
        )

    def __str__(self) -> str:
        return f"UserAccount({self.email}, status={self.status.value})"

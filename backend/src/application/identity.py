"""
Caller Identity
Who is making a request, resolved once at the HTTP boundary
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional
from uuid import UUID

from core.result import Err, unauthenticated
from domain.enums import UserRole, ADMIN_ROLES, EMPLOYER_ROLES


@dataclass(frozen=True)
class CallerIdentity:
    """Authenticated user id and roles, or anonymous"""

    user_id: Optional[UUID] = None
    roles: FrozenSet[UserRole] = field(default_factory=frozenset)
    is_authenticated: bool = False

    @classmethod
    def anonymous(cls) -> "CallerIdentity":
        return cls()

    @classmethod
    def authenticated(cls, user_id: UUID, roles: Iterable[str]) -> "CallerIdentity":
        """Unknown role names in a token are ignored"""
        known = {r.value for r in UserRole}
        return cls(
            user_id=user_id,
            roles=frozenset(UserRole(r) for r in roles if r in known),
            is_authenticated=True,
        )

    def has_role(self, role: UserRole) -> bool:
        return role in self.roles

    @property
    def is_admin(self) -> bool:
        return bool(self.roles & ADMIN_ROLES)

    @property
    def is_employer(self) -> bool:
        return bool(self.roles & EMPLOYER_ROLES) or self.is_admin

    @property
    def is_internal_service(self) -> bool:
        return UserRole.API_USER in self.roles

    def is_self(self, user_id: Optional[UUID]) -> bool:
        return self.is_authenticated and user_id is not None and self.user_id == user_id


def require_authenticated(caller: CallerIdentity) -> Optional[Err]:
    """Err when the caller is anonymous, None otherwise"""
    if not caller.is_authenticated or caller.user_id is None:
        return unauthenticated()
    return None

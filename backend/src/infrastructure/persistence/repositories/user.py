"""
User Repository Implementation
SQLAlchemy-based account repository; refresh tokens live in their own table
"""
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from core.clock import as_utc
from core.exceptions import DomainException, RepositoryException
from domain.entities import RefreshToken, UserAccount
from domain.enums import AccountStatus, UserRole
from application.repositories.interfaces import IUnitOfWork, IUserRepository, UserSearchFilters
from infrastructure.persistence.models.user import RefreshTokenModel, UserModel
from .base import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository, IUserRepository):
    """SQLAlchemy implementation of the account repository"""

    resource_type = "User"

    async def get_by_id(self, uow: IUnitOfWork, user_id: UUID) -> Optional[UserAccount]:
        """Get account by ID"""
        try:
            return await self._first(self._session(uow), UserModel.id == user_id)
        except Exception as e:
            logger.error(f"Failed to get user by ID {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def get_by_email(self, uow: IUnitOfWork, email: str) -> Optional[UserAccount]:
        """Get account by normalized email"""
        try:
            return await self._first(self._session(uow), UserModel.email == email.strip().lower())
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def exists_by_email(self, uow: IUnitOfWork, email: str) -> bool:
        try:
            result = await self._session(uow).execute(
                select(exists().where(UserModel.email == email.strip().lower()))
            )
            return bool(result.scalar())
        except Exception as e:
            logger.error(f"Failed to check email {email}: {str(e)}")
            raise RepositoryException(f"Failed to check email: {str(e)}")

    async def get_by_refresh_token(self, uow: IUnitOfWork, token_hash: str) -> Optional[UserAccount]:
        try:
            session = self._session(uow)
            result = await session.execute(
                select(RefreshTokenModel.user_id).where(RefreshTokenModel.token_hash == token_hash)
            )
            user_id = result.scalar_one_or_none()
            if user_id is None:
                return None
            return await self._first(session, UserModel.id == user_id)
        except Exception as e:
            logger.error(f"Failed to get user by refresh token: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def get_by_verification_token(self, uow: IUnitOfWork, token_hash: str) -> Optional[UserAccount]:
        try:
            return await self._first(self._session(uow), UserModel.email_verification_token_hash == token_hash)
        except Exception as e:
            logger.error(f"Failed to get user by verification token: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def get_by_password_reset_token(self, uow: IUnitOfWork, token_hash: str) -> Optional[UserAccount]:
        try:
            return await self._first(self._session(uow), UserModel.password_reset_token_hash == token_hash)
        except Exception as e:
            logger.error(f"Failed to get user by password reset token: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def add(self, uow: IUnitOfWork, user: UserAccount) -> UserAccount:
        """Create new account"""
        session = self._session(uow)
        try:
            session.add(self._to_model(user))
            for token in user.refresh_tokens:
                session.add(self._token_to_model(token))
            await self._flush(session)
            logger.info(f"Created user {user.id}")
            return user
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to create user {user.email}: {str(e)}")
            raise RepositoryException(f"Failed to create user: {str(e)}")

    async def save(self, uow: IUnitOfWork, user: UserAccount) -> UserAccount:
        """Persist account state, including new and revoked refresh tokens"""
        session = self._session(uow)
        try:
            await self._require_existing(session, UserModel, user.id)
            await session.merge(self._to_model(user))
            for token in user.refresh_tokens:
                await session.merge(self._token_to_model(token))
            await self._flush(session)
            return user
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to update user {user.id}: {str(e)}")
            raise RepositoryException(f"Failed to update user: {str(e)}")

    async def search(
        self, uow: IUnitOfWork, filters: UserSearchFilters, page: int, page_size: int
    ) -> Tuple[List[UserAccount], int]:
        """Newest accounts first"""
        try:
            session = self._session(uow)
            query = select(UserModel)
            if filters.search:
                pattern = f"%{filters.search}%"
                query = query.where(or_(
                    UserModel.email.ilike(pattern),
                    UserModel.first_name.ilike(pattern),
                    UserModel.last_name.ilike(pattern),
                ))
            if filters.status:
                query = query.where(UserModel.status == filters.status.value)

            models, total = await self._page(session, query, (UserModel.created_at.desc(),), page, page_size)
            return [await self._with_tokens(session, m) for m in models], total
        except Exception as e:
            logger.error(f"Failed to search users: {str(e)}")
            raise RepositoryException(f"Failed to search users: {str(e)}")

    async def _first(self, session: AsyncSession, condition) -> Optional[UserAccount]:
        result = await session.execute(select(UserModel).where(condition))
        model = result.scalar_one_or_none()
        if model:
            return await self._with_tokens(session, model)
        return None

    async def _with_tokens(self, session: AsyncSession, model: UserModel) -> UserAccount:
        result = await session.execute(
            select(RefreshTokenModel)
            .where(RefreshTokenModel.user_id == model.id)
            .order_by(RefreshTokenModel.created_at)
        )
        tokens = tuple(self._token_to_entity(t) for t in result.scalars().all())
        return self._to_entity(model, tokens)

    @staticmethod
    def _to_entity(model: UserModel, tokens: Tuple[RefreshToken, ...] = ()) -> UserAccount:
        """Convert ORM model to domain entity"""
        return UserAccount(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            first_name=model.first_name,
            last_name=model.last_name,
            roles=tuple(UserRole(r) for r in model.roles or []) or (UserRole.CANDIDATE,),
            status=AccountStatus(model.status),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            phone=model.phone,
            profile_picture_url=model.profile_picture_url,
            is_email_verified=model.is_email_verified,
            email_verification_token_hash=model.email_verification_token_hash,
            email_verification_expires_at=as_utc(model.email_verification_expires_at),
            password_reset_token_hash=model.password_reset_token_hash,
            password_reset_expires_at=as_utc(model.password_reset_expires_at),
            failed_login_attempts=model.failed_login_attempts or 0,
            locked_out_until=as_utc(model.locked_out_until),
            last_login_at=as_utc(model.last_login_at),
            suspension_reason=model.suspension_reason,
            suspended_at=as_utc(model.suspended_at),
            deleted_at=as_utc(model.deleted_at),
            deleted_by=model.deleted_by,
            status_changed_at=as_utc(model.status_changed_at),
            refresh_tokens=tokens,
        )

    @staticmethod
    def _to_model(user: UserAccount) -> UserModel:
        """Convert domain entity to ORM model"""
        return UserModel(
            id=user.id,
            email=user.email,
            password_hash=user.password_hash,
            roles=[r.value for r in user.roles],
            status=user.status.value,
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            profile_picture_url=user.profile_picture_url,
            is_email_verified=user.is_email_verified,
            email_verification_token_hash=user.email_verification_token_hash,
            email_verification_expires_at=user.email_verification_expires_at,
            password_reset_token_hash=user.password_reset_token_hash,
            password_reset_expires_at=user.password_reset_expires_at,
            failed_login_attempts=user.failed_login_attempts,
            locked_out_until=user.locked_out_until,
            last_login_at=user.last_login_at,
            suspension_reason=user.suspension_reason,
            suspended_at=user.suspended_at,
            deleted_at=user.deleted_at,
            deleted_by=user.deleted_by,
            status_changed_at=user.status_changed_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    @staticmethod
    def _token_to_entity(model: RefreshTokenModel) -> RefreshToken:
        return RefreshToken(
            id=model.id,
            user_id=model.user_id,
            token_hash=model.token_hash,
            expires_at=as_utc(model.expires_at),
            created_at=as_utc(model.created_at),
            revoked_at=as_utc(model.revoked_at),
            replaced_by_hash=model.replaced_by_hash,
        )

    @staticmethod
    def _token_to_model(token: RefreshToken) -> RefreshTokenModel:
        return RefreshTokenModel(
            id=token.id,
            user_id=token.user_id,
            token_hash=token.token_hash,
            expires_at=token.expires_at,
            created_at=token.created_at,
            revoked_at=token.revoked_at,
            replaced_by_hash=token.replaced_by_hash,
        )


# Alias for convenience
UserRepository = SQLAlchemyUserRepository

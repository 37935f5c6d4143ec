"""
SQLAlchemy Unit of Work
One AsyncSession per request; the dispatcher decides commit or rollback
"""
from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from application.repositories.interfaces import IUnitOfWork
from core.database import AsyncSessionLocal
from core.exceptions import DuplicateResourceException


def duplicate_from(error: IntegrityError, resource_type: str = "Resource") -> DuplicateResourceException:
    """Translate a unique-constraint violation into a DuplicateResourceException"""
    return DuplicateResourceException(resource_type, "constraint", str(error.orig))


class SQLAlchemyUnitOfWork(IUnitOfWork):
    """Async context manager owning one session"""

    def __init__(self, session_factory: async_sessionmaker = AsyncSessionLocal):
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("Unit of work used outside its 'async with' block")
        return self._session

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None:
                await self._session.rollback()
        finally:
            await self._session.close()
            self._session = None

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Commit rejected by a constraint: {e.orig}")
            raise duplicate_from(e)

    async def rollback(self) -> None:
        await self.session.rollback()

"""
Repository Base
Shared session access, flushing and paging for SQLAlchemy repositories
"""
from typing import Any, List, Sequence, Tuple, Type
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from application.repositories.interfaces import IUnitOfWork
from core.exceptions import ResourceNotFoundException
from infrastructure.persistence.unit_of_work import duplicate_from


class SQLAlchemyRepository:
    """Base for repositories that work on the unit of work's session"""

    resource_type = "Resource"

    @staticmethod
    def _session(uow: IUnitOfWork) -> AsyncSession:
        return uow.session

    async def _require_existing(self, session: AsyncSession, model: Type[Any], entity_id: UUID) -> None:
        """Updates never create rows; a missing row is ResourceNotFoundException"""
        if await session.get(model, entity_id) is None:
            raise ResourceNotFoundException(self.resource_type, str(entity_id))

    async def _flush(self, session: AsyncSession) -> None:
        """Flush pending changes; unique violations surface as DuplicateResourceException"""
        try:
            await session.flush()
        except IntegrityError as e:
            await session.rollback()
            raise duplicate_from(e, self.resource_type)

    async def _page(
        self, session: AsyncSession, query: Select, order_by: Sequence[Any], page: int, page_size: int
    ) -> Tuple[List[Any], int]:
        """Total row count of the query, then one page of it"""
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total = (await session.execute(count_query)).scalar_one()

        offset = (page - 1) * page_size
        result = await session.execute(query.order_by(*order_by).offset(offset).limit(page_size))
        return list(result.scalars().all()), total

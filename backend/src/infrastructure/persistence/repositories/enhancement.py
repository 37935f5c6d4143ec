"""
Job Enhancement Repository Implementation
"""
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from loguru import logger

from core.clock import as_utc
from core.exceptions import DomainException, RepositoryException
from domain.entities import BiasIssue, EnhancementOutput, EnhancementResult, Improvement
from domain.enums import EnhancementStatus
from application.repositories.interfaces import EnhancementSearchFilters, IEnhancementRepository, IUnitOfWork
from infrastructure.persistence.models.enhancement import EnhancementModel
from .base import SQLAlchemyRepository


def output_from_json(data: Optional[Dict[str, Any]]) -> Optional[EnhancementOutput]:
    if not data:
        return None
    data = dict(data)
    data["bias_issues"] = tuple(BiasIssue(**b) for b in data.get("bias_issues") or ())
    data["improvements"] = tuple(Improvement(**i) for i in data.get("improvements") or ())
    data["missing_fields"] = tuple(data.get("missing_fields") or ())
    data["suggested_skills"] = tuple(data.get("suggested_skills") or ())
    return EnhancementOutput(**data)


class SQLAlchemyEnhancementRepository(SQLAlchemyRepository, IEnhancementRepository):
    """SQLAlchemy implementation of the enhancement repository"""

    resource_type = "Enhancement"

    async def get_by_id(self, uow: IUnitOfWork, enhancement_id: UUID) -> Optional[EnhancementResult]:
        try:
            result = await self._session(uow).execute(
                select(EnhancementModel).where(EnhancementModel.id == enhancement_id)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None
        except Exception as e:
            logger.error(f"Failed to get enhancement {enhancement_id}: {str(e)}")
            raise RepositoryException(f"Failed to get enhancement: {str(e)}")

    async def add(self, uow: IUnitOfWork, enhancement: EnhancementResult) -> EnhancementResult:
        session = self._session(uow)
        try:
            session.add(self._to_model(enhancement))
            await self._flush(session)
            return enhancement
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to store enhancement for job {enhancement.job_id}: {str(e)}")
            raise RepositoryException(f"Failed to store enhancement: {str(e)}")

    async def save(self, uow: IUnitOfWork, enhancement: EnhancementResult) -> EnhancementResult:
        session = self._session(uow)
        try:
            await self._require_existing(session, EnhancementModel, enhancement.id)
            await session.merge(self._to_model(enhancement))
            await self._flush(session)
            return enhancement
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to update enhancement {enhancement.id}: {str(e)}")
            raise RepositoryException(f"Failed to update enhancement: {str(e)}")

    async def search(
        self, uow: IUnitOfWork, filters: EnhancementSearchFilters, page: int, page_size: int
    ) -> Tuple[List[EnhancementResult], int]:
        try:
            query = select(EnhancementModel).where(EnhancementModel.requested_by == filters.requested_by)
            if filters.job_id:
                query = query.where(EnhancementModel.job_id == filters.job_id)
            models, total = await self._page(
                self._session(uow), query, (EnhancementModel.created_at.desc(), EnhancementModel.id), page, page_size
            )
            return [self._to_entity(m) for m in models], total
        except Exception as e:
            logger.error(f"Failed to list enhancements for {filters.requested_by}: {str(e)}")
            raise RepositoryException(f"Failed to list enhancements: {str(e)}")

    @staticmethod
    def _to_entity(model: EnhancementModel) -> EnhancementResult:
        return EnhancementResult(
            id=model.id,
            job_id=model.job_id,
            requested_by=model.requested_by,
            status=EnhancementStatus(model.status),
            original_title=model.original_title,
            original_description=model.original_description,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            original_requirements=model.original_requirements,
            error_message=model.error_message,
            output=output_from_json(model.output),
            is_accepted=model.is_accepted,
            accepted_at=as_utc(model.accepted_at),
            status_changed_at=as_utc(model.status_changed_at),
        )

    @staticmethod
    def _to_model(enhancement: EnhancementResult) -> EnhancementModel:
        return EnhancementModel(
            id=enhancement.id,
            job_id=enhancement.job_id,
            requested_by=enhancement.requested_by,
            status=enhancement.status.value,
            original_title=enhancement.original_title,
            original_description=enhancement.original_description,
            original_requirements=enhancement.original_requirements,
            output=asdict(enhancement.output) if enhancement.output else None,
            error_message=enhancement.error_message,
            is_accepted=enhancement.is_accepted,
            accepted_at=enhancement.accepted_at,
            status_changed_at=enhancement.status_changed_at,
            created_at=enhancement.created_at,
            updated_at=enhancement.updated_at,
        )

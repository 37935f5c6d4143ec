"""
Application Repository Implementation
SQLAlchemy-based job application repository
"""
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, exists, func, select
from loguru import logger

from core.clock import as_utc
from core.exceptions import DomainException, RepositoryException
from domain.entities import JobApplication
from domain.value_objects import ApplicationStatus
from application.repositories.interfaces import ApplicationSearchFilters, IApplicationRepository, IUnitOfWork
from infrastructure.persistence.models.application import ApplicationModel
from .base import SQLAlchemyRepository


class SQLAlchemyApplicationRepository(SQLAlchemyRepository, IApplicationRepository):
    """SQLAlchemy implementation of the application repository"""

    resource_type = "Application"

    async def get_by_id(self, uow: IUnitOfWork, application_id: UUID) -> Optional[JobApplication]:
        try:
            result = await self._session(uow).execute(
                select(ApplicationModel).where(ApplicationModel.id == application_id)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None
        except Exception as e:
            logger.error(f"Failed to get application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to get application: {str(e)}")

    async def exists(self, uow: IUnitOfWork, job_id: UUID, candidate_id: UUID) -> bool:
        """Whether the candidate already applied to the job, in any status"""
        try:
            result = await self._session(uow).execute(
                select(exists().where(and_(
                    ApplicationModel.job_id == job_id,
                    ApplicationModel.candidate_id == candidate_id,
                )))
            )
            return bool(result.scalar())
        except Exception as e:
            logger.error(f"Failed to check application {job_id}/{candidate_id}: {str(e)}")
            raise RepositoryException(f"Failed to check application: {str(e)}")

    async def count_since(self, uow: IUnitOfWork, candidate_id: UUID, since: datetime) -> int:
        try:
            result = await self._session(uow).execute(
                select(func.count(ApplicationModel.id)).where(and_(
                    ApplicationModel.candidate_id == candidate_id,
                    ApplicationModel.applied_at >= since,
                ))
            )
            return result.scalar_one()
        except Exception as e:
            logger.error(f"Failed to count applications for {candidate_id}: {str(e)}")
            raise RepositoryException(f"Failed to count applications: {str(e)}")

    async def add(self, uow: IUnitOfWork, application: JobApplication) -> JobApplication:
        """Create application; the (job, candidate) pair is unique"""
        session = self._session(uow)
        try:
            session.add(self._to_model(application))
            await self._flush(session)
            logger.info(f"Created application {application.id} for job {application.job_id}")
            return application
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to create application: {str(e)}")
            raise RepositoryException(f"Failed to create application: {str(e)}")

    async def save(self, uow: IUnitOfWork, application: JobApplication) -> JobApplication:
        session = self._session(uow)
        try:
            await self._require_existing(session, ApplicationModel, application.id)
            await session.merge(self._to_model(application))
            await self._flush(session)
            return application
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to update application {application.id}: {str(e)}")
            raise RepositoryException(f"Failed to update application: {str(e)}")

    async def search(
        self, uow: IUnitOfWork, filters: ApplicationSearchFilters, page: int, page_size: int
    ) -> Tuple[List[JobApplication], int]:
        """Most recent applications first"""
        try:
            query = select(ApplicationModel)
            if filters.candidate_id:
                query = query.where(ApplicationModel.candidate_id == filters.candidate_id)
            if filters.job_id:
                query = query.where(ApplicationModel.job_id == filters.job_id)
            if filters.status:
                query = query.where(ApplicationModel.status == filters.status.value)

            models, total = await self._page(
                self._session(uow), query, (ApplicationModel.applied_at.desc(), ApplicationModel.id), page, page_size
            )
            return [self._to_entity(m) for m in models], total
        except Exception as e:
            logger.error(f"Failed to search applications: {str(e)}")
            raise RepositoryException(f"Failed to search applications: {str(e)}")

    @staticmethod
    def _to_entity(model: ApplicationModel) -> JobApplication:
        return JobApplication(
            id=model.id,
            job_id=model.job_id,
            candidate_id=model.candidate_id,
            status=ApplicationStatus(model.status),
            applied_at=as_utc(model.applied_at),
            updated_at=as_utc(model.updated_at),
            cover_letter=model.cover_letter,
            cv_url=model.cv_url,
            employer_notes=model.employer_notes,
            rejection_reason=model.rejection_reason,
            status_changed_at=as_utc(model.status_changed_at),
        )

    @staticmethod
    def _to_model(application: JobApplication) -> ApplicationModel:
        return ApplicationModel(
            id=application.id,
            job_id=application.job_id,
            candidate_id=application.candidate_id,
            status=application.status.value,
            cover_letter=application.cover_letter,
            cv_url=application.cv_url,
            employer_notes=application.employer_notes,
            rejection_reason=application.rejection_reason,
            applied_at=application.applied_at,
            updated_at=application.updated_at,
            status_changed_at=application.status_changed_at,
        )

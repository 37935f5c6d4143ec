"""
Job Repository Implementation
SQLAlchemy-based job posting repository
"""
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from loguru import logger

from core.clock import as_utc
from core.exceptions import DomainException, RepositoryException
from domain.entities import Job
from domain.enums import ExperienceLevel, JobType, WorkMode
from domain.value_objects import JobStatus
from application.repositories.interfaces import IJobRepository, IUnitOfWork, JobSearchFilters
from infrastructure.persistence.models.job import JobModel
from .base import SQLAlchemyRepository


class SQLAlchemyJobRepository(SQLAlchemyRepository, IJobRepository):
    """SQLAlchemy implementation of the job repository"""

    resource_type = "Job"

    async def get_by_id(self, uow: IUnitOfWork, job_id: UUID) -> Optional[Job]:
        """Get job by ID"""
        try:
            result = await self._session(uow).execute(select(JobModel).where(JobModel.id == job_id))
            model = result.scalar_one_or_none()

            if model:
                return self._to_entity(model)
            return None

        except Exception as e:
            logger.error(f"Failed to get job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to get job: {str(e)}")

    async def get_many(self, uow: IUnitOfWork, job_ids: Sequence[UUID]) -> List[Job]:
        if not job_ids:
            return []
        try:
            result = await self._session(uow).execute(select(JobModel).where(JobModel.id.in_(list(job_ids))))
            return [self._to_entity(m) for m in result.scalars().all()]
        except Exception as e:
            logger.error(f"Failed to get {len(job_ids)} jobs: {str(e)}")
            raise RepositoryException(f"Failed to get jobs: {str(e)}")

    async def add(self, uow: IUnitOfWork, job: Job) -> Job:
        """Create new job posting"""
        session = self._session(uow)
        try:
            session.add(self._to_model(job))
            await self._flush(session)
            logger.info(f"Created job {job.id} for employer {job.employer_id}")
            return job
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to create job {job.title}: {str(e)}")
            raise RepositoryException(f"Failed to create job: {str(e)}")

    async def save(self, uow: IUnitOfWork, job: Job) -> Job:
        session = self._session(uow)
        try:
            await self._require_existing(session, JobModel, job.id)
            await session.merge(self._to_model(job))
            await self._flush(session)
            return job
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to update job {job.id}: {str(e)}")
            raise RepositoryException(f"Failed to update job: {str(e)}")

    async def search(
        self, uow: IUnitOfWork, filters: JobSearchFilters, page: int, page_size: int
    ) -> Tuple[List[Job], int]:
        """Newest postings first"""
        try:
            query = select(JobModel)

            if filters.keyword:
                pattern = f"%{filters.keyword}%"
                query = query.where(or_(JobModel.title.ilike(pattern), JobModel.description.ilike(pattern)))
            if filters.employer_id:
                query = query.where(JobModel.employer_id == filters.employer_id)
            if filters.statuses:
                query = query.where(JobModel.status.in_([s.value for s in filters.statuses]))
            if filters.country:
                query = query.where(JobModel.country.ilike(filters.country))
            if filters.location:
                query = query.where(JobModel.location.ilike(f"%{filters.location}%"))
            if filters.job_type:
                query = query.where(JobModel.job_type == filters.job_type.value)
            if filters.work_mode:
                query = query.where(JobModel.work_mode == filters.work_mode.value)
            if filters.experience_level:
                query = query.where(JobModel.experience_level == filters.experience_level.value)

            # Salary filters only match postings that show their salary
            if filters.salary_min is not None:
                top = func.coalesce(JobModel.salary_max, JobModel.salary_min)
                query = query.where(and_(JobModel.is_salary_visible.is_(True), top >= filters.salary_min))
            if filters.salary_max is not None:
                bottom = func.coalesce(JobModel.salary_min, JobModel.salary_max)
                query = query.where(and_(JobModel.is_salary_visible.is_(True), bottom <= filters.salary_max))

            if filters.active_at is not None:
                query = query.where(or_(JobModel.expires_at.is_(None), JobModel.expires_at > filters.active_at))

            models, total = await self._page(
                self._session(uow), query, (JobModel.created_at.desc(), JobModel.id), page, page_size
            )
            return [self._to_entity(m) for m in models], total

        except Exception as e:
            logger.error(f"Failed to search jobs: {str(e)}")
            raise RepositoryException(f"Failed to search jobs: {str(e)}")

    @staticmethod
    def _to_entity(model: JobModel) -> Job:
        """Convert ORM model to domain entity"""
        return Job(
            id=model.id,
            employer_id=model.employer_id,
            title=model.title,
            description=model.description,
            job_type=JobType(model.job_type),
            work_mode=WorkMode(model.work_mode),
            experience_level=ExperienceLevel(model.experience_level),
            status=JobStatus(model.status),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            requirements=model.requirements,
            benefits=model.benefits,
            company_name=model.company_name,
            company_logo_url=model.company_logo_url,
            location=model.location,
            country=model.country,
            salary_min=model.salary_min,
            salary_max=model.salary_max,
            salary_currency=model.salary_currency,
            is_salary_visible=model.is_salary_visible,
            skills_required=tuple(model.skills_required or ()),
            certifications=tuple(model.certifications or ()),
            servicenow_versions=tuple(model.servicenow_versions or ()),
            application_count=model.application_count or 0,
            view_count=model.view_count or 0,
            expires_at=as_utc(model.expires_at),
            status_changed_at=as_utc(model.status_changed_at),
        )

    @staticmethod
    def _to_model(job: Job) -> JobModel:
        """Convert domain entity to ORM model"""
        return JobModel(
            id=job.id,
            employer_id=job.employer_id,
            title=job.title,
            description=job.description,
            requirements=job.requirements,
            benefits=job.benefits,
            company_name=job.company_name,
            company_logo_url=job.company_logo_url,
            location=job.location,
            country=job.country,
            job_type=job.job_type.value,
            work_mode=job.work_mode.value,
            experience_level=job.experience_level.value,
            status=job.status.value,
            salary_min=job.salary_min,
            salary_max=job.salary_max,
            salary_currency=job.salary_currency,
            is_salary_visible=job.is_salary_visible,
            skills_required=list(job.skills_required),
            certifications=list(job.certifications),
            servicenow_versions=list(job.servicenow_versions),
            application_count=job.application_count,
            view_count=job.view_count,
            expires_at=job.expires_at,
            status_changed_at=job.status_changed_at,
            created_at=job.created_at,
            updated_at=job.updated_at,
        )

"""
Profile Repository Implementations
Candidate and employer profiles, keyed by owning user
"""
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import or_, select
from loguru import logger

from core.clock import as_utc
from core.exceptions import DomainException, RepositoryException
from domain.entities import CandidateProfile, EmployerProfile
from domain.enums import AvailabilityStatus, CandidateLevel
from application.repositories.interfaces import (
    CandidateSearchFilters,
    ICandidateProfileRepository,
    IEmployerProfileRepository,
    IUnitOfWork,
)
from infrastructure.persistence.models.profile import CandidateProfileModel, EmployerProfileModel
from .base import SQLAlchemyRepository


class SQLAlchemyCandidateProfileRepository(SQLAlchemyRepository, ICandidateProfileRepository):
    """SQLAlchemy implementation of the candidate profile repository"""

    resource_type = "CandidateProfile"

    async def get_by_id(self, uow: IUnitOfWork, profile_id: UUID) -> Optional[CandidateProfile]:
        try:
            result = await self._session(uow).execute(
                select(CandidateProfileModel).where(CandidateProfileModel.id == profile_id)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None
        except Exception as e:
            logger.error(f"Failed to get candidate profile {profile_id}: {str(e)}")
            raise RepositoryException(f"Failed to get candidate profile: {str(e)}")

    async def get_by_user_id(self, uow: IUnitOfWork, user_id: UUID) -> Optional[CandidateProfile]:
        try:
            result = await self._session(uow).execute(
                select(CandidateProfileModel).where(CandidateProfileModel.user_id == user_id)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None
        except Exception as e:
            logger.error(f"Failed to get candidate profile for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get candidate profile: {str(e)}")

    async def get_many(self, uow: IUnitOfWork, profile_ids: Sequence[UUID]) -> List[CandidateProfile]:
        if not profile_ids:
            return []
        try:
            result = await self._session(uow).execute(
                select(CandidateProfileModel).where(CandidateProfileModel.id.in_(list(profile_ids)))
            )
            return [self._to_entity(m) for m in result.scalars().all()]
        except Exception as e:
            logger.error(f"Failed to get {len(profile_ids)} candidate profiles: {str(e)}")
            raise RepositoryException(f"Failed to get candidate profiles: {str(e)}")

    async def add(self, uow: IUnitOfWork, profile: CandidateProfile) -> CandidateProfile:
        session = self._session(uow)
        try:
            session.add(self._to_model(profile))
            await self._flush(session)
            logger.info(f"Created candidate profile {profile.id} for user {profile.user_id}")
            return profile
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to create candidate profile: {str(e)}")
            raise RepositoryException(f"Failed to create candidate profile: {str(e)}")

    async def save(self, uow: IUnitOfWork, profile: CandidateProfile) -> CandidateProfile:
        session = self._session(uow)
        try:
            await self._require_existing(session, CandidateProfileModel, profile.id)
            await session.merge(self._to_model(profile))
            await self._flush(session)
            return profile
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to update candidate profile {profile.id}: {str(e)}")
            raise RepositoryException(f"Failed to update candidate profile: {str(e)}")

    async def search(
        self, uow: IUnitOfWork, filters: CandidateSearchFilters, page: int, page_size: int
    ) -> Tuple[List[CandidateProfile], int]:
        """Most recently updated profiles first"""
        try:
            query = select(CandidateProfileModel)
            if filters.public_only:
                query = query.where(CandidateProfileModel.is_public.is_(True))
            if filters.keyword:
                pattern = f"%{filters.keyword}%"
                query = query.where(or_(
                    CandidateProfileModel.headline.ilike(pattern),
                    CandidateProfileModel.bio.ilike(pattern),
                    CandidateProfileModel.current_role.ilike(pattern),
                    CandidateProfileModel.desired_role.ilike(pattern),
                ))
            if filters.country:
                query = query.where(CandidateProfileModel.country.ilike(filters.country))
            if filters.experience_level:
                query = query.where(CandidateProfileModel.experience_level == filters.experience_level.value)
            if filters.min_years_of_experience is not None:
                query = query.where(CandidateProfileModel.years_of_experience >= filters.min_years_of_experience)
            if filters.open_to_remote is not None:
                query = query.where(CandidateProfileModel.open_to_remote.is_(filters.open_to_remote))
            if filters.availability:
                query = query.where(CandidateProfileModel.availability == filters.availability.value)

            models, total = await self._page(
                self._session(uow),
                query,
                (CandidateProfileModel.updated_at.desc(), CandidateProfileModel.id),
                page,
                page_size,
            )
            return [self._to_entity(m) for m in models], total
        except Exception as e:
            logger.error(f"Failed to search candidate profiles: {str(e)}")
            raise RepositoryException(f"Failed to search candidate profiles: {str(e)}")

    @staticmethod
    def _to_entity(model: CandidateProfileModel) -> CandidateProfile:
        return CandidateProfile(
            id=model.id,
            user_id=model.user_id,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            headline=model.headline,
            bio=model.bio,
            experience_level=CandidateLevel(model.experience_level),
            years_of_experience=model.years_of_experience or 0,
            availability=AvailabilityStatus(model.availability),
            current_role=model.current_role,
            desired_role=model.desired_role,
            location=model.location,
            country=model.country,
            time_zone=model.time_zone,
            profile_picture_url=model.profile_picture_url,
            cv_url=model.cv_url,
            linkedin_url=model.linkedin_url,
            github_url=model.github_url,
            website_url=model.website_url,
            is_public=model.is_public,
            desired_salary_min=model.desired_salary_min,
            desired_salary_max=model.desired_salary_max,
            salary_currency=model.salary_currency,
            open_to_remote=model.open_to_remote,
            open_to_relocation=model.open_to_relocation,
            skills=tuple(model.skills or ()),
            certifications=tuple(model.certifications or ()),
            servicenow_versions=tuple(model.servicenow_versions or ()),
            profile_completeness=model.profile_completeness or 0,
        )

    @staticmethod
    def _to_model(profile: CandidateProfile) -> CandidateProfileModel:
        return CandidateProfileModel(
            id=profile.id,
            user_id=profile.user_id,
            headline=profile.headline,
            bio=profile.bio,
            experience_level=profile.experience_level.value,
            years_of_experience=profile.years_of_experience,
            availability=profile.availability.value,
            current_role=profile.current_role,
            desired_role=profile.desired_role,
            location=profile.location,
            country=profile.country,
            time_zone=profile.time_zone,
            profile_picture_url=profile.profile_picture_url,
            cv_url=profile.cv_url,
            linkedin_url=profile.linkedin_url,
            github_url=profile.github_url,
            website_url=profile.website_url,
            is_public=profile.is_public,
            desired_salary_min=profile.desired_salary_min,
            desired_salary_max=profile.desired_salary_max,
            salary_currency=profile.salary_currency,
            open_to_remote=profile.open_to_remote,
            open_to_relocation=profile.open_to_relocation,
            skills=list(profile.skills),
            certifications=list(profile.certifications),
            servicenow_versions=list(profile.servicenow_versions),
            profile_completeness=profile.profile_completeness,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class SQLAlchemyEmployerProfileRepository(SQLAlchemyRepository, IEmployerProfileRepository):
    """SQLAlchemy implementation of the employer profile repository"""

    resource_type = "EmployerProfile"

    async def get_by_user_id(self, uow: IUnitOfWork, user_id: UUID) -> Optional[EmployerProfile]:
        try:
            result = await self._session(uow).execute(
                select(EmployerProfileModel).where(EmployerProfileModel.user_id == user_id)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None
        except Exception as e:
            logger.error(f"Failed to get employer profile for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get employer profile: {str(e)}")

    async def add(self, uow: IUnitOfWork, profile: EmployerProfile) -> EmployerProfile:
        session = self._session(uow)
        try:
            session.add(self._to_model(profile))
            await self._flush(session)
            logger.info(f"Created employer profile {profile.id} for user {profile.user_id}")
            return profile
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to create employer profile: {str(e)}")
            raise RepositoryException(f"Failed to create employer profile: {str(e)}")

    async def save(self, uow: IUnitOfWork, profile: EmployerProfile) -> EmployerProfile:
        session = self._session(uow)
        try:
            await self._require_existing(session, EmployerProfileModel, profile.id)
            await session.merge(self._to_model(profile))
            await self._flush(session)
            return profile
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to update employer profile {profile.id}: {str(e)}")
            raise RepositoryException(f"Failed to update employer profile: {str(e)}")

    @staticmethod
    def _to_entity(model: EmployerProfileModel) -> EmployerProfile:
        return EmployerProfile(
            id=model.id,
            user_id=model.user_id,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            company_name=model.company_name,
            company_description=model.company_description,
            industry=model.industry,
            company_size=model.company_size,
            headquarters_city=model.headquarters_city,
            headquarters_country=model.headquarters_country,
            website_url=model.website_url,
            linkedin_url=model.linkedin_url,
            logo_url=model.logo_url,
            is_verified=model.is_verified,
        )

    @staticmethod
    def _to_model(profile: EmployerProfile) -> EmployerProfileModel:
        return EmployerProfileModel(
            id=profile.id,
            user_id=profile.user_id,
            company_name=profile.company_name,
            company_description=profile.company_description,
            industry=profile.industry,
            company_size=profile.company_size,
            headquarters_city=profile.headquarters_city,
            headquarters_country=profile.headquarters_country,
            website_url=profile.website_url,
            linkedin_url=profile.linkedin_url,
            logo_url=profile.logo_url,
            is_verified=profile.is_verified,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )

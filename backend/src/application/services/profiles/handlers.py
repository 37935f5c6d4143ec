"""
Profile Handlers
Candidate and employer profiles, with picture, CV and logo uploads
"""
from dataclasses import replace
from uuid import uuid4

from loguru import logger

from core.clock import utc_now
from core.pagination import Page
from core.result import Result, Ok, access_denied, not_found
from application.dispatcher import Dispatcher
from application.identity import CallerIdentity, require_authenticated
from application.repositories.interfaces import (
    CandidateSearchFilters,
    ICandidateProfileRepository,
    IEmployerProfileRepository,
    IUnitOfWork,
    IUserRepository,
)
from application.services.files.interfaces import IFileStorageService
from application.services.files.uploads import FileUpload
from domain.entities import CandidateProfile, EmployerProfile
from domain.enums import UserRole
from .commands import (
    GetMyCandidateProfile,
    UpsertCandidateProfile,
    GetCandidateProfile,
    SearchCandidates,
    UploadProfilePicture,
    UploadCv,
    GetMyEmployerProfile,
    UpsertEmployerProfile,
    GetEmployerProfile,
    UploadCompanyLogo,
    VerifyEmployerProfile,
)
from .dtos import CandidateProfileDto, EmployerProfileDto, UploadedFileDto


# Candidate fields that may not be cleared by an upsert
_REQUIRED_CANDIDATE_FIELDS = frozenset({
    "experience_level", "years_of_experience", "availability", "is_public", "salary_currency",
    "open_to_remote", "open_to_relocation", "skills", "certifications", "servicenow_versions",
})


class ProfileHandlers:
    """Handlers for the profiles area"""

    def __init__(
        self,
        candidate_repository: ICandidateProfileRepository,
        employer_repository: IEmployerProfileRepository,
        user_repository: IUserRepository,
        file_storage: IFileStorageService,
    ):
        self.candidate_repo = candidate_repository
        self.employer_repo = employer_repository
        self.user_repo = user_repository
        self.file_storage = file_storage

    def register(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(GetMyCandidateProfile, self.my_candidate_profile)
        dispatcher.register(UpsertCandidateProfile, self.upsert_candidate_profile)
        dispatcher.register(GetCandidateProfile, self.get_candidate_profile)
        dispatcher.register(SearchCandidates, self.search_candidates)
        dispatcher.register(UploadProfilePicture, self.upload_profile_picture)
        dispatcher.register(UploadCv, self.upload_cv)
        dispatcher.register(GetMyEmployerProfile, self.my_employer_profile)
        dispatcher.register(UpsertEmployerProfile, self.upsert_employer_profile)
        dispatcher.register(GetEmployerProfile, self.get_employer_profile)
        dispatcher.register(UploadCompanyLogo, self.upload_company_logo)
        dispatcher.register(VerifyEmployerProfile, self.verify_employer_profile)

    # ------------------------------------------------------------------
    # Candidate
    # ------------------------------------------------------------------

    async def my_candidate_profile(
        self, request: GetMyCandidateProfile, caller: CallerIdentity, uow: IUnitOfWork
    ) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        profile = await self.candidate_repo.get_by_user_id(uow, caller.user_id)
        if profile is None:
            return not_found("CandidateProfile", caller.user_id)
        return Ok(CandidateProfileDto.from_entity(profile))

    async def upsert_candidate_profile(
        self, request: UpsertCandidateProfile, caller: CallerIdentity, uow: IUnitOfWork
    ) -> Result:
        denied = self._require_candidate(caller)
        if denied:
            return denied

        changes = {
            k: v for k, v in request.changes().items()
            if not (v is None and k in _REQUIRED_CANDIDATE_FIELDS)
        }
        profile, created = await self._candidate_profile(caller, uow)
        profile = profile.update(now=utc_now(), **changes)
        profile = await self._store_candidate(uow, profile, created)
        logger.info(f"Candidate profile {'created' if created else 'updated'} for user {caller.user_id}")
        return Ok(CandidateProfileDto.from_entity(profile))

    async def get_candidate_profile(
        self, request: GetCandidateProfile, caller: CallerIdentity, uow: IUnitOfWork
    ) -> Result:
        profile = await self.candidate_repo.get_by_user_id(uow, request.user_id)
        # Private profiles are indistinguishable from missing ones
        if profile is None or not profile.is_visible_to(caller.user_id, caller.is_admin):
            return not_found("CandidateProfile", request.user_id)
        return Ok(CandidateProfileDto.from_entity(profile))

    async def search_candidates(self, request: SearchCandidates, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        filters = CandidateSearchFilters(
            keyword=request.keyword or None,
            country=request.country or None,
            experience_level=request.experience_level,
            min_years_of_experience=request.min_years_of_experience,
            open_to_remote=request.open_to_remote,
            availability=request.availability,
            public_only=True,
        )
        items, total = await self.candidate_repo.search(uow, filters, request.page, request.page_size)
        return Ok(Page([CandidateProfileDto.from_entity(p) for p in items], total, request.page, request.page_size))

    async def upload_profile_picture(
        self, request: UploadProfilePicture, caller: CallerIdentity, uow: IUnitOfWork
    ) -> Result:
        denied = self._require_candidate(caller)
        if denied:
            return denied

        url = await self._store_file(request, f"profile-pictures/{caller.user_id}")
        profile, created = await self._candidate_profile(caller, uow)
        profile = profile.update(now=utc_now(), profile_picture_url=url)
        await self._store_candidate(uow, profile, created)

        user = await self.user_repo.get_by_id(uow, caller.user_id)
        if user is not None:
            await self.user_repo.save(uow, replace(user, profile_picture_url=url, updated_at=utc_now()))

        return Ok(UploadedFileDto(url=url, file_name=request.safe_name, size_bytes=request.size_bytes))

    async def upload_cv(self, request: UploadCv, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = self._require_candidate(caller)
        if denied:
            return denied

        url = await self._store_file(request, f"cvs/{caller.user_id}")
        profile, created = await self._candidate_profile(caller, uow)
        profile = profile.update(now=utc_now(), cv_url=url)
        await self._store_candidate(uow, profile, created)
        return Ok(UploadedFileDto(url=url, file_name=request.safe_name, size_bytes=request.size_bytes))

    # ------------------------------------------------------------------
    # Employer
    # ------------------------------------------------------------------

    async def my_employer_profile(
        self, request: GetMyEmployerProfile, caller: CallerIdentity, uow: IUnitOfWork
    ) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        profile = await self.employer_repo.get_by_user_id(uow, caller.user_id)
        if profile is None:
            return not_found("EmployerProfile", caller.user_id)
        return Ok(EmployerProfileDto.from_entity(profile))

    async def upsert_employer_profile(
        self, request: UpsertEmployerProfile, caller: CallerIdentity, uow: IUnitOfWork
    ) -> Result:
        denied = self._require_employer(caller)
        if denied:
            return denied

        profile, created = await self._employer_profile(caller, uow)
        profile = profile.update(now=utc_now(), **request.changes())
        profile = await self._store_employer(uow, profile, created)
        logger.info(f"Employer profile {'created' if created else 'updated'} for user {caller.user_id}")
        return Ok(EmployerProfileDto.from_entity(profile))

    async def get_employer_profile(
        self, request: GetEmployerProfile, caller: CallerIdentity, uow: IUnitOfWork
    ) -> Result:
        profile = await self.employer_repo.get_by_user_id(uow, request.user_id)
        if profile is None:
            return not_found("EmployerProfile", request.user_id)
        return Ok(EmployerProfileDto.from_entity(profile))

    async def upload_company_logo(
        self, request: UploadCompanyLogo, caller: CallerIdentity, uow: IUnitOfWork
    ) -> Result:
        denied = self._require_employer(caller)
        if denied:
            return denied

        url = await self._store_file(request, f"company-logos/{caller.user_id}")
        profile, created = await self._employer_profile(caller, uow)
        await self._store_employer(uow, profile.update(now=utc_now(), logo_url=url), created)
        return Ok(UploadedFileDto(url=url, file_name=request.safe_name, size_bytes=request.size_bytes))

    async def verify_employer_profile(
        self, request: VerifyEmployerProfile, caller: CallerIdentity, uow: IUnitOfWork
    ) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        if not caller.is_admin:
            return access_denied("Only administrators can verify employers.")
        profile = await self.employer_repo.get_by_user_id(uow, request.user_id)
        if profile is None:
            return not_found("EmployerProfile", request.user_id)

        profile = await self.employer_repo.save(uow, profile.update(now=utc_now(), is_verified=True))
        logger.info(f"Employer profile {profile.id} verified by {caller.user_id}")
        return Ok(EmployerProfileDto.from_entity(profile))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_candidate(caller: CallerIdentity):
        denied = require_authenticated(caller)
        if denied:
            return denied
        if not caller.has_role(UserRole.CANDIDATE):
            return access_denied("Only candidates have a candidate profile.")
        return None

    @staticmethod
    def _require_employer(caller: CallerIdentity):
        denied = require_authenticated(caller)
        if denied:
            return denied
        if not caller.is_employer:
            return access_denied("Only employers have an employer profile.")
        return None

    async def _candidate_profile(self, caller: CallerIdentity, uow: IUnitOfWork):
        profile = await self.candidate_repo.get_by_user_id(uow, caller.user_id)
        if profile is None:
            return CandidateProfile.create(caller.user_id), True
        return profile, False

    async def _store_candidate(self, uow: IUnitOfWork, profile: CandidateProfile, created: bool) -> CandidateProfile:
        if created:
            return await self.candidate_repo.add(uow, profile)
        return await self.candidate_repo.save(uow, profile)

    async def _employer_profile(self, caller: CallerIdentity, uow: IUnitOfWork):
        profile = await self.employer_repo.get_by_user_id(uow, caller.user_id)
        if profile is None:
            return EmployerProfile.create(caller.user_id), True
        return profile, False

    async def _store_employer(self, uow: IUnitOfWork, profile: EmployerProfile, created: bool) -> EmployerProfile:
        if created:
            return await self.employer_repo.add(uow, profile)
        return await self.employer_repo.save(uow, profile)

    async def _store_file(self, upload: FileUpload, folder: str) -> str:
        path = f"{folder}/{uuid4().hex}{upload.extension}"
        url = await self.file_storage.save(path, upload.content)
        logger.info(f"Stored {upload.safe_name} ({upload.size_bytes} bytes) at {path}")
        return url

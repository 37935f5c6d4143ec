"""
Repository Interfaces (Abstract Base Classes)
Define contracts for data access without implementation details
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from domain.entities import (
    CandidateProfile,
    CvParseResult,
    EmbeddingRecord,
    EmployerProfile,
    EnhancementResult,
    Job,
    JobApplication,
    Notification,
    UserAccount,
)
from domain.enums import (
    AccountStatus,
    AvailabilityStatus,
    CandidateLevel,
    DocumentType,
    ExperienceLevel,
    JobType,
    WorkMode,
)
from domain.value_objects import ApplicationStatus, JobStatus


class IUnitOfWork(ABC):
    """One transaction spanning every repository call of a request"""

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass


# ----------------------------------------------------------------------
# Search filters
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class UserSearchFilters:
    search: Optional[str] = None
    status: Optional[AccountStatus] = None


@dataclass(frozen=True)
class JobSearchFilters:
    keyword: Optional[str] = None
    employer_id: Optional[UUID] = None
    statuses: Tuple[JobStatus, ...] = ()
    country: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    work_mode: Optional[WorkMode] = None
    experience_level: Optional[ExperienceLevel] = None
    salary_min: Optional[Decimal] = None
    salary_max: Optional[Decimal] = None
    # Excludes postings whose expires_at has passed
    active_at: Optional[datetime] = None


@dataclass(frozen=True)
class ApplicationSearchFilters:
    candidate_id: Optional[UUID] = None
    job_id: Optional[UUID] = None
    status: Optional[ApplicationStatus] = None


@dataclass(frozen=True)
class NotificationSearchFilters:
    user_id: UUID
    unread_only: bool = False


@dataclass(frozen=True)
class CandidateSearchFilters:
    keyword: Optional[str] = None
    country: Optional[str] = None
    experience_level: Optional[CandidateLevel] = None
    min_years_of_experience: Optional[int] = None
    open_to_remote: Optional[bool] = None
    availability: Optional[AvailabilityStatus] = None
    public_only: bool = True


@dataclass(frozen=True)
class CvParseResultSearchFilters:
    user_id: UUID


@dataclass(frozen=True)
class EnhancementSearchFilters:
    requested_by: UUID
    job_id: Optional[UUID] = None


# ----------------------------------------------------------------------
# Repositories
# ----------------------------------------------------------------------

class IUserRepository(ABC):
    """User account repository interface"""

    @abstractmethod
    async def get_by_id(self, uow: IUnitOfWork, user_id: UUID) -> Optional[UserAccount]:
        pass

    @abstractmethod
    async def get_by_email(self, uow: IUnitOfWork, email: str) -> Optional[UserAccount]:
        pass

    @abstractmethod
    async def exists_by_email(self, uow: IUnitOfWork, email: str) -> bool:
        pass

    @abstractmethod
    async def get_by_refresh_token(self, uow: IUnitOfWork, token_hash: str) -> Optional[UserAccount]:
        """Owner of a refresh token digest, whatever the token's state"""
        pass

    @abstractmethod
    async def get_by_verification_token(self, uow: IUnitOfWork, token_hash: str) -> Optional[UserAccount]:
        pass

    @abstractmethod
    async def get_by_password_reset_token(self, uow: IUnitOfWork, token_hash: str) -> Optional[UserAccount]:
        pass

    @abstractmethod
    async def add(self, uow: IUnitOfWork, user: UserAccount) -> UserAccount:
        pass

    @abstractmethod
    async def save(self, uow: IUnitOfWork, user: UserAccount) -> UserAccount:
        pass

    @abstractmethod
    async def search(
        self, uow: IUnitOfWork, filters: UserSearchFilters, page: int, page_size: int
    ) -> Tuple[List[UserAccount], int]:
        pass


class IJobRepository(ABC):
    """Job posting repository interface"""

    @abstractmethod
    async def get_by_id(self, uow: IUnitOfWork, job_id: UUID) -> Optional[Job]:
        pass

    @abstractmethod
    async def get_many(self, uow: IUnitOfWork, job_ids: Sequence[UUID]) -> List[Job]:
        pass

    @abstractmethod
    async def add(self, uow: IUnitOfWork, job: Job) -> Job:
        pass

    @abstractmethod
    async def save(self, uow: IUnitOfWork, job: Job) -> Job:
        pass

    @abstractmethod
    async def search(
        self, uow: IUnitOfWork, filters: JobSearchFilters, page: int, page_size: int
    ) -> Tuple[List[Job], int]:
        """Most recently created first"""
        pass


class IApplicationRepository(ABC):
    """Job application repository interface"""

    @abstractmethod
    async def get_by_id(self, uow: IUnitOfWork, application_id: UUID) -> Optional[JobApplication]:
        pass

    @abstractmethod
    async def exists(self, uow: IUnitOfWork, job_id: UUID, candidate_id: UUID) -> bool:
        pass

    @abstractmethod
    async def count_since(self, uow: IUnitOfWork, candidate_id: UUID, since: datetime) -> int:
        """Applications submitted by a candidate at or after since"""
        pass

    @abstractmethod
    async def add(self, uow: IUnitOfWork, application: JobApplication) -> JobApplication:
        pass

    @abstractmethod
    async def save(self, uow: IUnitOfWork, application: JobApplication) -> JobApplication:
        pass

    @abstractmethod
    async def search(
        self, uow: IUnitOfWork, filters: ApplicationSearchFilters, page: int, page_size: int
    ) -> Tuple[List[JobApplication], int]:
        """Most recently applied first"""
        pass


class INotificationRepository(ABC):
    """Notification repository interface"""

    @abstractmethod
    async def get_by_id(self, uow: IUnitOfWork, notification_id: UUID) -> Optional[Notification]:
        pass

    @abstractmethod
    async def add(self, uow: IUnitOfWork, notification: Notification) -> Notification:
        pass

    @abstractmethod
    async def save(self, uow: IUnitOfWork, notification: Notification) -> Notification:
        pass

    @abstractmethod
    async def search(
        self, uow: IUnitOfWork, filters: NotificationSearchFilters, page: int, page_size: int
    ) -> Tuple[List[Notification], int]:
        pass

    @abstractmethod
    async def count_unread(self, uow: IUnitOfWork, user_id: UUID) -> int:
        pass

    @abstractmethod
    async def mark_all_as_read(self, uow: IUnitOfWork, user_id: UUID, read_at: datetime) -> int:
        """Returns how many notifications changed"""
        pass


class ICandidateProfileRepository(ABC):
    """Candidate profile repository interface"""

    @abstractmethod
    async def get_by_id(self, uow: IUnitOfWork, profile_id: UUID) -> Optional[CandidateProfile]:
        pass

    @abstractmethod
    async def get_by_user_id(self, uow: IUnitOfWork, user_id: UUID) -> Optional[CandidateProfile]:
        pass

    @abstractmethod
    async def get_many(self, uow: IUnitOfWork, profile_ids: Sequence[UUID]) -> List[CandidateProfile]:
        pass

    @abstractmethod
    async def add(self, uow: IUnitOfWork, profile: CandidateProfile) -> CandidateProfile:
        pass

    @abstractmethod
    async def save(self, uow: IUnitOfWork, profile: CandidateProfile) -> CandidateProfile:
        pass

    @abstractmethod
    async def search(
        self, uow: IUnitOfWork, filters: CandidateSearchFilters, page: int, page_size: int
    ) -> Tuple[List[CandidateProfile], int]:
        """Most recently updated first"""
        pass


class IEmployerProfileRepository(ABC):
    """Employer profile repository interface"""

    @abstractmethod
    async def get_by_user_id(self, uow: IUnitOfWork, user_id: UUID) -> Optional[EmployerProfile]:
        pass

    @abstractmethod
    async def add(self, uow: IUnitOfWork, profile: EmployerProfile) -> EmployerProfile:
        pass

    @abstractmethod
    async def save(self, uow: IUnitOfWork, profile: EmployerProfile) -> EmployerProfile:
        pass


class ICvParseResultRepository(ABC):
    """CV parse result repository interface"""

    @abstractmethod
    async def get_by_id(self, uow: IUnitOfWork, result_id: UUID) -> Optional[CvParseResult]:
        pass

    @abstractmethod
    async def add(self, uow: IUnitOfWork, result: CvParseResult) -> CvParseResult:
        pass

    @abstractmethod
    async def save(self, uow: IUnitOfWork, result: CvParseResult) -> CvParseResult:
        pass

    @abstractmethod
    async def search(
        self, uow: IUnitOfWork, filters: CvParseResultSearchFilters, page: int, page_size: int
    ) -> Tuple[List[CvParseResult], int]:
        pass


class IEnhancementRepository(ABC):
    """Job enhancement repository interface"""

    @abstractmethod
    async def get_by_id(self, uow: IUnitOfWork, enhancement_id: UUID) -> Optional[EnhancementResult]:
        pass

    @abstractmethod
    async def add(self, uow: IUnitOfWork, enhancement: EnhancementResult) -> EnhancementResult:
        pass

    @abstractmethod
    async def save(self, uow: IUnitOfWork, enhancement: EnhancementResult) -> EnhancementResult:
        pass

    @abstractmethod
    async def search(
        self, uow: IUnitOfWork, filters: EnhancementSearchFilters, page: int, page_size: int
    ) -> Tuple[List[EnhancementResult], int]:
        pass


class IEmbeddingRepository(ABC):
    """Embedding record repository interface"""

    @abstractmethod
    async def get_by_document(
        self, uow: IUnitOfWork, document_id: UUID, document_type: DocumentType
    ) -> Optional[EmbeddingRecord]:
        pass

    @abstractmethod
    async def add(self, uow: IUnitOfWork, record: EmbeddingRecord) -> EmbeddingRecord:
        pass

    @abstractmethod
    async def save(self, uow: IUnitOfWork, record: EmbeddingRecord) -> EmbeddingRecord:
        pass

    @abstractmethod
    async def list_indexed(self, uow: IUnitOfWork, document_type: DocumentType) -> List[EmbeddingRecord]:
        """Every indexed record of a document type"""
        pass

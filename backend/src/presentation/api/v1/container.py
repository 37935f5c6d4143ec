"""
Dependency Injection Container
Manages service instances and the request dispatcher
"""
from typing import Optional

from application.dispatcher import Dispatcher, UnitOfWorkFactory
from application.services.applications.handlers import ApplicationHandlers
from application.services.applications.interfaces import ISubscriptionService
from application.services.auth.handlers import AuthHandlers
from application.services.auth.interfaces import IEmailSender, IJwtService, IPasswordHasher
from application.services.cv_parser.handlers import CvParserHandlers
from application.services.cv_parser.interfaces import ICvExtractor
from application.services.enhancer.handlers import EnhancerHandlers
from application.services.enhancer.interfaces import IJobEnhancer
from application.services.files.interfaces import IFileStorageService
from application.services.jobs.handlers import JobHandlers
from application.services.matching.handlers import MatchingHandlers
from application.services.matching.interfaces import IEmbeddingService
from application.services.notifications.handlers import NotificationHandlers
from application.services.profiles.handlers import ProfileHandlers
from application.services.users.handlers import UserHandlers
from infrastructure.external.file_storage_service import LocalFileStorageService
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository
from infrastructure.persistence.repositories.cv_parse_result import SQLAlchemyCvParseResultRepository
from infrastructure.persistence.repositories.embedding import SQLAlchemyEmbeddingRepository
from infrastructure.persistence.repositories.enhancement import SQLAlchemyEnhancementRepository
from infrastructure.persistence.repositories.job import SQLAlchemyJobRepository
from infrastructure.persistence.repositories.notification import SQLAlchemyNotificationRepository
from infrastructure.persistence.repositories.profile import (
    SQLAlchemyCandidateProfileRepository,
    SQLAlchemyEmployerProfileRepository,
)
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.persistence.unit_of_work import SQLAlchemyUnitOfWork
from infrastructure.security.jwt_service import JwtService
from infrastructure.security.password_hasher import BcryptPasswordHasher
from infrastructure.services.cv_parser import HeuristicCvExtractor
from infrastructure.services.email_sender import LoggingEmailSender
from infrastructure.services.embeddings import create_embedding_service
from infrastructure.services.job_enhancer import create_job_enhancer
from infrastructure.services.subscription_service import StaticSubscriptionService


# Singleton instances
_password_hasher: IPasswordHasher | None = None
_jwt_service: IJwtService | None = None
_file_storage: IFileStorageService | None = None
_cv_extractor: ICvExtractor | None = None
_job_enhancer: IJobEnhancer | None = None
_embedding_service: IEmbeddingService | None = None
_subscription_service: ISubscriptionService | None = None
_email_sender: IEmailSender | None = None
_dispatcher: Dispatcher | None = None


def get_password_hasher() -> IPasswordHasher:
    """Get password hasher instance (singleton)"""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = BcryptPasswordHasher()
    return _password_hasher


def get_jwt_service() -> IJwtService:
    """Get JWT service instance (singleton)"""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JwtService()
    return _jwt_service


def get_file_storage() -> IFileStorageService:
    global _file_storage
    if _file_storage is None:
        _file_storage = LocalFileStorageService()
    return _file_storage


def get_cv_extractor() -> ICvExtractor:
    global _cv_extractor
    if _cv_extractor is None:
        _cv_extractor = HeuristicCvExtractor()
    return _cv_extractor


def get_job_enhancer() -> IJobEnhancer:
    global _job_enhancer
    if _job_enhancer is None:
        _job_enhancer = create_job_enhancer()
    return _job_enhancer


def get_embedding_service() -> IEmbeddingService:
    """Get embedding service instance (singleton; the model loads once)"""
    global _embedding_service
    if _embedding_service is None:
        _embedding_service = create_embedding_service()
    return _embedding_service


def get_subscription_service() -> ISubscriptionService:
    global _subscription_service
    if _subscription_service is None:
        _subscription_service = StaticSubscriptionService()
    return _subscription_service


def get_email_sender() -> IEmailSender:
    global _email_sender
    if _email_sender is None:
        _email_sender = LoggingEmailSender()
    return _email_sender


def build_dispatcher(
    uow_factory: UnitOfWorkFactory = SQLAlchemyUnitOfWork,
    *,
    password_hasher: Optional[IPasswordHasher] = None,
    jwt_service: Optional[IJwtService] = None,
    file_storage: Optional[IFileStorageService] = None,
    cv_extractor: Optional[ICvExtractor] = None,
    job_enhancer: Optional[IJobEnhancer] = None,
    embedding_service: Optional[IEmbeddingService] = None,
    subscription_service: Optional[ISubscriptionService] = None,
    email_sender: Optional[IEmailSender] = None,
) -> Dispatcher:
    """
    Wire every handler area against the SQLAlchemy repositories.

    Collaborators default to the process-wide singletons; tests pass their own.
    """
    users = SQLAlchemyUserRepository()
    jobs = SQLAlchemyJobRepository()
    applications = SQLAlchemyApplicationRepository()
    notifications = SQLAlchemyNotificationRepository()
    candidates = SQLAlchemyCandidateProfileRepository()
    employers = SQLAlchemyEmployerProfileRepository()
    parse_results = SQLAlchemyCvParseResultRepository()
    enhancements = SQLAlchemyEnhancementRepository()
    embeddings = SQLAlchemyEmbeddingRepository()

    storage = file_storage or get_file_storage()

    dispatcher = Dispatcher(uow_factory)
    AuthHandlers(
        users,
        password_hasher or get_password_hasher(),
        jwt_service or get_jwt_service(),
        email_sender or get_email_sender(),
    ).register(dispatcher)
    UserHandlers(users).register(dispatcher)
    JobHandlers(jobs).register(dispatcher)
    ApplicationHandlers(
        applications, jobs, notifications, subscription_service or get_subscription_service()
    ).register(dispatcher)
    NotificationHandlers(notifications, users).register(dispatcher)
    ProfileHandlers(candidates, employers, users, storage).register(dispatcher)
    CvParserHandlers(parse_results, candidates, storage, cv_extractor or get_cv_extractor()).register(dispatcher)
    EnhancerHandlers(enhancements, jobs, job_enhancer or get_job_enhancer()).register(dispatcher)
    MatchingHandlers(embeddings, jobs, candidates, embedding_service or get_embedding_service()).register(dispatcher)
    return dispatcher


def get_dispatcher() -> Dispatcher:
    """Get the application dispatcher (singleton)"""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = build_dispatcher()
    return _dispatcher


def set_dispatcher(dispatcher: Optional[Dispatcher]) -> None:
    """Replace the dispatcher singleton (None resets it)"""
    global _dispatcher
    _dispatcher = dispatcher

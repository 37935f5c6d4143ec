"""
Shared test fixtures
In-memory SQLite for repositories, a file-backed SQLite database for the HTTP app
"""
import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="jobboard-tests-")

# Settings are read at import time, so these must be set before any app module loads
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'app.db')}")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_TEST_DIR, "uploads"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("OPENROUTER_API_KEY", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("DEBUG", "false")

import pytest
from uuid import uuid4
from unittest.mock import AsyncMock

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from application.identity import CallerIdentity
from core.database import Base
from domain.entities import Job
from domain.enums import ExperienceLevel, JobType, UserRole, WorkMode
from infrastructure.persistence.unit_of_work import SQLAlchemyUnitOfWork


@pytest.fixture
async def engine():
    import infrastructure.persistence.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def uow_factory(session_factory):
    return lambda: SQLAlchemyUnitOfWork(session_factory)


@pytest.fixture
def mock_uow():
    """Stand-in unit of work for handler tests"""
    return AsyncMock()


def caller_with(*roles: UserRole) -> CallerIdentity:
    return CallerIdentity.authenticated(uuid4(), [r.value for r in roles])


@pytest.fixture
def candidate() -> CallerIdentity:
    return caller_with(UserRole.CANDIDATE)


@pytest.fixture
def employer() -> CallerIdentity:
    return caller_with(UserRole.EMPLOYER)


@pytest.fixture
def admin() -> CallerIdentity:
    return caller_with(UserRole.SUPER_ADMIN)


def make_job(employer_id=None, publish=True, **overrides) -> Job:
    fields = dict(
        employer_id=employer_id or uuid4(),
        title="ServiceNow Developer",
        description="Build ITSM workflows on the Now Platform using Flow Designer and Glide.",
        job_type=JobType.FULL_TIME,
        work_mode=WorkMode.REMOTE,
        experience_level=ExperienceLevel.SENIOR,
        skills_required=("ITSM", "Flow Designer"),
    )
    fields.update(overrides)
    job = Job.create(**fields)
    if publish:
        job = job.publish().value
    return job

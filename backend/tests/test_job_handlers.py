"""
Tests for the job posting handlers
"""
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from application.identity import CallerIdentity
from application.services.jobs.commands import CloseJob, CreateJob, GetJob, PublishJob
from application.services.jobs.handlers import JobHandlers
from core.result import ErrorKind
from domain.enums import ExperienceLevel, JobType, WorkMode

from conftest import make_job


def _echo(uow, entity):
    return entity


@pytest.fixture
def job_repo():
    repo = AsyncMock()
    repo.add.side_effect = _echo
    repo.save.side_effect = _echo
    return repo


@pytest.fixture
def handlers(job_repo):
    return JobHandlers(job_repo)


def _create_request(**overrides) -> CreateJob:
    fields = dict(
        title="ITOM Engineer",
        description="Discovery and Service Mapping across hybrid estates.",
        job_type=JobType.CONTRACT,
        work_mode=WorkMode.HYBRID,
        experience_level=ExperienceLevel.MID_LEVEL,
    )
    fields.update(overrides)
    return CreateJob(**fields)


class TestCreateJob:

    @pytest.mark.asyncio
    async def test_creates_draft_by_default(self, handlers, employer, mock_uow):
        result = await handlers.create_job(_create_request(), employer, mock_uow)
        assert result.value.status == "Draft"
        assert result.value.employer_id == employer.user_id

    @pytest.mark.asyncio
    async def test_publish_on_create(self, handlers, employer, mock_uow):
        result = await handlers.create_job(_create_request(publish=True), employer, mock_uow)
        assert result.value.status == "Active"

    @pytest.mark.asyncio
    async def test_candidates_cannot_post(self, handlers, candidate, job_repo, mock_uow):
        result = await handlers.create_job(_create_request(), candidate, mock_uow)
        assert result.error.kind == ErrorKind.ACCESS_DENIED
        job_repo.add.assert_not_awaited()

    def test_salary_order_is_validated(self):
        with pytest.raises(ValueError):
            _create_request(salary_min=Decimal("100"), salary_max=Decimal("50"))


class TestJobVisibility:

    @pytest.mark.asyncio
    async def test_public_view_is_counted_and_hides_salary(self, handlers, job_repo, mock_uow):
        job = make_job(salary_min=Decimal("90000"), salary_max=Decimal("120000"), is_salary_visible=False)
        job_repo.get_by_id.return_value = job

        result = await handlers.get_job(GetJob(job_id=job.id), CallerIdentity.anonymous(), mock_uow)

        assert result.value.view_count == 1
        assert result.value.salary_min is None

    @pytest.mark.asyncio
    async def test_owner_view_is_not_counted(self, handlers, job_repo, employer, mock_uow):
        job = make_job(employer_id=employer.user_id, is_salary_visible=False, salary_min=Decimal("1"))
        job_repo.get_by_id.return_value = job

        result = await handlers.get_job(GetJob(job_id=job.id), employer, mock_uow)

        assert result.value.view_count == 0
        assert result.value.salary_min == Decimal("1")
        job_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_draft_is_hidden_from_others(self, handlers, job_repo, candidate, mock_uow):
        job = make_job(publish=False)
        job_repo.get_by_id.return_value = job
        result = await handlers.get_job(GetJob(job_id=job.id), candidate, mock_uow)
        assert result.error.kind == ErrorKind.NOT_FOUND


class TestJobTransitions:

    @pytest.mark.asyncio
    async def test_owner_closes_job(self, handlers, job_repo, employer, mock_uow):
        job_repo.get_by_id.return_value = make_job(employer_id=employer.user_id)
        result = await handlers.close_job(CloseJob(job_id=uuid4()), employer, mock_uow)
        assert result.is_ok
        assert result.value is None

    @pytest.mark.asyncio
    async def test_closed_job_cannot_be_republished(self, handlers, job_repo, employer, mock_uow):
        job_repo.get_by_id.return_value = make_job(employer_id=employer.user_id).close().value
        result = await handlers.publish_job(PublishJob(job_id=uuid4()), employer, mock_uow)
        assert result.error.kind == ErrorKind.INVALID_TRANSITION

    @pytest.mark.asyncio
    async def test_admin_may_manage_any_job(self, handlers, job_repo, admin, mock_uow):
        job_repo.get_by_id.return_value = make_job()
        result = await handlers.close_job(CloseJob(job_id=uuid4()), admin, mock_uow)
        assert result.is_ok

    @pytest.mark.asyncio
    async def test_non_owner_is_denied(self, handlers, job_repo, employer, mock_uow):
        job_repo.get_by_id.return_value = make_job()
        result = await handlers.publish_job(PublishJob(job_id=uuid4()), employer, mock_uow)
        assert result.error.kind == ErrorKind.ACCESS_DENIED

"""
Tests for the job application handlers
"""
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from application.services.applications.commands import (
    ApplyToJob,
    GetApplication,
    UpdateApplicationStatus,
    WithdrawApplication,
)
from application.services.applications.handlers import ApplicationHandlers
from application.identity import CallerIdentity
from core.result import ErrorKind
from domain.entities import JobApplication
from domain.enums import CandidatePlan, NotificationType, UserRole
from domain.value_objects import ApplicationStatus

from conftest import caller_with, make_job


def _echo(uow, entity):
    return entity


class TestApplyToJob:
    """Guards and side effects of applying"""

    @pytest.fixture
    def job(self):
        return make_job()

    @pytest.fixture
    def job_repo(self, job):
        repo = AsyncMock()
        repo.get_by_id.return_value = job
        repo.save.side_effect = _echo
        return repo

    @pytest.fixture
    def application_repo(self):
        repo = AsyncMock()
        repo.exists.return_value = False
        repo.count_since.return_value = 0
        repo.add.side_effect = _echo
        return repo

    @pytest.fixture
    def subscriptions(self):
        service = Mock()
        service.get_plan = AsyncMock(return_value=CandidatePlan.FREE)
        return service

    @pytest.fixture
    def handlers(self, application_repo, job_repo, subscriptions):
        return ApplicationHandlers(application_repo, job_repo, AsyncMock(), subscriptions)

    @pytest.mark.asyncio
    async def test_apply_creates_application_and_counts_it(self, handlers, job, job_repo, candidate, mock_uow):
        result = await handlers.apply(ApplyToJob(job_id=job.id, cover_letter="Keen"), candidate, mock_uow)

        assert result.is_ok
        assert result.value.status == "Applied"
        assert result.value.job_title == job.title
        assert result.value.candidate_id == candidate.user_id
        saved_job = job_repo.save.call_args.args[1]
        assert saved_job.application_count == job.application_count + 1

    @pytest.mark.asyncio
    async def test_anonymous_caller(self, handlers, job, mock_uow):
        result = await handlers.apply(ApplyToJob(job_id=job.id), CallerIdentity.anonymous(), mock_uow)
        assert result.error.kind == ErrorKind.UNAUTHENTICATED

    @pytest.mark.asyncio
    async def test_employer_cannot_apply(self, handlers, job, employer, mock_uow):
        result = await handlers.apply(ApplyToJob(job_id=job.id), employer, mock_uow)
        assert result.error.kind == ErrorKind.ACCESS_DENIED

    @pytest.mark.asyncio
    async def test_unknown_job(self, handlers, job_repo, candidate, mock_uow):
        job_repo.get_by_id.return_value = None
        result = await handlers.apply(ApplyToJob(job_id=uuid4()), candidate, mock_uow)
        assert result.error.kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_job_not_accepting_applications(self, handlers, job, job_repo, candidate, mock_uow):
        job_repo.get_by_id.return_value = job.pause().value
        result = await handlers.apply(ApplyToJob(job_id=job.id), candidate, mock_uow)
        assert result.error.kind == ErrorKind.DOMAIN_RULE

    @pytest.mark.asyncio
    async def test_duplicate_application(self, handlers, job, application_repo, candidate, mock_uow):
        application_repo.exists.return_value = True
        result = await handlers.apply(ApplyToJob(job_id=job.id), candidate, mock_uow)
        assert result.error.kind == ErrorKind.CONFLICT
        application_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_free_plan_limit(self, handlers, job, application_repo, candidate, mock_uow):
        application_repo.count_since.return_value = 5
        result = await handlers.apply(ApplyToJob(job_id=job.id), candidate, mock_uow)
        assert result.error.kind == ErrorKind.LIMIT_EXCEEDED
        application_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unlimited_plan_skips_counting(
        self, handlers, job, application_repo, subscriptions, candidate, mock_uow
    ):
        subscriptions.get_plan.return_value = CandidatePlan.PRO
        application_repo.count_since.return_value = 500
        result = await handlers.apply(ApplyToJob(job_id=job.id), candidate, mock_uow)
        assert result.is_ok
        application_repo.count_since.assert_not_awaited()


class TestPipeline:
    """Status updates, visibility and withdrawal"""

    @pytest.fixture
    def job(self, employer):
        return make_job(employer_id=employer.user_id)

    @pytest.fixture
    def application(self, job, candidate):
        return JobApplication.create(job_id=job.id, candidate_id=candidate.user_id)

    @pytest.fixture
    def notification_repo(self):
        repo = AsyncMock()
        repo.add.side_effect = _echo
        return repo

    @pytest.fixture
    def handlers(self, job, application, notification_repo):
        application_repo = AsyncMock()
        application_repo.get_by_id.return_value = application
        application_repo.save.side_effect = _echo
        job_repo = AsyncMock()
        job_repo.get_by_id.return_value = job
        return ApplicationHandlers(application_repo, job_repo, notification_repo, Mock())

    @pytest.mark.asyncio
    async def test_owner_moves_application_and_candidate_is_notified(
        self, handlers, application, candidate, employer, notification_repo, mock_uow
    ):
        request = UpdateApplicationStatus(
            application_id=application.id, status=ApplicationStatus.INTERVIEW, notes="Strong ITSM"
        )
        result = await handlers.update_status(request, employer, mock_uow)

        assert result.value.status == "Interview"
        assert result.value.employer_notes == "Strong ITSM"
        notification = notification_repo.add.call_args.args[1]
        assert notification.user_id == candidate.user_id
        assert notification.type == NotificationType.APPLICATION_STATUS_CHANGED

    @pytest.mark.asyncio
    async def test_other_employer_cannot_update(self, handlers, application, notification_repo, mock_uow):

        request = UpdateApplicationStatus(application_id=application.id, status=ApplicationStatus.SCREENING)
        result = await handlers.update_status(request, caller_with(UserRole.EMPLOYER), mock_uow)

        assert result.error.kind == ErrorKind.ACCESS_DENIED
        notification_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_backwards_move_is_invalid(self, handlers, application, employer, notification_repo, mock_uow):
        handlers.application_repo.get_by_id.return_value = application.update_status(
            ApplicationStatus.OFFER
        ).value
        request = UpdateApplicationStatus(application_id=application.id, status=ApplicationStatus.SCREENING)
        result = await handlers.update_status(request, employer, mock_uow)

        assert result.error.kind == ErrorKind.INVALID_TRANSITION
        notification_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_candidate_does_not_see_employer_notes(self, handlers, application, candidate, mock_uow):
        handlers.application_repo.get_by_id.return_value = application.update_status(
            ApplicationStatus.SCREENING, notes="internal"
        ).value
        result = await handlers.get_application(GetApplication(application_id=application.id), candidate, mock_uow)
        assert result.value.employer_notes is None

    @pytest.mark.asyncio
    async def test_candidate_withdraws(self, handlers, application, candidate, mock_uow):
        result = await handlers.withdraw(WithdrawApplication(application_id=application.id), candidate, mock_uow)

        assert result.is_ok
        assert result.value is None
        saved = handlers.application_repo.save.call_args.args[1]
        assert saved.status == ApplicationStatus.WITHDRAWN

    @pytest.mark.asyncio
    async def test_someone_else_cannot_withdraw(self, handlers, application, employer, mock_uow):
        result = await handlers.withdraw(WithdrawApplication(application_id=application.id), employer, mock_uow)
        assert result.error.kind == ErrorKind.ACCESS_DENIED

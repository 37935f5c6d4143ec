"""
Job Application Handlers
Candidate applications and the employer-driven hiring pipeline
"""
from datetime import datetime

from loguru import logger

from core.clock import utc_now
from core.pagination import Page
from core.result import Result, Ok, access_denied, conflict, domain_rule, limit_exceeded, not_found
from application.dispatcher import Dispatcher
from application.identity import CallerIdentity, require_authenticated
from application.repositories.interfaces import (
    ApplicationSearchFilters,
    IApplicationRepository,
    IJobRepository,
    INotificationRepository,
    IUnitOfWork,
)
from domain.entities import JobApplication, Notification
from domain.enums import NotificationType, UserRole
from .commands import (
    ApplyToJob,
    GetApplication,
    GetMyApplications,
    GetJobApplications,
    UpdateApplicationStatus,
    WithdrawApplication,
)
from .dtos import ApplicationDto
from .interfaces import ISubscriptionService


def month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class ApplicationHandlers:
    """Handlers for the applications area"""

    def __init__(
        self,
        application_repository: IApplicationRepository,
        job_repository: IJobRepository,
        notification_repository: INotificationRepository,
        subscription_service: ISubscriptionService,
    ):
        self.application_repo = application_repository
        self.job_repo = job_repository
        self.notification_repo = notification_repository
        self.subscriptions = subscription_service

    def register(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(ApplyToJob, self.apply)
        dispatcher.register(GetApplication, self.get_application)
        dispatcher.register(GetMyApplications, self.my_applications)
        dispatcher.register(GetJobApplications, self.job_applications)
        dispatcher.register(UpdateApplicationStatus, self.update_status)
        dispatcher.register(WithdrawApplication, self.withdraw)

    async def apply(self, request: ApplyToJob, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        if not caller.has_role(UserRole.CANDIDATE):
            return access_denied("Only candidates can apply to jobs.")

        job = await self.job_repo.get_by_id(uow, request.job_id)
        if job is None:
            return not_found("Job", request.job_id)

        now = utc_now()
        if not job.is_active(now):
            return domain_rule("job.not_accepting_applications", "This job is not accepting applications.")

        if await self.application_repo.exists(uow, job.id, caller.user_id):
            return conflict("application.duplicate", "You have already applied to this job.")

        plan = await self.subscriptions.get_plan(caller.user_id)
        if not plan.is_unlimited:
            used = await self.application_repo.count_since(uow, caller.user_id, month_start(now))
            if used >= plan.monthly_application_limit:
                logger.info(f"Candidate {caller.user_id} reached the {plan.value} plan limit ({used})")
                return limit_exceeded(
                    "subscription.application_limit",
                    f"Your {plan.value} plan allows {plan.monthly_application_limit} applications per month. "
                    "Upgrade your plan to apply to more jobs.",
                )

        application = JobApplication.create(
            job_id=job.id,
            candidate_id=caller.user_id,
            cover_letter=request.cover_letter,
            cv_url=request.cv_url,
            now=now,
        )
        application = await self.application_repo.add(uow, application)
        await self.job_repo.save(uow, job.record_application(now))

        logger.info(f"Candidate {caller.user_id} applied to job {job.id} (application {application.id})")
        return Ok(ApplicationDto.from_entity(application, job_title=job.title))

    async def get_application(self, request: GetApplication, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        application = await self.application_repo.get_by_id(uow, request.application_id)
        if application is None:
            return not_found("Application", request.application_id)

        job = await self.job_repo.get_by_id(uow, application.job_id)
        is_employer_side = caller.is_admin or (job is not None and job.is_owned_by(caller.user_id))
        if not (application.is_owned_by(caller.user_id) or is_employer_side):
            return access_denied("You do not have access to this application.")

        return Ok(ApplicationDto.from_entity(
            application,
            job_title=job.title if job else None,
            include_employer_notes=is_employer_side,
        ))

    async def my_applications(self, request: GetMyApplications, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied

        filters = ApplicationSearchFilters(candidate_id=caller.user_id, status=request.status)
        items, total = await self.application_repo.search(uow, filters, request.page, request.page_size)
        jobs = await self.job_repo.get_many(uow, list({a.job_id for a in items}))
        titles = {j.id: j.title for j in jobs}
        return Ok(Page(
            [ApplicationDto.from_entity(a, job_title=titles.get(a.job_id)) for a in items],
            total, request.page, request.page_size,
        ))

    async def job_applications(self, request: GetJobApplications, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        job = await self.job_repo.get_by_id(uow, request.job_id)
        if job is None:
            return not_found("Job", request.job_id)
        if not (job.is_owned_by(caller.user_id) or caller.is_admin):
            return access_denied("You can only view applications for your own jobs.")

        filters = ApplicationSearchFilters(job_id=job.id, status=request.status)
        items, total = await self.application_repo.search(uow, filters, request.page, request.page_size)
        return Ok(Page(
            [ApplicationDto.from_entity(a, job_title=job.title, include_employer_notes=True) for a in items],
            total, request.page, request.page_size,
        ))

    async def update_status(self, request: UpdateApplicationStatus, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        application = await self.application_repo.get_by_id(uow, request.application_id)
        if application is None:
            return not_found("Application", request.application_id)
        job = await self.job_repo.get_by_id(uow, application.job_id)
        if job is None:
            return not_found("Job", application.job_id)
        if not (job.is_owned_by(caller.user_id) or caller.is_admin):
            return access_denied("Only the job owner can update this application.")

        now = utc_now()
        updated = application.update_status(request.status, request.notes, request.rejection_reason, now)
        if not updated.is_ok:
            return updated
        application = await self.application_repo.save(uow, updated.value)

        # Candidate is told in the same transaction as the change
        await self.notification_repo.add(uow, Notification.create(
            user_id=application.candidate_id,
            type=NotificationType.APPLICATION_STATUS_CHANGED,
            title="Application status updated",
            message=f"Your application for {job.title} is now {application.status.value}.",
            action_url=f"/applications/{application.id}",
            metadata={
                "applicationId": str(application.id),
                "jobId": str(job.id),
                "status": application.status.value,
            },
            now=now,
        ))

        logger.info(f"Application {application.id} moved to {application.status.value} by {caller.user_id}")
        return Ok(ApplicationDto.from_entity(application, job_title=job.title, include_employer_notes=True))

    async def withdraw(self, request: WithdrawApplication, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        application = await self.application_repo.get_by_id(uow, request.application_id)
        if application is None:
            return not_found("Application", request.application_id)

        withdrawn = application.withdraw(caller.user_id, utc_now())
        if not withdrawn.is_ok:
            return withdrawn
        await self.application_repo.save(uow, withdrawn.value)
        logger.info(f"Application {application.id} withdrawn by candidate {caller.user_id}")
        return Ok(None)

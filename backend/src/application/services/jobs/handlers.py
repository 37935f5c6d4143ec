"""
Job Posting Handlers
Employer-side lifecycle plus public search and detail
"""
from loguru import logger

from core.clock import utc_now
from core.pagination import Page
from core.result import Result, Ok, access_denied, not_found
from application.dispatcher import Dispatcher
from application.identity import CallerIdentity, require_authenticated
from application.repositories.interfaces import IJobRepository, IUnitOfWork, JobSearchFilters
from domain.entities import Job
from domain.value_objects import JobStatus
from .commands import CreateJob, UpdateJob, PublishJob, PauseJob, CloseJob, GetJob, SearchJobs, GetMyJobs
from .dtos import JobDto


# Fields that may not be cleared by an update
_REQUIRED_FIELDS = frozenset({
    "title", "description", "job_type", "work_mode", "experience_level",
    "salary_currency", "is_salary_visible", "skills_required", "certifications", "servicenow_versions",
})


class JobHandlers:
    """Handlers for the jobs area"""

    def __init__(self, job_repository: IJobRepository):
        self.job_repo = job_repository

    def register(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(CreateJob, self.create_job)
        dispatcher.register(UpdateJob, self.update_job)
        dispatcher.register(PublishJob, self.publish_job)
        dispatcher.register(PauseJob, self.pause_job)
        dispatcher.register(CloseJob, self.close_job)
        dispatcher.register(GetJob, self.get_job)
        dispatcher.register(SearchJobs, self.search_jobs)
        dispatcher.register(GetMyJobs, self.my_jobs)

    async def create_job(self, request: CreateJob, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        if not caller.is_employer:
            return access_denied("Only employers can post jobs.")

        now = utc_now()
        job = Job.create(
            employer_id=caller.user_id,
            now=now,
            **request.model_dump(exclude={"publish"}),
        )
        if request.publish:
            published = job.publish(now)
            if not published.is_ok:
                return published
            job = published.value

        job = await self.job_repo.add(uow, job)
        logger.info(f"Job {job.id} created by employer {caller.user_id} ({job.status.value})")
        return Ok(JobDto.from_entity(job, show_hidden_salary=True))

    async def update_job(self, request: UpdateJob, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        job, error = await self._owned_job(request.job_id, caller, uow)
        if error:
            return error

        changes = {
            k: v for k, v in request.changes().items()
            if not (v is None and k in _REQUIRED_FIELDS)
        }
        updated = job.update_details(now=utc_now(), **changes)
        if not updated.is_ok:
            return updated
        job = await self.job_repo.save(uow, updated.value)
        logger.info(f"Job {job.id} updated: {', '.join(sorted(changes)) or 'no changes'}")
        return Ok(JobDto.from_entity(job, show_hidden_salary=True))

    async def publish_job(self, request: PublishJob, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        return await self._transition(request.job_id, caller, uow, "publish")

    async def pause_job(self, request: PauseJob, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        return await self._transition(request.job_id, caller, uow, "pause")

    async def close_job(self, request: CloseJob, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        result = await self._transition(request.job_id, caller, uow, "close")
        return Ok(None) if result.is_ok else result

    async def get_job(self, request: GetJob, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        """Non-active postings are only visible to their owner and admins"""
        job = await self.job_repo.get_by_id(uow, request.job_id)
        privileged = job is not None and (job.is_owned_by(caller.user_id) or caller.is_admin)
        if job is None or (job.status != JobStatus.ACTIVE and not privileged):
            return not_found("Job", request.job_id)

        if not job.is_owned_by(caller.user_id):
            job = await self.job_repo.save(uow, job.record_view(utc_now()))
        return Ok(JobDto.from_entity(job, show_hidden_salary=privileged))

    async def search_jobs(self, request: SearchJobs, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        filters = JobSearchFilters(
            keyword=request.keyword or None,
            statuses=(JobStatus.ACTIVE,),
            country=request.country or None,
            location=request.location or None,
            job_type=request.job_type,
            work_mode=request.work_mode,
            experience_level=request.experience_level,
            salary_min=request.salary_min,
            salary_max=request.salary_max,
            active_at=utc_now(),
        )
        items, total = await self.job_repo.search(uow, filters, request.page, request.page_size)
        return Ok(Page([JobDto.from_entity(j) for j in items], total, request.page, request.page_size))

    async def my_jobs(self, request: GetMyJobs, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        if not caller.is_employer:
            return access_denied("Only employers have job postings.")

        filters = JobSearchFilters(
            employer_id=caller.user_id,
            statuses=(request.status,) if request.status else (),
        )
        items, total = await self.job_repo.search(uow, filters, request.page, request.page_size)
        return Ok(Page(
            [JobDto.from_entity(j, show_hidden_salary=True) for j in items],
            total, request.page, request.page_size,
        ))

    async def _owned_job(self, job_id, caller: CallerIdentity, uow: IUnitOfWork):
        denied = require_authenticated(caller)
        if denied:
            return None, denied
        job = await self.job_repo.get_by_id(uow, job_id)
        if job is None:
            return None, not_found("Job", job_id)
        if not (job.is_owned_by(caller.user_id) or caller.is_admin):
            return None, access_denied("You can only manage your own job postings.")
        return job, None

    async def _transition(self, job_id, caller: CallerIdentity, uow: IUnitOfWork, action: str) -> Result:
        job, error = await self._owned_job(job_id, caller, uow)
        if error:
            return error

        moved = getattr(job, action)(utc_now())
        if not moved.is_ok:
            return moved
        job = await self.job_repo.save(uow, moved.value)
        logger.info(f"Job {job.id} {action}: now {job.status.value}")
        return Ok(JobDto.from_entity(job, show_hidden_salary=True))

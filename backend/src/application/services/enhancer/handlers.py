"""
Job Enhancer Handlers
AI-assisted rewrites of job descriptions, adopted by the employer on acceptance
"""
from loguru import logger

from core.clock import utc_now
from core.pagination import Page
from core.result import Result, Ok, access_denied, not_found
from application.dispatcher import Dispatcher
from application.identity import CallerIdentity, require_authenticated
from application.repositories.interfaces import (
    EnhancementSearchFilters,
    IEnhancementRepository,
    IJobRepository,
    IUnitOfWork,
)
from domain.entities import EnhancementResult
from .commands import EnhanceJobDescription, GetEnhancement, GetJobEnhancements, GetMyEnhancements, AcceptEnhancement
from .dtos import EnhancementDto
from .interfaces import EnhancementError, IJobEnhancer


class EnhancerHandlers:
    """Handlers for the job enhancer area"""

    def __init__(
        self,
        enhancement_repository: IEnhancementRepository,
        job_repository: IJobRepository,
        enhancer: IJobEnhancer,
    ):
        self.enhancement_repo = enhancement_repository
        self.job_repo = job_repository
        self.enhancer = enhancer

    def register(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(EnhanceJobDescription, self.enhance)
        dispatcher.register(GetEnhancement, self.get_enhancement)
        dispatcher.register(GetJobEnhancements, self.job_enhancements)
        dispatcher.register(GetMyEnhancements, self.my_enhancements)
        dispatcher.register(AcceptEnhancement, self.accept)

    async def enhance(self, request: EnhanceJobDescription, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        job = await self.job_repo.get_by_id(uow, request.job_id)
        if job is None:
            return not_found("Job", request.job_id)
        if not job.is_owned_by(caller.user_id):
            return access_denied("You can only enhance your own job postings.")

        record = EnhancementResult.create(
            job_id=job.id,
            requested_by=caller.user_id,
            title=request.title,
            description=request.description,
            requirements=request.requirements,
        )
        logger.info(f"Enhancing job {job.id} (enhancement {record.id})")
        try:
            output = await self.enhancer.enhance(request.title, request.description, request.requirements)
        except EnhancementError as e:
            logger.warning(f"Enhancement {record.id} failed: {e}")
            finished = record.fail(str(e), utc_now())
        else:
            finished = record.complete(output, utc_now())
        if not finished.is_ok:
            return finished

        record = await self.enhancement_repo.add(uow, finished.value)
        logger.info(
            f"Enhancement {record.id} {record.status.value}: score {record.output.score_before if record.output else 0}"
            f" -> {record.output.score_after if record.output else 0}"
        )
        return Ok(EnhancementDto.from_entity(record))

    async def get_enhancement(self, request: GetEnhancement, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        record = await self.enhancement_repo.get_by_id(uow, request.enhancement_id)
        if record is None:
            return not_found("Enhancement", request.enhancement_id)
        if record.requested_by != caller.user_id:
            return access_denied("You can only view your own enhancements.")
        return Ok(EnhancementDto.from_entity(record))

    async def job_enhancements(self, request: GetJobEnhancements, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        filters = EnhancementSearchFilters(requested_by=caller.user_id, job_id=request.job_id)
        items, total = await self.enhancement_repo.search(uow, filters, request.page, request.page_size)
        return Ok(Page([EnhancementDto.from_entity(r) for r in items], total, request.page, request.page_size))

    async def my_enhancements(self, request: GetMyEnhancements, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        filters = EnhancementSearchFilters(requested_by=caller.user_id)
        items, total = await self.enhancement_repo.search(uow, filters, request.page, request.page_size)
        return Ok(Page([EnhancementDto.from_entity(r) for r in items], total, request.page, request.page_size))

    async def accept(self, request: AcceptEnhancement, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        record = await self.enhancement_repo.get_by_id(uow, request.enhancement_id)
        if record is None:
            return not_found("Enhancement", request.enhancement_id)
        if record.requested_by != caller.user_id:
            return access_denied("You can only accept your own enhancements.")
        job = await self.job_repo.get_by_id(uow, record.job_id)
        if job is None:
            return not_found("Job", record.job_id)

        now = utc_now()
        accepted = record.accept(now)
        if not accepted.is_ok:
            return accepted
        output = accepted.value.output
        updated_job = job.apply_enhancement(
            output.enhanced_title,
            output.enhanced_description,
            output.enhanced_requirements,
            output.suggested_skills,
            now,
        )
        if not updated_job.is_ok:
            return updated_job

        # Job content and acceptance commit together
        await self.job_repo.save(uow, updated_job.value)
        record = await self.enhancement_repo.save(uow, accepted.value)
        logger.info(f"Enhancement {record.id} accepted; job {job.id} updated")
        return Ok(EnhancementDto.from_entity(record))

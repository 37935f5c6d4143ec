"""
CV Parser Handlers
Store the upload, extract fields, and copy the confident ones onto the candidate profile
"""
from uuid import uuid4

from loguru import logger

from core.clock import utc_now
from core.pagination import Page
from core.result import Result, Ok, access_denied, not_found
from application.dispatcher import Dispatcher
from application.identity import CallerIdentity, require_authenticated
from application.repositories.interfaces import (
    CvParseResultSearchFilters,
    ICandidateProfileRepository,
    ICvParseResultRepository,
    IUnitOfWork,
)
from application.services.files.interfaces import IFileStorageService
from domain.entities import CandidateProfile, CvParseResult, fields_above_threshold
from domain.enums import UserRole
from .commands import ParseCv, GetCvParseResult, GetMyCvParseResults, ApplyCvParseResult
from .dtos import AppliedCvDto, CvParseResultDto
from .interfaces import CvExtractionError, ICvExtractor


class CvParserHandlers:
    """Handlers for the CV parser area"""

    def __init__(
        self,
        parse_result_repository: ICvParseResultRepository,
        candidate_repository: ICandidateProfileRepository,
        file_storage: IFileStorageService,
        extractor: ICvExtractor,
    ):
        self.parse_repo = parse_result_repository
        self.candidate_repo = candidate_repository
        self.file_storage = file_storage
        self.extractor = extractor

    def register(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(ParseCv, self.parse_cv)
        dispatcher.register(GetCvParseResult, self.get_result)
        dispatcher.register(GetMyCvParseResults, self.my_results)
        dispatcher.register(ApplyCvParseResult, self.apply_result)

    async def parse_cv(self, request: ParseCv, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        """A failed extraction is still stored and returned"""
        denied = require_authenticated(caller)
        if denied:
            return denied

        blob_path = f"cv-parse/{caller.user_id}/{uuid4().hex}{request.extension}"
        await self.file_storage.save(blob_path, request.content)

        result = CvParseResult.create(
            user_id=caller.user_id,
            blob_path=blob_path,
            original_file_name=request.safe_name,
            content_type=request.content_type.lower(),
            file_size_bytes=request.size_bytes,
        )
        started = result.start_processing()
        if not started.is_ok:
            return started
        result = started.value

        logger.info(f"Parsing CV {result.id} ({request.safe_name}, {request.size_bytes} bytes) for user {caller.user_id}")
        try:
            parsed = await self.extractor.extract(request.content, result.content_type)
        except CvExtractionError as e:
            logger.warning(f"CV {result.id} could not be parsed: {e}")
            finished = result.fail(str(e), utc_now())
        else:
            finished = result.complete(parsed, utc_now())
        if not finished.is_ok:
            return finished

        result = await self.parse_repo.add(uow, finished.value)
        logger.info(f"CV {result.id} parsed: {result.status.value} (confidence {result.overall_confidence})")
        return Ok(CvParseResultDto.from_entity(result))

    async def get_result(self, request: GetCvParseResult, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        result = await self.parse_repo.get_by_id(uow, request.parse_result_id)
        if result is None:
            return not_found("CvParseResult", request.parse_result_id)
        if result.user_id != caller.user_id:
            return access_denied("You can only view your own CV parse results.")
        return Ok(CvParseResultDto.from_entity(result))

    async def my_results(self, request: GetMyCvParseResults, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        filters = CvParseResultSearchFilters(user_id=caller.user_id)
        items, total = await self.parse_repo.search(uow, filters, request.page, request.page_size)
        return Ok(Page([CvParseResultDto.from_entity(r) for r in items], total, request.page, request.page_size))

    async def apply_result(self, request: ApplyCvParseResult, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        if not caller.has_role(UserRole.CANDIDATE):
            return access_denied("Only candidates can apply a CV to a profile.")

        result = await self.parse_repo.get_by_id(uow, request.parse_result_id)
        if result is None:
            return not_found("CvParseResult", request.parse_result_id)
        if result.user_id != caller.user_id:
            return access_denied("You can only apply your own CV parse results.")

        now = utc_now()
        applied = result.mark_applied(now)
        if not applied.is_ok:
            return applied

        fields = [
            name for name in fields_above_threshold(result.parsed, request.confidence_threshold)
            if getattr(result.parsed, name) not in (None, "", ())
        ]
        profile = await self.candidate_repo.get_by_user_id(uow, caller.user_id)
        created = profile is None
        if created:
            profile = CandidateProfile.create(caller.user_id, now)
        profile = profile.apply_parsed_cv(result.parsed, fields, now)
        if created:
            profile = await self.candidate_repo.add(uow, profile)
        else:
            profile = await self.candidate_repo.save(uow, profile)
        await self.parse_repo.save(uow, applied.value)

        logger.info(f"CV {result.id} applied to profile {profile.id}: {', '.join(fields) or 'no fields'}")
        return Ok(AppliedCvDto(
            parse_result_id=result.id,
            applied_fields=fields,
            profile_completeness=profile.profile_completeness,
        ))

"""
Matching Handlers
Embedding lifecycle and cosine-similarity matching between jobs and candidates
"""
from dataclasses import dataclass
from typing import List, Tuple

from loguru import logger

from core.clock import utc_now
from core.config import settings
from core.pagination import Page, paginate
from core.result import Result, Ok, access_denied, not_found
from application.dispatcher import Dispatcher
from application.identity import CallerIdentity, require_authenticated
from application.repositories.interfaces import (
    ICandidateProfileRepository,
    IEmbeddingRepository,
    IJobRepository,
    IUnitOfWork,
)
from domain.entities import EmbeddingRecord
from domain.enums import DocumentType
from domain.value_objects import MatchScore
from .commands import RequestEmbedding, ProcessEmbedding, GetEmbeddingStatus, GetJobMatches, GetCandidateMatches
from .documents import job_document, job_skills, matched_skills, profile_document, profile_skills
from .dtos import CandidateMatchDto, EmbeddingStatusDto, JobMatchDto
from .interfaces import EmbeddingError, IEmbeddingService


@dataclass(frozen=True)
class MatchPage(Page):
    """Ranked matches; embedding_ready is False until the caller's document is indexed"""
    embedding_ready: bool = True

    def extra_fields(self) -> dict:
        return {"embeddingReady": self.embedding_ready}


class MatchingHandlers:
    """Handlers for the matching area"""

    def __init__(
        self,
        embedding_repository: IEmbeddingRepository,
        job_repository: IJobRepository,
        candidate_repository: ICandidateProfileRepository,
        embedding_service: IEmbeddingService,
    ):
        self.embedding_repo = embedding_repository
        self.job_repo = job_repository
        self.candidate_repo = candidate_repository
        self.embedder = embedding_service

    def register(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(RequestEmbedding, self.request_embedding)
        dispatcher.register(ProcessEmbedding, self.process_embedding)
        dispatcher.register(GetEmbeddingStatus, self.embedding_status)
        dispatcher.register(GetJobMatches, self.job_matches)
        dispatcher.register(GetCandidateMatches, self.candidate_matches)

    # ------------------------------------------------------------------
    # Embedding lifecycle
    # ------------------------------------------------------------------

    async def request_embedding(self, request: RequestEmbedding, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied

        if request.document_type == DocumentType.CANDIDATE_PROFILE:
            profile = await self.candidate_repo.get_by_user_id(uow, caller.user_id)
            if profile is None:
                return not_found("CandidateProfile", caller.user_id)
            if request.document_id is not None and request.document_id != profile.id:
                return access_denied("You can only index your own profile.")
            document_id = profile.id
        else:
            job = await self.job_repo.get_by_id(uow, request.document_id)
            if job is None:
                return not_found("Job", request.document_id)
            if not (job.is_owned_by(caller.user_id) or caller.is_admin):
                return access_denied("You can only index your own job postings.")
            document_id = job.id

        now = utc_now()
        record = await self.embedding_repo.get_by_document(uow, document_id, request.document_type)
        if record is None:
            record = await self.embedding_repo.add(uow, EmbeddingRecord.create(document_id, request.document_type, now))
        else:
            requested = record.request(now)
            if requested.value is not record:
                record = await self.embedding_repo.save(uow, requested.value)

        logger.info(f"Embedding requested for {request.document_type.value} {document_id}: {record.status.value}")
        return Ok(EmbeddingStatusDto.from_entity(record))

    async def process_embedding(self, request: ProcessEmbedding, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        if not (caller.is_admin or caller.is_internal_service):
            return access_denied("Only internal services can process embeddings.")

        record = await self.embedding_repo.get_by_document(uow, request.document_id, request.document_type)
        if record is None:
            return not_found("EmbeddingRecord", request.document_id)

        started = record.start_processing(utc_now())
        if not started.is_ok:
            return started
        record = started.value

        text, skills, failure = await self._document(uow, record)
        if failure is None:
            try:
                vector = await self.embedder.embed(text)
            except EmbeddingError as e:
                failure = str(e)

        if failure is not None:
            logger.warning(f"Embedding {record.document_type.value} {record.document_id} failed: {failure}")
            finished = record.set_failed(failure, utc_now())
        else:
            finished = record.set_indexed(tuple(vector), skills, utc_now())
        if not finished.is_ok:
            return finished

        record = await self.embedding_repo.save(uow, finished.value)
        logger.info(f"Embedding {record.document_type.value} {record.document_id}: {record.status.value}")
        return Ok(EmbeddingStatusDto.from_entity(record))

    async def embedding_status(self, request: GetEmbeddingStatus, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        record = await self.embedding_repo.get_by_document(uow, request.document_id, request.document_type)
        if record is None:
            return not_found("EmbeddingRecord", request.document_id)

        if not (caller.is_admin or caller.is_internal_service):
            if request.document_type == DocumentType.JOB:
                job = await self.job_repo.get_by_id(uow, request.document_id)
                allowed = job is not None and job.is_owned_by(caller.user_id)
            else:
                profile = await self.candidate_repo.get_by_id(uow, request.document_id)
                allowed = profile is not None and profile.user_id == caller.user_id
            if not allowed:
                return access_denied("You do not have access to this embedding.")
        return Ok(EmbeddingStatusDto.from_entity(record))

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    async def job_matches(self, request: GetJobMatches, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        profile = await self.candidate_repo.get_by_user_id(uow, caller.user_id)
        if profile is None:
            return not_found("CandidateProfile", caller.user_id)

        own = await self.embedding_repo.get_by_document(uow, profile.id, DocumentType.CANDIDATE_PROFILE)
        if own is None or not own.is_indexed:
            return Ok(MatchPage([], 0, request.page, request.page_size, embedding_ready=False))

        ranked = await self._rank(uow, own, DocumentType.JOB)
        jobs = {j.id: j for j in await self.job_repo.get_many(uow, [r.document_id for r, _ in ranked])}
        now = utc_now()
        matches = []
        for record, similarity in ranked:
            job = jobs.get(record.document_id)
            if job is None or not job.is_active(now):
                continue
            score = MatchScore.from_similarity(similarity)
            matches.append(JobMatchDto(
                job_id=job.id,
                title=job.title,
                company_name=job.company_name,
                location=job.location,
                work_mode=job.work_mode.value,
                experience_level=job.experience_level.value,
                score=round(score.value, 4),
                match_percent=score.percent,
                matched_skills=matched_skills(profile_skills(profile), job_skills(job)),
            ))

        page = paginate(matches, request.page, request.page_size)
        return Ok(MatchPage(page.items, page.total, page.page, page.page_size, embedding_ready=True))

    async def candidate_matches(self, request: GetCandidateMatches, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        job = await self.job_repo.get_by_id(uow, request.job_id)
        if job is None:
            return not_found("Job", request.job_id)
        if not (job.is_owned_by(caller.user_id) or caller.is_admin):
            return access_denied("You can only match candidates against your own jobs.")

        own = await self.embedding_repo.get_by_document(uow, job.id, DocumentType.JOB)
        if own is None or not own.is_indexed:
            return Ok(MatchPage([], 0, request.page, request.page_size, embedding_ready=False))

        ranked = await self._rank(uow, own, DocumentType.CANDIDATE_PROFILE)
        profiles = {
            p.id: p for p in await self.candidate_repo.get_many(uow, [r.document_id for r, _ in ranked])
        }
        matches = []
        for record, similarity in ranked:
            profile = profiles.get(record.document_id)
            if profile is None or not profile.is_public:
                continue
            score = MatchScore.from_similarity(similarity)
            matches.append(CandidateMatchDto(
                user_id=profile.user_id,
                profile_id=profile.id,
                headline=profile.headline,
                current_role=profile.current_role,
                location=profile.location,
                experience_level=profile.experience_level.value,
                years_of_experience=profile.years_of_experience,
                score=round(score.value, 4),
                match_percent=score.percent,
                matched_skills=matched_skills(job_skills(job), profile_skills(profile)),
            ))

        page = paginate(matches, request.page, request.page_size)
        return Ok(MatchPage(page.items, page.total, page.page, page.page_size, embedding_ready=True))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _rank(
        self, uow: IUnitOfWork, own: EmbeddingRecord, other_type: DocumentType
    ) -> List[Tuple[EmbeddingRecord, float]]:
        """Indexed documents of the other type, best first, capped at the candidate pool size"""
        candidates = [
            r for r in await self.embedding_repo.list_indexed(uow, other_type)
            if r.vector is not None and len(r.vector) == len(own.vector)
        ]
        if not candidates:
            return []
        scores = self.embedder.similarities(own.vector, [r.vector for r in candidates])
        ranked = sorted(zip(candidates, scores), key=lambda pair: pair[1], reverse=True)
        return ranked[:settings.MATCH_CANDIDATE_POOL]

    async def _document(self, uow: IUnitOfWork, record: EmbeddingRecord):
        """(text, skills, failure reason) for the record's document"""
        if record.document_type == DocumentType.JOB:
            job = await self.job_repo.get_by_id(uow, record.document_id)
            if job is None:
                return "", (), "Job no longer exists."
            if not job.is_active():
                return "", (), "Job is not active."
            return job_document(job), job_skills(job), None

        profile = await self.candidate_repo.get_by_id(uow, record.document_id)
        if profile is None:
            return "", (), "Candidate profile no longer exists."
        return profile_document(profile), profile_skills(profile), None

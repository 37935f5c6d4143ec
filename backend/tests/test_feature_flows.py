"""
Feature flows through the dispatcher
CV parsing, job description enhancement, profiles and matching against SQLite
"""
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from application.services.cv_parser.commands import ApplyCvParseResult, GetCvParseResult, ParseCv
from application.services.cv_parser.interfaces import CvExtractionError
from application.services.enhancer.commands import AcceptEnhancement, EnhanceJobDescription
from application.services.jobs.commands import CreateJob, GetJob
from application.services.matching.commands import (
    GetCandidateMatches,
    GetJobMatches,
    ProcessEmbedding,
    RequestEmbedding,
)
from application.services.profiles.commands import (
    GetCandidateProfile,
    GetMyCandidateProfile,
    UpsertCandidateProfile,
    UploadProfilePicture,
)
from core.result import ErrorKind
from domain.enums import DocumentType, UserRole
from infrastructure.external.file_storage_service import LocalFileStorageService
from infrastructure.services.cv_parser import HeuristicCvExtractor
from infrastructure.services.embeddings import HashingEmbeddingService
from infrastructure.services.job_enhancer import RuleBasedJobEnhancer
from infrastructure.services.subscription_service import StaticSubscriptionService
from presentation.api.v1.container import build_dispatcher

from conftest import caller_with
from test_cv_parser import SAMPLE_CV


PDF = "application/pdf"


@pytest.fixture
def extractor():
    extractor = AsyncMock()
    extractor.extract.return_value = HeuristicCvExtractor().parse_text(SAMPLE_CV)
    return extractor


@pytest.fixture
def dispatcher(uow_factory, tmp_path, extractor):
    return build_dispatcher(
        uow_factory,
        password_hasher=AsyncMock(),
        jwt_service=AsyncMock(),
        email_sender=AsyncMock(),
        file_storage=LocalFileStorageService(str(tmp_path), "http://files.test"),
        cv_extractor=extractor,
        job_enhancer=RuleBasedJobEnhancer(),
        embedding_service=HashingEmbeddingService(dimensions=512),
        subscription_service=StaticSubscriptionService(),
    )


async def post_job(dispatcher, employer, **overrides):
    fields = dict(
        title="ServiceNow ITSM Developer",
        description="Build ITSM workflows with Flow Designer and maintain the CMDB for a global rollout.",
        job_type="FullTime",
        work_mode="Remote",
        experience_level="Senior",
        skills_required=["ITSM", "Flow Designer", "CMDB"],
        publish=True,
    )
    fields.update(overrides)
    result = await dispatcher.dispatch(CreateJob, employer, **fields)
    assert result.is_ok, result
    return result.value


class TestCvParsing:

    @pytest.mark.asyncio
    async def test_parse_then_apply_to_profile(self, dispatcher, candidate):
        parsed = await dispatcher.dispatch(
            ParseCv, candidate, file_name="jane.pdf", content_type=PDF, content=b"%PDF-1.4 cv"
        )
        assert parsed.value.status == "Completed"
        assert parsed.value.email == "jane.doe@example.com"

        applied = await dispatcher.dispatch(
            ApplyCvParseResult, candidate, parse_result_id=parsed.value.id, confidence_threshold=70
        )
        assert "certifications" in applied.value.applied_fields
        assert "headline" not in applied.value.applied_fields
        assert applied.value.profile_completeness > 0

        profile = await dispatcher.dispatch(GetMyCandidateProfile, candidate)
        assert profile.value.years_of_experience == 8

        again = await dispatcher.dispatch(ApplyCvParseResult, candidate, parse_result_id=parsed.value.id)
        assert not again.is_ok

    @pytest.mark.asyncio
    async def test_unreadable_document_is_stored_as_failed(self, dispatcher, extractor, candidate):
        extractor.extract.side_effect = CvExtractionError("The document could not be read")

        parsed = await dispatcher.dispatch(
            ParseCv, candidate, file_name="broken.pdf", content_type=PDF, content=b"garbage"
        )

        assert parsed.is_ok
        assert parsed.value.status == "Failed"
        assert parsed.value.error_message == "The document could not be read"

    @pytest.mark.asyncio
    async def test_unsupported_type_is_a_validation_failure(self, dispatcher, candidate):
        result = await dispatcher.dispatch(
            ParseCv, candidate, file_name="cv.txt", content_type="text/plain", content=b"text"
        )
        assert result.error.kind == ErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_results_are_private(self, dispatcher, candidate):
        parsed = await dispatcher.dispatch(
            ParseCv, candidate, file_name="jane.pdf", content_type=PDF, content=b"%PDF-1.4 cv"
        )
        stranger = caller_with(UserRole.CANDIDATE)
        result = await dispatcher.dispatch(GetCvParseResult, stranger, parse_result_id=parsed.value.id)
        assert result.error.kind == ErrorKind.ACCESS_DENIED


class TestEnhancement:

    @pytest.mark.asyncio
    async def test_enhance_then_accept_updates_job(self, dispatcher, employer):
        job = await post_job(dispatcher, employer)
        description = "We need a rockstar developer to own our ITSM platform and keep the lights on."

        enhanced = await dispatcher.dispatch(
            EnhanceJobDescription, employer, job_id=job.id, title="Developer", description=description
        )
        assert enhanced.value.status == "Completed"
        assert enhanced.value.bias_issues[0].text == "rockstar"

        unchanged = await dispatcher.dispatch(GetJob, employer, job_id=job.id)
        assert unchanged.value.title == job.title

        accepted = await dispatcher.dispatch(AcceptEnhancement, employer, enhancement_id=enhanced.value.id)
        assert accepted.value.is_accepted

        updated = await dispatcher.dispatch(GetJob, employer, job_id=job.id)
        assert updated.value.title == "ServiceNow Developer"
        assert "rockstar" not in updated.value.description

        twice = await dispatcher.dispatch(AcceptEnhancement, employer, enhancement_id=enhanced.value.id)
        assert not twice.is_ok

    @pytest.mark.asyncio
    async def test_only_owner_may_enhance(self, dispatcher, employer):
        job = await post_job(dispatcher, employer)
        other = caller_with(UserRole.EMPLOYER)
        result = await dispatcher.dispatch(
            EnhanceJobDescription, other, job_id=job.id, title="Developer",
            description="A description that is comfortably longer than fifty characters.",
        )
        assert result.error.kind == ErrorKind.ACCESS_DENIED


class TestProfiles:

    @pytest.mark.asyncio
    async def test_upsert_creates_then_updates(self, dispatcher, candidate):
        created = await dispatcher.dispatch(UpsertCandidateProfile, candidate, headline="ITSM developer")
        updated = await dispatcher.dispatch(UpsertCandidateProfile, candidate, location="Austin")

        assert created.value.id == updated.value.id
        assert updated.value.headline == "ITSM developer"
        assert updated.value.location == "Austin"

    @pytest.mark.asyncio
    async def test_private_profile_is_hidden(self, dispatcher, candidate, employer):
        await dispatcher.dispatch(UpsertCandidateProfile, candidate, is_public=False)
        result = await dispatcher.dispatch(GetCandidateProfile, employer, user_id=candidate.user_id)
        assert result.error.kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_picture_upload_returns_public_url(self, dispatcher, candidate, tmp_path):
        result = await dispatcher.dispatch(
            UploadProfilePicture, candidate, file_name="../me.png", content_type="image/png", content=b"\x89PNG"
        )
        assert result.value.url.startswith(f"http://files.test/profile-pictures/{candidate.user_id}/")
        assert result.value.file_name == "me.png"
        assert any(tmp_path.rglob("*.png"))


class TestMatching:

    @pytest.mark.asyncio
    async def test_index_and_rank_both_ways(self, dispatcher, candidate, employer):
        service = caller_with(UserRole.API_USER)
        await dispatcher.dispatch(
            UpsertCandidateProfile, candidate,
            headline="ServiceNow ITSM developer",
            bio="Flow Designer, CMDB and ITSM implementations",
            skills=["ITSM", "Flow Designer", "CMDB"],
        )
        close = await post_job(dispatcher, employer)
        far = await post_job(
            dispatcher, employer,
            title="HR Service Delivery Consultant",
            description="Employee service center, onboarding journeys and HR case management.",
            skills_required=["HRSD"],
        )

        not_ready = await dispatcher.dispatch(GetJobMatches, candidate)
        assert not_ready.value.embedding_ready is False

        profile_request = await dispatcher.dispatch(
            RequestEmbedding, candidate, document_type=DocumentType.CANDIDATE_PROFILE
        )
        profile_id = profile_request.value.document_id
        processed = await dispatcher.dispatch(
            ProcessEmbedding, service, document_type=DocumentType.CANDIDATE_PROFILE, document_id=profile_id
        )
        assert processed.value.status == "Indexed"

        for job in (close, far):
            await dispatcher.dispatch(RequestEmbedding, employer, document_type=DocumentType.JOB, document_id=job.id)
            await dispatcher.dispatch(ProcessEmbedding, service, document_type=DocumentType.JOB, document_id=job.id)

        matches = await dispatcher.dispatch(GetJobMatches, candidate)
        assert [m.job_id for m in matches.value.items] == [close.id, far.id]
        assert matches.value.items[0].match_percent > matches.value.items[1].match_percent
        assert set(matches.value.items[0].matched_skills) == {"ITSM", "Flow Designer", "CMDB"}

        candidates = await dispatcher.dispatch(GetCandidateMatches, employer, job_id=close.id)
        assert [m.user_id for m in candidates.value.items] == [candidate.user_id]

    @pytest.mark.asyncio
    async def test_processing_requires_internal_caller(self, dispatcher, employer):
        job = await post_job(dispatcher, employer)
        await dispatcher.dispatch(RequestEmbedding, employer, document_type=DocumentType.JOB, document_id=job.id)
        result = await dispatcher.dispatch(
            ProcessEmbedding, employer, document_type=DocumentType.JOB, document_id=job.id
        )
        assert result.error.kind == ErrorKind.ACCESS_DENIED

    @pytest.mark.asyncio
    async def test_job_embedding_needs_a_job_id(self, dispatcher, employer):
        result = await dispatcher.dispatch(RequestEmbedding, employer, document_type=DocumentType.JOB)
        assert result.error.kind == ErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_unknown_job(self, dispatcher, employer):
        result = await dispatcher.dispatch(
            RequestEmbedding, employer, document_type=DocumentType.JOB, document_id=uuid4()
        )
        assert result.error.kind == ErrorKind.NOT_FOUND

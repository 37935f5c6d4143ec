"""
Tests for domain entity lifecycles
"""
from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from core.clock import utc_now
from core.result import ErrorKind
from domain.entities import (
    CvParseResult,
    EmbeddingRecord,
    EnhancementOutput,
    EnhancementResult,
    JobApplication,
    Notification,
    ParsedCv,
    UserAccount,
)
from domain.enums import (
    AccountStatus,
    DocumentType,
    EmbeddingStatus,
    EnhancementStatus,
    NotificationType,
    ParseStatus,
    UserRole,
)
from domain.value_objects import ApplicationStatus, JobStatus, MatchScore

from conftest import make_job


class TestJobLifecycle:
    """Draft -> Active <-> Paused -> Closed"""

    def test_new_job_is_a_draft(self):
        job = make_job(publish=False)
        assert job.status == JobStatus.DRAFT
        assert not job.is_active()

    def test_publish_pause_republish_close(self):
        job = make_job(publish=False)
        job = job.publish().value
        assert job.status == JobStatus.ACTIVE

        job = job.pause().value
        assert job.status == JobStatus.PAUSED

        job = job.publish().value
        assert job.status == JobStatus.ACTIVE

        job = job.close().value
        assert job.status == JobStatus.CLOSED
        assert job.status_changed_at is not None

    def test_closed_job_cannot_be_published(self):
        job = make_job().close().value
        result = job.publish()
        assert not result.is_ok
        assert result.error.kind == ErrorKind.INVALID_TRANSITION
        assert result.error.transition == ("Closed", "Active")

    def test_only_active_jobs_can_be_paused(self):
        result = make_job(publish=False).pause()
        assert result.error.kind == ErrorKind.INVALID_TRANSITION

    def test_closed_job_cannot_be_edited(self):
        job = make_job().close().value
        result = job.update_details(title="New title")
        assert result.error.kind == ErrorKind.DOMAIN_RULE

    def test_expired_job_is_not_active(self):
        now = utc_now()
        job = make_job(expires_at=now - timedelta(minutes=1))
        assert job.status == JobStatus.ACTIVE
        assert not job.is_active(now)

    def test_salary_max_below_min_is_rejected(self):
        with pytest.raises(ValueError):
            make_job(salary_min=Decimal("90000"), salary_max=Decimal("50000"))

    def test_enhancement_merges_suggested_skills(self):
        job = make_job()
        updated = job.apply_enhancement("Senior ServiceNow Developer", None, None, ["itsm", "ATF"]).value
        assert updated.title == "Senior ServiceNow Developer"
        assert updated.description == job.description
        assert updated.skills_required == ("ITSM", "Flow Designer", "ATF")

    def test_counters(self):
        job = make_job()
        assert job.record_view().view_count == 1
        assert job.record_application().application_count == 1


class TestJobApplicationLifecycle:
    """Applied -> Screening -> Interview -> Offer -> Hired, with Rejected and Withdrawn exits"""

    @pytest.fixture
    def application(self):
        return JobApplication.create(job_id=uuid4(), candidate_id=uuid4(), cover_letter="  Hello  ")

    def test_starts_applied(self, application):
        assert application.status == ApplicationStatus.APPLIED
        assert application.cover_letter == "Hello"

    def test_moves_forward_only(self, application):
        screening = application.update_status(ApplicationStatus.SCREENING).value
        assert screening.status == ApplicationStatus.SCREENING

        back = screening.update_status(ApplicationStatus.APPLIED)
        assert back.error.kind == ErrorKind.INVALID_TRANSITION

    def test_can_skip_ahead(self, application):
        offer = application.update_status(ApplicationStatus.OFFER).value
        assert offer.status == ApplicationStatus.OFFER

    def test_rejection_keeps_reason(self, application):
        rejected = application.update_status(
            ApplicationStatus.REJECTED, notes="Not enough CMDB work", rejection_reason="Position filled"
        ).value
        assert rejected.rejection_reason == "Position filled"
        assert rejected.employer_notes == "Not enough CMDB work"
        assert rejected.is_terminal()

    def test_terminal_applications_do_not_move(self, application):
        hired = application.update_status(ApplicationStatus.HIRED).value
        assert hired.update_status(ApplicationStatus.REJECTED).error.kind == ErrorKind.INVALID_TRANSITION

    def test_withdraw_by_candidate(self, application):
        withdrawn = application.withdraw(application.candidate_id).value
        assert withdrawn.status == ApplicationStatus.WITHDRAWN

    def test_withdraw_by_someone_else_is_denied(self, application):
        result = application.withdraw(uuid4())
        assert result.error.kind == ErrorKind.ACCESS_DENIED

    def test_withdraw_twice_is_invalid(self, application):
        withdrawn = application.withdraw(application.candidate_id).value
        result = withdrawn.withdraw(application.candidate_id)
        assert result.error.kind == ErrorKind.INVALID_TRANSITION


class TestUserAccount:

    @pytest.fixture
    def user(self):
        return UserAccount.create(
            email="Jane.Doe@Example.com",
            password_hash="hash",
            first_name="Jane",
            last_name="Doe",
            roles=[UserRole.CANDIDATE],
        )

    def test_email_is_normalised(self, user):
        assert user.email == "jane.doe@example.com"

    def test_lockout_after_threshold(self, user):
        now = utc_now()
        for _ in range(5):
            user = user.record_failed_login(now, max_attempts=5, minutes_per_attempt=5, max_minutes=60)
        assert user.failed_login_attempts == 5
        assert user.is_locked_out(now)
        assert user.locked_out_until == now + timedelta(minutes=25)

    def test_lockout_is_capped(self, user):
        now = utc_now()
        for _ in range(20):
            user = user.record_failed_login(now)
        assert user.locked_out_until == now + timedelta(minutes=60)

    def test_successful_login_resets_counter(self, user):
        user = user.record_failed_login().record_successful_login()
        assert user.failed_login_attempts == 0
        assert user.locked_out_until is None

    def test_refresh_rotation_revokes_old_token(self, user):
        now = utc_now()
        user = user.issue_refresh_token("old", now + timedelta(days=30), now)
        rotated = user.rotate_refresh_token("old", "new", now + timedelta(days=30), now).value

        assert not rotated.find_refresh_token("old").is_active(now)
        assert rotated.find_refresh_token("old").replaced_by_hash == "new"
        assert rotated.find_refresh_token("new").is_active(now)

        again = rotated.rotate_refresh_token("old", "newer", now + timedelta(days=30), now)
        assert again.error.kind == ErrorKind.UNAUTHENTICATED

    def test_suspend_self_is_not_allowed(self, user):
        result = user.suspend("spam", actor_id=user.id)
        assert not result.is_ok

    def test_suspend_revokes_every_active_refresh_token(self, user):
        now = utc_now()
        user = user.issue_refresh_token("a", now + timedelta(days=1), now).issue_refresh_token(
            "b", now + timedelta(days=1), now
        )
        suspended = user.suspend("spam", actor_id=uuid4(), now=now).value

        assert suspended.status == AccountStatus.SUSPENDED
        assert suspended.active_refresh_tokens(now) == ()
        assert all(t.revoked_at == now for t in suspended.refresh_tokens)

    def test_reinstate_only_from_suspended_or_deleted(self, user):
        admin_id = uuid4()
        result = user.reinstate()
        assert result.error.kind == ErrorKind.INVALID_TRANSITION
        assert result.error.transition == ("Active", "Active")

        for moderated in (user.suspend("spam", admin_id).value, user.soft_delete(admin_id).value):
            reinstated = moderated.reinstate().value
            assert reinstated.status == AccountStatus.ACTIVE
            assert reinstated.deleted_at is None
            assert reinstated.suspension_reason is None

    def test_soft_delete_refuses_self_and_repeat(self, user):
        own = user.soft_delete(actor_id=user.id)
        assert own.error.kind == ErrorKind.DOMAIN_RULE

        deleted = user.soft_delete(actor_id=uuid4()).value
        again = deleted.soft_delete(actor_id=uuid4())
        assert again.error.kind == ErrorKind.INVALID_TRANSITION

    def test_set_roles_replaces_and_stamps(self, user):
        later = utc_now() + timedelta(minutes=1)
        updated = user.set_roles([UserRole.EMPLOYER, UserRole.EMPLOYER], actor_id=uuid4(), now=later).value
        assert updated.roles == (UserRole.EMPLOYER,)
        assert updated.updated_at == later

    def test_set_roles_rules(self, user):
        assert user.set_roles([UserRole.EMPLOYER], actor_id=user.id).error.code == "user.self_role_change"
        assert user.set_roles([], actor_id=uuid4()).error.kind == ErrorKind.DOMAIN_RULE
        assert user.set_roles([UserRole.SUPER_ADMIN], actor_id=uuid4()).error.code == "user.super_admin_assignment"

        super_admin = UserAccount.create(
            email="root@example.com", password_hash="x", first_name="Root", last_name="Admin",
            roles=[UserRole.SUPER_ADMIN],
        )
        locked = super_admin.set_roles([UserRole.CANDIDATE], actor_id=uuid4())
        assert locked.error.code == "user.super_admin_roles"


class TestEmbeddingRecord:

    def test_full_cycle(self):
        record = EmbeddingRecord.create(uuid4(), DocumentType.JOB)
        assert record.status == EmbeddingStatus.PENDING

        processing = record.start_processing().value
        indexed = processing.set_indexed((0.1, 0.2), ("ITSM",)).value
        assert indexed.is_indexed
        assert indexed.last_indexed_at is not None

        requeued = indexed.request().value
        assert requeued.status == EmbeddingStatus.PENDING

    def test_failure_counts_retries(self):
        record = EmbeddingRecord.create(uuid4(), DocumentType.CANDIDATE_PROFILE)
        failed = record.start_processing().value.set_failed("model unavailable").value
        assert failed.status == EmbeddingStatus.FAILED
        assert failed.retry_count == 1
        assert failed.error_message == "model unavailable"

    def test_cannot_index_without_processing(self):
        record = EmbeddingRecord.create(uuid4(), DocumentType.JOB)
        assert record.set_indexed((1.0,)).error.kind == ErrorKind.INVALID_TRANSITION


class TestMatchScore:

    @pytest.mark.parametrize("similarity,percent", [(0.873, 87), (-0.4, 0), (1.2, 100)])
    def test_from_similarity_clamps(self, similarity, percent):
        assert MatchScore.from_similarity(similarity).percent == percent


class TestRejectedTransitions:
    """A refused move hands back an error and leaves the entity as it was"""

    def test_job(self):
        closed = make_job().close().value
        result = closed.publish()

        assert not result.is_ok
        assert result.value is None
        assert result.error.transition == ("Closed", "Active")
        assert closed.status == JobStatus.CLOSED

    def test_job_keeps_status_changed_at(self):
        draft = make_job(publish=False)
        before = (draft.status, draft.status_changed_at, draft.updated_at)
        assert draft.pause().error.kind == ErrorKind.INVALID_TRANSITION
        assert (draft.status, draft.status_changed_at, draft.updated_at) == before

    def test_application(self):
        hired = JobApplication.create(job_id=uuid4(), candidate_id=uuid4()).update_status(
            ApplicationStatus.HIRED
        ).value
        before = (hired.status, hired.status_changed_at)
        result = hired.update_status(ApplicationStatus.SCREENING)

        assert result.error.transition == ("Hired", "Screening")
        assert (hired.status, hired.status_changed_at) == before


class TestCvParseResult:

    @pytest.fixture
    def pending(self):
        return CvParseResult.create(
            user_id=uuid4(),
            blob_path="cvs/me.pdf",
            original_file_name="me.pdf",
            content_type="application/pdf",
            file_size_bytes=1024,
        )

    def test_mark_applied_requires_completed(self, pending):
        for result in (pending, pending.start_processing().value):
            applied = result.mark_applied()
            assert applied.error.kind == ErrorKind.INVALID_TRANSITION
            assert not result.is_applied

        failed = pending.start_processing().value.fail("unreadable").value
        assert failed.mark_applied().error.kind == ErrorKind.INVALID_TRANSITION

    def test_mark_applied_once(self, pending):
        completed = pending.start_processing().value.complete(ParsedCv(first_name="Jane")).value
        applied = completed.mark_applied().value

        assert applied.status == ParseStatus.COMPLETED
        assert applied.is_applied
        assert applied.applied_at is not None
        assert applied.mark_applied().error.kind == ErrorKind.CONFLICT


class TestEnhancementResult:

    @pytest.fixture
    def processing(self):
        return EnhancementResult.create(
            job_id=uuid4(), requested_by=uuid4(), title="Dev", description="Write code on the platform."
        )

    def test_accept_requires_completed(self, processing):
        assert processing.accept().error.kind == ErrorKind.INVALID_TRANSITION
        failed = processing.fail("timeout").value
        assert failed.status == EnhancementStatus.FAILED
        assert failed.accept().error.kind == ErrorKind.INVALID_TRANSITION

    def test_accept_only_once(self, processing):
        completed = processing.complete(EnhancementOutput(enhanced_title="ServiceNow Developer")).value
        accepted = completed.accept().value

        assert accepted.is_accepted
        assert accepted.accepted_at is not None
        assert accepted.accept().error.code == "enhancement.already_accepted"


class TestNotification:

    @pytest.fixture
    def notification(self):
        return Notification.create(
            user_id=uuid4(), type=NotificationType.SYSTEM_ALERT, title="Welcome", message="Hello"
        )

    def test_mark_as_read_is_idempotent(self, notification):
        first_read = utc_now()
        read = notification.mark_as_read(notification.user_id, first_read).value
        again = read.mark_as_read(notification.user_id, first_read + timedelta(hours=1)).value

        assert again.is_read
        assert again.read_at == first_read
        assert again.updated_at == first_read

    def test_only_the_owner_can_mark_read(self, notification):
        result = notification.mark_as_read(uuid4())
        assert result.error.kind == ErrorKind.ACCESS_DENIED
        assert not notification.is_read

"""
Tests for the SQLAlchemy repositories
Run against in-memory SQLite through the real unit of work
"""
from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from application.repositories.interfaces import (
    ApplicationSearchFilters,
    JobSearchFilters,
    NotificationSearchFilters,
)
from application.services.auth.tokens import digest
from core.clock import utc_now
from core.exceptions import DuplicateResourceException, ResourceNotFoundException
from domain.entities import EmbeddingRecord, JobApplication, Notification, UserAccount
from domain.enums import DocumentType, NotificationType, UserRole, WorkMode
from domain.value_objects import JobStatus
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository
from infrastructure.persistence.repositories.embedding import SQLAlchemyEmbeddingRepository
from infrastructure.persistence.repositories.job import SQLAlchemyJobRepository
from infrastructure.persistence.repositories.notification import SQLAlchemyNotificationRepository
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository

from conftest import make_job


def _user(email: str, role: UserRole = UserRole.CANDIDATE) -> UserAccount:
    return UserAccount.create(
        email=email, password_hash="x", first_name="Test", last_name="User", roles=[role]
    )


class TestUserRepository:

    @pytest.mark.asyncio
    async def test_add_and_find_by_email(self, uow_factory):
        repo = SQLAlchemyUserRepository()
        user = _user("Find.Me@example.com")
        async with uow_factory() as uow:
            await repo.add(uow, user)
            await uow.commit()

        async with uow_factory() as uow:
            found = await repo.get_by_email(uow, "find.me@example.com")
            assert found.id == user.id
            assert await repo.exists_by_email(uow, "find.me@example.com")
            assert not await repo.exists_by_email(uow, "other@example.com")

    @pytest.mark.asyncio
    async def test_duplicate_email(self, uow_factory):
        repo = SQLAlchemyUserRepository()
        async with uow_factory() as uow:
            await repo.add(uow, _user("dup@example.com"))
            await uow.commit()

        async with uow_factory() as uow:
            with pytest.raises(DuplicateResourceException):
                await repo.add(uow, _user("dup@example.com"))

    @pytest.mark.asyncio
    async def test_refresh_tokens_round_trip(self, uow_factory):
        repo = SQLAlchemyUserRepository()
        now = utc_now()
        user = _user("tokens@example.com").issue_refresh_token(digest("t1"), now + timedelta(days=1), now)
        async with uow_factory() as uow:
            await repo.add(uow, user)
            await uow.commit()

        async with uow_factory() as uow:
            found = await repo.get_by_refresh_token(uow, digest("t1"))
            rotated = found.rotate_refresh_token(digest("t1"), digest("t2"), now + timedelta(days=1), now).value
            await repo.save(uow, rotated)
            await uow.commit()

        async with uow_factory() as uow:
            found = await repo.get_by_refresh_token(uow, digest("t2"))
            assert len(found.refresh_tokens) == 2
            assert not found.find_refresh_token(digest("t1")).is_active()


class TestJobRepository:

    @pytest.mark.asyncio
    async def test_pagination_counts_before_slicing(self, uow_factory):
        repo = SQLAlchemyJobRepository()
        employer_id = uuid4()
        start = utc_now()
        async with uow_factory() as uow:
            for i in range(25):
                await repo.add(uow, make_job(employer_id=employer_id, title=f"Job {i}", now=start + timedelta(seconds=i)))
            await uow.commit()

        async with uow_factory() as uow:
            items, total = await repo.search(uow, JobSearchFilters(employer_id=employer_id), 2, 10)

        assert total == 25
        assert len(items) == 10
        # Newest first: page two starts at the 11th newest
        assert items[0].title == "Job 14"

    @pytest.mark.asyncio
    async def test_search_filters(self, uow_factory):
        repo = SQLAlchemyJobRepository()
        now = utc_now()
        remote = make_job(title="Remote ITSM", salary_min=Decimal("80000"), salary_max=Decimal("100000"))
        onsite = make_job(title="Onsite HRSD", work_mode=WorkMode.ON_SITE)
        hidden = make_job(title="Hidden salary ITSM", salary_min=Decimal("150000"), is_salary_visible=False)
        expired = make_job(title="Expired ITSM", expires_at=now - timedelta(days=1))
        draft = make_job(title="Draft ITSM", publish=False)
        async with uow_factory() as uow:
            for job in (remote, onsite, hidden, expired, draft):
                await repo.add(uow, job)
            await uow.commit()

        active = dict(statuses=(JobStatus.ACTIVE,), active_at=now)
        async with uow_factory() as uow:
            items, total = await repo.search(uow, JobSearchFilters(keyword="itsm", **active), 1, 20)
            assert {j.title for j in items} == {"Remote ITSM", "Hidden salary ITSM"}

            items, _ = await repo.search(uow, JobSearchFilters(work_mode=WorkMode.ON_SITE, **active), 1, 20)
            assert [j.title for j in items] == ["Onsite HRSD"]

            items, _ = await repo.search(uow, JobSearchFilters(salary_min=Decimal("90000"), **active), 1, 20)
            assert [j.title for j in items] == ["Remote ITSM"]

    @pytest.mark.asyncio
    async def test_save_persists_changes(self, uow_factory):
        repo = SQLAlchemyJobRepository()
        job = make_job(skills_required=("ITSM", "CMDB"))
        async with uow_factory() as uow:
            await repo.add(uow, job)
            await repo.save(uow, job.record_view().pause().value)
            await uow.commit()

        async with uow_factory() as uow:
            stored = await repo.get_by_id(uow, job.id)
        assert stored.status == JobStatus.PAUSED
        assert stored.view_count == 1
        assert stored.skills_required == ("ITSM", "CMDB")

    @pytest.mark.asyncio
    async def test_save_never_creates_a_missing_row(self, uow_factory):
        repo = SQLAlchemyJobRepository()
        job = make_job()
        async with uow_factory() as uow:
            with pytest.raises(ResourceNotFoundException) as exc_info:
                await repo.save(uow, job)
            await uow.rollback()

        assert exc_info.value.resource_type == "Job"
        assert exc_info.value.identifier == str(job.id)
        async with uow_factory() as uow:
            assert await repo.get_by_id(uow, job.id) is None


class TestApplicationRepository:

    @pytest.mark.asyncio
    async def test_one_application_per_candidate_and_job(self, uow_factory):
        repo = SQLAlchemyApplicationRepository()
        job_id, candidate_id = uuid4(), uuid4()
        async with uow_factory() as uow:
            await repo.add(uow, JobApplication.create(job_id=job_id, candidate_id=candidate_id))
            await uow.commit()

        async with uow_factory() as uow:
            assert await repo.exists(uow, job_id, candidate_id)
            with pytest.raises(DuplicateResourceException):
                await repo.add(uow, JobApplication.create(job_id=job_id, candidate_id=candidate_id))

    @pytest.mark.asyncio
    async def test_count_since_and_search(self, uow_factory):
        repo = SQLAlchemyApplicationRepository()
        candidate_id = uuid4()
        now = utc_now()
        async with uow_factory() as uow:
            await repo.add(uow, JobApplication.create(uuid4(), candidate_id, now=now - timedelta(days=40)))
            await repo.add(uow, JobApplication.create(uuid4(), candidate_id, now=now))
            await repo.add(uow, JobApplication.create(uuid4(), uuid4(), now=now))
            await uow.commit()

        async with uow_factory() as uow:
            assert await repo.count_since(uow, candidate_id, now - timedelta(days=1)) == 1
            items, total = await repo.search(uow, ApplicationSearchFilters(candidate_id=candidate_id), 1, 20)
        assert total == 2
        assert all(a.candidate_id == candidate_id for a in items)


class TestNotificationRepository:

    @pytest.mark.asyncio
    async def test_unread_count_and_mark_all(self, uow_factory):
        repo = SQLAlchemyNotificationRepository()
        user_id = uuid4()
        async with uow_factory() as uow:
            for i in range(3):
                await repo.add(uow, Notification.create(
                    user_id=user_id, type=NotificationType.SYSTEM_ALERT, title=f"Alert {i}", message="Hello"
                ))
            await uow.commit()

        async with uow_factory() as uow:
            assert await repo.count_unread(uow, user_id) == 3
            assert await repo.mark_all_as_read(uow, user_id, utc_now()) == 3
            await uow.commit()

        async with uow_factory() as uow:
            assert await repo.count_unread(uow, user_id) == 0
            items, total = await repo.search(uow, NotificationSearchFilters(user_id=user_id, unread_only=True), 1, 20)
        assert total == 0


class TestEmbeddingRepository:

    @pytest.mark.asyncio
    async def test_only_indexed_vectors_are_listed(self, uow_factory):
        repo = SQLAlchemyEmbeddingRepository()
        indexed = EmbeddingRecord.create(uuid4(), DocumentType.JOB).start_processing().value
        indexed = indexed.set_indexed((0.6, 0.8), ("ITSM",)).value
        pending = EmbeddingRecord.create(uuid4(), DocumentType.JOB)
        async with uow_factory() as uow:
            await repo.add(uow, indexed)
            await repo.add(uow, pending)
            await uow.commit()

        async with uow_factory() as uow:
            listed = await repo.list_indexed(uow, DocumentType.JOB)
            found = await repo.get_by_document(uow, pending.document_id, DocumentType.JOB)
        assert [r.document_id for r in listed] == [indexed.document_id]
        assert listed[0].vector == (0.6, 0.8)
        assert found.id == pending.id
